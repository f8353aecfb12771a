"""Error hierarchy for schedule ingestion and removal.

The store raises these internally and converts them into a failed
OperationResult at the add/remove boundary, so callers never see them for
bad input. StorageError is the exception: it signals a broken backend.

Example:
    try:
        schedule = parse_document(raw, override)
    except InputError as e:
        return OperationResult.failed(str(e))
"""


class ScheduleError(Exception):
    """Base exception for all schedule errors."""

    pass


class InputError(ScheduleError):
    """The uploaded document cannot become a Schedule.

    Examples: invalid JSON, a missing weeks array, no student name.
    """

    pass


class MalformedInputError(InputError):
    """Document is structurally invalid (bad JSON, missing or non-array weeks)."""

    pass


class MissingStudentNameError(InputError):
    """Neither the override nor the document supplies a student name."""

    pass


class AccessError(ScheduleError):
    """The acting user may not perform the mutation."""

    pass


class UnauthenticatedError(AccessError):
    """No user is logged in."""

    pass


class PermissionDeniedError(AccessError):
    """Only the uploader or an admin may remove a schedule."""

    pass


class UserCancelledError(ScheduleError):
    """The user declined to admit a schedule with self-conflicts.

    Carries the conflicts that were shown so callers can report them.
    """

    def __init__(self, message: str, conflicts: list | None = None) -> None:
        super().__init__(message)
        self.conflicts = conflicts or []


class StorageError(ScheduleError):
    """Persistent storage could not be read or written after retries."""

    pass
