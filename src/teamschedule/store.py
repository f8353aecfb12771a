"""ScheduleStore - the single owner of the admitted schedule collection.

All changes go through add() and remove(). Both return an OperationResult
instead of raising for bad input or missing rights, and both persist the full
collection once per completed change. Readers take an immutable snapshot via
all() and derive everything else from it (see views.TeamView).
"""

import json
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from pydantic import ValidationError

from src.teamschedule.conflicts import find_self_conflicts, format_conflicts
from src.teamschedule.errors import (
    MalformedInputError,
    MissingStudentNameError,
    PermissionDeniedError,
    ScheduleError,
    StorageError,
    UnauthenticatedError,
    UserCancelledError,
)
from src.teamschedule.logging import get_logger
from src.teamschedule.models import (
    Conflict,
    CurrentUser,
    OperationResult,
    Schedule,
    TeamMember,
)
from src.teamschedule.storage import KeyValueStorage

log = get_logger(__name__)

DEFAULT_STORAGE_KEY = "universitySchedules"

# Upload documents may name these fields either way.
_WEEKS_KEYS = ("schedule", "weeks")
_NAME_KEYS = ("student_name", "studentName")

ConfirmCallback = Callable[[list[Conflict]], bool]


def parse_document(
    document: str | bytes | Mapping[str, Any], student_name_override: str = ""
) -> Schedule:
    """Validate an uploaded document and settle the student name.

    Args:
        document: JSON text or an already decoded object.
        student_name_override: Name typed by the uploader; wins over the
            document's own student_name when non-blank.

    Returns:
        Schedule without an owner stamp.

    Raises:
        MalformedInputError: Bad JSON, not an object, or no weeks array.
        MissingStudentNameError: No name from either source.
    """
    if isinstance(document, (str, bytes)):
        try:
            data = json.loads(document)
        except ValueError as e:
            raise MalformedInputError(f"Invalid JSON: {e}") from e
    else:
        data = document

    if not isinstance(data, Mapping):
        raise MalformedInputError("Invalid document: expected a JSON object.")

    weeks = next((data[k] for k in _WEEKS_KEYS if k in data), None)
    if not isinstance(weeks, list):
        raise MalformedInputError(
            'Invalid document: missing or invalid "schedule" array.'
        )

    name = (student_name_override or "").strip()
    if not name:
        for key in _NAME_KEYS:
            name = str(data.get(key) or "").strip()
            if name:
                break
    if not name:
        raise MissingStudentNameError(
            "Missing student name. Provide it in the form or in the document."
        )

    try:
        schedule = Schedule.model_validate(data)
    except ValidationError as e:
        raise MalformedInputError(
            f"Invalid document: {e.error_count()} invalid field(s), first at "
            f"{'.'.join(str(p) for p in e.errors()[0]['loc'])}"
        ) from e

    return schedule.model_copy(update={"student_name": name, "uploaded_by": ""})


class ScheduleStore:
    """Admitted schedules, one per student name, in insertion order.

    Loaded once from storage at construction and written back wholesale after
    every completed mutation.
    """

    def __init__(
        self, storage: KeyValueStorage, *, key: str = DEFAULT_STORAGE_KEY
    ) -> None:
        self.storage = storage
        self.key = key
        self._schedules: tuple[Schedule, ...] = self._load()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def all(self) -> tuple[Schedule, ...]:
        """Immutable snapshot of the collection in insertion order."""
        return self._schedules

    def get(self, student_name: str) -> Schedule | None:
        for schedule in self._schedules:
            if schedule.student_name == student_name:
                return schedule
        return None

    def __len__(self) -> int:
        return len(self._schedules)

    def __contains__(self, student_name: object) -> bool:
        return any(s.student_name == student_name for s in self._schedules)

    def members(self) -> list[TeamMember]:
        """Roster of students and their uploaders, sorted by student name."""
        members = [
            TeamMember(name=s.student_name, uploaded_by=s.uploaded_by)
            for s in self._schedules
        ]
        return sorted(members, key=lambda m: m.name)

    def can_remove(self, actor: CurrentUser | None, student_name: str) -> bool:
        """Whether actor may delete the schedule (admin or its uploader)."""
        if actor is None:
            return False
        if actor.is_admin:
            return True
        schedule = self.get(student_name)
        return schedule is not None and schedule.uploaded_by == actor.username

    def export(self) -> list[dict]:
        """All schedules in upload format, without the uploadedBy field."""
        return [s.to_document(include_owner=False) for s in self._schedules]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add(
        self,
        document: str | bytes | Mapping[str, Any],
        student_name_override: str = "",
        *,
        actor: CurrentUser | None,
        confirm: ConfirmCallback | None = None,
    ) -> OperationResult:
        """Admit a schedule, replacing any existing one for the same student.

        Args:
            document: Uploaded JSON text or decoded object.
            student_name_override: Optional name that wins over the document's.
            actor: Logged-in user; stamped as the schedule's uploader.
            confirm: Asked with the self-conflicts, if any. Returning False,
                or passing no callback, cancels the upload.

        Returns:
            OperationResult; on failure the collection is unchanged.
        """
        try:
            schedule = self._admit(document, student_name_override, actor, confirm)
        except ScheduleError as e:
            log.info("schedule_add_rejected", reason=type(e).__name__, error=str(e))
            return OperationResult.failed(str(e))

        replaced = schedule.student_name in self
        saved = self._commit(
            tuple(s for s in self._schedules if s.student_name != schedule.student_name)
            + (schedule,)
        )
        log.info(
            "schedule_added",
            student=schedule.student_name,
            uploaded_by=schedule.uploaded_by,
            weeks=len(schedule.weeks),
            replaced=replaced,
            saved=saved,
        )
        return OperationResult.ok(
            f"Added schedule for {schedule.student_name}.",
            student_name=schedule.student_name,
            saved=saved,
        )

    def remove(
        self, student_name: str, *, actor: CurrentUser | None
    ) -> OperationResult:
        """Delete a student's schedule.

        Only an admin or the user who uploaded it may do so. Removing a name
        that is not stored succeeds without touching storage.
        """
        try:
            if actor is None:
                raise UnauthenticatedError("Please log in first.")
            schedule = self.get(student_name)
            if schedule is None:
                log.debug(
                    "schedule_remove_skipped", student=student_name, reason="not_found"
                )
                return OperationResult.ok(f"No schedule for {student_name}.")
            if not self.can_remove(actor, student_name):
                raise PermissionDeniedError(
                    "Permission denied. You can only remove schedules you uploaded."
                )
        except ScheduleError as e:
            log.warning(
                "schedule_remove_denied",
                student=student_name,
                actor=actor.username if actor else None,
                reason=type(e).__name__,
            )
            return OperationResult.failed(str(e))

        saved = self._commit(
            tuple(s for s in self._schedules if s.student_name != student_name)
        )
        log.info(
            "schedule_removed", student=student_name, actor=actor.username, saved=saved
        )
        return OperationResult.ok(
            f"Removed schedule for {student_name}.", student_name, saved=saved
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _admit(
        self,
        document: str | bytes | Mapping[str, Any],
        student_name_override: str,
        actor: CurrentUser | None,
        confirm: ConfirmCallback | None,
    ) -> Schedule:
        if actor is None:
            raise UnauthenticatedError("Please log in before adding a schedule.")

        schedule = parse_document(document, student_name_override)
        schedule = schedule.model_copy(update={"uploaded_by": actor.username})

        conflicts = find_self_conflicts(schedule)
        if conflicts:
            log.warning(
                "schedule_self_conflicts",
                student=schedule.student_name,
                conflicts=len(conflicts),
            )
            if confirm is None or not confirm(conflicts):
                raise UserCancelledError(
                    "Upload cancelled because of conflicts within the schedule:\n"
                    + format_conflicts(conflicts),
                    conflicts,
                )
        return schedule

    def _commit(self, schedules: tuple[Schedule, ...]) -> bool:
        """Apply the new collection and write it. Returns whether it was saved."""
        self._schedules = schedules
        try:
            self.storage.save(self.key, [s.to_document() for s in schedules])
        except StorageError as e:
            # The in-memory change stands; the next successful write catches up.
            log.error("schedules_save_failed", key=self.key, error=str(e))
            return False
        return True

    def _load(self) -> tuple[Schedule, ...]:
        try:
            raw = self.storage.load(self.key)
        except StorageError as e:
            log.error("schedules_load_failed", key=self.key, error=str(e))
            return ()
        if raw is None:
            return ()
        try:
            if not isinstance(raw, list):
                raise TypeError(f"expected a list, got {type(raw).__name__}")
            schedules = tuple(Schedule.model_validate(item) for item in raw)
        except (TypeError, ValidationError) as e:
            log.error("schedules_load_failed", key=self.key, error=str(e))
            return ()
        log.info("schedules_loaded", key=self.key, count=len(schedules))
        return schedules


def export_filename(today: date | None = None) -> str:
    """Download name for an export, e.g. team_schedule_2024-09-02.json."""
    today = today or date.today()
    return f"team_schedule_{today.isoformat()}.json"
