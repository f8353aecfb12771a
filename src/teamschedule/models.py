"""Pydantic models for schedule documents and the views derived from them.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Field names follow the uploaded JSON layout (snake_case, weeks under
``schedule``). The camelCase names used by other exporters (``studentName``,
``courseName``, ``weeks`` ...) are accepted on input; output always uses the
snake_case layout. Optional text fields take null as "" and numbers as text.
Admitted data is frozen: derived views are recomputed, never patched.
"""

from datetime import date as Date
from enum import Enum
from typing import Annotated

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

_DOCUMENT_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    extra="ignore",
    coerce_numbers_to_str=True,
)


def _none_to_empty(value):
    return "" if value is None else value


# Free text that uploads often leave null (teacher of a PE class, ...).
Text = Annotated[str, BeforeValidator(_none_to_empty)]


def _either(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class ClassInfo(BaseModel):
    """One class in a day of an uploaded schedule."""

    model_config = _DOCUMENT_CONFIG

    period: str  # Open vocabulary, e.g. "第一大节"
    course_name: str = Field(validation_alias=_either("course_name", "courseName"))
    type: Text = ""  # "理论", "实验", ...
    teacher: Text = ""
    location: str | None = None


class Day(BaseModel):
    model_config = _DOCUMENT_CONFIG

    date: str | None = None  # "MM-DD", no year
    day_of_week: Text = Field(
        default="",
        validation_alias=_either("day_of_week", "dayOfWeek", "dayOfWeekLabel"),
    )
    classes: tuple[ClassInfo, ...] = ()


class Week(BaseModel):
    model_config = _DOCUMENT_CONFIG

    week_number: int | None = Field(
        default=None, validation_alias=_either("week_number", "weekNumber")
    )
    # Display label, e.g. "09-02 - 09-08"
    dates: Text = Field(default="", validation_alias=_either("dates", "dateRangeLabel"))
    days: tuple[Day, ...] = ()


class Schedule(BaseModel):
    """A single student's schedule as admitted to the store.

    ``weeks`` is read from either ``schedule`` (the upload format) or
    ``weeks`` and always written back as ``schedule``.
    """

    model_config = _DOCUMENT_CONFIG

    student_name: Text = Field(
        default="", validation_alias=_either("student_name", "studentName")
    )
    academic_year: str | None = Field(  # "2024-2025"
        default=None, validation_alias=_either("academic_year", "academicYear")
    )
    weeks: tuple[Week, ...] = Field(
        default=(),
        validation_alias=_either("schedule", "weeks"),
        serialization_alias="schedule",
    )
    uploaded_by: Text = Field(
        default="",
        validation_alias=_either("uploadedBy", "uploaded_by"),
        serialization_alias="uploadedBy",
    )

    def to_document(self, *, include_owner: bool = True) -> dict:
        """Serialize in upload format, optionally without the uploadedBy field."""
        exclude = None if include_owner else {"uploaded_by"}
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class ClassOccurrence(BaseModel):
    """One (student, date, period, course) booking produced by the flattener."""

    model_config = ConfigDict(frozen=True)

    student_name: str
    date: Date
    day_of_week: str
    period: str
    course_name: str
    type: str
    teacher: str
    location: str | None = None


class Conflict(BaseModel):
    """Two classes of one uploaded schedule claiming the same date and period.

    ``date`` is the day's own "MM-DD" label; ``course_a`` is the first class
    seen in that slot.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    period: str
    course_a: str
    course_b: str


class OccurrenceGroup(BaseModel):
    """A class session shared by one or more students within one cell."""

    model_config = ConfigDict(frozen=True)

    course_name: str
    teacher: str
    location: str | None = None
    students: tuple[str, ...] = ()
    conflicted_students: frozenset[str] = frozenset()


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class CurrentUser(BaseModel):
    """Logged-in user as supplied by the authentication layer."""

    model_config = ConfigDict(frozen=True)

    username: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TeamMember(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    uploaded_by: str


class OperationResult(BaseModel):
    """Outcome of a store mutation, returned instead of raising.

    ``saved`` is False when the change was applied in memory but could not
    be written to storage.
    """

    success: bool
    message: str
    student_name: str | None = None
    saved: bool = True

    @classmethod
    def ok(
        cls, message: str, student_name: str | None = None, *, saved: bool = True
    ) -> "OperationResult":
        if not saved:
            message = f"{message} Not saved: storage unavailable."
        return cls(
            success=True, message=message, student_name=student_name, saved=saved
        )

    @classmethod
    def failed(cls, message: str) -> "OperationResult":
        return cls(success=False, message=message)
