from collections.abc import Callable

import pytest
import structlog

from src.teamschedule.models import CurrentUser, Role, Schedule
from src.teamschedule.storage import MemoryStorage


def _class(
    period: str, course: str, teacher: str = "王老师", location: str | None = "A101"
) -> dict:
    return {
        "period": period,
        "course_name": course,
        "type": "理论",
        "teacher": teacher,
        "location": location,
    }


@pytest.fixture(autouse=True)
def log_output():
    """Route structlog events into a list instead of stdout."""
    with structlog.testing.capture_logs() as logs:
        yield logs


@pytest.fixture
def make_class() -> Callable[..., dict]:
    return _class


@pytest.fixture
def make_document() -> Callable[..., dict]:
    """Build an upload document: days maps "MM-DD" to a list of class dicts."""

    def _make(
        student: str | None = "张三",
        academic_year: str | None = "2024-2025",
        days: dict[str, list[dict]] | None = None,
    ) -> dict:
        if days is None:
            days = {"09-02": [_class("第一大节", "高等数学")]}
        document: dict = {
            "academic_year": academic_year,
            "schedule": [
                {
                    "week_number": 1,
                    "dates": "09-02 - 09-08",
                    "days": [
                        {"date": date, "day_of_week": "星期一", "classes": classes}
                        for date, classes in days.items()
                    ],
                }
            ],
        }
        if student is not None:
            document["student_name"] = student
        return document

    return _make


@pytest.fixture
def make_schedule(make_document) -> Callable[..., Schedule]:
    def _make(uploaded_by: str = "alice", **kwargs) -> Schedule:
        data = make_document(**kwargs)
        data["uploadedBy"] = uploaded_by
        return Schedule.model_validate(data)

    return _make


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def alice() -> CurrentUser:
    return CurrentUser(username="alice", role=Role.USER)


@pytest.fixture
def bob() -> CurrentUser:
    return CurrentUser(username="bob", role=Role.USER)


@pytest.fixture
def admin() -> CurrentUser:
    return CurrentUser(username="admin", role=Role.ADMIN)
