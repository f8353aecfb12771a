"""Expand admitted schedules into flat, absolute-dated class occurrences."""

from collections.abc import Iterable, Iterator

from src.teamschedule.dates import resolve_date
from src.teamschedule.logging import get_logger
from src.teamschedule.models import ClassOccurrence, Schedule

log = get_logger(__name__)


def iter_occurrences(schedule: Schedule) -> Iterator[ClassOccurrence]:
    """Yield one occurrence per class of a single schedule.

    Days without a date, or whose date does not resolve against the
    schedule's academic year, are skipped silently.
    """
    if not schedule.academic_year or not schedule.weeks:
        return

    for week in schedule.weeks:
        for day in week.days:
            if not day.date:
                continue
            class_date = resolve_date(schedule.academic_year, day.date)
            if class_date is None:
                continue
            for info in day.classes:
                yield ClassOccurrence(
                    student_name=schedule.student_name,
                    date=class_date,
                    day_of_week=day.day_of_week,
                    period=info.period,
                    course_name=info.course_name,
                    type=info.type,
                    teacher=info.teacher,
                    location=info.location,
                )


def flatten(schedules: Iterable[Schedule]) -> list[ClassOccurrence]:
    """Flatten schedules in nesting order: schedule, week, day, class.

    The result is not sorted by date; callers that need temporal order
    must sort it themselves.
    """
    occurrences: list[ClassOccurrence] = []
    for schedule in schedules:
        occurrences.extend(iter_occurrences(schedule))
    log.debug("schedules_flattened", occurrences=len(occurrences))
    return occurrences
