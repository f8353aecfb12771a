"""Conflict detection for schedules.

Two passes exist:

* find_self_conflicts() checks one uploaded schedule before it is admitted
  and reports each clash against the first class seen in the slot.
* detect_conflicts() recomputes, over every admitted occurrence, which
  (student, date, period) slots are double-booked. Its keys are what the
  views use to highlight students.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import date

from src.teamschedule.dates import base_year, resolve_date
from src.teamschedule.models import ClassOccurrence, Conflict, Schedule


def slot_key(student_name: str, day: date, period: str) -> str:
    """Key of a bookable slot: "<student>-<YYYY-MM-DD>-<period>"."""
    return f"{student_name}-{day.isoformat()}-{period}"


def find_self_conflicts(schedule: Schedule) -> list[Conflict]:
    """Find classes within one schedule that share a date and period.

    A three-way clash yields two conflicts, both naming the first occupant.

    Returns:
        Conflicts in document order. Empty when the academic year cannot be
        resolved, since no real dates exist to compare.
    """
    if not schedule.weeks or base_year(schedule.academic_year) is None:
        return []

    occupied: dict[tuple[str, str], str] = {}
    conflicts: list[Conflict] = []

    for week in schedule.weeks:
        for day in week.days:
            resolved = resolve_date(schedule.academic_year, day.date)
            if resolved is None:
                continue
            iso_date = resolved.isoformat()
            for info in day.classes:
                key = (iso_date, info.period)
                first = occupied.get(key)
                if first is None:
                    occupied[key] = info.course_name
                    continue
                conflicts.append(
                    Conflict(
                        date=day.date,
                        period=info.period,
                        course_a=first,
                        course_b=info.course_name,
                    )
                )

    return conflicts


def format_conflicts(conflicts: Iterable[Conflict]) -> str:
    """Render conflicts as the bullet list shown in the confirmation prompt."""
    return "\n".join(
        f' - {c.date} {c.period}: "{c.course_a}" vs "{c.course_b}"'
        for c in conflicts
    )


def detect_conflicts(occurrences: Iterable[ClassOccurrence]) -> frozenset[str]:
    """Slot keys booked more than once across all occurrences.

    Conflicts are per student: two students in the same period on the same
    day do not clash. Student names are compared literally.
    """
    counts = Counter(
        slot_key(occ.student_name, occ.date, occ.period) for occ in occurrences
    )
    return frozenset(key for key, count in counts.items() if count > 1)


def is_student_in_conflict(
    conflicts: frozenset[str], student_name: str, day: date, period: str
) -> bool:
    return slot_key(student_name, day, period) in conflicts
