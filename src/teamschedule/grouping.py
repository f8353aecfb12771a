"""Group the occurrences of one grid cell into shared class sessions.

Several students attending the same course with the same teacher in the same
room, in one (date, period) cell, are shown as a single card listing all of
them instead of one card per student.
"""

from collections.abc import Iterable

from src.teamschedule.conflicts import slot_key
from src.teamschedule.models import ClassOccurrence, OccurrenceGroup

# Known period labels, in the order they happen during a day.
CANONICAL_PERIODS: tuple[str, ...] = (
    "第一大节",
    "第二大节",
    "第三大节",
    "第四大节",
    "第五大节",
)

_CANONICAL_INDEX = {label: i for i, label in enumerate(CANONICAL_PERIODS)}


def group_occurrences(
    occurrences: Iterable[ClassOccurrence],
    conflicts: frozenset[str] = frozenset(),
) -> list[OccurrenceGroup]:
    """Merge occurrences that share (course_name, teacher, location).

    Pass only the occurrences of one (date, period) cell. Groups and the
    students inside them keep first-seen order.

    Args:
        occurrences: Occurrences of a single cell.
        conflicts: Slot keys from detect_conflicts(); students whose slot is
            in the set are recorded on the group.

    Returns:
        One OccurrenceGroup per distinct session.
    """
    students: dict[tuple[str, str, str | None], list[str]] = {}
    flagged: dict[tuple[str, str, str | None], set[str]] = {}

    for occ in occurrences:
        key = (occ.course_name, occ.teacher, occ.location)
        students.setdefault(key, []).append(occ.student_name)
        if conflicts and slot_key(occ.student_name, occ.date, occ.period) in conflicts:
            flagged.setdefault(key, set()).add(occ.student_name)

    return [
        OccurrenceGroup(
            course_name=course_name,
            teacher=teacher,
            location=location,
            students=tuple(names),
            conflicted_students=frozenset(
                flagged.get((course_name, teacher, location), ())
            ),
        )
        for (course_name, teacher, location), names in students.items()
    ]


def order_periods(labels: Iterable[str]) -> list[str]:
    """Distinct period labels in display order.

    Canonical labels come first in canonical order; any other label follows,
    sorted lexicographically. With no labels at all the canonical sequence is
    returned so an empty grid still has rows.
    """
    unique = set(labels)
    if not unique:
        return list(CANONICAL_PERIODS)

    known = sorted(
        (p for p in unique if p in _CANONICAL_INDEX),
        key=_CANONICAL_INDEX.__getitem__,
    )
    unknown = sorted(p for p in unique if p not in _CANONICAL_INDEX)
    return known + unknown
