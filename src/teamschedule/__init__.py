"""Team schedule engine.

Ingests per-student class schedules, resolves their year-less dates, merges
them into one collection and flags double-booked periods.
"""

from src.teamschedule.conflicts import detect_conflicts, find_self_conflicts
from src.teamschedule.dates import resolve_date
from src.teamschedule.flatten import flatten
from src.teamschedule.grouping import (
    CANONICAL_PERIODS,
    group_occurrences,
    order_periods,
)
from src.teamschedule.models import CurrentUser, Role, Schedule
from src.teamschedule.store import ScheduleStore
from src.teamschedule.views import TeamView

__all__ = [
    "ScheduleStore",
    "TeamView",
    "Schedule",
    "CurrentUser",
    "Role",
    "CANONICAL_PERIODS",
    "resolve_date",
    "flatten",
    "find_self_conflicts",
    "detect_conflicts",
    "group_occurrences",
    "order_periods",
]
