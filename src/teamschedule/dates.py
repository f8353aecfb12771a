"""Resolve year-less "MM-DD" dates against an academic year label.

Every date is placed in the calendar year the academic year starts in, so
"2024-2025" with "03-10" resolves to 2024-03-10, not 2025-03-10. Spring-term
dates of a year that spans New Year are therefore misplaced; this mirrors the
behaviour users already rely on and is kept until the intended rule is agreed.
"""

import re
from datetime import date

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def base_year(academic_year: str | None) -> int | None:
    """Leading year of an academic year label ("2024-2025" -> 2024).

    Returns:
        The year, or None when the part before the first "-" does not start
        with digits.
    """
    if not academic_year:
        return None
    match = _LEADING_DIGITS.match(academic_year.split("-", 1)[0])
    if match is None:
        return None
    return int(match.group(1))


def parse_month_day(month_day: str | None) -> tuple[int, int] | None:
    """Split "MM-DD" into (month, day), or None if it is not two integers."""
    if not month_day:
        return None
    parts = month_day.split("-")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def resolve_date(academic_year: str | None, month_day: str | None) -> date | None:
    """Turn an academic year and a "MM-DD" string into an absolute date.

    Args:
        academic_year: Label such as "2024-2025".
        month_day: Day label such as "09-02".

    Returns:
        The resolved date, or None when either part is unparseable or the
        month/day does not exist in the base year (e.g. "02-30").
    """
    year = base_year(academic_year)
    if year is None:
        return None
    parsed = parse_month_day(month_day)
    if parsed is None:
        return None
    month, day = parsed
    try:
        return date(year, month, day)
    except ValueError:
        return None
