from datetime import date

import pytest

from src.teamschedule.dates import base_year, parse_month_day, resolve_date


def test_resolves_against_first_year_of_label() -> None:
    assert resolve_date("2024-2025", "09-02") == date(2024, 9, 2)


def test_spring_term_stays_in_base_year() -> None:
    # Known limitation: no rollover into the second calendar year.
    assert resolve_date("2024-2025", "03-10") == date(2024, 3, 10)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("2024-2025", 2024),
        ("2023", 2023),
        ("2024年-2025年", 2024),
        (" 2022-2023", 2022),
        ("学年-2024", None),
        ("", None),
        (None, None),
    ],
)
def test_base_year(label, expected) -> None:
    assert base_year(label) == expected


@pytest.mark.parametrize("month_day", ["", None, "0902", "09-xx", "09-02-01", "九月-二日"])
def test_unparseable_month_day_fails(month_day) -> None:
    assert parse_month_day(month_day) is None
    assert resolve_date("2024-2025", month_day) is None


def test_missing_year_fails() -> None:
    assert resolve_date(None, "09-02") is None
    assert resolve_date("autumn", "09-02") is None


def test_impossible_calendar_date_fails() -> None:
    assert resolve_date("2023-2024", "02-29") is None
    assert resolve_date("2024-2025", "02-29") == date(2024, 2, 29)
    assert resolve_date("2024-2025", "13-01") is None
