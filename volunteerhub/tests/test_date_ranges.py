"""
Named date filter resolution.
"""
from __future__ import annotations

from datetime import date

import pytest

from app.services.date_ranges import resolve_date_range

# A Wednesday
TODAY = date(2026, 10, 14)


@pytest.mark.parametrize(
    ("date_filter", "expected"),
    [
        ("all", (None, None)),
        ("today", (date(2026, 10, 14), date(2026, 10, 14))),
        ("tomorrow", (date(2026, 10, 15), date(2026, 10, 15))),
        ("this-week", (date(2026, 10, 12), date(2026, 10, 18))),
        ("next-week", (date(2026, 10, 19), date(2026, 10, 25))),
        ("this-month", (date(2026, 10, 1), date(2026, 10, 31))),
        ("next-month", (date(2026, 11, 1), date(2026, 11, 30))),
        ("upcoming", (date(2026, 10, 14), None)),
        ("past", (None, date(2026, 10, 13))),
    ],
)
def test_named_ranges(date_filter: str, expected: tuple) -> None:
    assert resolve_date_range(date_filter, today=TODAY) == expected


def test_week_starts_on_monday_even_on_sunday() -> None:
    sunday = date(2026, 10, 18)
    assert resolve_date_range("this-week", today=sunday) == (
        date(2026, 10, 12),
        date(2026, 10, 18),
    )


def test_next_month_rolls_over_the_year() -> None:
    assert resolve_date_range("next-month", today=date(2026, 12, 31)) == (
        date(2027, 1, 1),
        date(2027, 1, 31),
    )


def test_february_in_a_leap_year() -> None:
    assert resolve_date_range("this-month", today=date(2028, 2, 10)) == (
        date(2028, 2, 1),
        date(2028, 2, 29),
    )


def test_unknown_filter_means_no_bounds() -> None:
    assert resolve_date_range("someday", today=TODAY) == (None, None)
