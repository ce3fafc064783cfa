"""
Translate the listing's named date filters into concrete [start, end] bounds.
A None bound is open-ended. Weeks run Monday to Sunday.
"""
from __future__ import annotations

import calendar
from datetime import date, timedelta

DateRange = tuple[date | None, date | None]


def _month_bounds(year: int, month: int) -> DateRange:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def resolve_date_range(date_filter: str, today: date | None = None) -> DateRange:
    today = today or date.today()
    week_start = today - timedelta(days=today.weekday())

    if date_filter == "today":
        return today, today
    if date_filter == "tomorrow":
        tomorrow = today + timedelta(days=1)
        return tomorrow, tomorrow
    if date_filter == "this-week":
        return week_start, week_start + timedelta(days=6)
    if date_filter == "next-week":
        next_week = week_start + timedelta(days=7)
        return next_week, next_week + timedelta(days=6)
    if date_filter == "this-month":
        return _month_bounds(today.year, today.month)
    if date_filter == "next-month":
        if today.month == 12:
            return _month_bounds(today.year + 1, 1)
        return _month_bounds(today.year, today.month + 1)
    if date_filter == "upcoming":
        return today, None
    if date_filter == "past":
        return None, today - timedelta(days=1)
    # "all" and anything unrecognised
    return None, None
