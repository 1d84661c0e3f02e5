"""Fixed English date labels used in document names and report cells.

``strftime`` month and weekday names follow ``LC_TIME``; these helpers do not.
"""
from __future__ import annotations

from datetime import date

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def month_name(value: date) -> str:
    return MONTH_NAMES[value.month - 1]


def month_abbreviation(value: date) -> str:
    return month_name(value)[:3]


def weekday_name(value: date) -> str:
    return WEEKDAY_NAMES[value.weekday()]


def short_date(value: date) -> str:
    """``5 Mar`` style day and abbreviated month."""
    return f"{value.day} {month_abbreviation(value)}"


def long_date(value: date) -> str:
    """``March 5, 2025``."""
    return f"{month_name(value)} {value.day}, {value.year}"


def month_label(value: date) -> str:
    """``Mar 2025``."""
    return f"{month_abbreviation(value)} {value.year}"


__all__ = [
    "MONTH_NAMES",
    "WEEKDAY_NAMES",
    "long_date",
    "month_abbreviation",
    "month_label",
    "month_name",
    "short_date",
    "weekday_name",
]
