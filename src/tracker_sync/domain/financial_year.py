"""Financial-year buckets (April 1 to March 31, labelled by the start year).

All callers share UTC: aware datetimes are converted to UTC before the calendar
date is taken and naive datetimes are read as UTC.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime

FY_START_MONTH = 4
_LABEL_PATTERN = re.compile(r"^FY(\d{4})$", re.IGNORECASE)


def _as_utc_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    return value


def financial_year_start_year(value: date | datetime) -> int:
    day = _as_utc_date(value)
    return day.year if day.month >= FY_START_MONTH else day.year - 1


def financial_year(value: date | datetime) -> str:
    """Return the ``FY<year>`` label for ``value``."""

    return f"FY{financial_year_start_year(value)}"


def financial_year_start(label: str) -> int:
    match = _LABEL_PATTERN.match(label.strip())
    if match is None:
        raise ValueError(f"Invalid financial year label: {label!r}")
    return int(match.group(1))


def financial_year_bounds(label: str) -> tuple[date, date]:
    """Return the inclusive first and last day of the financial year ``label``."""

    start_year = financial_year_start(label)
    return date(start_year, FY_START_MONTH, 1), date(start_year + 1, FY_START_MONTH - 1, 31)


__all__ = [
    "financial_year",
    "financial_year_bounds",
    "financial_year_start",
    "financial_year_start_year",
]
