"""Utility functions and constants for emission processing."""

from __future__ import annotations

# time constants
SEC_PER_HOUR = 3600
HOUR_PER_DAY = 24
SEC_PER_DAY = SEC_PER_HOUR * HOUR_PER_DAY

# The inventory is given for 2000, a leap year
DAYS_PER_MONTH_REFERENCE = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
SEC_PER_REFERENCE_YEAR = SEC_PER_DAY * 366


def check_month(month: int):
    """Raise if the month is not a valid month number."""
    if isinstance(month, bool) or not isinstance(month, int):
        raise TypeError(f"{month=} must be an int.")
    if not 1 <= month <= 12:
        raise ValueError(f"{month=} must be between 1 and 12.")
