"""Date manipulation utilities"""

import calendar
from datetime import date


def days_in_month(day: date) -> int:
    """Number of days in the calendar month containing `day`"""
    return calendar.monthrange(day.year, day.month)[1]


def elapsed_days_in_month(day: date) -> int:
    """Days elapsed in the month up to and including `day` (never zero)"""
    return day.day
