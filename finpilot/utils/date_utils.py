"""Date formatting utilities"""

from datetime import date

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def format_letter_date(value: date | None = None) -> str:
    """Format a date for formal correspondence, e.g. "19 October, 2026" (default: today)"""
    value = value or date.today()
    return f"{value.day} {MONTH_NAMES[value.month - 1]}, {value.year}"
