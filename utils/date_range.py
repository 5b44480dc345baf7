"""Week-based date range helpers."""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from models.parcel import DateRange


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string. Raises ValueError on anything else."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def get_monday(value: date) -> date:
    """Monday of the week containing the given date."""
    return value - timedelta(days=value.weekday())


def _week_label(monday: date) -> str:
    return f"Week of {format_date(monday)}"


def get_previous_week_range(reference: Optional[date] = None) -> DateRange:
    """
    Monday-to-Sunday range of the week before the reference date.

    Args:
        reference: Any day in the current week (defaults to today)

    Returns:
        DateRange for the previous full week
    """
    reference = reference or date.today()
    previous_monday = get_monday(reference) - timedelta(days=7)
    return DateRange(
        start=previous_monday,
        end=previous_monday + timedelta(days=6),
        label=_week_label(previous_monday),
    )


def get_week_range_from_monday(monday_str: str) -> DateRange:
    """
    Monday-to-Sunday range starting on the given Monday.

    Raises:
        ValueError: If the string is not a valid date or not a Monday
    """
    monday = parse_date(monday_str)
    if monday.weekday() != 0:
        raise ValueError(f"Date {monday_str} is not a Monday")

    return DateRange(
        start=monday,
        end=monday + timedelta(days=6),
        label=_week_label(monday),
    )


def is_date_in_range(value: Union[date, str], date_range: DateRange) -> bool:
    """
    Check whether a date falls inside the range (both ends inclusive).

    Strings must be YYYY-MM-DD; anything unparseable is outside every range.
    """
    if isinstance(value, str):
        try:
            value = parse_date(value)
        except ValueError:
            return False
    elif isinstance(value, datetime):
        value = value.date()

    return date_range.start <= value <= date_range.end


def format_date_range(date_range: DateRange) -> str:
    """Human-readable range, e.g. '2025-01-06 to 2025-01-12'."""
    return f"{format_date(date_range.start)} to {format_date(date_range.end)}"


def get_date_range_filename(date_range: DateRange) -> str:
    """Filename-safe range identifier, e.g. 'week_2025_01_06'."""
    return f"week_{format_date(date_range.start).replace('-', '_')}"
