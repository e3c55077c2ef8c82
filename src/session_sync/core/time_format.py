"""
Time and date display helpers

Converts recorded 24-hour times to the 12-hour form used in the sheet,
and renders the timestamps shown next to each video.
"""

from datetime import date, datetime
from typing import List

from .exceptions import TimeFormatError

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _parse_components(time_str: str) -> List[int]:
    parts = time_str.strip().split(":") if isinstance(time_str, str) else []
    if len(parts) == 2:
        parts.append("0")
    if len(parts) != 3:
        raise TimeFormatError(time_str)
    try:
        return [int(part) for part in parts]
    except ValueError:
        raise TimeFormatError(time_str) from None


def _seconds_of_day(time_str: str) -> int:
    hours, minutes, seconds = _parse_components(time_str)
    if min(hours, minutes, seconds) < 0:
        raise TimeFormatError(time_str)
    # Overflowing components roll into the next unit, hours wrap at midnight
    return (hours * 3600 + minutes * 60 + seconds) % 86400


def normalize_time(time_str: str) -> str:
    """Zero-padded HH:MM:SS for a user-entered time, e.g. "9:5" -> "09:05:00"."""
    hours, remainder = divmod(_seconds_of_day(time_str), 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_time(time_str: str) -> str:
    """
    Format a 24h time string as a lower-case 12h string

    Args:
        time_str: Time of day as HH:MM:SS (HH:MM is accepted)

    Returns:
        str: Time as hh:mm:ss am/pm, e.g. "13:45:30" -> "01:45:30 pm"

    Raises:
        TimeFormatError: If the string does not hold numeric components
    """
    hours, remainder = divmod(_seconds_of_day(time_str), 3600)
    minutes, seconds = divmod(remainder, 60)

    suffix = "pm" if hours >= 12 else "am"
    hour12 = hours % 12 or 12
    return f"{hour12:02d}:{minutes:02d}:{seconds:02d} {suffix}"


def current_time_string(now: datetime) -> str:
    """Wall-clock time as zero-padded HH:MM:SS."""
    return f"{now.hour:02d}:{now.minute:02d}:{now.second:02d}"


def human_timestamp(now: datetime) -> str:
    """Timestamp shown as a video's last update, e.g. "10/7/2026, 3:05:09 PM"."""
    hour12 = now.hour % 12 or 12
    suffix = "PM" if now.hour >= 12 else "AM"
    return f"{now.month}/{now.day}/{now.year}, {hour12}:{now.minute:02d}:{now.second:02d} {suffix}"


def date_display(today: date) -> str:
    """Sheet header date, e.g. "07 Oct 2026"."""
    return f"{today.day:02d} {MONTH_ABBREVIATIONS[today.month - 1]} {today.year}"
