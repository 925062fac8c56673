"""Date and time utility functions."""
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Tuple, Union

from festival_admin.utils.config import EndBeforeStartPolicy
from festival_admin.utils.exceptions import ScheduleError


def parse_date(date_str: str) -> date:
    """
    Parse date string in YYYY-MM-DD format.

    Args:
        date_str: Date string (e.g., "2025-03-10")

    Returns:
        date object

    Raises:
        ValueError: If date format is invalid
    """
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def parse_time_of_day(time_str: str) -> time:
    """
    Parse a time of day in HH:MM format.

    Args:
        time_str: Time string (e.g., "09:00")

    Returns:
        time object

    Raises:
        ValueError: If time format is invalid
    """
    try:
        return datetime.strptime(time_str.strip(), "%H:%M").time()
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid time format: {time_str}") from e


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware datetime.

    Naive values are taken as UTC, matching what the API stores.

    Raises:
        ValueError: If the timestamp cannot be parsed
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid timestamp format: {value}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_calendar_date(value: Union[str, date], tz: tzinfo) -> date:
    """
    Read a calendar date sent by the API.

    Accepts a plain YYYY-MM-DD string or a full timestamp; timestamps are
    projected into ``tz`` before taking the date.
    """
    if isinstance(value, datetime):
        return value.astimezone(tz).date()
    if isinstance(value, date):
        return value
    if len(value) == 10:
        return parse_date(value)
    return parse_timestamp(value).astimezone(tz).date()


def combine_local(day: date, time_str: str, tz: tzinfo) -> datetime:
    """Combine a calendar date and an HH:MM string in ``tz`` into a UTC instant."""
    local = datetime.combine(day, parse_time_of_day(time_str), tzinfo=tz)
    return local.astimezone(timezone.utc)


def normalize_schedule(
    day: date,
    start_time: str,
    end_time: str,
    tz: tzinfo,
    policy: EndBeforeStartPolicy = EndBeforeStartPolicy.REJECT,
) -> Tuple[datetime, datetime]:
    """
    Turn the picked date and two times of day into absolute start/end instants.

    Args:
        day: Calendar date picked in the editor
        start_time: Local start time (HH:MM)
        end_time: Local end time (HH:MM)
        tz: Editor timezone
        policy: What to do when the end is not after the start

    Returns:
        Tuple of (start, end) as aware UTC datetimes

    Raises:
        ValueError: If a time string is malformed
        ScheduleError: If the end is not after the start under REJECT
    """
    start = combine_local(day, start_time, tz)
    end = combine_local(day, end_time, tz)

    if end > start or policy is EndBeforeStartPolicy.PRESERVE:
        return start, end

    if policy is EndBeforeStartPolicy.ROLL_OVER and end < start:
        next_day = day + timedelta(days=1)
        return start, combine_local(next_day, end_time, tz)

    raise ScheduleError(f"End time ({end_time}) must be after start time ({start_time})")


def to_local_time_string(value: datetime, tz: tzinfo) -> str:
    """Project an instant into ``tz`` and format it as HH:MM."""
    return value.astimezone(tz).strftime("%H:%M")


def to_iso_utc(value: datetime) -> str:
    """
    Format an instant the way the API stores it.

    Example: 2025-03-10T03:30:00.000Z
    """
    utc_value = value.astimezone(timezone.utc)
    return utc_value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_value.microsecond // 1000:03d}Z"


def format_display_date(value: date) -> str:
    """Format a date as DD-MM-YYYY for tables."""
    return value.strftime("%d-%m-%Y")
