"""Date and timestamp parsing for form input."""
import calendar
from datetime import date, datetime, timezone
from typing import Union


def parse_timestamp(s: Union[str, datetime, date]) -> datetime:
    """
    Parse a timestamp into a timezone-aware datetime.
    
    Supports:
    - ISO format with "Z" suffix: "2024-01-02T09:10:00Z"
    - ISO format with timezone: "2024-01-02T09:10:00+00:00"
    - ISO format without timezone: "2024-01-02T09:10:00"
    - Space-separated: "2024-01-02 09:10:00"
    - Plain dates: "2024-01-02" (midnight)
    
    Naive values are taken as UTC.
    
    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(s, datetime):
        return s if s.tzinfo else s.replace(tzinfo=timezone.utc)
    if isinstance(s, date):
        return datetime(s.year, s.month, s.day, tzinfo=timezone.utc)
    if not s or not s.strip():
        raise ValueError("Empty timestamp string")
    
    s = s.strip()
    
    # Convert trailing "Z" to "+00:00" for ISO format compatibility
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    
    if " " in s and "T" not in s:
        s = s.replace(" ", "T")
    
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(
            f"Unable to parse timestamp: {s}. Expected ISO format (e.g., '2024-01-02T09:10:00Z' or '2024-01-02')"
        ) from None
    
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date(s: Union[str, datetime, date]) -> date:
    """Parse a calendar date; timestamps are truncated to their date."""
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    return parse_timestamp(s).date()


def add_months(d: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the target month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return d.replace(year=year, month=month, day=day)
