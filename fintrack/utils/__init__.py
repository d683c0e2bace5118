from .timestamp import parse_timestamp, parse_date, add_months
from .formatting import format_currency

__all__ = ["parse_timestamp", "parse_date", "add_months", "format_currency"]
