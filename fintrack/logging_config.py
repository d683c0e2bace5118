"""Logging setup: plain terminal lines with structured extras appended as JSON.

The client attaches context through ``extra=`` (``method``/``path``/``params``
on requests, ``payload`` on writes, ``email`` on auth events). Those fields are
appended to the line; credential fields are masked before they are written.
"""
import json
import logging
from typing import Any, Dict, Optional
from fintrack.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

SENSITIVE_KEYS = frozenset({"password", "access_token", "authorization", "token"})
REDACTED = "***"


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _redact(v) for k, v in value.items()}
    return value


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """The ``extra=`` fields of a record, with credentials masked."""
    return _redact({k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS})


class ExtraFormatter(logging.Formatter):
    """Formats the base line, then `` | {json extras}`` when there are any."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = record_extras(record)
        if not extras:
            return base
        return f"{base} | {json.dumps(extras, default=str, sort_keys=True)}"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root handler once; later calls only adjust the level."""
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level

    if logging.root.handlers:
        logging.getLogger().setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for h in logging.root.handlers:
        h.setFormatter(ExtraFormatter(LOG_FORMAT))
