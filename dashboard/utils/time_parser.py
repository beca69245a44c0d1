"""Relative and absolute time expression parsing for New Relic query windows.

Accepts the expressions widgets are configured with, e.g. ``"now"``,
``"-5 minutes"``, ``"1 hour ago"``, ``"yesterday -2 hours"`` or any absolute
date dateutil understands, and resolves them to an aware UTC datetime.
"""
import re
from datetime import datetime, timezone
from typing import Optional, Union

import dateutil.parser
from dateutil.relativedelta import relativedelta

API_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_UNITS = {
    "sec": "seconds",
    "second": "seconds",
    "min": "minutes",
    "minute": "minutes",
    "hour": "hours",
    "day": "days",
    "week": "weeks",
    "fortnight": "fortnights",
    "month": "months",
    "year": "years",
}

_BASE_KEYWORDS = ("now", "today", "midnight", "yesterday", "tomorrow")

_RELATIVE_TERM = re.compile(
    r"\s*([+-]?)\s*(\d+)\s*(sec|second|min|minute|hour|day|week|fortnight|month|year)s?\b(\s+ago\b)?",
    re.IGNORECASE,
)


def _resolve_base(keyword: str, now: datetime) -> datetime:
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if keyword == "now":
        return now
    if keyword in ("today", "midnight"):
        return midnight
    if keyword == "yesterday":
        return midnight - relativedelta(days=1)
    return midnight + relativedelta(days=1)


def _parse_relative(expression: str, now: datetime) -> Optional[datetime]:
    """Return the resolved datetime, or None when the expression is not relative."""
    text = expression.strip().lower()
    base = now

    for keyword in _BASE_KEYWORDS:
        if re.match(rf"{keyword}(?=$|\s|[+-])", text):
            base = _resolve_base(keyword, now)
            text = text[len(keyword):]
            break
    else:
        if not _RELATIVE_TERM.match(text):
            return None

    delta = relativedelta()
    position = 0
    while position < len(text):
        if not text[position:].strip():
            break
        match = _RELATIVE_TERM.match(text, position)
        if not match:
            return None
        sign, amount, unit, ago = match.groups()
        value = int(amount)
        if sign == "-":
            value = -value
        if ago:
            value = -value
        unit = _UNITS[unit.lower()]
        if unit == "fortnights":
            unit, value = "weeks", value * 2
        delta += relativedelta(**{unit: value})
        position = match.end()

    return base + delta


def parse_time_expression(value: Union[str, datetime], now: Optional[datetime] = None) -> datetime:
    """Resolve a time expression to an aware UTC datetime.

    Naive absolute dates are interpreted as UTC.

    Raises:
        ValueError: if the expression cannot be interpreted.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Empty or non-string time expression: {value!r}")

        parsed = _parse_relative(value, now)
        if parsed is None:
            try:
                parsed = dateutil.parser.parse(value)
            except (ValueError, OverflowError) as e:
                raise ValueError(f"Unrecognised time expression {value!r}: {e}") from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_api_timestamp(moment: datetime) -> str:
    """Format a datetime the way the New Relic API expects: ``YYYY-MM-DDTHH:MM:SSZ``."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(API_TIMESTAMP_FORMAT)


def to_epoch_seconds(value: str) -> int:
    """Parse an upstream interval timestamp (UTC unless it says otherwise) to epoch seconds."""
    parsed = dateutil.parser.parse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())
