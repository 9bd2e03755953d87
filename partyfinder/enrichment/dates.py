from __future__ import annotations

import logging
from datetime import datetime

import pandas as pd

from .models import RawEvent

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = frozenset({
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "mon", "tue", "tues", "wed", "thu", "thur", "thurs", "fri", "sat", "sun",
})

# pandas resolves these against the clock; an event date must be absolute.
RELATIVE_DATE_WORDS = frozenset({"now", "today", "tonight", "tomorrow", "yesterday"})


def parse_datetime(value: str | None) -> datetime | None:
    """Parse a free-form date/time string, or return ``None``.

    Timezone-aware input keeps its wall-clock time and loses the offset, so
    weekday and day arithmetic happen in the event's local time.
    """
    if not value or not value.strip():
        return None
    if value.strip().lower() in RELATIVE_DATE_WORDS:
        logger.debug("Relative date %r ignored", value)
        return None
    try:
        parsed = pd.to_datetime(value.strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        logger.debug("Unparseable date %r", value, exc_info=True)
        return None
    if pd.isna(parsed):
        logger.debug("Unparseable date %r", value)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed.to_pydatetime()


def parse_display_date(text: str | None) -> datetime | None:
    """Parse a display date such as ``"Monday, June 10, 2024"``.

    A leading weekday name is dropped by keeping everything after the first
    comma; other strings are parsed whole.
    """
    if not text:
        return None
    head, sep, tail = text.lower().partition(",")
    candidate = tail.strip() if sep and head.strip() in WEEKDAY_NAMES else text
    return parse_datetime(candidate)


def event_datetime(event: RawEvent) -> datetime | None:
    """Best-effort start datetime: ``raw_date`` first, then the display date."""
    return parse_datetime(event.raw_date) or parse_display_date(event.date)
