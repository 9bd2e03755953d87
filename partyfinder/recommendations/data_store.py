from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from ..enrichment.models import RawEvent
from .config import DEFAULT_RECOMMENDATION_CONFIG

logger = logging.getLogger(__name__)

_events: list[RawEvent] | None = None


def _load(path: Path) -> list[RawEvent]:
    try:
        df = pd.read_json(
            path, orient="records", dtype=False, convert_dates=False, precise_float=True,
        )
    except (OSError, ValueError):
        logger.warning("Could not read events from %s", path, exc_info=True)
        return []

    # NaN -> None so optional fields validate as missing
    df = df.astype(object).where(df.notna(), None)

    events: list[RawEvent] = []
    for record in df.to_dict(orient="records"):
        try:
            events.append(RawEvent.model_validate(record))
        except ValidationError:
            logger.warning("Skipping malformed event record %r", record.get("id"), exc_info=True)
    logger.info("Loaded %d events from %s", len(events), path)
    return events


def get_events() -> list[RawEvent]:
    """Return the local event list, loading it on first call."""
    global _events
    if _events is None:
        _events = _load(DEFAULT_RECOMMENDATION_CONFIG.events_path)
    return _events


def set_events(events: list[RawEvent] | None) -> None:
    """Replace the loaded events; ``None`` forces a reload on next access."""
    global _events
    _events = events
