from __future__ import annotations

import time
from typing import Any

# Request log, one entry per recommendation call.
_searches: list[dict[str, Any]] = []


def record_search(mode: str, data: dict[str, Any]) -> None:
    """Log a recommendation request; *mode* is personalized, trending or nearby."""
    _searches.append({
        "type": "search",
        "mode": mode,
        "timestamp": time.time(),
        **data,
    })


def get_searches() -> list[dict[str, Any]]:
    return _searches


def clear_searches() -> None:
    _searches.clear()
