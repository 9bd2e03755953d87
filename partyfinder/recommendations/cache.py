from __future__ import annotations

import hashlib
import time
from typing import Any, Callable, Iterable

from ..enrichment.classifier import enrich_event
from ..enrichment.models import EnrichedEvent, RawEvent
from .config import DEFAULT_RECOMMENDATION_CONFIG


def _make_key(event: RawEvent) -> tuple[str, str]:
    # Content hash covers edits to an event that keeps its id.
    payload = event.model_dump_json(include=set(RawEvent.model_fields))
    return event.id, hashlib.sha256(payload.encode()).hexdigest()[:16]


class EnrichmentCache:
    """TTL cache of enriched events keyed by ``(event id, input hash)``.

    Owned by the calling layer; the classifier itself never caches.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_RECOMMENDATION_CONFIG.cache_ttl,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[tuple[str, str], dict[str, Any]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, event: RawEvent) -> EnrichedEvent | None:
        key = _make_key(event)
        entry = self._entries.get(key)
        if entry and self._clock() - entry["created_at"] < self.ttl:
            self._hits += 1
            return entry["value"]
        if entry:
            del self._entries[key]
        self._misses += 1
        return None

    def set(self, event: RawEvent, enriched: EnrichedEvent) -> None:
        self._entries[_make_key(event)] = {"value": enriched, "created_at": self._clock()}

    def enrich(self, events: Iterable[RawEvent]) -> list[EnrichedEvent]:
        """Enrich *events* in order, reusing fresh cached results."""
        enriched: list[EnrichedEvent] = []
        for event in events:
            cached = self.get(event)
            if cached is None:
                cached = enrich_event(event)
                self.set(event, cached)
            enriched.append(cached)
        return enriched

    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "ttl_seconds": self.ttl,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0
