"""
Party recommendation entry points.

All three functions enrich their input on every call, never mutate it and do
no I/O.  ``now`` can be pinned for reproducible recency scores.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence

import numpy as np

from ..enrichment.classifier import enrich_events
from ..enrichment.models import EnrichedEvent, RawEvent
from .config import (
    DEFAULT_RECOMMENDATION_CONFIG,
    NEARBY_WEIGHTS,
    PERSONALIZED_WEIGHTS,
    TRENDING_WEIGHTS,
    NearbyWeights,
    PersonalizedWeights,
    RecommendationConfig,
    TrendingWeights,
)
from .geo import haversine_miles
from .models import EventInteraction, RecommendationResult, UserLocation, UserPreferences
from .scoring import (
    LocationMatch,
    base_score,
    location_score,
    personalization_score,
    preference_score,
    recency_score,
)

logger = logging.getLogger(__name__)

TRENDING_REASON = "Trending party event"


def _resolve_now(now: datetime | None) -> datetime:
    # Event datetimes are naive wall-clock values; compare like with like.
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.replace(tzinfo=None)
    return now


def get_personalized(
    events: Iterable[RawEvent],
    preferences: UserPreferences,
    location: UserLocation | None = None,
    interactions: Iterable[EventInteraction] | None = (),
    *,
    weights: PersonalizedWeights = PERSONALIZED_WEIGHTS,
    known_events: Iterable[RawEvent] = (),
    now: datetime | None = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[RecommendationResult]:
    """Rank *events* for one user, best first.

    ``known_events`` lets interaction history refer to events outside the
    batch being ranked; events in the batch take precedence on id clashes.
    """
    now = _resolve_now(now)
    enriched = enrich_events(events)
    history = list(interactions or ())

    catalog: dict[str, EnrichedEvent] = {e.id: e for e in enrich_events(known_events) if e.id}
    catalog.update({e.id: e for e in enriched if e.id})

    max_distance = preferences.max_distance or config.default_max_distance
    no_location = LocationMatch(0.0, None, None)

    results: list[RecommendationResult] = []
    for event in enriched:
        base = base_score(event)
        preference = preference_score(event, preferences)
        nearby = location_score(event, location, max_distance) if location else no_location
        recency = recency_score(event, now)
        personal = personalization_score(event, history, catalog)

        score = (
            base * weights.base
            + preference.score * weights.preference
            + nearby.score * weights.location
            + recency.score * weights.recency
            + personal.score * weights.personalization
        )

        reasons = list(preference.reasons)
        if nearby.reason:
            reasons.append(nearby.reason)
        reasons.extend(recency.reasons)
        reasons.extend(personal.reasons)

        results.append(RecommendationResult(
            event=event,
            score=score,
            match_reasons=reasons,
            distance=nearby.distance,
        ))

    results.sort(key=lambda r: r.score, reverse=True)
    logger.debug("Ranked %d events for personalized recommendations", len(results))
    return results


def get_trending(
    events: Iterable[RawEvent],
    location: UserLocation | None = None,
    *,
    weights: TrendingWeights = TRENDING_WEIGHTS,
    now: datetime | None = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[RecommendationResult]:
    """Rank by popularity and how soon the event happens.

    Location, when known, only nudges the score within the trending radius.
    """
    now = _resolve_now(now)
    results: list[RecommendationResult] = []

    for event in enrich_events(events):
        recency = recency_score(event, now)
        score = base_score(event) * weights.base + recency.score * weights.recency

        distance = None
        reasons = [TRENDING_REASON, *recency.reasons]
        if location is not None and event.lat_lng is not None:
            nearby = location_score(event, location, config.trending_radius)
            distance = nearby.distance
            score = score * (1 - weights.location) + nearby.score * weights.location
            if nearby.reason:
                reasons.append(nearby.reason)

        results.append(RecommendationResult(
            event=event, score=score, match_reasons=reasons, distance=distance,
        ))

    results.sort(key=lambda r: r.score, reverse=True)
    logger.debug("Ranked %d trending events", len(results))
    return results


def get_nearby(
    events: Iterable[RawEvent],
    location: UserLocation,
    max_distance: float = 30.0,
    *,
    weights: NearbyWeights = NEARBY_WEIGHTS,
    now: datetime | None = None,
) -> list[RecommendationResult]:
    """Events within *max_distance* miles, closest first.

    Events without coordinates are dropped.  The blended score is kept on each
    result and only breaks ties between equally distant events.
    """
    if max_distance <= 0:
        return []

    now = _resolve_now(now)
    placed: Sequence[EnrichedEvent] = [e for e in enrich_events(events) if e.lat_lng is not None]
    if not placed:
        return []

    positions = np.array([e.lat_lng for e in placed], dtype=float)
    distances = haversine_miles(
        location.latitude, location.longitude, positions[:, 0], positions[:, 1],
    )

    results: list[RecommendationResult] = []
    for event, distance in zip(placed, distances):
        distance = float(distance)
        if distance > max_distance:
            continue

        recency = recency_score(event, now)
        distance_score = 100.0 * (1 - distance / max_distance)
        score = (
            base_score(event) * weights.base
            + distance_score * weights.distance
            + recency.score * weights.recency
        )

        distance_reason = (
            "Less than 1 mile away" if distance < 1 else f"{distance:.1f} miles away"
        )
        results.append(RecommendationResult(
            event=event,
            score=score,
            match_reasons=[distance_reason, *recency.reasons],
            distance=distance,
        ))

    results.sort(key=lambda r: (r.distance, -r.score))
    logger.debug("Found %d events within %.1f miles", len(results), max_distance)
    return results
