"""
Sub-scores for the recommendation engine.

Each function scores one signal on a 0-100 scale and, where it has something
to say, returns human-readable match reasons.  The engine blends them with
the weights from ``config``.
"""
from __future__ import annotations

import math
from datetime import datetime, time
from typing import Iterable, Mapping, NamedTuple

from ..enrichment.dates import event_datetime
from ..enrichment.models import EnrichedEvent, TimeOfDay
from .config import (
    BASE_BONUSES,
    INTERACTION_WEIGHTS,
    PREFERENCE_POINTS,
    BaseScoreBonuses,
    InteractionWeights,
    PreferencePoints,
)
from .geo import haversine_miles
from .models import EventInteraction, UserLocation, UserPreferences


class ScoreResult(NamedTuple):
    score: float
    reasons: list[str]


class LocationMatch(NamedTuple):
    score: float
    distance: float | None
    reason: str | None


_DAY_TIMES = (TimeOfDay.morning, TimeOfDay.afternoon)
_NIGHT_TIMES = (TimeOfDay.evening, TimeOfDay.night)

# (preference toggle, event flag, reason when the toggle is on)
_FEATURE_CHECKS: tuple[tuple[str, str, str], ...] = (
    ("live_music", "has_live_music", "Features live music"),
    ("dj", "has_dj", "Features a DJ"),
    ("food_options", "has_food_options", "Has food options"),
    ("drink_specials", "has_drink_specials", "Has drink specials"),
    ("vip_options", "has_vip", "Has VIP options"),
)


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


def base_score(event: EnrichedEvent, bonuses: BaseScoreBonuses = BASE_BONUSES) -> float:
    """Listing quality on top of popularity."""
    score = float(event.popularity if event.popularity is not None else bonuses.default_popularity)

    if event.description and len(event.description) > bonuses.long_description_chars:
        score += bonuses.long_description
    if not event.has_placeholder_image:
        score += bonuses.real_image
    if event.lat_lng is not None:
        score += bonuses.coordinates
    if event.url:
        score += bonuses.url

    for flag in ("has_vip", "has_drink_specials", "has_food_options", "has_live_music", "has_dj"):
        if getattr(event, flag):
            score += getattr(bonuses, flag)

    return _clamp(score)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


def preference_score(
    event: EnrichedEvent,
    preferences: UserPreferences,
    points: PreferencePoints = PREFERENCE_POINTS,
) -> ScoreResult:
    """Score how well *event* matches the stated preferences.

    A dimension counts as possible only when both sides carry a value for it.
    The summed points are scaled by ``0.5 + 0.5 * matched / possible`` so a
    profile that matches on few of the evaluable dimensions is damped.  An
    age restriction above the user's ceiling is a penalty, not a filter.
    """
    score = 0.0
    reasons: list[str] = []
    matched = 0
    possible = 0

    if preferences.music_genres and event.music_genres:
        possible += 1
        matching = [g for g in event.music_genres if g in preferences.music_genres]
        if matching:
            matched += 1
            score += points.genres * (len(matching) / len(preferences.music_genres))
            reasons.append(
                f"Matches your music preferences: {', '.join(g.value for g in matching)}"
            )

    if preferences.party_types and event.party_subcategory:
        possible += 1
        if event.party_subcategory in preferences.party_types:
            matched += 1
            score += points.party_type
            reasons.append(f"Matches your preferred party type: {event.party_subcategory}")

    if preferences.price_ranges and event.price_range:
        possible += 1
        if event.price_range in preferences.price_ranges:
            matched += 1
            score += points.price
            reasons.append(f"Matches your price preference: {event.price_range.value}")

    if preferences.crowd_types and event.crowd_type:
        possible += 1
        if event.crowd_type in preferences.crowd_types:
            matched += 1
            score += points.crowd
            reasons.append(f"Matches your preferred crowd: {event.crowd_type.value}")

    if preferences.preferred_days:
        possible += 1
        day = "weekend" if event.is_weekend else "weekday"
        if day in preferences.preferred_days:
            matched += 1
            score += points.day
            reasons.append(f"Happens on your preferred day: {day}")

    if preferences.preferred_times and event.time_of_day:
        possible += 1
        if event.time_of_day in _DAY_TIMES:
            slot = "day"
        elif event.time_of_day in _NIGHT_TIMES:
            slot = "night"
        else:
            slot = None
        if slot in preferences.preferred_times:
            matched += 1
            score += points.time
            reasons.append(f"Happens at your preferred time: {slot}")

    if preferences.features is not None:
        for toggle, flag, reason in _FEATURE_CHECKS:
            wanted = getattr(preferences.features, toggle)
            if wanted is None:
                continue
            possible += 1
            if getattr(event, flag) == wanted:
                matched += 1
                score += points.feature
                if wanted:
                    reasons.append(reason)

    if preferences.minimum_age is not None and event.minimum_age is not None:
        if event.minimum_age <= preferences.minimum_age:
            score += points.age_ok
            reasons.append(f"Age requirement: {event.minimum_age}+")
        else:
            score += points.age_penalty
            reasons.append(f"Age requirement ({event.minimum_age}+) exceeds your preference")

    if possible > 0:
        score *= 0.5 + 0.5 * (matched / possible)

    return ScoreResult(_clamp(score), reasons)


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------


def event_distance(event: EnrichedEvent, location: UserLocation) -> float | None:
    position = event.lat_lng
    if position is None:
        return None
    return haversine_miles(location.latitude, location.longitude, *position)


def distance_reason(distance: float) -> str:
    if distance < 1:
        return "Very close to you (less than 1 mile)"
    if distance < 5:
        return f"Close to you ({distance:.1f} miles)"
    if distance < 15:
        return f"Within reasonable distance ({distance:.1f} miles)"
    return f"Within your max distance ({distance:.1f} miles)"


def location_score(
    event: EnrichedEvent,
    location: UserLocation,
    max_distance: float = 30.0,
) -> LocationMatch:
    """Linear decay from 100 at the user's position to 0 at *max_distance*.

    Events beyond the radius score 0 but still report their distance; events
    without coordinates report no distance.
    """
    distance = event_distance(event, location)
    if distance is None:
        return LocationMatch(0.0, None, None)
    if max_distance <= 0 or distance > max_distance:
        return LocationMatch(0.0, distance, None)
    score = 100.0 * (1 - distance / max_distance)
    return LocationMatch(_clamp(score), distance, distance_reason(distance))


# ---------------------------------------------------------------------------
# Recency
# ---------------------------------------------------------------------------


def recency_score(event: EnrichedEvent, now: datetime) -> ScoreResult:
    event_dt = event_datetime(event)
    if event_dt is None:
        return ScoreResult(0.0, [])

    days_until = (event_dt - now).total_seconds() / 86400
    # A date-only rawDate parses to midnight; any time on that day is today.
    if event_dt.date() == now.date() and event_dt.time() == time.min:
        days_until = max(days_until, 0.0)

    if days_until < 0:
        return ScoreResult(0.0, ["This event has already happened"])
    if days_until < 1:
        return ScoreResult(100.0, ["Happening today!"])

    days = math.ceil(days_until)
    if days_until < 3:
        return ScoreResult(90.0, [f"Happening soon (in {days} days)"])
    if days_until < 7:
        return ScoreResult(80.0, [f"Happening this week (in {days} days)"])
    if days_until < 14:
        return ScoreResult(70.0, [f"Happening next week (in {days} days)"])
    if days_until < 30:
        return ScoreResult(60.0, [f"Happening this month (in {days} days)"])

    score = max(0.0, 50.0 - math.floor(days_until / 30) * 10)
    return ScoreResult(score, [f"Happening in {days} days"])


# ---------------------------------------------------------------------------
# Personalization
# ---------------------------------------------------------------------------


def is_similar(event: EnrichedEvent, other: EnrichedEvent) -> bool:
    """Same party subcategory, or at least one music genre in common."""
    if event.party_subcategory and event.party_subcategory == other.party_subcategory:
        return True
    if event.music_genres and other.music_genres:
        return bool(set(event.music_genres) & set(other.music_genres))
    return False


def personalization_score(
    event: EnrichedEvent,
    interactions: Iterable[EventInteraction],
    catalog: Mapping[str, EnrichedEvent],
    weights: InteractionWeights = INTERACTION_WEIGHTS,
) -> ScoreResult:
    """Score *event* by the user's history with similar events.

    ``catalog`` resolves interaction event ids to enriched events; history
    entries for *event* itself or for unknown ids are ignored.
    """
    similar: list[EventInteraction] = []
    for interaction in interactions:
        if interaction.event_id == event.id:
            continue
        other = catalog.get(interaction.event_id)
        if other is not None and is_similar(event, other):
            similar.append(interaction)

    if not similar:
        return ScoreResult(0.0, [])

    counts = {
        kind: sum(1 for i in similar if getattr(i, kind))
        for kind in ("viewed", "clicked", "saved", "shared", "attended")
    }
    score = sum(counts[kind] * getattr(weights, kind) for kind in counts)

    reasons: list[str] = []
    if counts["attended"]:
        reasons.append(f"You've attended {counts['attended']} similar events")
    if counts["saved"]:
        reasons.append(f"You've saved {counts['saved']} similar events")
    if counts["shared"]:
        reasons.append(f"You've shared {counts['shared']} similar events")

    return ScoreResult(float(min(100, score)), reasons)
