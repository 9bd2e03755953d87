"""
Browsing helpers over enriched events: day/time filters, the generic
preference matcher and the listing-quality sort used by the events list.
"""
from __future__ import annotations

from typing import Iterable, Literal, Sequence

from .classifier import (
    calculate_popularity,
    detect_is_weekend,
    detect_minimum_age,
    detect_time_of_day,
)
from .models import EnrichedEvent, MusicGenre, PriceRange, RawEvent, TimeOfDay

DayPart = Literal["all", "day", "night"]
DayOfWeek = Literal["all", "weekday", "weekend"]

DAY_TIMES = (TimeOfDay.morning, TimeOfDay.afternoon)
NIGHT_TIMES = (TimeOfDay.evening, TimeOfDay.night)

LISTING_SUBCATEGORY_POINTS: dict[str, int] = {
    "club": 10,
    "day-party": 8,
    "celebration": 6,
    "brunch": 5,
    "networking": 4,
}
LISTING_DEFAULT_SUBCATEGORY_POINTS = 3
LISTING_KEYWORDS = (
    "dj", "music", "dance", "drinks", "vip", "exclusive", "featured",
    "popular", "sold out", "tickets", "nightlife", "entertainment",
)


def filter_by_time_of_day(
    events: Sequence[EnrichedEvent], time_of_day: DayPart,
) -> list[EnrichedEvent]:
    if time_of_day == "all":
        return list(events)
    wanted = DAY_TIMES if time_of_day == "day" else NIGHT_TIMES
    return [
        e for e in events
        if (e.time_of_day or detect_time_of_day(e)) in wanted
    ]


def filter_by_day_of_week(
    events: Sequence[EnrichedEvent], day_of_week: DayOfWeek,
) -> list[EnrichedEvent]:
    if day_of_week == "all":
        return list(events)
    want_weekend = day_of_week == "weekend"
    result = []
    for e in events:
        is_weekend = e.is_weekend if e.is_weekend is not None else detect_is_weekend(e)
        if is_weekend == want_weekend:
            result.append(e)
    return result


def match_preferences(
    events: Sequence[EnrichedEvent],
    *,
    music_genres: Iterable[MusicGenre] = (),
    party_types: Iterable[str] = (),
    time_of_day: DayPart = "all",
    day_of_week: DayOfWeek = "all",
    price_ranges: Iterable[PriceRange] = (),
    minimum_age: int | None = None,
) -> list[EnrichedEvent]:
    """Hard-filter on time, day, party type and age, then sort by a simple score.

    Unlike the personalized recommender this drops events whose minimum age
    exceeds *minimum_age*; events with an unknown age are kept.
    """
    genres = set(music_genres)
    party_types = set(party_types)
    price_ranges = set(price_ranges)

    candidates = filter_by_day_of_week(
        filter_by_time_of_day(events, time_of_day), day_of_week,
    )
    if party_types:
        candidates = [e for e in candidates if e.party_subcategory in party_types]
    if minimum_age is not None:
        kept = []
        for e in candidates:
            age = e.minimum_age if e.minimum_age is not None else detect_minimum_age(e)
            if age is None or age <= minimum_age:
                kept.append(e)
        candidates = kept

    scored: list[tuple[int, EnrichedEvent]] = []
    for e in candidates:
        score = e.popularity if e.popularity is not None else calculate_popularity(e)
        if genres and e.music_genres:
            score += 10 * sum(1 for g in e.music_genres if g in genres)
        if price_ranges and e.price_range in price_ranges:
            score += 10
        scored.append((score, e))

    scored.sort(key=lambda item: item[0], reverse=True)
    return [e for _, e in scored]


def listing_score(event: RawEvent) -> int:
    score = 0
    if event.party_subcategory:
        score += LISTING_SUBCATEGORY_POINTS.get(
            event.party_subcategory, LISTING_DEFAULT_SUBCATEGORY_POINTS,
        )
    if event.description:
        score += min(5, len(event.description) // 100)
        description = event.description.lower()
        score += sum(1 for kw in LISTING_KEYWORDS if kw in description)
    if not event.has_placeholder_image:
        score += 3
    if event.venue:
        score += 2
    if event.price:
        score += 2
    return score


def rank_party_listings(events: Iterable[EnrichedEvent]) -> list[EnrichedEvent]:
    """Keep ``category == "party"`` events, best-presented listings first."""
    parties = [e for e in events if e.category == "party"]
    return sorted(parties, key=listing_score, reverse=True)
