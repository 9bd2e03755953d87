from __future__ import annotations

import logging
from typing import Iterable

from .dates import parse_datetime, parse_display_date
from .models import (
    CrowdType,
    DressCode,
    EnrichedEvent,
    MusicGenre,
    PriceRange,
    RawEvent,
    SocialMediaLinks,
    TimeOfDay,
)
from .rules import (
    AGE_RE,
    ALL_AGES_PHRASES,
    CROWD_RULES,
    DEFAULT_CROWD,
    DEFAULT_DRESS,
    DRESS_RULES,
    FEATURE_KEYWORDS,
    FREE_PRICE_KEYWORDS,
    FREE_TEXT_KEYWORDS,
    GENRE_KEYWORDS,
    LARGE_VENUE_KEYWORDS,
    LONG_DESCRIPTION_CHARS,
    NIGHTCLUB_MINIMUM_AGE,
    POPULARITY_ADJUSTMENTS,
    POPULARITY_START,
    PRICE_AMOUNT_RE,
    PRICE_BOUNDS,
    SHORT_DESCRIPTION_CHARS,
    SOCIAL_PATTERNS,
    TIME_RE,
    VIP_TEXT_KEYWORDS,
    WEBSITE_RE,
    WEEKEND_DAY_NAMES,
)

logger = logging.getLogger(__name__)


def event_text(event: RawEvent) -> str:
    return f"{event.title} {event.description or ''}".lower()


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


# ---------------------------------------------------------------------------
# Text classifiers
# ---------------------------------------------------------------------------


def detect_music_genres(event: RawEvent) -> list[MusicGenre]:
    text = event_text(event)
    genres = [
        genre for genre, keywords in GENRE_KEYWORDS.items()
        if _contains_any(text, keywords)
    ]
    return genres or [MusicGenre.other]


def detect_crowd_type(event: RawEvent) -> CrowdType:
    text = event_text(event)
    for crowd, keywords in CROWD_RULES:
        if _contains_any(text, keywords):
            return crowd
    return DEFAULT_CROWD


def detect_dress_code(event: RawEvent) -> DressCode:
    text = event_text(event)
    for dress, keywords in DRESS_RULES:
        if _contains_any(text, keywords):
            return dress
    return DEFAULT_DRESS


def _bucket_price(amount: int) -> PriceRange:
    if amount == 0:
        return PriceRange.free
    for bound, bucket in PRICE_BOUNDS:
        if amount < bound:
            return PriceRange(bucket)
    return PriceRange.vip


def detect_price_range(event: RawEvent) -> PriceRange:
    """Price tier from the structured ``price`` field, falling back to text."""
    if event.price:
        match = PRICE_AMOUNT_RE.search(event.price)
        if match:
            return _bucket_price(int(match.group(1)))
        if _contains_any(event.price.lower(), FREE_PRICE_KEYWORDS):
            return PriceRange.free

    text = event_text(event)
    if _contains_any(text, FREE_TEXT_KEYWORDS):
        return PriceRange.free
    if _contains_any(text, VIP_TEXT_KEYWORDS):
        return PriceRange.vip
    return PriceRange.unknown


def parse_hour(time_text: str | None) -> int | None:
    """Return the 24h hour from strings like ``"9pm"``, ``"10:30 PM"``, ``"21:00"``."""
    if not time_text:
        return None
    match = TIME_RE.search(time_text.lower())
    if not match:
        return None
    hour = int(match.group(1))
    meridiem = match.group(3)
    if meridiem == "pm" and hour < 12:
        hour += 12
    if meridiem == "am" and hour == 12:
        hour = 0
    return hour


def detect_time_of_day(event: RawEvent) -> TimeOfDay:
    hour = parse_hour(event.time)
    if hour is None:
        return TimeOfDay.evening
    if 5 <= hour < 12:
        return TimeOfDay.morning
    if 12 <= hour < 17:
        return TimeOfDay.afternoon
    if 17 <= hour < 21:
        return TimeOfDay.evening
    return TimeOfDay.night


def detect_is_weekend(event: RawEvent) -> bool:
    parsed = parse_datetime(event.raw_date)
    if parsed is None:
        if _contains_any((event.date or "").lower(), WEEKEND_DAY_NAMES):
            return True
        parsed = parse_display_date(event.date)
    if parsed is None:
        return False
    # Monday is 0: Saturday 5, Sunday 6.
    return parsed.weekday() >= 5


def detect_features(event: RawEvent) -> dict[str, bool]:
    """Map each feature flag name (``has_vip``, ``has_dj``, ...) to its presence."""
    text = event_text(event)
    return {
        flag: _contains_any(text, keywords)
        for flag, keywords in FEATURE_KEYWORDS.items()
    }


def detect_minimum_age(event: RawEvent) -> int | None:
    text = event_text(event)

    match = AGE_RE.search(text)
    if match:
        age = next(group for group in match.groups() if group is not None)
        return int(age)

    if _contains_any(text, ALL_AGES_PHRASES):
        return 0

    if event.party_subcategory == "nightclub":
        return NIGHTCLUB_MINIMUM_AGE
    return None


def calculate_popularity(
    event: RawEvent,
    features: dict[str, bool] | None = None,
    time_of_day: TimeOfDay | None = None,
    is_weekend: bool | None = None,
) -> int:
    """Heuristic 1-100 appeal score independent of any user.

    ``features``, ``time_of_day`` and ``is_weekend`` may be passed in when the
    caller has already detected them.
    """
    adjust = POPULARITY_ADJUSTMENTS
    features = features if features is not None else detect_features(event)
    time_of_day = time_of_day or detect_time_of_day(event)
    if is_weekend is None:
        is_weekend = detect_is_weekend(event)

    score = POPULARITY_START

    if event.venue and _contains_any(event.venue.lower(), LARGE_VENUE_KEYWORDS):
        score += adjust["large_venue"]

    if event.description:
        if len(event.description) > LONG_DESCRIPTION_CHARS:
            score += adjust["long_description"]
        elif len(event.description) < SHORT_DESCRIPTION_CHARS:
            score += adjust["short_description"]

    if event.has_placeholder_image:
        score += adjust["missing_image"]

    for flag, present in features.items():
        if present:
            score += adjust[flag]

    if event.party_subcategory in ("festival", "nightclub"):
        score += adjust[event.party_subcategory]

    if time_of_day == TimeOfDay.night:
        score += adjust["night"]
    if is_weekend:
        score += adjust["weekend"]

    return max(1, min(100, score))


def extract_social_links(event: RawEvent) -> SocialMediaLinks:
    if not event.description:
        return SocialMediaLinks()

    links: dict[str, str] = {}
    for platform, (pattern, template) in SOCIAL_PATTERNS.items():
        match = pattern.search(event.description)
        if match:
            links[platform] = template.format(match.group(1))

    website = WEBSITE_RE.search(event.description)
    if website:
        links["website"] = website.group(1)

    return SocialMediaLinks(**links)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def enrich_event(event: RawEvent) -> EnrichedEvent:
    """Derive party attributes for *event*.

    Non-party events come back unchanged, as an ``EnrichedEvent`` whose
    derived fields are all ``None``.
    """
    base = event.model_dump(include=set(RawEvent.model_fields))
    if not event.is_party:
        return EnrichedEvent(**base)

    time_of_day = detect_time_of_day(event)
    is_weekend = detect_is_weekend(event)
    features = detect_features(event)

    return EnrichedEvent(
        **base,
        **features,
        music_genres=detect_music_genres(event),
        crowd_type=detect_crowd_type(event),
        dress_code=detect_dress_code(event),
        price_range=detect_price_range(event),
        time_of_day=time_of_day,
        is_weekend=is_weekend,
        minimum_age=detect_minimum_age(event),
        popularity=calculate_popularity(event, features, time_of_day, is_weekend),
        social_media_links=extract_social_links(event),
    )


def enrich_events(events: Iterable[RawEvent]) -> list[EnrichedEvent]:
    enriched = [enrich_event(event) for event in events]
    logger.debug("Enriched %d events", len(enriched))
    return enriched
