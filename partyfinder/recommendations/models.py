from __future__ import annotations

import time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..enrichment.models import (
    CrowdType,
    EnrichedEvent,
    MusicGenre,
    PriceRange,
    RawEvent,
)
from .config import DEFAULT_RECOMMENDATION_CONFIG


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Scoring context ─────────────────────────────────────────────────────


class FeaturePreferences(_CamelModel):
    live_music: bool | None = None
    dj: bool | None = None
    food_options: bool | None = None
    drink_specials: bool | None = None
    vip_options: bool | None = None


class UserPreferences(_CamelModel):
    music_genres: list[MusicGenre] = Field(default_factory=list)
    party_types: list[str] = Field(default_factory=list)
    price_ranges: list[PriceRange] = Field(default_factory=list)
    crowd_types: list[CrowdType] = Field(default_factory=list)
    minimum_age: int | None = Field(
        default=None, ge=0, description="Highest age restriction the user accepts",
    )
    max_distance: float | None = Field(default=None, gt=0, description="Miles")
    preferred_days: list[Literal["weekday", "weekend"]] = Field(default_factory=list)
    preferred_times: list[Literal["day", "night"]] = Field(default_factory=list)
    features: FeaturePreferences | None = None


class UserLocation(_CamelModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class EventInteraction(_CamelModel):
    event_id: str = Field(..., min_length=1)
    viewed: bool = False
    clicked: bool = False
    saved: bool = False
    shared: bool = False
    attended: bool = False
    timestamp: float = Field(default_factory=time.time)


class RecommendationResult(_CamelModel):
    event: EnrichedEvent
    score: float
    match_reasons: list[str] = Field(default_factory=list)
    distance: float | None = Field(default=None, description="Miles from the user")


# ── API payloads ────────────────────────────────────────────────────────


class PersonalizedRequest(BaseModel):
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    location: UserLocation | None = None
    interactions: list[EventInteraction] | None = Field(
        default=None,
        description="Interaction history; the stored history for user_id is used when omitted",
    )
    user_id: str | None = None
    events: list[RawEvent] | None = Field(
        default=None, description="Events to rank; the local data source is used when omitted",
    )
    limit: int = Field(default=DEFAULT_RECOMMENDATION_CONFIG.default_limit, ge=1, le=50)


class TrendingRequest(BaseModel):
    location: UserLocation | None = None
    events: list[RawEvent] | None = None
    limit: int = Field(default=DEFAULT_RECOMMENDATION_CONFIG.default_limit, ge=1, le=50)


class NearbyRequest(BaseModel):
    location: UserLocation
    max_distance: float = Field(
        default=DEFAULT_RECOMMENDATION_CONFIG.default_max_distance, gt=0, description="Miles",
    )
    events: list[RawEvent] | None = None
    limit: int = Field(default=DEFAULT_RECOMMENDATION_CONFIG.default_limit, ge=1, le=50)


class RecommendationResponse(BaseModel):
    recommendations: list[RecommendationResult]
    total_candidates: int
    variant: str | None = None


class EnrichRequest(BaseModel):
    events: list[RawEvent] = Field(default_factory=list)


class EnrichResponse(BaseModel):
    events: list[EnrichedEvent]


class InteractionRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    interaction: EventInteraction
    variant: str | None = None


class InteractionResponse(BaseModel):
    status: str
    total_interactions: int
