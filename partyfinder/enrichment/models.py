from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class MusicGenre(str, Enum):
    electronic = "electronic"
    hip_hop = "hip-hop"
    pop = "pop"
    rock = "rock"
    latin = "latin"
    r_and_b = "r&b"
    jazz = "jazz"
    reggae = "reggae"
    house = "house"
    techno = "techno"
    disco = "disco"
    other = "other"


class CrowdType(str, Enum):
    young = "young"
    mixed = "mixed"
    upscale = "upscale"
    casual = "casual"
    lgbtq = "lgbtq"
    other = "other"


class DressCode(str, Enum):
    casual = "casual"
    smart_casual = "smart casual"
    dressy = "dressy"
    formal = "formal"
    costume = "costume"
    other = "other"


class PriceRange(str, Enum):
    free = "free"
    low = "low"
    medium = "medium"
    high = "high"
    vip = "vip"
    unknown = "unknown"


class TimeOfDay(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    night = "night"
    all_day = "all-day"


class _EventModel(BaseModel):
    # Upstream records arrive camelCased (rawDate, partySubcategory, ...).
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SocialMediaLinks(_EventModel):
    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    website: str | None = None


class RawEvent(_EventModel):
    """An event record as returned by the events-search collaborator."""

    id: str = ""
    title: str = ""
    description: str | None = None
    date: str = ""
    time: str | None = None
    raw_date: str | None = None
    location: str = ""
    venue: str | None = None
    category: str = ""
    party_subcategory: str | None = None
    price: str | None = None
    coordinates: list[float] | None = Field(
        default=None, description="[longitude, latitude]"
    )
    latitude: float | None = None
    longitude: float | None = None
    url: str | None = None
    image: str | None = None
    is_party_event: bool | None = None
    source: str | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_party(self) -> bool:
        return self.category == "party" or bool(self.is_party_event)

    @property
    def lat_lng(self) -> tuple[float, float] | None:
        """Return ``(latitude, longitude)`` or ``None`` when the event has no usable position.

        NaN or infinite values count as missing.
        """
        if self.coordinates is not None and len(self.coordinates) == 2:
            longitude, latitude = self.coordinates
        elif self.latitude is not None and self.longitude is not None:
            latitude, longitude = self.latitude, self.longitude
        else:
            return None
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            return None
        return latitude, longitude

    @property
    def has_placeholder_image(self) -> bool:
        return not self.image or "placeholder" in self.image


class EnrichedEvent(RawEvent):
    """A raw event plus the attributes inferred by the classifier.

    Every derived field is optional: ``None`` means the attribute was not
    inferred (always the case for non-party events).
    """

    music_genres: list[MusicGenre] | None = None
    crowd_type: CrowdType | None = None
    dress_code: DressCode | None = None
    price_range: PriceRange | None = None
    time_of_day: TimeOfDay | None = None
    is_weekend: bool | None = None
    has_vip: bool | None = Field(default=None, alias="hasVIP")
    has_drink_specials: bool | None = None
    has_food_options: bool | None = None
    has_live_music: bool | None = None
    has_dj: bool | None = Field(default=None, alias="hasDJ")
    minimum_age: int | None = None
    popularity: int | None = None
    social_media_links: SocialMediaLinks | None = None
