from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_EVENTS_PATH = Path(__file__).resolve().parent.parent / "data" / "events.json"


@dataclass(frozen=True)
class RecommendationConfig:
    events_path: Path = Path(os.getenv("PARTYFINDER_EVENTS_PATH", str(_DEFAULT_EVENTS_PATH)))
    cache_ttl: float = float(os.getenv("PARTYFINDER_CACHE_TTL", "300"))
    default_max_distance: float = 30.0
    trending_radius: float = 50.0
    default_limit: int = int(os.getenv("PARTYFINDER_DEFAULT_LIMIT", "20"))


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()


# ---------------------------------------------------------------------------
# Scoring constants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BaseScoreBonuses:
    default_popularity: int = 50
    long_description_chars: int = 300
    long_description: int = 5
    real_image: int = 5
    coordinates: int = 5
    url: int = 5
    has_vip: int = 2
    has_drink_specials: int = 2
    has_food_options: int = 2
    has_live_music: int = 3
    has_dj: int = 2


@dataclass(frozen=True)
class PreferencePoints:
    genres: float = 20.0  # scaled by the fraction of requested genres matched
    party_type: float = 20.0
    price: float = 15.0
    crowd: float = 15.0
    day: float = 10.0
    time: float = 10.0
    feature: float = 5.0
    age_ok: float = 5.0
    age_penalty: float = -50.0


@dataclass(frozen=True)
class InteractionWeights:
    viewed: int = 2
    clicked: int = 5
    saved: int = 10
    shared: int = 15
    attended: int = 20


@dataclass(frozen=True)
class PersonalizedWeights:
    base: float = 0.1
    preference: float = 0.4
    location: float = 0.2
    recency: float = 0.2
    personalization: float = 0.1


@dataclass(frozen=True)
class TrendingWeights:
    base: float = 0.6
    recency: float = 0.4
    # Applied as score * (1 - location) + location_score * location.
    location: float = 0.1


@dataclass(frozen=True)
class NearbyWeights:
    base: float = 0.3
    distance: float = 0.5
    recency: float = 0.2


BASE_BONUSES = BaseScoreBonuses()
PREFERENCE_POINTS = PreferencePoints()
INTERACTION_WEIGHTS = InteractionWeights()
PERSONALIZED_WEIGHTS = PersonalizedWeights()
TRENDING_WEIGHTS = TrendingWeights()
NEARBY_WEIGHTS = NearbyWeights()
