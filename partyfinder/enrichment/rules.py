"""
Keyword tables used by the enrichment classifier.

Every table is plain data so each rule can be tested on its own.  Tables that
resolve to a single value (crowd type, dress code) are *ordered*: the first
rule with a matching keyword wins.  Matching is substring containment over the
lowercased ``"{title} {description}"`` text.
"""
from __future__ import annotations

import re

from .models import CrowdType, DressCode, MusicGenre

# ---------------------------------------------------------------------------
# Music genres (independent checks, first-seen order kept)
# ---------------------------------------------------------------------------

GENRE_KEYWORDS: dict[MusicGenre, tuple[str, ...]] = {
    MusicGenre.electronic: (
        "electronic", "edm", "dj", "techno", "house", "trance", "dubstep",
        "drum and bass", "d&b",
    ),
    MusicGenre.house: ("house",),
    MusicGenre.techno: ("techno",),
    MusicGenre.hip_hop: (
        "hip hop", "hip-hop", "rap", "trap", "r&b", "rhythm and blues",
    ),
    MusicGenre.r_and_b: ("r&b", "rhythm and blues"),
    MusicGenre.latin: ("latin", "salsa", "bachata", "reggaeton", "merengue", "cumbia"),
    MusicGenre.rock: ("rock", "alternative", "indie", "punk", "metal"),
    MusicGenre.pop: ("pop", "top 40", "chart", "hits"),
    MusicGenre.jazz: ("jazz", "blues", "soul", "funk"),
    MusicGenre.reggae: ("reggae", "dancehall", "caribbean", "island"),
    MusicGenre.disco: ("disco", "70s", "80s", "retro"),
}

# ---------------------------------------------------------------------------
# Single-valued attributes (priority order matters)
# ---------------------------------------------------------------------------

CROWD_RULES: tuple[tuple[CrowdType, tuple[str, ...]], ...] = (
    (CrowdType.young, ("college", "student", "young", "youth", "teen")),
    (CrowdType.upscale, ("upscale", "luxury", "vip", "exclusive", "premium")),
    (CrowdType.casual, ("casual", "relaxed", "chill", "laid back", "laid-back")),
    (CrowdType.lgbtq, ("lgbtq", "lgbt", "gay", "lesbian", "queer", "pride")),
)
DEFAULT_CROWD = CrowdType.mixed

DRESS_RULES: tuple[tuple[DressCode, tuple[str, ...]], ...] = (
    (DressCode.formal, ("formal", "black tie", "gala", "elegant")),
    (DressCode.dressy, ("dressy", "dress to impress", "cocktail attire", "semi-formal")),
    (DressCode.smart_casual, ("smart casual", "business casual", "neat")),
    (DressCode.costume, ("costume", "fancy dress", "themed", "halloween")),
)
DEFAULT_DRESS = DressCode.casual

# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------

PRICE_AMOUNT_RE = re.compile(r"\$(\d+)")

# (exclusive upper bound, bucket) checked in order; amounts past the last
# bound are "vip".  Zero is "free".
PRICE_BOUNDS: tuple[tuple[int, str], ...] = (
    (20, "low"),
    (50, "medium"),
    (100, "high"),
)

FREE_PRICE_KEYWORDS = ("free", "no cover")
FREE_TEXT_KEYWORDS = ("free", "no cover", "no charge", "complimentary")
VIP_TEXT_KEYWORDS = ("vip", "bottle service", "premium", "exclusive")

# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

TIME_RE = re.compile(r"(\d+)(?::(\d+))?\s*(am|pm)?", re.IGNORECASE)

WEEKEND_DAY_NAMES = ("saturday", "sunday")

# ---------------------------------------------------------------------------
# Boolean features (not mutually exclusive)
# ---------------------------------------------------------------------------

FEATURE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "has_vip": (
        "vip", "bottle service", "table service", "reserved table",
        "exclusive", "premium",
    ),
    "has_drink_specials": (
        "drink special", "happy hour", "open bar", "free drink", "2 for 1",
        "two for one", "discounted drink", "$5 drink", "cocktail special",
    ),
    "has_food_options": (
        "food", "menu", "dinner", "lunch", "brunch", "appetizer", "cuisine",
        "restaurant", "buffet", "catering",
    ),
    "has_live_music": (
        "live music", "live band", "live performance", "performer", "concert",
        "performing live",
    ),
    "has_dj": ("dj", "disc jockey", "spinning", "turntable", "mix", "set"),
}

# ---------------------------------------------------------------------------
# Age
# ---------------------------------------------------------------------------

AGE_RE = re.compile(r"(\d+)\+|(\d+) and over|(\d+) & over|age (\d+)")

ALL_AGES_PHRASES = ("all ages",)
NIGHTCLUB_MINIMUM_AGE = 21

# ---------------------------------------------------------------------------
# Popularity
# ---------------------------------------------------------------------------

POPULARITY_START = 50
LARGE_VENUE_KEYWORDS = ("arena", "stadium", "center", "theatre", "theater")

POPULARITY_ADJUSTMENTS: dict[str, int] = {
    "large_venue": 20,
    "long_description": 10,
    "short_description": -10,
    "missing_image": -15,
    "has_vip": 10,
    "has_drink_specials": 5,
    "has_food_options": 5,
    "has_live_music": 10,
    "has_dj": 5,
    "festival": 15,
    "nightclub": 10,
    "night": 5,
    "weekend": 10,
}
LONG_DESCRIPTION_CHARS = 500
SHORT_DESCRIPTION_CHARS = 100

# ---------------------------------------------------------------------------
# Social links
# ---------------------------------------------------------------------------

SOCIAL_PATTERNS: dict[str, tuple[re.Pattern[str], str]] = {
    "instagram": (re.compile(r"instagram\.com/([a-zA-Z0-9_.]+)", re.IGNORECASE), "https://instagram.com/{}"),
    "facebook": (re.compile(r"facebook\.com/([a-zA-Z0-9_\-.]+)", re.IGNORECASE), "https://facebook.com/{}"),
    "twitter": (re.compile(r"twitter\.com/([a-zA-Z0-9_]+)", re.IGNORECASE), "https://twitter.com/{}"),
}
WEBSITE_RE = re.compile(
    r"(https?://[a-zA-Z0-9\-.]+\.[a-zA-Z]{2,}(?:/\S*)?)", re.IGNORECASE
)
