from __future__ import annotations

from datetime import datetime

import pytest

from partyfinder.enrichment.models import MusicGenre, RawEvent
from partyfinder.recommendations.config import (
    DEFAULT_RECOMMENDATION_CONFIG,
    PersonalizedWeights,
    TrendingWeights,
)
from partyfinder.recommendations.engine import get_nearby, get_personalized, get_trending
from partyfinder.recommendations.models import (
    EventInteraction,
    NearbyRequest,
    PersonalizedRequest,
    TrendingRequest,
    UserLocation,
    UserPreferences,
)

NOW = datetime(2024, 6, 10, 12, 0)
NYC = UserLocation(latitude=40.7128, longitude=-74.0060)
LOCATION_ONLY = PersonalizedWeights(
    base=0.0, preference=0.0, location=1.0, recency=0.0, personalization=0.0,
)


def _techno(event_id: str, **fields) -> RawEvent:
    fields.setdefault("raw_date", "2024-06-12T23:00:00")
    return RawEvent(
        id=event_id,
        category="party",
        title="Techno Night",
        description="Resident DJ",
        time="11pm",
        **fields,
    )


NEAR = _techno("near", latitude=40.7128, longitude=-74.0060)
MID = _techno("mid", latitude=40.8575, longitude=-74.0060)  # ~10 miles north
FAR = _techno("far", coordinates=[-74.0060, 41.7128])  # ~69 miles north
NOWHERE = _techno("nowhere")


def _ids(results):
    return [r.event.id for r in results]


class TestPersonalized:
    def test_returns_every_event_sorted_by_score(self):
        results = get_personalized(
            [FAR, NOWHERE, MID, NEAR], UserPreferences(), NYC, now=NOW,
        )
        assert len(results) == 4
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_location_weighting(self):
        results = get_personalized(
            [FAR, NOWHERE, MID, NEAR], UserPreferences(), NYC,
            weights=LOCATION_ONLY, now=NOW,
        )
        assert _ids(results)[:2] == ["near", "mid"]
        assert results[0].score == pytest.approx(100.0)
        assert results[1].score == pytest.approx(100.0 * (1 - 10.0 / 30.0), abs=0.1)

    def test_preference_max_distance(self):
        results = get_personalized(
            [MID], UserPreferences(max_distance=5), NYC, weights=LOCATION_ONLY, now=NOW,
        )
        assert results[0].score == 0.0
        assert results[0].distance == pytest.approx(10.0, abs=0.05)

    def test_reason_order(self):
        prefs = UserPreferences(music_genres=[MusicGenre.techno])
        [result] = get_personalized([NEAR], prefs, NYC, now=NOW)
        assert result.match_reasons == [
            "Matches your music preferences: techno",
            "Very close to you (less than 1 mile)",
            "Happening soon (in 3 days)",
        ]

    def test_without_location_has_no_distance(self):
        [result] = get_personalized([NEAR], UserPreferences(), now=NOW)
        assert result.distance is None

    def test_nan_latitude_has_no_distance(self):
        broken = _techno("broken", latitude=float("nan"), longitude=-74.0060)
        results = get_personalized(
            [broken, MID], UserPreferences(), NYC, weights=LOCATION_ONLY, now=NOW,
        )
        assert _ids(results) == ["mid", "broken"]
        assert results[1].distance is None
        assert results[1].score == 0.0

    def test_history_resolved_from_known_events(self):
        past = RawEvent(
            id="past-techno", category="party", title="Techno Warehouse",
            raw_date="2024-05-01T23:00:00",
        )
        history = [EventInteraction(event_id="past-techno", attended=True)]

        [with_catalog] = get_personalized(
            [NEAR], UserPreferences(), interactions=history, known_events=[past], now=NOW,
        )
        [without_catalog] = get_personalized(
            [NEAR], UserPreferences(), interactions=history, now=NOW,
        )
        assert "You've attended 1 similar events" in with_catalog.match_reasons
        assert "You've attended 1 similar events" not in without_catalog.match_reasons
        assert with_catalog.score > without_catalog.score

    def test_past_events_are_kept(self):
        past = _techno("past", raw_date="2024-06-01T23:00:00")
        results = get_personalized([past], UserPreferences(), now=NOW)
        assert _ids(results) == ["past"]
        assert "This event has already happened" in results[0].match_reasons

    def test_empty_input(self):
        assert get_personalized([], UserPreferences(), NYC, now=NOW) == []


class TestTrending:
    def test_sooner_events_rank_higher(self):
        soon = _techno("soon", raw_date="2024-06-11T23:00:00")
        later = _techno("later", raw_date="2024-07-17T23:00:00")
        results = get_trending([later, soon], now=NOW)
        assert _ids(results) == ["soon", "later"]
        assert results[0].match_reasons[0] == "Trending party event"
        assert all(r.distance is None for r in results)

    def test_today_ranks_above_ten_days_out(self):
        today = _techno("today", raw_date="2024-06-10T12:00:00")
        later = _techno("later", raw_date="2024-06-20T12:00:00")
        results = get_trending([later, today], now=NOW)
        assert _ids(results) == ["today", "later"]
        assert results[0].match_reasons == ["Trending party event", "Happening today!"]
        # Equal base scores, so the gap is 0.4 x (100 - 70).
        assert results[0].score - results[1].score == pytest.approx(12.0)

    def test_location_nudges_ranking(self):
        # Both on a Wednesday so popularity is identical.
        results = get_trending([FAR, NEAR], NYC, now=NOW)
        assert _ids(results) == ["near", "far"]
        near, far = results
        assert near.match_reasons[-1] == "Very close to you (less than 1 mile)"
        assert far.distance == pytest.approx(69.09, abs=0.05)
        assert len(far.match_reasons) == 2

    def test_location_weight_is_configurable(self):
        no_location = TrendingWeights(location=0.0)
        near, far = get_trending([NEAR, FAR], NYC, weights=no_location, now=NOW)
        assert near.score == pytest.approx(far.score)


class TestNearby:
    def test_filters_and_orders_by_distance(self):
        results = get_nearby([FAR, MID, NOWHERE, NEAR], NYC, 30, now=NOW)
        assert _ids(results) == ["near", "mid"]
        assert results[0].match_reasons[0] == "Less than 1 mile away"
        assert results[1].match_reasons[0] == "10.0 miles away"
        assert results[1].distance == pytest.approx(10.0, abs=0.05)

    def test_ten_mile_radius(self):
        inside = _techno("inside", latitude=40.7850, longitude=-74.0060)  # ~5 miles
        results = get_nearby([FAR, inside, NOWHERE, NEAR], NYC, 10, now=NOW)
        assert _ids(results) == ["near", "inside"]
        assert all(r.distance <= 10 for r in results)

    def test_ties_broken_by_score(self):
        plain = _techno("plain", latitude=40.8575, longitude=-74.0060)
        pictured = _techno(
            "pictured", latitude=40.8575, longitude=-74.0060,
            image="https://example.com/night.jpg", url="https://example.com/night",
        )
        results = get_nearby([plain, pictured], NYC, 30, now=NOW)
        assert _ids(results) == ["pictured", "plain"]

    def test_wide_radius_includes_far_events(self):
        results = get_nearby([FAR, NEAR], NYC, 100, now=NOW)
        assert _ids(results) == ["near", "far"]

    def test_non_positive_radius(self):
        assert get_nearby([NEAR], NYC, 0, now=NOW) == []

    def test_no_positioned_events(self):
        assert get_nearby([NOWHERE], NYC, now=NOW) == []

    def test_nan_coordinates_are_excluded(self):
        broken = _techno("broken", latitude=float("nan"), longitude=-74.0060)
        inverted = _techno("inverted", coordinates=[float("nan"), 40.7128])
        results = get_nearby([broken, inverted, NEAR], NYC, 30, now=NOW)
        assert _ids(results) == ["near"]


class TestRequestDefaults:
    def test_limit_follows_config(self):
        expected = DEFAULT_RECOMMENDATION_CONFIG.default_limit
        assert PersonalizedRequest().limit == expected
        assert TrendingRequest().limit == expected
        assert NearbyRequest(location=NYC).limit == expected

    def test_nearby_radius_follows_config(self):
        request = NearbyRequest(location=NYC)
        assert request.max_distance == DEFAULT_RECOMMENDATION_CONFIG.default_max_distance
