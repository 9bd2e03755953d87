from __future__ import annotations

import os
import time
from typing import Any, Literal

from fastapi import FastAPI, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .ab_testing.experiments import (
    assign_variant,
    describe_experiment,
    get_assignments,
    get_variant_stats,
    get_variant_weights,
    record_variant_feedback,
    record_variant_search,
    set_session_variant,
)
from .analytics.aggregator import compute_analytics
from .analytics.interactions import get_interactions, is_positive, record_interaction
from .analytics.store import get_searches, record_search
from .enrichment.filters import filter_by_day_of_week, filter_by_time_of_day, rank_party_listings
from .enrichment.models import RawEvent
from .recommendations.cache import EnrichmentCache
from .recommendations.data_store import get_events
from .recommendations.engine import get_nearby, get_personalized, get_trending
from .recommendations.models import (
    EnrichRequest,
    EnrichResponse,
    InteractionRequest,
    InteractionResponse,
    NearbyRequest,
    PersonalizedRequest,
    RecommendationResponse,
    RecommendationResult,
    TrendingRequest,
)

app = FastAPI(title="PartyFinder Recommendation API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "partyfinder-secret-change-in-production"),
)

enrichment_cache = EnrichmentCache()


def _candidate_events(events: list[RawEvent] | None) -> list[RawEvent]:
    return events if events is not None else get_events()


def _respond(
    mode: str,
    start_time: float,
    results: list[RecommendationResult],
    limit: int,
    variant: str | None = None,
    **log_fields: Any,
) -> RecommendationResponse:
    top = results[:limit]
    record_search(mode, {
        **log_fields,
        "total_candidates": len(results),
        "results_returned": len(top),
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
    })
    return RecommendationResponse(
        recommendations=top, total_candidates=len(results), variant=variant,
    )


# ── Events ──────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/events", response_model=EnrichResponse)
def list_events(
    time_of_day: Literal["all", "day", "night"] = "all",
    day_of_week: Literal["all", "weekday", "weekend"] = "all",
    limit: int = Query(default=50, ge=1, le=200),
) -> EnrichResponse:
    enriched = enrichment_cache.enrich(get_events())
    enriched = filter_by_day_of_week(filter_by_time_of_day(enriched, time_of_day), day_of_week)
    return EnrichResponse(events=rank_party_listings(enriched)[:limit])


@app.post("/events/enrich", response_model=EnrichResponse)
def enrich(body: EnrichRequest) -> EnrichResponse:
    return EnrichResponse(events=enrichment_cache.enrich(body.events))


# ── Recommendations ─────────────────────────────────────────────────────


@app.post("/recommendations/personalized", response_model=RecommendationResponse)
def personalized(body: PersonalizedRequest, request: Request) -> RecommendationResponse:
    start_time = time.time()

    # Reuse the session-pinned variant; pin a fresh one on first use.
    session_variant = request.session.get("ab_variant")
    set_session_variant(session_variant)
    variant = assign_variant()
    if not session_variant:
        request.session["ab_variant"] = variant
    record_variant_search(variant)

    interactions = body.interactions
    if interactions is None and body.user_id:
        interactions = get_interactions(body.user_id)

    results = get_personalized(
        _candidate_events(body.events),
        body.preferences,
        body.location,
        interactions,
        weights=get_variant_weights(variant),
        known_events=get_events(),
    )
    return _respond(
        "personalized", start_time, results, body.limit, variant,
        music_genres=[g.value for g in body.preferences.music_genres],
        party_types=body.preferences.party_types,
        has_location=body.location is not None,
        interaction_count=len(interactions or []),
    )


@app.post("/recommendations/trending", response_model=RecommendationResponse)
def trending(body: TrendingRequest) -> RecommendationResponse:
    start_time = time.time()
    results = get_trending(_candidate_events(body.events), body.location)
    return _respond(
        "trending", start_time, results, body.limit,
        has_location=body.location is not None,
    )


@app.post("/recommendations/nearby", response_model=RecommendationResponse)
def nearby(body: NearbyRequest) -> RecommendationResponse:
    start_time = time.time()
    results = get_nearby(_candidate_events(body.events), body.location, body.max_distance)
    return _respond(
        "nearby", start_time, results, body.limit,
        has_location=True,
        max_distance=body.max_distance,
    )


@app.post("/interactions", response_model=InteractionResponse)
def post_interaction(body: InteractionRequest, request: Request) -> InteractionResponse:
    record_interaction(body.user_id, body.interaction)
    variant = body.variant or request.session.get("ab_variant")
    if variant:
        record_variant_feedback(variant, is_positive(body.interaction))
    return InteractionResponse(
        status="recorded", total_interactions=len(get_interactions(body.user_id)),
    )


# ── Operations ──────────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_searches())


@app.get("/cache/stats")
def cache_stats() -> dict:
    return enrichment_cache.stats()


@app.get("/ab-test/results")
def ab_test_results() -> dict:
    return {
        "experiment": describe_experiment(),
        "total_assignments": len(get_assignments()),
        "variant_stats": get_variant_stats(),
    }
