from __future__ import annotations

from collections import Counter
from typing import Any

from .interactions import get_interactions, is_positive


def compute_analytics(searches: list[dict[str, Any]]) -> dict[str, Any]:
    total = len(searches)

    # Searches per entry point
    mode_counter: Counter[str] = Counter(s.get("mode", "unknown") for s in searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Requested genres and party types
    genre_counter: Counter[str] = Counter()
    party_type_counter: Counter[str] = Counter()
    for s in searches:
        for g in s.get("music_genres", []) or []:
            genre_counter[g] += 1
        for p in s.get("party_types", []) or []:
            party_type_counter[p] += 1
    top_genres = [{"name": n, "count": c} for n, c in genre_counter.most_common(10)]
    top_party_types = [{"name": n, "count": c} for n, c in party_type_counter.most_common(10)]

    with_location = sum(1 for s in searches if s.get("has_location"))

    # Interaction summary
    interactions = get_interactions()
    kinds = ("viewed", "clicked", "saved", "shared", "attended")
    interaction_counts = {k: sum(1 for i in interactions if getattr(i, k)) for k in kinds}
    positive = sum(1 for i in interactions if is_positive(i))

    return {
        "total_searches": total,
        "searches_by_mode": dict(mode_counter),
        "avg_response_time_ms": avg_time,
        "top_genres": top_genres,
        "top_party_types": top_party_types,
        "location_usage": round(with_location / total * 100, 1) if total else 0.0,
        "interaction_summary": {
            "total": len(interactions),
            **interaction_counts,
            "positive_rate": round(positive / len(interactions) * 100, 1) if interactions else 0.0,
        },
    }
