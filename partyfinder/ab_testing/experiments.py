"""
Blend-weights experiment for personalized recommendations.

A personalized score mixes five sub-scores (base, preference, location,
recency, personalization).  The experiment compares two mixes:

* **A, preference-led (control)**: the default ``PERSONALIZED_WEIGHTS``,
  ``0.1 / 0.4 / 0.2 / 0.2 / 0.1``.
* **B, location-led (treatment)**: ``0.1 / 0.3 / 0.3 / 0.2 / 0.1``, trading
  a tenth of the preference weight for proximity.

A session gets a random variant on its first personalized request and keeps
it afterwards (the app stores it in the session cookie and hands it back via
``set_session_variant``).

Interactions reported for a variant count as positive when the user saved,
shared or attended the event.  A variant wins once its positive rate leads
the other's by ``WINNER_MARGIN`` percentage points and both have feedback.
"""

from __future__ import annotations

import contextvars
import random
import time
from dataclasses import asdict, dataclass
from typing import Any

from ..recommendations.config import PERSONALIZED_WEIGHTS, PersonalizedWeights

WINNER_MARGIN = 5.0
CONTROL = "A"


@dataclass(frozen=True)
class Variant:
    name: str
    label: str
    weights: PersonalizedWeights


@dataclass(frozen=True)
class Experiment:
    id: str
    name: str
    description: str
    variants: tuple[Variant, ...]
    active: bool = True

    def variant(self, name: str) -> Variant | None:
        return next((v for v in self.variants if v.name == name), None)

    @property
    def variant_names(self) -> list[str]:
        return [v.name for v in self.variants]


WEIGHTS_EXPERIMENT = Experiment(
    id="personalized_weights",
    name="Personalized Blend Weights",
    description="Does weighting proximity over stated preferences improve engagement?",
    variants=(
        Variant("A", "Preference-led (control)", PERSONALIZED_WEIGHTS),
        Variant("B", "Location-led (treatment)", PersonalizedWeights(preference=0.3, location=0.3)),
    ),
)

EXPERIMENTS: dict[str, Experiment] = {WEIGHTS_EXPERIMENT.id: WEIGHTS_EXPERIMENT}

# Variant pinned by the current request's session, if any.
_session_variant: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_variant", default=None,
)


def set_session_variant(variant: str | None) -> None:
    _session_variant.set(variant)


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------

_assignments: list[dict[str, Any]] = []


def assign_variant(experiment_id: str = WEIGHTS_EXPERIMENT.id) -> str:
    """Variant for the current request: the session's, else a fresh random pick.

    Inactive or unknown experiments always serve the control.
    """
    experiment = EXPERIMENTS.get(experiment_id)
    if experiment is None or not experiment.active:
        return CONTROL

    pinned = _session_variant.get()
    if pinned in experiment.variant_names:
        return pinned

    variant = random.choice(experiment.variant_names)
    _assignments.append({
        "experiment_id": experiment_id,
        "variant": variant,
        "timestamp": time.time(),
    })
    return variant


def get_variant_weights(
    variant: str, experiment_id: str = WEIGHTS_EXPERIMENT.id,
) -> PersonalizedWeights:
    experiment = EXPERIMENTS.get(experiment_id)
    chosen = experiment.variant(variant) if experiment else None
    return chosen.weights if chosen else PERSONALIZED_WEIGHTS


def describe_experiment(experiment_id: str = WEIGHTS_EXPERIMENT.id) -> dict[str, Any]:
    experiment = EXPERIMENTS.get(experiment_id)
    if experiment is None:
        return {}
    return {
        "id": experiment.id,
        "name": experiment.name,
        "description": experiment.description,
        "active": experiment.active,
        "variants": {
            v.name: {"label": v.label, "weights": asdict(v.weights)}
            for v in experiment.variants
        },
    }


def get_assignments() -> list[dict[str, Any]]:
    return _assignments


def clear_assignments() -> None:
    _assignments.clear()


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass
class VariantCounters:
    searches: int = 0
    positive: int = 0
    negative: int = 0

    @property
    def total_feedback(self) -> int:
        return self.positive + self.negative

    @property
    def satisfaction_rate(self) -> float:
        if not self.total_feedback:
            return 0.0
        return round(self.positive / self.total_feedback * 100, 1)


_counters: dict[str, VariantCounters] = {
    name: VariantCounters() for name in WEIGHTS_EXPERIMENT.variant_names
}


def record_variant_search(variant: str) -> None:
    if variant in _counters:
        _counters[variant].searches += 1


def record_variant_feedback(variant: str, is_positive: bool) -> None:
    counters = _counters.get(variant)
    if counters is None:
        return
    if is_positive:
        counters.positive += 1
    else:
        counters.negative += 1


def get_variant_stats() -> dict[str, Any]:
    """Per-variant counters and satisfaction rates, plus the current winner."""
    result: dict[str, Any] = {
        name: {
            "searches": c.searches,
            "feedback_positive": c.positive,
            "feedback_negative": c.negative,
            "total_feedback": c.total_feedback,
            "satisfaction_rate": c.satisfaction_rate,
        }
        for name, c in _counters.items()
    }

    a, b = _counters["A"], _counters["B"]
    winner = None
    if a.total_feedback and b.total_feedback:
        lead = a.satisfaction_rate - b.satisfaction_rate
        if abs(lead) >= WINNER_MARGIN:
            winner = "A" if lead > 0 else "B"
    result["winner"] = winner
    return result


def clear_variant_stats() -> None:
    for name in _counters:
        _counters[name] = VariantCounters()
