from __future__ import annotations

from collections import defaultdict

from ..recommendations.models import EventInteraction

_history: dict[str, list[EventInteraction]] = defaultdict(list)

POSITIVE_SIGNALS = ("saved", "shared", "attended")


def is_positive(interaction: EventInteraction) -> bool:
    return any(getattr(interaction, signal) for signal in POSITIVE_SIGNALS)


def record_interaction(user_id: str, interaction: EventInteraction) -> None:
    _history[user_id].append(interaction)


def get_interactions(user_id: str | None = None) -> list[EventInteraction]:
    """History for one user, or every recorded interaction when *user_id* is None."""
    if user_id is None:
        return [i for items in _history.values() for i in items]
    return list(_history.get(user_id, []))


def clear_interactions() -> None:
    _history.clear()
