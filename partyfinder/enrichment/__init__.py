"""
Party event enrichment.

Responsibilities:
- Define the raw and enriched event models.
- Infer genre, crowd, dress code, price tier, timing, age and feature flags
  from an event's free text and structured fields.
- Compute the user-independent popularity heuristic.
- Provide day/time filters and the listing-quality sort for browsing.
"""
