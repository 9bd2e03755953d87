"""
Party recommendation engine.

Responsibilities:
- Score enriched events on base quality, preference match, location,
  recency and interaction history.
- Blend the sub-scores into personalized, trending and nearby rankings.
- Hold the scoring weights and service configuration.
- Provide the calling layer's enrichment cache and local event source.
"""
