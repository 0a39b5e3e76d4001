"""NLP utilities for the web-search decision pipeline.

Module scope:
- Text normalization and keyword extraction (`normalizer`).
- Keyword tables per topic/country category (`vocabulary`).
- Regex topic detectors and aggregated signals (`topic_classifier`).
- Advisory model classifier and entity/intent router (`model_classifier`).
- Search locale routing (`locale_router`).
- Search-engine query rewriting (`query_rewriter`).
- Follow-up trigger resolution (`followup`).

Determinism profile:
- Mix of deterministic rule logic and best-effort model-backed calls.
"""
