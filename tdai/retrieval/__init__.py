"""Retrieval package.

Architectural role:
    Turns raw web search results into the trusted subset handed to the
    answer prompt.

Scope:
    - `web`: external search gateway (SerpAPI, Brave).
    - `scoring`: per-result relevance score against the question.
    - `result_filter`: dynamic threshold relative to the best score.
    - `context_builder`: numbered summary block for the top results.
"""
