"""Search-summary context assembly for core orchestration.

Architectural role:
    Converts the filtered, scored search results into the numbered summary
    block injected into the answer prompt by `tdai.prompting.prompt_builder`.

Ranking:
    No scoring happens here. Results arrive best-first from
    `tdai.retrieval.result_filter` and only the first `SUMMARY_LIMIT` (3)
    are summarized; the gateway never fetches more than ~5.

Determinism:
    Deterministic for a fixed ordered input. Empty input yields an empty
    string so the caller can switch to the "no reliable information" branch.
"""

from tdai.core.routing_types import ScoredResult, SearchResult


SUMMARY_LIMIT = 3
MAX_SNIPPET_CHARS = 400


def top_results(scored: list[ScoredResult], limit: int = SUMMARY_LIMIT) -> list[SearchResult]:
    """Return the first `limit` results, already in best-first order."""
    return [item.result for item in scored[:limit]]


def _trim(text: str, limit: int = MAX_SNIPPET_CHARS) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "…"


def build_search_context(scored: list[ScoredResult], limit: int = SUMMARY_LIMIT) -> str:
    """Build the numbered search-summary block.

    Format, one entry per result:
        `[n] <title>`
        `<snippet>`
        `Source : <url>`

    Edge cases:
        - Empty input returns "".
        - Missing titles or snippets are rendered as empty lines rather than
          dropped, so numbering stays aligned with the sources list.
    """
    results = top_results(scored, limit)
    if not results:
        return ""

    entries = []
    for index, result in enumerate(results, start=1):
        entries.append(
            f"[{index}] {result.title.strip()}\n"
            f"{_trim(result.snippet)}\n"
            f"Source : {result.url.strip()}"
        )

    return "\n\n".join(entries)
