"""Score-threshold filtering of scored search results.

Filtering rules:
- Sort by score descending (stable: ties keep gateway order).
- Best score negative -> empty list (nothing is trustworthy).
- Otherwise keep every result with `score >= max(best - margin, 0)`.
- If that empties the set, keep exactly the single best result.

The margin defaults to `SEARCH_SCORE_MARGIN` (3).
"""

import logging
import os

from tdai.core.routing_types import ScoredResult


logger = logging.getLogger(__name__)

SCORE_MARGIN = int(os.getenv("SEARCH_SCORE_MARGIN", "3"))


def filter_results(scored: list[ScoredResult], margin: int = SCORE_MARGIN) -> list[ScoredResult]:
    """Keep results close enough to the best score.

    Returns:
        Filtered results, best first. Never non-empty with a negative best
        score; never empty when the input was non-empty and the best score
        is non-negative.
    """
    if not scored:
        logger.info("Result filter: no results to filter")
        return []

    ranked = sorted(scored, key=lambda item: item.score, reverse=True)
    best = ranked[0].score

    if best < 0:
        logger.info("Result filter: best score %d is negative; dropping %d result(s)", best, len(ranked))
        return []

    threshold = max(best - margin, 0)
    kept = [item for item in ranked if item.score >= threshold]

    if not kept:
        kept = ranked[:1]

    logger.info(
        "Result filter: kept %d/%d (best=%d, threshold=%d)",
        len(kept),
        len(ranked),
        best,
        threshold,
    )
    return kept
