"""Final "do we search" policy.

Decision rules:
- `need_search` is the disjunction of:
    - model verdict `needs_web`,
    - model verdict volatility in {high, medium},
    - regex volatility verdict,
    - regex `suggests_web` heuristic,
    - model domain in `HIGH_VOLATILITY_DOMAINS`,
    - entity router versus-sports flag.
- A future question (beyond the near-term horizon) suppresses searching
  unconditionally.
- A simple greeting with no regex volatility signal never searches.

Advisory layers can only add reasons to search. An unavailable verdict or
entity intent contributes nothing and removes nothing.
"""

import logging

from tdai.core.routing_types import (
    ClassificationVerdict,
    EntityIntent,
    ModelEntityIntent,
    ModelVerdict,
    SearchDecision,
)
from tdai.nlp.topic_classifier import TopicSignals, is_future_question


logger = logging.getLogger(__name__)

HIGH_VOLATILITY_DOMAINS = frozenset({
    "price",
    "tech_product",
    "finance",
    "politics",
    "law",
    "sport",
    "current_affairs",
    "weather",
})

ELEVATED_VOLATILITY = frozenset({"high", "medium"})


def search_reasons(
    signals: TopicSignals,
    verdict: ModelVerdict | None = None,
    entity_intent: ModelEntityIntent | None = None,
) -> list[str]:
    """Names of every signal voting for a web search."""
    reasons: list[str] = []

    if isinstance(verdict, ClassificationVerdict):
        if verdict.needs_web:
            reasons.append("model_needs_web")
        if verdict.volatility in ELEVATED_VOLATILITY:
            reasons.append(f"model_volatility_{verdict.volatility}")
        if verdict.domain in HIGH_VOLATILITY_DOMAINS:
            reasons.append(f"model_domain_{verdict.domain}")

    if signals.volatile:
        reasons.append("regex_volatile")

    if signals.suggests_web:
        reasons.append("regex_suggests_web")

    if isinstance(entity_intent, EntityIntent) and entity_intent.is_versus_sport:
        reasons.append("versus_sport")

    return reasons


def decide_search(
    question: str,
    signals: TopicSignals,
    verdict: ModelVerdict | None = None,
    entity_intent: ModelEntityIntent | None = None,
    current_year: int | None = None,
) -> SearchDecision:
    """Compose the final search decision for one effective question."""
    has_verdict = isinstance(verdict, ClassificationVerdict)
    domain = verdict.domain if has_verdict else None
    country = verdict.country if has_verdict else "france"

    future = is_future_question(question, current_year)
    volatile = signals.volatile or (has_verdict and verdict.volatility in ELEVATED_VOLATILITY)

    if signals.greeting and not signals.volatile:
        decision = SearchDecision(
            need_search=False,
            volatile=False,
            is_future=future,
            reasons=("greeting",),
            domain=domain,
            country=country,
        )
        logger.info("Search decision for %r: %s", question, decision)
        return decision

    reasons = search_reasons(signals, verdict, entity_intent)

    if future:
        need_search = False
        reasons.append("future_override")
    else:
        need_search = bool(reasons)

    decision = SearchDecision(
        need_search=need_search,
        volatile=volatile,
        is_future=future,
        reasons=tuple(reasons),
        domain=domain,
        country=country,
    )
    logger.info("Search decision for %r: %s", question, decision)
    return decision
