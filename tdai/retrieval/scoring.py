"""Relevance scoring of search results against the user's question.

Scoring model:
- Hand-tuned linear integer score over the normalized concatenation of a
  result's title, snippet and URL.
- Keyword overlap: +2 per question keyword found verbatim in the result text;
  a flat penalty when no keyword overlaps at all.
- Topical rules, each keyed off "is the question about X" and "does the
  result text mention X":
    - product/service +4, price (with a currency/subscription cue) +3,
      person-in-role +3 (bonus only);
    - sports, politics, real estate, entertainment: +2 when both sides match,
      a penalty when only the result drifts onto the topic.
- Year adjustment per distinct year in the text: beyond `current_year + 1`
  is penalized, current or previous year is rewarded.
- Trusted-domain bonus with parent-domain walking, plus a domestic-TLD bonus
  for price questions.

Determinism:
- Pure function of (question, result, current_year, rules).

Testing:
- Every rule is toggled independently through `ScoringRules`, and
  `score_components` exposes the per-rule contributions.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urlparse

from tdai.core.routing_types import ScoredResult, SearchResult
from tdai.nlp import vocabulary as vocab
from tdai.nlp.normalizer import extract_keywords, normalize, parse_question
from tdai.nlp.topic_classifier import (
    TopicSignals,
    analyze_topics,
    extract_years,
    is_person_in_role_question,
    is_product_or_service_question,
    is_sports_like_question,
    mentions_currency,
    mentions_entertainment,
    mentions_politics,
    mentions_real_estate,
)


logger = logging.getLogger(__name__)


# =========================================================
# WEIGHTS
# =========================================================

KEYWORD_HIT_POINTS = 2
NO_OVERLAP_PENALTY = -4

PRODUCT_BONUS = 4
PRICE_BONUS = 3
PERSON_ROLE_BONUS = 3

TOPIC_MATCH_BONUS = 2
SPORTS_DRIFT_PENALTY = -4
POLITICS_DRIFT_PENALTY = -4
REAL_ESTATE_DRIFT_PENALTY = -5
ENTERTAINMENT_DRIFT_PENALTY = -5

FUTURE_YEAR_PENALTY = -3
RECENT_YEAR_BONUS = 1

TRUSTED_DOMAIN_BONUS = 2
DOMESTIC_TLD_BONUS = 1

# Public suffixes never treated as a trusted parent domain.
FORBIDDEN_SUFFIXES = frozenset({"co.uk", "com.au", "co.jp", "com.br", "org.uk"})


@dataclass(frozen=True)
class ScoringRules:
    """Independent on/off switches for every scoring rule."""

    keyword_overlap: bool = True
    product: bool = True
    price: bool = True
    person_in_role: bool = True
    sports: bool = True
    politics: bool = True
    real_estate: bool = True
    entertainment: bool = True
    years: bool = True
    trusted_domain: bool = True
    domestic_tld: bool = True


DEFAULT_RULES = ScoringRules()


# =========================================================
# HOSTS
# =========================================================

def _host(url: str) -> str:
    if not url:
        return ""
    host = (urlparse(url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def is_trusted_host(host: str) -> bool:
    """Allowlist check with parent-domain walking (`fr.wikipedia.org` -> `wikipedia.org`)."""
    if not host:
        return False

    host = host.lower()
    if host.startswith("www."):
        host = host[4:]

    if host in vocab.TRUSTED_DOMAINS:
        return True

    parts = host.split(".")
    for i in range(1, len(parts) - 1):
        candidate = ".".join(parts[i:])
        if candidate in FORBIDDEN_SUFFIXES:
            continue
        if candidate in vocab.TRUSTED_DOMAINS:
            return True
    return False


def has_domestic_tld(host: str) -> bool:
    return bool(host) and host.endswith(vocab.DOMESTIC_TLDS)


# =========================================================
# SCORING
# =========================================================

def _topic_pair(name: str, question_side: bool, text_side: bool, drift_penalty: int):
    """Symmetric topic rule: bonus when both match, penalty on result-only drift."""
    if question_side and text_side:
        return (f"{name}_match", TOPIC_MATCH_BONUS)
    if text_side and not question_side:
        return (f"{name}_drift", drift_penalty)
    return None


def score_components(
    question: str,
    result: SearchResult,
    current_year: int | None = None,
    rules: ScoringRules = DEFAULT_RULES,
    signals: TopicSignals | None = None,
    keywords: list[str] | None = None,
) -> list[tuple[str, int]]:
    """Return the `(rule, points)` contributions for one result.

    `signals` and `keywords` may be passed precomputed when scoring many
    results for the same question.
    """
    if current_year is None:
        current_year = datetime.now().year
    if signals is None:
        signals = analyze_topics(question)
    if keywords is None:
        keywords = extract_keywords(question)

    text = normalize(f"{result.title} {result.snippet} {result.url}")
    host = _host(result.url)
    components: list[tuple[str, int]] = []

    if rules.keyword_overlap:
        hits = sum(1 for keyword in keywords if keyword in text)
        if hits:
            components.append(("keyword_overlap", hits * KEYWORD_HIT_POINTS))
        else:
            components.append(("no_overlap", NO_OVERLAP_PENALTY))

    if rules.product and signals.product and is_product_or_service_question(text):
        components.append(("product", PRODUCT_BONUS))

    if rules.price and signals.price and mentions_currency(text):
        components.append(("price", PRICE_BONUS))

    if rules.person_in_role and signals.person_in_role and is_person_in_role_question(text):
        components.append(("person_in_role", PERSON_ROLE_BONUS))

    topic_rules = (
        (rules.sports, "sports", signals.sports, is_sports_like_question(text), SPORTS_DRIFT_PENALTY),
        (rules.politics, "politics", signals.politics, mentions_politics(text), POLITICS_DRIFT_PENALTY),
        (rules.real_estate, "real_estate", signals.real_estate, mentions_real_estate(text), REAL_ESTATE_DRIFT_PENALTY),
        (rules.entertainment, "entertainment", signals.entertainment, mentions_entertainment(text), ENTERTAINMENT_DRIFT_PENALTY),
    )
    for enabled, name, question_side, text_side, penalty in topic_rules:
        if not enabled:
            continue
        component = _topic_pair(name, question_side, text_side, penalty)
        if component:
            components.append(component)

    if rules.years:
        for year in extract_years(text):
            if year > current_year + 1:
                components.append((f"future_year_{year}", FUTURE_YEAR_PENALTY))
            elif year in (current_year, current_year - 1):
                components.append((f"recent_year_{year}", RECENT_YEAR_BONUS))

    if rules.trusted_domain and is_trusted_host(host):
        components.append(("trusted_domain", TRUSTED_DOMAIN_BONUS))

    if rules.domestic_tld and signals.price and has_domestic_tld(host):
        components.append(("domestic_tld", DOMESTIC_TLD_BONUS))

    return components


def score_result(
    question: str,
    result: SearchResult,
    current_year: int | None = None,
    rules: ScoringRules = DEFAULT_RULES,
    signals: TopicSignals | None = None,
    keywords: list[str] | None = None,
) -> int:
    """Integer relevance score of one result for `question`."""
    components = score_components(
        question,
        result,
        current_year=current_year,
        rules=rules,
        signals=signals,
        keywords=keywords,
    )
    return sum(points for _, points in components)


def score_results(
    question: str,
    results: list[SearchResult],
    current_year: int | None = None,
    rules: ScoringRules = DEFAULT_RULES,
) -> list[ScoredResult]:
    """Score every result, preserving the gateway order."""
    parsed = parse_question(question)
    signals = analyze_topics(parsed.normalized)
    keywords = list(parsed.keywords)

    scored = []
    for result in results:
        components = score_components(
            question,
            result,
            current_year=current_year,
            rules=rules,
            signals=signals,
            keywords=keywords,
        )
        score = sum(points for _, points in components)
        logger.debug("Score %d for %s %s", score, result.url, components)
        scored.append(ScoredResult(result=result, score=score))

    return scored
