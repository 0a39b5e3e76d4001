"""Search-locale routing for volatile questions.

Routing rules (first match wins):
1. Explicit foreign-country mention in the question overrides the
   classifier's country field.
2. Price question about a globally-known brand while the resolved country is
   France -> French locale (a global brand must not default to a US price).
3. Domestic sports league / team mention -> French locale.
4. Global sports league or combat-sports organization -> English/US locale.
5. Resolved non-France country -> `COUNTRY_LOCALES` entry; unknown countries
   fall back to a French-language locale targeting that country.
6. Globally-oriented domain (tech product, finance, culture, current affairs)
   without an explicit "France" in the text -> English/US locale.
7. Default: French locale, target country France.

Determinism:
- Pure function of the question text, the regex signals and the advisory
  verdict (which may be unavailable).
"""

import logging

from tdai.core.routing_types import ClassificationVerdict, ModelVerdict, SearchLocale
from tdai.nlp import vocabulary as vocab
from tdai.nlp.normalizer import normalize
from tdai.nlp.topic_classifier import (
    is_price_question,
    mentions_domestic_league,
    mentions_global_brand,
    mentions_global_league,
)


logger = logging.getLogger(__name__)

GLOBAL_ORIENTED_DOMAINS = frozenset({"tech_product", "finance", "culture", "current_affairs"})

_COUNTRY_PATTERNS = {
    country: vocab.compile_terms(terms)
    for country, terms in vocab.COUNTRY_TERMS.items()
}
_FRANCE = vocab.compile_terms((r"france", r"en france", r"francais(?:e|es)?"))


def canonical_country(label) -> str:
    """Map a free-form country label to a `COUNTRY_LOCALES` key when possible."""
    cleaned = normalize(label or "").strip()
    if not cleaned:
        return "france"
    if cleaned in vocab.COUNTRY_LOCALES:
        return cleaned
    return vocab.COUNTRY_ALIASES.get(cleaned, cleaned)


def detect_country_mention(text) -> str | None:
    """Return the first foreign country/region explicitly mentioned, if any."""
    normalized = normalize(text)
    if not normalized:
        return None

    first_country = None
    first_position = None

    for country, pattern in _COUNTRY_PATTERNS.items():
        match = pattern.search(normalized)
        if match and (first_position is None or match.start() < first_position):
            first_country = country
            first_position = match.start()

    return first_country


def locale_for_country(country: str, rule: str) -> SearchLocale:
    """Build a locale from the country table, French-language for unknown countries."""
    triple = vocab.COUNTRY_LOCALES.get(country)
    if triple is None:
        language, interface_language, geo_code = vocab.COUNTRY_LOCALES["france"]
    else:
        language, interface_language, geo_code = triple

    return SearchLocale(
        language=language,
        interface_language=interface_language,
        geo_code=geo_code,
        target_country=country,
        rule=rule,
    )


def _french(rule: str) -> SearchLocale:
    return locale_for_country("france", rule)


def _us_english(rule: str) -> SearchLocale:
    return locale_for_country("usa", rule)


def route_locale(question: str, verdict: ModelVerdict | None = None) -> SearchLocale:
    """Select the search locale for a question.

    Args:
        question: Effective user question.
        verdict: Advisory classifier verdict, `ClassificationUnavailable`, or `None`.

    Returns:
        `SearchLocale` whose `rule` names the routing rule that fired.
    """
    normalized = normalize(question)
    has_verdict = isinstance(verdict, ClassificationVerdict)

    mentioned = detect_country_mention(normalized)
    if mentioned:
        locale = locale_for_country(mentioned, "explicit_country")
        logger.debug("Locale for %r: %s", question, locale)
        return locale

    resolved_country = canonical_country(verdict.country) if has_verdict else "france"
    domain = verdict.domain if has_verdict else None

    if (
        resolved_country == "france"
        and is_price_question(normalized)
        and mentions_global_brand(normalized)
    ):
        locale = _french("global_brand_price")
    elif mentions_domestic_league(normalized):
        locale = _french("domestic_league")
    elif mentions_global_league(normalized):
        locale = _us_english("global_league")
    elif resolved_country != "france":
        locale = locale_for_country(resolved_country, "classifier_country")
    elif domain in GLOBAL_ORIENTED_DOMAINS and not _FRANCE.search(normalized):
        locale = _us_english("global_domain")
    else:
        locale = _french("default")

    logger.debug("Locale for %r: %s", question, locale)
    return locale
