"""Regex topic classifier deciding whether a question is "volatile".

Intent classification logic:
- A battery of independent boolean detectors (price, product/service,
  person-in-role, recent law/politics, generic current affairs, sports-like,
  tech/global) each backed by one or more tables from `vocabulary`.
- `is_volatile_topic` is the disjunction of every detector, an explicit
  year in [2023, 2039], or an immediacy adverb ("aujourd'hui", "hier", ...).
- `suggests_web` is a broader, separate heuristic consumed only by the final
  search decision.
- `is_future_question` flags questions about dates beyond the near-term
  horizon; the decision layer uses it to suppress searching.

Parsing and normalization:
- Every predicate normalizes its input with `normalizer.normalize`, so callers
  may pass raw or already-normalized text.

Determinism:
- Pure, stateless and total. No detector depends on another firing first.

Edge cases:
- Empty/None input is never volatile, never a greeting and never future.
"""

import re
from dataclasses import dataclass
from datetime import datetime

from tdai.nlp import vocabulary as vocab
from tdai.nlp.normalizer import normalize


FUTURE_HORIZON_YEARS = 1
MAX_GREETING_WORDS = 6


# =========================================================
# COMPILED TABLES
# =========================================================

_PRICE = vocab.compile_terms(vocab.PRICE_TERMS)
_CURRENCY = vocab.compile_terms(vocab.CURRENCY_TERMS)
_PRODUCT = vocab.compile_terms(vocab.PRODUCT_TERMS)
_GLOBAL_BRAND = vocab.compile_terms(vocab.GLOBAL_BRAND_TERMS)
_PERSON_ROLE = vocab.compile_terms(vocab.PERSON_ROLE_TERMS)
_LAW = vocab.compile_terms(vocab.LAW_TERMS)
_RECENCY = vocab.compile_terms(vocab.RECENCY_TERMS)
_GOVERNMENT = vocab.compile_terms(vocab.GOVERNMENT_TERMS)
_POLITICS = vocab.compile_terms(vocab.POLITICS_TERMS)
_CRISIS = vocab.compile_terms(vocab.CRISIS_TERMS)
_RESULTS = vocab.compile_terms(vocab.RESULT_TERMS)
_LAST_EVENT = vocab.compile_terms(vocab.LAST_EVENT_TERMS)
_WEATHER = vocab.compile_terms(vocab.WEATHER_TERMS)
_MACRO = vocab.compile_terms(vocab.MACRO_TERMS)
_SPORT = vocab.compile_terms(vocab.SPORT_TERMS)
_VERSUS = re.compile(vocab.VERSUS_PATTERN)
_FACED = vocab.compile_terms(vocab.FACED_TERMS)
_TECH = vocab.compile_terms(vocab.TECH_TERMS)
_IMMEDIACY = vocab.compile_terms(vocab.IMMEDIACY_TERMS)
_VOLATILE_YEAR = vocab.compile_terms((vocab.VOLATILE_YEAR_PATTERN,))
_FUTURE_PHRASES = vocab.compile_terms(vocab.FUTURE_PHRASES)
_IN_N_YEARS = re.compile(vocab.IN_N_YEARS_PATTERN)
_WEB_REQUEST = vocab.compile_terms(vocab.WEB_REQUEST_TERMS)
_ACTUALITY = vocab.compile_terms(vocab.ACTUALITY_TERMS)
_REAL_ESTATE = vocab.compile_terms(vocab.REAL_ESTATE_TERMS)
_ENTERTAINMENT = vocab.compile_terms(vocab.ENTERTAINMENT_TERMS)
_DOMESTIC_LEAGUE = vocab.compile_terms(vocab.DOMESTIC_LEAGUE_TERMS)
_GLOBAL_LEAGUE = vocab.compile_terms(vocab.GLOBAL_LEAGUE_TERMS)
_GREETING = vocab.compile_terms(vocab.GREETING_TERMS)

_YEAR_TOKEN = re.compile(r"(?<!\d)((?:19|20)\d{2})(?!\d)" + vocab.NOT_AN_AMOUNT_PATTERN)
_GREETING_FILLER = frozenset({
    "toi", "vous", "tdai", "a", "tous", "tout", "le", "monde", "mon", "ami",
    "et", "bien", "oui", "beaucoup", "encore", "the", "there", "you",
})


def _hit(pattern: re.Pattern, text) -> bool:
    """Return whether `pattern` matches the normalized form of `text`."""
    normalized = normalize(text)
    if not normalized:
        return False
    return bool(pattern.search(normalized))


# =========================================================
# TOPIC DETECTORS
# =========================================================

def is_price_question(text) -> bool:
    """Price, cost, subscription or tariff vocabulary."""
    return _hit(_PRICE, text)


def is_product_or_service_question(text) -> bool:
    """Named commercial brands, products or services."""
    return _hit(_PRODUCT, text)


def mentions_global_brand(text) -> bool:
    """Brands sold worldwide whose default web price is often the US one."""
    return _hit(_GLOBAL_BRAND, text)


def is_person_in_role_question(text) -> bool:
    """Titles of incumbent office-holders (president, CEO, monarch, mayor...)."""
    return _hit(_PERSON_ROLE, text)


def is_recent_law_or_politics_question(text) -> bool:
    """Law vocabulary AND (a recency word OR a government/France context).

    Law vocabulary alone is not enough: "qu'est-ce qu'une loi ?" is a
    definition question, not a current-affairs one.
    """
    normalized = normalize(text)
    if not normalized or not _LAW.search(normalized):
        return False
    return bool(_RECENCY.search(normalized) or _GOVERNMENT.search(normalized))


def is_generic_current_affair_question(text) -> bool:
    """Politics/crisis, results, last-event phrasing, weather or macro statistics."""
    normalized = normalize(text)
    if not normalized:
        return False
    return any(
        pattern.search(normalized)
        for pattern in (_POLITICS, _CRISIS, _RESULTS, _LAST_EVENT, _WEATHER, _MACRO)
    )


def is_sports_like_question(text) -> bool:
    """Sport/combat vocabulary, an "X vs Y" / "X contre Y" duel, or "faced" phrasing."""
    normalized = normalize(text)
    if not normalized:
        return False
    return bool(
        _SPORT.search(normalized)
        or _VERSUS.search(normalized)
        or _FACED.search(normalized)
    )


def is_tech_or_global_info_question(text) -> bool:
    """AI, dev, SaaS, growth-marketing or crypto vocabulary."""
    return _hit(_TECH, text)


def has_volatile_year(text) -> bool:
    """Explicit year in [2023, 2039]."""
    return _hit(_VOLATILE_YEAR, text)


def has_immediacy_marker(text) -> bool:
    """Immediacy adverbs such as "aujourd'hui", "hier", "cette semaine"."""
    return _hit(_IMMEDIACY, text)


def is_volatile_topic(text) -> bool:
    """Return whether the question's correct answer is likely to change over time."""
    detectors = (
        is_price_question,
        is_product_or_service_question,
        is_person_in_role_question,
        is_recent_law_or_politics_question,
        is_generic_current_affair_question,
        is_sports_like_question,
        is_tech_or_global_info_question,
        has_volatile_year,
        has_immediacy_marker,
    )
    return any(detector(text) for detector in detectors)


def suggests_web(text) -> bool:
    """Broad web-lookup heuristic: explicit web requests, actuality words, prices."""
    normalized = normalize(text)
    if not normalized:
        return False
    return bool(
        _WEB_REQUEST.search(normalized)
        or _ACTUALITY.search(normalized)
        or _PRICE.search(normalized)
    )


# =========================================================
# SCORING-SIDE MENTIONS
# =========================================================
# Same tables, applied to search-result text by `retrieval.scoring`.

def mentions_currency(text) -> bool:
    return _hit(_CURRENCY, text)


def mentions_politics(text) -> bool:
    return _hit(_POLITICS, text)


def is_politics_question(text) -> bool:
    """Politics vocabulary, crisis vocabulary or a recent law question."""
    normalized = normalize(text)
    if not normalized:
        return False
    return bool(
        _POLITICS.search(normalized)
        or _CRISIS.search(normalized)
        or is_recent_law_or_politics_question(normalized)
    )


def mentions_real_estate(text) -> bool:
    return _hit(_REAL_ESTATE, text)


def mentions_entertainment(text) -> bool:
    return _hit(_ENTERTAINMENT, text)


def mentions_domestic_league(text) -> bool:
    return _hit(_DOMESTIC_LEAGUE, text)


def mentions_global_league(text) -> bool:
    return _hit(_GLOBAL_LEAGUE, text)


# =========================================================
# TEMPORAL / CONVERSATIONAL
# =========================================================

def extract_years(text) -> list[int]:
    """Return distinct 4-digit years (19xx/20xx) in first-seen order.

    Amounts such as "2099 euros" or "1999,90" are not years.
    """
    years: list[int] = []
    for match in _YEAR_TOKEN.finditer(normalize(text)):
        year = int(match.group(1))
        if year not in years:
            years.append(year)
    return years


def is_future_question(text, current_year: int | None = None) -> bool:
    """Return whether the question is about a date beyond the near-term horizon.

    Rules:
    - Any explicit year greater than `current_year + FUTURE_HORIZON_YEARS`.
    - "dans N ans" with N >= 2.
    - Open-ended future phrasing ("dans le futur", "a l'avenir").
    """
    normalized = normalize(text)
    if not normalized:
        return False

    if current_year is None:
        current_year = datetime.now().year

    if any(year > current_year + FUTURE_HORIZON_YEARS for year in extract_years(normalized)):
        return True

    for match in _IN_N_YEARS.finditer(normalized):
        if int(match.group(1)) >= 2:
            return True

    return bool(_FUTURE_PHRASES.search(normalized))


def is_simple_greeting(text) -> bool:
    """Short salutation or thanks with nothing else to answer ("Salut", "merci !")."""
    normalized = normalize(text)
    if not normalized:
        return False

    if len(normalized.split()) > MAX_GREETING_WORDS:
        return False

    if not _GREETING.search(normalized):
        return False

    remainder = _GREETING.sub(" ", normalized)
    leftovers = [t for t in re.split(r"[^a-z0-9]+", remainder) if t]
    return all(t in _GREETING_FILLER for t in leftovers)


# =========================================================
# AGGREGATED SIGNALS
# =========================================================

@dataclass(frozen=True)
class TopicSignals:
    """Every regex detector outcome for one question, evaluated once."""

    price: bool = False
    product: bool = False
    global_brand: bool = False
    person_in_role: bool = False
    recent_law_or_politics: bool = False
    current_affairs: bool = False
    sports: bool = False
    tech_or_global: bool = False
    volatile_year: bool = False
    immediacy: bool = False
    politics: bool = False
    real_estate: bool = False
    entertainment: bool = False
    suggests_web: bool = False
    greeting: bool = False

    @property
    def volatile(self) -> bool:
        """Same verdict as `is_volatile_topic` on the analyzed text."""
        return any((
            self.price,
            self.product,
            self.person_in_role,
            self.recent_law_or_politics,
            self.current_affairs,
            self.sports,
            self.tech_or_global,
            self.volatile_year,
            self.immediacy,
        ))

    def fired(self) -> list[str]:
        """Names of detectors that fired, for logging."""
        return [name for name, value in vars(self).items() if value]


def analyze_topics(text) -> TopicSignals:
    """Run every detector once over `text`."""
    normalized = normalize(text)
    if not normalized:
        return TopicSignals()

    return TopicSignals(
        price=is_price_question(normalized),
        product=is_product_or_service_question(normalized),
        global_brand=mentions_global_brand(normalized),
        person_in_role=is_person_in_role_question(normalized),
        recent_law_or_politics=is_recent_law_or_politics_question(normalized),
        current_affairs=is_generic_current_affair_question(normalized),
        sports=is_sports_like_question(normalized),
        tech_or_global=is_tech_or_global_info_question(normalized),
        volatile_year=has_volatile_year(normalized),
        immediacy=has_immediacy_marker(normalized),
        politics=is_politics_question(normalized),
        real_estate=mentions_real_estate(normalized),
        entertainment=mentions_entertainment(normalized),
        suggests_web=suggests_web(normalized),
        greeting=is_simple_greeting(normalized),
    )
