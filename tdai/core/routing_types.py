"""Data contracts shared by the search-decision pipeline and the engine.

Architectural role:
    Defines the per-request records produced by the NLP layers
    (`ClassificationVerdict`, `EntityIntent`, `SearchLocale`), the search
    gateway (`SearchResult`), the relevance layer (`ScoredResult`) and the final
    engine output (`ChatReply`).

Advisory results:
    Model-assisted classifiers return either their verdict or a
    `ClassificationUnavailable` value. Failure is a value, never an exception,
    so the mandatory fallback to the regex classifier is visible in the types
    (`ModelVerdict`, `ModelEntityIntent`).

Determinism:
    Structural only. All records are immutable and live for one request.
"""

from dataclasses import dataclass, field


DOMAINS = (
    "price",
    "tech_product",
    "finance",
    "politics",
    "law",
    "sport",
    "culture",
    "current_affairs",
    "weather",
    "science",
    "health",
    "general_knowledge",
    "personal",
    "other",
)

VOLATILITY_LEVELS = ("high", "medium", "low")
ENTITY_TYPES = ("person", "organization", "location", "other")
LIKELY_DOMAINS = ("sport", "politics", "business", "entertainment", "other")


@dataclass(frozen=True)
class Question:
    """User question in raw, normalized and keyword form."""

    raw: str
    normalized: str
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassificationVerdict:
    """Domain/volatility verdict for one question.

    Attributes:
        domain: One of `DOMAINS`.
        needs_web: Whether the classifier believes a web lookup is required.
        volatility: One of `VOLATILITY_LEVELS`.
        country: `"france"` or another free-form country label.
    """

    domain: str
    needs_web: bool
    volatility: str
    country: str = "france"


@dataclass(frozen=True)
class ClassificationUnavailable:
    """Advisory classifier produced nothing usable (transport, status or parse failure)."""

    reason: str


@dataclass(frozen=True)
class Entity:
    text: str
    type: str = "other"


@dataclass(frozen=True)
class EntityIntent:
    """Entities and duel/domain intent extracted from a question."""

    entities: tuple[Entity, ...] = ()
    is_versus_pattern: bool = False
    likely_domain: str = "other"

    @property
    def is_versus_sport(self) -> bool:
        """Two-or-more entity "X vs Y" sports duel."""
        return (
            self.is_versus_pattern
            and self.likely_domain == "sport"
            and len(self.entities) >= 2
        )


ModelVerdict = ClassificationVerdict | ClassificationUnavailable
ModelEntityIntent = EntityIntent | ClassificationUnavailable


@dataclass(frozen=True)
class SearchLocale:
    """National flavour of the search engine to query.

    `rule` records which routing rule produced the locale; it is diagnostic
    only and excluded from equality.
    """

    language: str = "fr"
    interface_language: str = "fr"
    geo_code: str = "fr"
    target_country: str = "france"
    rule: str = field(default="default", compare=False)


@dataclass(frozen=True)
class SearchResult:
    title: str = ""
    url: str = ""
    snippet: str = ""


@dataclass(frozen=True)
class ScoredResult:
    result: SearchResult
    score: int


@dataclass(frozen=True)
class SearchDecision:
    """Final "do we search" verdict with the signals that produced it."""

    need_search: bool
    volatile: bool
    is_future: bool
    reasons: tuple[str, ...] = ()
    domain: str | None = None
    country: str = "france"


@dataclass
class ChatReply:
    """Engine output returned to the HTTP/WebSocket/CLI adapters."""

    text: str
    used_search: bool = False
    volatile: bool = False
    mode_label: str = "direct"
    domain: str | None = None
    country: str = "france"
    sources: list[SearchResult] = field(default_factory=list)

    def metadata(self) -> dict:
        """Adapter-facing metadata flags."""
        return {
            "usedSearch": self.used_search,
            "volatile": self.volatile,
            "modeLabel": self.mode_label,
            "domain": self.domain,
            "country": self.country,
        }
