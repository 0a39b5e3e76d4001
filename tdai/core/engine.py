"""Core request orchestration for the search decision, retrieval and generation.

Architectural role:
    Provides the main execution pipeline used by the HTTP, WebSocket and CLI
    layers to transform one user message into a `ChatReply` with per-caller
    memory updates.

Control-flow model:
    1. Resolve the effective question (follow-up triggers -> last question).
    2. Run the regex topic classifier; unless the message is a plain greeting,
       run both advisory model calls concurrently.
    3. Compose the search decision (future-question override included).
    4. If searching: route the locale, rewrite the query, call the search
       gateway, score and filter the results.
    5. Build the message list for the selected mode, generate the answer and
       record the exchange in memory.

Answer modes (`ChatReply.mode_label`):
    - `direct`: no search needed.
    - `greeting`: simple salutation, no search, no boilerplate.
    - `web`: search issued and at least one result survived filtering.
    - `web-empty`: search needed but nothing trustworthy was found (or no
      gateway is configured); the prompt forbids inventing facts.
    - `future`: future-question override; the prompt forbids speculation.

Error handling strategy:
    Advisory classifier failures are values and fall back to the regex layer.
    Search failures are empty result lists. Only `CompletionError` from the
    final answer call propagates to the adapters.

Determinism:
    Decision, locale, scoring and filtering are deterministic for fixed
    inputs, model verdicts and search results. Model output is not.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Protocol

from tdai.core.decision import decide_search
from tdai.core.routing_types import (
    ChatReply,
    ClassificationUnavailable,
    ModelEntityIntent,
    ModelVerdict,
    ScoredResult,
    SearchDecision,
    SearchLocale,
    SearchResult,
)
from tdai.llm import provider_config
from tdai.llm.service import generate_reply
from tdai.memory.conversation_manager import CallerMemoryStore, get_default_store
from tdai.nlp.followup import resolve_effective_question
from tdai.nlp.locale_router import canonical_country, route_locale
from tdai.nlp.model_classifier import classify_domain, extract_entity_intent
from tdai.nlp.query_rewriter import rewrite_query
from tdai.nlp.topic_classifier import TopicSignals, analyze_topics
from tdai.prompting.prompt_builder import build_messages, instruction_for_mode
from tdai.retrieval.context_builder import build_search_context
from tdai.retrieval.result_filter import filter_results
from tdai.retrieval.scoring import score_results


logger = logging.getLogger(__name__)

DEFAULT_CALLER_KEY = "local"
STATUS_SEARCH_DONE = "searching-done"

StatusCallback = Callable[[str], Awaitable[None] | None]


class WebModuleProtocol(Protocol):
    """Minimal async interface required from the search gateway."""

    provider: str

    async def asearch(self, query: str, locale: SearchLocale | None = None) -> list[SearchResult]:
        """Return results in provider order, `[]` on failure."""
        ...


_DEFAULT_WEB_MODULE: WebModuleProtocol | None = None
_WEB_MODULE_INIT_FAILED = False


def set_web_module(module: WebModuleProtocol | None) -> None:
    """Override or clear the default search gateway.

    Edge cases:
        Passing `None` re-enables lazy initialization from the environment.
    """
    global _DEFAULT_WEB_MODULE, _WEB_MODULE_INIT_FAILED
    _DEFAULT_WEB_MODULE = module
    _WEB_MODULE_INIT_FAILED = False


def _get_default_web_module() -> WebModuleProtocol | None:
    """Lazily instantiate and cache the default search gateway.

    Returns:
        The cached/created gateway, or `None` when it cannot be configured
        (missing key, unsupported provider). The failure is logged once.
    """
    global _DEFAULT_WEB_MODULE, _WEB_MODULE_INIT_FAILED
    if _DEFAULT_WEB_MODULE is not None:
        return _DEFAULT_WEB_MODULE
    if _WEB_MODULE_INIT_FAILED:
        return None

    from tdai.retrieval.web.web_module import WebModuleConfig, WebSearchModule

    try:
        _DEFAULT_WEB_MODULE = WebSearchModule(config=WebModuleConfig())
    except RuntimeError as err:
        logger.warning("Web search disabled: %s", err)
        _WEB_MODULE_INIT_FAILED = True
        return None

    return _DEFAULT_WEB_MODULE


def search_provider_name() -> str | None:
    """Name of the configured search provider, or None when search is disabled."""
    module = _get_default_web_module()
    return getattr(module, "provider", None) if module is not None else None


def deduplicate_response(text: str) -> str:
    """Remove repeated paragraphs from generated text.

    Edge cases:
        - Empty input returns an empty string.
        - Exact first-half/second-half duplication keeps the first half.
    """
    if not text:
        return ""

    text = text.strip()

    half = len(text) // 2
    if half > 20:
        first = text[:half].strip()
        second = text[half:].strip()
        if first == second:
            return first

    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    unique_paragraphs: list[str] = []

    for paragraph in paragraphs:
        if paragraph not in unique_paragraphs:
            unique_paragraphs.append(paragraph)

    if len(unique_paragraphs) < len(paragraphs):
        return "\n\n".join(unique_paragraphs)

    return text


async def _emit_status(callback: StatusCallback | None, value: str) -> None:
    if callback is None:
        return
    outcome = callback(value)
    if inspect.isawaitable(outcome):
        await outcome


async def _classify(question: str, signals: TopicSignals, enabled: bool) -> tuple[ModelVerdict, ModelEntityIntent]:
    """Run both advisory model calls concurrently, or skip them."""
    if signals.greeting and not signals.volatile:
        skipped = ClassificationUnavailable(reason="simple greeting")
        return skipped, skipped

    if not enabled:
        disabled = ClassificationUnavailable(reason="model classifier disabled")
        return disabled, disabled

    verdict, intent = await asyncio.gather(
        asyncio.to_thread(classify_domain, question),
        asyncio.to_thread(extract_entity_intent, question),
    )
    return verdict, intent


async def _search(
    question: str,
    verdict: ModelVerdict,
    intent: ModelEntityIntent,
    module: WebModuleProtocol,
    status_callback: StatusCallback | None,
    current_year: int | None,
) -> tuple[SearchLocale, list[ScoredResult]]:
    """Locale routing, query rewrite, gateway call, scoring and filtering."""
    locale = route_locale(question, verdict)
    query = await asyncio.to_thread(rewrite_query, question, locale, intent, current_year)
    logger.info("Searching %r with locale %s (rule=%s)", query, locale, locale.rule)

    await _emit_status(status_callback, f"searching-{module.provider}")
    try:
        results = await module.asearch(query, locale)
    finally:
        await _emit_status(status_callback, STATUS_SEARCH_DONE)

    scored = score_results(question, results, current_year=current_year)
    return locale, filter_results(scored)


def _select_mode(decision: SearchDecision, signals: TopicSignals, filtered: list[ScoredResult], searched: bool) -> tuple[str, str | None]:
    """Return `(mode_label, prompt_mode)`."""
    if decision.is_future:
        return "future", "future"
    if decision.need_search:
        if searched and filtered:
            return "web", "web"
        return "web-empty", "no_reliable_info"
    if signals.greeting:
        return "greeting", None
    return "direct", None


async def process_message(
    message: str,
    caller_key: str = DEFAULT_CALLER_KEY,
    *,
    web_module: WebModuleProtocol | None = None,
    memory: CallerMemoryStore | None = None,
    status_callback: StatusCallback | None = None,
    current_year: int | None = None,
    use_model_classifier: bool | None = None,
) -> ChatReply:
    """Process one user message end to end.

    Args:
        message: Raw user message.
        caller_key: Opaque caller identity (network-address derived).
        web_module: Optional search gateway override.
        memory: Optional memory store override (process default otherwise).
        status_callback: Called with `searching-<provider>` / `searching-done`
            around the gateway call; may be sync or async.
        current_year: Override for the current year (tests).
        use_model_classifier: Override for `MODEL_CLASSIFIER_ENABLED`.

    Returns:
        `ChatReply` with the answer text and metadata flags.

    Raises:
        CompletionError: When the final answer generation fails.

    Side effects:
        Updates the caller's last question (non follow-up messages only) and
        appends the exchange to the caller's history.
    """
    message = (message or "").strip()
    if not message:
        return ChatReply(text="")

    memory = memory or get_default_store()
    if use_model_classifier is None:
        use_model_classifier = provider_config.MODEL_CLASSIFIER_ENABLED

    effective, is_followup = resolve_effective_question(message, memory.get_last_question(caller_key))
    if not is_followup:
        memory.set_last_question(caller_key, effective)

    signals = analyze_topics(effective)
    logger.debug("Topic signals for %r: %s", effective, signals.fired())

    verdict, intent = await _classify(effective, signals, use_model_classifier)
    decision = decide_search(effective, signals, verdict, intent, current_year)

    locale: SearchLocale | None = None
    filtered: list[ScoredResult] = []
    searched = False

    if decision.need_search:
        module = web_module or _get_default_web_module()
        if module is None:
            logger.info("Search needed for %r but no search gateway is configured", effective)
        else:
            locale, filtered = await _search(effective, verdict, intent, module, status_callback, current_year)
            searched = True

    mode_label, prompt_mode = _select_mode(decision, signals, filtered, searched)

    country = locale.target_country if locale is not None else canonical_country(decision.country)
    price_in_france = signals.price and country == "france"

    instruction = instruction_for_mode(
        prompt_mode,
        summary=build_search_context(filtered),
        price_in_france=price_in_france,
    )
    messages = build_messages(memory.get_history(caller_key), effective, instruction)

    text = await asyncio.to_thread(generate_reply, messages)
    text = deduplicate_response(text)

    memory.add_exchange(caller_key, message, text)

    reply = ChatReply(
        text=text,
        used_search=searched,
        volatile=decision.volatile,
        mode_label=mode_label,
        domain=decision.domain,
        country=country,
        sources=[item.result for item in filtered[:3]],
    )
    logger.info("Reply for %s: mode=%s usedSearch=%s", caller_key, mode_label, searched)
    return reply
