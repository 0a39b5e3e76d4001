"""Message-to-payload adapter for LLM invocation.

Architectural role:
    Provides the canonical text-generation entrypoints used by orchestration
    and NLP layers, bridging prompt construction to transport
    (`tdai.llm.client`).

Model call flow:
    messages -> payload construction -> `client.send_request(...)`.

Streaming fallback:
    `generate_reply` consumes a streamed answer to completion. If the stream
    fails or yields no text, exactly one non-streaming call is attempted; a
    second failure is terminal and propagates as `CompletionError`.

Determinism:
    Payload construction is deterministic for fixed inputs and configuration.
    Generated output remains non-deterministic because inference runs remotely.
"""

import logging

from tdai.llm.client import CompletionError, send_request
from tdai.llm.provider_config import (
    MODEL_NAME,
    CLASSIFIER_MODEL,
    ANSWER_TEMPERATURE,
    ANSWER_MAX_TOKENS,
    CLASSIFIER_TEMPERATURE,
    CLASSIFIER_MAX_TOKENS,
    CLASSIFIER_TIMEOUT_SECONDS,
)


logger = logging.getLogger(__name__)

EMPTY_ANSWER_FALLBACK = "Je n'ai pas réussi à formuler une réponse."


def generate_answer(
    messages: list[dict],
    stream: bool = False,
    temperature: float = ANSWER_TEMPERATURE,
    max_tokens: int = ANSWER_MAX_TOKENS,
    model: str = MODEL_NAME,
    timeout: float | None = None,
):
    """Invoke the configured model with role-tagged messages.

    Returns:
        Generator of text deltas when `stream=True`, otherwise the final string.

    Raises:
        CompletionError: Propagated from the transport layer.
    """
    payload = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }

    return send_request(payload, stream, timeout=timeout)


def generate_structured(system_prompt: str, user_content: str) -> str:
    """Low-temperature call for strict-JSON / single-line answers.

    Used by the advisory classifiers and the query rewriter; callers treat any
    `CompletionError` as "capability unavailable".
    """
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_content},
    ]
    return generate_answer(
        messages,
        stream=False,
        temperature=CLASSIFIER_TEMPERATURE,
        max_tokens=CLASSIFIER_MAX_TOKENS,
        model=CLASSIFIER_MODEL,
        timeout=CLASSIFIER_TIMEOUT_SECONDS,
    )


def generate_reply(messages: list[dict]) -> str:
    """Produce the final answer text, streaming first with one non-stream fallback.

    Raises:
        CompletionError: When the non-streaming fallback also fails.
    """
    chunks: list[str] = []

    try:
        for delta in generate_answer(messages, stream=True):
            chunks.append(str(delta))
    except CompletionError as err:
        logger.warning("Streaming completion failed (%s); retrying without stream", err)
        chunks = []

    text = "".join(chunks).strip()
    if text:
        return text

    logger.info("Streamed answer was empty; issuing non-streaming completion")
    text = generate_answer(messages, stream=False)
    return text.strip() or EMPTY_ANSWER_FALLBACK
