"""Provider transport client for chat-completion requests.

Architectural role:
    Executes HTTP requests against the configured OpenAI-compatible provider
    and normalizes response materialization for streaming and non-streaming
    paths.

Model invocation flow:
    `service.generate_answer` -> `send_request(payload, stream, timeout)` ->
    parsed text or a generator of streamed text deltas.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with an
    explicit timeout.

Failure handling model:
    Missing credentials, transport errors, timeouts, non-2xx statuses and
    malformed bodies raise `CompletionError` with a sanitized, provider-labeled
    message. Callers decide whether the failure is advisory (fallback) or
    terminal (surfaced to the user).
"""

import json
import logging

import requests

from tdai.llm.provider_config import (
    PROVIDER,
    PROVIDERS,
    LLM_TIMEOUT_SECONDS,
    load_key,
)


logger = logging.getLogger(__name__)


class CompletionError(RuntimeError):
    """Raised when the completion provider cannot produce an answer."""


def _build_sanitized_http_error(provider_name: str, err: requests.exceptions.RequestException) -> str:
    """Build provider-labeled HTTP error text without exposing raw internals."""
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    label = str(provider_name or "provider").upper()
    if isinstance(err, requests.exceptions.Timeout):
        return f"{label} TIMEOUT"
    if status_code:
        return f"{label} HTTP ERROR ({status_code})"
    return f"{label} HTTP ERROR"


def _resolve_endpoint() -> tuple[str, dict[str, str]]:
    """Return URL and headers for the configured provider.

    Raises:
        CompletionError: Unknown provider or missing key.
    """
    config = PROVIDERS.get(PROVIDER)
    if config is None:
        raise CompletionError(f"INVALID PROVIDER: {PROVIDER}")

    headers = {
        "Content-Type": "application/json"
    }

    key_file = config["key_file"]
    if key_file:
        api_key = load_key(key_file)
        if not api_key:
            raise CompletionError(f"{PROVIDER.upper()} KEY NOT FOUND")
        headers["Authorization"] = f"Bearer {api_key}"

    return config["url"], headers


def _extract_delta(data: dict) -> str | None:
    """Extract streamed text from the common OpenAI-compatible chunk shapes."""
    if "choices" in data and data["choices"]:
        choice = data["choices"][0]

        if "delta" in choice and choice["delta"].get("content"):
            return choice["delta"]["content"]

        if "message" in choice and choice["message"].get("content"):
            return choice["message"]["content"]

        if choice.get("text"):
            return choice["text"]

    elif "message" in data and isinstance(data["message"], dict):
        return data["message"].get("content")

    return None


def _stream_generator(url: str, headers: dict, payload: dict, timeout: float):
    """Yield incremental text deltas from an OpenAI-compatible SSE stream.

    Raises:
        CompletionError: On transport failure, mid-stream included.
    """
    try:
        with requests.post(
            url,
            headers=headers,
            json=payload,
            stream=True,
            timeout=timeout,
        ) as response:

            response.raise_for_status()
            response.encoding = "utf-8"

            for line in response.iter_lines(decode_unicode=True):

                if not line:
                    continue

                if line.startswith("data: "):
                    line = line[6:]

                if line.strip() == "[DONE]":
                    break

                try:
                    data = json.loads(line)
                except ValueError:
                    continue

                if not isinstance(data, dict):
                    continue

                delta = _extract_delta(data)
                if delta:
                    yield delta

    except requests.exceptions.RequestException as err:
        raise CompletionError(_build_sanitized_http_error(PROVIDER, err)) from err


def send_request(payload: dict, stream: bool, timeout: float | None = None):
    """Send one request to the configured provider and parse response content.

    Args:
        payload: OpenAI-compatible chat-completion payload.
        stream: Whether to return a generator of text deltas.
        timeout: Per-call timeout in seconds (defaults to `LLM_TIMEOUT_SECONDS`).

    Returns:
        - Generator of text deltas in stream mode (errors surface on iteration).
        - Final response text in non-stream mode.

    Raises:
        CompletionError: Missing key, unknown provider, transport/status
        failure, or a response body without message content.
    """
    url, headers = _resolve_endpoint()
    timeout = LLM_TIMEOUT_SECONDS if timeout is None else timeout

    if stream:
        return _stream_generator(url, headers, {**payload, "stream": True}, timeout)

    try:
        response = requests.post(
            url,
            headers=headers,
            json={**payload, "stream": False},
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as err:
        raise CompletionError(_build_sanitized_http_error(PROVIDER, err)) from err
    except ValueError as err:
        raise CompletionError(f"{PROVIDER.upper()} INVALID JSON RESPONSE") from err

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as err:
        raise CompletionError(f"{PROVIDER.upper()} MALFORMED RESPONSE") from err

    return (content or "").strip()
