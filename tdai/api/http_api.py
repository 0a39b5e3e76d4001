"""
HTTP and WebSocket API adapter for the TDAI engine.

Architectural role:
- Expose the chat entry contract over HTTP (`POST /chat`) and WebSocket (`/ws`).
- Derive the opaque caller key from the network address.
- Delegate search decision, retrieval and generation to
  `tdai.core.engine.process_message`.
- Normalize `ChatReply` to transport contracts.

Endpoint responsibilities:
- `POST /chat`: `{"message": str}` -> `{reply, usedSearch, volatile, modeLabel,
  domain, country}`.
- `GET /health`: liveness plus search/classifier configuration and caller count.
- `WebSocket /ws`: `{"type": "user_message", "text": ...}` frames in,
  `status` and `assistant_message` frames out.

Caller identity:
- Client address; the first `X-Forwarded-For` hop when `TRUST_PROXY_HEADERS`
  is enabled. Shared NAT/proxies make this a weak identity, accepted as is.

Input validation behavior:
- Missing/blank `message` -> HTTP 400 `{"error": "message manquant"}`.
- WebSocket frames with invalid JSON, another `type` or blank text are ignored.

Error handling strategy:
- Only `CompletionError` from the final answer call reaches this module:
  HTTP 502 `{"error": "completion_failed"}`, or a French apology frame on
  the WebSocket.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Configures root logging from `LOG_LEVEL`.
- Emits request/response debug prints only when `DEBUG == "true"`.
"""

from dotenv import load_dotenv

load_dotenv()

import json
import logging
import os

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tdai.core import engine
from tdai.core.engine import process_message
from tdai.llm import provider_config
from tdai.llm.client import CompletionError
from tdai.memory.conversation_manager import get_default_store


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="TDAI")
# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"
TRUST_PROXY_HEADERS = os.getenv("TRUST_PROXY_HEADERS", "false").strip().lower() in ("1", "true", "yes", "on")

EMPTY_MESSAGE_ERROR = "message manquant"
COMPLETION_FAILED_ERROR = "completion_failed"
WS_ERROR_TEXT = "Une erreur technique est survenue."


# ============================================================
# Caller Identity
# ============================================================

def caller_key_from(host: str | None, headers) -> str:
    """Derive the caller key from the client host and, optionally, proxy headers."""
    if TRUST_PROXY_HEADERS:
        forwarded = headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return host or "unknown"


# ============================================================
# Request Schema
# ============================================================

class ChatRequest(BaseModel):
    message: str | None = None


def _reply_payload(reply) -> dict:
    return {"reply": reply.text, **reply.metadata()}


# ============================================================
# HTTP Chat
# ============================================================

@app.post("/chat")
async def chat(payload: ChatRequest, request: Request):
    """
    Answer one chat message.

    Input validation behavior:
    - Returns HTTP 400 when `message` is missing or blank.

    Error handling strategy:
    - `CompletionError` -> HTTP 502. Advisory and search failures never
      surface here; they are absorbed by the engine.
    """
    message = (payload.message or "").strip()
    caller_key = caller_key_from(request.client.host if request.client else None, request.headers)

    if DEBUG:
        print("\n==== API DEBUG START ====")
        print("Caller:", caller_key)
        print("Incoming message:", message)

    if not message:
        return JSONResponse(status_code=400, content={"error": EMPTY_MESSAGE_ERROR})

    try:
        reply = await process_message(message, caller_key)
    except CompletionError as err:
        logger.error("Completion failed for %s: %s", caller_key, err)
        return JSONResponse(status_code=502, content={"error": COMPLETION_FAILED_ERROR})

    if DEBUG:
        print("Reply metadata:", reply.metadata())
        print("Reply text:", repr(reply.text))
        print("==== API DEBUG END ====\n")

    return _reply_payload(reply)


@app.get("/health")
def health():
    """Liveness plus search/classifier configuration."""
    return {
        "status": "ok",
        "searchProvider": engine.search_provider_name(),
        "modelClassifier": provider_config.MODEL_CLASSIFIER_ENABLED,
        "callers": len(get_default_store()),
    }


# ============================================================
# WebSocket Chat
# ============================================================

@app.websocket("/ws")
async def chat_socket(websocket: WebSocket):
    """
    WebSocket chat session.

    Frames out:
    - `{"type": "status", "value": "searching-<provider>"}` before the search.
    - `{"type": "status", "value": "searching-done"}` after it.
    - `{"type": "assistant_message", "text": ..., "meta": {...}}`.
    """
    await websocket.accept()
    caller_key = caller_key_from(websocket.client.host if websocket.client else None, websocket.headers)

    async def send_status(value: str) -> None:
        await websocket.send_json({"type": "status", "value": value})

    try:
        while True:
            raw = await websocket.receive_text()

            try:
                payload = json.loads(raw)
            except ValueError:
                continue

            if not isinstance(payload, dict) or payload.get("type") != "user_message":
                continue

            text = str(payload.get("text") or "").strip()
            if not text:
                continue

            if DEBUG:
                print("WS message from", caller_key, ":", text)

            try:
                reply = await process_message(text, caller_key, status_callback=send_status)
            except CompletionError as err:
                logger.error("Completion failed for %s: %s", caller_key, err)
                await websocket.send_json({"type": "assistant_message", "text": WS_ERROR_TEXT})
                continue

            await websocket.send_json({
                "type": "assistant_message",
                "text": reply.text,
                "meta": reply.metadata(),
            })
    except WebSocketDisconnect:
        if DEBUG:
            print("WS client disconnected:", caller_key)
