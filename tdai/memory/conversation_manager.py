"""Short-term per-caller memory: recent turns and last substantive question.

Purpose of this abstraction:
    Keep, for each caller key, a bounded buffer of recent `{role, content}`
    messages and the last "real" (non follow-up) question, in process memory
    only. Nothing is persisted; state is lost on restart.

Bounding:
    - Per caller, history is capped at `max_turns` messages and trimmed FIFO
      from the oldest end.
    - Callers are held in an LRU: the least recently used caller is evicted
      once `max_callers` is exceeded, and callers idle longer than
      `idle_seconds` are dropped on the next access to the store.

Caller identity:
    Caller keys are opaque strings, derived by the adapters from the network
    address. Shared NAT or proxies make that a weak identity; it is accepted
    as is.

Concurrency:
    One `threading.Lock` guards the whole store. Requests from different
    callers may mutate it concurrently; requests from one caller are
    serialized by client behavior.
"""

import logging
import os
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryConfig:
    """Bounds for `CallerMemoryStore`.

    Relevant environment variables:
        - `MEMORY_MAX_TURNS`
        - `MEMORY_MAX_CALLERS`
        - `MEMORY_IDLE_SECONDS`
    """

    max_turns: int = field(default_factory=lambda: int(os.getenv("MEMORY_MAX_TURNS", "10")))
    max_callers: int = field(default_factory=lambda: int(os.getenv("MEMORY_MAX_CALLERS", "1000")))
    idle_seconds: float = field(default_factory=lambda: float(os.getenv("MEMORY_IDLE_SECONDS", "3600")))


@dataclass
class _CallerState:
    history: list = field(default_factory=list)
    last_question: str | None = None
    last_seen: float = 0.0


class CallerMemoryStore:
    """Bounded LRU of per-caller conversation state."""

    def __init__(self, config: MemoryConfig | None = None, clock=time.monotonic) -> None:
        self.config = config or MemoryConfig()
        self._clock = clock
        self._callers: "OrderedDict[str, _CallerState]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._callers)

    def _prune_locked(self, now: float) -> int:
        """Drop idle callers, then the oldest callers past `max_callers`."""
        removed = 0

        idle_limit = self.config.idle_seconds
        if idle_limit > 0:
            while self._callers:
                key, state = next(iter(self._callers.items()))
                if now - state.last_seen <= idle_limit:
                    break
                del self._callers[key]
                removed += 1

        while len(self._callers) > max(1, self.config.max_callers):
            self._callers.popitem(last=False)
            removed += 1

        return removed

    def _touch_locked(self, caller_key: str, create: bool) -> _CallerState | None:
        now = self._clock()
        self._prune_locked(now)

        state = self._callers.get(caller_key)
        if state is None:
            if not create:
                return None
            state = _CallerState()
            self._callers[caller_key] = state

        state.last_seen = now
        self._callers.move_to_end(caller_key)
        self._prune_locked(now)
        return state

    def prune(self) -> int:
        """Evict idle and over-capacity callers; return how many were removed."""
        with self._lock:
            removed = self._prune_locked(self._clock())
        if removed:
            logger.info("Memory prune evicted %d caller(s)", removed)
        return removed

    def get_history(self, caller_key: str) -> list[dict]:
        """Return a copy of the caller's recent messages, oldest first."""
        with self._lock:
            state = self._touch_locked(caller_key, create=False)
            if state is None:
                return []
            return [dict(message) for message in state.history]

    def add_exchange(self, caller_key: str, user_text: str, assistant_text: str) -> None:
        """Append one user/assistant exchange and trim to `max_turns` messages."""
        with self._lock:
            state = self._touch_locked(caller_key, create=True)
            state.history.append({"role": "user", "content": str(user_text)})
            state.history.append({"role": "assistant", "content": str(assistant_text)})

            overflow = len(state.history) - max(0, self.config.max_turns)
            if overflow > 0:
                del state.history[:overflow]

    def get_last_question(self, caller_key: str) -> str | None:
        with self._lock:
            state = self._touch_locked(caller_key, create=False)
            return state.last_question if state is not None else None

    def set_last_question(self, caller_key: str, question: str) -> None:
        with self._lock:
            state = self._touch_locked(caller_key, create=True)
            state.last_question = question

    def clear(self, caller_key: str | None = None) -> None:
        """Forget one caller, or every caller when `caller_key` is None."""
        with self._lock:
            if caller_key is None:
                self._callers.clear()
            else:
                self._callers.pop(caller_key, None)


# =========================================================
# PROCESS-WIDE DEFAULT STORE
# =========================================================

_default_store: CallerMemoryStore | None = None
_default_lock = threading.Lock()


def get_default_store() -> CallerMemoryStore:
    """Return the lazily created process-wide store."""
    global _default_store
    with _default_lock:
        if _default_store is None:
            _default_store = CallerMemoryStore()
        return _default_store


def set_default_store(store: CallerMemoryStore | None) -> None:
    """Replace (or reset with None) the process-wide store."""
    global _default_store
    with _default_lock:
        _default_store = store
