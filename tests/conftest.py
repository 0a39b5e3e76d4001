import pytest

from tdai.core import engine
from tdai.memory.conversation_manager import CallerMemoryStore, MemoryConfig


@pytest.fixture
def memory():
    return CallerMemoryStore(MemoryConfig(max_turns=10, max_callers=100, idle_seconds=3600))


@pytest.fixture(autouse=True)
def reset_web_module():
    engine.set_web_module(None)
    yield
    engine.set_web_module(None)
