"""Per-caller bounded memory."""

from tdai.memory.conversation_manager import CallerMemoryStore, MemoryConfig


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestHistory:
    def test_exchange_is_recorded_in_order(self, memory):
        memory.add_exchange("1.2.3.4", "Salut", "Bonjour !")
        assert memory.get_history("1.2.3.4") == [
            {"role": "user", "content": "Salut"},
            {"role": "assistant", "content": "Bonjour !"},
        ]

    def test_history_is_trimmed_fifo(self):
        store = CallerMemoryStore(MemoryConfig(max_turns=4, max_callers=10, idle_seconds=0))
        for i in range(3):
            store.add_exchange("a", f"q{i}", f"r{i}")

        history = store.get_history("a")
        assert [m["content"] for m in history] == ["q1", "r1", "q2", "r2"]

    def test_history_is_a_copy(self, memory):
        memory.add_exchange("a", "q", "r")
        memory.get_history("a")[0]["content"] = "changed"
        memory.get_history("a").append({"role": "user", "content": "x"})

        assert memory.get_history("a") == [
            {"role": "user", "content": "q"},
            {"role": "assistant", "content": "r"},
        ]

    def test_callers_are_isolated(self, memory):
        memory.add_exchange("a", "q", "r")
        memory.set_last_question("a", "prix Netflix")

        assert memory.get_history("b") == []
        assert memory.get_last_question("b") is None
        assert memory.get_last_question("a") == "prix Netflix"

    def test_unknown_caller_lookup_does_not_create_state(self, memory):
        memory.get_history("ghost")
        memory.get_last_question("ghost")
        assert len(memory) == 0

    def test_clear(self, memory):
        memory.add_exchange("a", "q", "r")
        memory.add_exchange("b", "q", "r")

        memory.clear("a")
        assert memory.get_history("a") == []
        assert len(memory) == 1

        memory.clear()
        assert len(memory) == 0


class TestEviction:
    def test_least_recently_used_caller_is_evicted(self):
        store = CallerMemoryStore(MemoryConfig(max_turns=10, max_callers=2, idle_seconds=0))
        store.add_exchange("a", "q", "r")
        store.add_exchange("b", "q", "r")

        store.get_history("a")
        store.add_exchange("c", "q", "r")

        assert len(store) == 2
        assert store.get_history("b") == []
        assert store.get_history("a") != []

    def test_idle_callers_are_dropped(self):
        clock = FakeClock()
        store = CallerMemoryStore(MemoryConfig(max_turns=10, max_callers=10, idle_seconds=60), clock=clock)
        store.add_exchange("a", "q", "r")

        clock.now = 30
        store.add_exchange("b", "q", "r")

        clock.now = 70
        assert store.prune() == 1
        assert store.get_history("a") == []
        assert store.get_history("b") != []

    def test_activity_refreshes_idle_timer(self):
        clock = FakeClock()
        store = CallerMemoryStore(MemoryConfig(max_turns=10, max_callers=10, idle_seconds=60), clock=clock)
        store.set_last_question("a", "prix Netflix")

        clock.now = 50
        store.get_last_question("a")

        clock.now = 100
        assert store.get_last_question("a") == "prix Netflix"
