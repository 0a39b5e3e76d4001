"""Answer generation: streaming first, one non-stream fallback."""

import pytest

from tdai.llm import service
from tdai.llm.client import CompletionError
from tdai.llm.service import EMPTY_ANSWER_FALLBACK, generate_reply, generate_structured


MESSAGES = [{"role": "user", "content": "Salut"}]


class FakeTransport:
    """Records payloads and replays scripted stream / non-stream outcomes."""

    def __init__(self, stream_outcome, final_outcome=None):
        self.stream_outcome = stream_outcome
        self.final_outcome = final_outcome
        self.calls = []

    def __call__(self, payload, stream, timeout=None):
        self.calls.append((payload, stream, timeout))
        outcome = self.stream_outcome if stream else self.final_outcome

        if isinstance(outcome, Exception):
            if stream:
                return self._failing_stream(outcome)
            raise outcome

        if stream:
            return iter(outcome)
        return outcome

    @staticmethod
    def _failing_stream(err):
        yield "Bon"
        raise err


class TestGenerateReply:
    def test_streamed_answer(self, monkeypatch):
        transport = FakeTransport(["Bonjour", " !"])
        monkeypatch.setattr(service, "send_request", transport)

        assert generate_reply(MESSAGES) == "Bonjour !"
        assert [stream for _, stream, _ in transport.calls] == [True]

    def test_stream_failure_falls_back_once(self, monkeypatch):
        transport = FakeTransport(CompletionError("OPENAI TIMEOUT"), "Réponse complète")
        monkeypatch.setattr(service, "send_request", transport)

        assert generate_reply(MESSAGES) == "Réponse complète"
        assert [stream for _, stream, _ in transport.calls] == [True, False]

    def test_empty_stream_falls_back(self, monkeypatch):
        transport = FakeTransport([], "Réponse")
        monkeypatch.setattr(service, "send_request", transport)

        assert generate_reply(MESSAGES) == "Réponse"

    def test_second_failure_propagates(self, monkeypatch):
        transport = FakeTransport(CompletionError("OPENAI TIMEOUT"), CompletionError("OPENAI HTTP ERROR (500)"))
        monkeypatch.setattr(service, "send_request", transport)

        with pytest.raises(CompletionError):
            generate_reply(MESSAGES)
        assert len(transport.calls) == 2

    def test_empty_final_answer_uses_apology(self, monkeypatch):
        transport = FakeTransport([], "   ")
        monkeypatch.setattr(service, "send_request", transport)

        assert generate_reply(MESSAGES) == EMPTY_ANSWER_FALLBACK


class TestGenerateStructured:
    def test_payload_uses_classifier_settings(self, monkeypatch):
        transport = FakeTransport([], '{"domain": "price"}')
        monkeypatch.setattr(service, "send_request", transport)

        assert generate_structured("système", "question") == '{"domain": "price"}'

        payload, stream, timeout = transport.calls[0]
        assert not stream
        assert payload["model"] == service.CLASSIFIER_MODEL
        assert payload["temperature"] == service.CLASSIFIER_TEMPERATURE
        assert payload["messages"] == [
            {"role": "system", "content": "système"},
            {"role": "user", "content": "question"},
        ]
        assert timeout == service.CLASSIFIER_TIMEOUT_SECONDS
