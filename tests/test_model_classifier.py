"""Advisory classifier parsing and failure-as-value behavior."""

import pytest

from tdai.core.routing_types import (
    ClassificationUnavailable,
    ClassificationVerdict,
    Entity,
    EntityIntent,
)
from tdai.llm.client import CompletionError
from tdai.nlp import model_classifier
from tdai.nlp.model_classifier import (
    _extract_json,
    classify_domain,
    extract_entity_intent,
    parse_domain_verdict,
    parse_entity_intent,
)


class TestExtractJson:
    def test_strips_markdown_fences(self):
        raw = '```json\n{"domain": "price"}\n```'
        assert _extract_json(raw) == '{"domain": "price"}'

    def test_finds_object_inside_prose(self):
        raw = 'Voici la réponse : {"a": 1} merci'
        assert _extract_json(raw) == '{"a": 1}'

    def test_no_object(self):
        assert _extract_json("je ne sais pas") is None
        assert _extract_json("") is None


class TestDomainVerdict:
    def test_valid_payload_is_normalized(self):
        verdict = parse_domain_verdict({
            "domain": "Price",
            "needs_web": True,
            "volatility": "HIGH",
            "country": "France",
        })
        assert verdict == ClassificationVerdict(domain="price", needs_web=True, volatility="high", country="france")

    def test_missing_country_defaults_to_france(self):
        verdict = parse_domain_verdict({"domain": "sport", "needs_web": False, "volatility": "low", "country": None})
        assert isinstance(verdict, ClassificationVerdict)
        assert verdict.country == "france"

    def test_unknown_domain_is_unavailable(self):
        verdict = parse_domain_verdict({"domain": "cooking", "needs_web": True, "volatility": "high"})
        assert isinstance(verdict, ClassificationUnavailable)

    def test_unknown_volatility_is_unavailable(self):
        verdict = parse_domain_verdict({"domain": "price", "needs_web": True, "volatility": "extreme"})
        assert isinstance(verdict, ClassificationUnavailable)

    def test_missing_field_is_unavailable(self):
        verdict = parse_domain_verdict({"domain": "price", "volatility": "high"})
        assert isinstance(verdict, ClassificationUnavailable)


class TestEntityIntent:
    def test_unknown_types_and_domains_are_coerced(self):
        intent = parse_entity_intent({
            "entities": [
                {"text": "PSG", "type": "organization"},
                {"text": "OM", "type": "team"},
                {"text": "  ", "type": "other"},
            ],
            "is_vs_pattern": True,
            "likely_domain": "sport",
        })
        assert intent.entities == (Entity("PSG", "organization"), Entity("OM", "other"))
        assert intent.is_versus_sport

        other = parse_entity_intent({"entities": [], "likely_domain": "cooking"})
        assert other.likely_domain == "other"
        assert not other.is_versus_sport

    def test_single_entity_is_not_a_duel(self):
        intent = EntityIntent(entities=(Entity("PSG"),), is_versus_pattern=True, likely_domain="sport")
        assert not intent.is_versus_sport


class TestAdvisoryCalls:
    def test_transport_failure_is_a_value(self, monkeypatch):
        def boom(system_prompt, user_content):
            raise CompletionError("OPENAI TIMEOUT")

        monkeypatch.setattr(model_classifier, "generate_structured", boom)

        assert isinstance(classify_domain("prix netflix"), ClassificationUnavailable)
        assert isinstance(extract_entity_intent("PSG vs OM"), ClassificationUnavailable)

    def test_garbage_output_is_a_value(self, monkeypatch):
        monkeypatch.setattr(model_classifier, "generate_structured", lambda s, u: "pas de JSON ici")
        assert isinstance(classify_domain("prix netflix"), ClassificationUnavailable)

    def test_invalid_json_is_a_value(self, monkeypatch):
        monkeypatch.setattr(model_classifier, "generate_structured", lambda s, u: "{domain: price,}")
        assert isinstance(classify_domain("prix netflix"), ClassificationUnavailable)

    def test_fenced_verdict(self, monkeypatch):
        raw = '```json\n{"domain": "price", "needs_web": true, "volatility": "high", "country": "france"}\n```'
        monkeypatch.setattr(model_classifier, "generate_structured", lambda s, u: raw)

        verdict = classify_domain("combien coûte Netflix ?")
        assert verdict == ClassificationVerdict("price", True, "high", "france")

    def test_entity_router_call(self, monkeypatch):
        raw = '{"entities": [{"text": "Alcaraz", "type": "person"}, {"text": "Sinner", "type": "person"}], "is_vs_pattern": true, "likely_domain": "sport"}'
        monkeypatch.setattr(model_classifier, "generate_structured", lambda s, u: raw)

        intent = extract_entity_intent("Alcaraz contre Sinner, qui a gagné ?")
        assert isinstance(intent, EntityIntent)
        assert [e.text for e in intent.entities] == ["Alcaraz", "Sinner"]
        assert intent.is_versus_sport

    @pytest.mark.parametrize("question", ["", "   ", None])
    def test_empty_question_skips_the_call(self, monkeypatch, question):
        def fail(*args):
            raise AssertionError("model should not be called")

        monkeypatch.setattr(model_classifier, "generate_structured", fail)
        assert isinstance(classify_domain(question), ClassificationUnavailable)
