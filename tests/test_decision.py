"""Search decision composition from regex signals and advisory verdicts."""

from tdai.core.decision import decide_search, search_reasons
from tdai.core.routing_types import (
    ClassificationUnavailable,
    ClassificationVerdict,
    Entity,
    EntityIntent,
)
from tdai.nlp.topic_classifier import TopicSignals, analyze_topics


def _decide(question, verdict=None, intent=None):
    return decide_search(question, analyze_topics(question), verdict, intent, current_year=2025)


class TestDecision:
    def test_price_question_searches(self):
        decision = _decide("Quel est le prix de l'abonnement Amazon Prime en France ?")
        assert decision.need_search
        assert decision.volatile
        assert not decision.is_future
        assert "regex_volatile" in decision.reasons
        assert decision.country == "france"

    def test_greeting_never_searches(self):
        decision = _decide("Salut")
        assert not decision.need_search
        assert not decision.volatile
        assert decision.reasons == ("greeting",)

    def test_greeting_ignores_model_verdict(self):
        verdict = ClassificationVerdict(domain="other", needs_web=True, volatility="high")
        decision = _decide("Bonjour", verdict)
        assert not decision.need_search

    def test_future_question_overrides_every_signal(self):
        verdict = ClassificationVerdict(domain="politics", needs_web=True, volatility="high")
        decision = _decide("Qui sera président en 2030 ?", verdict)
        assert decision.is_future
        assert not decision.need_search
        assert decision.reasons[-1] == "future_override"
        assert decision.domain == "politics"

    def test_stable_question_without_verdict(self):
        decision = _decide("Explique-moi la photosynthèse")
        assert not decision.need_search
        assert decision.reasons == ()

    def test_model_can_add_a_reason(self):
        verdict = ClassificationVerdict(domain="science", needs_web=True, volatility="low", country="usa")
        decision = _decide("Explique-moi la photosynthèse", verdict)
        assert decision.need_search
        assert decision.reasons == ("model_needs_web",)
        assert decision.country == "usa"
        assert not decision.volatile

    def test_elevated_model_volatility_marks_volatile(self):
        verdict = ClassificationVerdict(domain="other", needs_web=False, volatility="medium")
        decision = _decide("Explique-moi la photosynthèse", verdict)
        assert decision.need_search
        assert decision.volatile
        assert decision.reasons == ("model_volatility_medium",)

    def test_unavailable_verdict_removes_nothing(self):
        decision = _decide("combien coûte Netflix ?", ClassificationUnavailable("timeout"))
        assert decision.need_search
        assert decision.domain is None

    def test_versus_sport_intent(self):
        intent = EntityIntent(
            entities=(Entity("Alcaraz", "person"), Entity("Sinner", "person")),
            is_versus_pattern=True,
            likely_domain="sport",
        )
        assert "versus_sport" in search_reasons(TopicSignals(), None, intent)

    def test_high_volatility_domain(self):
        verdict = ClassificationVerdict(domain="weather", needs_web=False, volatility="low")
        assert search_reasons(TopicSignals(), verdict) == ["model_domain_weather"]
