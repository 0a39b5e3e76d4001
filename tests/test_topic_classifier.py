"""Regex topic detectors, normalization and aggregated signals."""

from tdai.core.routing_types import Question
from tdai.nlp.normalizer import extract_keywords, normalize, parse_question, tokenize
from tdai.nlp.topic_classifier import (
    analyze_topics,
    extract_years,
    has_volatile_year,
    is_future_question,
    is_generic_current_affair_question,
    is_person_in_role_question,
    is_price_question,
    is_product_or_service_question,
    is_recent_law_or_politics_question,
    is_simple_greeting,
    is_sports_like_question,
    is_tech_or_global_info_question,
    is_volatile_topic,
    suggests_web,
)


class TestNormalizer:
    def test_strips_case_and_diacritics(self):
        assert normalize("Élysée, ÉTÉ à Noël") == "elysee, ete a noel"

    def test_empty_and_none(self):
        assert normalize(None) == ""
        assert normalize("") == ""
        assert tokenize(None) == []
        assert extract_keywords(None) == []

    def test_idempotent(self):
        for text in ("Combien coûte Netflix ?", "la dernière loi", "PSG contre OM"):
            once = normalize(text)
            assert normalize(once) == once

    def test_keywords_drop_short_tokens_and_stopwords(self):
        keywords = extract_keywords("Quel est le prix de l'abonnement Netflix ?")
        assert keywords == ["prix", "abonnement", "netflix"]

    def test_keywords_are_distinct_in_first_seen_order(self):
        assert extract_keywords("Netflix netflix NETFLIX prix") == ["netflix", "prix"]

    def test_parse_question(self):
        question = parse_question("  Combien coûte Netflix ?  ")
        assert question == Question(
            raw="Combien coûte Netflix ?",
            normalized="combien coute netflix ?",
            keywords=("combien", "coute", "netflix"),
        )


class TestDetectors:
    def test_price_question(self):
        assert is_price_question("combien coûte l'abonnement Netflix")
        assert not is_price_question("raconte-moi une histoire")

    def test_product_or_service(self):
        assert is_product_or_service_question("Le forfait Free Mobile")
        assert is_product_or_service_question("Amazon Prime vaut-il le coup ?")
        assert not is_product_or_service_question("Explique la photosynthèse")

    def test_person_in_role(self):
        assert is_person_in_role_question("Qui est le PDG de Tesla ?")
        assert is_person_in_role_question("qui est le premier ministre")

    def test_law_vocabulary_alone_is_not_recent_law(self):
        assert not is_recent_law_or_politics_question("qu'est-ce qu'une loi ?")

    def test_recent_law_with_recency_and_government(self):
        assert is_recent_law_or_politics_question("la dernière loi votée à l'Assemblée Nationale")

    def test_law_with_government_context_only(self):
        assert is_recent_law_or_politics_question("la réforme des retraites au Sénat")

    def test_current_affairs(self):
        assert is_generic_current_affair_question("quelle est la météo à Lyon")
        assert is_generic_current_affair_question("le taux du livret A")
        assert is_generic_current_affair_question("les résultats des élections")

    def test_sports_like(self):
        assert is_sports_like_question("PSG contre OM")
        assert is_sports_like_question("Alcaraz vs Sinner")
        assert is_sports_like_question("le dernier combat UFC")
        assert not is_sports_like_question("Explique la photosynthèse")

    def test_everyday_contre_is_not_a_duel(self):
        assert not is_sports_like_question("Comment lutter contre la procrastination ?")
        assert not is_sports_like_question("Que faire contre le stress ?")
        assert not is_sports_like_question("un remède contre l'insomnie")
        assert is_sports_like_question("Nadal contre Djokovic")

    def test_bare_coach_is_not_an_office_holder(self):
        assert not is_person_in_role_question("J'ai besoin d'un coach pour m'organiser")
        assert is_person_in_role_question("qui est l'entraîneur du PSG")

    def test_generic_app_words_need_a_brand(self):
        assert not is_product_or_service_question("Quelle application pour gérer mon TDAH ?")
        assert not is_product_or_service_question("un logiciel pour prendre des notes")
        assert is_product_or_service_question("l'application Doctolib")

    def test_everyday_advice_is_not_volatile(self):
        for question in (
            "Comment lutter contre la procrastination ?",
            "Que faire contre le stress ?",
            "J'ai besoin d'un coach pour m'organiser",
            "Quelle application pour gérer mon TDAH ?",
        ):
            assert not is_volatile_topic(question), question

    def test_tech_or_global(self):
        assert is_tech_or_global_info_question("quel est le meilleur outil d'IA pour coder")
        assert not is_tech_or_global_info_question("j'ai faim")

    def test_volatile_year_window(self):
        assert has_volatile_year("les prix en 2024")
        assert has_volatile_year("en 2039")
        assert not has_volatile_year("en 2019")
        assert not has_volatile_year("en 2040")

    def test_volatile_topic(self):
        assert is_volatile_topic("Qui est le PDG de Tesla aujourd'hui ?")
        assert is_volatile_topic("il s'est passé quoi hier ?")
        assert not is_volatile_topic("Explique-moi la photosynthèse")
        assert not is_volatile_topic("")

    def test_suggests_web(self):
        assert suggests_web("cherche sur internet les dernières actus")
        assert suggests_web("c'est combien un abo ?")
        assert not suggests_web("raconte-moi une blague")


class TestTemporal:
    def test_extract_years_distinct(self):
        assert extract_years("2024, 2025 et encore 2024") == [2024, 2025]

    def test_future_year_beyond_horizon(self):
        assert is_future_question("Qui sera président en 2030 ?", current_year=2025)

    def test_near_term_year_is_not_future(self):
        assert not is_future_question("Qui a gagné en 2025 ?", current_year=2025)
        assert not is_future_question("Le calendrier 2026", current_year=2025)

    def test_in_n_years(self):
        assert is_future_question("Quel sera le prix dans 5 ans ?", current_year=2025)
        assert not is_future_question("il y a dans 1 ans", current_year=2025)

    def test_future_phrases(self):
        assert is_future_question("À quoi ressemblera Paris dans le futur ?", current_year=2025)

    def test_prices_are_not_years(self):
        assert extract_years("Un PC portable à 2099 euros ou 1999,90 € en 2024") == [2024]
        assert not is_future_question("Un PC portable à 2099 euros, ça vaut le coup ?", current_year=2026)
        assert not is_future_question("une montre à 2050€", current_year=2026)
        assert not has_volatile_year("un vélo à 2025 $")
        assert is_future_question("les JO en 2036 en Europe", current_year=2026)


class TestGreetings:
    def test_plain_greetings(self):
        assert is_simple_greeting("Salut")
        assert is_simple_greeting("Bonjour TDAI !")
        assert is_simple_greeting("ça va ?")
        assert is_simple_greeting("merci beaucoup")

    def test_greeting_with_a_question_is_not_simple(self):
        assert not is_simple_greeting("Salut, combien coûte Netflix ?")
        assert not is_simple_greeting("")


class TestTopicSignals:
    def test_greeting_signals(self):
        signals = analyze_topics("Salut")
        assert signals.greeting
        assert not signals.volatile
        assert signals.fired() == ["greeting"]

    def test_price_signals(self):
        signals = analyze_topics("Quel est le prix de l'abonnement Amazon Prime en France ?")
        assert signals.price
        assert signals.product
        assert signals.global_brand
        assert signals.volatile
        assert signals.suggests_web

    def test_empty_text(self):
        signals = analyze_topics(None)
        assert not signals.volatile
        assert signals.fired() == []
