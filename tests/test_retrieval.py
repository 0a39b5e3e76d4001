"""Result scoring, threshold filtering and summary assembly."""

import pytest

from tdai.core.routing_types import ScoredResult, SearchResult
from tdai.retrieval.context_builder import MAX_SNIPPET_CHARS, build_search_context
from tdai.retrieval.result_filter import filter_results
from tdai.retrieval.scoring import (
    ScoringRules,
    is_trusted_host,
    score_components,
    score_result,
    score_results,
)


NETFLIX_QUESTION = "combien coûte Netflix par mois"

PRICE_ARTICLE = SearchResult(
    title="Netflix : le prix de l'abonnement augmente en 2024",
    url="https://www.lesnumeriques.com/netflix-prix-2024",
    snippet="L'abonnement Standard passe à 13,49 € par mois en France.",
)

SERIES_ARTICLE = SearchResult(
    title="Netflix : les nouvelles séries originales du mois",
    url="https://www.allocine.fr/series/netflix",
    snippet="Découvrez les séries et films à voir sur Netflix ce mois-ci.",
)


def _scored(*scores):
    return [
        ScoredResult(SearchResult(title=f"r{i}", url=f"https://example.com/{i}", snippet=""), score)
        for i, score in enumerate(scores)
    ]


class TestScoring:
    def test_price_article_components(self):
        components = dict(score_components(NETFLIX_QUESTION, PRICE_ARTICLE, current_year=2025))
        assert components == {
            "keyword_overlap": 4,
            "product": 4,
            "price": 3,
            "recent_year_2024": 1,
        }
        assert score_result(NETFLIX_QUESTION, PRICE_ARTICLE, current_year=2025) == 12

    def test_entertainment_drift_is_penalized(self):
        components = dict(score_components(NETFLIX_QUESTION, SERIES_ARTICLE, current_year=2025))
        assert components["entertainment_drift"] == -5
        assert components["domestic_tld"] == 1
        assert "price" not in components
        assert score_result(NETFLIX_QUESTION, SERIES_ARTICLE, current_year=2025) == 4

    def test_entertainment_question_matches_entertainment_result(self):
        components = score_components("quelles séries regarder sur Netflix", SERIES_ARTICLE, current_year=2025)
        assert ("entertainment_match", 2) in components

    def test_sports_drift_is_penalized(self):
        result = SearchResult(
            title="Netflix diffuse un match de football",
            url="https://sport.example.com/netflix-match",
            snippet="La diffusion du match commence à 21h.",
        )
        components = dict(score_components(NETFLIX_QUESTION, result, current_year=2025))
        assert components["sports_drift"] == -4
        assert "sports_match" not in components

    def test_sports_question_matches_sports_result(self):
        result = SearchResult(
            title="PSG - OM : le résultat du match",
            url="https://sport.example.com/psg-om",
            snippet="Victoire 2-1 au Parc des Princes.",
        )
        components = score_components("qui a gagné le match PSG OM", result, current_year=2025)
        assert ("sports_match", 2) in components

    def test_politics_drift_is_penalized(self):
        result = SearchResult(
            title="Élections : les sondages du mois",
            url="https://news.example.com/sondages",
            snippet="Netflix rachète un studio.",
        )
        components = dict(score_components(NETFLIX_QUESTION, result, current_year=2025))
        assert components["politics_drift"] == -4

    def test_politics_question_matches_politics_result(self):
        result = SearchResult(
            title="Élections : les derniers sondages",
            url="https://news.example.com/sondages",
            snippet="Les intentions de vote à un mois du scrutin.",
        )
        components = score_components("que disent les sondages pour les élections", result, current_year=2025)
        assert ("politics_match", 2) in components

    def test_real_estate_drift_is_penalized(self):
        result = SearchResult(
            title="Appartement à vendre à Paris",
            url="https://immo.example.com/paris",
            snippet="Loyer de 1200 € par mois, charges comprises.",
        )
        components = dict(score_components(NETFLIX_QUESTION, result, current_year=2025))
        assert components["real_estate_drift"] == -5

    def test_person_in_role_bonus(self):
        result = SearchResult(
            title="Tesla : Elon Musk reste PDG",
            url="https://eco.example.com/tesla-pdg",
            snippet="Le conseil d'administration a confirmé son dirigeant.",
        )
        components = dict(score_components("Qui est le PDG de Tesla ?", result, current_year=2025))
        assert components["person_in_role"] == 3

    def test_amounts_are_not_scored_as_years(self):
        result = SearchResult(
            title="Un PC portable à 2099 euros",
            url="https://tech.example.com/pc",
            snippet="Le modèle 2025 coûte 2099 €.",
        )
        components = dict(score_components("prix pc portable", result, current_year=2025))
        assert components["recent_year_2025"] == 1
        assert "future_year_2099" not in components

    def test_amazon_prime_offer_gets_product_and_price_bonuses(self):
        result = SearchResult(
            title="Amazon Prime : le prix de l'abonnement en France",
            url="https://www.amazon.fr/prime",
            snippet="L'abonnement Amazon Prime coûte 6,99 € par mois ou 69,90 € par an.",
        )
        components = dict(score_components(
            "Quel est le prix de l'abonnement Amazon Prime en France ?", result, current_year=2025
        ))
        assert components["product"] == 4
        assert components["price"] == 3
        assert components["trusted_domain"] == 2
        assert components["domestic_tld"] == 1
        assert all(points > 0 for points in components.values())

    def test_no_overlap_penalty(self):
        result = SearchResult(
            title="Recette de crêpes",
            url="https://cuisine.example.com/crepes",
            snippet="Une recette facile",
        )
        assert score_components("prix amazon prime", result, current_year=2025) == [("no_overlap", -4)]

    def test_future_and_recent_years(self):
        result = SearchResult(
            title="Calendrier 2025 et prévisions 2030",
            url="https://example.com/calendrier",
            snippet="",
        )
        components = dict(score_components("calendrier", result, current_year=2025))
        assert components["recent_year_2025"] == 1
        assert components["future_year_2030"] == -3

    def test_rules_toggle_independently(self):
        rules = ScoringRules(product=False, years=False)
        components = dict(score_components(NETFLIX_QUESTION, PRICE_ARTICLE, current_year=2025, rules=rules))
        assert components == {"keyword_overlap": 4, "price": 3}

    def test_trusted_domain_bonus(self):
        result = SearchResult(
            title="Loi sur le travail",
            url="https://www.legifrance.gouv.fr/loi/123",
            snippet="Texte officiel",
        )
        components = dict(score_components("quelle loi", result, current_year=2025))
        assert components["trusted_domain"] == 2

    def test_score_results_preserves_order(self):
        scored = score_results(NETFLIX_QUESTION, [SERIES_ARTICLE, PRICE_ARTICLE], current_year=2025)
        assert [item.result for item in scored] == [SERIES_ARTICLE, PRICE_ARTICLE]
        assert [item.score for item in scored] == [4, 12]


class TestTrustedHosts:
    @pytest.mark.parametrize("host", ["fr.wikipedia.org", "www.legifrance.gouv.fr", "amazon.fr"])
    def test_trusted(self, host):
        assert is_trusted_host(host)

    @pytest.mark.parametrize("host", ["notwikipedia.org", "wikipedia.org.evil.com", "bbc.co.uk", ""])
    def test_untrusted(self, host):
        assert not is_trusted_host(host)


class TestResultFilter:
    def test_margin_keeps_close_results(self):
        kept = filter_results(_scored(1, 5, -2, 3), margin=3)
        assert [item.score for item in kept] == [5, 3]

    def test_negative_best_drops_everything(self):
        assert filter_results(_scored(-1, -3), margin=3) == []

    def test_zero_best_is_kept(self):
        kept = filter_results(_scored(0, -1), margin=3)
        assert [item.score for item in kept] == [0]

    def test_ties_keep_gateway_order(self):
        scored = _scored(4, 4, 4)
        kept = filter_results(scored, margin=0)
        assert kept == scored

    def test_empty_threshold_keeps_single_best(self):
        scored = _scored(2, 5, 5)
        kept = filter_results(scored, margin=-1)
        assert kept == [scored[1]]

    def test_empty_input(self):
        assert filter_results([]) == []

    def test_relevant_article_survives_drifting_one(self):
        scored = score_results(NETFLIX_QUESTION, [SERIES_ARTICLE, PRICE_ARTICLE], current_year=2025)
        kept = filter_results(scored, margin=3)
        assert [item.result for item in kept] == [PRICE_ARTICLE]


class TestContextBuilder:
    def test_numbered_entries(self):
        context = build_search_context([ScoredResult(PRICE_ARTICLE, 12), ScoredResult(SERIES_ARTICLE, 4)])
        assert context == (
            "[1] Netflix : le prix de l'abonnement augmente en 2024\n"
            "L'abonnement Standard passe à 13,49 € par mois en France.\n"
            "Source : https://www.lesnumeriques.com/netflix-prix-2024\n\n"
            "[2] Netflix : les nouvelles séries originales du mois\n"
            "Découvrez les séries et films à voir sur Netflix ce mois-ci.\n"
            "Source : https://www.allocine.fr/series/netflix"
        )

    def test_only_three_results_are_summarized(self):
        context = build_search_context(_scored(5, 4, 3, 2))
        assert "[3] r2" in context
        assert "[4]" not in context

    def test_long_snippets_are_trimmed(self):
        result = SearchResult(title="t", url="https://example.com", snippet="a" * 1000)
        context = build_search_context([ScoredResult(result, 1)])
        snippet_line = context.splitlines()[1]
        assert snippet_line == "a" * MAX_SNIPPET_CHARS + "…"

    def test_empty(self):
        assert build_search_context([]) == ""
