"""Search-engine query rewriting for volatile questions.

Rewrite logic:
- A two-or-more-entity "versus" sports duel detected by the entity router is
  rewritten with a fixed template (`"<A> vs <B> <result word> <year>"`),
  bypassing the model call entirely.
- Otherwise a constrained completion call rewrites the free-form question
  into a short keyword query, with worked examples for the target language.

Determinism:
- Template and fallback formatting are deterministic.
- Model rewrite output is model-dependent and therefore non-deterministic.

Failure handling:
- Model failures, empty output and over-long output degrade to the trivial
  template `"<question> <year>"`. The rewriter never returns an empty string.
"""

import logging
from datetime import datetime

from tdai.core.routing_types import EntityIntent, ModelEntityIntent, SearchLocale
from tdai.llm.client import CompletionError
from tdai.llm.service import generate_structured


logger = logging.getLogger(__name__)

MAX_QUERY_WORDS = 16

RESULT_WORDS = {
    "fr": "résultat",
    "en": "result",
    "es": "resultado",
    "de": "Ergebnis",
    "it": "risultato",
    "tr": "sonuç",
}


# =========================================================
# WORKED EXAMPLES PER LANGUAGE
# =========================================================

REWRITE_EXAMPLES = {
    "fr": (
        ("Combien coûte l'abonnement Netflix par mois en ce moment ?", "prix abonnement Netflix France {year}"),
        ("C'est qui le président de la République aujourd'hui ?", "président de la République française {year}"),
        ("quelle est la dernière loi votée à l'assemblée ?", "dernière loi adoptée Assemblée nationale {year}"),
    ),
    "en": (
        ("how much is spotify premium now", "Spotify Premium price {year}"),
        ("who is the current CEO of OpenAI?", "OpenAI CEO {year}"),
        ("what happened at the last UFC event", "latest UFC event results {year}"),
    ),
    "es": (
        ("¿cuánto cuesta Netflix en España?", "precio Netflix España {year}"),
    ),
    "de": (
        ("was kostet Netflix in Deutschland?", "Netflix Preis Deutschland {year}"),
    ),
    "it": (
        ("quanto costa Netflix in Italia?", "prezzo Netflix Italia {year}"),
    ),
    "tr": (
        ("Netflix Türkiye'de ne kadar?", "Netflix fiyat Türkiye {year}"),
    ),
}


def _current_year(current_year: int | None) -> int:
    return datetime.now().year if current_year is None else current_year


def _clean_llm_output(text: str) -> str:
    """Normalize rewrite output to a single trimmed line."""
    if not text:
        return ""

    line = text.strip().splitlines()[0].strip()
    line = line.strip('"').strip("'").strip("`").strip()
    if line.lower().startswith("query:"):
        line = line[len("query:"):].strip()
    return line


def fallback_query(question: str, current_year: int | None = None) -> str:
    """Trivial `"<question> <year>"` template."""
    year = _current_year(current_year)
    question = (question or "").strip()
    return f"{question} {year}".strip()


def versus_query(
    intent: EntityIntent,
    language: str = "fr",
    current_year: int | None = None,
) -> str:
    """Templated duel query from the first two entities."""
    year = _current_year(current_year)
    first, second = intent.entities[0].text, intent.entities[1].text
    result_word = RESULT_WORDS.get(language, RESULT_WORDS["en"])
    return f"{first} vs {second} {result_word} {year}"


def build_rewrite_prompt(language: str, current_year: int) -> str:
    """System prompt instructing the rewriting model, with worked examples."""
    examples = REWRITE_EXAMPLES.get(language) or REWRITE_EXAMPLES["en"]
    example_lines = "\n".join(
        f"Question: {q}\nRequête: {r.format(year=current_year)}"
        for q, r in examples
    )

    return (
        "Tu transformes une question en requête pour un moteur de recherche.\n"
        f"Langue de la requête : {language}.\n"
        "Règles :\n"
        "- garde le sujet principal (marque, personne, compétition, pays) ;\n"
        "- supprime les mots inutiles (politesse, « est-ce que », « en ce moment ») ;\n"
        f"- ajoute l'année {current_year} si le sujet dépend du temps "
        "(prix, résultats, titulaires d'un poste, lois, actualité) ;\n"
        "- réponds UNIQUEMENT avec la requête, sur une seule ligne, sans guillemets.\n\n"
        "Exemples :\n"
        f"{example_lines}"
    )


def rewrite_query(
    question: str,
    locale: SearchLocale | None = None,
    intent: ModelEntityIntent | None = None,
    current_year: int | None = None,
) -> str:
    """Rewrite a question into a crisp search-engine query.

    Parsing and decision rules:
    - Versus sports duel (entity router) -> templated query, no model call.
    - Otherwise -> model rewrite with language-specific worked examples.

    Edge cases:
    - Model failure, empty output or output longer than `MAX_QUERY_WORDS`
      words -> `fallback_query`.
    """
    year = _current_year(current_year)
    language = locale.language if locale is not None else "fr"

    if isinstance(intent, EntityIntent) and intent.is_versus_sport:
        query = versus_query(intent, language=language, current_year=year)
        logger.info("Versus template query: %r", query)
        return query

    if not question or not question.strip():
        return fallback_query(question, year)

    try:
        rewritten = generate_structured(build_rewrite_prompt(language, year), question.strip())
    except CompletionError as err:
        logger.info("Query rewrite unavailable (%s); using fallback", err)
        rewritten = None

    rewritten = _clean_llm_output(rewritten)

    if rewritten and len(rewritten.split()) <= MAX_QUERY_WORDS:
        return rewritten

    return fallback_query(question, year)
