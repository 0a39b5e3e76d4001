"""Model-assisted (advisory) classifiers for the search decision.

Intent classification logic:
- `classify_domain` asks a small completion model for a strict JSON verdict
  `{domain, needs_web, volatility, country}`.
- `extract_entity_intent` asks for `{entities: [{text, type}], is_vs_pattern,
  likely_domain}` without any a-priori category hints.

Parsing and normalization:
- The JSON cleaner strips markdown fences and extracts the outermost object.
- Payloads are validated with pydantic models. `domain` and `volatility` are
  closed enumerations; an unknown value makes the verdict unusable.
  Entity types and `likely_domain` are coerced to `"other"` instead.

Failure handling:
- Transport failures, non-2xx statuses, timeouts, missing credentials and
  parse/validation failures all return `ClassificationUnavailable`. Nothing
  in this module raises for "the model returned garbage".

Determinism:
- Temperature 0 is requested, but output is still model-dependent.
"""

import json
import logging
import re

from pydantic import BaseModel, ValidationError, field_validator

from tdai.core.routing_types import (
    DOMAINS,
    ENTITY_TYPES,
    LIKELY_DOMAINS,
    VOLATILITY_LEVELS,
    ClassificationUnavailable,
    ClassificationVerdict,
    Entity,
    EntityIntent,
    ModelEntityIntent,
    ModelVerdict,
)
from tdai.llm.client import CompletionError
from tdai.llm.service import generate_structured
from tdai.nlp.normalizer import normalize


logger = logging.getLogger(__name__)


# =========================================================
# PROMPTS
# =========================================================

DOMAIN_CLASSIFIER_PROMPT = (
    "Tu es un classifieur. Analyse la question de l'utilisateur et réponds "
    "UNIQUEMENT avec un objet JSON strict, sans texte autour :\n"
    '{"domain": "<domaine>", "needs_web": true|false, '
    '"volatility": "high"|"medium"|"low", "country": "<pays>"}\n\n'
    f"Domaines autorisés : {', '.join(DOMAINS)}.\n"
    "- needs_web = true si la bonne réponse dépend d'informations récentes "
    "(prix, résultats, titulaires d'un poste, lois, actualité).\n"
    "- volatility = high si la réponse change souvent (prix, scores, actualité), "
    "medium si elle change parfois, low si elle est stable.\n"
    "- country = \"france\" par défaut, sinon le pays explicitement visé "
    "(\"usa\", \"uk\", \"spain\", ...)."
)

ENTITY_ROUTER_PROMPT = (
    "Extrait les entités nommées de la question et son intention. Réponds "
    "UNIQUEMENT avec un objet JSON strict :\n"
    '{"entities": [{"text": "<entité>", "type": "person"|"organization"|"location"|"other"}], '
    '"is_vs_pattern": true|false, '
    '"likely_domain": "sport"|"politics"|"business"|"entertainment"|"other"}\n\n'
    "- is_vs_pattern = true si la question oppose deux entités "
    "(\"X vs Y\", \"X contre Y\", \"X a affronté Y\").\n"
    "- Garde l'ordre d'apparition des entités."
)


# =========================================================
# PAYLOAD SCHEMAS
# =========================================================

class DomainVerdictPayload(BaseModel):
    domain: str
    needs_web: bool
    volatility: str
    country: str = "france"

    @field_validator("domain")
    @classmethod
    def _check_domain(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in DOMAINS:
            raise ValueError(f"unknown domain {value!r}")
        return value

    @field_validator("volatility")
    @classmethod
    def _check_volatility(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in VOLATILITY_LEVELS:
            raise ValueError(f"unknown volatility {value!r}")
        return value

    @field_validator("country", mode="before")
    @classmethod
    def _clean_country(cls, value) -> str:
        cleaned = normalize(value or "").strip()
        return cleaned or "france"


class EntityPayload(BaseModel):
    text: str
    type: str = "other"

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value) -> str:
        value = str(value or "").strip().lower()
        return value if value in ENTITY_TYPES else "other"


class EntityIntentPayload(BaseModel):
    entities: list[EntityPayload] = []
    is_vs_pattern: bool = False
    likely_domain: str = "other"

    @field_validator("likely_domain", mode="before")
    @classmethod
    def _coerce_domain(cls, value) -> str:
        value = str(value or "").strip().lower()
        return value if value in LIKELY_DOMAINS else "other"


# =========================================================
# HELPER: JSON CLEANER
# =========================================================

def _extract_json(text: str):
    """Extract the outermost JSON object candidate from raw model output text."""
    if not text:
        return None

    text = text.strip()

    text = re.sub(r"^```json", "", text, flags=re.IGNORECASE).strip()
    text = re.sub(r"^```", "", text).strip()
    text = re.sub(r"```$", "", text).strip()

    match = re.search(r"\{.*\}", text, re.DOTALL)
    if match:
        return match.group(0)

    return None


def _call_json(system_prompt: str, question: str) -> dict | ClassificationUnavailable:
    """Run one structured call and return the decoded JSON object."""
    try:
        raw = generate_structured(system_prompt, question)
    except CompletionError as err:
        logger.info("Advisory classifier unavailable: %s", err)
        return ClassificationUnavailable(reason=str(err))

    snippet = _extract_json(raw)
    if snippet is None:
        return ClassificationUnavailable(reason="no JSON object in model output")

    try:
        data = json.loads(snippet)
    except ValueError:
        return ClassificationUnavailable(reason="invalid JSON in model output")

    if not isinstance(data, dict):
        return ClassificationUnavailable(reason="model output is not a JSON object")

    return data


# =========================================================
# PUBLIC CLASSIFIERS
# =========================================================

def parse_domain_verdict(data: dict) -> ModelVerdict:
    """Validate a decoded domain/volatility payload."""
    try:
        payload = DomainVerdictPayload.model_validate(data)
    except ValidationError as err:
        return ClassificationUnavailable(reason=f"invalid verdict: {err.error_count()} error(s)")

    return ClassificationVerdict(
        domain=payload.domain,
        needs_web=payload.needs_web,
        volatility=payload.volatility,
        country=payload.country,
    )


def parse_entity_intent(data: dict) -> ModelEntityIntent:
    """Validate a decoded entity/intent payload."""
    try:
        payload = EntityIntentPayload.model_validate(data)
    except ValidationError as err:
        return ClassificationUnavailable(reason=f"invalid entity payload: {err.error_count()} error(s)")

    entities = tuple(
        Entity(text=e.text.strip(), type=e.type)
        for e in payload.entities
        if e.text and e.text.strip()
    )
    return EntityIntent(
        entities=entities,
        is_versus_pattern=payload.is_vs_pattern,
        likely_domain=payload.likely_domain,
    )


def classify_domain(question: str) -> ModelVerdict:
    """Ask the classifier model for a domain/volatility verdict."""
    if not question or not question.strip():
        return ClassificationUnavailable(reason="empty question")

    data = _call_json(DOMAIN_CLASSIFIER_PROMPT, question.strip())
    if isinstance(data, ClassificationUnavailable):
        return data

    verdict = parse_domain_verdict(data)
    logger.debug("Model verdict for %r: %s", question, verdict)
    return verdict


def extract_entity_intent(question: str) -> ModelEntityIntent:
    """Ask the classifier model for entities and duel/domain intent."""
    if not question or not question.strip():
        return ClassificationUnavailable(reason="empty question")

    data = _call_json(ENTITY_ROUTER_PROMPT, question.strip())
    if isinstance(data, ClassificationUnavailable):
        return data

    intent = parse_entity_intent(data)
    logger.debug("Entity intent for %r: %s", question, intent)
    return intent
