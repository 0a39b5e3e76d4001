"""Effective-question resolution for "answer my previous question" follow-ups.

A short follow-up trigger ("tu n'as pas répondu", "réponds à ma question")
is resolved to the caller's last substantive question. The effective question
is always either the raw message or the stored last question, never a blend.
"""

import logging

from tdai.nlp import vocabulary as vocab
from tdai.nlp.normalizer import extract_keywords, normalize


logger = logging.getLogger(__name__)

MAX_TRIGGER_WORDS = 8

_FOLLOWUP_TRIGGER = vocab.compile_terms(vocab.FOLLOWUP_TRIGGER_TERMS)


def is_followup_trigger(text) -> bool:
    """Short utterance asking the assistant to answer the previous question.

    Any content keyword left once the trigger is removed makes the message a
    new question of its own.
    """
    normalized = normalize(text).strip()
    if not normalized:
        return False

    if len(normalized.split()) > MAX_TRIGGER_WORDS:
        return False

    if not _FOLLOWUP_TRIGGER.search(normalized):
        return False

    remainder = _FOLLOWUP_TRIGGER.sub(" ", normalized)
    return all(k in vocab.FOLLOWUP_FILLER for k in extract_keywords(remainder))


def resolve_effective_question(message: str, last_question: str | None) -> tuple[str, bool]:
    """Return `(effective_question, is_followup)`.

    A trigger with no stored last question is handled as a normal question.
    """
    message = (message or "").strip()

    if last_question and is_followup_trigger(message):
        logger.info("Follow-up trigger resolved to last question %r", last_question)
        return last_question, True

    return message, False
