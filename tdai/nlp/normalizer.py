"""Text normalization shared by every heuristic in the search pipeline.

Normalization steps:
- Lowercasing.
- Unicode NFD decomposition followed by removal of combining diacritical marks
  (U+0300 to U+036F), so "Assemblée" and "assemblee" compare equal.

Keyword extraction:
- Splits normalized text on non-alphanumeric boundaries.
- Drops tokens of length <= 2 and a fixed French stopword list.

Determinism:
- Pure functions, no I/O, no global state mutation.

Edge cases:
- `None` and empty input yield `""` / `[]`; functions never raise.
"""

import re
import unicodedata

from tdai.core.routing_types import Question


# =========================================================
# FRENCH STOPWORDS
# =========================================================
# Already diacritic-free, since matching happens after `normalize`.

STOPWORDS = frozenset({
    "les", "des", "une", "est", "sont", "etait", "ete", "etre", "avoir",
    "aux", "avec", "dans", "par", "pour", "sur", "sous", "entre", "vers",
    "chez", "sans", "mais", "donc", "car", "que", "qui", "quoi", "dont",
    "quel", "quelle", "quels", "quelles", "lequel", "laquelle",
    "ces", "cet", "cette", "ceci", "cela", "celui", "celle",
    "mon", "ton", "son", "mes", "tes", "ses", "nos", "vos", "leur", "leurs",
    "notre", "votre", "moi", "toi", "lui", "elle", "elles", "eux", "nous", "vous",
    "ils", "tout", "tous", "toute", "toutes", "plus", "moins", "tres", "trop",
    "aussi", "encore", "deja", "bien", "fait", "faire", "peut", "peux",
    "comme", "alors", "quand", "comment", "pourquoi", "ainsi",
    "stp", "svp", "merci", "dis",
})

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def normalize(text) -> str:
    """Return lowercase text with combining diacritical marks removed."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text).lower())
    return _COMBINING_MARKS.sub("", decomposed)


def tokenize(text) -> list[str]:
    """Split normalized text into alphanumeric tokens."""
    normalized = normalize(text)
    if not normalized:
        return []
    return [t for t in _TOKEN_SPLIT.split(normalized) if t]


def extract_keywords(text) -> list[str]:
    """Return distinct content keywords in first-seen order.

    Tokens of length <= 2 and French stopwords are removed.
    """
    keywords: list[str] = []
    seen: set[str] = set()

    for token in tokenize(text):
        if len(token) <= 2 or token in STOPWORDS:
            continue
        if token in seen:
            continue
        seen.add(token)
        keywords.append(token)

    return keywords


def parse_question(text) -> Question:
    """Build the immutable per-request `Question` record."""
    raw = (text or "").strip()
    return Question(
        raw=raw,
        normalized=normalize(raw),
        keywords=tuple(extract_keywords(raw)),
    )
