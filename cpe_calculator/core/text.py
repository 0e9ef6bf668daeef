# cpe_calculator/core/text.py
from __future__ import annotations

import re
import unicodedata
from typing import Any

# Honorifics, generational suffixes, professional credentials and the device
# labels meeting clients append to display names ("Jane Doe iPhone").
NAME_NOISE_TOKENS = (
    "dr", "mr", "mrs", "ms", "prof",
    "jr", "sr", "ii", "iii", "iv",
    "cpa", "cma", "mba", "phd", "cgba", "pgp-dsba", "cfm", "ea", "cb",
    "cisa", "cism", "csca",
    "iphone", "ipad", "android", "mobile", "desktop", "pc",
)

_NOISE_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(t) for t in NAME_NOISE_TOKENS) + r")\b\.?"
)
_PARENS_RE = re.compile(r"\([^)]*\)")
_NON_LETTER_RE = re.compile(r"[^a-z\s]")
_WS_RE = re.compile(r"\s+")


def strip_diacritics(s: str) -> str:
    decomposed = unicodedata.normalize("NFD", s)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(name: Any) -> str:
    """
    Normalize a person's display name into a matching/grouping key.

    - lowercase, diacritics folded ("José" -> "jose")
    - titles, credentials and device tokens removed
    - parenthetical text removed ("Jane Doe (she/her)" -> "jane doe")
    - anything that is not a letter or a space removed
    - whitespace collapsed and trimmed

    None and empty input give an empty string.
    """
    if name is None:
        return ""

    s = strip_diacritics(str(name)).lower()
    s = _PARENS_RE.sub(" ", s)
    s = _NOISE_RE.sub(" ", s)
    s = _NON_LETTER_RE.sub("", s)
    return _WS_RE.sub(" ", s).strip()


def reverse_name(name: str) -> str:
    """Move the last token to the front: "jane q doe" -> "doe jane q"."""
    parts = [p for p in name.split(" ") if p]
    if len(parts) < 2:
        return name
    return f"{parts[-1]} {' '.join(parts[:-1])}"
