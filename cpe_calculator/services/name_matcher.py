# cpe_calculator/services/name_matcher.py
from __future__ import annotations

import logging
from typing import Sequence

from rapidfuzz.distance import Levenshtein

from cpe_calculator.core.text import normalize_name, reverse_name
from cpe_calculator.schemas.email_resolution import (
    AmbiguousEmail,
    EmailResolution,
    MatchedEmail,
    NotFoundEmail,
)
from cpe_calculator.schemas.registrant import MatchCandidate, Registrant

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.65
DEFAULT_AMBIGUITY_GAP = 0.2
DEFAULT_MAX_CANDIDATES = 3

# Token-level edit similarity only counts when it is this close.
TOKEN_EDIT_CUTOFF = 0.85

# Absorbs float error in score differences such as 1.0 - 0.8.
_GAP_EPSILON = 1e-9


def levenshtein_distance(a: str, b: str) -> int:
    return Levenshtein.distance(a, b)


def edit_similarity(a: str, b: str) -> float:
    """
    1 - levenshtein(a, b) / max(len(a), len(b)).

    1.0 for identical strings, 0.0 when either side is empty.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))


def _token_score(t1: str, t2: str) -> float:
    if t1 == t2:
        return 1.0
    if len(t1) < 3 or len(t2) < 3:
        return 0.0

    # "chris" vs "christopher", "ann" vs "joann"
    if t1.startswith(t2) or t2.startswith(t1) or t1.endswith(t2) or t2.endswith(t1):
        return min(len(t1), len(t2)) / max(len(t1), len(t2))

    similarity = edit_similarity(t1, t2)
    return similarity if similarity > TOKEN_EDIT_CUTOFF else 0.0


def token_similarity(a: str, b: str) -> float:
    """
    Compare two names token by token, ignoring single-letter tokens.

    Each token of `a` takes its best score against the tokens of `b`; the
    sum is divided by the larger token count so extra or missing tokens
    lower the score.
    """
    tokens_a = [t for t in a.split(" ") if len(t) > 1]
    tokens_b = [t for t in b.split(" ") if len(t) > 1]

    if not tokens_a or not tokens_b:
        return 0.0

    total = 0.0
    for t1 in tokens_a:
        total += max(_token_score(t1, t2) for t2 in tokens_b)

    return total / max(len(tokens_a), len(tokens_b))


def score_to_confidence(score: float) -> int:
    return int(round(score * 100))


def score_registrant(normalized_participant: str, registrant: Registrant) -> float:
    """
    Best similarity between a normalized participant name and a registrant.

    Tries the full name, the full name with the surname moved first, the
    "first last" concatenation and the token-level comparison.
    """
    full_name = registrant.normalized_full_name
    first_last = normalize_name(f"{registrant.first_name} {registrant.last_name}")

    return max(
        edit_similarity(normalized_participant, full_name),
        edit_similarity(normalized_participant, reverse_name(full_name)),
        edit_similarity(normalized_participant, first_last),
        token_similarity(normalized_participant, full_name),
    )


def find_email(
    participant_name: str,
    registrants: Sequence[Registrant] | None,
    threshold: float = DEFAULT_THRESHOLD,
    ambiguity_gap: float = DEFAULT_AMBIGUITY_GAP,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> EmailResolution:
    """
    Resolve a participant's display name to a registrant email.

    Rules
    -----
    - Every registrant is scored (see `score_registrant`); those scoring
      below `threshold` are dropped.
    - No survivors => NotFoundEmail.
    - A single survivor, or a best score leading the runner-up by at least
      `ambiguity_gap` => MatchedEmail with that one candidate.
    - Otherwise => AmbiguousEmail with the best `max_candidates`
      candidates, highest score first.

    The registrant sequence is only read.
    """
    normalized = normalize_name(participant_name)
    if not normalized or not registrants:
        return NotFoundEmail()

    scored: list[MatchCandidate] = []
    for registrant in registrants:
        score = score_registrant(normalized, registrant)
        if score < threshold:
            continue
        scored.append(
            MatchCandidate(
                email=registrant.email,
                display_name=registrant.original_full_name,
                score=score,
                confidence_percent=score_to_confidence(score),
            )
        )

    if not scored:
        logger.debug("No registrant reached %.2f for %r", threshold, participant_name)
        return NotFoundEmail()

    # Stable sort keeps directory order among equal scores.
    scored.sort(key=lambda c: c.score, reverse=True)

    top = scored[0]
    if len(scored) == 1 or top.score - scored[1].score >= ambiguity_gap - _GAP_EPSILON:
        return MatchedEmail(candidate=top)

    logger.debug(
        "Ambiguous match for %r: %d candidates within %.2f",
        participant_name,
        len(scored),
        ambiguity_gap,
    )
    return AmbiguousEmail(candidates=scored[:max_candidates])
