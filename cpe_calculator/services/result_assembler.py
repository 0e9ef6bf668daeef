# cpe_calculator/services/result_assembler.py
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from cpe_calculator.schemas.attendance import AggregatedParticipant
from cpe_calculator.schemas.email_resolution import DirectEmail, EmailResolution
from cpe_calculator.schemas.participant_result import CalculationSummary, ParticipantResult
from cpe_calculator.schemas.registrant import Registrant
from cpe_calculator.services import credit_engine
from cpe_calculator.services.name_matcher import (
    DEFAULT_AMBIGUITY_GAP,
    DEFAULT_MAX_CANDIDATES,
    DEFAULT_THRESHOLD,
    find_email,
)


def build_poll_engagement(
    responses: Iterable[Tuple[str, Iterable[str]]],
) -> Dict[str, int]:
    """
    Merge poll responses into distinct-poll counts per normalized name.

    `responses` holds (normalized_name, poll_names) pairs, typically one
    pair per participant per poll export. A poll answered in several
    exports is counted once.
    """
    polls_by_name: Dict[str, Set[str]] = {}
    for name, poll_names in responses:
        polls_by_name.setdefault(name, set()).update(poll_names)

    return {name: len(polls) for name, polls in polls_by_name.items()}


def _resolve_email(
    participant: AggregatedParticipant,
    registrants: Sequence[Registrant] | None,
    threshold: float,
    ambiguity_gap: float,
    max_candidates: int,
) -> EmailResolution:
    if participant.email or not registrants:
        return DirectEmail(email=participant.email or "")

    return find_email(
        participant.original_name,
        registrants,
        threshold=threshold,
        ambiguity_gap=ambiguity_gap,
        max_candidates=max_candidates,
    )


def assemble_result(
    participant: AggregatedParticipant,
    poll_engagement: Mapping[str, int],
    registrants: Sequence[Registrant] | None,
    rounding_increment: float,
    *,
    threshold: float = DEFAULT_THRESHOLD,
    ambiguity_gap: float = DEFAULT_AMBIGUITY_GAP,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> ParticipantResult:
    """
    Build the verdict row for a single participant.

    Steps
    -----
    1) Look up distinct polls answered (0 when absent).
    2) Compute potential and actual credits.
    3) Use the supplied email, or, when it is missing and a registrant
       directory is available, resolve one by name.
    4) Derive eligibility and the question requirements for both levels.
    """
    duration = participant.total_duration_minutes
    questions = poll_engagement.get(participant.normalized_name, 0)

    potential = credit_engine.potential_credits(duration, rounding_increment)
    actual = credit_engine.actual_credits(duration, questions, rounding_increment)

    resolution = _resolve_email(
        participant, registrants, threshold, ambiguity_gap, max_candidates
    )
    verdict = credit_engine.eligibility(actual, duration)

    return ParticipantResult(
        name=participant.original_name,
        normalized_name=participant.normalized_name,
        email=resolution.email,
        email_status=resolution.status,
        match_candidates=resolution.candidates,
        duration_minutes=duration,
        actual_credits=actual,
        potential_credits=potential,
        questions_answered=questions,
        required_questions_actual=credit_engine.required_questions(actual),
        required_questions_potential=credit_engine.required_questions(potential),
        eligible=verdict.eligible,
        status=verdict.status,
        reason=verdict.reason,
    )


def assemble_results(
    participants: Iterable[AggregatedParticipant],
    poll_engagement: Mapping[str, int] | None,
    registrants: Sequence[Registrant] | None,
    rounding_increment: float,
    *,
    threshold: float = DEFAULT_THRESHOLD,
    ambiguity_gap: float = DEFAULT_AMBIGUITY_GAP,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
) -> List[ParticipantResult]:
    """
    Build verdict rows for every participant, in the order given.

    Participants are independent of each other; registrants and poll
    engagement are only read.
    """
    engagement = poll_engagement or {}
    return [
        assemble_result(
            participant,
            engagement,
            registrants,
            rounding_increment,
            threshold=threshold,
            ambiguity_gap=ambiguity_gap,
            max_candidates=max_candidates,
        )
        for participant in participants
    ]


def summarize_results(results: Sequence[ParticipantResult]) -> CalculationSummary:
    """
    Count qualified / not qualified participants and total awarded credits.

    Percentages are rounded to 2 decimals (0.0 for an empty set) and the
    credit total, summed over qualified participants only, to 1 decimal.
    """
    total = len(results)
    qualified = 0
    total_credits = 0.0

    for r in results:
        if r.eligible:
            qualified += 1
            total_credits += r.actual_credits

    not_qualified = total - qualified

    if total > 0:
        qualified_pct = (qualified / float(total)) * 100.0
        not_qualified_pct = (not_qualified / float(total)) * 100.0
    else:
        qualified_pct = 0.0
        not_qualified_pct = 0.0

    return CalculationSummary(
        total=total,
        qualified=qualified,
        not_qualified=not_qualified,
        qualified_percent=round(qualified_pct, 2),
        not_qualified_percent=round(not_qualified_pct, 2),
        total_credits=round(total_credits, 1),
    )
