# cpe_calculator/services/credit_engine.py
from __future__ import annotations

from cpe_calculator.schemas.participant_result import Eligibility, ParticipantStatus

MIN_DURATION_MINUTES = 50
MIN_QUALIFYING_TENTHS = 10  # 1.0 credit

REASON_SHORT_DURATION = "Duration < 50 minutes"
REASON_BELOW_MINIMUM = "Did not earn minimum 1.0 credits"

# Credit levels are handled as integer tenths of a credit so the downgrade
# search steps and compares exactly.
_INCREMENT_TENTHS = {1.0: 10, 0.5: 5, 0.2: 2}


def _increment_tenths(increment: float) -> int:
    try:
        return _INCREMENT_TENTHS[float(increment)]
    except KeyError:
        raise ValueError(
            f"Unsupported rounding increment {increment!r}; expected one of 1.0, 0.5, 0.2"
        ) from None


def _to_tenths(credits: float) -> int:
    return int(round(credits * 10))


def _to_credits(tenths: int) -> float:
    return tenths / 10


def _potential_tenths(duration_minutes: float, step: int) -> int:
    if duration_minutes < MIN_DURATION_MINUTES:
        return 0

    # 50 minutes = 1.0 credit on a 0.2-credit (10-minute) grid.
    base = int(duration_minutes // 10) * 2
    return base - base % step


def _required_questions_tenths(tenths: int) -> int:
    if tenths <= 0:
        return 0

    whole, frac = divmod(tenths, 10)
    required = whole * 3
    if frac >= 8:
        required += 2
    elif frac >= 4:
        required += 1
    return required


def potential_credits(duration_minutes: float, increment: float) -> float:
    """
    Credits earned from attendance duration alone.

    Rules
    -----
    - Under 50 minutes earns nothing.
    - Otherwise the duration is truncated to a 10-minute grid where
      50 minutes = 1.0 credit (so 0.2 credit per 10 minutes), then floored
      to the rounding increment: whole credits for 1.0, half credits for
      0.5, unchanged for 0.2.

    Examples: 60 min @ 0.5 -> 1.0; 100 min @ 1.0 -> 2.0; 125 min @ 0.5 -> 2.0.
    """
    return _to_credits(_potential_tenths(duration_minutes, _increment_tenths(increment)))


def required_questions(credits: float) -> int:
    """
    Number of poll answers needed to claim `credits`.

    Three questions per whole credit, plus 2 when the fractional part is
    at least 0.8, otherwise plus 1 when it is at least 0.4. The two bonuses
    never stack.
    """
    return _required_questions_tenths(_to_tenths(credits))


def actual_credits(
    duration_minutes: float,
    questions_answered: int,
    increment: float,
) -> float:
    """
    Credits awarded once poll engagement is taken into account.

    Starting from the potential credits, the level is stepped down one
    increment at a time until the participant answered enough questions
    for it. `required_questions` never decreases as the level grows, so
    this finds the highest satisfiable level at or below potential.
    Anything below 1.0 credit is awarded as 0.
    """
    step = _increment_tenths(increment)
    level = _potential_tenths(duration_minutes, step)

    while level > 0 and questions_answered < _required_questions_tenths(level):
        level -= step

    if level < MIN_QUALIFYING_TENTHS:
        return 0.0
    return _to_credits(level)


def eligibility(actual: float, duration_minutes: float) -> Eligibility:
    """
    Certificate verdict for the awarded credits.
    """
    if actual > 0:
        return Eligibility(eligible=True, status=ParticipantStatus.QUALIFIED, reason="")

    reason = (
        REASON_SHORT_DURATION
        if duration_minutes < MIN_DURATION_MINUTES
        else REASON_BELOW_MINIMUM
    )
    return Eligibility(eligible=False, status=ParticipantStatus.NOT_QUALIFIED, reason=reason)
