# cpe_calculator/services/cpe_calculation.py
from __future__ import annotations

import logging
from datetime import time
from typing import Iterable, Mapping, Sequence

from cpe_calculator.core.config import Settings, get_settings
from cpe_calculator.schemas.attendance import AttendanceEntry
from cpe_calculator.schemas.participant_result import CalculationReport
from cpe_calculator.schemas.registrant import Registrant
from cpe_calculator.services.duration_aggregator import DurationAggregator
from cpe_calculator.services.result_assembler import assemble_results, summarize_results

logger = logging.getLogger(__name__)


def run_cpe_calculation(
    entries: Iterable[AttendanceEntry],
    poll_engagement: Mapping[str, int] | None = None,
    registrants: Sequence[Registrant] | None = None,
    *,
    session_start: time | str | None = None,
    session_end: time | str | None = None,
    rounding_increment: float | None = None,
    settings: Settings | None = None,
) -> CalculationReport:
    """
    Execute one credit calculation over already-parsed inputs.

    Behavior
    --------
    1) Merge attendance entries per participant.
    2) Clamp each participant's time to the session window, when one is
       configured.
    3) Compute credits, eligibility and (where needed) resolve emails.
    4) Summarize.

    Parameters
    ----------
    entries:
        Attendance rows, in log order.
    poll_engagement:
        Normalized name -> number of distinct polls answered.
    registrants:
        Optional directory used to find emails missing from the log.
    session_start, session_end, rounding_increment:
        Per-run overrides; `None` falls back to the settings object.
    settings:
        Settings to use instead of `get_settings()`.

    Returns
    -------
    CalculationReport:
        Per-participant results in first-seen order plus the summary.
    """
    settings = settings or get_settings()

    if session_start is None:
        session_start = settings.SESSION_START
    if session_end is None:
        session_end = settings.SESSION_END
    if rounding_increment is None:
        rounding_increment = settings.ROUNDING_INCREMENT

    entries = list(entries)
    aggregated = DurationAggregator.aggregate(entries)
    logger.info(
        "Aggregated %d attendance entries into %d unique participants",
        len(entries),
        len(aggregated),
    )

    aggregated = DurationAggregator.clamp_to_session(aggregated, session_start, session_end)

    logger.info(
        "Using %d registrants for email lookup",
        len(registrants) if registrants else 0,
    )

    results = assemble_results(
        aggregated,
        poll_engagement,
        registrants,
        rounding_increment,
        threshold=settings.MATCH_THRESHOLD,
        ambiguity_gap=settings.AMBIGUITY_GAP,
        max_candidates=settings.MAX_MATCH_CANDIDATES,
    )
    summary = summarize_results(results)

    logger.info(
        "Calculation complete: %d of %d participants qualified (%.1f credits)",
        summary.qualified,
        summary.total,
        summary.total_credits,
    )
    return CalculationReport(results=results, summary=summary)
