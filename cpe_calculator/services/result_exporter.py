# cpe_calculator/services/result_exporter.py
from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import List, Mapping, Sequence

from cpe_calculator.schemas.email_resolution import EmailStatus
from cpe_calculator.schemas.export import ExportRow
from cpe_calculator.schemas.participant_result import ParticipantResult

EXPORT_HEADERS = [
    "Name",
    "Email",
    "Duration (minutes)",
    "Questions Answered",
    "Credits Earned",
    "Status",
]

SELECTED_STATUS = "selected"


def apply_email_selections(
    results: Sequence[ParticipantResult],
    selections: Mapping[str, str] | None = None,
) -> List[ExportRow]:
    """
    Project results into export rows, applying user email choices.

    `selections` maps a participant's display name to the email picked for
    an ambiguous match. An ambiguous row with a choice gets that email and
    the 'selected' status; one without a choice is exported with no email
    and 'not_found'. Every other row passes through as computed.
    """
    selections = selections or {}
    rows: List[ExportRow] = []

    for r in results:
        email = r.email
        email_status = r.email_status.value

        if r.email_status == EmailStatus.AMBIGUOUS:
            chosen = selections.get(r.name, "")
            email = chosen
            email_status = SELECTED_STATUS if chosen else EmailStatus.NOT_FOUND.value

        rows.append(
            ExportRow(
                name=r.name,
                email=email,
                email_status=email_status,
                duration_minutes=r.duration_minutes,
                questions_answered=r.questions_answered,
                credits=r.actual_credits,
                status=r.status.value,
            )
        )

    return rows


def export_results_csv(
    results: Sequence[ParticipantResult],
    selections: Mapping[str, str] | None = None,
) -> str:
    """
    Render results as CSV text, one row per participant.

    Fields containing a comma, quote or newline are quoted with embedded
    quotes doubled; credits are written with one decimal place.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")

    writer.writerow(EXPORT_HEADERS)
    for row in apply_email_selections(results, selections):
        writer.writerow(
            [
                row.name,
                row.email,
                row.duration_minutes,
                row.questions_answered,
                f"{row.credits:.1f}",
                row.status,
            ]
        )

    return buffer.getvalue()


def generate_export_filename(prefix: str = "cpe_results", now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"{prefix}_{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"
