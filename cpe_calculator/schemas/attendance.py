# cpe_calculator/schemas/attendance.py
from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, Field

from cpe_calculator.core.text import normalize_name


class AttendanceEntry(BaseModel):
    """
    One already-parsed line of a meeting attendance log.

    A participant who drops and rejoins shows up as several entries; they
    are merged later by `DurationAggregator.aggregate`.
    """

    normalized_name: str = Field(
        ...,
        description="Grouping key: the display name after normalize_name().",
        examples=["jane doe"],
    )
    original_name: str = Field(
        ...,
        description="Display name exactly as it appeared in the log.",
        examples=["Dr. Jane Doe (iPhone)"],
    )
    email: str | None = Field(
        None,
        description="Email reported by the meeting platform, if any.",
        examples=["jane@example.com"],
    )
    join_time: str | None = Field(
        None,
        description="Raw join timestamp; only its time of day is used for clamping.",
        examples=["01/15/2024 09:58:12 AM"],
    )
    leave_time: str | None = Field(
        None,
        description="Raw leave timestamp; only its time of day is used for clamping.",
        examples=["01/15/2024 11:02:40 AM"],
    )
    duration_minutes: int = Field(
        0,
        ge=0,
        description="Duration reported by the platform for this entry, in whole minutes.",
        examples=[64],
    )

    @classmethod
    def from_raw(
        cls,
        name: str,
        email: str | None = None,
        join_time: str | None = None,
        leave_time: str | None = None,
        duration_minutes: Any = None,
    ) -> "AttendanceEntry":
        """
        Build an entry from raw column values.

        The name is normalized here. Durations may arrive as numbers or as
        text such as "64" or "64 mins"; anything without digits is recorded
        as 0.
        """
        return cls(
            normalized_name=normalize_name(name),
            original_name=name,
            email=(email or "").strip() or None,
            join_time=join_time or None,
            leave_time=leave_time or None,
            duration_minutes=_parse_duration(duration_minutes),
        )


_DIGITS_RE = re.compile(r"\d+")


def _parse_duration(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        # NaN / inf from spreadsheet readers
        if not math.isfinite(value):
            return 0
        return max(int(value), 0)

    match = _DIGITS_RE.search(str(value))
    return int(match.group()) if match else 0


class AggregatedParticipant(BaseModel):
    """
    All attendance entries of one participant, merged on the normalized name.
    """

    normalized_name: str = Field(..., examples=["jane doe"])
    original_name: str = Field(
        ...,
        description="Display name of the first entry seen for this participant.",
        examples=["Dr. Jane Doe"],
    )
    email: str | None = Field(
        None,
        description="First non-empty email seen across the merged entries.",
    )
    total_duration_minutes: int = Field(
        ...,
        ge=0,
        description="Sum of entry durations, or the clamped sum once session clamping ran.",
        examples=[64],
    )
    entries: list[AttendanceEntry] = Field(
        default_factory=list,
        description="Merged entries in input order, kept for session clamping.",
    )
