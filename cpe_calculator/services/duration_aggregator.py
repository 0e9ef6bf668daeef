# cpe_calculator/services/duration_aggregator.py
from __future__ import annotations

import logging
import re
from datetime import datetime, time
from typing import Dict, Iterable, List, Optional

from dateutil import parser as dtparser

from cpe_calculator.schemas.attendance import AggregatedParticipant, AttendanceEntry

logger = logging.getLogger(__name__)

_TIME_OF_DAY_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def parse_time_of_day(value: time | str | None) -> Optional[time]:
    """
    Parse a session bound given as a `time` or an "HH:MM[:SS]" string.

    Returns None for missing or malformed input.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value

    match = _TIME_OF_DAY_RE.match(str(value))
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def parse_timestamp(value: str | None) -> Optional[datetime]:
    """
    Parse a join/leave timestamp from an attendance export.

    Accepts ISO-8601 as well as "MM/DD/YYYY HH:MM[:SS] [AM|PM]". The
    wall-clock time is kept as written; no timezone conversion happens.
    Returns None if parsing fails.
    """
    if not value or not str(value).strip():
        return None
    try:
        return dtparser.parse(str(value))
    except (ValueError, OverflowError):
        return None


def _minutes_since_midnight(value: time | datetime) -> int:
    return value.hour * 60 + value.minute


class DurationAggregator:
    """
    Merges attendance entries per participant and restricts them to the
    configured session window.
    """

    @staticmethod
    def aggregate(entries: Iterable[AttendanceEntry]) -> List[AggregatedParticipant]:
        """
        Group entries by normalized name.

        Rules
        -----
        - Durations are summed.
        - The first non-empty email seen wins.
        - Entries are kept in input order for later clamping.
        - Output order is the first-seen order of each name.
        - Entries whose name normalizes to "" (e.g. "(iPhone)") are dropped.
        """
        groups: Dict[str, dict] = {}

        for entry in entries:
            if not entry.normalized_name:
                logger.debug("Dropping attendance entry with no usable name: %r", entry.original_name)
                continue

            group = groups.get(entry.normalized_name)
            if group is None:
                group = {
                    "normalized_name": entry.normalized_name,
                    "original_name": entry.original_name,
                    "email": None,
                    "total_duration_minutes": 0,
                    "entries": [],
                }
                groups[entry.normalized_name] = group

            group["total_duration_minutes"] += entry.duration_minutes
            group["entries"].append(entry)

            if not group["email"] and entry.email:
                group["email"] = entry.email

        return [AggregatedParticipant(**group) for group in groups.values()]

    @staticmethod
    def clamp_to_session(
        participants: List[AggregatedParticipant],
        session_start: time | str | None,
        session_end: time | str | None,
    ) -> List[AggregatedParticipant]:
        """
        Recompute each participant's total as time spent inside the session.

        Rules
        -----
        - If either bound is missing or malformed, participants are returned
          unchanged.
        - Per entry, [join, leave] is intersected with [start, end] on
          minutes since midnight; dates and seconds are ignored, so a
          session crossing midnight is not handled.
        - An entry whose join or leave time cannot be parsed contributes
          its reported duration unclamped.
        """
        start = parse_time_of_day(session_start)
        end = parse_time_of_day(session_end)

        if start is None or end is None:
            if session_start or session_end:
                logger.warning(
                    "Session bounds %r-%r are incomplete or malformed; skipping clamping",
                    session_start,
                    session_end,
                )
            return participants

        start_minutes = _minutes_since_midnight(start)
        end_minutes = _minutes_since_midnight(end)

        clamped: List[AggregatedParticipant] = []
        for participant in participants:
            total = 0
            for entry in participant.entries:
                joined = parse_timestamp(entry.join_time)
                left = parse_timestamp(entry.leave_time)

                if joined is None or left is None:
                    logger.debug(
                        "Unparseable timestamps for %r; using reported %d minutes",
                        entry.original_name,
                        entry.duration_minutes,
                    )
                    total += entry.duration_minutes
                    continue

                clamped_join = max(_minutes_since_midnight(joined), start_minutes)
                clamped_leave = min(_minutes_since_midnight(left), end_minutes)
                total += max(0, clamped_leave - clamped_join)

            clamped.append(
                participant.model_copy(update={"total_duration_minutes": total})
            )

        return clamped
