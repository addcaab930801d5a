"""Service for turning raw schedule data into typed ScheduleEntry values."""

from __future__ import annotations

from datetime import datetime

from dateutil.parser import isoparse

from pdconflicts.domain.errors import InvalidEntryError, ParseError
from pdconflicts.domain.models import RawScheduleEntry, ScheduleData, ScheduleEntry


def parse_timestamp(field: str, value: str) -> datetime:
    """Parse an RFC 3339 timestamp, raising ``ParseError`` naming *field*.

    Timestamps without a UTC offset are rejected: they cannot be compared
    against entries from other schedules.
    """
    try:
        parsed = isoparse(value)
    except (ValueError, OverflowError) as exc:
        raise ParseError(field, value, str(exc)) from exc
    if parsed.tzinfo is None:
        raise ParseError(field, value, "missing UTC offset")
    return parsed


def normalize_entry(
    schedule: ScheduleData | None, raw: RawScheduleEntry
) -> ScheduleEntry:
    start = parse_timestamp("start", raw.start)
    end = parse_timestamp("end", raw.end)
    if end <= start:
        raise InvalidEntryError(
            f"entry for {raw.user.id} ends at {raw.end}, not after its start {raw.start}"
        )

    return ScheduleEntry(
        start=start,
        end=end,
        person_id=raw.user.id,
        person_summary=raw.user.summary,
        schedule_label=schedule.name if schedule is not None else "",
    )


def normalize(schedule: ScheduleData | None) -> list[ScheduleEntry]:
    """Return every entry of *schedule* as a ScheduleEntry.

    All-or-nothing: the first bad entry raises and nothing is returned for
    the schedule.
    """
    if schedule is None:
        return []
    return [normalize_entry(schedule, raw) for raw in schedule.entries]
