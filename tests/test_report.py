"""Tests for the end-to-end conflict check."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pdconflicts.domain.errors import AllRetrievalsFailedError, ParseError, RetrievalError
from pdconflicts.domain.models import (
    Conflict,
    RawScheduleEntry,
    ScheduleData,
    TimeWindow,
    UserReference,
)
from pdconflicts.services.report import check_schedules

WINDOW = TimeWindow(
    since=datetime(2025, 1, 1, tzinfo=timezone.utc),
    until=datetime(2025, 1, 8, tzinfo=timezone.utc),
)

ALICE = UserReference(id="PALICE", summary="Alice")
BOB = UserReference(id="PBOB", summary="Bob")


def _raw(start: str, end: str, user: UserReference) -> RawScheduleEntry:
    return RawScheduleEntry(start=start, end=end, user=user)


SCHEDULES = {
    "PRIMARY": ScheduleData(
        id="PRIMARY",
        name="Primary",
        entries=[
            _raw("2025-01-01T09:00:00Z", "2025-01-01T17:00:00Z", ALICE),
            _raw("2025-01-01T17:00:00Z", "2025-01-02T09:00:00Z", BOB),
        ],
    ),
    "SECONDARY": ScheduleData(
        id="SECONDARY",
        name="Secondary",
        entries=[
            _raw("2025-01-01T16:00:00Z", "2025-01-01T20:00:00Z", ALICE),
            _raw("2025-01-02T09:00:00Z", "2025-01-02T17:00:00Z", BOB),
        ],
    ),
    "BROKEN": ScheduleData(
        id="BROKEN",
        name="Broken",
        entries=[_raw("garbage", "2025-01-01T20:00:00Z", BOB)],
    ),
}


def _fetch(schedule_id: str, window: TimeWindow) -> ScheduleData:
    try:
        return SCHEDULES[schedule_id]
    except KeyError:
        raise RetrievalError(f"HTTP 404 fetching schedule {schedule_id}") from None


def test_finds_cross_schedule_conflict():
    seen: list[Conflict] = []

    report = check_schedules(_fetch, ["PRIMARY", "SECONDARY"], WINDOW, on_conflict=seen.append)

    assert len(report.entries) == 4
    assert [len(entries) for entries in report.schedule_entries] == [2, 2]
    assert report.failures == []
    assert report.conflict_count == 1
    assert report.conflicts["PBOB"] == []
    (conflict,) = report.conflicts["PALICE"]
    assert conflict.left.schedule_label == "Primary"
    assert conflict.right.schedule_label == "Secondary"
    assert conflict.overlap_start == datetime(2025, 1, 1, 16, 0, tzinfo=timezone.utc)
    assert conflict.overlap_end == datetime(2025, 1, 1, 17, 0, tzinfo=timezone.utc)
    assert seen == [conflict]


def test_partial_retrieval_failure_is_reported():
    report = check_schedules(_fetch, ["PRIMARY", "MISSING"], WINDOW, on_conflict=None)

    assert [s.id for s in report.schedules] == ["PRIMARY"]
    assert [f.schedule_id for f in report.failures] == ["MISSING"]
    assert report.conflict_count == 0


def test_all_retrievals_failing_propagates():
    with pytest.raises(AllRetrievalsFailedError):
        check_schedules(_fetch, ["MISSING", "GONE"], WINDOW, on_conflict=None)


def test_invalid_schedule_halts_by_default():
    with pytest.raises(ParseError, match="start"):
        check_schedules(_fetch, ["PRIMARY", "BROKEN"], WINDOW, on_conflict=None)


def test_invalid_schedule_skipped_when_requested():
    report = check_schedules(
        _fetch, ["PRIMARY", "BROKEN"], WINDOW, on_conflict=None, skip_invalid=True
    )

    assert [s.id for s in report.schedules] == ["PRIMARY"]
    assert [f.schedule_id for f in report.failures] == ["BROKEN"]
    assert "could not parse start time" in report.failures[0].message
    assert len(report.entries) == 2
    assert report.schedule_entries == [report.entries]
