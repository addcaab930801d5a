"""Tests for grouping schedule entries."""

from datetime import datetime, timedelta, timezone

from pdconflicts.domain.models import ScheduleEntry
from pdconflicts.services.grouping import group_by, group_by_person

_START = datetime(2025, 3, 1, tzinfo=timezone.utc)


def _make_entry(person_id: str, offset_hours: int, schedule: str = "Primary") -> ScheduleEntry:
    return ScheduleEntry(
        start=_START + timedelta(hours=offset_hours),
        end=_START + timedelta(hours=offset_hours + 1),
        person_id=person_id,
        schedule_label=schedule,
    )


def test_two_keys_make_two_groups():
    entries = [
        _make_entry("PALICE", 0),
        _make_entry("PBOB", 1),
        _make_entry("PALICE", 2),
    ]

    groups = group_by_person(entries)

    assert set(groups) == {"PALICE", "PBOB"}
    assert sorted(
        (e for group in groups.values() for e in group), key=lambda e: e.start
    ) == entries


def test_group_keeps_insertion_order():
    late = _make_entry("PALICE", 5)
    early = _make_entry("PALICE", 1)

    groups = group_by_person([late, early])

    assert groups["PALICE"] == [late, early]


def test_custom_key():
    entries = [
        _make_entry("PALICE", 0, "Primary"),
        _make_entry("PBOB", 0, "Primary"),
        _make_entry("PALICE", 1, "Secondary"),
    ]

    groups = group_by(entries, lambda e: e.schedule_label)

    assert [len(groups["Primary"]), len(groups["Secondary"])] == [2, 1]


def test_empty_input():
    assert group_by([], lambda e: e.person_id) == {}
