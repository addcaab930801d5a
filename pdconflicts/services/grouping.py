"""Partition schedule entries into keyed groups."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable

from pdconflicts.domain.models import ScheduleEntry


def group_by(
    entries: Iterable[ScheduleEntry],
    key_fn: Callable[[ScheduleEntry], str],
) -> dict[str, list[ScheduleEntry]]:
    """Group *entries* by ``key_fn(entry)``, keeping input order within each group."""
    groups: dict[str, list[ScheduleEntry]] = defaultdict(list)
    for entry in entries:
        groups[key_fn(entry)].append(entry)
    return dict(groups)


def group_by_person(entries: Iterable[ScheduleEntry]) -> dict[str, list[ScheduleEntry]]:
    return group_by(entries, lambda entry: entry.person_id)
