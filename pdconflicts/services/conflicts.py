"""Service for detecting on-call conflicts between schedule entries."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor

from pdconflicts.domain.models import Conflict, ScheduleEntry
from pdconflicts.logging_config import get_logger
from pdconflicts.services.grouping import group_by_person

logger = get_logger(__name__)

ConflictSink = Callable[[Conflict], None]


def log_conflict(conflict: Conflict) -> None:
    """Default sink: one warning per conflict."""
    logger.warning(
        "conflict",
        person=conflict.person_summary,
        person_id=conflict.person_id,
        left_schedule=conflict.left.schedule_label,
        right_schedule=conflict.right.schedule_label,
        overlap_start=conflict.overlap_start.isoformat(),
        overlap_end=conflict.overlap_end.isoformat(),
    )


def detect_overlaps(
    entries: Sequence[ScheduleEntry],
    on_conflict: ConflictSink | None = None,
) -> list[Conflict]:
    """Return every overlapping pair among one person's entries.

    Overlap rule: after a stable sort by start, ``right`` conflicts with
    ``left`` if right.start < left.end. Exact boundary touches
    (left.end == right.start) are NOT conflicts. Mutually overlapping
    entries produce one conflict per pair.
    """
    ordered = sorted(entries, key=lambda entry: entry.start)
    conflicts: list[Conflict] = []

    for i, left in enumerate(ordered):
        for right in ordered[i + 1 :]:
            if right.start >= left.end:
                # Sorted by start, so nothing later can overlap left either.
                break

            conflict = Conflict(left=left, right=right)
            if on_conflict is not None:
                on_conflict(conflict)
            conflicts.append(conflict)

    return conflicts


def find_conflicts(
    entries_by_person: Mapping[str, Sequence[ScheduleEntry]],
    on_conflict: ConflictSink | None = log_conflict,
) -> dict[str, list[Conflict]]:
    """Detect overlaps for every person concurrently, one task per person.

    Every person in the input is present in the result, with an empty list
    when they have no conflicts. *on_conflict* is called from worker threads.
    """
    if not entries_by_person:
        return {}

    with ThreadPoolExecutor(max_workers=len(entries_by_person)) as executor:
        futures = {
            person_id: executor.submit(detect_overlaps, entries, on_conflict)
            for person_id, entries in entries_by_person.items()
        }

    results = {person_id: future.result() for person_id, future in futures.items()}
    logger.debug(
        "conflict detection finished",
        people=len(results),
        conflicts=sum(len(found) for found in results.values()),
    )
    return results


def find_conflicts_by_person(
    entries: Iterable[ScheduleEntry],
    on_conflict: ConflictSink | None = log_conflict,
) -> dict[str, list[Conflict]]:
    return find_conflicts(group_by_person(entries), on_conflict)
