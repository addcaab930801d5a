"""End-to-end conflict check: fetch, normalize, group and detect."""

from __future__ import annotations

from collections.abc import Sequence

from pdconflicts.domain.errors import NormalizationError
from pdconflicts.domain.models import (
    ConflictReport,
    RetrievalFailure,
    ScheduleEntry,
    TimeWindow,
)
from pdconflicts.logging_config import get_logger
from pdconflicts.services.conflicts import (
    ConflictSink,
    find_conflicts,
    log_conflict,
)
from pdconflicts.services.fetcher import ScheduleFetcher, fetch_all
from pdconflicts.services.grouping import group_by_person
from pdconflicts.services.normalizer import normalize

logger = get_logger(__name__)


def check_schedules(
    fetch_schedule: ScheduleFetcher,
    schedule_ids: Sequence[str],
    window: TimeWindow,
    on_conflict: ConflictSink | None = log_conflict,
    skip_invalid: bool = False,
) -> ConflictReport:
    """Fetch *schedule_ids* and report every per-person overlap in *window*.

    A schedule whose entries fail to normalize aborts the check unless
    *skip_invalid* is set, in which case it is reported as a failure and
    left out. ``AllRetrievalsFailedError`` propagates from the fetch.
    """
    fetched = fetch_all(fetch_schedule, schedule_ids, window)
    report = ConflictReport(window=window, failures=list(fetched.failures))

    entries: list[ScheduleEntry] = []
    for schedule in fetched.schedules:
        try:
            normalized = normalize(schedule)
        except NormalizationError as exc:
            if not skip_invalid:
                raise
            logger.warning("skipping schedule", schedule_id=schedule.id, error=str(exc))
            report.failures.append(
                RetrievalFailure(schedule_id=schedule.id, message=str(exc))
            )
            continue

        report.schedules.append(schedule)
        report.schedule_entries.append(normalized)
        entries.extend(normalized)

    report.entries = entries
    report.conflicts = find_conflicts(group_by_person(entries), on_conflict)
    logger.info(
        "conflict check finished",
        schedules=len(report.schedules),
        entries=len(entries),
        conflicts=report.conflict_count,
    )
    return report
