"""Service for fetching many schedules concurrently."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from pdconflicts.domain.errors import AllRetrievalsFailedError, RetrievalError
from pdconflicts.domain.models import (
    FetchResult,
    RetrievalFailure,
    ScheduleData,
    TimeWindow,
)
from pdconflicts.logging_config import get_logger

logger = get_logger(__name__)

ScheduleFetcher = Callable[[str, TimeWindow], ScheduleData]


def fetch_all(
    fetch_schedule: ScheduleFetcher,
    schedule_ids: Sequence[str],
    window: TimeWindow,
) -> FetchResult:
    """Fetch every schedule id concurrently, one task per id.

    A failed fetch never cancels the others. Successful schedules and
    failures are both returned whenever at least one fetch succeeded.
    Raises ``AllRetrievalsFailedError`` when every fetch failed.
    """
    if not schedule_ids:
        raise ValueError("at least one schedule id is required")

    with ThreadPoolExecutor(max_workers=len(schedule_ids)) as executor:
        futures = [
            (schedule_id, executor.submit(fetch_schedule, schedule_id, window))
            for schedule_id in schedule_ids
        ]

    result = FetchResult()
    for schedule_id, future in futures:
        try:
            result.schedules.append(future.result())
        except Exception as exc:
            failure = RetrievalFailure(schedule_id=schedule_id, message=str(exc))
            logger.warning("schedule retrieval failed", schedule_id=schedule_id, error=str(exc))
            result.failures.append(failure)

    if len(result.failures) == len(schedule_ids):
        raise AllRetrievalsFailedError(result.failures)

    logger.info(
        "schedules fetched",
        requested=len(schedule_ids),
        fetched=len(result.schedules),
        failed=len(result.failures),
    )
    return result


def fetch_all_strict(
    fetch_schedule: ScheduleFetcher,
    schedule_ids: Sequence[str],
    window: TimeWindow,
) -> list[ScheduleData]:
    """Like ``fetch_all`` but raise ``RetrievalError`` if any fetch failed."""
    result = fetch_all(fetch_schedule, schedule_ids, window)
    if result.failures:
        raise RetrievalError("; ".join(str(failure) for failure in result.failures))
    return result.schedules
