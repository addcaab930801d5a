"""FastAPI application exposing the schedule conflict check over HTTP."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, FastAPI, HTTPException

from pdconflicts.clients.pagerduty import PagerDutyClient
from pdconflicts.config import Settings
from pdconflicts.domain.errors import AllRetrievalsFailedError, NormalizationError
from pdconflicts.domain.models import ConflictCheckRequest, ConflictReport, TimeWindow
from pdconflicts.services.fetcher import ScheduleFetcher
from pdconflicts.services.report import check_schedules

app = FastAPI(title="PagerDuty Schedule Conflicts")


def get_schedule_fetcher() -> Iterator[ScheduleFetcher]:
    """Yield a PagerDuty client for the request, closing it afterwards."""
    with PagerDutyClient.from_settings(Settings.from_env()) as client:
        yield client


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/conflicts", response_model=ConflictReport)
def check_conflicts(
    payload: ConflictCheckRequest,
    fetch_schedule: ScheduleFetcher = Depends(get_schedule_fetcher),
) -> ConflictReport:
    """Fetch the requested schedules and report overlapping on-call shifts."""
    window = TimeWindow(since=payload.since, until=payload.until)
    try:
        return check_schedules(
            fetch_schedule,
            payload.schedule_ids,
            window,
            skip_invalid=payload.skip_invalid,
        )
    except AllRetrievalsFailedError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except NormalizationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
