"""Thin PagerDuty REST v2 client for reading rendered schedules."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
from pydantic import ValidationError

from pdconflicts.config import DEFAULT_API_URL, Settings
from pdconflicts.domain.errors import RetrievalError
from pdconflicts.domain.models import ScheduleData, TimeWindow
from pdconflicts.logging_config import get_logger

logger = get_logger(__name__)

_ACCEPT = "application/vnd.pagerduty+json;version=2"


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class PagerDutyClient:
    """Fetches schedules with a shared ``httpx.Client``.

    Instances are callable with ``(schedule_id, window)`` so they can be
    handed straight to ``fetch_all``. httpx clients are safe to share
    across the fetcher's worker threads.
    """

    def __init__(
        self,
        auth_token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Token token={auth_token}",
                "Accept": _ACCEPT,
            },
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> PagerDutyClient:
        return cls(settings.auth_token, settings.api_url, settings.timeout)

    def get_schedule(self, schedule_id: str, window: TimeWindow) -> ScheduleData:
        params = {"since": _rfc3339(window.since), "until": _rfc3339(window.until)}
        logger.debug("fetching schedule", schedule_id=schedule_id, **params)
        try:
            response = self._http.get(f"/schedules/{schedule_id}", params=params)
            response.raise_for_status()
            return ScheduleData.from_api(response.json()["schedule"])
        except httpx.HTTPStatusError as exc:
            raise RetrievalError(
                f"HTTP {exc.response.status_code} fetching schedule {schedule_id}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RetrievalError(f"request for schedule {schedule_id} failed: {exc}") from exc
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise RetrievalError(f"malformed response for schedule {schedule_id}: {exc}") from exc

    __call__ = get_schedule

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> PagerDutyClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
