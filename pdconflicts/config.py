"""Runtime settings, read from environment variables."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://api.pagerduty.com"


class Settings(BaseModel):
    auth_token: str = ""
    api_url: str = DEFAULT_API_URL
    timeout: float = Field(default=30.0, gt=0)
    default_since: str = "now"
    default_until: str = "in 14 days"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            auth_token=os.environ.get("PAGERDUTY_AUTH_TOKEN", ""),
            api_url=os.environ.get("PAGERDUTY_API_URL", DEFAULT_API_URL),
            timeout=float(os.environ.get("PAGERDUTY_TIMEOUT", "30")),
            default_since=os.environ.get("PDCONFLICTS_DEFAULT_SINCE", "now"),
            default_until=os.environ.get("PDCONFLICTS_DEFAULT_UNTIL", "in 14 days"),
        )
