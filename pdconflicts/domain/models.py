"""Domain models for schedule retrieval and conflict detection."""

from __future__ import annotations

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Raw schedule data, as returned by the scheduling service
# ---------------------------------------------------------------------------


class UserReference(BaseModel):
    id: str
    summary: str = ""


class RawScheduleEntry(BaseModel):
    """A rendered schedule entry with its timestamps still string-encoded."""

    start: str
    end: str
    user: UserReference


class ScheduleData(BaseModel):
    id: str
    name: str = ""
    entries: list[RawScheduleEntry] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: dict) -> ScheduleData:
        """Build from a PagerDuty ``schedule`` object.

        Only the final rendered layer is kept. A missing ``final_schedule`` or
        entry list means the schedule has no entries in the window.
        """
        final = payload.get("final_schedule") or {}
        return cls(
            id=payload["id"],
            name=payload.get("name") or "",
            entries=final.get("rendered_schedule_entries") or [],
        )


class TimeWindow(BaseModel):
    since: AwareDatetime
    until: AwareDatetime

    @model_validator(mode="after")
    def _until_after_since(self) -> TimeWindow:
        if self.until <= self.since:
            raise ValueError("until must be after since")
        return self


# ---------------------------------------------------------------------------
# Normalized domain models
# ---------------------------------------------------------------------------


class ScheduleEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: AwareDatetime
    end: AwareDatetime
    person_id: str
    person_summary: str = ""
    schedule_label: str = ""

    @model_validator(mode="after")
    def _end_after_start(self) -> ScheduleEntry:
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class Conflict(BaseModel):
    """Two entries for the same person where ``right`` starts before ``left`` ends.

    ``left`` always starts no later than ``right``. Entries that only touch at
    a boundary are not conflicts.
    """

    model_config = ConfigDict(frozen=True)

    left: ScheduleEntry
    right: ScheduleEntry

    @model_validator(mode="after")
    def _strict_overlap(self) -> Conflict:
        if self.left.person_id != self.right.person_id:
            raise ValueError("conflicting entries must belong to the same person")
        if self.right.start < self.left.start:
            raise ValueError("left must start no later than right")
        if self.right.start >= self.left.end:
            raise ValueError("right must start before left ends")
        return self

    @property
    def person_id(self) -> str:
        return self.left.person_id

    @property
    def person_summary(self) -> str:
        return self.left.person_summary

    @property
    def overlap_start(self) -> datetime:
        return self.right.start

    @property
    def overlap_end(self) -> datetime:
        return min(self.left.end, self.right.end)

    def describe(self) -> str:
        return (
            f"{self.person_summary} is in both {self.left.schedule_label!r} and "
            f"{self.right.schedule_label!r} from {self.overlap_start.isoformat()} "
            f"to {self.overlap_end.isoformat()}"
        )


class RetrievalFailure(BaseModel):
    schedule_id: str
    message: str

    def __str__(self) -> str:
        return f"{self.schedule_id}: {self.message}"


class FetchResult(BaseModel):
    schedules: list[ScheduleData] = Field(default_factory=list)
    failures: list[RetrievalFailure] = Field(default_factory=list)


class ConflictReport(BaseModel):
    window: TimeWindow
    schedules: list[ScheduleData] = Field(default_factory=list)
    # Normalized entries of each schedule, in the same order as ``schedules``.
    schedule_entries: list[list[ScheduleEntry]] = Field(default_factory=list)
    entries: list[ScheduleEntry] = Field(default_factory=list)
    failures: list[RetrievalFailure] = Field(default_factory=list)
    conflicts: dict[str, list[Conflict]] = Field(default_factory=dict)

    @property
    def conflict_count(self) -> int:
        return sum(len(found) for found in self.conflicts.values())


# ---------------------------------------------------------------------------
# Request DTOs
# ---------------------------------------------------------------------------


class ConflictCheckRequest(BaseModel):
    schedule_ids: list[str] = Field(min_length=1)
    since: AwareDatetime
    until: AwareDatetime
    skip_invalid: bool = False

    @model_validator(mode="after")
    def _until_after_since(self) -> ConflictCheckRequest:
        if self.until <= self.since:
            raise ValueError("until must be after since")
        return self
