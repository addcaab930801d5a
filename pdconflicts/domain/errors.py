"""Exceptions raised while retrieving and normalizing schedules."""

from __future__ import annotations

from pdconflicts.domain.models import RetrievalFailure


class PDConflictsError(Exception):
    pass


class RetrievalError(PDConflictsError):
    """A schedule could not be fetched from the scheduling service."""


class AllRetrievalsFailedError(RetrievalError):
    """Every requested schedule failed to retrieve.

    The message is each failure rendered as ``"<id>: <message>"`` joined by
    ``"; "``.
    """

    def __init__(self, failures: list[RetrievalFailure]) -> None:
        self.failures = list(failures)
        super().__init__("; ".join(str(failure) for failure in self.failures))


class NormalizationError(PDConflictsError, ValueError):
    """A schedule's raw data could not be turned into schedule entries."""


class ParseError(NormalizationError):
    def __init__(self, field: str, value: str, reason: str = "") -> None:
        self.field = field
        self.value = value
        message = f"could not parse {field} time {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidEntryError(NormalizationError):
    pass
