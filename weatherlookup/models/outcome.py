"""Outcome of a forecast resolution: a closed set of tagged results."""

from dataclasses import dataclass
from enum import StrEnum

from weatherlookup.models.forecast import ForecastRecord


class OutcomeKind(StrEnum):
    SERVED = "served"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    INVALID_INPUT = "invalid_input"


class FailureReason(StrEnum):
    SERVICE_UNAVAILABLE = "service_unavailable"
    INVALID = "invalid"


@dataclass(frozen=True)
class ForecastOutcome:
    kind: OutcomeKind
    record: ForecastRecord | None = None
    from_cache: bool = False
    failure: FailureReason | None = None
    stale: bool = False

    @classmethod
    def served(
        cls, record: ForecastRecord, from_cache: bool, stale: bool = False
    ) -> "ForecastOutcome":
        return cls(OutcomeKind.SERVED, record=record, from_cache=from_cache, stale=stale)

    @classmethod
    def not_found(cls) -> "ForecastOutcome":
        return cls(OutcomeKind.NOT_FOUND)

    @classmethod
    def failed(cls, reason: FailureReason) -> "ForecastOutcome":
        return cls(OutcomeKind.FAILED, failure=reason)

    @classmethod
    def invalid_input(cls) -> "ForecastOutcome":
        return cls(OutcomeKind.INVALID_INPUT)

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SERVED
