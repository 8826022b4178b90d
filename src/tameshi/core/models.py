"""
Tameshi Core Data Models

Records produced at the end of a check run:
- Verdict: how the run ended
- Counterexample: the failing input before and after shrinking
- RunReport: everything a caller needs to read, print or replay a run
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from tameshi.check.errors import GaveUpError, PropertyFailedError


# =============================================================================
# Enums
# =============================================================================


class Verdict(str, Enum):
    """Terminal states of a run."""

    SUCCESS = "success"  # max_success trials passed
    FAILURE = "failure"  # a trial failed; counterexample attached
    GAVE_UP = "gave_up"  # too many discards, or timed out


# =============================================================================
# Report Models
# =============================================================================


class Counterexample(BaseModel):
    """A falsifying input, as found and after shrinking."""

    model_config = ConfigDict(frozen=True)

    original: Any
    shrunk: Any
    shrink_steps: int = 0
    shrink_path: tuple[Any, ...] = ()
    shrink_attempts: int = 0
    shrink_exhausted: bool = False  # True if the attempt budget ran out first
    reason: str | None = None

    @field_serializer("original", "shrunk", when_used="json")
    def serialize_value(self, value: Any) -> str:
        return repr(value)

    @field_serializer("shrink_path", when_used="json")
    def serialize_path(self, path: tuple[Any, ...]) -> list[str]:
        return [repr(value) for value in path]


class RunReport(BaseModel):
    """Immutable summary of one run.

    passed + failed + discarded == trials_run always holds.
    """

    model_config = ConfigDict(frozen=True)

    property_name: str
    seed: int
    verdict: Verdict
    trials_run: int
    passed: int
    failed: int
    discarded: int
    max_success: int
    max_discard_ratio: float
    statistics: Mapping[str, int] = Field(default_factory=dict, validate_default=True)
    sizes: tuple[int, ...] = ()
    counterexample: Counterexample | None = None
    gave_up_reason: str | None = None

    @field_validator("statistics", mode="after")
    @classmethod
    def freeze_statistics(cls, statistics: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(statistics))

    @field_serializer("statistics")
    def serialize_statistics(self, statistics: Mapping[str, int]) -> dict[str, int]:
        return dict(statistics)

    @property
    def succeeded(self) -> bool:
        return self.verdict is Verdict.SUCCESS

    @property
    def falsified(self) -> bool:
        return self.verdict is Verdict.FAILURE

    @property
    def gave_up(self) -> bool:
        return self.verdict is Verdict.GAVE_UP

    def percentages(self) -> dict[str, float]:
        """Share of passing trials per statistics label, in percent."""
        if self.passed == 0:
            return {}
        return {label: 100.0 * count / self.passed for label, count in self.statistics.items()}

    def raise_for_verdict(self) -> None:
        """Raise unless the run succeeded.

        Raises:
            PropertyFailedError: The property was falsified (an AssertionError).
            GaveUpError: Too many samples were discarded, or the run timed out.
        """
        from tameshi.check.report import format_report

        if self.verdict is Verdict.FAILURE:
            raise PropertyFailedError(self, format_report(self))
        if self.verdict is Verdict.GAVE_UP:
            raise GaveUpError(self, format_report(self))

    def __str__(self) -> str:
        from tameshi.check.report import format_report

        return format_report(self)
