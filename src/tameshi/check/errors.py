"""
Check Errors

TigerStyle: Explicit error types.

Discarded is control flow (a sample was rejected); everything else is an
error a caller should see.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tameshi.core.models import RunReport


class TameshiError(Exception):
    """Base error for the property checker."""

    pass


class Discarded(TameshiError):
    """A generated sample was rejected by a filter.

    Raised by such_that() when its retry budget runs out and by assume().
    The runner books it as a Discard, never as a failure.
    """

    pass


class GeneratorMisuseError(TameshiError):
    """A generator was built or used incorrectly.

    Empty candidate lists, non-positive weights, inverted ranges and
    recursive generators that never shrink their size all end up here.
    Aborts the run without a report.
    """

    pass


class PropertyFailedError(TameshiError, AssertionError):
    """Raised by RunReport.raise_for_verdict() for a falsified property."""

    def __init__(self, report: RunReport, message: str) -> None:
        super().__init__(message)
        self.report = report


class GaveUpError(TameshiError):
    """Raised by RunReport.raise_for_verdict() when too many samples were discarded."""

    def __init__(self, report: RunReport, message: str) -> None:
        super().__init__(message)
        self.report = report
