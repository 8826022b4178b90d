"""
Shared test fixtures for the Tameshi test suite.

Provides fixtures for:
- Isolating TAMESHI_* settings between tests
- Seeded random sources
- Report factories
"""

import os
from typing import Callable

import pytest

from tameshi.check import RandomSource
from tameshi.core.config import get_settings
from tameshi.core.models import Counterexample, RunReport, Verdict


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Clear TAMESHI_* variables and the cached settings around every test."""
    for name in list(os.environ):
        if name.startswith("TAMESHI_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Random Sources
# =============================================================================


@pytest.fixture
def rng() -> RandomSource:
    """Provide a seeded random source."""
    return RandomSource(_seed=42)


# =============================================================================
# Report Factories
# =============================================================================


@pytest.fixture
def make_report() -> Callable[..., RunReport]:
    """Factory for creating run reports without running anything."""

    def _make_report(
        verdict: Verdict = Verdict.SUCCESS,
        passed: int = 100,
        failed: int = 0,
        discarded: int = 0,
        statistics: dict | None = None,
        counterexample: Counterexample | None = None,
        gave_up_reason: str | None = None,
    ) -> RunReport:
        return RunReport(
            property_name="prop_example",
            seed=1234,
            verdict=verdict,
            trials_run=passed + failed + discarded,
            passed=passed,
            failed=failed,
            discarded=discarded,
            max_success=100,
            max_discard_ratio=0.9,
            statistics=statistics or {},
            sizes=[0] * (passed + failed + discarded),
            counterexample=counterexample,
            gave_up_reason=gave_up_reason,
        )

    return _make_report
