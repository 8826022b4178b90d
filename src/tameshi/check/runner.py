"""
Runner - Property Check Driver

Runs trials of a property with a ramping size, books every Pass, Fail and
Discard, shrinks the first failure and produces a RunReport.

States: IDLE -> RUNNING -> (SHRINKING ->) SUCCEEDED | FAILED | GAVE_UP

Usage:
    report = quick_check(forall(gen.lists(gen.integers()), prop_reverse), seed=42)
    report = quick_check_fn(prop_reverse_annotated, max_success=500)
    report.raise_for_verdict()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from tameshi.constants import RUN_DISCARD_TRIALS_COUNT_MIN
from tameshi.core.models import Counterexample, RunReport, Verdict
from tameshi.check.config import RunConfig
from tameshi.check.errors import Discarded
from tameshi.check.property import Outcome, Property
from tameshi.check.rng import RandomSource
from tameshi.check.shrink import shrink
from tameshi.check.size import ramp_size
from tameshi.check.stats import Statistics

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Lifecycle of a Runner."""

    IDLE = "idle"
    RUNNING = "running"
    SHRINKING = "shrinking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    GAVE_UP = "gave_up"


@dataclass
class Runner:
    """Drives one run of one property.

    The runner is the only thing that counts trials and accumulates
    statistics; generators and properties stay side-effect free. A Runner
    runs once.
    """

    config: RunConfig
    state: RunState = field(default=RunState.IDLE, init=False)
    _statistics: Statistics = field(default_factory=Statistics, init=False)
    _sizes: list[int] = field(default_factory=list, init=False)
    _passed: int = field(default=0, init=False)
    _failed: int = field(default=0, init=False)
    _discarded: int = field(default=0, init=False)

    @property
    def trials_run(self) -> int:
        return self._passed + self._failed + self._discarded

    def run(self, prop: Property) -> RunReport:
        """Check prop and report the result.

        Raises:
            GeneratorMisuseError: Aborts the run; no report is produced.
        """
        assert self.state is RunState.IDLE, f"runner already used (state={self.state.value})"
        config = self.config
        self.state = RunState.RUNNING
        logger.info(f"Checking {prop.name} with seed={config.seed}")

        rng = RandomSource(_seed=config.seed)
        started = time.monotonic()

        while self._passed < config.max_success:
            if config.timeout_secs is not None and time.monotonic() - started > config.timeout_secs:
                return self._give_up(prop, f"timed out after {config.timeout_secs}s")

            size = ramp_size(self.trials_run, config.max_success, config.max_size, config.size_ramp)
            self._sizes.append(size)
            trial_rng = rng.split()

            try:
                tree = prop.gen.run(trial_rng, size)
            except Discarded as e:
                tree, outcome = None, Outcome.discarded(str(e))
            else:
                outcome = prop.evaluate(tree.value)

            if outcome.is_discard:
                self._discarded += 1
                if self._discard_ratio_exceeded():
                    return self._give_up(
                        prop,
                        f"{self._discarded} discards in {self.trials_run} trials exceed "
                        f"max_discard_ratio {config.max_discard_ratio}",
                    )
                continue

            if outcome.is_fail:
                self._failed += 1
                return self._fail(prop, tree, outcome)

            self._passed += 1
            self._statistics.record(outcome.labels)

        self.state = RunState.SUCCEEDED
        logger.info(f"{prop.name}: passed {self._passed} trials (seed={config.seed})")
        return self._report(prop, Verdict.SUCCESS)

    def _discard_ratio_exceeded(self) -> bool:
        """Discards per trial run so far, judged once enough trials have run."""
        if self.trials_run < RUN_DISCARD_TRIALS_COUNT_MIN:
            return False
        return self._discarded / self.trials_run > self.config.max_discard_ratio

    def _fail(self, prop: Property, tree: Any, outcome: Outcome) -> RunReport:
        self.state = RunState.SHRINKING
        logger.info(f"{prop.name}: falsified after {self.trials_run} trials, shrinking {tree.value!r}")

        result = shrink(tree, prop.evaluate, outcome, self.config.max_shrinks)

        self.state = RunState.FAILED
        logger.info(
            f"{prop.name}: shrunk to {result.value!r} in {result.steps} steps "
            f"(replay with seed={self.config.seed})"
        )
        counterexample = Counterexample(
            original=tree.value,
            shrunk=result.value,
            shrink_steps=result.steps,
            shrink_path=result.path,
            shrink_attempts=result.attempts,
            shrink_exhausted=result.exhausted,
            reason=result.outcome.reason,
        )
        return self._report(prop, Verdict.FAILURE, counterexample=counterexample)

    def _give_up(self, prop: Property, reason: str) -> RunReport:
        self.state = RunState.GAVE_UP
        logger.warning(f"{prop.name}: gave up after {self.trials_run} trials: {reason} (seed={self.config.seed})")
        return self._report(prop, Verdict.GAVE_UP, gave_up_reason=reason)

    def _report(self, prop: Property, verdict: Verdict, **extra: Any) -> RunReport:
        return RunReport(
            property_name=prop.name,
            seed=self.config.seed,
            verdict=verdict,
            trials_run=self.trials_run,
            passed=self._passed,
            failed=self._failed,
            discarded=self._discarded,
            max_success=self.config.max_success,
            max_discard_ratio=self.config.max_discard_ratio,
            statistics=self._statistics.as_dict(),
            sizes=tuple(self._sizes),
            **extra,
        )


# =============================================================================
# Entry Points
# =============================================================================


def _resolve_config(config: RunConfig | None, options: dict[str, Any]) -> RunConfig:
    if config is None:
        return RunConfig.from_env_or_random(**options)
    return config.merged(**options)


def quick_check(prop: Property, config: RunConfig | None = None, **options: Any) -> RunReport:
    """Check a property built with forall().

    Args:
        prop: The property, carrying its own generator.
        config: Full run configuration; options override its fields.
        options: max_success, max_size, seed, max_discard_ratio, size_ramp,
            max_shrinks, timeout_secs. Anything left out comes from the
            TAMESHI_* settings.
    """
    return Runner(_resolve_config(config, options)).run(prop)


def quick_check_fn(predicate: Callable[..., Any] | Property, config: RunConfig | None = None, **options: Any) -> RunReport:
    """Check an annotated predicate, deriving generators from its annotations.

    The predicate may return a bool or an Outcome enriched with
    classify/collect/filter.
    """
    prop = predicate if isinstance(predicate, Property) else Property.from_predicate(predicate)
    return quick_check(prop, config, **options)
