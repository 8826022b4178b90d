"""
RunConfig - Check Run Configuration

TigerStyle: Explicit configuration, seed from environment for reproducibility.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any

from tameshi.constants import (
    RUN_DISCARD_RATIO_DEFAULT,
    RUN_SIZE_MAX_DEFAULT,
    RUN_SUCCESS_COUNT_DEFAULT,
    SHRINK_ATTEMPTS_COUNT_MAX,
)
from tameshi.core.config import get_settings
from tameshi.check.rng import fresh_seed
from tameshi.check.size import SizeRamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
    """Configuration for one property check run.

    TigerStyle: All configuration is explicit. Seeds are always logged.
    """

    # Seed for deterministic randomness
    seed: int

    # Passing trials required for success
    max_success: int = RUN_SUCCESS_COUNT_DEFAULT

    # Size reached at the end of the ramp
    max_size: int = RUN_SIZE_MAX_DEFAULT

    # Give up once discards / trials_run exceeds this share, in [0, 1)
    max_discard_ratio: float = RUN_DISCARD_RATIO_DEFAULT

    # Curve from size 0 to max_size
    size_ramp: SizeRamp = SizeRamp.LINEAR

    # Property evaluations the shrinker may spend
    max_shrinks: int = SHRINK_ATTEMPTS_COUNT_MAX

    # Checked between trials only
    timeout_secs: float | None = None

    @classmethod
    def from_env_or_random(cls, **overrides: Any) -> RunConfig:
        """Create config from TAMESHI_* settings, generating a seed if none is set.

        TigerStyle: Always log the seed for reproducibility.
        Replay any run by setting TAMESHI_SEED=<seed>.

        Args:
            overrides: RunConfig fields that win over the settings. None
                values are ignored.
        """
        settings = get_settings()
        options: dict[str, Any] = {
            "max_success": settings.max_success,
            "max_size": settings.max_size,
            "max_discard_ratio": settings.max_discard_ratio,
            "size_ramp": SizeRamp(settings.size_ramp),
            "max_shrinks": settings.max_shrinks,
            "timeout_secs": settings.timeout_secs,
        }
        options.update({key: value for key, value in overrides.items() if value is not None})

        seed = options.pop("seed", None)
        if seed is not None:
            logger.info(f"Using explicit seed: {seed}")
        elif settings.seed is not None:
            seed = settings.seed
            logger.info(f"Using seed from environment: {seed}")
        else:
            seed = fresh_seed()
            logger.info(f"Generated random seed (replay with TAMESHI_SEED={seed})")

        return cls(seed=seed, **options)

    @classmethod
    def with_seed(cls, seed: int, **overrides: Any) -> RunConfig:
        """Create config with explicit seed.

        Args:
            seed: The deterministic seed to use.
        """
        assert seed >= 0, "seed must be non-negative"
        return cls(seed=seed, **overrides)

    def merged(self, **overrides: Any) -> RunConfig:
        """Copy with overrides applied (None values ignored)."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        assert not unknown, f"unknown run options: {sorted(unknown)}"
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})

    def __post_init__(self) -> None:
        """Validate configuration.

        TigerStyle: Assert preconditions.
        """
        if not isinstance(self.size_ramp, SizeRamp):
            object.__setattr__(self, "size_ramp", SizeRamp(self.size_ramp))

        assert self.seed >= 0, "seed must be non-negative"
        assert self.max_success > 0, "max_success must be positive"
        assert self.max_size >= 0, "max_size must be non-negative"
        assert 0 <= self.max_discard_ratio < 1, "max_discard_ratio must be in [0, 1)"
        assert self.max_shrinks > 0, "max_shrinks must be positive"
        assert self.timeout_secs is None or self.timeout_secs > 0, \
            "timeout_secs must be positive if set"
