"""
RandomSource - Deterministic Random Number Generator

TigerStyle: All randomness is seeded and reproducible.
Based on Python's random.Random (Mersenne Twister) for simplicity.
Generators never touch the global random state; the source is threaded
through every call instead.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from tameshi.constants import RNG_WORD_BITS, RNG_WORD_MAX, RUN_SEED_MAX


def fresh_seed() -> int:
    """Draw a new seed for a run that was not given one.

    The only place the global random state is read; everything downstream
    of the seed is deterministic.
    """
    return random.randint(0, RUN_SEED_MAX)


@dataclass
class RandomSource:
    """Deterministic random stream for value generation.

    TigerStyle:
    - All operations are deterministic given the same seed
    - Can split into independent streams
    - Never use global random state
    """

    _seed: int
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize the RNG with the seed.

        TigerStyle: Assert preconditions.
        """
        assert self._seed >= 0, "seed must be non-negative"
        self._rng = random.Random(self._seed)

    @property
    def seed(self) -> int:
        """Get the original seed."""
        return self._seed

    def next_u64(self) -> int:
        """Generate a uniformly distributed 64-bit unsigned integer.

        TigerStyle: Assert postcondition.
        """
        word = self._rng.getrandbits(RNG_WORD_BITS)
        assert 0 <= word <= RNG_WORD_MAX, "word must fit in 64 bits"
        return word

    def next_int(self, min_val: int, max_val: int) -> int:
        """Generate a random integer in [min_val, max_val].

        TigerStyle: Explicit bounds, inclusive range.
        """
        assert min_val <= max_val, f"min_val ({min_val}) must be <= max_val ({max_val})"
        return self._rng.randint(min_val, max_val)

    def next_float(self) -> float:
        """Generate a random float in [0.0, 1.0)."""
        return self._rng.random()

    def next_bool(self, probability: float = 0.5) -> bool:
        """Generate a random boolean with given probability of True.

        Args:
            probability: Probability of returning True, in [0.0, 1.0].
        """
        assert 0.0 <= probability <= 1.0, f"probability ({probability}) must be in [0, 1]"
        return self._rng.random() < probability

    def split(self) -> RandomSource:
        """Create an independent random stream.

        The child is seeded from one word of this stream, so splitting
        advances the parent exactly once and nothing the child draws later
        changes what the parent produces next.
        """
        return RandomSource(_seed=self.next_u64())
