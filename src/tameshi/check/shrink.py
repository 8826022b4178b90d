"""
Shrinker - Greedy Counterexample Minimization

Walks the shrink tree of a failing value depth-first: children are tried in
the order the tree declares them, the first one that still fails becomes the
new current node (its siblings are dropped), and the search stops when no
child fails. Every candidate is re-checked against the full property, since
"smaller" only counts if it still fails.

The number of property evaluations is capped, so a huge or adversarial tree
still ends with the smallest failure found so far.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from tameshi.constants import SHRINK_ATTEMPTS_COUNT_MAX
from tameshi.check.property import Outcome
from tameshi.check.tree import ShrinkTree

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShrinkResult(Generic[T]):
    """Where a shrink search ended.

    tree is the locally minimal failing node: when exhausted is False, none
    of its children fails.
    """

    tree: ShrinkTree[T]
    outcome: Outcome
    steps: int
    attempts: int
    exhausted: bool
    path: list[Any] = field(default_factory=list)

    @property
    def value(self) -> T:
        return self.tree.value


def shrink(
    tree: ShrinkTree[T],
    evaluate: Callable[[T], Outcome],
    failure: Outcome,
    max_attempts: int = SHRINK_ATTEMPTS_COUNT_MAX,
) -> ShrinkResult[T]:
    """Minimize a failing value.

    Args:
        tree: Shrink tree whose root value failed.
        evaluate: Re-checks a candidate value.
        failure: The outcome of the root value.
        max_attempts: Most candidates to evaluate before stopping.

    Returns:
        The last failing node reached, with the number of successful shrink
        steps, the values passed through and the evaluations spent.
    """
    assert failure.is_fail, "shrink() starts from a failing outcome"
    assert max_attempts > 0, "max_attempts must be positive"

    current = tree
    current_outcome = failure
    steps = 0
    attempts = 0
    path: list[Any] = []

    while True:
        for child in current.children():
            if attempts >= max_attempts:
                logger.debug(f"Shrink budget of {max_attempts} attempts spent after {steps} steps")
                return ShrinkResult(current, current_outcome, steps, attempts, True, path)

            attempts += 1
            outcome = evaluate(child.value)
            if outcome.is_fail:
                current, current_outcome = child, outcome
                steps += 1
                path.append(child.value)
                logger.debug(f"Shrink step {steps}: {child.value!r}")
                break
        else:
            return ShrinkResult(current, current_outcome, steps, attempts, False, path)
