"""
Statistics - Label Counts Across a Run

Counts how many passing trials carried each classify/collect label. A label
recorded twice on one trial counts once for that trial.

Statistics form a monoid: Statistics() is the identity and merge() combines
two tallies without mutating either, so tallies built independently (one per
worker, one per batch) can be folded together in trial order.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class Statistics:
    """Label occurrence counts for one run.

    Only the runner records into a Statistics; everything else reads it.
    """

    _counts: Counter = field(default_factory=Counter)
    _trials_count: int = 0

    def record(self, labels: Iterable[str]) -> None:
        """Record the labels of one trial."""
        self._trials_count += 1
        for label in dict.fromkeys(labels):
            self._counts[label] += 1

    def merge(self, other: Statistics) -> Statistics:
        """Combine two tallies into a new one."""
        return Statistics(_counts=self._counts + other._counts, _trials_count=self._trials_count + other._trials_count)

    @property
    def trials_count(self) -> int:
        """Number of trials recorded."""
        return self._trials_count

    def count(self, label: str) -> int:
        """Number of trials that carried label."""
        return self._counts.get(label, 0)

    def labels(self) -> list[str]:
        """Labels ordered by count, most frequent first (ties by name)."""
        return sorted(self._counts, key=lambda label: (-self._counts[label], label))

    def percentages(self) -> dict[str, float]:
        """Share of recorded trials per label, in percent."""
        if self._trials_count == 0:
            return {}
        return {label: 100.0 * self._counts[label] / self._trials_count for label in self.labels()}

    def as_dict(self) -> dict[str, int]:
        """Plain label -> count mapping, most frequent first."""
        return {label: self._counts[label] for label in self.labels()}
