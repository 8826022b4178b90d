"""
Size Ramp

Maps a trial index to the size handed to the generator. Every ramp starts at
0, is monotone non-decreasing in the trial index, reaches max_size on the last
required trial and stays there for any trials run after it (discards push the
index past max_success).
"""

from __future__ import annotations

import math
from enum import Enum


class SizeRamp(str, Enum):
    """Curves available for the size ramp."""

    LINEAR = "linear"  # Even growth from 0 to max_size
    SQRT = "sqrt"  # Fast early growth, spends more trials near max_size


def ramp_size(trial_index: int, max_success: int, max_size: int, ramp: SizeRamp = SizeRamp.LINEAR) -> int:
    """Compute the size for a trial.

    Args:
        trial_index: Zero-based index of the trial in the run.
        max_success: Number of passing trials the run needs.
        max_size: Largest size the run may use.
        ramp: Curve to follow from 0 to max_size.

    Returns:
        Size in [0, max_size].
    """
    assert trial_index >= 0, "trial_index must be non-negative"
    assert max_success > 0, "max_success must be positive"
    assert max_size >= 0, "max_size must be non-negative"

    last_index = max_success - 1
    if trial_index >= last_index:
        return max_size

    fraction = trial_index / last_index
    if ramp is SizeRamp.SQRT:
        fraction = math.sqrt(fraction)

    return min(max_size, int(fraction * max_size))
