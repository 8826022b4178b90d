"""
Tameshi Constants - TigerStyle

All limits are explicit, named with units, big-endian naming convention.
Category comes first, specifics last: RUN_SUCCESS_COUNT_DEFAULT not DEFAULT_MAX_SUCCESS.
"""

# =============================================================================
# Run Limits
# =============================================================================

RUN_SUCCESS_COUNT_DEFAULT: int = 100  # Passing trials needed for SUCCESS
RUN_SIZE_MAX_DEFAULT: int = 100  # Size reached by the end of the ramp
RUN_DISCARD_RATIO_DEFAULT: float = 0.9  # Share of trials that may be discarded, below 1
RUN_DISCARD_TRIALS_COUNT_MIN: int = 20  # Trials run before the discard ratio is judged
RUN_SEED_MAX: int = 2**63 - 1  # Largest seed handed out by from_env_or_random

# =============================================================================
# Random Source
# =============================================================================

RNG_WORD_BITS: int = 64  # Width of next_u64()
RNG_WORD_MAX: int = 2**64 - 1

# =============================================================================
# Generator Limits
# =============================================================================

GEN_SUCH_THAT_RETRIES_COUNT_DEFAULT: int = 100  # Resamples before a Discard
GEN_SUCH_THAT_RETRIES_COUNT_MAX: int = 10_000  # Hard cap, size cannot exceed it
GEN_FLOAT_MAGNITUDE_PER_SIZE: float = 1.0  # floats() spread per unit of size

# =============================================================================
# Shrink Limits
# =============================================================================

SHRINK_ATTEMPTS_COUNT_MAX: int = 10_000  # Property evaluations per shrink search

# =============================================================================
# Report
# =============================================================================

REPORT_VALUE_CHARS_MAX: int = 2_000  # Longest repr printed for a value
REPORT_LABELS_COUNT_MAX: int = 50  # Histogram rows before truncation
