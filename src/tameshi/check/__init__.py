"""
Tameshi Check - Property-Based Testing Engine

Generators with integrated shrinking, properties, a seeded driver and reports.

Usage:
    from tameshi.check import gen, forall, quick_check

    prop = forall(gen.lists(gen.integers()), lambda xs: list(reversed(list(reversed(xs)))) == xs)
    report = quick_check(prop)
    print(report)

Run with seed:
    TAMESHI_SEED=12345 pytest tests/
"""

from . import gen
from .errors import (
    TameshiError,
    Discarded,
    GeneratorMisuseError,
    PropertyFailedError,
    GaveUpError,
)
from .rng import RandomSource
from .size import SizeRamp, ramp_size
from .tree import ShrinkTree
from .gen import Gen, sample
from .property import Status, Outcome, Property, forall, classify, collect, assume
from .stats import Statistics
from .shrink import ShrinkResult, shrink
from .config import RunConfig
from .runner import Runner, RunState, quick_check, quick_check_fn
from .report import format_report, print_report
from .harness import property_test

__all__ = [
    # Errors
    "TameshiError",
    "Discarded",
    "GeneratorMisuseError",
    "PropertyFailedError",
    "GaveUpError",
    # Primitives
    "RandomSource",
    "SizeRamp",
    "ramp_size",
    "ShrinkTree",
    # Generators
    "gen",
    "Gen",
    "sample",
    # Properties
    "Status",
    "Outcome",
    "Property",
    "forall",
    "classify",
    "collect",
    "assume",
    # Running
    "Statistics",
    "ShrinkResult",
    "shrink",
    "RunConfig",
    "Runner",
    "RunState",
    "quick_check",
    "quick_check_fn",
    # Reports
    "format_report",
    "print_report",
    # Harness
    "property_test",
]
