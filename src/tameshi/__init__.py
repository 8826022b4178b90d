"""
Tameshi (試し) - Property-Based Testing

Checks properties of code against many generated inputs:
- Generates values from composable, size-aware generators
- Runs trials from a single seed, so any run can be replayed exactly
- Shrinks the first failing input to a small counterexample
- Reports label statistics to audit what was actually generated

Components:
- check: generators, properties, the driver and reports
- core: settings and report models
- cli: the `tameshi` command
"""

__version__ = "0.1.0"

from tameshi.check import (
    gen,
    forall,
    quick_check,
    quick_check_fn,
    property_test,
)
from tameshi.core.models import RunReport, Verdict

__all__ = [
    "__version__",
    "gen",
    "forall",
    "quick_check",
    "quick_check_fn",
    "property_test",
    "RunReport",
    "Verdict",
]
