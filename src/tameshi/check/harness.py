"""
Harness - pytest Integration

TigerStyle: Decorator pattern for clean test declaration.

Usage:
    @property_test(gen.lists(gen.integers()))
    def test_reverse_twice(xs):
        assert list(reversed(list(reversed(xs)))) == xs

    @property_test
    def test_addition_commutes(a: int, b: int):
        return a + b == b + a

    @property_test(gen.integers(), seed=12345, max_success=500)
    def test_reproducible(n):
        ...

Run with seed:
    TAMESHI_SEED=12345 pytest tests/
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable

from tameshi.check.gen import Gen
from tameshi.check.property import Property, forall
from tameshi.check.runner import quick_check


def property_test(*gens: Any, **options: Any) -> Callable[..., Any]:
    """Turn a predicate into a zero-argument test function.

    Generators may be given positionally; without them they are derived
    from the predicate's annotations. Keyword options are passed on to
    quick_check (seed, max_success, max_size, ...).

    The returned test fails with PropertyFailedError (an AssertionError)
    carrying the shrunk counterexample and the seed, or with GaveUpError.
    """

    def decorator(predicate: Callable[..., Any]) -> Callable[[], None]:
        prop = forall(*gens, predicate) if gens else Property.from_predicate(predicate)

        def wrapper() -> None:
            quick_check(prop, **options).raise_for_verdict()

        functools.update_wrapper(wrapper, predicate)
        # Zero-argument signature so pytest injects no fixtures
        del wrapper.__wrapped__
        wrapper.__signature__ = inspect.Signature()
        wrapper.property = prop
        return wrapper

    # Handle both @property_test and @property_test(...) syntax
    if len(gens) == 1 and callable(gens[0]) and not isinstance(gens[0], Gen) and not options:
        predicate, gens = gens[0], ()
        return decorator(predicate)
    return decorator
