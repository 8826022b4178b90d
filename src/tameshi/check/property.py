"""
Property - Predicates Over Generated Input

A Property pairs a generator with a predicate and evaluates one generated
value at a time to exactly one Outcome: PASS, FAIL or DISCARD.

Predicates may return:
- True / None: PASS
- False: FAIL
- an Outcome, usually enriched with classify/collect/filter

A predicate that raises fails (the exception becomes the reason), except for
Discarded (raised by assume()), which discards the sample.

Usage:
    prop = forall(gen.lists(gen.integers()), lambda xs: list(reversed(list(reversed(xs)))) == xs)
    prop = prop.classify(lambda xs: len(xs) == 0, "empty").collect(len)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

from tameshi.check.errors import Discarded, GeneratorMisuseError
from tameshi.check.gen import Gen, tuples


class Status(str, Enum):
    """Verdict of a single trial."""

    PASS = "pass"
    FAIL = "fail"
    DISCARD = "discard"


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a property on one value.

    labels carries the statistics recorded for the trial. Adding labels
    never changes status.
    """

    status: Status
    reason: str | None = None
    labels: tuple[str, ...] = ()

    @classmethod
    def passed(cls) -> Outcome:
        return cls(Status.PASS)

    @classmethod
    def failed(cls, reason: str = "property returned False") -> Outcome:
        return cls(Status.FAIL, reason)

    @classmethod
    def discarded(cls, reason: str | None = None) -> Outcome:
        return cls(Status.DISCARD, reason)

    @classmethod
    def from_result(cls, result: Any) -> Outcome:
        """Convert a predicate's return value into an Outcome."""
        if isinstance(result, Outcome):
            return result
        if result is None:
            return cls.passed()
        return cls.passed() if result else cls.failed()

    @property
    def is_pass(self) -> bool:
        return self.status is Status.PASS

    @property
    def is_fail(self) -> bool:
        return self.status is Status.FAIL

    @property
    def is_discard(self) -> bool:
        return self.status is Status.DISCARD

    def classify(self, condition: bool, label: str) -> Outcome:
        """Record label for this trial when condition holds."""
        if not condition:
            return self
        return replace(self, labels=self.labels + (label,))

    def collect(self, value: Any) -> Outcome:
        """Record str(value) as a label for this trial."""
        return self.classify(True, str(value))

    def filter(self, keep: bool) -> Outcome:
        """Turn the outcome into a discard unless keep holds."""
        if keep:
            return self
        return replace(self, status=Status.DISCARD, reason="filtered out")


# =============================================================================
# Outcome Operators
# =============================================================================


def classify(outcome: bool | Outcome | None, condition: bool, label: str) -> Outcome:
    """Record label against the trial when condition holds. Never changes the verdict."""
    return Outcome.from_result(outcome).classify(condition, label)


def collect(outcome: bool | Outcome | None, value: Any) -> Outcome:
    """Record str(value) against the trial. Never changes the verdict."""
    return Outcome.from_result(outcome).collect(value)


def filter(outcome: bool | Outcome | None, keep: bool) -> Outcome:
    """Discard the trial unless keep holds, whatever the verdict would have been."""
    return Outcome.from_result(outcome).filter(keep)


def assume(condition: bool) -> None:
    """Discard the current sample unless condition holds.

    Call from inside a predicate.
    """
    if not condition:
        raise Discarded("assumption failed")


# =============================================================================
# Property
# =============================================================================


class Property:
    """A generator paired with a check producing an Outcome per value.

    Properties are immutable: classify/collect/filter wrap this property in a
    new one. When several generators were given to forall(), the generated
    value is a tuple and every callable receives it unpacked.
    """

    __slots__ = ("gen", "name", "_check", "_spread")

    def __init__(self, gen: Gen[Any], check: Callable[..., Any], name: str = "property", spread: bool = False) -> None:
        self.gen = gen
        self.name = name
        self._check = check
        self._spread = spread

    def __repr__(self) -> str:
        return f"Property({self.name})"

    def _call(self, func: Callable[..., Any], value: Any) -> Any:
        return func(*value) if self._spread else func(value)

    def _wrap(self, check: Callable[[Any], Outcome]) -> Property:
        # check takes the packed value, so it is never spread
        return Property(self.gen, check, self.name)

    def evaluate(self, value: Any) -> Outcome:
        """Evaluate the property on one generated value.

        Raises:
            GeneratorMisuseError: Programming errors are never turned into outcomes.
        """
        try:
            return Outcome.from_result(self._call(self._check, value))
        except Discarded as e:
            return Outcome.discarded(str(e))
        except GeneratorMisuseError:
            raise
        except Exception as e:
            return Outcome.failed(f"{type(e).__name__}: {e}")

    def classify(self, condition: Callable[..., bool], label: str) -> Property:
        """Label trials whose value satisfies condition."""
        return self._wrap(lambda value: self.evaluate(value).classify(bool(self._call(condition, value)), label))

    def collect(self, func: Callable[..., Any]) -> Property:
        """Label every trial with str(func(value))."""
        return self._wrap(lambda value: self.evaluate(value).collect(self._call(func, value)))

    def filter(self, keep: Callable[..., bool]) -> Property:
        """Discard trials whose value does not satisfy keep.

        keep is checked first, so the predicate never sees rejected values.
        """

        def check(value: Any) -> Outcome:
            if not self._call(keep, value):
                return Outcome.discarded("filtered out")
            return self.evaluate(value)

        return self._wrap(check)

    @classmethod
    def from_predicate(cls, predicate: Callable[..., Any]) -> Property:
        """Build a property whose generators come from the predicate's annotations."""
        from tameshi.check.arbitrary import for_signature

        return forall(*for_signature(predicate), predicate)


def _name_of(func: Callable[..., Any]) -> str:
    return getattr(func, "__name__", None) or type(func).__name__


def forall(*args: Any) -> Property:
    """Pair one or more generators with a predicate.

    Usage:
        forall(gen.integers(), lambda n: n + 0 == n)
        forall(gen.integers(), gen.integers(), lambda a, b: a + b == b + a)
    """
    if len(args) < 2:
        raise GeneratorMisuseError("forall: needs at least one generator and a predicate")
    *gens, predicate = args
    if not callable(predicate) or isinstance(predicate, Gen):
        raise GeneratorMisuseError("forall: the last argument must be the predicate")
    for candidate in gens:
        if not isinstance(candidate, Gen):
            raise GeneratorMisuseError(f"forall: expected a Gen, got {type(candidate).__name__}")

    if len(gens) == 1:
        return Property(gens[0], predicate, _name_of(predicate))
    return Property(tuples(*gens), predicate, _name_of(predicate), spread=True)
