"""
Gen - Composable Random Generators

A Gen[T] maps (RandomSource, size) to a ShrinkTree[T]: the generated value
together with every way of making it smaller. Because shrinking is built into
the tree, map/bind/such_that keep shrinks valid without any extra work from
the caller.

Usage:
    from tameshi.check import gen

    pairs = gen.lists(gen.integers(), min_size=1).bind(
        lambda xs: gen.tuples(gen.constant(xs), gen.elements(xs))
    )
    evens = gen.integers(0, 1000).such_that(lambda n: n % 2 == 0)

Generators are immutable; combinators always return a new Gen.
"""

from __future__ import annotations

import contextvars
import math
import string
from typing import Any, Callable, Generic, Iterable, Iterator, Sequence, TypeVar

from tameshi.constants import (
    GEN_FLOAT_MAGNITUDE_PER_SIZE,
    GEN_SUCH_THAT_RETRIES_COUNT_DEFAULT,
    GEN_SUCH_THAT_RETRIES_COUNT_MAX,
    RUN_SIZE_MAX_DEFAULT,
)
from tameshi.check.errors import Discarded, GeneratorMisuseError
from tameshi.check.rng import RandomSource, fresh_seed
from tameshi.check.size import ramp_size
from tameshi.check.tree import ShrinkTree, integral_tree, list_tree, tuple_tree

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_ALPHABET: str = string.ascii_lowercase + string.ascii_uppercase + string.digits + " "

# Size of the innermost deferred() generator currently running, None outside one
_deferred_size: contextvars.ContextVar[int | None] = contextvars.ContextVar("tameshi_deferred_size", default=None)


class Gen(Generic[T]):
    """A generator of shrinkable random values."""

    __slots__ = ("_run", "label")

    def __init__(self, run: Callable[[RandomSource, int], ShrinkTree[T]], label: str = "gen") -> None:
        self._run = run
        self.label = label

    def __repr__(self) -> str:
        return f"Gen({self.label})"

    def run(self, rng: RandomSource, size: int) -> ShrinkTree[T]:
        """Generate a value with its shrink tree.

        Raises:
            GeneratorMisuseError: If size is negative.
            Discarded: If a such_that() filter ran out of retries.
        """
        if size < 0:
            raise GeneratorMisuseError(f"{self.label}: size must be non-negative, got {size}")
        return self._run(rng, size)

    def generate(self, rng: RandomSource, size: int) -> T:
        """Generate a bare value, dropping its shrink tree."""
        return self.run(rng, size).value

    # -------------------------------------------------------------------------
    # Combinators
    # -------------------------------------------------------------------------

    def map(self, func: Callable[[T], U]) -> Gen[U]:
        """Transform every generated value with func."""
        return Gen(lambda rng, size: self.run(rng, size).map(func), f"{self.label}.map")

    def bind(self, func: Callable[[T], Gen[U]]) -> Gen[U]:
        """Generate a value, pick the next generator from it, generate from that.

        The outer draw uses a split child stream and the inner draw replays a
        second, separately seeded stream, so the two steps never share random
        words and shrinking the outer value regenerates the inner one the
        same way every time.
        """

        def run(rng: RandomSource, size: int) -> ShrinkTree[U]:
            outer_rng = rng.split()
            inner_seed = rng.next_u64()
            outer = self.run(outer_rng, size)
            return outer.bind(lambda value: func(value).run(RandomSource(_seed=inner_seed), size))

        return Gen(run, f"{self.label}.bind")

    def such_that(self, predicate: Callable[[T], bool], retries: int | None = None) -> Gen[T]:
        """Keep only values satisfying predicate.

        Resamples up to a bounded budget: retries if given, otherwise the
        larger of the default budget and the current size, capped. When the
        budget runs out the sample is discarded, never looped on.
        """
        if retries is not None and retries <= 0:
            raise GeneratorMisuseError(f"such_that retries must be positive, got {retries}")

        def run(rng: RandomSource, size: int) -> ShrinkTree[T]:
            budget = retries
            if budget is None:
                budget = min(max(GEN_SUCH_THAT_RETRIES_COUNT_DEFAULT, size), GEN_SUCH_THAT_RETRIES_COUNT_MAX)
            for _ in range(budget):
                tree = self.run(rng, size)
                if predicate(tree.value):
                    return tree.filter(predicate)
            raise Discarded(f"{self.label}.such_that: no value accepted after {budget} attempts")

        return Gen(run, f"{self.label}.such_that")

    filter = such_that

    def resize(self, size: int) -> Gen[T]:
        """Ignore the ambient size and always generate at size."""
        if size < 0:
            raise GeneratorMisuseError(f"resize: size must be non-negative, got {size}")
        return Gen(lambda rng, _size: self.run(rng, size), f"{self.label}.resize({size})")

    def scale(self, func: Callable[[int], int]) -> Gen[T]:
        """Generate at func(size) instead of size."""
        return Gen(lambda rng, size: self.run(rng, func(size)), f"{self.label}.scale")


# =============================================================================
# Primitive Generators
# =============================================================================


def constant(value: T) -> Gen[T]:
    """Always generate value. Never shrinks."""
    return Gen(lambda rng, size: ShrinkTree(value), f"constant({value!r})")


def sized(func: Callable[[int], Gen[T]]) -> Gen[T]:
    """Build the generator from the current size."""
    return Gen(lambda rng, size: func(size).run(rng, size), "sized")


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def integers(min_value: int | None = None, max_value: int | None = None) -> Gen[int]:
    """Generate integers in [min_value, max_value], shrinking toward zero.

    A missing bound is replaced by one scaled by size: with no bounds at all
    the range is [-size, size]. When zero is outside the range, values
    shrink toward the bound nearest to it.
    """
    if min_value is not None and max_value is not None and min_value > max_value:
        raise GeneratorMisuseError(f"integers: min_value ({min_value}) > max_value ({max_value})")

    def run(rng: RandomSource, size: int) -> ShrinkTree[int]:
        low = min_value if min_value is not None else -size
        high = max_value if max_value is not None else size
        if min_value is None and low > high:
            low = high - size
        if max_value is None and high < low:
            high = low + size
        return integral_tree(rng.next_int(low, high), _clamp(0, low, high))

    return Gen(run, f"integers({min_value}, {max_value})")


def sized_integers() -> Gen[int]:
    """Generate integers in [-size, size], shrinking toward zero."""
    return integers()


def booleans() -> Gen[bool]:
    """Generate True or False with equal odds, shrinking toward False."""
    return Gen(lambda rng, size: integral_tree(int(rng.next_bool())).map(bool), "booleans")


def elements(items: Iterable[T]) -> Gen[T]:
    """Pick one element of a non-empty collection, shrinking toward earlier ones."""
    pool = list(items)
    if not pool:
        raise GeneratorMisuseError("elements: cannot choose from an empty collection")
    return Gen(
        lambda rng, size: integral_tree(rng.next_int(0, len(pool) - 1)).map(pool.__getitem__),
        f"elements({len(pool)})",
    )


one_of_array = elements


def characters(alphabet: str | None = None) -> Gen[str]:
    """Generate a single character from alphabet, shrinking toward its first character."""
    return elements(alphabet if alphabet is not None else DEFAULT_ALPHABET)


def _shrink_float(value: float, destination: float, low: float, high: float) -> Iterator[float]:
    if value == destination:
        return
    yield destination
    truncated = float(math.trunc(value))
    if truncated != value:
        if abs(truncated - destination) < abs(value - destination) and low <= truncated <= high:
            yield truncated
    elif destination.is_integer():
        for smaller in integral_tree(int(value), int(destination)).children():
            yield float(smaller.value)


def floats(min_value: float | None = None, max_value: float | None = None) -> Gen[float]:
    """Generate finite floats in [min_value, max_value].

    Missing bounds scale with size. Floats shrink to the destination (zero
    clamped into range), then to their integer part, then as integers.
    """
    if min_value is not None and max_value is not None and min_value > max_value:
        raise GeneratorMisuseError(f"floats: min_value ({min_value}) > max_value ({max_value})")

    def run(rng: RandomSource, size: int) -> ShrinkTree[float]:
        spread = size * GEN_FLOAT_MAGNITUDE_PER_SIZE
        low = min_value if min_value is not None else -spread
        high = max_value if max_value is not None else spread
        if min_value is None and low > high:
            low = high - spread
        if max_value is None and high < low:
            high = low + spread
        value = low + rng.next_float() * (high - low)
        destination = max(low, min(high, 0.0))
        return ShrinkTree.unfold(value, lambda x: _shrink_float(x, destination, low, high))

    return Gen(run, f"floats({min_value}, {max_value})")


# =============================================================================
# Choice
# =============================================================================


def _as_list(gens: tuple) -> list:
    if len(gens) == 1 and isinstance(gens[0], (list, tuple)):
        return list(gens[0])
    return list(gens)


def one_of(*gens: Gen[T] | Sequence[Gen[T]]) -> Gen[T]:
    """Pick one of several generators uniformly.

    Accepts generators as arguments or a single list of them. Shrinks toward
    earlier generators.
    """
    choices = _as_list(gens)
    if not choices:
        raise GeneratorMisuseError("one_of: needs at least one generator")
    return integers(0, len(choices) - 1).bind(choices.__getitem__)


def frequency(*pairs: tuple[float, Gen[T]] | Sequence[tuple[float, Gen[T]]]) -> Gen[T]:
    """Pick a generator with probability proportional to its weight.

    Usage:
        gen.frequency((1, gen.constant(None)), (9, gen.integers()))
    """
    weighted = _as_list(pairs)
    if not weighted:
        raise GeneratorMisuseError("frequency: needs at least one (weight, generator) pair")
    weights = [weight for weight, _ in weighted]
    if any(weight < 0 for weight in weights):
        raise GeneratorMisuseError(f"frequency: weights must be non-negative, got {weights}")
    total = sum(weights)
    if total <= 0:
        raise GeneratorMisuseError("frequency: total weight must be positive")

    def pick(rng: RandomSource, size: int) -> ShrinkTree[int]:
        target = rng.next_float() * total
        index = len(weights) - 1
        running = 0.0
        for position, weight in enumerate(weights):
            running += weight
            if target < running:
                index = position
                break
        while weights[index] == 0:
            index -= 1
        return integral_tree(index).filter(lambda i: weights[i] > 0)

    return Gen(pick, "frequency").bind(lambda index: weighted[index][1])


# =============================================================================
# Containers
# =============================================================================


def lists(elements_gen: Gen[T], min_size: int = 0, max_size: int | None = None) -> Gen[list[T]]:
    """Generate lists whose length grows with size.

    The length is drawn from [min_size, max(min_size, size)], capped by
    max_size, and then that many elements are drawn.
    """
    if min_size < 0:
        raise GeneratorMisuseError(f"lists: min_size must be non-negative, got {min_size}")
    if max_size is not None and max_size < min_size:
        raise GeneratorMisuseError(f"lists: max_size ({max_size}) < min_size ({min_size})")

    def run(rng: RandomSource, size: int) -> ShrinkTree[list[T]]:
        high = max(min_size, size)
        if max_size is not None:
            high = min(high, max_size)
        length = rng.next_int(min_size, high)
        trees = [elements_gen.run(rng, size) for _ in range(length)]
        return list_tree(trees, min_size)

    return Gen(run, f"lists({elements_gen.label})")


def text(alphabet: str | None = None, min_size: int = 0, max_size: int | None = None) -> Gen[str]:
    """Generate strings of characters from alphabet."""
    return lists(characters(alphabet), min_size, max_size).map("".join)


def tuples(*gens: Gen[Any]) -> Gen[tuple]:
    """Generate a tuple with one component per generator."""
    return Gen(
        lambda rng, size: tuple_tree([component.run(rng, size) for component in gens]),
        f"tuples({', '.join(component.label for component in gens)})",
    )


def dictionaries(keys: Gen[Any], values: Gen[Any], min_size: int = 0, max_size: int | None = None) -> Gen[dict]:
    """Generate dicts from generated key/value pairs (duplicate keys collapse)."""
    return lists(tuples(keys, values), min_size, max_size).map(dict)


def non_empty(container: Gen[T]) -> Gen[T]:
    """Keep only non-empty values of a sized generator."""
    return container.such_that(lambda value: len(value) > 0)


# =============================================================================
# Recursion
# =============================================================================


def deferred(thunk: Callable[[], Gen[T]]) -> Gen[T]:
    """Defer building a generator until it runs.

    Lets recursive generators refer to themselves. The recursion must
    shrink its size on the way down (see resize/scale/recursive): a
    deferred generator running inside another one at a size that is not
    strictly smaller is a generator that never terminates.
    """

    def run(rng: RandomSource, size: int) -> ShrinkTree[T]:
        parent_size = _deferred_size.get()
        if parent_size is not None and size >= parent_size:
            raise GeneratorMisuseError(
                f"deferred: nested call at size {size} inside a call at size {parent_size}; "
                "recursive generators must decrease size on every level"
            )
        token = _deferred_size.set(size)
        try:
            return thunk().run(rng, size)
        finally:
            _deferred_size.reset(token)

    return Gen(run, "deferred")


def recursive(base: Gen[T], extend: Callable[[Gen[T]], Gen[T]]) -> Gen[T]:
    """Generate recursive structures that are well-founded in size.

    At size <= 1 only base is used. Otherwise either base or extend(child)
    is chosen, where child is this same generator running at half the size.

    Usage:
        trees = gen.recursive(
            gen.integers(),
            lambda child: gen.lists(child, max_size=3),
        )
    """

    def run(rng: RandomSource, size: int) -> ShrinkTree[T]:
        if size <= 1:
            return base.run(rng, size)
        child = recursive(base, extend).resize(size // 2)
        return one_of(base, extend(child)).run(rng, size)

    return Gen(run, f"recursive({base.label})")


# =============================================================================
# Sampling
# =============================================================================


def sample(gen: Gen[T], count: int = 10, size: int = RUN_SIZE_MAX_DEFAULT, seed: int | None = None) -> list[T]:
    """Generate count example values, ramping size up to size.

    Useful for eyeballing what a generator produces.
    """
    assert count > 0, "count must be positive"
    rng = RandomSource(_seed=seed if seed is not None else fresh_seed())
    return [gen.generate(rng.split(), ramp_size(index, count, size)) for index in range(count)]
