"""
ShrinkTree - Lazy Shrink Trees

A generated value travels together with the ways it can be made smaller.
Children are produced on demand by a thunk, so a tree for a large list costs
nothing until the shrinker walks into it, and walking it twice replays the
same children.

Every child is strictly smaller than its parent under the ordering of its
type, which is what makes any path through a tree finite:
- integers move strictly closer to their destination
- lists get shorter, or keep their length with one element strictly smaller
- tuples keep every component but one, which gets strictly smaller
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, Iterator, Sequence, TypeVar

from tameshi.check.errors import Discarded

T = TypeVar("T")
U = TypeVar("U")


def _no_children() -> Iterable:
    return ()


class ShrinkTree(Generic[T]):
    """A value plus a lazily produced sequence of smaller trees."""

    __slots__ = ("value", "_children")

    def __init__(self, value: T, children: Callable[[], Iterable[ShrinkTree[T]]] | None = None) -> None:
        self.value = value
        self._children = children if children is not None else _no_children

    def __repr__(self) -> str:
        return f"ShrinkTree({self.value!r})"

    def children(self) -> Iterator[ShrinkTree[T]]:
        """Iterate the smaller trees, in the order they should be tried."""
        return iter(self._children())

    def map(self, func: Callable[[T], U]) -> ShrinkTree[U]:
        """Apply func to every value in the tree."""
        return ShrinkTree(
            func(self.value),
            lambda: (child.map(func) for child in self.children()),
        )

    def bind(self, func: Callable[[T], ShrinkTree[U]]) -> ShrinkTree[U]:
        """Feed every value of this tree into func.

        Shrinking the outer value is tried before shrinking the inner one,
        since a smaller outer value usually gives a smaller inner tree.
        func must be deterministic for the same input.
        """
        inner = func(self.value)

        def children() -> Iterator[ShrinkTree[U]]:
            for child in self.children():
                # A smaller outer value may leave the inner generator nothing to accept
                try:
                    bound = child.bind(func)
                except Discarded:
                    continue
                yield bound
            yield from inner.children()

        return ShrinkTree(inner.value, children)

    def filter(self, predicate: Callable[[T], bool]) -> ShrinkTree[T]:
        """Drop every subtree whose value does not satisfy predicate.

        The root is kept as is; callers only build filtered trees from
        roots that already passed.
        """
        return ShrinkTree(
            self.value,
            lambda: (
                child.filter(predicate)
                for child in self.children()
                if predicate(child.value)
            ),
        )

    @classmethod
    def unfold(cls, value: T, shrink: Callable[[T], Iterable[T]]) -> ShrinkTree[T]:
        """Build a tree by applying shrink to every value recursively."""
        return cls(value, lambda: (cls.unfold(smaller, shrink) for smaller in shrink(value)))

    def walk(self, depth: int) -> Iterator[T]:
        """Yield values breadth-first down to depth levels (for debugging and tests)."""
        level: list[ShrinkTree[T]] = [self]
        for _ in range(depth + 1):
            next_level: list[ShrinkTree[T]] = []
            for tree in level:
                yield tree.value
                next_level.extend(tree.children())
            level = next_level


# =============================================================================
# Shrink Orderings
# =============================================================================


def halves(n: int) -> Iterator[int]:
    """Yield n, n/2, n/4, ... rounded toward zero, stopping before zero."""
    while n != 0:
        yield n
        n = -(abs(n) // 2) if n < 0 else n // 2


def shrink_integral(value: int, destination: int = 0) -> Iterator[int]:
    """Shrink an integer toward destination.

    The destination itself comes first, then values halving the remaining
    distance, finishing with a single unit step. Every candidate is strictly
    closer to destination than value.

        >>> list(shrink_integral(100))
        [0, 50, 75, 88, 94, 97, 99]
    """
    distance = value - destination
    for step in halves(distance):
        yield value - step


def integral_tree(value: int, destination: int = 0) -> ShrinkTree[int]:
    """Shrink tree of an integer toward destination."""
    return ShrinkTree.unfold(value, lambda x: shrink_integral(x, destination))


def list_tree(trees: Sequence[ShrinkTree[T]], min_length: int = 0) -> ShrinkTree[list[T]]:
    """Combine element trees into the shrink tree of a list.

    Children first remove contiguous chunks (the whole list, then halves,
    quarters, down to single elements), then shrink surviving elements one at
    a time. The list never drops below min_length.
    """
    trees = list(trees)

    def children() -> Iterator[ShrinkTree[list[T]]]:
        length = len(trees)
        for chunk in halves(length):
            for start in range(0, length, chunk):
                remaining = trees[:start] + trees[start + chunk:]
                if len(remaining) >= min_length:
                    yield list_tree(remaining, min_length)

        for index, tree in enumerate(trees):
            for smaller in tree.children():
                yield list_tree(trees[:index] + [smaller] + trees[index + 1:], min_length)

    return ShrinkTree([tree.value for tree in trees], children)


def tuple_tree(trees: Sequence[ShrinkTree]) -> ShrinkTree[tuple]:
    """Combine component trees into the shrink tree of a tuple.

    Each component shrinks on its own while the others stay fixed, in
    component order.
    """
    trees = list(trees)

    def children() -> Iterator[ShrinkTree[tuple]]:
        for index, tree in enumerate(trees):
            for smaller in tree.children():
                yield tuple_tree(trees[:index] + [smaller] + trees[index + 1:])

    return ShrinkTree(tuple(tree.value for tree in trees), children)
