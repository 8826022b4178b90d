"""
Generator Tests

Value ranges, size behavior, combinators and shrink trees of the built-in
generators.
"""

import pytest

from tameshi.check import Discarded, GeneratorMisuseError, RandomSource, gen
from tameshi.check.gen import DEFAULT_ALPHABET


def draws(generator, size=30, count=100, seed=42):
    """Generate count values, each from its own split stream."""
    rng = RandomSource(_seed=seed)
    return [generator.generate(rng.split(), size) for _ in range(count)]


def nesting(value):
    if isinstance(value, list):
        return 1 + max((nesting(item) for item in value), default=0)
    return 0


# =============================================================================
# Primitive Generators
# =============================================================================


class TestPrimitives:
    """Tests for primitive generators."""

    def test_constant(self, rng):
        """Test constant always produces its value and never shrinks."""
        tree = gen.constant("x").run(rng, 50)

        assert tree.value == "x"
        assert list(tree.children()) == []

    def test_same_seed_same_value(self):
        """Test generation is a function of the seed and size."""
        generator = gen.lists(gen.integers())
        assert draws(generator, seed=5) == draws(generator, seed=5)

    def test_integers_bounded(self):
        """Test bounded integers stay in range at every size."""
        for size in (0, 5, 100):
            assert all(-3 <= n <= 7 for n in draws(gen.integers(-3, 7), size=size))

    def test_integers_scale_with_size(self):
        """Test unbounded integers stay within [-size, size]."""
        assert all(-10 <= n <= 10 for n in draws(gen.integers(), size=10))
        assert set(draws(gen.integers(), size=0)) == {0}
        assert all(-4 <= n <= 4 for n in draws(gen.sized_integers(), size=4))

    def test_integers_min_only(self):
        """Test a lone lower bound above the size range."""
        assert all(10 <= n <= 15 for n in draws(gen.integers(min_value=10), size=5))

    def test_integers_max_only(self):
        """Test a lone upper bound below the size range."""
        assert all(-8 <= n <= -5 for n in draws(gen.integers(max_value=-5), size=3))

    def test_integers_inverted_bounds(self):
        """Test min_value > max_value is a misuse."""
        with pytest.raises(GeneratorMisuseError):
            gen.integers(5, 4)

    def test_integers_shrink_toward_nearest_bound(self, rng):
        """Test integers above zero shrink toward their lower bound."""
        for _ in range(20):
            tree = gen.integers(5, 10).run(rng.split(), 10)
            children = [child.value for child in tree.children()]
            assert all(5 <= n < tree.value for n in children)
            if tree.value != 5:
                assert children[0] == 5

    def test_booleans(self):
        """Test both booleans appear and True shrinks to False."""
        values = draws(gen.booleans())
        assert set(values) == {True, False}

        rng = RandomSource(_seed=1)
        trees = [gen.booleans().run(rng.split(), 10) for _ in range(20)]
        true_tree = next(tree for tree in trees if tree.value)
        assert [child.value for child in true_tree.children()] == [False]

    def test_elements(self):
        """Test elements draws from the collection."""
        assert set(draws(gen.elements("abc"))) <= set("abc")

    def test_elements_shrink_to_first(self, rng):
        """Test elements shrink toward the first item."""
        for _ in range(20):
            tree = gen.elements(["a", "b", "c"]).run(rng.split(), 10)
            if tree.value != "a":
                assert next(tree.children()).value == "a"

    def test_elements_empty(self):
        """Test an empty collection is a misuse."""
        with pytest.raises(GeneratorMisuseError):
            gen.elements([])

    def test_characters(self):
        """Test characters come from the default alphabet."""
        assert all(char in DEFAULT_ALPHABET for char in draws(gen.characters()))

    def test_floats_bounded(self):
        """Test bounded floats stay in range."""
        assert all(-1.5 <= x <= 2.5 for x in draws(gen.floats(-1.5, 2.5)))

    def test_floats_shrink_to_destination(self, rng):
        """Test floats try the destination first."""
        tree = gen.floats(1.0, 9.0).run(rng, 10)
        if tree.value != 1.0:
            assert next(tree.children()).value == 1.0

    def test_negative_size(self, rng):
        """Test a negative size is a misuse."""
        with pytest.raises(GeneratorMisuseError):
            gen.integers().run(rng, -1)


# =============================================================================
# Combinators
# =============================================================================


class TestCombinators:
    """Tests for map, bind, such_that, resize and scale."""

    def test_map(self):
        """Test map transforms every value."""
        assert all(n % 2 == 0 for n in draws(gen.integers(0, 10).map(lambda n: n * 2)))

    def test_bind_dependent_values(self):
        """Test bind feeds the outer value into the inner generator."""
        pairs = gen.lists(gen.integers(), min_size=1).bind(
            lambda xs: gen.tuples(gen.constant(xs), gen.elements(xs))
        )
        for xs, x in draws(pairs):
            assert x in xs

    def test_bind_shrinks_stay_dependent(self, rng):
        """Test every shrink of a bound value keeps the dependency."""
        pairs = gen.lists(gen.integers(), min_size=1).bind(
            lambda xs: gen.tuples(gen.constant(xs), gen.elements(xs))
        )
        tree = pairs.run(rng, 8)
        for xs, x in tree.walk(depth=2):
            assert x in xs

    def test_bind_reproducible(self):
        """Test bind gives the same value for the same seed."""
        generator = gen.integers(0, 5).bind(lambda n: gen.lists(gen.integers(), min_size=n, max_size=n))
        assert draws(generator, seed=9) == draws(generator, seed=9)

    def test_such_that(self):
        """Test such_that only produces accepted values."""
        assert all(n % 2 == 0 for n in draws(gen.integers(0, 100).such_that(lambda n: n % 2 == 0)))

    def test_such_that_shrinks_stay_accepted(self, rng):
        """Test shrinks of a filtered value still satisfy the filter."""
        tree = gen.integers(0, 100).such_that(lambda n: n % 2 == 0).run(rng, 10)
        assert all(n % 2 == 0 for n in tree.walk(depth=3))

    def test_such_that_bounded_retries(self, rng):
        """Test an unsatisfiable filter discards after its budget."""
        calls = []

        def never(n):
            calls.append(n)
            return False

        with pytest.raises(Discarded):
            gen.integers().such_that(never, retries=5).run(rng, 10)
        assert len(calls) == 5

    def test_such_that_default_budget(self, rng):
        """Test the default budget is used when no retries are given."""
        calls = []

        def never(n):
            calls.append(n)
            return False

        with pytest.raises(Discarded):
            gen.integers().such_that(never).run(rng, 0)
        assert len(calls) == 100

    def test_such_that_non_positive_retries(self):
        """Test a non-positive retry budget is a misuse."""
        with pytest.raises(GeneratorMisuseError):
            gen.integers().such_that(lambda n: True, retries=0)

    def test_filter_alias(self):
        """Test filter is such_that."""
        assert all(n > 0 for n in draws(gen.integers(-10, 10).filter(lambda n: n > 0)))

    def test_resize(self):
        """Test resize ignores the ambient size."""
        assert set(draws(gen.integers().resize(0), size=100)) == {0}

    def test_resize_negative(self):
        """Test resize to a negative size is a misuse."""
        with pytest.raises(GeneratorMisuseError):
            gen.integers().resize(-1)

    def test_scale(self):
        """Test scale transforms the ambient size."""
        assert all(-2 <= n <= 2 for n in draws(gen.integers().scale(lambda size: size // 50), size=100))

    def test_sized(self):
        """Test sized sees the current size."""
        assert set(draws(gen.sized(gen.constant), size=17)) == {17}


# =============================================================================
# Choice
# =============================================================================


class TestChoice:
    """Tests for one_of and frequency."""

    def test_one_of(self):
        """Test one_of uses every generator."""
        values = draws(gen.one_of(gen.constant("a"), gen.constant("b")))
        assert set(values) == {"a", "b"}

    def test_one_of_list(self):
        """Test one_of accepts a list of generators."""
        values = draws(gen.one_of([gen.constant(1), gen.constant(2)]))
        assert set(values) == {1, 2}

    def test_one_of_empty(self):
        """Test one_of without generators is a misuse."""
        with pytest.raises(GeneratorMisuseError):
            gen.one_of()

    def test_frequency_zero_weight_never_chosen(self):
        """Test a zero-weight generator is never used."""
        generator = gen.frequency((0, gen.constant("never")), (1, gen.constant("always")))
        assert set(draws(generator, count=200)) == {"always"}

    def test_frequency_zero_weight_never_shrunk_to(self, rng):
        """Test shrinking never lands on a zero-weight generator."""
        generator = gen.frequency((0, gen.constant("never")), (1, gen.constant("always")))
        tree = generator.run(rng, 10)
        assert "never" not in list(tree.walk(depth=3))

    def test_frequency_weights(self):
        """Test heavier generators are chosen more often."""
        values = draws(gen.frequency((1, gen.constant("rare")), (9, gen.constant("common"))), count=500)
        assert values.count("common") > values.count("rare")

    @pytest.mark.parametrize(
        "pairs",
        [
            [],
            [(-1, gen.constant(1)), (2, gen.constant(2))],
            [(0, gen.constant(1)), (0, gen.constant(2))],
        ],
    )
    def test_frequency_misuse(self, pairs):
        """Test empty, negative and all-zero weights are misuses."""
        with pytest.raises(GeneratorMisuseError):
            gen.frequency(*pairs)


# =============================================================================
# Containers
# =============================================================================


class TestContainers:
    """Tests for lists, text, tuples and dictionaries."""

    def test_list_length_bounded_by_size(self):
        """Test list length never exceeds the size."""
        assert all(len(xs) <= 7 for xs in draws(gen.lists(gen.integers()), size=7))

    def test_list_empty_at_size_zero(self):
        """Test lists are empty at size 0."""
        assert all(xs == [] for xs in draws(gen.lists(gen.integers()), size=0))

    def test_list_min_and_max(self):
        """Test min_size and max_size are respected."""
        for xs in draws(gen.lists(gen.integers(), min_size=2, max_size=4), size=50):
            assert 2 <= len(xs) <= 4

    def test_list_min_size_above_size(self):
        """Test min_size wins over a smaller size."""
        assert all(len(xs) == 3 for xs in draws(gen.lists(gen.integers(), min_size=3), size=0))

    def test_list_shrinks_respect_min_size(self, rng):
        """Test shrinking never removes below min_size."""
        tree = gen.lists(gen.integers(), min_size=2).run(rng, 10)
        assert all(len(xs) >= 2 for xs in tree.walk(depth=2))

    def test_list_misuse(self):
        """Test negative min_size and max_size < min_size are misuses."""
        with pytest.raises(GeneratorMisuseError):
            gen.lists(gen.integers(), min_size=-1)
        with pytest.raises(GeneratorMisuseError):
            gen.lists(gen.integers(), min_size=3, max_size=2)

    def test_text(self):
        """Test text builds strings from the alphabet."""
        for value in draws(gen.text("xy"), size=10):
            assert isinstance(value, str)
            assert set(value) <= {"x", "y"}

    def test_tuples(self):
        """Test tuples have one component per generator."""
        for value in draws(gen.tuples(gen.integers(), gen.booleans(), gen.constant("k"))):
            assert len(value) == 3
            assert value[2] == "k"

    def test_dictionaries(self):
        """Test dictionaries produce dicts with generated keys and values."""
        for value in draws(gen.dictionaries(gen.integers(0, 5), gen.booleans())):
            assert isinstance(value, dict)
            assert all(0 <= key <= 5 for key in value)

    def test_non_empty(self):
        """Test non_empty drops empty containers."""
        assert all(len(xs) > 0 for xs in draws(gen.non_empty(gen.lists(gen.integers())), size=5))


# =============================================================================
# Recursion and Sampling
# =============================================================================


class TestRecursion:
    """Tests for deferred and recursive generators."""

    def test_recursive_terminates(self):
        """Test recursive structures halve their size on every level."""
        nested = gen.recursive(gen.integers(), lambda child: gen.lists(child, max_size=3))
        for value in draws(nested, size=64, count=50):
            assert nesting(value) <= 6

    def test_recursive_base_at_small_size(self):
        """Test size 1 only uses the base generator."""
        nested = gen.recursive(gen.integers(), lambda child: gen.lists(child, max_size=3))
        assert all(isinstance(value, int) for value in draws(nested, size=1))

    def test_deferred_with_decreasing_size(self):
        """Test a self-referencing generator that halves its size."""

        def trees():
            return gen.sized(
                lambda n: gen.integers()
                if n == 0
                else gen.one_of(gen.integers(), gen.lists(gen.deferred(trees).resize(n // 2), max_size=2))
            )

        assert len(draws(trees(), size=100, count=20)) == 20

    def test_deferred_runaway(self, rng):
        """Test recursion that never decreases its size is a misuse."""
        runaway = gen.deferred(lambda: runaway)

        with pytest.raises(GeneratorMisuseError):
            runaway.run(rng, 10)

    def test_deferred_counts_down_by_one(self, rng):
        """Test deep recursion is fine while every level lowers the size."""

        def counter():
            return gen.sized(lambda n: gen.constant(0) if n == 0 else gen.deferred(counter).resize(n - 1).map(lambda k: k + 1))

        assert counter().generate(rng, 100) == 100

    def test_deferred_same_size_nested_later(self, rng):
        """Test a level that stops lowering the size is a misuse even after deep progress."""

        def stalls():
            return gen.sized(lambda n: gen.deferred(stalls).resize(max(n - 1, 5)))

        with pytest.raises(GeneratorMisuseError):
            stalls().run(rng, 80)


class TestSample:
    """Tests for sample."""

    def test_count(self):
        """Test sample returns count values."""
        assert len(gen.sample(gen.integers(), count=7, seed=1)) == 7

    def test_reproducible(self):
        """Test sample is reproducible with a seed."""
        assert gen.sample(gen.lists(gen.integers()), seed=3) == gen.sample(gen.lists(gen.integers()), seed=3)

    def test_size_ramps(self):
        """Test sample starts small and respects the size."""
        values = gen.sample(gen.integers(), count=5, size=0, seed=1)
        assert values == [0, 0, 0, 0, 0]

        first = gen.sample(gen.lists(gen.integers()), count=10, size=50, seed=1)[0]
        assert first == []
