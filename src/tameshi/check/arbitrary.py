"""
Arbitrary - Default Generators by Type

Derives a generator from a type annotation so a plain annotated predicate can
be checked without spelling out its generators:

    def prop_reverse(xs: list[int]) -> bool:
        return list(reversed(list(reversed(xs)))) == xs

    quick_check_fn(prop_reverse)

Supported: int, bool, float, str, bytes, None, list/tuple/set/frozenset/dict
(and their typing aliases), Optional/Union, Literal, Enum subclasses, plus
anything added with register().
"""

from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from enum import Enum
from typing import Any, Callable

from tameshi.check import gen
from tameshi.check.errors import GeneratorMisuseError
from tameshi.check.gen import Gen

_REGISTRY: dict[Any, Callable[[], Gen[Any]]] = {
    int: gen.integers,
    bool: gen.booleans,
    float: gen.floats,
    str: gen.text,
    bytes: lambda: gen.lists(gen.integers(0, 255)).map(bytes),
    type(None): lambda: gen.constant(None),
}

_LIST_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence, collections.abc.Iterable)
_SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)
_DICT_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def register(tp: Any, factory: Callable[[], Gen[Any]]) -> None:
    """Use factory() as the default generator for tp."""
    _REGISTRY[tp] = factory


def for_type(tp: Any) -> Gen[Any]:
    """Get the default generator for a type annotation.

    Raises:
        GeneratorMisuseError: If no generator is known for tp.
    """
    if tp is None:
        tp = type(None)
    if tp in _REGISTRY:
        return _REGISTRY[tp]()

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Union or origin is types.UnionType:
        # None first, so optional values shrink toward None
        ordered = sorted(args, key=lambda arg: arg is not type(None))
        return gen.one_of([for_type(arg) for arg in ordered])
    if origin is typing.Literal:
        return gen.elements(args)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return gen.lists(for_type(args[0])).map(tuple)
        return gen.tuples(*(for_type(arg) for arg in args))
    if origin in _LIST_ORIGINS or tp is list:
        return gen.lists(for_type(args[0] if args else int))
    if origin in _SET_ORIGINS or tp in (set, frozenset):
        container = frozenset if frozenset in (origin, tp) else set
        return gen.lists(for_type(args[0] if args else int)).map(container)
    if origin in _DICT_ORIGINS or tp is dict:
        key_type, value_type = args if args else (int, int)
        return gen.dictionaries(for_type(key_type), for_type(value_type))
    if inspect.isclass(tp) and issubclass(tp, Enum):
        return gen.elements(list(tp))

    raise GeneratorMisuseError(f"no default generator for {tp!r}; register() one or use forall()")


def for_signature(func: Callable[..., Any]) -> list[Gen[Any]]:
    """Get one default generator per positional parameter of func.

    Raises:
        GeneratorMisuseError: If a parameter is not annotated or has no default generator.
    """
    hints = typing.get_type_hints(func)
    gens: list[Gen[Any]] = []
    for name, param in inspect.signature(func).parameters.items():
        if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            continue
        if name not in hints:
            raise GeneratorMisuseError(f"parameter {name!r} of {func.__name__} needs a type annotation")
        gens.append(for_type(hints[name]))
    return gens
