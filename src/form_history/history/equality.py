"""Value comparison used to decide whether a commit changes anything."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping, Set
from dataclasses import fields, is_dataclass
from typing import Any, Callable, Dict

EqualityFn = Callable[[Any, Any], bool]


def structural_equal(left: Any, right: Any) -> bool:
    """Compare two values by structure rather than identity.

    Dataclasses compare field by field (and must share a type), mappings by
    key set and values, lists/tuples element-wise, sets by membership. ``bool``
    never equals a number, NaN equals NaN. Cyclic structures terminate: a pair
    already under comparison is assumed equal.
    """

    return _compare(left, right, set())


def _compare(left: Any, right: Any, active: set[tuple[int, int]]) -> bool:
    if left is right:
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, float) and isinstance(right, float):
        if math.isnan(left) and math.isnan(right):
            return True
        return left == right
    if isinstance(left, (str, bytes, int, float)) or left is None:
        return left == right

    key = (id(left), id(right))
    if key in active:
        return True
    active.add(key)
    try:
        if is_dataclass(left) and not isinstance(left, type):
            if type(left) is not type(right):
                return False
            return all(
                _compare(getattr(left, item.name), getattr(right, item.name), active)
                for item in fields(left)
            )
        if isinstance(left, Mapping):
            if not isinstance(right, Mapping) or left.keys() != right.keys():
                return False
            return all(_compare(left[name], right[name], active) for name in left)
        if isinstance(left, (list, tuple)):
            if not isinstance(right, (list, tuple)) or len(left) != len(right):
                return False
            return all(_compare(a, b, active) for a, b in zip(left, right))
        if isinstance(left, Set):
            return isinstance(right, Set) and left == right
        return bool(left == right)
    finally:
        active.discard(key)


def serialized_equal(left: Any, right: Any) -> bool:
    """Equality by JSON serialization with sorted keys.

    Cheap for primitives and plain records. Values that do not serialize fall
    back to ``repr``, so objects without a stable repr compare unequal.
    """

    return _serialize(left) == _serialize(right)


def _serialize(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=repr)


EQUALITY_STRATEGIES: Dict[str, EqualityFn] = {
    "structural": structural_equal,
    "serialized": serialized_equal,
}


def resolve_equality(name: str) -> EqualityFn:
    try:
        return EQUALITY_STRATEGIES[name]
    except KeyError as exc:
        raise ValueError(
            f"Unknown equality strategy '{name}' "
            f"(expected one of {sorted(EQUALITY_STRATEGIES)})"
        ) from exc


__all__ = [
    "EqualityFn",
    "EQUALITY_STRATEGIES",
    "resolve_equality",
    "serialized_equal",
    "structural_equal",
]
