"""Template context values.

A context is a plain, JSON-like tree: strings, numbers, booleans, ``None``,
sequences and string-keyed mappings.  Lookups never fail; a missing path
yields the :data:`ABSENT` sentinel, which templates render as an empty
string.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Union

ContextValue = Union[
    str,
    int,
    float,
    bool,
    None,
    Sequence["ContextValue"],
    Mapping[str, "ContextValue"],
]


class _Absent:
    """Marker for a path that does not resolve to a value."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


def lookup(context: Any, dotted_path: str, default: Any = ABSENT) -> Any:
    """Resolve ``dotted_path`` (e.g. ``"stack.framework"``) inside *context*.

    Mapping segments are looked up by key, sequence segments by integer
    index.  Any miss returns *default*.
    """
    value: Any = context
    for segment in dotted_path.split("."):
        if isinstance(value, Mapping):
            if segment not in value:
                return default
            value = value[segment]
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            try:
                value = value[int(segment)]
            except (ValueError, IndexError):
                return default
        else:
            return default
    return value


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of *value*.

    Mappings become ``MappingProxyType`` views over fresh dicts, lists
    become tuples and sets become frozensets.  Scalars are returned
    unchanged.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, set):
        return frozenset(value)
    return value
