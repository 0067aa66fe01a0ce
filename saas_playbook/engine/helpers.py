"""Helper functions exposed to templates.

Provides the case conversions, pluralisation rules, comparison and
membership predicates, and structural helpers that templates call either as
functions (``{{ pascal_case(name) }}``) or as filters
(``{{ name | pascal_case }}``).  Every helper is pure and total: malformed or
absent input degrades to an empty string, ``False`` or an empty result
instead of raising.

Helpers are collected in a :class:`HelperRegistry`, an immutable mapping that
is built once (:data:`DEFAULT_HELPERS`) and handed to each renderer.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Mapping, Sequence
from numbers import Number
from types import MappingProxyType
from typing import Any, Callable


# ---------------------------------------------------------------------------
# Tokenizer & case conversions
# ---------------------------------------------------------------------------

# Capitalised or lowercase words (digits stick to the word before them),
# acronym runs that stop before a following capitalised word, and bare
# digit runs.
_WORD_PATTERN = re.compile(r"[A-Z]?[a-z]+[0-9]*|[A-Z]+[0-9]*(?![a-z])|[0-9]+")


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value)


def words(value: Any) -> list[str]:
    """Split *value* into words on case boundaries, ``-``, ``_`` and spaces.

    Examples::

        words("HTMLParser")    -> ["HTML", "Parser"]
        words("user-profile")  -> ["user", "profile"]
        words("createdAt2")    -> ["created", "At2"]
    """
    return _WORD_PATTERN.findall(_text(value))


def camel_case(value: Any) -> str:
    """``user_profile`` -> ``userProfile``."""
    parts = words(value)
    if not parts:
        return ""
    return parts[0].lower() + "".join(part.capitalize() for part in parts[1:])


def pascal_case(value: Any) -> str:
    """``user-profile`` -> ``UserProfile``."""
    return "".join(part.capitalize() for part in words(value))


def kebab_case(value: Any) -> str:
    """``UserProfile`` -> ``user-profile``."""
    return "-".join(part.lower() for part in words(value))


def snake_case(value: Any) -> str:
    """``UserProfile`` -> ``user_profile``."""
    return "_".join(part.lower() for part in words(value))


def upper_snake(value: Any) -> str:
    """``userProfile`` -> ``USER_PROFILE``."""
    return "_".join(part.upper() for part in words(value))


def lowercase(value: Any) -> str:
    return _text(value).lower()


def uppercase(value: Any) -> str:
    return _text(value).upper()


# ---------------------------------------------------------------------------
# Pluralisation
# ---------------------------------------------------------------------------
#
# Suffix rules only.  Irregular nouns come out wrong ("person" -> "persons",
# "child" -> "childs"); callers needing exact forms should pass them in.

_SIBILANT_SUFFIXES = ("s", "x", "z", "ch", "sh")


def pluralize(value: Any) -> str:
    """Return the plural form of *value* using English suffix rules."""
    text = _text(value)
    if not text:
        return ""
    if text.endswith("y") and not re.search(r"[aeiou]y$", text, re.IGNORECASE):
        return text[:-1] + "ies"
    if text.endswith(_SIBILANT_SUFFIXES):
        return text + "es"
    return text + "s"


def singularize(value: Any) -> str:
    """Return the singular form of *value* using English suffix rules."""
    text = _text(value)
    if text.endswith("ies"):
        return text[:-3] + "y"
    if text.endswith(tuple(suffix + "es" for suffix in _SIBILANT_SUFFIXES)):
        return text[:-2]
    if text.endswith("s") and not text.endswith("ss"):
        return text[:-1]
    return text


# ---------------------------------------------------------------------------
# Comparison & logic
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _ordered(a: Any, b: Any) -> tuple[Any, Any] | None:
    """Return comparable operands, or ``None`` when either side is absent."""
    if a is None or b is None:
        return None
    if _is_number(a) and _is_number(b):
        return a, b
    return str(a), str(b)


def eq(a: Any, b: Any) -> bool:
    return a == b


def neq(a: Any, b: Any) -> bool:
    return a != b


def gt(a: Any, b: Any) -> bool:
    pair = _ordered(a, b)
    return pair is not None and pair[0] > pair[1]


def gte(a: Any, b: Any) -> bool:
    pair = _ordered(a, b)
    return pair is not None and pair[0] >= pair[1]


def lt(a: Any, b: Any) -> bool:
    pair = _ordered(a, b)
    return pair is not None and pair[0] < pair[1]


def lte(a: Any, b: Any) -> bool:
    pair = _ordered(a, b)
    return pair is not None and pair[0] <= pair[1]


def and_(*values: Any) -> bool:
    return bool(values) and all(values)


def or_(*values: Any) -> bool:
    return any(values)


def not_(value: Any) -> bool:
    return not value


def includes(collection: Any, value: Any) -> bool:
    """Return whether *value* is a member of *collection*.

    A comma-delimited string is accepted in place of a sequence, so raw
    option strings such as ``"google,github"`` work as well as lists.
    """
    if collection is None:
        return False
    if isinstance(collection, str):
        return _text(value) in [item.strip() for item in collection.split(",")]
    if isinstance(collection, Mapping):
        return value in collection
    try:
        return value in collection
    except TypeError:
        return False


# ---------------------------------------------------------------------------
# Structural helpers
# ---------------------------------------------------------------------------


def _json_default(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def to_json(value: Any, indent: Any = 2) -> str:
    """Serialise *value* as JSON, indented by *indent* spaces (default 2).

    ``indent=0`` gives compact single-line output.
    """
    if not _is_number(indent):
        indent = 2
    if int(indent) <= 0:
        return json.dumps(value, default=_json_default)
    return json.dumps(value, indent=int(indent), default=_json_default)


def join(values: Any, separator: Any = ", ") -> str:
    """Join a sequence with *separator* (default ``", "``)."""
    if not isinstance(separator, str):
        separator = ", "
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Sequence):
        return ""
    return separator.join(_text(item) for item in values)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class HelperRegistry(Mapping[str, Callable[..., Any]]):
    """Immutable name -> helper mapping handed to every renderer.

    Predicate helpers are additionally exposed as Jinja tests so they can
    guard blocks: ``{% if providers is includes("google") %}``.
    """

    def __init__(
        self,
        helpers: Mapping[str, Callable[..., Any]],
        predicates: frozenset[str] = frozenset(),
    ) -> None:
        self._helpers = MappingProxyType(dict(helpers))
        unknown = predicates - set(self._helpers)
        if unknown:
            raise ValueError(f"Predicates without a helper: {sorted(unknown)}")
        self.predicates = frozenset(predicates)

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._helpers[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._helpers)

    def __len__(self) -> int:
        return len(self._helpers)

    def extend(
        self,
        helpers: Mapping[str, Callable[..., Any]],
        predicates: frozenset[str] = frozenset(),
    ) -> "HelperRegistry":
        """Return a new registry with *helpers* added or replaced."""
        return HelperRegistry(
            {**self._helpers, **helpers}, self.predicates | predicates
        )

    @classmethod
    def default(cls) -> "HelperRegistry":
        """Build the standard helper set."""
        helpers: dict[str, Callable[..., Any]] = {
            "camel_case": camel_case,
            "pascal_case": pascal_case,
            "kebab_case": kebab_case,
            "snake_case": snake_case,
            "upper_snake": upper_snake,
            "pluralize": pluralize,
            "singularize": singularize,
            "lowercase": lowercase,
            "uppercase": uppercase,
            "eq": eq,
            "neq": neq,
            "gt": gt,
            "gte": gte,
            "lt": lt,
            "lte": lte,
            "and_": and_,
            "or_": or_,
            "not_": not_,
            "includes": includes,
            "json": to_json,
            "join": join,
        }
        predicates = frozenset(
            {"eq", "neq", "gt", "gte", "lt", "lte", "includes"}
        )
        return cls(helpers, predicates)


DEFAULT_HELPERS = HelperRegistry.default()
