"""Command-line option parsing for feature handlers.

Feature flags arrive as free-form ``--key=value`` pairs::

    saas-scaffold add-auth --providers=google,github --strategy=jwt

:func:`parse_options` turns them into a plain dict, and the ``as_*``
coercers let each handler read a value with a default regardless of whether
it arrived as a list, a comma-delimited string, a bool or a number.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from ..engine.errors import ScaffoldError
from ..engine.helpers import snake_case

Options = dict[str, Any]

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


class OptionsError(ScaffoldError):
    """Raised for malformed command-line options."""


def _coerce(raw: str) -> Any:
    if "," in raw:
        return [part.strip() for part in raw.split(",") if part.strip()]
    if raw == "true":
        return True
    if raw == "false":
        return False
    if re.fullmatch(r"\d+", raw):
        return int(raw)
    return raw


def parse_options(args: Iterable[str]) -> Options:
    """Parse ``--key=value`` flags into an options dict.

    * keys are normalised to snake_case (``--emailProvider`` and
      ``--email-provider`` both become ``email_provider``);
    * values containing commas become lists of stripped items;
    * ``true``/``false`` become booleans and digit strings become ints;
    * a bare ``--flag`` is ``True``.

    Raises:
        OptionsError: For tokens that are not ``--`` flags or have no key.
    """
    options: Options = {}
    for arg in args:
        if not arg.startswith("--"):
            raise OptionsError(f"Unexpected argument {arg!r}; options must look like --key=value")
        key, sep, raw = arg[2:].partition("=")
        name = snake_case(key)
        if not name:
            raise OptionsError(f"Option {arg!r} has no name")
        options[name] = _coerce(raw) if sep else True
    return options


def as_list(value: Any, default: str | Iterable[str] = "") -> list[str]:
    """Read *value* as a list of non-empty strings.

    Missing or empty values fall back to *default* (a comma-delimited string
    or an iterable).
    """
    if value is None or value == "" or value is True:
        value = default
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(part).strip() for part in value if str(part).strip()]
    if isinstance(value, bool):
        return []
    if isinstance(value, Iterable):
        return [str(part).strip() for part in value if str(part).strip()]
    return [str(value)]


def as_bool(value: Any, default: bool = False) -> bool:
    """Read *value* as a boolean; unrecognised strings give *default*."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return default


def as_int(value: Any, default: int) -> int:
    """Read *value* as an int; anything unparseable gives *default*."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def as_str(value: Any, default: str) -> str:
    """Read *value* as a string; missing, empty or flag-only values give *default*."""
    if value is None or value is True or value is False or value == "":
        return default
    if isinstance(value, (list, tuple)):
        return ",".join(str(part) for part in value)
    return str(value)
