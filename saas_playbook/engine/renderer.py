"""Jinja2 text rendering for scaffold templates.

Provides the :class:`TemplateRenderer`, which compiles template text against
a context using a Jinja2 environment tuned for emitting source code rather
than markup: escaping is off, missing values render as empty strings, and
the helper library is installed as globals, filters and tests.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable

from jinja2 import ChainableUndefined, Environment, Template, Undefined
from jinja2 import exceptions as jinja_exceptions

from .errors import FilesystemError, TemplateError
from .helpers import DEFAULT_HELPERS, HelperRegistry

TEMPLATE_CACHE_SIZE = 256


def _absent_to_none(value: Any) -> Any:
    return None if isinstance(value, Undefined) else value


def _wrap_helper(helper: Callable[..., Any]) -> Callable[..., Any]:
    """Adapt *helper* so Jinja's undefined values arrive as ``None``."""

    @functools.wraps(helper)
    def call(*args: Any, **kwargs: Any) -> Any:
        return helper(
            *(_absent_to_none(arg) for arg in args),
            **{key: _absent_to_none(arg) for key, arg in kwargs.items()},
        )

    return call


class TemplateRenderer:
    """Renders template strings and files against a context.

    One renderer owns one Jinja2 environment.  Compiled templates are cached
    by source text, which is safe because rendering is a pure function of
    ``(template, context)``; the cache keeps the most recent
    :data:`TEMPLATE_CACHE_SIZE` sources.
    """

    def __init__(self, helpers: HelperRegistry | None = None) -> None:
        self.helpers = helpers if helpers is not None else DEFAULT_HELPERS
        self.env = Environment(
            autoescape=False,
            undefined=ChainableUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        for name, helper in self.helpers.items():
            wrapped = _wrap_helper(helper)
            self.env.globals[name] = wrapped
            self.env.filters[name] = wrapped
            if name in self.helpers.predicates:
                self.env.tests[name] = wrapped
        self._compile: Callable[[str], Template] = functools.lru_cache(
            maxsize=TEMPLATE_CACHE_SIZE
        )(self.env.from_string)

    # -- Rendering -----------------------------------------------------------

    def render_string(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        name: str = "<string>",
    ) -> str:
        """Render *template* with *context*.

        Raises:
            TemplateError: On syntax errors, unbalanced blocks, unknown
                helpers or filters, or evaluation failures.  The message
                names the template via *name*.
        """
        try:
            compiled = self._compile(template)
            return compiled.render(**context)
        except jinja_exceptions.TemplateSyntaxError as exc:
            raise TemplateError(name, f"line {exc.lineno}: {exc.message}") from exc
        except jinja_exceptions.UndefinedError as exc:
            raise TemplateError(name, f"unknown helper or value: {exc.message}") from exc
        except Exception as exc:
            raise TemplateError(name, f"{type(exc).__name__}: {exc}") from exc

    def render_file(self, template_path: str | Path, context: Mapping[str, Any]) -> str:
        """Read *template_path* as UTF-8 and render it with *context*."""
        path = Path(template_path)
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(path, f"cannot read template: {exc}") from exc
        return self.render_string(source, context, name=str(path))

    def render_name(self, segment: str, context: Mapping[str, Any]) -> str:
        """Resolve expressions embedded in a file or directory name.

        Names without ``{{`` are returned unchanged.
        """
        if "{{" not in segment:
            return segment
        return self.render_string(segment, context, name=segment)
