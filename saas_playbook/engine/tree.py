"""Directory-wide template rendering.

Walks a template directory, renders every ``*.j2`` file (and any templated
path segments) against one shared context, and returns an in-memory
:class:`RenderedFileMap` from output path to rendered content.  Nothing is
written to disk here; persisting the map is the job of
:class:`~saas_playbook.engine.writer.FileWriter`.

A template root may carry a ``_scaffold.yml`` manifest that declares which
templates feed shared accumulator files instead of being written directly::

    merge:
      auth-models.prisma.j2:
        mode: block
        target: prisma/schema.prisma
        header: "// --- Auth Models ---"
      env.auth.j2:
        mode: env
        target: .env.example

The rule is attached to the rendered entry, so callers never have to search
output paths for marker substrings.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .context import freeze
from .errors import TemplateDirectoryNotFound, TemplateError
from .renderer import TemplateRenderer

TEMPLATE_SUFFIX = ".j2"
MANIFEST_NAME = "_scaffold.yml"


# ---------------------------------------------------------------------------
# Merge manifest
# ---------------------------------------------------------------------------


class MergeRule(BaseModel):
    """How a rendered template is merged into an accumulator file."""

    model_config = {"frozen": True, "extra": "forbid"}

    mode: Literal["block", "env"] = Field(
        ..., description="block: idempotent block append; env: key=value line merge"
    )
    target: str = Field(..., min_length=1, description="Target path, relative to the output root")
    header: str | None = Field(default=None, description="Line written above the block")
    marker: str | None = Field(
        default=None, description="Insert before this marker instead of at end-of-file"
    )


class TemplateManifest(BaseModel):
    """Contents of a template root's ``_scaffold.yml``."""

    model_config = {"extra": "forbid"}

    merge: dict[str, MergeRule] = Field(default_factory=dict)


def load_manifest(template_root: Path) -> TemplateManifest:
    """Load ``_scaffold.yml`` from *template_root*, or an empty manifest."""
    path = template_root / MANIFEST_NAME
    if not path.is_file():
        return TemplateManifest()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return TemplateManifest.model_validate(data)
    except (yaml.YAMLError, ValidationError) as exc:
        raise TemplateError(str(path), f"invalid manifest: {exc}") from exc


# ---------------------------------------------------------------------------
# Rendered file map
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RenderedFile:
    """One rendered template and where it goes."""

    path: Path
    content: str
    source: Path | None = None
    merge: MergeRule | None = None
    merge_target: Path | None = None


@dataclass(frozen=True)
class Collision:
    """Two template nodes resolved to the same output path."""

    path: Path
    replaced: Path | None
    winner: Path | None


class RenderedFileMap(Mapping[Path, str]):
    """Ordered mapping of output path -> rendered content.

    When two nodes resolve to the same path the last one visited wins and a
    :class:`Collision` is recorded; callers overlaying optional fragments
    rely on that ordering.
    """

    def __init__(self) -> None:
        self._files: dict[Path, RenderedFile] = {}
        self.collisions: list[Collision] = []

    def __getitem__(self, path: str | Path) -> str:
        return self._files[Path(path)].content

    def __iter__(self) -> Iterator[Path]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def add(self, rendered: RenderedFile) -> None:
        previous = self._files.pop(rendered.path, None)
        if previous is not None:
            self.collisions.append(
                Collision(rendered.path, previous.source, rendered.source)
            )
        self._files[rendered.path] = rendered

    def pop(self, path: str | Path) -> RenderedFile:
        return self._files.pop(Path(path))

    def files(self) -> list[RenderedFile]:
        return list(self._files.values())

    def direct(self) -> dict[Path, str]:
        """Entries written as standalone files."""
        return {f.path: f.content for f in self._files.values() if f.merge is None}

    def merges(self) -> list[RenderedFile]:
        """Entries merged into accumulator files."""
        return [f for f in self._files.values() if f.merge is not None]


# ---------------------------------------------------------------------------
# Directory walk
# ---------------------------------------------------------------------------

_default_renderer: TemplateRenderer | None = None


def _shared_renderer() -> TemplateRenderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = TemplateRenderer()
    return _default_renderer


def render_dir(
    template_root: str | Path,
    context: Mapping[str, Any],
    output_root: str | Path,
    *,
    renderer: TemplateRenderer | None = None,
) -> RenderedFileMap:
    """Render every ``*.j2`` file under *template_root*.

    The relative directory structure is preserved under *output_root*.  A
    template at ``lib/{{ name_camel }}.service.ts.j2`` rendered with
    ``{"name_camel": "invoice"}`` maps to ``<output_root>/lib/invoice.service.ts``.
    Files without the ``.j2`` suffix are ignored.

    Raises:
        TemplateDirectoryNotFound: If *template_root* is not a directory.
        TemplateError: If any template or templated name fails to render.
    """
    root = Path(template_root)
    if not root.is_dir():
        raise TemplateDirectoryNotFound(root)

    renderer = renderer or _shared_renderer()
    frozen = freeze(context)
    out_base = Path(output_root).absolute()
    manifest = load_manifest(root)
    file_map = RenderedFileMap()

    def walk(directory: Path, relative: Path) -> None:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                walk(entry, relative / renderer.render_name(entry.name, frozen))
                continue
            if not entry.name.endswith(TEMPLATE_SUFFIX):
                continue

            resolved = renderer.render_name(entry.name[: -len(TEMPLATE_SUFFIX)], frozen)
            if not resolved.strip():
                raise TemplateError(str(entry), "file name resolved to an empty string")

            rule = manifest.merge.get(entry.relative_to(root).as_posix())
            target = None
            if rule is not None:
                target = out_base / renderer.render_name(rule.target, frozen)

            file_map.add(
                RenderedFile(
                    path=out_base / relative / resolved,
                    content=renderer.render_file(entry, frozen),
                    source=entry,
                    merge=rule,
                    merge_target=target,
                )
            )

    walk(root, Path())
    return file_map


def render_into(
    file_map: RenderedFileMap,
    template_path: str | Path,
    output_path: str | Path,
    context: Mapping[str, Any],
    *,
    renderer: TemplateRenderer | None = None,
) -> RenderedFile:
    """Render a single template and add it to *file_map* as a direct write."""
    renderer = renderer or _shared_renderer()
    source = Path(template_path)
    rendered = RenderedFile(
        path=Path(output_path).absolute(),
        content=renderer.render_file(source, freeze(context)),
        source=source,
    )
    file_map.add(rendered)
    return rendered
