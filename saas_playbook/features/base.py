"""Feature descriptors and the generation run.

A :class:`Feature` ties a handler name (``add-auth``) to a template
directory and to the function that turns raw options into the template
context.  :func:`run_feature` performs one generation: build the context,
render the feature's template tree, write the direct files and merge the
accumulator entries.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from ..config import Settings
from ..engine.errors import ScaffoldError
from ..engine.renderer import TemplateRenderer
from ..engine.tree import RenderedFileMap, render_dir, render_into
from ..engine.writer import FileWriter
from .options import Options, as_bool

ContextBuilder = Callable[[Options, Mapping[str, Any]], dict[str, Any]]
OutputResolver = Callable[[Mapping[str, Any], Path], Path]
ExtraTemplates = Callable[[Mapping[str, Any]], list[tuple[str, str]]]


class UnknownFeatureError(ScaffoldError):
    """Raised when no handler is registered under the requested name."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        super().__init__(
            f"Unknown feature: {name}\nAvailable: {', '.join(sorted(known))}"
        )


def project_root_output(context: Mapping[str, Any], project_root: Path) -> Path:
    return project_root


def no_extra_templates(context: Mapping[str, Any]) -> list[tuple[str, str]]:
    return []


@dataclass(frozen=True)
class Feature:
    """A scaffoldable feature.

    Attributes:
        name: Handler name used on the command line (``add-auth``).
        template: Directory under ``<templates>/<stack>/`` holding its templates.
        build_context: Maps raw options and the project config to the
            template context.
        config_key: Key under ``features:`` in the project config.
        output_dir: Where the template tree is rendered; defaults to the
            project root.
        extra_templates: Additional ``(template, output)`` pairs, both
            relative (to the stack directory and the project root), rendered
            alongside the tree.
        summary: One-line description for ``--list``.
    """

    name: str
    template: str
    build_context: ContextBuilder
    config_key: str
    output_dir: OutputResolver = project_root_output
    extra_templates: ExtraTemplates = no_extra_templates
    summary: str = ""


@dataclass
class FeatureRegistry:
    """Name -> :class:`Feature` lookup."""

    features: dict[str, Feature] = field(default_factory=dict)

    def register(self, feature: Feature) -> Feature:
        if feature.name in self.features:
            raise ValueError(f"Feature already registered: {feature.name}")
        self.features[feature.name] = feature
        return feature

    def get(self, name: str) -> Feature:
        try:
            return self.features[name]
        except KeyError:
            raise UnknownFeatureError(name, list(self.features)) from None

    def names(self) -> list[str]:
        return list(self.features)


def run_feature(
    feature: Feature,
    options: Options,
    config: Mapping[str, Any],
    *,
    settings: Settings,
    renderer: TemplateRenderer | None = None,
    writer: FileWriter | None = None,
) -> RenderedFileMap:
    """Generate *feature* into ``settings.project_root``.

    Returns the rendered map (including any name collisions it recorded)
    after it has been written.
    """
    renderer = renderer or TemplateRenderer()
    writer = writer or FileWriter()
    project_root = settings.project_root.absolute()

    context = feature.build_context(options, config)
    stack_dir = settings.templates_dir / settings.resolve_stack(config)
    output_root = feature.output_dir(context, project_root)

    file_map = render_dir(
        stack_dir / feature.template, context, output_root, renderer=renderer
    )
    for template, output in feature.extra_templates(context):
        render_into(
            file_map, stack_dir / template, project_root / output, context, renderer=renderer
        )

    writer.apply(file_map, force=as_bool(options.get("force"), False))
    return file_map
