"""Project and building-block features: init-project, page, api, model, component."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..engine.helpers import camel_case, kebab_case, pascal_case, pluralize
from .base import Feature
from .options import Options, as_bool, as_list, as_str

DOCKER_TEMPLATES = [
    ("docker/Dockerfile.j2", "Dockerfile"),
    ("docker/docker-compose.yml.j2", "docker-compose.yml"),
    ("docker/.dockerignore.j2", ".dockerignore"),
]


# ---------------------------------------------------------------------------
# init-project
# ---------------------------------------------------------------------------


def build_init_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    name = as_str(options.get("name"), "my-saas-app")
    return {
        "project_name": name,
        "project_name_kebab": kebab_case(name),
        "project_name_pascal": pascal_case(name),
        "description": as_str(options.get("description"), "A SaaS application built with Next.js"),
        "is_docker": as_bool(options.get("docker")),
    }


def init_extra_templates(context: Mapping[str, Any]) -> list[tuple[str, str]]:
    return list(DOCKER_TEMPLATES) if context["is_docker"] else []


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


def build_page_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    """Context for a Next.js App Router page.

    ``route`` is the URL path (``/settings/billing``); the last segment names
    the page.  ``layout`` picks the route group (dashboard, marketing, auth).
    """
    route = as_str(options.get("route"), "/new-page")
    layout = as_str(options.get("layout"), "dashboard")
    route_path = route.strip("/")
    page_name = route_path.split("/")[-1] or "page"

    return {
        "route": route,
        "route_path": route_path,
        "type": as_str(options.get("type"), "page"),
        "layout": layout,
        "page_name": page_name,
        "page_name_kebab": kebab_case(page_name),
        "page_name_pascal": pascal_case(page_name),
        "is_dashboard": layout == "dashboard",
        "is_marketing": layout == "marketing",
        "is_auth": layout == "auth",
    }


def page_output(context: Mapping[str, Any], project_root: Path) -> Path:
    return project_root / "app" / f"({context['layout']})" / context["route_path"]


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


def build_api_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    api_path = as_str(options.get("path"), "resource").strip("/")
    methods = [m.upper() for m in as_list(options.get("methods"), "GET,POST")]
    resource_name = api_path.split("/")[-1] or "resource"

    return {
        "path": api_path,
        "methods": methods,
        "crud": as_bool(options.get("crud")),
        "resource_name": resource_name,
        "resource_name_kebab": kebab_case(resource_name),
        "resource_name_camel": camel_case(resource_name),
        "resource_name_pascal": pascal_case(resource_name),
        "has_get": "GET" in methods,
        "has_post": "POST" in methods,
        "has_patch": "PATCH" in methods,
        "has_put": "PUT" in methods,
        "has_delete": "DELETE" in methods,
    }


def api_output(context: Mapping[str, Any], project_root: Path) -> Path:
    return project_root / "app" / "api" / context["path"]


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

PRISMA_TYPES = {
    "int": "Int",
    "integer": "Int",
    "float": "Float",
    "decimal": "Float",
    "boolean": "Boolean",
    "bool": "Boolean",
    "datetime": "DateTime",
    "date": "DateTime",
    "json": "Json",
    "text": "String",
    "string": "String",
}

_ENUM_TYPE = re.compile(r"^enum\((.+)\)$")


def _split_top_level(text: str, separator: str) -> list[str]:
    """Split on *separator* outside parentheses."""
    parts: list[str] = []
    depth = 0
    current = ""
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char == separator and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return [part.strip() for part in parts if part.strip()]


def parse_fields(spec: Any) -> list[dict[str, Any]]:
    """Parse compact field definitions.

    Format: ``title:string:required,status:enum(draft,published):default(draft)``.
    The option parser may already have split the value on commas, so a list
    is joined back before splitting outside parentheses.
    """
    if not spec or spec is True:
        return []
    text = ",".join(str(part) for part in spec) if isinstance(spec, (list, tuple)) else str(spec)

    fields = []
    for definition in _split_top_level(text, ","):
        name, *rest = _split_top_level(definition, ":")
        field_type = rest[0] if rest else "string"
        modifiers = rest[1:]

        default_value = None
        for modifier in modifiers:
            if modifier.startswith("default(") and modifier.endswith(")"):
                default_value = modifier[len("default("):-1]
                break

        enum_match = _ENUM_TYPE.match(field_type)
        enum_values = [v.strip() for v in enum_match.group(1).split(",")] if enum_match else None
        if enum_match:
            prisma_type = pascal_case(name) + "Type"
        else:
            prisma_type = PRISMA_TYPES.get(field_type.lower(), "String")

        fields.append(
            {
                "name": name,
                "type": field_type,
                "prisma_type": prisma_type,
                "is_required": "required" in modifiers,
                "is_optional": "optional" in modifiers,
                "is_unique": "unique" in modifiers,
                "default_value": default_value,
                "enum_values": enum_values,
            }
        )
    return fields


def build_model_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    name = as_str(options.get("name"), "item")
    fields = parse_fields(options.get("fields"))
    return {
        "name": name,
        "name_camel": camel_case(name),
        "name_pascal": pascal_case(name),
        "name_plural": pluralize(camel_case(name)),
        "name_plural_pascal": pascal_case(pluralize(name)),
        "fields": fields,
        "relations": as_list(options.get("relations")),
        "has_fields": bool(fields),
    }


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def build_component_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    name = as_str(options.get("name"), "my-component")
    props = as_list(options.get("props"))
    variants = as_list(options.get("variants"))
    return {
        "name": name,
        "name_kebab": kebab_case(name),
        "name_pascal": pascal_case(name),
        "props": props,
        "variants": variants,
        "has_props": bool(props),
        "has_variants": bool(variants),
    }


def component_output(context: Mapping[str, Any], project_root: Path) -> Path:
    return project_root / "components" / context["name_kebab"]


BUILD_FEATURES = [
    Feature("init-project", "init", build_init_context, "project",
            extra_templates=init_extra_templates,
            summary="Next.js project skeleton"),
    Feature("add-page", "page", build_page_context, "pages",
            output_dir=page_output,
            summary="App Router page"),
    Feature("add-api", "api", build_api_context, "api",
            output_dir=api_output,
            summary="API route handler"),
    Feature("add-model", "model", build_model_context, "models",
            summary="Prisma model with service and types"),
    Feature("add-component", "component", build_component_context, "components",
            output_dir=component_output,
            summary="React component"),
]
