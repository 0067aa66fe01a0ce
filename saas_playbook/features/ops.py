"""Tooling features: test setup, deployment and CI."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import Feature
from .build import DOCKER_TEMPLATES
from .options import Options, as_bool, as_list, as_str


def build_test_setup_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    organization = as_str(options.get("organization"), "co-located")
    return {
        "coverage": as_bool(options.get("coverage"), True),
        "organization": organization,
        "is_co_located": organization == "co-located",
        "is_centralized": organization == "centralized",
    }


def build_deploy_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    """Context for deployment config.  ``provider`` is one of vercel,
    docker, railway, fly or aws."""
    provider = as_str(options.get("provider"), "vercel")
    return {
        "provider": provider,
        "environments": as_list(options.get("environments"), "development,staging,production"),
        "is_vercel": provider == "vercel",
        "is_docker": provider == "docker",
        "is_railway": provider == "railway",
        "is_fly": provider == "fly",
        "is_aws": provider == "aws",
    }


def deploy_extra_templates(context: Mapping[str, Any]) -> list[tuple[str, str]]:
    extras: list[tuple[str, str]] = []
    if context["is_docker"] or context["is_aws"]:
        extras.extend(DOCKER_TEMPLATES)
    if context["is_vercel"]:
        extras.append(("deploy-targets/vercel.json.j2", "vercel.json"))
    if context["is_fly"]:
        extras.append(("deploy-targets/fly.toml.j2", "fly.toml"))
    if context["is_railway"]:
        extras.append(("deploy-targets/railway.json.j2", "railway.json"))
    return extras


def build_ci_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    stages = as_list(options.get("stages"), "lint,test,build")
    auto_deploy = as_bool(options.get("auto_deploy"))
    provider = as_str(options.get("provider"), "github-actions")
    return {
        "provider": provider,
        "stages": stages,
        "auto_deploy": auto_deploy,
        "is_github": provider == "github-actions",
        "has_lint": "lint" in stages,
        "has_test": "test" in stages,
        "has_build": "build" in stages,
        "has_deploy": "deploy" in stages or auto_deploy,
    }


OPS_FEATURES = [
    Feature("test-setup", "test-setup", build_test_setup_context, "testing",
            summary="Vitest and Playwright setup"),
    Feature("deploy-setup", "deploy", build_deploy_context, "deploy",
            extra_templates=deploy_extra_templates,
            summary="Deployment configuration"),
    Feature("add-ci", "ci", build_ci_context, "ci",
            summary="CI pipeline"),
]
