"""Command-line entry point for deterministic file scaffolding.

Usage::

    saas-scaffold <feature> [--key=value ...] [--force]
    python -m saas_playbook.scaffold add-auth --providers=google,github --strategy=jwt
    python -m saas_playbook.scaffold --list
"""

from __future__ import annotations

import argparse
import sys
import time
import traceback
from pathlib import Path
from typing import Any

from rich.console import Console

from .config import (
    DEFAULT_STACK,
    ConfigNotFoundError,
    Settings,
    read_config,
    record_feature,
    write_config,
)
from .engine.errors import ScaffoldError
from .engine.writer import FileWriter
from .features import FEATURES, Feature, Options, parse_options, run_feature
from .utils import (
    console,
    format_duration,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
)

INIT_FEATURE = "init-project"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saas-scaffold",
        description="SaaS Playbook scaffolder -- render feature templates into a project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog=(
            "Feature options are passed as --key=value, e.g.:\n"
            "  saas-scaffold init-project --name=my-app --docker\n"
            "  saas-scaffold add-auth --providers=google,github --strategy=jwt\n"
            "  saas-scaffold add-billing --plans=free,pro,enterprise --trial=14\n"
        ),
    )
    parser.add_argument("feature", nargs="?", help="Feature handler to run (see --list)")
    parser.add_argument(
        "--force", action="store_true", help="Overwrite files that already exist"
    )
    parser.add_argument(
        "--project-dir",
        default=None,
        help="Project root to write into (default: current directory)",
    )
    parser.add_argument(
        "--templates-dir", default=None, help="Override the shipped template directory"
    )
    parser.add_argument(
        "--stack", default=None, help=f"Template stack (default: project config or {DEFAULT_STACK})"
    )
    parser.add_argument(
        "--list", action="store_true", help="List available feature handlers and exit"
    )
    return parser


def print_features(out: Console | None = None) -> None:
    print_summary_table(
        {feature.name: feature.summary for feature in FEATURES.features.values()},
        title="Available features",
        out=out,
    )


def load_project_config(feature: Feature, settings: Settings) -> dict[str, Any]:
    """Read the project config; init-project starts from an empty one."""
    try:
        return read_config(settings.project_root)
    except ConfigNotFoundError:
        if feature.name == INIT_FEATURE:
            return {}
        raise


def update_project_config(
    feature: Feature, options: Options, config: dict[str, Any], settings: Settings
) -> Path:
    stored = {key: value for key, value in options.items() if key != "force"}
    if feature.name == INIT_FEATURE:
        config = dict(config)
        config.setdefault("stack", {"framework": settings.resolve_stack(config)})
        config["project"] = {
            "name": str(stored.get("name", "my-saas-app")),
            "description": str(stored.get("description", "")),
        }
        return write_config(config, settings.project_root)
    return write_config(
        record_feature(config, feature.config_key, stored), settings.project_root
    )


def main(argv: list[str] | None = None) -> int:
    """Run one scaffolding handler.  Returns the process exit code."""
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)

    if args.list:
        print_features()
        return 0
    if not args.feature:
        parser.print_usage(sys.stderr)
        print_features()
        return 1

    settings = Settings.from_env()
    if args.project_dir:
        settings.project_root = Path(args.project_dir)
    if args.templates_dir:
        settings.templates_dir = Path(args.templates_dir)
    if args.stack:
        settings.stack = args.stack

    writer = FileWriter(console)
    start = time.monotonic()
    try:
        feature = FEATURES.get(args.feature)
        options = parse_options(extra)
        options["force"] = args.force or bool(options.get("force"))

        config = load_project_config(feature, settings)
        print_header(f"Scaffolding: {feature.name}")
        file_map = run_feature(feature, options, config, settings=settings, writer=writer)
        update_project_config(feature, options, config, settings)
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        if settings.debug:
            console.print(traceback.format_exc(), markup=False, highlight=False)
        return 1

    for collision in file_map.collisions:
        print_warning(
            f"{collision.path}: rendered by both {collision.replaced} and {collision.winner}; "
            "the last one was kept"
        )

    counts = {"created": 0, "updated": 0, "skipped": 0}
    for change in writer.changes:
        counts[change.action] += 1
    print_summary_table(
        {
            "Feature": feature.name,
            "Created": str(counts["created"]),
            "Updated": str(counts["updated"]),
            "Skipped": str(counts["skipped"]),
            "Duration": format_duration(time.monotonic() - start),
        }
    )
    print_success(f"Done! {len(writer.touched())} file(s) created/updated.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
