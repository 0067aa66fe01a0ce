"""SaaS Playbook configuration.

Two kinds of configuration live here:

* :class:`Settings` -- runtime knobs for one scaffolding run (where the
  templates are, which stack to use, which project to write into), built
  from CLI flags and ``PLAYBOOK_*`` environment variables.
* The project store -- ``.saas-playbook.yml`` at the project root, a single
  YAML document read and written wholesale.  It remembers the chosen stack
  and which features have been scaffolded.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .engine.context import lookup
from .engine.errors import FilesystemError, ScaffoldError

CONFIG_FILENAME = ".saas-playbook.yml"
DEFAULT_STACK = "nextjs"
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class ConfigNotFoundError(ScaffoldError):
    """Raised when a project has no ``.saas-playbook.yml`` yet."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Config not found: {path}\nRun init-project first to create the project config."
        )


# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """Runtime settings for a scaffolding run.

    ``stack`` left as ``None`` means "use the project's configured stack,
    falling back to :data:`DEFAULT_STACK`".
    """

    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    stack: str | None = Field(default=None)
    project_root: Path = Field(default_factory=Path.cwd)
    debug: bool = Field(default=False, description="Print tracebacks on failure")

    def resolve_stack(self, config: Mapping[str, Any]) -> str:
        """Pick the template stack: explicit setting, then project config."""
        if self.stack:
            return self.stack
        configured = lookup(config, "stack.framework", None)
        return str(configured) if configured else DEFAULT_STACK

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            PLAYBOOK_TEMPLATES_DIR, PLAYBOOK_STACK, PLAYBOOK_PROJECT_DIR, DEBUG.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PLAYBOOK_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["PLAYBOOK_TEMPLATES_DIR"])
        if os.environ.get("PLAYBOOK_STACK"):
            kwargs["stack"] = os.environ["PLAYBOOK_STACK"]
        if os.environ.get("PLAYBOOK_PROJECT_DIR"):
            kwargs["project_root"] = Path(os.environ["PLAYBOOK_PROJECT_DIR"])
        kwargs["debug"] = os.environ.get("DEBUG", "").lower() not in ("", "0", "false", "no")
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Project store (.saas-playbook.yml)
# ---------------------------------------------------------------------------


def get_config_path(project_root: str | Path | None = None) -> Path:
    return Path(project_root or Path.cwd()) / CONFIG_FILENAME


def read_config(project_root: str | Path | None = None) -> dict[str, Any]:
    """Read and parse ``.saas-playbook.yml`` from *project_root*.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        FilesystemError: If it cannot be read or is not valid YAML.
    """
    path = get_config_path(project_root)
    if not path.exists():
        raise ConfigNotFoundError(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise FilesystemError(path, f"cannot read config: {exc}") from exc
    except yaml.YAMLError as exc:
        raise FilesystemError(path, f"invalid YAML: {exc}") from exc
    return data if isinstance(data, dict) else {}


def write_config(data: Mapping[str, Any], project_root: str | Path | None = None) -> Path:
    """Serialise *data* to ``.saas-playbook.yml``, replacing its contents."""
    path = get_config_path(project_root)
    raw = yaml.safe_dump(
        dict(data), sort_keys=False, default_flow_style=False, width=120, allow_unicode=True
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(raw, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(path, f"cannot write config: {exc}") from exc
    return path


def get_stack(config: Mapping[str, Any]) -> dict[str, Any]:
    stack = config.get("stack")
    return dict(stack) if isinstance(stack, Mapping) else {}


def get_features(config: Mapping[str, Any]) -> dict[str, Any]:
    features = config.get("features")
    return dict(features) if isinstance(features, Mapping) else {}


def is_feature_enabled(config: Mapping[str, Any], name: str) -> bool:
    """Return whether feature *name* (e.g. ``"auth"``) is marked enabled."""
    return bool(lookup(get_features(config), f"{name}.enabled", False))


def record_feature(
    config: Mapping[str, Any], name: str, options: Mapping[str, Any]
) -> dict[str, Any]:
    """Return a copy of *config* with feature *name* enabled and its options stored."""
    updated = dict(config)
    features = get_features(config)
    features[name] = {"enabled": True, **_plain(options)}
    updated["features"] = features
    return updated


def _plain(options: Mapping[str, Any]) -> dict[str, Any]:
    """Convert option values to YAML-safe builtins."""
    plain: dict[str, Any] = {}
    for key, value in options.items():
        if isinstance(value, (list, tuple)):
            plain[key] = [str(v) for v in value]
        elif isinstance(value, (str, int, float, bool)) or value is None:
            plain[key] = value
        else:
            plain[key] = str(value)
    return plain
