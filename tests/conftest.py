"""Shared pytest fixtures for the SaaS Playbook test suite.

Provides reusable fixtures for:
- Quiet Rich consoles that capture writer output
- FileWriter and TemplateRenderer instances
- Building throwaway template trees on disk
- Temporary project directories with a minimal project config
"""

from __future__ import annotations

import io
import textwrap
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from saas_playbook.config import write_config
from saas_playbook.engine.renderer import TemplateRenderer
from saas_playbook.engine.writer import FileWriter


# ---------------------------------------------------------------------------
# Output capture
# ---------------------------------------------------------------------------


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def quiet_console(console_buffer: io.StringIO) -> Console:
    """Console that writes into ``console_buffer`` instead of the terminal."""
    return Console(file=console_buffer, width=200, color_system=None)


@pytest.fixture
def writer(quiet_console: Console) -> FileWriter:
    return FileWriter(quiet_console)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Factory writing ``{relative_path: text}`` into a fresh template root."""
    counter = {"n": 0}

    def _make(files: dict[str, str]) -> Path:
        counter["n"] += 1
        root = tmp_path / f"templates-{counter['n']}"
        root.mkdir()
        for relative, text in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(text), encoding="utf-8")
        return root

    return _make


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty project directory (auto-cleanup)."""
    path = tmp_path / "my-app"
    path.mkdir()
    return path


@pytest.fixture
def configured_project(project_dir: Path) -> Path:
    """Project directory with a minimal ``.saas-playbook.yml``."""
    write_config(
        {"project": {"name": "my-app"}, "stack": {"framework": "nextjs"}, "features": {}},
        project_dir,
    )
    return project_dir
