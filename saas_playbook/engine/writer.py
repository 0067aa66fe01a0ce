"""Persisting rendered files to the project tree.

Provides the :class:`FileWriter`, which writes a
:class:`~saas_playbook.engine.tree.RenderedFileMap` to disk with a
skip-if-exists conflict policy, plus the two merge primitives used for
shared accumulator files:

* block-append: append a whole block unless it is already present, optionally
  before a marker line (schema files);
* env-append: append ``KEY=value`` lines whose key is not yet defined
  (``.env.example``).

Re-running a generation is safe: existing files are skipped unless forced
and both merge primitives are idempotent.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.markup import escape

from ..utils import console as default_console
from .errors import FilesystemError
from .tree import RenderedFileMap

Action = Literal["created", "updated", "skipped"]

DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True)
class FileChange:
    """One file action taken during a run."""

    path: Path
    action: Action
    reason: str = ""


# ---------------------------------------------------------------------------
# Low-level I/O
# ---------------------------------------------------------------------------


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(path, f"cannot read: {exc}") from exc


def _atomic_write_text(path: Path, text: str, mode: int = DEFAULT_FILE_MODE) -> None:
    """Write *text* via a temporary sibling file and ``os.replace``.

    Readers never observe a half-written file.  Parent directories are
    created as needed and an existing file keeps its permissions.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            mode = path.stat().st_mode & 0o777
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    except OSError as exc:
        raise FilesystemError(path, f"cannot write: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as exc:
        raise FilesystemError(path, f"cannot write: {exc}") from exc
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def _env_key(line: str) -> str | None:
    """Return the variable name of a ``KEY=value`` line, else ``None``."""
    stripped = line.strip()
    if stripped.startswith("export "):
        stripped = stripped[len("export "):].lstrip()
    key, sep, _ = stripped.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key


# ---------------------------------------------------------------------------
# FileWriter
# ---------------------------------------------------------------------------


class FileWriter:
    """Writes and merges project files, recording every action.

    The writer is not transactional: a failure partway through a batch leaves
    earlier writes in place.  With ``force`` left off, re-running the batch
    skips what was already written.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console
        self.changes: list[FileChange] = []

    # -- Bookkeeping ---------------------------------------------------------

    def reset(self) -> None:
        """Forget the changes recorded so far."""
        self.changes.clear()

    def touched(self) -> list[Path]:
        """Paths created or updated since the last :meth:`reset`."""
        return [c.path for c in self.changes if c.action != "skipped"]

    def _record(self, path: Path, action: Action, reason: str = "") -> None:
        self.changes.append(FileChange(path, action, reason))
        shown = escape(_display_path(path))
        if action == "created":
            self.console.print(f"  [green]\\[+][/green] Created {shown}")
        elif action == "updated":
            self.console.print(f"  [green]\\[+][/green] Updated {shown}")
        else:
            self.console.print(f"  [yellow]\\[~][/yellow] Skipped {shown} ({escape(reason)})")

    # -- Direct writes -------------------------------------------------------

    def write_file(self, path: str | Path, content: str, *, force: bool = False) -> bool:
        """Write *content* to *path* unless it exists and *force* is off.

        Returns:
            ``True`` if the file was written, ``False`` if it was skipped.
        """
        target = Path(path)
        if target.exists() and not force:
            self._record(target, "skipped", "already exists")
            return False
        existed = target.exists()
        _atomic_write_text(target, content)
        self._record(target, "updated" if existed else "created")
        return True

    def write_files(
        self, file_map: Mapping[Path, str], *, force: bool = False
    ) -> dict[Path, bool]:
        """Apply :meth:`write_file` to every entry of *file_map*.

        The first :class:`FilesystemError` aborts the batch.
        """
        return {
            Path(path): self.write_file(path, content, force=force)
            for path, content in file_map.items()
        }

    # -- Merges --------------------------------------------------------------

    def append_to_file(
        self, path: str | Path, content: str, marker: str | None = None
    ) -> bool:
        """Append *content* to *path* unless it is already there.

        A missing file is created with *content*.  If *marker* occurs in the
        existing text, *content* is inserted just before its first
        occurrence; otherwise it goes after the existing text, separated by a
        blank line.

        Returns:
            ``True`` if the file changed.
        """
        target = Path(path)
        if not target.exists():
            _atomic_write_text(target, content)
            self._record(target, "created")
            return True

        existing = _read_text(target)
        if content.strip() in existing:
            self._record(target, "skipped", "content already present")
            return False

        if marker and marker in existing:
            updated = existing.replace(marker, content + "\n" + marker, 1)
        else:
            updated = existing.rstrip() + "\n\n" + content + "\n"

        _atomic_write_text(target, updated)
        self._record(target, "updated")
        return True

    def append_env_vars(self, path: str | Path, env_block: str) -> bool:
        """Merge ``KEY=value`` lines from *env_block* into *path*.

        Lines whose key is already defined in the file (or earlier in the
        block) are dropped, so an existing value is never duplicated or
        overwritten.  Comment lines are kept alongside the surviving
        variables.  If no variable survives the file is left untouched.

        Returns:
            ``True`` if the file changed.
        """
        target = Path(path)
        existing = _read_text(target) if target.exists() else ""
        defined = {key for key in map(_env_key, existing.splitlines()) if key}

        kept: list[str] = []
        new_keys = 0
        for line in env_block.splitlines():
            if not line.strip():
                continue
            if line.lstrip().startswith("#"):
                kept.append(line)
                continue
            key = _env_key(line)
            if key is None or key in defined:
                continue
            defined.add(key)
            kept.append(line)
            new_keys += 1

        if not new_keys:
            self._record(target, "skipped", "variables already defined")
            return False
        return self.append_to_file(target, "\n".join(kept) + ("" if existing else "\n"))

    # -- Rendered maps -------------------------------------------------------

    def apply(self, file_map: RenderedFileMap, *, force: bool = False) -> None:
        """Write the direct entries of *file_map*, then perform its merges."""
        self.write_files(file_map.direct(), force=force)
        for rendered in file_map.merges():
            rule = rendered.merge
            target = rendered.merge_target
            if rule is None or target is None:
                continue
            if rule.mode == "env":
                self.append_env_vars(target, rendered.content)
            else:
                block = rendered.content
                if rule.header:
                    block = rule.header + "\n" + block
                self.append_to_file(target, block, rule.marker)


def _display_path(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)
