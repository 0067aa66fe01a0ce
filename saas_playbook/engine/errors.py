"""Exception types raised by the scaffolding engine.

Every failure crosses the library boundary as a ``ScaffoldError`` subclass
carrying a human-readable message.  Only the command-line dispatcher catches
them; nothing in the engine retries.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class TemplateError(ScaffoldError):
    """Raised when a template cannot be compiled or evaluated."""

    def __init__(self, template: str, message: str) -> None:
        self.template = template
        super().__init__(f"{template}: {message}")


class TemplateDirectoryNotFound(ScaffoldError):
    """Raised when the requested template root does not exist."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Template directory not found: {self.path}")


class FilesystemError(ScaffoldError):
    """Raised when reading or writing a project file fails."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")
