"""Deterministic template-to-project-tree generation engine.

Quick usage::

    from saas_playbook.engine import FileWriter, render_dir

    file_map = render_dir("templates/nextjs/auth", {"providers": ["google"]}, "/work/app")
    FileWriter().apply(file_map)
"""

from saas_playbook.engine.errors import (
    FilesystemError,
    ScaffoldError,
    TemplateDirectoryNotFound,
    TemplateError,
)
from saas_playbook.engine.helpers import DEFAULT_HELPERS, HelperRegistry
from saas_playbook.engine.renderer import TemplateRenderer
from saas_playbook.engine.tree import (
    MergeRule,
    RenderedFile,
    RenderedFileMap,
    render_dir,
    render_into,
)
from saas_playbook.engine.writer import FileChange, FileWriter

__all__ = [
    "DEFAULT_HELPERS",
    "FileChange",
    "FileWriter",
    "FilesystemError",
    "HelperRegistry",
    "MergeRule",
    "RenderedFile",
    "RenderedFileMap",
    "ScaffoldError",
    "TemplateDirectoryNotFound",
    "TemplateError",
    "TemplateRenderer",
    "render_dir",
    "render_into",
]
