"""SaaS Playbook -- deterministic scaffolding for Next.js SaaS projects."""

from saas_playbook.engine import (
    FileWriter,
    RenderedFileMap,
    ScaffoldError,
    TemplateRenderer,
    render_dir,
)

__version__ = "0.1.0"

__all__ = [
    "FileWriter",
    "RenderedFileMap",
    "ScaffoldError",
    "TemplateRenderer",
    "__version__",
    "render_dir",
]
