"""Tests for directory-wide rendering (render_dir / render_into).

Covers:
- The greeting scenario and literal structure preservation
- Templated directory and file names
- Non-template files and missing roots
- Name collisions (last visited wins, recorded)
- _scaffold.yml merge manifests
"""

from __future__ import annotations

from pathlib import Path

import pytest

from saas_playbook.engine.errors import TemplateDirectoryNotFound, TemplateError
from saas_playbook.engine.tree import RenderedFileMap, render_dir, render_into

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Walk
# ---------------------------------------------------------------------------


class TestRenderDir:
    def test_greeting_scenario(self, make_tree, tmp_path: Path):
        root = make_tree({"greeting.txt.j2": "Hello {{ name }}"})
        out = tmp_path / "out"

        file_map = render_dir(root, {"name": "Ada"}, out)

        assert dict(file_map) == {out.absolute() / "greeting.txt": "Hello Ada"}

    def test_literal_tree_is_preserved(self, make_tree, tmp_path: Path):
        files = {
            "README.md.j2": "# Title\n",
            "app/page.tsx.j2": "export default function Page() {}\n",
            "app/api/health/route.ts.j2": "export const GET = () => new Response('ok');\n",
        }
        root = make_tree(files)
        out = tmp_path / "out"

        file_map = render_dir(root, {}, out)

        expected = {
            out.absolute() / relative[: -len(".j2")]: text for relative, text in files.items()
        }
        assert dict(file_map) == expected

    def test_templated_names(self, make_tree, tmp_path: Path):
        root = make_tree({
            "lib/{{ name_camel }}.service.ts.j2": "service {{ name_pascal }}",
            "app/{{ section }}/page.tsx.j2": "page",
        })
        out = tmp_path / "out"

        file_map = render_dir(
            root, {"name_camel": "invoice", "name_pascal": "Invoice", "section": "billing"}, out
        )

        assert file_map[out / "lib" / "invoice.service.ts"] == "service Invoice"
        assert (out.absolute() / "app" / "billing" / "page.tsx") in file_map

    def test_ignores_non_template_files(self, make_tree, tmp_path: Path):
        root = make_tree({"notes.txt": "static", "keep.txt.j2": "x"})
        file_map = render_dir(root, {}, tmp_path / "out")
        assert [p.name for p in file_map] == ["keep.txt"]

    def test_walk_order_is_sorted(self, make_tree, tmp_path: Path):
        root = make_tree({"b.txt.j2": "", "a/z.txt.j2": "", "a.txt.j2": ""})
        file_map = render_dir(root, {}, tmp_path / "out")
        assert [p.name for p in file_map] == ["z.txt", "a.txt", "b.txt"]

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(TemplateDirectoryNotFound):
            render_dir(tmp_path / "missing", {}, tmp_path / "out")

    def test_empty_resolved_name(self, make_tree, tmp_path: Path):
        root = make_tree({"{{ missing }}.j2": "x"})
        with pytest.raises(TemplateError, match="empty"):
            render_dir(root, {}, tmp_path / "out")

    def test_template_error_propagates(self, make_tree, tmp_path: Path):
        root = make_tree({"bad.ts.j2": "{% if x %}"})
        with pytest.raises(TemplateError, match="bad.ts.j2"):
            render_dir(root, {}, tmp_path / "out")

    def test_context_is_not_mutated(self, make_tree, tmp_path: Path):
        root = make_tree({"a.txt.j2": "{{ plans | join }}"})
        context = {"plans": ["free", "pro"]}
        render_dir(root, context, tmp_path / "out")
        assert context == {"plans": ["free", "pro"]}


class TestCollisions:
    def test_last_visited_wins_and_is_recorded(self, make_tree, tmp_path: Path):
        root = make_tree({"x.txt.j2": "base", "{{ name }}.txt.j2": "override"})
        out = tmp_path / "out"

        file_map = render_dir(root, {"name": "x"}, out)

        assert file_map[out / "x.txt"] == "override"
        assert len(file_map) == 1
        assert len(file_map.collisions) == 1
        collision = file_map.collisions[0]
        assert collision.path == out.absolute() / "x.txt"
        assert collision.replaced.name == "x.txt.j2"
        assert collision.winner.name == "{{ name }}.txt.j2"


# ---------------------------------------------------------------------------
# Merge manifest
# ---------------------------------------------------------------------------


MANIFEST = """\
merge:
  models.prisma.j2:
    mode: block
    target: prisma/schema.prisma
    header: "// --- Test Models ---"
  env.test.j2:
    mode: env
    target: "{{ env_file }}"
"""


class TestManifest:
    def test_merge_entries_are_tagged(self, make_tree, tmp_path: Path):
        root = make_tree({
            "_scaffold.yml": MANIFEST,
            "models.prisma.j2": "model Thing {}",
            "env.test.j2": "THING_KEY=\n",
            "lib/thing.ts.j2": "export {}",
        })
        out = tmp_path / "out"

        file_map = render_dir(root, {"env_file": ".env.example"}, out)

        assert list(file_map.direct()) == [out.absolute() / "lib" / "thing.ts"]
        merges = {f.source.name: f for f in file_map.merges()}
        assert merges["models.prisma.j2"].merge.mode == "block"
        assert merges["models.prisma.j2"].merge.header == "// --- Test Models ---"
        assert merges["models.prisma.j2"].merge_target == out.absolute() / "prisma" / "schema.prisma"
        assert merges["env.test.j2"].merge_target == out.absolute() / ".env.example"

    def test_manifest_is_not_rendered(self, make_tree, tmp_path: Path):
        root = make_tree({"_scaffold.yml": "merge: {}\n", "a.txt.j2": "a"})
        file_map = render_dir(root, {}, tmp_path / "out")
        assert [p.name for p in file_map] == ["a.txt"]

    @pytest.mark.parametrize(
        "manifest",
        [
            "merge:\n  a.j2:\n    mode: overwrite\n    target: x\n",
            "merge:\n  a.j2:\n    mode: block\n",
            "merge: [unclosed\n",
            "unknown_key: 1\n",
        ],
    )
    def test_invalid_manifest(self, make_tree, tmp_path: Path, manifest: str):
        root = make_tree({"_scaffold.yml": manifest, "a.j2": "a"})
        with pytest.raises(TemplateError, match="invalid manifest"):
            render_dir(root, {}, tmp_path / "out")


# ---------------------------------------------------------------------------
# render_into
# ---------------------------------------------------------------------------


class TestRenderInto:
    def test_adds_direct_entry(self, make_tree, tmp_path: Path):
        root = make_tree({"Dockerfile.j2": "FROM node:{{ node }}\n"})
        file_map = RenderedFileMap()

        rendered = render_into(file_map, root / "Dockerfile.j2", tmp_path / "Dockerfile", {"node": 20})

        assert rendered.merge is None
        assert file_map.direct() == {(tmp_path / "Dockerfile").absolute(): "FROM node:20\n"}
