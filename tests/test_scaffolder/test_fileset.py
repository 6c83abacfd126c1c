"""Tests for GeneratedFileSet (stackforge.scaffolder.fileset)."""

from __future__ import annotations

import pytest

from stackforge.scaffolder.env_merger import DEFAULT_MARKER
from stackforge.scaffolder.fileset import GeneratedFileSet, union_lines

pytestmark = pytest.mark.unit


class TestPaths:
    def test_insertion_order_preserved(self):
        files = GeneratedFileSet()
        for path in ("b.txt", "a.txt", "src/c.ts"):
            files.add(path, "x\n")
        assert list(files) == ["b.txt", "a.txt", "src/c.ts"]

    def test_backslashes_normalised(self):
        files = GeneratedFileSet()
        files.add("server\\src\\server.ts", "x")
        assert "server/src/server.ts" in files

    @pytest.mark.parametrize("bad", ["/etc/passwd", "../outside.txt", "src/../../x", ""])
    def test_paths_must_stay_inside_project(self, bad):
        with pytest.raises(ValueError):
            GeneratedFileSet().add(bad, "x")

    def test_contains_rejects_non_strings_and_bad_paths(self):
        files = GeneratedFileSet({"a.txt": "x"})
        assert 42 not in files
        assert "../a.txt" not in files

    def test_paths_under(self):
        files = GeneratedFileSet({"src/a.ts": "", "src/b/c.ts": "", "server/x.py": ""})
        assert files.paths_under("src") == ["src/a.ts", "src/b/c.ts"]


class TestMerging:
    def test_ordinary_paths_last_writer_wins(self):
        files = GeneratedFileSet()
        files.add("README.md", "first\n")
        files.add("README.md", "second\n")
        assert files["README.md"] == "second\n"

    def test_env_contributions_merge(self):
        files = GeneratedFileSet()
        files.add(".env", "NODE_ENV=development\nPORT=5000\n")
        files.add(".env", "DB_HOST=localhost\n")
        assert files[".env"] == (
            f"NODE_ENV=development\nPORT=5000\n\n{DEFAULT_MARKER}\nDB_HOST=localhost\n"
        )

    def test_custom_marker(self):
        files = GeneratedFileSet(marker="# Added by tests")
        files.add(".env.example", "PORT=1\n")
        files.add(".env.example", "A=1\n")
        assert "# Added by tests\nA=1" in files[".env.example"]

    def test_gitignore_line_union(self):
        files = GeneratedFileSet()
        files.add(".gitignore", "node_modules/\n.env\n")
        files.add(".gitignore", "# Python\n__pycache__/\n.env\n")
        assert files[".gitignore"] == "node_modules/\n.env\n\n# Python\n__pycache__/\n"

    def test_gitignore_union_is_idempotent(self):
        once = union_lines("a\n", "# more\nb\n")
        assert union_lines(once, "# more\nb\n") == once

    def test_update_folds_entries_and_warnings(self):
        target = GeneratedFileSet({".env": "PORT=1\n"})
        other = GeneratedFileSet({".env": "A=1\n", "x.txt": "x"})
        other.warnings.append("from other")
        target.update(other)
        assert "A=1" in target[".env"]
        assert "x.txt" in target
        assert target.warnings == ["from other"]

    def test_malformed_env_line_becomes_warning(self):
        files = GeneratedFileSet()
        files.add(".env", "PORT=1\noops\n")
        files.add(".env", "A=1\n")
        assert len(files.warnings) == 1
        assert files.warnings[0].startswith(".env: line 2")
