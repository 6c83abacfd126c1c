"""Tests for env-file merging (stackforge.scaffolder.env_merger).

Covers:
- Placement of the managed-section marker after the anchor keys
- Exactly one marker (duplicates collapse, inserted even when only
  existing keys are contributed)
- In-place replacement of existing keys
- Idempotence
- Malformed lines reported as MergeConflict warnings
- parse_env / render_env helpers
"""

from __future__ import annotations

import pytest

from stackforge.errors import MergeConflict
from stackforge.scaffolder.env_merger import (
    DEFAULT_MARKER,
    EnvMerger,
    EnvVariable,
    parse_env,
    render_env,
)

pytestmark = pytest.mark.unit


BASE = "NODE_ENV=development\nPORT=5000\n"


class TestMerge:
    def test_new_keys_follow_marker_after_last_anchor(self):
        merged = EnvMerger().merge(BASE, [("DB_HOST", "localhost"), ("DB_PORT", "5432")])
        assert merged == (
            "NODE_ENV=development\n"
            "PORT=5000\n"
            "\n"
            f"{DEFAULT_MARKER}\n"
            "DB_HOST=localhost\n"
            "DB_PORT=5432\n"
        )

    def test_anchor_in_the_middle_keeps_following_lines(self):
        existing = "PORT=5000\nAPI_KEY=abc\n"
        merged = EnvMerger().merge(existing, [("REDIS_URL", "redis://localhost:6379/0")])
        lines = merged.splitlines()
        assert lines.index(DEFAULT_MARKER) == 2
        assert lines[3] == "REDIS_URL=redis://localhost:6379/0"
        assert lines[-1] == "API_KEY=abc"

    def test_appends_when_no_anchor_present(self):
        merged = EnvMerger().merge("# settings\nFOO=1\n", [EnvVariable("BAR", "2")])
        assert merged.endswith(f"FOO=1\n\n{DEFAULT_MARKER}\nBAR=2\n")

    def test_empty_existing_text(self):
        merged = EnvMerger().merge("", [("A", "1")])
        assert merged == f"{DEFAULT_MARKER}\nA=1\n"

    def test_existing_key_replaced_in_place(self):
        existing = "PORT=5000\nDB_HOST=old\n# keep me\n"
        merged = EnvMerger().merge(existing, [("DB_HOST", "new")])
        assert merged == f"PORT=5000\n\n{DEFAULT_MARKER}\n\nDB_HOST=new\n# keep me\n"

    def test_export_prefix_preserved(self):
        merged = EnvMerger().merge("export PORT=5000\n", [("PORT", "6000")])
        assert merged == f"export PORT=6000\n\n{DEFAULT_MARKER}\n"

    def test_second_contribution_extends_managed_section(self):
        merger = EnvMerger()
        once = merger.merge(BASE + "\nOTHER=x\n", [("A", "1")])
        twice = merger.merge(once, [("B", "2")])
        lines = twice.splitlines()
        marker = lines.index(DEFAULT_MARKER)
        assert lines[marker + 1 : marker + 3] == ["A=1", "B=2"]
        assert lines.count(DEFAULT_MARKER) == 1
        assert lines[-1] == "OTHER=x"

    def test_repeated_markers_collapse_to_one(self):
        existing = f"PORT=5000\n\n{DEFAULT_MARKER}\nA=1\n\n{DEFAULT_MARKER}\nB=2\n"
        merger = EnvMerger()
        merged = merger.merge(existing, [("C", "3")])
        assert merged.count(DEFAULT_MARKER) == 1
        assert merged == f"PORT=5000\n\n{DEFAULT_MARKER}\nA=1\nC=3\n\nB=2\n"
        assert merger.merge(merged, [("C", "3")]) == merged

    def test_marker_inserted_when_every_key_already_present(self):
        merger = EnvMerger()
        merged = merger.merge("PORT=5000\n", [("PORT", "6000")])
        assert merged == f"PORT=6000\n\n{DEFAULT_MARKER}\n"
        assert merger.merge(merged, [("PORT", "6000")]) == merged

    def test_no_contributions_leaves_text_without_marker(self):
        assert EnvMerger().merge("PORT=5000\n", []) == "PORT=5000\n"

    def test_first_occurrence_wins_within_one_call(self):
        merged = EnvMerger().merge(BASE, [("A", "first"), ("A", "second")])
        assert "A=first" in merged
        assert "A=second" not in merged

    def test_idempotent(self):
        contributions = [("DB_HOST", "localhost"), ("DB_NAME", "shop_db")]
        merger = EnvMerger()
        once = merger.merge(BASE, contributions)
        assert merger.merge(once, contributions) == once

    def test_blank_runs_collapsed_and_single_trailing_newline(self):
        merged = EnvMerger().merge("A=1\n\n\n\nB=2\n\n\n", [("A", "3")])
        assert merged == f"A=3\n\nB=2\n\n{DEFAULT_MARKER}\n"

    def test_custom_marker_gets_comment_prefix(self):
        merger = EnvMerger("Database Configuration")
        merged = merger.merge(BASE, [("DB_HOST", "localhost")])
        assert "# Database Configuration\nDB_HOST=localhost" in merged


class TestMalformedLines:
    def test_malformed_line_kept_and_reported(self):
        merger = EnvMerger()
        merged = merger.merge("PORT=5000\nthis is not an assignment\n", [("A", "1")])
        assert "this is not an assignment" in merged
        assert merger.warnings == [MergeConflict(2, "this is not an assignment")]
        assert "line 2" in str(merger.warnings[0])

    def test_warnings_reset_between_merges(self):
        merger = EnvMerger()
        merger.merge("garbage\n", [("A", "1")])
        merger.merge("PORT=1\n", [("A", "1")])
        assert merger.warnings == []


class TestHelpers:
    def test_parse_env_skips_comments_and_blanks(self):
        text = "# header\n\nA=1\nURL=postgres://u:p@h/db?x=1\nnot valid\n"
        assert parse_env(text) == [
            EnvVariable("A", "1"),
            EnvVariable("URL", "postgres://u:p@h/db?x=1"),
        ]

    def test_render_env_with_header(self):
        text = render_env([EnvVariable("A", "1")], header="Title\n\nmore")
        assert text == "# Title\n#\n# more\nA=1\n"

    def test_render_env_without_header(self):
        assert render_env([EnvVariable("A", "1"), EnvVariable("B", "")]) == "A=1\nB=\n"
