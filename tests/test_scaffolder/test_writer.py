"""Tests for FileWriter (stackforge.scaffolder.writer)."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from stackforge.errors import WriteFailure
from stackforge.scaffolder.writer import FileWriter

pytestmark = pytest.mark.unit


class TestFileWriter:
    def test_creates_parent_directories(self, tmp_path: Path):
        written = FileWriter(tmp_path).write({"a/b/c.txt": "hello\n"})
        assert written == [tmp_path / "a" / "b" / "c.txt"]
        assert (tmp_path / "a" / "b" / "c.txt").read_text() == "hello\n"

    def test_unix_line_endings(self, tmp_path: Path):
        FileWriter(tmp_path).write({"x.txt": "one\ntwo\n"})
        assert (tmp_path / "x.txt").read_bytes() == b"one\ntwo\n"

    def test_utf8_content(self, tmp_path: Path):
        FileWriter(tmp_path).write({"x.md": "café\n"})
        assert (tmp_path / "x.md").read_bytes() == "café\n".encode("utf-8")

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_shell_scripts_are_executable(self, tmp_path: Path):
        FileWriter(tmp_path).write({"run.sh": "#!/bin/sh\n", "notes.txt": "x"})
        assert (tmp_path / "run.sh").stat().st_mode & stat.S_IXUSR
        assert not (tmp_path / "notes.txt").stat().st_mode & stat.S_IXUSR

    def test_on_file_callback_order(self, tmp_path: Path):
        seen: list[str] = []
        FileWriter(tmp_path).write({"b.txt": "", "a.txt": ""}, on_file=seen.append)
        assert seen == ["b.txt", "a.txt"]

    def test_os_error_wrapped(self, tmp_path: Path):
        error = PermissionError("denied")
        with patch("stackforge.scaffolder.writer._write_file", side_effect=error):
            with pytest.raises(WriteFailure) as exc_info:
                FileWriter(tmp_path).write({"x.txt": "x"})
        assert exc_info.value.original is error
        assert exc_info.value.path == tmp_path / "x.txt"

    def test_earlier_files_stay_on_disk(self, tmp_path: Path):
        (tmp_path / "blocker").write_text("file, not a directory")
        with pytest.raises(WriteFailure):
            FileWriter(tmp_path).write({"first.txt": "1", "blocker/second.txt": "2"})
        assert (tmp_path / "first.txt").read_text() == "1"
