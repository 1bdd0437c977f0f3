"""Tests for n9e_dist.platform.files module."""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from n9e_dist.platform.files import atomic_write_text


def test_creates_file_and_parents(tmp_path: Path) -> None:
    path = tmp_path / "a" / "b" / "pyproject.toml"

    atomic_write_text(path, "x = 1\n")

    assert path.read_text(encoding="utf-8") == "x = 1\n"


def test_replaces_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "pyproject.toml"
    path.write_text("old\n", encoding="utf-8")

    atomic_write_text(path, "new\n")

    assert path.read_text(encoding="utf-8") == "new\n"
    assert [p.name for p in tmp_path.iterdir()] == ["pyproject.toml"]


def test_keeps_newlines_verbatim(tmp_path: Path) -> None:
    path = tmp_path / "f.txt"

    atomic_write_text(path, "a\nb\n")

    assert path.read_bytes() == b"a\nb\n"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_preserves_mode(tmp_path: Path) -> None:
    path = tmp_path / "f.txt"
    path.write_text("old\n", encoding="utf-8")
    os.chmod(path, 0o640)

    atomic_write_text(path, "new\n")

    assert stat.S_IMODE(path.stat().st_mode) == 0o640
