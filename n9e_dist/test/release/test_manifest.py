"""Tests for n9e_dist.release.manifest module."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

import n9e_dist.release.manifest as manifest_module
from n9e_dist.core.result import Err, Ok
from n9e_dist.release.manifest import discover_packages, load_descriptor, stamp, stamp_all

FAMILY = ["n9e-mcp-server-linux-x64", "n9e-mcp-server-win32-x64"]

DISPATCHER = """\
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "n9e-mcp-server"
# bumped by the release tooling
version = "0.0.0"
dependencies = [
    "n9e-mcp-dist>=0.1.0",
    'n9e-mcp-server-linux-x64==0.0.0; sys_platform == "linux" and platform_machine == "x86_64"',
    'n9e-mcp-server-win32-x64==0.0.0; sys_platform == "win32" and platform_machine == "AMD64"',
]

[project.scripts]
n9e-mcp-server = "n9e_mcp_server:main"
"""

PLATFORM = """\
[project]
name = "{name}"
version = "0.0.0"  # stamped
"""


def _package(root: Path, name: str, content: str) -> Path:
    directory = root / name
    directory.mkdir(parents=True)
    (directory / "pyproject.toml").write_text(content, encoding="utf-8")
    return directory


def _project(directory: Path) -> dict[str, object]:
    data = tomllib.loads((directory / "pyproject.toml").read_text(encoding="utf-8"))
    return data["project"]


def test_stamp_sets_version_and_pins_family(tmp_path: Path) -> None:
    directory = _package(tmp_path, "n9e-mcp-server", DISPATCHER)

    result = stamp(directory, "2.0.0", family=FAMILY)

    assert isinstance(result, Ok)
    assert result.value.version == "2.0.0"
    assert result.value.family_dependencies == {
        "n9e-mcp-server-linux-x64": "==2.0.0",
        "n9e-mcp-server-win32-x64": "==2.0.0",
    }
    project = _project(directory)
    assert project["version"] == "2.0.0"
    assert project["dependencies"] == [
        "n9e-mcp-dist>=0.1.0",
        'n9e-mcp-server-linux-x64==2.0.0; sys_platform == "linux" and platform_machine == "x86_64"',
        'n9e-mcp-server-win32-x64==2.0.0; sys_platform == "win32" and platform_machine == "AMD64"',
    ]


def test_stamp_keeps_layout_and_comments(tmp_path: Path) -> None:
    directory = _package(tmp_path, "n9e-mcp-server", DISPATCHER)

    stamp(directory, "2.0.0", family=FAMILY)

    text = (directory / "pyproject.toml").read_text(encoding="utf-8")
    assert "# bumped by the release tooling\n" in text
    assert '    "n9e-mcp-dist>=0.1.0",\n' in text
    assert '[project.scripts]\nn9e-mcp-server = "n9e_mcp_server:main"\n' in text
    assert text.endswith("\n")


def test_stamp_is_idempotent(tmp_path: Path) -> None:
    directory = _package(tmp_path, "n9e-mcp-server", DISPATCHER)
    manifest = directory / "pyproject.toml"

    stamp(directory, "2.0.0", family=FAMILY)
    first = manifest.read_bytes()
    stamp(directory, "2.0.0", family=FAMILY)

    assert manifest.read_bytes() == first


def test_stamp_leaves_other_dependencies_alone(tmp_path: Path) -> None:
    directory = _package(
        tmp_path,
        "n9e-mcp-server",
        '[project]\nname = "n9e-mcp-server"\nversion = "1.0.0"\n'
        'dependencies = ["rich>=13", "n9e-mcp-server-linux-x64[extra]>=1.0"]\n',
    )

    result = stamp(directory, "1.1.0", family=FAMILY)

    assert isinstance(result, Ok)
    assert _project(directory)["dependencies"] == [
        "rich>=13",
        "n9e-mcp-server-linux-x64[extra]==1.1.0",
    ]


def test_family_names_are_compared_canonically(tmp_path: Path) -> None:
    directory = _package(
        tmp_path,
        "n9e-mcp-server",
        '[project]\nname = "n9e-mcp-server"\nversion = "1.0.0"\n'
        'dependencies = ["N9E_MCP_Server.Linux-X64>=1.0"]\n',
    )

    stamp(directory, "1.1.0", family=FAMILY)

    assert _project(directory)["dependencies"] == ["N9E_MCP_Server.Linux-X64==1.1.0"]


def test_platform_manifest_without_dependencies(tmp_path: Path) -> None:
    directory = _package(
        tmp_path, "n9e-mcp-server-linux-x64", PLATFORM.format(name="n9e-mcp-server-linux-x64")
    )

    result = stamp(directory, "0.3.1", family=FAMILY)

    assert isinstance(result, Ok)
    assert result.value.family_dependencies == {}
    text = (directory / "pyproject.toml").read_text(encoding="utf-8")
    assert 'version = "0.3.1"  # stamped\n' in text


def test_stamp_rejects_manifest_without_project(tmp_path: Path) -> None:
    directory = _package(tmp_path, "broken", '[tool.other]\nkey = 1\n')

    result = stamp(directory, "1.0.0", family=FAMILY)

    assert isinstance(result, Err)
    assert result.error.package == "broken"
    assert "[project]" in result.error.reason


def test_load_descriptor_does_not_write(tmp_path: Path) -> None:
    directory = _package(tmp_path, "n9e-mcp-server", DISPATCHER)

    result = load_descriptor(directory, family=FAMILY)

    assert isinstance(result, Ok)
    assert result.value.name == "n9e-mcp-server"
    assert result.value.version == "0.0.0"
    assert result.value.manifest_path.read_text(encoding="utf-8") == DISPATCHER


def test_stamp_all_writes_nothing_when_one_manifest_is_invalid(tmp_path: Path) -> None:
    good = _package(tmp_path, "n9e-mcp-server", DISPATCHER)
    bad = _package(tmp_path, "n9e-mcp-server-linux-x64", '[project\nname = "x"\n')

    result = stamp_all([good, bad], "2.0.0", family=FAMILY)

    assert isinstance(result, Err)
    assert result.error.package == "n9e-mcp-server-linux-x64"
    assert result.error.stamped == ()
    assert (good / "pyproject.toml").read_text(encoding="utf-8") == DISPATCHER


def test_stamp_all_stamps_every_package(tmp_path: Path) -> None:
    dirs = [
        _package(tmp_path, "n9e-mcp-server", DISPATCHER),
        _package(tmp_path, "n9e-mcp-server-linux-x64", PLATFORM.format(name="n9e-mcp-server-linux-x64")),
    ]

    result = stamp_all(dirs, "2.0.0", family=FAMILY)

    assert isinstance(result, Ok)
    assert [d.version for d in result.value] == ["2.0.0", "2.0.0"]
    assert all(_project(d)["version"] == "2.0.0" for d in dirs)


def test_stamp_all_write_error_names_projects(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    runtime = _package(tmp_path, "tool", PLATFORM.format(name="n9e-mcp-dist"))
    dispatcher = _package(tmp_path, "dispatcher", DISPATCHER)
    writes: list[Path] = []

    def failing_write(path: Path, content: str) -> None:
        if path.parent == dispatcher:
            raise OSError("disk full")
        writes.append(path)
        path.write_text(content, encoding="utf-8")

    monkeypatch.setattr(manifest_module, "atomic_write_text", failing_write)

    result = stamp_all([runtime, dispatcher], "2.0.0", family=FAMILY)

    assert isinstance(result, Err)
    assert result.error.package == "n9e-mcp-server"
    assert result.error.stamped == ("n9e-mcp-dist",)
    assert result.error.reason.startswith("cannot write manifest")
    assert writes == [runtime / "pyproject.toml"]


def test_discover_skips_hidden_and_manifestless_dirs(tmp_path: Path) -> None:
    _package(tmp_path, "n9e-mcp-server-linux-x64", PLATFORM.format(name="n9e-mcp-server-linux-x64"))
    _package(tmp_path, "n9e-mcp-server", DISPATCHER)
    _package(tmp_path, ".tmp", PLATFORM.format(name="scratch"))
    (tmp_path / "notes").mkdir()
    (tmp_path / "README.md").write_text("packages\n", encoding="utf-8")

    assert [p.name for p in discover_packages(tmp_path)] == [
        "n9e-mcp-server",
        "n9e-mcp-server-linux-x64",
    ]


def test_discover_missing_root(tmp_path: Path) -> None:
    assert discover_packages(tmp_path / "absent") == []


def test_stamp_keeps_quoting_of_each_entry(tmp_path: Path) -> None:
    directory = _package(
        tmp_path,
        "n9e-mcp-server",
        '[project]\nname = "n9e-mcp-server"\nversion = "1.0.0"\n'
        'dependencies = [\n'
        '    "n9e-mcp-dist==1.0.0",\n'
        '    \'n9e-mcp-server-linux-x64==1.0.0; sys_platform == "linux"\',\n'
        ']\n',
    )

    stamp(directory, "1.1.0", family=[*FAMILY, "n9e-mcp-dist"])

    text = (directory / "pyproject.toml").read_text(encoding="utf-8")
    assert '    "n9e-mcp-dist==1.1.0",\n' in text
    assert '    \'n9e-mcp-server-linux-x64==1.1.0; sys_platform == "linux"\',\n' in text
