"""Package manifests (``pyproject.toml``): discovery and version stamping.

Stamping sets ``[project].version`` and pins every same-family dependency of
``[project].dependencies`` to ``==<version>``, keeping extras and environment
markers. ``tomlkit`` keeps the rest of the file as written, so a stamp only
touches the lines it has to and stamping twice with the same version leaves
the file byte-identical.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit
from packaging.requirements import InvalidRequirement, Requirement
from packaging.specifiers import SpecifierSet
from packaging.utils import canonicalize_name
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import String

from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.platform.files import atomic_write_text
from n9e_dist.release.errors import StampFailure

__all__ = [
    "MANIFEST_NAME",
    "PackageDescriptor",
    "discover_packages",
    "load_descriptor",
    "stamp",
    "stamp_all",
]

MANIFEST_NAME = "pyproject.toml"


def _empty_deps() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """A package directory and what its manifest declares.

    Attributes:
        directory: Package directory
        name: ``[project].name``
        version: ``[project].version``
        family_dependencies: Same-family dependency name -> version specifier
    """

    directory: Path
    name: str
    version: str
    family_dependencies: Mapping[str, str] = field(default_factory=_empty_deps)

    @property
    def manifest_path(self) -> Path:
        return self.directory / MANIFEST_NAME


@dataclass(frozen=True, slots=True)
class _Rendered:
    descriptor: PackageDescriptor
    original: str
    content: str


def discover_packages(root: Path) -> list[Path]:
    """Package directories under root, sorted by name.

    Hidden directories (such as the ``.tmp`` download area) are skipped.
    """
    if not root.is_dir():
        return []
    return sorted(
        p
        for p in root.iterdir()
        if p.is_dir() and not p.name.startswith(".") and (p / MANIFEST_NAME).is_file()
    )


def _toml_string(value: str, original: object) -> String:
    # Keep the entry's quoting; markers render with double quotes, which only a
    # literal string holds unescaped
    literal = isinstance(original, String) and original.as_string().startswith("'")
    if '"' in value:
        literal = True
    if "'" in value:
        literal = False
    return tomlkit.string(value, literal=literal)


def _render(
    directory: Path, version: str | None, family: Collection[str]
) -> Result[_Rendered, str]:
    path = directory / MANIFEST_NAME
    try:
        original = path.read_text(encoding="utf-8")
        doc = tomlkit.parse(original)
    except OSError as e:
        return Err(f"cannot read {path}: {e}")
    except (TOMLKitError, UnicodeDecodeError) as e:
        return Err(f"invalid TOML in {path}: {e}")

    project = doc.get("project")
    if not isinstance(project, dict):
        return Err(f"{path} has no [project] table")
    name = project.get("name")
    if not isinstance(name, str) or not name.strip():
        return Err(f"{path} has no project name")

    if version is not None:
        project["version"] = version
    current = project.get("version")
    if not isinstance(current, str):
        return Err(f"{path} has no project version")

    family_names = {canonicalize_name(f) for f in family}
    pinned: dict[str, str] = {}
    deps = project.get("dependencies")
    if deps is not None:
        if not isinstance(deps, list):
            return Err(f"{path}: [project].dependencies must be an array")
        for i, dep in enumerate(deps):
            if not isinstance(dep, str):
                return Err(f"{path}: dependency #{i + 1} is not a string")
            try:
                req = Requirement(str(dep))
            except InvalidRequirement as e:
                return Err(f"{path}: invalid dependency '{dep}': {e}")
            if canonicalize_name(req.name) not in family_names:
                continue
            if version is not None:
                req.specifier = SpecifierSet(f"=={version}")
                deps[i] = _toml_string(str(req), dep)
            pinned[req.name] = str(req.specifier)

    content = tomlkit.dumps(doc)
    if not content.endswith("\n"):
        content += "\n"

    descriptor = PackageDescriptor(
        directory=directory,
        name=str(name),
        version=str(current),
        family_dependencies=pinned,
    )
    return Ok(_Rendered(descriptor=descriptor, original=original, content=content))


def load_descriptor(directory: Path, *, family: Collection[str]) -> Result[PackageDescriptor, str]:
    """Read a package's manifest without changing it."""
    rendered = _render(directory, None, family)
    if isinstance(rendered, Err):
        return rendered
    return Ok(rendered.value.descriptor)


def _write(rendered: _Rendered) -> None:
    if rendered.content != rendered.original:
        atomic_write_text(rendered.descriptor.manifest_path, rendered.content)


def stamp(
    directory: Path, version: str, *, family: Collection[str]
) -> Result[PackageDescriptor, StampFailure]:
    """Set the version of one package and pin its same-family dependencies."""
    rendered = _render(directory, version, family)
    if isinstance(rendered, Err):
        return Err(StampFailure(package=directory.name, reason=rendered.error))
    try:
        _write(rendered.value)
    except OSError as e:
        return Err(
            StampFailure(package=rendered.value.descriptor.name, reason=f"cannot write manifest: {e}")
        )
    return Ok(rendered.value.descriptor)


def stamp_all(
    directories: Sequence[Path], version: str, *, family: Collection[str]
) -> Result[list[PackageDescriptor], StampFailure]:
    """Stamp every package, or none if any manifest cannot be rendered.

    All manifests are rendered before the first one is written. A write error
    after that point is reported together with the packages already stamped.
    """
    rendered: list[_Rendered] = []
    for directory in directories:
        result = _render(directory, version, family)
        if isinstance(result, Err):
            return Err(StampFailure(package=directory.name, reason=result.error))
        rendered.append(result.value)

    written: list[str] = []
    for item in rendered:
        try:
            _write(item)
        except OSError as e:
            return Err(
                StampFailure(
                    package=item.descriptor.name,
                    reason=f"cannot write manifest: {e}",
                    stamped=tuple(written),
                )
            )
        written.append(item.descriptor.name)

    return Ok([item.descriptor for item in rendered])
