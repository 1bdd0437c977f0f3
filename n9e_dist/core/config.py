"""Typed release configuration loading.

The release pipeline reads an optional ``dist.toml``:

    [release]
    github_repo = "n9e/n9e-mcp-server"
    packages_root = "packages"
    download_attempts = 10
    download_retry_delay = 30
    runtime_package = "."

``runtime_package`` is the directory of the n9e-mcp-dist project itself: the
dispatcher imports its launcher from there, so it is released with the family.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_int, get_str, get_table

__all__ = [
    "DistConfig",
    "ConfigError",
    "load_config",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_GITHUB_REPO",
    "DEFAULT_PACKAGES_ROOT",
    "DEFAULT_DOWNLOAD_ATTEMPTS",
    "DEFAULT_DOWNLOAD_RETRY_DELAY",
    "DEFAULT_RUNTIME_PACKAGE",
]

DEFAULT_CONFIG_NAME = "dist.toml"
DEFAULT_GITHUB_REPO = "n9e/n9e-mcp-server"
DEFAULT_PACKAGES_ROOT = "packages"
DEFAULT_DOWNLOAD_ATTEMPTS = 10
DEFAULT_DOWNLOAD_RETRY_DELAY = 30.0
DEFAULT_RUNTIME_PACKAGE = "."


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class DistConfig:
    """Release pipeline configuration.

    Attributes:
        github_repo: ``owner/name`` slug hosting the release archives
        packages_root: Directory holding one subdirectory per package
        download_attempts: Attempts per archive before giving up
        download_retry_delay: Fixed seconds between attempts
        runtime_package: Directory of the project providing the dispatcher's
            launcher, released with the family (None: not released)
    """

    github_repo: str = DEFAULT_GITHUB_REPO
    packages_root: Path = Path(DEFAULT_PACKAGES_ROOT)
    download_attempts: int = DEFAULT_DOWNLOAD_ATTEMPTS
    download_retry_delay: float = DEFAULT_DOWNLOAD_RETRY_DELAY
    runtime_package: Path | None = None

    @property
    def temp_dir(self) -> Path:
        """Scratch directory for downloaded archives."""
        return self.packages_root / ".tmp"

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path) -> DistConfig:
        """Create DistConfig from parsed TOML; relative paths resolve against base_dir."""
        release: StrDict = get_table(data, "release") or {}

        attempts = get_int(release, "download_attempts")
        if attempts is not None and attempts < 1:
            raise ValueError("download_attempts must be at least 1")
        delay = get_float(release, "download_retry_delay")
        if delay is not None and delay < 0:
            raise ValueError("download_retry_delay must not be negative")

        root = Path(get_str(release, "packages_root") or DEFAULT_PACKAGES_ROOT)
        runtime = Path(get_str(release, "runtime_package") or DEFAULT_RUNTIME_PACKAGE)
        return cls(
            github_repo=get_str(release, "github_repo") or DEFAULT_GITHUB_REPO,
            packages_root=root if root.is_absolute() else base_dir / root,
            download_attempts=attempts if attempts is not None else DEFAULT_DOWNLOAD_ATTEMPTS,
            download_retry_delay=delay if delay is not None else DEFAULT_DOWNLOAD_RETRY_DELAY,
            runtime_package=runtime if runtime.is_absolute() else base_dir / runtime,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[DistConfig, ConfigError]:
    """Load release configuration.

    A missing file is not an error: defaults apply, with the packages root
    resolved next to where the file would have been.

    Args:
        path: Path to dist.toml

    Returns:
        Ok(DistConfig) on success, Err(ConfigError) on failure
    """
    base_dir = path.parent.resolve()
    if not path.exists():
        return Ok(
            DistConfig(
                packages_root=base_dir / DEFAULT_PACKAGES_ROOT,
                runtime_package=base_dir / DEFAULT_RUNTIME_PACKAGE,
            )
        )

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(DistConfig.from_dict(result.value, base_dir=base_dir))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
