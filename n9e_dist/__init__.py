"""Distribution shim and release tooling for n9e-mcp-server."""

from importlib.metadata import PackageNotFoundError, version

try:
    # Stamped by the release pipeline like every family member
    __version__ = version("n9e-mcp-dist")
except PackageNotFoundError:
    __version__ = "0.0.0"
