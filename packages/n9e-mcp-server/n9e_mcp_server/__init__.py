"""Runs the pre-built n9e-mcp-server binary for this platform."""

from n9e_dist.launcher.main import main

__all__ = ["main"]
