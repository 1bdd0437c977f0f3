"""Carries the linux-arm64 build of n9e-mcp-server."""
