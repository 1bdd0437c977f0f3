"""Carries the win32-arm64 build of n9e-mcp-server."""
