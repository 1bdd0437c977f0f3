"""Carries the win32-x64 build of n9e-mcp-server."""
