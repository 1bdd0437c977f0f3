"""Carries the linux-x64 build of n9e-mcp-server."""
