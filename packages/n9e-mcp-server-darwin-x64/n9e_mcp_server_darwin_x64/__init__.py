"""Carries the darwin-x64 build of n9e-mcp-server."""
