"""Carries the darwin-arm64 build of n9e-mcp-server."""
