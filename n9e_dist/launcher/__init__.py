"""End-user side: pick the platform binary for this host and run it."""
