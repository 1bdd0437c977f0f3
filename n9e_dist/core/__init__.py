"""Core types shared by the launcher and the release pipeline."""
