"""Process exit codes.

The release CLI reports every failure with FAILURE. The dispatcher mirrors the
delegated binary's status, so its own failures use codes a shell already
reserves for "could not run the command".
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the dispatcher and the release CLI.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: Any failure (usage, discovery, stamping, download, publish), and the
      dispatcher's fallback when the binary's own status is unavailable
    - 127: The dispatcher could not start the binary at all
    """

    OK = 0
    FAILURE = 1
    SPAWN_FAILED = 127
