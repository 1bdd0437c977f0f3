"""Hand the terminal over to the platform binary and mirror its exit status."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from n9e_dist.core.errors import ErrorCode
from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.launcher.errors import SpawnFailure
from n9e_dist.output.console import ConsoleProtocol
from n9e_dist.output.errors import launch_error_exit_code, print_launch_error
from n9e_dist.platform.process import run_attached

__all__ = ["delegate", "spawn"]


def spawn(
    binary: Path,
    args: Sequence[str],
    *,
    env: Mapping[str, str],
) -> Result[int, SpawnFailure]:
    """Run binary with args and env, attached to our standard streams.

    A status that cannot be mirrored (killed by a signal, none recorded)
    becomes 1. Never retried: the binary may already have had side effects.
    """
    result = run_attached(str(binary), args, env=env)
    if isinstance(result, Err):
        return Err(SpawnFailure(binary=binary, cause=str(result.error)))

    status = result.value
    if status is None or status < 0:
        return Ok(int(ErrorCode.FAILURE))
    return Ok(status)


def delegate(
    binary: Path,
    args: Sequence[str],
    *,
    env: Mapping[str, str],
    console: ConsoleProtocol,
) -> int:
    """Spawn binary and return the exit code this process should end with."""
    match spawn(binary, args, env=env):
        case Ok(status):
            return status
        case Err(error):
            print_launch_error(error, console)
            return launch_error_exit_code(error)
