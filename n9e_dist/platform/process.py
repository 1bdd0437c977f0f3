"""Subprocess execution with Result-based error handling.

All child processes are started from this module:

- ``run_silent`` streams output to the terminal (downloads, builds, uploads)
- ``run_attached`` hands the terminal to the child and reports its raw status
  (the dispatcher)
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from n9e_dist.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run_attached", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never started).
        stdout: Standard output (may be empty).
        stderr: Standard error, or the OS error when the spawn failed.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.returncode == -1:
            return f"{cmd_str} could not start: {self.stderr}"
        return f"{cmd_str} failed (exit {self.returncode})"


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command, letting its output stream to the terminal.

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)


def run_attached(
    executable: str,
    args: Sequence[str],
    *,
    env: Mapping[str, str],
) -> Result[int | None, OSError]:
    """Run an executable attached to this process's stdin/stdout/stderr.

    No shell is involved and ``args`` are passed exactly as given. An
    interrupt delivered while waiting also reaches the child (same process
    group), so this keeps waiting for the child's own exit instead of
    abandoning it.

    Returns:
        Ok(returncode) once the child exits (negative when killed by a
        signal, None if no status was recorded), Err(OSError) if it could not
        be started.
    """
    try:
        proc = subprocess.Popen([executable, *args], env=dict(env))
    except OSError as e:
        return Err(e)

    while True:
        try:
            proc.wait()
            break
        except KeyboardInterrupt:
            continue

    return Ok(proc.returncode)
