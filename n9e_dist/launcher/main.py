"""``n9e-mcp-server`` console script.

Pure pass-through: no option of its own is parsed, every argument and the
whole environment reach the platform binary unchanged.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence

from n9e_dist.core.result import Err
from n9e_dist.launcher.delegate import delegate
from n9e_dist.launcher.resolver import FindSpec, resolve
from n9e_dist.output.console import ConsoleProtocol, RichConsole
from n9e_dist.output.errors import launch_error_exit_code, print_launch_error
from n9e_dist.platform.detection import PlatformKey, detect


def main(
    argv: Sequence[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    host: PlatformKey | None = None,
    console: ConsoleProtocol | None = None,
    find_spec: FindSpec | None = None,
) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    env = os.environ if env is None else env
    host = detect() if host is None else host
    # stdout belongs to the binary
    console = RichConsole(stderr=True) if console is None else console

    resolved = (
        resolve(host.os, host.arch)
        if find_spec is None
        else resolve(host.os, host.arch, find_spec=find_spec)
    )
    if isinstance(resolved, Err):
        print_launch_error(resolved.error, console)
        return launch_error_exit_code(resolved.error)

    return delegate(resolved.value, args, env=env, console=console)


if __name__ == "__main__":
    raise SystemExit(main())
