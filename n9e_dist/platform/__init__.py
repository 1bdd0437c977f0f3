"""Platform abstraction layer."""

from .detection import (
    PlatformKey,
    detect,
    detect_arch,
    detect_os,
)
from .files import atomic_write_text
from .process import (
    ProcessError,
    run_attached,
    run_silent,
)

__all__ = [
    # detection
    "PlatformKey",
    "detect",
    "detect_arch",
    "detect_os",
    # files
    "atomic_write_text",
    # process
    "ProcessError",
    "run_attached",
    "run_silent",
]
