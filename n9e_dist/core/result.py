"""Result type for explicit error handling.

Operations that can fail return ``Ok(value)`` or ``Err(error)`` instead of
raising, so callers handle both outcomes where they happen:

    match resolve(key.os, key.arch):
        case Ok(path):
            ...
        case Err(error):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
