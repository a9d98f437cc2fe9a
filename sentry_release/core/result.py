"""Result type for explicit error handling.

Release client calls and config loading return a Result instead of raising,
so callers decide at the boundary how a failure is reported.

Usage:
    match await client.create_release("1.2.0"):
        case Ok():
            ...
        case Err(error):
            print(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E


type Result[T, E] = Ok[T] | Err[E]
