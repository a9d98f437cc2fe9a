"""Build host contract.

A build host fires ``after-emit`` once per build, after artifacts are on
disk, and waits for every registered callback to call ``done``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

__all__ = [
    "AFTER_EMIT",
    "BuildContext",
    "BuildHost",
    "Compilation",
    "DoneCallback",
    "EmitCallback",
    "StaticBuildHost",
]

AFTER_EMIT = "after-emit"

DoneCallback = Callable[[], None]


def _no_errors() -> list[str]:
    return []


@dataclass
class Compilation:
    """Result of one build as seen by extensions.

    Attributes:
        hash: Content hash identifying the build output.
        errors: Build errors; extensions append human-readable strings.
    """

    hash: str
    errors: list[str] = field(default_factory=_no_errors)


EmitCallback = Callable[[Compilation, DoneCallback], None]


class BuildHost(Protocol):
    def plugin(self, event: str, callback: EmitCallback) -> None: ...


@dataclass(frozen=True, slots=True)
class BuildContext:
    """Per-build inputs for the release sequence."""

    hash: str
    errors: list[str]
    done: DoneCallback

    @classmethod
    def from_compilation(cls, compilation: Compilation, done: DoneCallback) -> BuildContext:
        return cls(hash=compilation.hash, errors=compilation.errors, done=done)


class StaticBuildHost:
    """Host for builds that already happened.

    The CLI uses it to replay ``after-emit`` for an existing output directory.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, list[EmitCallback]] = {}
        self.completed = 0

    def plugin(self, event: str, callback: EmitCallback) -> None:
        self._callbacks.setdefault(event, []).append(callback)

    def _signal_done(self) -> None:
        self.completed += 1

    def emit(self, content_hash: str) -> Compilation:
        """Fire ``after-emit`` for one build and return its compilation."""
        compilation = Compilation(hash=content_hash)
        for callback in self._callbacks.get(AFTER_EMIT, []):
            callback(compilation, self._signal_done)
        return compilation
