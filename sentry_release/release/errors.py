"""Error types for release client calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "cli_missing",
    "create_failed",
    "upload_failed",
    "finalize_failed",
    "invalid_options",
    "not_applied",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """A failed release client call.

    ``message`` is what ends up in the build's error list, so it should read
    well on its own.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
