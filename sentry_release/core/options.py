"""Plugin options: defaults, normalization and deferred release values.

Options are a plain mapping so unknown keys flow through to the release
client untouched. ``resolve_options`` turns caller input into the canonical
form:

    resolve_options({"release": "1.0", "include": "dist"})
    # {"rewrite": True, "release": "1.0", "include": ["dist"]}
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_table

__all__ = [
    "DEFAULT_OPTIONS",
    "SEQUENCE_KEYS",
    "DerivedRelease",
    "LiteralRelease",
    "OptionsError",
    "ReleaseSpec",
    "load_options",
    "release_spec",
    "resolve_options",
]

DEFAULT_OPTIONS: Mapping[str, object] = {"rewrite": True}

# Keys that always hold a sequence of path patterns once resolved
SEQUENCE_KEYS = ("include", "ignore")


def _as_sequence(value: object) -> object:
    if isinstance(value, (list, tuple)):
        return value
    if isinstance(value, (str, bytes, os.PathLike, Mapping)):
        return [value]
    if isinstance(value, (set, frozenset)):
        # unordered input gets a stable order
        return sorted(cast(Iterable[object], value), key=str)
    if isinstance(value, Iterable):
        return list(cast(Iterable[object], value))
    return [value]


def resolve_options(raw: Mapping[str, object] | None = None) -> dict[str, object]:
    """Merge caller options over the defaults and normalize path patterns.

    The merge is shallow: a caller key replaces the default key wholesale.
    A scalar ``include`` or ``ignore`` (str or path) is wrapped in a
    one-element list. Lists and tuples are kept as given, sets become a sorted
    list and other iterables a list. Resolving canonical options again returns
    an equal mapping.
    """
    options: dict[str, object] = {**DEFAULT_OPTIONS, **(raw or {})}
    for key in SEQUENCE_KEYS:
        if key in options and options[key] is not None:
            options[key] = _as_sequence(options[key])
    return options


@dataclass(frozen=True, slots=True)
class LiteralRelease:
    """A release identifier known up front."""

    value: object

    def resolve(self, content_hash: str) -> object:
        return self.value


@dataclass(frozen=True, slots=True)
class DerivedRelease:
    """A release identifier computed from the build's content hash."""

    derive: Callable[[str], object]

    def resolve(self, content_hash: str) -> object:
        return self.derive(content_hash)


type ReleaseSpec = LiteralRelease | DerivedRelease


def release_spec(value: object) -> ReleaseSpec:
    """Classify a raw ``release`` option."""
    if callable(value):
        return DerivedRelease(value)
    return LiteralRelease(value)


@dataclass(frozen=True, slots=True)
class OptionsError:
    """Error when an options file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


def load_options(path: Path) -> Result[StrDict, OptionsError]:
    """Load raw plugin options from the ``[sentry]`` table of a TOML file.

    The returned mapping is not resolved yet; pass it to ``resolve_options``
    (or straight to the plugin) after applying any overrides.
    """
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(OptionsError(f"Options file not found: {path}", path=path))
    except PermissionError:
        return Err(OptionsError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(OptionsError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(OptionsError(f"Error reading options: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(OptionsError("Options root must be a TOML table", path=path))

    table = get_table(data, "sentry")
    if table is None:
        return Err(OptionsError("Missing [sentry] table", path=path))
    return Ok(dict(table))
