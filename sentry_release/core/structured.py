"""Helpers for safely working with untyped structures.

Use these where options arrive from TOML or the command line.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from typing import Mapping, TypeGuard, cast

from .result import Err, Ok, Result

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    return as_str_dict(table.get(key))


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripped.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def path_items(value: object) -> Result[list[str], str]:
    """Flatten a pattern or an iterable of patterns into a list of str.

    Accepts str and os.PathLike items. Any other item is an error, naming the
    offending value. None yields an empty list.
    """
    if value is None:
        return Ok([])
    items: list[object]
    if isinstance(value, (str, bytes, os.PathLike)):
        items = [value]
    elif isinstance(value, Iterable):
        items = list(cast(Iterable[object], value))
    else:
        items = [value]

    out: list[str] = []
    for item in items:
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, os.PathLike):
            out.append(str(os.fspath(cast(os.PathLike[str], item))))
        else:
            return Err(f"unsupported path pattern: {item!r}")
    return Ok(out)
