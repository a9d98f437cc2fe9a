"""Core domain types and logic."""

from .errors import ErrorCode
from .options import (
    DerivedRelease,
    LiteralRelease,
    OptionsError,
    ReleaseSpec,
    load_options,
    release_spec,
    resolve_options,
)
from .result import Err, Ok, Result

__all__ = [
    # errors
    "ErrorCode",
    # options
    "DerivedRelease",
    "LiteralRelease",
    "OptionsError",
    "ReleaseSpec",
    "load_options",
    "release_spec",
    "resolve_options",
    # result
    "Err",
    "Ok",
    "Result",
]
