"""Release client backed by the ``sentry-cli`` executable.

``ReleaseClient`` is the contract the plugin drives; ``SentryCli`` is the
implementation used outside of tests. Every call returns a Result so the
plugin can turn failures into build errors.
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from sentry_release.core.result import Err, Ok, Result
from sentry_release.core.structured import path_items
from sentry_release.core.timeouts import (
    SENTRY_CLI_TIMEOUT_SECONDS,
    SENTRY_CLI_UPLOAD_TIMEOUT_SECONDS,
)
from sentry_release.platform.process import ProcessError
from sentry_release.platform.process import run as run_process
from sentry_release.release.errors import ReleaseError, ReleaseErrorKind

__all__ = ["ReleaseClient", "SentryCli", "upload_args"]


class ReleaseClient(Protocol):
    async def create_release(self, release: object) -> Result[None, ReleaseError]: ...

    async def upload_source_maps(
        self, options: Mapping[str, object]
    ) -> Result[None, ReleaseError]: ...

    async def finalize_release(self, release: object) -> Result[None, ReleaseError]: ...


# Upload options that take one flag per item
_REPEATED_FLAGS = {
    "ignore": "--ignore",
    "strip_prefix": "--strip-prefix",
    "ext": "--ext",
}

# Upload options that take a single value
_VALUE_FLAGS = {
    "ignore_file": "--ignore-file",
    "url_prefix": "--url-prefix",
}

# Upload options that are switched on by a truthy value
_SWITCH_FLAGS = {
    "rewrite": "--rewrite",
    "strip_common_prefix": "--strip-common-prefix",
    "validate": "--validate",
}


def upload_args(release: object, options: Mapping[str, object]) -> Result[list[str], ReleaseError]:
    """Build the ``releases files ... upload-sourcemaps`` arguments.

    Keys sentry-cli has no flag for are skipped. A pattern that is neither a
    str nor a path is an error rather than being left out.
    """
    args = ["releases", "files", str(release), "upload-sourcemaps"]

    for key, flag in [("include", None), *_REPEATED_FLAGS.items()]:
        items = path_items(options.get(key))
        if isinstance(items, Err):
            return Err(ReleaseError(kind="upload_failed", message=f"`{key}`: {items.error}"))
        for item in items.value:
            args.extend([flag, item] if flag else [item])

    for key, flag in _VALUE_FLAGS.items():
        value = options.get(key)
        if value is not None:
            args.extend([flag, str(value)])

    for key, flag in _SWITCH_FLAGS.items():
        if options.get(key):
            args.append(flag)

    if options.get("source_map_reference") is False:
        args.append("--no-sourcemap-reference")

    return Ok(args)


def _failure(kind: ReleaseErrorKind, error: ProcessError) -> ReleaseError:
    detail = error.stderr.strip()
    return ReleaseError(kind=kind, message=detail or str(error), hint=" ".join(error.command))


class SentryCli:
    """Drive ``sentry-cli`` as a subprocess.

    Args:
        config_file: Optional ``.sentryclirc``/properties file; exported as
            ``SENTRY_PROPERTIES`` so sentry-cli reads it instead of its
            default discovery.
        executable: Name or path of the sentry-cli binary.
    """

    def __init__(
        self,
        config_file: str | Path | None = None,
        *,
        executable: str = "sentry-cli",
    ) -> None:
        self.config_file = config_file
        self.executable = executable

    @property
    def env(self) -> dict[str, str] | None:
        if self.config_file is None:
            return None
        return {"SENTRY_PROPERTIES": str(self.config_file)}

    def ensure_available(self) -> Result[None, ReleaseError]:
        if shutil.which(self.executable) is None:
            return Err(
                ReleaseError(
                    kind="cli_missing",
                    message=f"{self.executable}: missing",
                    hint="Install sentry-cli: https://docs.sentry.io/cli/installation/",
                )
            )
        return Ok(None)

    async def _execute(
        self, args: list[str], *, kind: ReleaseErrorKind, timeout: float
    ) -> Result[None, ReleaseError]:
        result = await run_process([self.executable, *args], env=self.env, timeout=timeout)
        if isinstance(result, Err):
            return Err(_failure(kind, result.error))
        return Ok(None)

    async def create_release(self, release: object) -> Result[None, ReleaseError]:
        return await self._execute(
            ["releases", "new", str(release)],
            kind="create_failed",
            timeout=SENTRY_CLI_TIMEOUT_SECONDS,
        )

    async def upload_source_maps(self, options: Mapping[str, object]) -> Result[None, ReleaseError]:
        args = upload_args(options.get("release"), options)
        if isinstance(args, Err):
            return args
        return await self._execute(
            args.value,
            kind="upload_failed",
            timeout=SENTRY_CLI_UPLOAD_TIMEOUT_SECONDS,
        )

    async def finalize_release(self, release: object) -> Result[None, ReleaseError]:
        return await self._execute(
            ["releases", "finalize", str(release)],
            kind="finalize_failed",
            timeout=SENTRY_CLI_TIMEOUT_SECONDS,
        )
