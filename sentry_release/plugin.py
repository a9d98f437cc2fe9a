"""Publish a Sentry release after each build.

``SentryCliPlugin`` hooks into a build host's ``after-emit`` event and, for
every build, runs::

    create release -> upload source maps -> finalize release

Problems never raise into the host. They are appended to the build's error
list and the host's ``done`` callback is always invoked exactly once.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from enum import StrEnum
from types import MappingProxyType

from sentry_release.core.options import release_spec, resolve_options
from sentry_release.core.result import Err, Result
from sentry_release.host import AFTER_EMIT, BuildContext, BuildHost, Compilation, DoneCallback
from sentry_release.output.console import ConsoleProtocol
from sentry_release.release.client import ReleaseClient, SentryCli
from sentry_release.release.errors import ReleaseError, ReleaseErrorKind

__all__ = ["BuildStage", "ERROR_PREFIX", "SentryCliPlugin"]

ERROR_PREFIX = "Sentry CLI Plugin: "

ClientFactory = Callable[..., ReleaseClient]
ClientCall = Callable[[], Awaitable[Result[None, ReleaseError]]]


class BuildStage(StrEnum):
    IDLE = "idle"
    RESOLVING_RELEASE = "resolving_release"
    VALIDATING_RELEASE = "validating_release"
    VALIDATING_INCLUDE = "validating_include"
    CREATING_RELEASE = "creating_release"
    UPLOADING_ARTIFACTS = "uploading_artifacts"
    FINALIZING_RELEASE = "finalizing_release"
    DONE = "done"


def _missing(value: object) -> bool:
    return value is None or value == ""


class SentryCliPlugin:
    """Build host extension that publishes releases to Sentry.

    Args:
        options: Raw plugin options, see ``resolve_options``. ``release`` may
            be a callable taking the build's content hash.
        client_factory: Builds the release client; called once in ``apply``
            with ``config_file`` when that option is set.
        console: Optional progress output.
    """

    def __init__(
        self,
        options: Mapping[str, object] | None = None,
        *,
        client_factory: ClientFactory = SentryCli,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self.options: Mapping[str, object] = MappingProxyType(resolve_options(options))
        self._release = release_spec(self.options.get("release"))
        self._client_factory = client_factory
        self._console = console
        self._tasks: set[asyncio.Task[None]] = set()
        self.client: ReleaseClient | None = None
        self.stage = BuildStage.IDLE
        self.last_release: object = None

    def apply(self, host: BuildHost) -> None:
        """Create the release client and register for ``after-emit``."""
        config_file = self.options.get("config_file")
        if config_file is not None:
            self.client = self._client_factory(config_file)
        else:
            self.client = self._client_factory()
        host.plugin(AFTER_EMIT, self._after_emit)

    def _after_emit(self, compilation: Compilation, done: DoneCallback) -> None:
        context = BuildContext.from_compilation(compilation, done)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.run_build(context))
            return

        task = loop.create_task(self.run_build(context))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def run_build(self, context: BuildContext) -> None:
        """Publish the release for one build, then signal ``context.done``.

        ``done`` fires even when the build's task is cancelled.
        """
        try:
            error = await self._publish(context)
            if error is not None:
                context.errors.append(f"{ERROR_PREFIX}{error.message}")
                if self._console is not None:
                    self._console.error(error.pretty())
        finally:
            self.stage = BuildStage.DONE
            context.done()

    async def _publish(self, context: BuildContext) -> ReleaseError | None:
        self.stage = BuildStage.RESOLVING_RELEASE
        try:
            release = self._release.resolve(context.hash)
        except Exception as e:  # user-supplied callable
            return ReleaseError(kind="invalid_options", message=str(e), hint="`release` callable")
        self.last_release = release

        self.stage = BuildStage.VALIDATING_RELEASE
        if _missing(release):
            return ReleaseError(kind="invalid_options", message="`release` option is required")

        self.stage = BuildStage.VALIDATING_INCLUDE
        if self.options.get("include") is None:
            return ReleaseError(kind="invalid_options", message="`include` option is required")

        client = self.client
        if client is None:
            return ReleaseError(
                kind="not_applied",
                message="plugin was not applied to a build host",
                hint="call apply(host) first",
            )

        upload_options = {**self.options, "release": release}
        upload_options.setdefault("ignore", None)

        steps: list[tuple[BuildStage, ReleaseErrorKind, str, ClientCall]] = [
            (
                BuildStage.CREATING_RELEASE,
                "create_failed",
                f"Creating release {release}",
                lambda: client.create_release(release),
            ),
            (
                BuildStage.UPLOADING_ARTIFACTS,
                "upload_failed",
                f"Uploading source maps for {release}",
                lambda: client.upload_source_maps(upload_options),
            ),
            (
                BuildStage.FINALIZING_RELEASE,
                "finalize_failed",
                f"Finalizing release {release}",
                lambda: client.finalize_release(release),
            ),
        ]
        for stage, kind, label, call in steps:
            self.stage = stage
            if self._console is not None:
                self._console.info(label)
            error = await self._call(kind, call)
            if error is not None:
                return error

        if self._console is not None:
            self._console.success(f"Release {release} published")
        return None

    async def _call(self, kind: ReleaseErrorKind, call: ClientCall) -> ReleaseError | None:
        try:
            result = await call()
        except Exception as e:  # clients outside this package may raise instead of returning Err
            return ReleaseError(kind=kind, message=str(e))
        if isinstance(result, Err):
            error = result.error
            if isinstance(error, ReleaseError):
                return error
            return ReleaseError(kind=kind, message=str(error))
        return None
