"""Publish command - create a release, upload source maps, finalize."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer

from sentry_release.cli.commands._helpers import exit_on_error
from sentry_release.cli.context import build_context
from sentry_release.core.errors import ErrorCode
from sentry_release.core.options import load_options
from sentry_release.core.result import Ok
from sentry_release.core.structured import StrDict, get_str
from sentry_release.host import StaticBuildHost
from sentry_release.output.console import Style
from sentry_release.plugin import SentryCliPlugin
from sentry_release.release.client import SentryCli


def _derive_from(template: str) -> Callable[[str], str]:
    def derive(content_hash: str) -> str:
        return template.replace("{hash}", content_hash)

    return derive


def build_raw_options(
    base: StrDict,
    *,
    release: str | None,
    release_template: str | None,
    include: list[str] | None,
    ignore: list[str] | None,
    config_file: Path | None,
    no_rewrite: bool,
    url_prefix: str | None,
) -> StrDict:
    """Layer command-line flags over options loaded from a file."""
    raw: StrDict = dict(base)
    template = release_template or get_str(raw, "release_template")
    raw.pop("release_template", None)

    if release is not None:
        raw["release"] = release
    elif template is not None:
        raw["release"] = _derive_from(template)
    if include:
        raw["include"] = list(include)
    if ignore:
        raw["ignore"] = list(ignore)
    if config_file is not None:
        raw["config_file"] = str(config_file)
    if no_rewrite:
        raw["rewrite"] = False
    if url_prefix is not None:
        raw["url_prefix"] = url_prefix
    return raw


def publish(
    release: str | None = typer.Option(None, "--release", help="Release identifier"),
    release_template: str | None = typer.Option(
        None,
        "--release-template",
        help="Release derived from the build hash, e.g. 'web@{hash}'",
        show_default=False,
    ),
    include: list[str] | None = typer.Option(
        None, "--include", help="Path to upload source maps from (repeatable)"
    ),
    ignore: list[str] | None = typer.Option(
        None, "--ignore", help="Pattern to skip (repeatable)"
    ),
    config_file: Path | None = typer.Option(
        None, "--config-file", help="sentry-cli properties file", show_default=False
    ),
    options_file: Path | None = typer.Option(
        None, "--options", help="TOML file with a [sentry] table", show_default=False
    ),
    no_rewrite: bool = typer.Option(False, "--no-rewrite", help="Upload source maps as-is"),
    url_prefix: str | None = typer.Option(
        None, "--url-prefix", help="URL prefix for uploaded files", show_default=False
    ),
    content_hash: str = typer.Option("", "--hash", help="Content hash of the build output"),
) -> None:
    """Publish a release for an already built output directory."""
    ctx = build_context()

    base: StrDict = {}
    if options_file is not None:
        loaded = load_options(options_file)
        exit_on_error(loaded, ctx, ErrorCode.USER_ERROR)
        if isinstance(loaded, Ok):
            base = loaded.value

    raw = build_raw_options(
        base,
        release=release,
        release_template=release_template,
        include=include,
        ignore=ignore,
        config_file=config_file,
        no_rewrite=no_rewrite,
        url_prefix=url_prefix,
    )

    exit_on_error(SentryCli().ensure_available(), ctx, ErrorCode.ENV_ERROR)

    plugin = SentryCliPlugin(raw, client_factory=SentryCli, console=ctx.console)
    host = StaticBuildHost()
    plugin.apply(host)
    compilation = host.emit(content_hash)

    if compilation.errors:
        for error in compilation.errors:
            ctx.console.print(error, Style.ERROR)
        raise typer.Exit(code=int(ErrorCode.BUILD_ERROR))
