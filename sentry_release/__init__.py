"""Publish Sentry releases and source maps when a build finishes."""

from sentry_release.plugin import BuildStage, SentryCliPlugin

__version__ = "0.3.0"

__all__ = ["BuildStage", "SentryCliPlugin", "__version__"]
