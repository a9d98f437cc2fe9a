"""Release client contract and the sentry-cli implementation."""

from .client import ReleaseClient, SentryCli, upload_args
from .errors import ReleaseError

__all__ = ["ReleaseClient", "ReleaseError", "SentryCli", "upload_args"]
