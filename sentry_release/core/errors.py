"""Exit codes for the sentry-release CLI.

Values are used as process exit codes and should remain stable:
- 0: Success
- 1: User error (bad flags, unreadable options file)
- 2: Environment error (sentry-cli missing)
- 3: Build error (the build's error list is not empty)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
