from __future__ import annotations

# sentry-cli release bookkeeping (new, finalize)
SENTRY_CLI_TIMEOUT_SECONDS = 60.0

# Source map uploads can be large
SENTRY_CLI_UPLOAD_TIMEOUT_SECONDS = 10 * 60.0
