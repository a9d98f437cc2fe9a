"""Tests for sentry_release.platform.process module."""

from __future__ import annotations

import asyncio
import sys

import pytest

from sentry_release.core.result import Err, Ok
from sentry_release.platform import process as process_mod
from sentry_release.platform.process import ProcessError, run


class TestRun:
    def test_success_returns_stdout(self) -> None:
        result = asyncio.run(run([sys.executable, "-c", "print('hello')"]))
        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_nonzero_exit_returns_error(self) -> None:
        script = "import sys; sys.stderr.write('bad'); sys.exit(3)"
        result = asyncio.run(run([sys.executable, "-c", script]))
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "bad"

    def test_env_is_layered(self) -> None:
        script = "import os; print(os.environ['SENTRY_PROPERTIES'])"
        result = asyncio.run(
            run([sys.executable, "-c", script], env={"SENTRY_PROPERTIES": "props"})
        )
        assert isinstance(result, Ok)
        assert result.value.strip() == "props"

    def test_missing_executable(self) -> None:
        result = asyncio.run(run(["definitely-not-a-real-binary-xyz"]))
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self) -> None:
        result = asyncio.run(
            run([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)
        )
        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("sentry-cli", "info"), returncode=1, stdout="", stderr="")
        assert str(error) == "sentry-cli info failed (exit 1)"

    def test_str_truncates_long_command(self) -> None:
        error = ProcessError(
            command=("sentry-cli", "releases", "files", "1.0", "upload-sourcemaps"),
            returncode=2,
            stdout="",
            stderr="",
        )
        assert str(error) == "sentry-cli releases files ... failed (exit 2)"


class HangingProcess:
    def __init__(self) -> None:
        self.returncode: int | None = None
        self.killed = False

    async def communicate(self) -> tuple[bytes, bytes]:
        await asyncio.Event().wait()
        return b"", b""

    def kill(self) -> None:
        self.killed = True

    async def wait(self) -> int:
        self.returncode = -9
        return -9


def test_cancelled_run_kills_child(monkeypatch: pytest.MonkeyPatch) -> None:
    proc = HangingProcess()

    async def fake_exec(*args: object, **kwargs: object) -> HangingProcess:
        del args, kwargs
        return proc

    monkeypatch.setattr(process_mod.asyncio, "create_subprocess_exec", fake_exec)

    async def scenario() -> None:
        task = asyncio.create_task(run(["sentry-cli", "releases", "new", "1.0"]))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert proc.killed
    assert proc.returncode == -9
