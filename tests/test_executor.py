"""Tests for the gcloud subprocess executor."""

import asyncio
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

from gcloud_mcp.exceptions import GcloudNotFoundError, GcloudTimeoutError
from gcloud_mcp.gcloud import executor as executor_module
from gcloud_mcp.gcloud.executor import GcloudExecutor, find_executable, is_available


def fake_process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0):
    process = MagicMock()
    process.pid = 4242
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.wait = AsyncMock(return_value=returncode)
    return process


@pytest.fixture
def spawn(monkeypatch):
    """Replace process creation; tests set ``spawn.return_value``."""
    mock = AsyncMock(return_value=fake_process())
    monkeypatch.setattr(executor_module.asyncio, "create_subprocess_exec", mock)
    return mock


class TestGcloudExecutor:
    @pytest.mark.asyncio
    async def test_captures_output(self, spawn):
        spawn.return_value = fake_process(stdout=b"output", stderr=b"warning")
        executor = GcloudExecutor("/usr/bin/gcloud")

        result = await executor.execute(["config", "list"])

        assert result.code == 0
        assert result.stdout == "output"
        assert result.stderr == "warning"
        assert spawn.await_args.args == ("/usr/bin/gcloud", "config", "list")
        assert spawn.await_args.kwargs["stdin"] == asyncio.subprocess.DEVNULL

    @pytest.mark.asyncio
    async def test_non_zero_exit_is_returned(self, spawn):
        spawn.return_value = fake_process(stderr=b"ERROR: not found", returncode=1)

        result = await GcloudExecutor("gcloud").execute(["compute", "instances", "describe"])

        assert result.code == 1
        assert result.succeeded is False
        assert result.stderr == "ERROR: not found"

    @pytest.mark.asyncio
    async def test_carriage_returns_are_stripped(self, spawn):
        spawn.return_value = fake_process(stdout=b"line1\r\nline2\r\n")

        result = await GcloudExecutor("gcloud").execute(["version"])

        assert result.stdout == "line1\nline2\n"

    @pytest.mark.asyncio
    async def test_undecodable_bytes_are_replaced(self, spawn):
        spawn.return_value = fake_process(stdout=b"ok \xff")

        result = await GcloudExecutor("gcloud").execute(["version"])

        assert result.stdout.startswith("ok ")

    @pytest.mark.asyncio
    async def test_spawn_failure_propagates(self, spawn):
        spawn.side_effect = FileNotFoundError("no such file")

        with pytest.raises(FileNotFoundError):
            await GcloudExecutor("/missing/gcloud").execute(["version"])

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, spawn):
        process = fake_process()
        process.returncode = None

        async def hang():
            await asyncio.sleep(10)

        process.communicate = AsyncMock(side_effect=hang)
        spawn.return_value = process

        with pytest.raises(GcloudTimeoutError, match="timed out"):
            await GcloudExecutor("gcloud", timeout=0.01).execute(["compute", "ssh"])

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancellation_kills_process(self, spawn):
        process = fake_process()
        process.returncode = None
        started = asyncio.Event()

        async def hang():
            started.set()
            await asyncio.sleep(10)

        process.communicate = AsyncMock(side_effect=hang)
        spawn.return_value = process

        task = asyncio.create_task(GcloudExecutor("gcloud").execute(["compute", "ssh"]))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_finished_process_is_not_killed(self, spawn):
        process = fake_process(stdout=b"done")
        spawn.return_value = process

        await GcloudExecutor("gcloud").execute(["version"])

        process.kill.assert_not_called()


class TestCancellationWithRealProcess:
    @pytest.mark.asyncio
    async def test_cancelled_child_does_not_outlive_the_call(self, monkeypatch):
        spawned = []
        real_spawn = asyncio.create_subprocess_exec

        async def recording_spawn(*args, **kwargs):
            process = await real_spawn(*args, **kwargs)
            spawned.append(process)
            return process

        monkeypatch.setattr(executor_module.asyncio, "create_subprocess_exec", recording_spawn)
        executor = GcloudExecutor(sys.executable)

        task = asyncio.create_task(executor.execute(["-c", "import time; time.sleep(30)"]))
        for _ in range(500):
            if spawned:
                break
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.2)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert spawned[0].returncode is not None


class TestFindExecutable:
    def test_not_found(self, monkeypatch):
        monkeypatch.setattr(executor_module.shutil, "which", lambda name: None)

        assert is_available() is False
        with pytest.raises(GcloudNotFoundError, match="gcloud executable not found"):
            find_executable()

    def test_found(self, monkeypatch):
        monkeypatch.setattr(executor_module.shutil, "which", lambda name: "/opt/bin/gcloud")

        assert is_available() is True
        executor = find_executable(timeout=5)
        assert executor.gcloud_path == "/opt/bin/gcloud"
        assert executor.timeout == 5


@pytest.mark.integration
@pytest.mark.skipif(not is_available(), reason="gcloud is not installed")
class TestRealGcloud:
    @pytest.mark.asyncio
    async def test_version(self):
        result = await find_executable().execute(["version"])
        assert result.code == 0
        assert "Google Cloud SDK" in result.stdout
