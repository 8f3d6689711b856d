"""
Tests for Host Integration
==========================

Comprehensive tests for:
- SubprocessRunner: output capture, non-zero exits, missing binaries,
  environment layering, detached spawns
- CommandResult helpers
- LocalFileStore
- HostPlatform detection
"""

import sys

import pytest

from avd_launcher.errors import ExternalToolError
from avd_launcher.host.file_store import LocalFileStore
from avd_launcher.host.platform import HostPlatform, detect_host_platform
from avd_launcher.host.process_runner import CommandResult, SubprocessRunner


PY = sys.executable


class TestCommandResult:
    def test_ok(self):
        assert CommandResult(args=["x"], returncode=0).ok is True
        assert CommandResult(args=["x"], returncode=3).ok is False

    def test_output_combines_streams(self):
        result = CommandResult(args=["x"], returncode=1, stdout="out", stderr="err")

        assert result.output == "out\nerr"

    def test_output_skips_empty(self):
        assert CommandResult(args=["x"], returncode=1, stderr="err").output == "err"


class TestSubprocessRunner:
    @pytest.mark.asyncio
    async def test_captures_stdout(self):
        result = await SubprocessRunner().run([PY, "-c", "print('1')"])

        assert result.ok
        assert result.stdout.strip() == "1"

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(self):
        with pytest.raises(ExternalToolError) as exc_info:
            await SubprocessRunner().run(
                [PY, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]
            )

        assert exc_info.value.returncode == 3
        assert "boom" in exc_info.value.output

    @pytest.mark.asyncio
    async def test_nonzero_exit_without_check(self):
        result = await SubprocessRunner().run([PY, "-c", "import sys; sys.exit(2)"], check=False)

        assert result.returncode == 2

    @pytest.mark.asyncio
    async def test_missing_binary_raises(self, tmp_path):
        with pytest.raises(ExternalToolError, match="Command not found"):
            await SubprocessRunner().run([str(tmp_path / "no-such-tool")])

    @pytest.mark.asyncio
    async def test_env_layered_over_current(self, monkeypatch):
        monkeypatch.setenv("AVD_LAUNCHER_TEST_VAR", "kept")
        script = "import os; print(os.environ['LC_NUMERIC'], os.environ['AVD_LAUNCHER_TEST_VAR'])"

        result = await SubprocessRunner().run([PY, "-c", script], env={"LC_NUMERIC": "C"})

        assert result.stdout.split() == ["C", "kept"]

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        with pytest.raises(ExternalToolError, match="timed out"):
            await SubprocessRunner().run([PY, "-c", "import time; time.sleep(5)"], timeout=0.2)

    def test_spawn_detached_returns_handle(self):
        handle = SubprocessRunner().spawn_detached([PY, "-c", "pass"], env={"LC_NUMERIC": "C"})

        assert handle.started
        assert handle.pid > 0
        assert handle.env == {"LC_NUMERIC": "C"}

    def test_spawn_detached_keeps_process(self):
        handle = SubprocessRunner().spawn_detached([PY, "-c", "pass"])

        assert handle.process is not None
        assert handle.process.pid == handle.pid
        handle.process.wait(timeout=10)
        assert handle.poll() == 0

    def test_finished_children_are_reaped(self):
        runner = SubprocessRunner()
        first = runner.spawn_detached([PY, "-c", "pass"])
        first.process.wait(timeout=10)

        second = runner.spawn_detached([PY, "-c", "import time; time.sleep(5)"])
        try:
            assert runner.running_children == [second]
        finally:
            second.process.kill()
            second.process.wait(timeout=10)

        assert runner.running_children == []

    def test_spawn_failure_is_not_raised(self, tmp_path):
        handle = SubprocessRunner().spawn_detached([str(tmp_path / "no-such-emulator"), "@t1"])

        assert handle.pid is None
        assert handle.started is False
        assert handle.poll() is None


class TestLocalFileStore:
    def test_round_trip(self, tmp_path):
        store = LocalFileStore()
        path = tmp_path / "config.ini"

        assert store.exists(path) is False
        store.write_text(path, "a=1\n")
        assert store.exists(path) is True
        assert store.read_text(path) == "a=1\n"

    def test_read_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalFileStore().read_text(tmp_path / "missing")


class TestHostPlatform:
    @pytest.mark.parametrize(
        "system, expected",
        [
            ("Darwin", HostPlatform.MAC),
            ("Linux", HostPlatform.LINUX),
            ("Windows", HostPlatform.WINDOWS),
            ("FreeBSD", HostPlatform.OTHER),
        ],
    )
    def test_detect(self, system, expected):
        assert detect_host_platform(system) is expected

    def test_detect_current_host(self):
        assert isinstance(detect_host_platform(), HostPlatform)

    def test_only_mac_needs_haxm_check(self):
        assert HostPlatform.MAC.needs_haxm_check is True
        assert HostPlatform.LINUX.needs_haxm_check is False
        assert HostPlatform.WINDOWS.needs_haxm_check is False
