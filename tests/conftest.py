"""
Shared Test Fixtures
====================

Pytest fixtures used across all test modules.
Provides a recording ProcessRunner and an in-memory FileStore so the
launch sequence runs without spawning real processes.
"""

import os

# Required launch options come from the environment in some tests; start clean
for _name in (
    "ANDROID_SDK_DIR",
    "AVD_PACKAGE",
    "AVD_NAME",
    "AVD_DEVICE",
    "AVD_LOCATION",
    "AVD_DEMO_MODE",
    "AVD_CONFIGURATION",
    "AVD_BOOT_TIMEOUT",
    "AVD_BOOT_POLL_INTERVAL",
    "AVD_KILL_SETTLE_DELAY",
):
    os.environ.pop(_name, None)

import pytest
from pathlib import Path
from typing import Mapping, Optional, Sequence
from unittest.mock import AsyncMock

from avd_launcher.config import LaunchConfig
from avd_launcher.emulator.launcher import EmulatorLauncher
from avd_launcher.errors import ExternalToolError
from avd_launcher.host.file_store import FileStore
from avd_launcher.host.platform import HostPlatform
from avd_launcher.host.process_runner import CommandResult, DetachedProcess, ProcessRunner


SDK_DIR = "/opt/android-sdk"
ADB = f"{SDK_DIR}/platform-tools/adb"
AVDMANAGER = f"{SDK_DIR}/tools/bin/avdmanager"
EMULATOR = f"{SDK_DIR}/emulator/emulator"
HOME = Path("/home/ci")

SAMPLE_CONFIG_INI = (
    "AvdId=t1\n"
    "PlayStore.enabled=false\n"
    "abi.type=x86_64\n"
    "hw.gpu.enabled=no\n"
    "hw.lcd.density=480\n"
    "image.sysdir.1=system-images/android-24/google_apis/x86_64/\n"
)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeRunner(ProcessRunner):
    """
    ProcessRunner that records every call and answers from a script.

    ``responses`` maps a command's argv tuple to a list of CommandResults
    consumed in order; the last one repeats. ``boot_values`` scripts the
    dev.bootcomplete answers the same way.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str], dict[str, str]]] = []
        self.responses: dict[tuple[str, ...], list[CommandResult]] = {}
        self.boot_values: list[str] = ["1"]
        self.kextstat_output = "com.intel.kext.intelhaxm (7.6.5)"

    def respond(self, args: Sequence[str], *results: CommandResult) -> None:
        self.responses[tuple(args)] = list(results)

    @property
    def commands(self) -> list[list[str]]:
        return [args for _, args, _ in self.calls]

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.calls]

    async def run(
        self,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        check: bool = True,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        args = list(args)
        self.calls.append(("run", args, dict(env or {})))

        if tuple(args) in self.responses:
            queue = self.responses[tuple(args)]
            result = queue.pop(0) if len(queue) > 1 else queue[0]
        elif args == ["kextstat"]:
            result = CommandResult(args=args, returncode=0, stdout=self.kextstat_output)
        elif args[-2:] == ["getprop", "dev.bootcomplete"]:
            value = self.boot_values.pop(0) if len(self.boot_values) > 1 else self.boot_values[0]
            result = CommandResult(args=args, returncode=0, stdout=value)
        else:
            result = CommandResult(args=args, returncode=0)

        if check and not result.ok:
            raise ExternalToolError(
                "command failed", args=args, returncode=result.returncode, output=result.output
            )
        return result

    def spawn_detached(
        self,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> DetachedProcess:
        args = list(args)
        self.calls.append(("spawn", args, dict(env or {})))
        return DetachedProcess(args=args, pid=4242, env=dict(env or {}))


class MemoryFileStore(FileStore):
    """FileStore backed by a dict, counting writes."""

    def __init__(self) -> None:
        self.files: dict[Path, str] = {}
        self.writes = 0

    def exists(self, path: Path) -> bool:
        return Path(path) in self.files

    def read_text(self, path: Path) -> str:
        try:
            return self.files[Path(path)]
        except KeyError:
            raise FileNotFoundError(str(path)) from None

    def write_text(self, path: Path, content: str) -> None:
        self.writes += 1
        self.files[Path(path)] = content


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def file_store() -> MemoryFileStore:
    store = MemoryFileStore()
    store.files[HOME / ".android" / "avd" / "t1.avd" / "config.ini"] = SAMPLE_CONFIG_INI
    return store


@pytest.fixture
def fake_sleep() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def make_launcher(runner, file_store, fake_sleep):
    """Factory for launchers on a given platform."""

    def _make(platform: HostPlatform = HostPlatform.LINUX, **kwargs) -> EmulatorLauncher:
        kwargs.setdefault("sleep", fake_sleep)
        return EmulatorLauncher(
            runner=runner,
            file_store=file_store,
            platform=platform,
            home_dir=HOME,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_config():
    """Factory for LaunchConfig with the scenario defaults."""

    def _make(**overrides) -> LaunchConfig:
        values = {
            "sdk_dir": SDK_DIR,
            "name": "t1",
            "package": "sys-img;android-24;google_apis;x86_64",
            "device": "Nexus 5",
            "demo_mode": False,
        }
        values.update(overrides)
        return LaunchConfig(**values)

    return _make
