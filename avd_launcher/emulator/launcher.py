"""
Emulator Launcher
=================

Creates a fresh AVD and boots it into a known, repeatable state for
screenshot and UI-test runs.

Steps, strictly in order:
    1. Stop any running emulator (background ``adb emu kill``) and settle
    2. Create the AVD with avdmanager (force-overwrite)
    3. Merge config.ini overrides, if any
    4. On macOS, verify the HAXM kernel extension is loaded
    5. Start the emulator in the background
    6. Wait for the device to attach
    7. Poll ``dev.bootcomplete`` until it reads ``1``
    8. Set the GPS location, if requested
    9. Enable demo mode and pin the status-bar clock, if requested

Usage:
    from avd_launcher import EmulatorLauncher, load_launch_config

    launcher = EmulatorLauncher.for_local_host()
    config = load_launch_config(sdk_dir="/opt/android-sdk",
                                package="system-images;android-24;google_apis;x86_64")
    result = await launcher.launch(config)
"""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional

from avd_launcher.config import LaunchConfig
from avd_launcher.emulator.avd_config import apply_avd_overrides, avd_config_path
from avd_launcher.emulator.sdk import NUMERIC_LOCALE_ENV, SdkToolPaths, kextstat_command
from avd_launcher.errors import BootTimeoutError, LaunchError, MissingHostCapabilityError
from avd_launcher.host.file_store import FileStore, LocalFileStore
from avd_launcher.host.platform import HostPlatform, detect_host_platform
from avd_launcher.host.process_runner import DetachedProcess, ProcessRunner, SubprocessRunner
from avd_launcher.utils.logger import LogContext, get_logger

logger = get_logger(__name__)

HAXM_MARKER = "intel"
HAXM_MISSING_MESSAGE = "Please install the HAXM-Extension"


@dataclass
class LaunchResult:
    """
    Outcome of a successful launch.

    Attributes:
        avd_name: Name of the booted AVD.
        config_path: Location of the AVD's config.ini.
        config_overridden: Whether config.ini was rewritten.
        emulator_process: Handle of the background emulator process.
        boot_polls: Number of dev.bootcomplete checks made.
        boot_seconds: Time spent between attach and boot completion.
        location_set: Whether a geo fix was sent.
        demo_mode_set: Whether demo mode was enabled.
    """

    avd_name: str
    config_path: Path
    config_overridden: bool
    emulator_process: DetachedProcess
    boot_polls: int = 0
    boot_seconds: float = 0.0
    location_set: bool = False
    demo_mode_set: bool = False


class EmulatorLauncher:
    """
    Orchestrates the SDK tools to bring up a booted emulator.

    All effects go through the injected ProcessRunner and FileStore, and
    waiting goes through ``sleep``, so the whole flow runs against fakes.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        file_store: FileStore,
        platform: HostPlatform,
        home_dir: Optional[Path] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the launcher.

        Args:
            runner: Executes SDK tools.
            file_store: Reads and writes the AVD config.ini.
            platform: Host OS family; decides whether HAXM is checked.
            home_dir: Directory holding ``.android/avd``. Defaults to the
                user's home directory.
            sleep: Coroutine used for every wait.
            clock: Monotonic clock used for the optional boot timeout.
        """
        self.runner = runner
        self.file_store = file_store
        self.platform = platform
        self.home_dir = Path(home_dir) if home_dir is not None else Path.home()
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def for_local_host(cls, home_dir: Optional[Path] = None) -> "EmulatorLauncher":
        """Launcher wired to real subprocesses and the local filesystem."""
        return cls(
            runner=SubprocessRunner(),
            file_store=LocalFileStore(),
            platform=detect_host_platform(),
            home_dir=home_dir,
        )

    async def launch(self, config: LaunchConfig) -> LaunchResult:
        """
        Run the full launch sequence.

        Args:
            config: Validated launch options.

        Returns:
            LaunchResult describing what was done.

        Raises:
            ExternalToolError: avdmanager, kextstat or a synchronous adb call failed.
            MissingHostCapabilityError: HAXM is not loaded on a macOS host.
            BootTimeoutError: ``config.boot_timeout`` elapsed before boot completed.
            LaunchError: config.ini was missing when overrides were requested.
        """
        tools = SdkToolPaths.from_sdk_dir(config.sdk_dir)

        with LogContext(avd=config.name):
            await self._stop_emulator(tools, config)
            await self._create_avd(tools, config)

            result = LaunchResult(
                avd_name=config.name,
                config_path=avd_config_path(self.home_dir, config.name),
                config_overridden=False,
                emulator_process=DetachedProcess(args=[]),
            )
            if config.has_overrides:
                self._override_configuration(result.config_path, config)
                result.config_overridden = True

            if self.platform.needs_haxm_check:
                await self._verify_haxm()

            result.emulator_process = self._start_emulator(tools, config)
            await self.runner.run(tools.wait_for_device())
            result.boot_polls, result.boot_seconds = await self._wait_for_boot(tools, config)

            if config.location:
                await self._set_location(tools, config.location)
                result.location_set = True

            if config.demo_mode:
                await self._set_demo_mode(tools)
                result.demo_mode_set = True

            logger.info("Emulator ready", polls=result.boot_polls)
            return result

    async def _stop_emulator(self, tools: SdkToolPaths, config: LaunchConfig) -> None:
        logger.info("Stopping emulator")
        self.runner.spawn_detached(tools.kill_emulator())
        await self._sleep(config.kill_settle_delay)

    async def _create_avd(self, tools: SdkToolPaths, config: LaunchConfig) -> None:
        logger.info(
            "Creating new emulator",
            package=config.package,
            device=config.device,
        )
        result = await self.runner.run(
            tools.create_avd(config.name, config.package, config.device)
        )
        for line in result.output.splitlines():
            if line.strip():
                logger.info(line, tool="avdmanager")

    def _override_configuration(self, path: Path, config: LaunchConfig) -> None:
        logger.info("Override configuration", path=str(path))
        try:
            apply_avd_overrides(self.file_store, path, config.avd_configuration or {})
        except FileNotFoundError as e:
            raise LaunchError(f"AVD configuration not found at {path}") from e

    async def _verify_haxm(self) -> None:
        result = await self.runner.run(kextstat_command())
        if HAXM_MARKER not in result.stdout:
            raise MissingHostCapabilityError(HAXM_MISSING_MESSAGE)

    def _start_emulator(self, tools: SdkToolPaths, config: LaunchConfig) -> DetachedProcess:
        logger.info("Starting emulator")
        handle = self.runner.spawn_detached(
            tools.start_emulator(config.name),
            env=NUMERIC_LOCALE_ENV,
        )
        logger.debug("Emulator spawned", pid=handle.pid)
        return handle

    async def _wait_for_boot(
        self, tools: SdkToolPaths, config: LaunchConfig
    ) -> tuple[int, float]:
        """
        Poll dev.bootcomplete until it reads exactly "1".

        Without ``boot_timeout`` this never gives up.

        Returns:
            Number of polls and seconds spent polling.
        """
        started = self._clock()
        polls = 0
        while True:
            polls += 1
            result = await self.runner.run(tools.get_boot_complete())
            if result.stdout.strip() == "1":
                return polls, self._clock() - started

            elapsed = self._clock() - started
            if config.boot_timeout is not None and elapsed >= config.boot_timeout:
                raise BootTimeoutError(
                    f"Emulator did not finish booting within {config.boot_timeout}s",
                    timeout=config.boot_timeout,
                    polls=polls,
                )
            logger.debug("Waiting for boot", polls=polls, elapsed=round(elapsed, 1))
            await self._sleep(config.boot_poll_interval)

    async def _set_location(self, tools: SdkToolPaths, location: str) -> None:
        logger.info("Set location", location=location)
        await self.runner.run(tools.geo_fix(location), env=NUMERIC_LOCALE_ENV)

    async def _set_demo_mode(self, tools: SdkToolPaths) -> None:
        logger.info("Set in demo mode")
        await self.runner.run(tools.allow_demo_mode())
        await self.runner.run(tools.set_demo_clock())
