"""
AVD Launcher
============

Creates and boots an Android Virtual Device in a repeatable state for
screenshot and UI-test pipelines.

Modules:
    - config: Launch options and logging settings
    - action: Option metadata and example invocations
    - emulator: SDK commands, config.ini overrides and the launch sequence
    - host: Process execution, file access and platform detection
    - cli: Command line entry point
    - utils: Logging helpers
"""

__version__ = "1.0.0"

from avd_launcher.config import LaunchConfig, load_launch_config  # noqa: E402
from avd_launcher.emulator import EmulatorLauncher, LaunchResult  # noqa: E402
from avd_launcher.errors import (  # noqa: E402
    BootTimeoutError,
    ExternalToolError,
    InvalidConfigError,
    LaunchError,
    MissingHostCapabilityError,
    MissingRequiredConfigError,
)

__all__ = [
    "BootTimeoutError",
    "EmulatorLauncher",
    "ExternalToolError",
    "InvalidConfigError",
    "LaunchConfig",
    "LaunchError",
    "LaunchResult",
    "MissingHostCapabilityError",
    "MissingRequiredConfigError",
    "load_launch_config",
]
