"""
Emulator Module
===============

Creation and boot of an Android Virtual Device.

This package contains:
    - sdk: SDK tool locations and command lines
    - avd_config: config.ini parsing and override merging
    - launcher: EmulatorLauncher, the launch sequence
"""

from avd_launcher.emulator.avd_config import AvdConfigFile, apply_avd_overrides, avd_config_path
from avd_launcher.emulator.launcher import EmulatorLauncher, LaunchResult
from avd_launcher.emulator.sdk import SdkToolPaths

__all__ = [
    "AvdConfigFile",
    "EmulatorLauncher",
    "LaunchResult",
    "SdkToolPaths",
    "apply_avd_overrides",
    "avd_config_path",
]
