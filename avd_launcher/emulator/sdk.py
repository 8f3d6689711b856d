"""
Android SDK Tools
=================

Locations of the SDK binaries and the exact argument lists passed to them.

Layout relative to the SDK root:
    platform-tools/adb
    tools/bin/avdmanager
    emulator/emulator
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

# applied to the emulator and geo fix so coordinates parse with a '.' decimal
NUMERIC_LOCALE_ENV = {"LC_NUMERIC": "C"}

BOOT_COMPLETE_PROPERTY = "dev.bootcomplete"
DEMO_CLOCK_HHMM = "0700"


@dataclass(frozen=True)
class SdkToolPaths:
    """Paths of the SDK tools used to create and drive an emulator."""

    adb: Path
    avdmanager: Path
    emulator: Path

    @classmethod
    def from_sdk_dir(cls, sdk_dir: Union[str, Path]) -> "SdkToolPaths":
        root = Path(sdk_dir)
        return cls(
            adb=root / "platform-tools" / "adb",
            avdmanager=root / "tools" / "bin" / "avdmanager",
            emulator=root / "emulator" / "emulator",
        )

    # adb commands without -e address whichever emulator holds the console

    def kill_emulator(self) -> list[str]:
        return [str(self.adb), "emu", "kill"]

    def create_avd(self, name: str, package: str, device: str) -> list[str]:
        return [
            str(self.avdmanager),
            "create", "avd",
            "-n", name,
            "-f",
            "-k", package,
            "-d", device,
        ]

    def start_emulator(self, name: str) -> list[str]:
        return [str(self.emulator), f"@{name}"]

    def wait_for_device(self) -> list[str]:
        return [str(self.adb), "-e", "wait-for-device"]

    def get_boot_complete(self) -> list[str]:
        return [str(self.adb), "-e", "shell", "getprop", BOOT_COMPLETE_PROPERTY]

    def geo_fix(self, location: str) -> list[str]:
        """
        ``adb emu geo fix <longitude> <latitude>``.

        LaunchConfig only accepts two fields separated by one space, so the
        arguments joined with a space give back the location string.
        """
        return [str(self.adb), "emu", "geo", "fix", *location.split(" ")]

    def allow_demo_mode(self) -> list[str]:
        return [
            str(self.adb), "-e", "shell",
            "settings", "put", "global", "sysui_demo_allowed", "1",
        ]

    def set_demo_clock(self, hhmm: str = DEMO_CLOCK_HHMM) -> list[str]:
        return [
            str(self.adb), "-e", "shell",
            "am", "broadcast",
            "-a", "com.android.systemui.demo",
            "-e", "command", "clock",
            "-e", "hhmm", hhmm,
        ]


def kextstat_command() -> list[str]:
    return ["kextstat"]
