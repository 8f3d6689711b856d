"""
Action Metadata
===============

Declarative description of the ``android_emulator`` action: what it
does, which options it takes and an example invocation. The CLI builds
its arguments from ``AVAILABLE_OPTIONS``.
"""

from dataclasses import dataclass
from typing import Any, Optional

from avd_launcher.config import DEFAULT_AVD_NAME, DEFAULT_DEVICE

ACTION_NAME = "android_emulator"
DESCRIPTION = "Creates and starts an Android Emulator (AVD)"
DETAILS = "Great for Screengrab"
AUTHORS = ("Michael Ruhl",)

EXAMPLE_CODE = (
    """android_emulator(
    device: "Nexus 5",
    location: "9.1808 48.7771",
    package: "system-images;android-24;google_apis;x86_64",
    demo_mode: true,
    sdk_dir: "PATH_TO_SDK",
    avd_configuration: {
      "hw.gpu.mode" => "auto",
      "hw.gpu.enabled" => "yes",
      "skin.dynamic" => "yes",
      "skin.name" => "nexus_9",
      "skin.path" => "/Users/#{`whoami`.strip}/Library/Android/sdk/skins/nexus_9"
    }
)""",
    """avd-launcher \\
    --sdk-dir "$ANDROID_SDK_DIR" \\
    --package "system-images;android-24;google_apis;x86_64" \\
    --device "Nexus 5" \\
    --location "9.1808 48.7771" \\
    --avd-config hw.gpu.mode=auto \\
    --avd-config hw.gpu.enabled=yes""",
)


@dataclass(frozen=True)
class OptionSpec:
    """
    One option accepted by the action.

    Attributes:
        key: Option name, also the LaunchConfig field name.
        env_name: Environment variable consulted when the option is not given.
        description: Help text.
        default: Value used when neither the option nor the variable is set.
        optional: Whether the option may be left unset.
        is_string: False for options holding booleans or mappings.
    """

    key: str
    env_name: str
    description: str
    default: Any = None
    optional: bool = True
    is_string: bool = True

    @property
    def flag(self) -> str:
        return "--" + self.key.replace("_", "-")


AVAILABLE_OPTIONS = (
    OptionSpec(
        key="sdk_dir",
        env_name="ANDROID_SDK_DIR",
        description="Path to the Android SDK DIR",
        optional=False,
    ),
    OptionSpec(
        key="package",
        env_name="AVD_PACKAGE",
        description="The selected system image of the emulator",
        optional=False,
    ),
    OptionSpec(
        key="name",
        env_name="AVD_NAME",
        description="Name of the AVD",
        default=DEFAULT_AVD_NAME,
        optional=False,
    ),
    OptionSpec(
        key="device",
        env_name="AVD_DEVICE",
        description="Device",
        default=DEFAULT_DEVICE,
        optional=False,
    ),
    OptionSpec(
        key="location",
        env_name="AVD_LOCATION",
        description="Set location of the emulator '<longitude> <latitude>'",
    ),
    OptionSpec(
        key="demo_mode",
        env_name="AVD_DEMO_MODE",
        description="Set the emulator in demo mode",
        default=True,
        is_string=False,
    ),
    OptionSpec(
        key="avd_configuration",
        env_name="AVD_CONFIGURATION",
        description="AVD Configuration",
        is_string=False,
    ),
)


def get_option(key: str) -> Optional[OptionSpec]:
    """Look up an option by key."""
    for option in AVAILABLE_OPTIONS:
        if option.key == key:
            return option
    return None


def is_supported(platform: str) -> bool:
    """The action only applies to Android projects."""
    return platform == "android"
