"""Host operating system detection."""

import platform
from enum import Enum
from typing import Optional


class HostPlatform(Enum):
    """Operating system family of the machine running the emulator."""

    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "windows"
    OTHER = "other"

    @property
    def needs_haxm_check(self) -> bool:
        """Only macOS hosts are checked for the acceleration extension."""
        return self is HostPlatform.MAC


_SYSTEMS = {
    "darwin": HostPlatform.MAC,
    "linux": HostPlatform.LINUX,
    "windows": HostPlatform.WINDOWS,
}


def detect_host_platform(system: Optional[str] = None) -> HostPlatform:
    """
    Map ``platform.system()`` to a HostPlatform.

    Args:
        system: System name to classify. Defaults to the current host.

    Returns:
        The matching HostPlatform, OTHER when unknown.
    """
    if system is None:
        system = platform.system()
    return _SYSTEMS.get(system.lower(), HostPlatform.OTHER)
