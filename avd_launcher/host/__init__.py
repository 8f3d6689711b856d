"""
Host Integration Module
=======================

Everything the launcher needs from the machine it runs on.

This package contains:
    - process_runner: ProcessRunner interface and the subprocess implementation
    - file_store: FileStore interface and the local filesystem implementation
    - platform: HostPlatform detection
"""

from avd_launcher.host.file_store import FileStore, LocalFileStore
from avd_launcher.host.platform import HostPlatform, detect_host_platform
from avd_launcher.host.process_runner import (
    CommandResult,
    DetachedProcess,
    ProcessRunner,
    SubprocessRunner,
)

__all__ = [
    "CommandResult",
    "DetachedProcess",
    "FileStore",
    "HostPlatform",
    "LocalFileStore",
    "ProcessRunner",
    "SubprocessRunner",
    "detect_host_platform",
]
