"""
AVD config.ini Handling
=======================

``avdmanager`` writes ``<home>/.android/avd/<name>.avd/config.ini`` as
plain ``key=value`` lines. This module reads that file into an ordered
mapping, merges caller overrides on top and renders it back.

Usage:
    path = avd_config_path(Path.home(), "fastlane")
    config = AvdConfigFile.parse(path.read_text())
    config.merge({"hw.gpu.mode": "auto"})
    path.write_text(config.render())
"""

from pathlib import Path
from typing import Mapping, Optional

from avd_launcher.host.file_store import FileStore
from avd_launcher.utils.logger import get_logger

logger = get_logger(__name__)


def avd_config_path(home_dir: Path, avd_name: str) -> Path:
    """Location of the config.ini generated for ``avd_name``."""
    return Path(home_dir) / ".android" / "avd" / f"{avd_name}.avd" / "config.ini"


class AvdConfigFile:
    """
    Ordered key/value view of an AVD config.ini.

    Keys keep the order in which they first appeared; keys introduced by
    an override are appended at the end.
    """

    def __init__(self, entries: Optional[Mapping[str, str]] = None) -> None:
        self.entries: dict[str, str] = dict(entries or {})

    @classmethod
    def parse(cls, text: str) -> "AvdConfigFile":
        """
        Parse config.ini content.

        Each line is stripped and split on the first ``=``. Blank lines are
        skipped; a line without ``=`` becomes a key with an empty value.
        A repeated key keeps its last value.
        """
        entries: dict[str, str] = {}
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            key, _, value = line.partition("=")
            entries[key.strip()] = value.strip()
        return cls(entries)

    def merge(self, overrides: Mapping[str, str]) -> None:
        """Apply overrides; an override always wins over an existing key."""
        for key, value in overrides.items():
            self.entries[str(key)] = str(value)

    def render(self) -> str:
        """One ``key=value`` line per entry, each newline-terminated."""
        return "".join(f"{key}={value}\n" for key, value in self.entries.items())

    def __getitem__(self, key: str) -> str:
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)


def apply_avd_overrides(
    store: FileStore,
    path: Path,
    overrides: Mapping[str, str],
) -> AvdConfigFile:
    """
    Read, merge and rewrite config.ini in one pass.

    The whole file is replaced, never appended to.

    Raises:
        FileNotFoundError: avdmanager did not produce the file.
    """
    config = AvdConfigFile.parse(store.read_text(path))
    config.merge(overrides)
    store.write_text(path, config.render())
    logger.debug("Rewrote AVD config", path=str(path), keys=len(config))
    return config
