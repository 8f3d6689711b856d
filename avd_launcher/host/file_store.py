"""
File access used by the launcher, behind an interface so the AVD config
rewrite can be tested against an in-memory store.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class FileStore(ABC):
    """Minimal text-file access."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        pass

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """
        Read a whole file.

        Raises:
            FileNotFoundError: The file does not exist.
        """
        pass

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Replace the file's content."""
        pass


class LocalFileStore(FileStore):
    """FileStore on the local filesystem."""

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        Path(path).write_text(content, encoding="utf-8")
