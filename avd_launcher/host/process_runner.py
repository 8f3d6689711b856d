"""
Process Runner Abstraction
==========================

Interface for running the SDK's command-line tools, plus the local
subprocess-backed implementation.

Two kinds of invocation exist:
    - run(): synchronous from the caller's point of view; awaits exit,
      captures output and raises on failure when ``check`` is set.
    - spawn_detached(): fire-and-forget; returns a handle immediately and
      never reports the child's exit status.

Usage:
    from avd_launcher.host import SubprocessRunner

    runner = SubprocessRunner()
    result = await runner.run(["adb", "-e", "wait-for-device"])
    handle = runner.spawn_detached(["emulator", "@fastlane"])
"""

import asyncio
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from avd_launcher.errors import ExternalToolError
from avd_launcher.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """
    Result of a finished external command.

    Attributes:
        args: The argv that was executed.
        returncode: Exit status of the process.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for error reports."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


@dataclass
class DetachedProcess:
    """
    Handle for a fire-and-forget process.

    Attributes:
        args: The argv that was spawned.
        pid: Process id, or None if the spawn itself failed.
        env: Extra environment entries applied to the child.
        process: The underlying Popen object, when spawned locally.
    """

    args: list[str]
    pid: Optional[int] = None
    env: dict[str, str] = field(default_factory=dict)
    process: Optional[subprocess.Popen] = field(default=None, repr=False, compare=False)

    @property
    def started(self) -> bool:
        return self.pid is not None

    def poll(self) -> Optional[int]:
        """Exit status if the child has finished (reaping it), else None."""
        if self.process is None:
            return None
        return self.process.poll()


class ProcessRunner(ABC):
    """
    Abstract base class for external process execution.

    The launcher only talks to the outside world through this interface,
    so tests can substitute a recording fake.
    """

    @abstractmethod
    async def run(
        self,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        check: bool = True,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            args: Command and arguments.
            env: Extra environment entries layered over the current environment.
            check: Raise ExternalToolError on a non-zero exit.
            timeout: Seconds before the command is abandoned (None: no limit).

        Returns:
            CommandResult with captured output.

        Raises:
            ExternalToolError: The command could not run, timed out, or
                exited non-zero while ``check`` is set.
        """
        pass

    @abstractmethod
    def spawn_detached(
        self,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> DetachedProcess:
        """
        Start a command in the background and return immediately.

        Output is discarded and the exit status is never checked.

        Args:
            args: Command and arguments.
            env: Extra environment entries layered over the current environment.

        Returns:
            DetachedProcess handle.
        """
        pass


def _merged_env(env: Optional[Mapping[str, str]]) -> Optional[dict[str, str]]:
    if not env:
        return None
    merged = dict(os.environ)
    merged.update(env)
    return merged


class SubprocessRunner(ProcessRunner):
    """
    Runs commands on the local host with the subprocess module.

    Detached children are kept until they have exited and are reaped on
    the next spawn, so none of them is left behind as a zombie.
    """

    def __init__(self) -> None:
        self._children: list[DetachedProcess] = []

    @property
    def running_children(self) -> list[DetachedProcess]:
        """Detached children that have not exited yet."""
        self._reap()
        return list(self._children)

    def _reap(self) -> None:
        self._children = [child for child in self._children if child.poll() is None]

    async def run(
        self,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        check: bool = True,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        cmd = [str(arg) for arg in args]
        logger.debug("Running command", cmd=" ".join(cmd))

        try:
            completed = await asyncio.to_thread(
                subprocess.run,
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=_merged_env(env),
            )
        except FileNotFoundError as e:
            raise ExternalToolError(f"Command not found: {cmd[0]}", args=cmd) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(
                f"Command timed out after {timeout}s: {' '.join(cmd)}", args=cmd
            ) from e
        except OSError as e:
            raise ExternalToolError(f"Could not run {cmd[0]}: {e}", args=cmd) from e

        result = CommandResult(
            args=cmd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            raise ExternalToolError(
                f"Exit status of command '{' '.join(cmd)}' was {result.returncode} instead of 0.",
                args=cmd,
                returncode=result.returncode,
                output=result.output,
            )
        return result

    def spawn_detached(
        self,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> DetachedProcess:
        cmd = [str(arg) for arg in args]
        handle = DetachedProcess(args=cmd, env=dict(env or {}))
        logger.debug("Spawning detached command", cmd=" ".join(cmd))

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                env=_merged_env(env),
                start_new_session=True,
            )
        except OSError as e:
            # background spawns are unchecked; later steps notice the absence
            logger.warning("Failed to spawn detached command", cmd=" ".join(cmd), error=str(e))
            return handle

        handle.pid = proc.pid
        handle.process = proc
        self._reap()
        self._children.append(handle)
        return handle
