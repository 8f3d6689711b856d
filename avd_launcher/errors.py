"""
Launch Errors
=============

Exception hierarchy raised while bringing up an emulator.
Every error is user-facing: the CLI prints the message and exits non-zero.
"""

from typing import Optional, Sequence


class LaunchError(Exception):
    """Base exception for emulator launch failures."""

    pass


class MissingRequiredConfigError(LaunchError):
    """Raised when a required option (SDK dir, system image) is absent."""

    pass


class InvalidConfigError(LaunchError):
    """Raised when an option is present but has an unusable value."""

    pass


class ExternalToolError(LaunchError):
    """Raised when a synchronous SDK tool call fails."""

    def __init__(
        self,
        message: str,
        args: Sequence[str] = (),
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.command = list(args)
        self.returncode = returncode
        self.output = output


class MissingHostCapabilityError(LaunchError):
    """Raised when the host lacks the hardware-acceleration extension."""

    pass


class BootTimeoutError(LaunchError):
    """Raised when a configured boot timeout elapses before boot completes."""

    def __init__(self, message: str, timeout: float, polls: int):
        super().__init__(message)
        self.timeout = timeout
        self.polls = polls
