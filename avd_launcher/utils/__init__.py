"""
Utility modules for the AVD launcher.

This package contains:
    - logger: Structured logging with structlog
"""

from avd_launcher.utils.logger import LogContext, get_logger, setup_logging

__all__ = [
    "LogContext",
    "get_logger",
    "setup_logging",
]
