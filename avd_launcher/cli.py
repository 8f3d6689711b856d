"""
Command Line Interface
======================

Usage:
    avd-launcher --sdk-dir ~/Android/Sdk \\
        --package "system-images;android-24;google_apis;x86_64"

    # Options left out fall back to ANDROID_SDK_DIR, AVD_PACKAGE, AVD_NAME, ...
    ANDROID_SDK_DIR=~/Android/Sdk AVD_PACKAGE=... avd-launcher --no-demo-mode

    # Print example invocations
    avd-launcher --example
"""

import argparse
import asyncio
import sys
from typing import Any, Optional, Sequence

from avd_launcher import __version__
from avd_launcher.action import AVAILABLE_OPTIONS, DESCRIPTION, DETAILS, EXAMPLE_CODE, OptionSpec
from avd_launcher.config import load_launch_config
from avd_launcher.emulator.launcher import EmulatorLauncher
from avd_launcher.errors import ExternalToolError, LaunchError
from avd_launcher.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_key_value(text: str) -> tuple[str, str]:
    """Parse ``KEY=VALUE`` from --avd-config."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key.strip(), value.strip()


def _help(option: OptionSpec) -> str:
    text = f"{option.description} (env: {option.env_name}"
    if option.default is not None:
        text += f", default: {option.default}"
    return text + ")"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser from the action's option metadata."""
    parser = argparse.ArgumentParser(
        prog="avd-launcher",
        description=f"{DESCRIPTION}. {DETAILS}.",
    )
    for option in AVAILABLE_OPTIONS:
        if option.key == "demo_mode":
            parser.add_argument(
                option.flag,
                dest=option.key,
                action=argparse.BooleanOptionalAction,
                default=None,
                help=_help(option),
            )
        elif option.key == "avd_configuration":
            parser.add_argument(
                "--avd-config",
                dest=option.key,
                action="append",
                type=parse_key_value,
                default=None,
                metavar="KEY=VALUE",
                help=_help(option) + "; repeat for several entries",
            )
        else:
            parser.add_argument(option.flag, dest=option.key, default=None, help=_help(option))

    parser.add_argument(
        "--boot-timeout",
        type=float,
        default=None,
        help="Fail if boot does not complete within this many seconds (default: wait forever)",
    )
    parser.add_argument(
        "--poll-interval",
        dest="boot_poll_interval",
        type=float,
        default=None,
        help="Seconds between boot-complete checks (default: 5)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (env: LOG_LEVEL)",
    )
    parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit JSON log lines instead of console output",
    )
    parser.add_argument("--example", action="store_true", help="Print example invocations and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_values(args: argparse.Namespace) -> dict[str, Any]:
    """Collect LaunchConfig keyword values from parsed arguments."""
    values: dict[str, Any] = {option.key: getattr(args, option.key) for option in AVAILABLE_OPTIONS}
    if values["avd_configuration"] is not None:
        values["avd_configuration"] = dict(values["avd_configuration"])
    values["boot_timeout"] = args.boot_timeout
    values["boot_poll_interval"] = args.boot_poll_interval
    return values


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the launcher.

    Returns:
        Process exit code: 0 on success, 1 on a launch error,
        130 when interrupted.
    """
    args = build_parser().parse_args(argv)

    if args.example:
        print("\n\n".join(EXAMPLE_CODE))
        return 0

    setup_logging(level=args.log_level, json_logs=args.json_logs)

    try:
        config = load_launch_config(**config_values(args))
        result = asyncio.run(EmulatorLauncher.for_local_host().launch(config))
    except LaunchError as e:
        logger.error(str(e), error_type=type(e).__name__)
        if isinstance(e, ExternalToolError) and e.output:
            logger.error("Tool output", output=e.output)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    logger.info(
        "Launch finished",
        avd=result.avd_name,
        boot_polls=result.boot_polls,
        boot_seconds=round(result.boot_seconds, 1),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
