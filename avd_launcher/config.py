"""
Configuration Management
========================

Launch options and logging settings using Pydantic Settings.
Every option can be passed explicitly or read from environment variables
and a .env file, using the same variable names as the fastlane action
(ANDROID_SDK_DIR, AVD_PACKAGE, AVD_NAME, ...).
"""

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from avd_launcher.errors import InvalidConfigError, MissingRequiredConfigError


DEFAULT_AVD_NAME = "fastlane"
DEFAULT_DEVICE = "Nexus 5"


REQUIRED_FIELDS = ("sdk_dir", "package")


class LaunchConfig(BaseSettings):
    """
    Options for one emulator launch.

    Immutable once built. Use ``load_launch_config`` to get user-facing
    errors instead of a raw ``ValidationError``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
        validate_default=True,
    )

    sdk_dir: str = Field(
        default="",
        validation_alias="ANDROID_SDK_DIR",
        description="Path to the Android SDK DIR",
    )
    package: str = Field(
        default="",
        validation_alias="AVD_PACKAGE",
        description="The selected system image of the emulator",
    )
    name: str = Field(
        default=DEFAULT_AVD_NAME,
        validation_alias="AVD_NAME",
        description="Name of the AVD",
    )
    device: str = Field(
        default=DEFAULT_DEVICE,
        validation_alias="AVD_DEVICE",
        description="Device",
    )
    location: Optional[str] = Field(
        default=None,
        validation_alias="AVD_LOCATION",
        description="Set location of the emulator '<longitude> <latitude>'",
    )
    demo_mode: bool = Field(
        default=True,
        validation_alias="AVD_DEMO_MODE",
        description="Set the emulator in demo mode",
    )
    avd_configuration: Optional[dict[str, str]] = Field(
        default=None,
        validation_alias="AVD_CONFIGURATION",
        description="AVD Configuration",
    )

    kill_settle_delay: float = Field(
        default=2.0,
        ge=0,
        validation_alias="AVD_KILL_SETTLE_DELAY",
        description="Seconds to wait after stopping a running emulator",
    )
    boot_poll_interval: float = Field(
        default=5.0,
        ge=0,
        validation_alias="AVD_BOOT_POLL_INTERVAL",
        description="Seconds between dev.bootcomplete polls",
    )
    boot_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        validation_alias="AVD_BOOT_TIMEOUT",
        description="Give up waiting for boot after this many seconds (unset: wait forever)",
    )

    def __init__(self, **values: Any) -> None:
        # keyword arguments use field names, the environment only the upper-case aliases
        for field_name, field_info in type(self).model_fields.items():
            if field_name in values and field_info.validation_alias:
                values[field_info.validation_alias] = values.pop(field_name)
        super().__init__(**values)

    @field_validator("sdk_dir")
    @classmethod
    def require_sdk_dir(cls, v: str) -> str:
        """The SDK directory is mandatory."""
        if not v or not v.strip():
            raise ValueError("No ANDROID_SDK_DIR given, pass using `sdk_dir: 'sdk_dir'`")
        return v

    @field_validator("package")
    @classmethod
    def require_package(cls, v: str) -> str:
        """The system image is mandatory."""
        if not v or not v.strip():
            raise ValueError(
                "No AVD_PACKAGE given, pass using "
                "`package: 'system-images;android-24;google_apis;x86_64'`"
            )
        return v

    @field_validator("location")
    @classmethod
    def check_location(cls, v: Optional[str]) -> Optional[str]:
        """A location is '<longitude> <latitude>' with a single space between."""
        if v and (len(v.split()) != 2 or " ".join(v.split()) != v):
            raise ValueError(
                f"AVD_LOCATION must be '<longitude> <latitude>' separated by one space, got '{v}'"
            )
        return v

    @property
    def has_overrides(self) -> bool:
        """Whether config.ini should be rewritten."""
        return bool(self.avd_configuration)


def _error_message(error: dict[str, Any]) -> str:
    ctx_error = error.get("ctx", {}).get("error")
    if error["type"] == "value_error" and ctx_error is not None:
        return str(ctx_error)
    field = ".".join(str(part) for part in error["loc"]) or "config"
    return f"{field}: {error['msg']}"


def _is_required_error(error: dict[str, Any]) -> bool:
    required = set(REQUIRED_FIELDS)
    required.update(LaunchConfig.model_fields[name].validation_alias for name in REQUIRED_FIELDS)
    return bool(error["loc"]) and error["loc"][0] in required


def load_launch_config(**values: Any) -> LaunchConfig:
    """
    Build a LaunchConfig from keyword values and the environment.

    Keyword values set to None are dropped so that the environment (or
    the default) applies.

    Raises:
        MissingRequiredConfigError: The SDK directory or system image is absent.
        InvalidConfigError: Some other option has an unusable value.
    """
    values = {key: value for key, value in values.items() if value is not None}
    try:
        return LaunchConfig(**values)
    except ValidationError as e:
        errors = e.errors()
        message = "; ".join(_error_message(err) for err in errors)
        if any(_is_required_error(err) for err in errors):
            raise MissingRequiredConfigError(message) from e
        raise InvalidConfigError(message) from e
    except SettingsError as e:
        raise InvalidConfigError(str(e)) from e


class LogSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )
    debug: bool = Field(
        default=False,
        description="Console output instead of JSON lines",
    )


class Settings(BaseSettings):
    """
    Process-wide settings.

    Usage:
        from avd_launcher.config import get_settings
        settings = get_settings()
        print(settings.log.log_level)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log: LogSettings = Field(default_factory=LogSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Settings loaded from environment.
    """
    return Settings()
