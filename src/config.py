"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into strongly-typed Pydantic models.
- Validating required fields and providing actionable error messages.
"""

import os

import dotenv
from pydantic import BaseModel, Field, field_validator

from appender.formatters import get_formatter
from appender.gate import compile_filter
from appender.models import LogLevel


def _get_required_env(name: str) -> str:
    """Read a required env var or raise a helpful error."""
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"{name} is required. Please set it in your .env file.")
    if value.startswith("your_") and value.endswith("_here"):
        raise ValueError(f"{name} is required. Please replace the placeholder value in your .env file.")
    return value


def _get_optional_env(name: str) -> str | None:
    """Read an optional env var, treating blank values as unset."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip()


class AppenderConfig(BaseModel):
    """Configuration for a path-backed file appender."""

    path: str = Field(..., description="Log file path (opened in append mode)")
    level: LogLevel | None = Field(default=None, description="Minimum level written by this appender")
    default_level: LogLevel = Field(default=LogLevel.INFO, description="Threshold used when level is unset")
    formatter: str = Field(default="default", description="Built-in formatter name: default or json")
    filter: str | None = Field(default=None, description="Regex matched against the logger name")

    @field_validator("path")
    def validate_path(cls, v: str) -> str:
        """Validate the path is set (not empty/placeholder)."""
        if not v or not v.strip() or v == "your_log_file_path_here":
            raise ValueError("FILE_APPENDER_PATH is required. Please set it in your .env file.")
        return v

    @field_validator("level", "default_level", mode="before")
    def validate_level(cls, v: object) -> object:
        """Accept level names like "info" or "warning"."""
        if v is None or isinstance(v, LogLevel):
            return v
        return LogLevel.parse(v)  # type: ignore[arg-type]

    @field_validator("formatter")
    def validate_formatter(cls, v: str) -> str:
        """Reject formatter names that have no built-in implementation."""
        get_formatter(v)
        return v.strip().lower()

    @field_validator("filter")
    def validate_filter(cls, v: str | None) -> str | None:
        """Make sure the filter compiles as a regular expression."""
        compile_filter(v)
        return v


class Config(BaseModel):
    """Top-level application configuration."""

    appender: AppenderConfig = Field(..., description="File appender configuration")


def load_config() -> Config:
    """Load application configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Raises `ValueError` with actionable messages when required configuration is
      missing, still contains placeholder values, or names an unknown level,
      formatter or an invalid filter pattern.
    """
    # Load variables from `.env` into the process environment (without overriding
    # already-set env vars).
    dotenv.load_dotenv()

    appender = AppenderConfig(
        path=_get_required_env("FILE_APPENDER_PATH"),
        level=_get_optional_env("FILE_APPENDER_LEVEL"),
        default_level=_get_optional_env("FILE_APPENDER_DEFAULT_LEVEL") or LogLevel.INFO,
        formatter=_get_optional_env("FILE_APPENDER_FORMATTER") or "default",
        filter=_get_optional_env("FILE_APPENDER_FILTER"),
    )
    return Config(appender=appender)
