"""Configuration for event dispatch.

Configuration is loaded from:
- environment variables prefixed with ``EVENT_DISPATCH_``
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from event_dispatch.logging import configure_logging

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


class DispatchSettings(BaseSettings):
    """Settings for an event dispatcher.

    Environment variables:
    - EVENT_DISPATCH_LOG_LEVEL                (optional)
    - EVENT_DISPATCH_LOG_JSON                 (optional)
    - EVENT_DISPATCH_SCRIPT_DISPATCH          (optional)
    - EVENT_DISPATCH_RAISE_MECHANICAL_FAULTS  (optional)

    Notes:
        Tests can point at a specific env file via
        `DispatchSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )
    log_json: bool = Field(
        default=True,
        description="Emit structured JSON log lines instead of plain text",
    )
    script_dispatch: bool = Field(
        default=True,
        description="Look up and run script handlers for scriptable targets",
    )
    raise_mechanical_faults: bool = Field(
        default=False,
        description=(
            "Raise DispatchMechanicalFault to the caller instead of logging it "
            "and reporting it in the dispatch result. Useful in tests."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="EVENT_DISPATCH_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level, json_format=self.log_json)
