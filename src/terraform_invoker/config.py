"""Settings for the terraform invoker, loaded with pydantic-settings.

Usage:
    from terraform_invoker.config import InvokerSettings

    settings = InvokerSettings()
    settings.terraform_cli_path
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TERRAFORM_PATH = "/usr/local/bin/terraform"


class InvokerSettings(BaseSettings):
    """Invoker settings. Everything has a default; nothing is required."""

    model_config = SettingsConfigDict(
        env_prefix="TF_INVOKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    terraform_cli_path: str = Field(
        default=DEFAULT_TERRAFORM_PATH,
        alias="TERRAFORM_CLI_PATH",
        description="Terraform executable used when none is given explicitly",
    )

    # Logging configuration
    service_name: str = Field(
        default="terraform-invoker",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v
