"""
Shared configuration management for the Calendar API.
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SETTINGS_FILE_ENV = "CALENDAR_SETTINGS_FILE"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CALENDAR_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    application_name: str = Field(default="calendar-api")
    deployment_mode: Optional[str] = Field(default=None)
    logging_path: Optional[str] = Field(default=None)

    # Access gate
    basic_auth_username: Optional[str] = Field(default=None)
    basic_auth_passcode: Optional[str] = Field(default=None)
    system_valid_ip_range: Optional[str] = Field(default=None)
    gate_exempt_paths: str = Field(default="/swagger,/health")

    @field_validator("system_valid_ip_range", "gate_exempt_paths", mode="before")
    @classmethod
    def _join_lists(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return value

    @property
    def exempt_path_prefixes(self) -> List[str]:
        """Paths served without passing the access gate."""
        return [path.strip() for path in self.gate_exempt_paths.split(",") if path.strip()]

    @classmethod
    def from_settings_file(cls, path: Union[str, Path], **overrides: Any) -> "BaseConfig":
        """Load config from an appsettings-style JSON file, with env vars taking precedence."""
        settings_path = Path(path)
        file_values: Dict[str, Any] = {}

        if settings_path.exists():
            with settings_path.open("r", encoding="utf-8") as f:
                raw = json.load(f) or {}
            file_values = {
                key: value
                for key, value in flatten_settings(raw).items()
                if key in cls.model_fields
            }

        # Fields resolved from the environment win over the file
        from_env = cls(**overrides).model_fields_set
        merged = {key: value for key, value in file_values.items() if key not in from_env}
        merged.update(overrides)
        return cls(**merged)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"


def _snake_case(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", key).replace("-", "_").lower()


def flatten_settings(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested PascalCase settings into snake_case field names.

    ``{"BasicAuth": {"Username": "svc"}}`` becomes ``{"basic_auth_username": "svc"}``.
    """
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        full_key = _snake_case(key) if not prefix else f"{prefix}_{_snake_case(key)}"
        if isinstance(value, dict):
            flat.update(flatten_settings(value, full_key))
        else:
            flat[full_key] = value
    return flat


def get_config(service_name: str, port: int, settings_file: Optional[str] = None) -> ServiceConfig:
    """Get configuration for a specific service."""
    settings_file = settings_file or os.getenv(SETTINGS_FILE_ENV)
    if settings_file:
        return ServiceConfig.from_settings_file(settings_file, service_name=service_name, port=port)
    return ServiceConfig(service_name=service_name, port=port)
