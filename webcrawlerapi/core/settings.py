"""Client configuration.

Settings come from an optional YAML file and are then overridden by the
environment, mirroring how the integration tests are driven::

    API_KEY=your-key API_BASE_URL=http://localhost:8080 pytest tests
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://api.webcrawlerapi.com"
DEFAULT_POLL_DELAY_MS = 5000
DEFAULT_MAX_POLLS = 100
DEFAULT_TIMEOUT = 30.0

ENV_OVERRIDES = {
    "API_KEY": "api_key",
    "API_BASE_URL": "base_url",
    "API_TIMEOUT": "timeout",
}


class ClientSettings(BaseModel):
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    poll_delay_ms: int = Field(default=DEFAULT_POLL_DELAY_MS, gt=0)
    max_polls: int = Field(default=DEFAULT_MAX_POLLS, ge=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("API key is required")
        return value


def _load_file(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of settings")
    return data


def load_settings(path: Path | None = None) -> ClientSettings:
    """Build :class:`ClientSettings` from ``path`` (if given) and the environment."""

    values: dict[str, Any] = _load_file(path) if path is not None else {}
    for env_name, field_name in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value:
            values[field_name] = env_value
    return ClientSettings(**values)


def mask_api_key(api_key: str | None) -> str:
    """Show at most the first two characters of ``api_key``."""

    if not api_key or len(api_key) <= 2:
        return "***"
    return f"{api_key[:2]}***"


__all__ = [
    "ClientSettings",
    "DEFAULT_BASE_URL",
    "DEFAULT_MAX_POLLS",
    "DEFAULT_POLL_DELAY_MS",
    "DEFAULT_TIMEOUT",
    "load_settings",
    "mask_api_key",
]
