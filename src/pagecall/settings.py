"""Process configuration.

Settings are read once at startup from environment variables, after
loading an optional ``.env`` file with python-dotenv. The core never reads
them directly; it only sees the configured client.

Variables:
    API_BASE, API_KEY: required.
    API_VERSION, DEPLOYMENT_ID: when both are set, Azure OpenAI is used.
    PAGECALL_MODEL, PAGECALL_MAX_TURNS, PAGECALL_REQUEST_TIMEOUT,
    PAGECALL_FETCH_TIMEOUT: optional overrides.
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from pagecall.llm.client import AzureOpenAIClient, OpenAIClient
from pagecall.llm.errors import LLMConfigError
from pagecall.models.config import DEFAULT_MODEL

_ENV_FIELDS: dict[str, str] = {
    "api_base": "API_BASE",
    "api_key": "API_KEY",
    "api_version": "API_VERSION",
    "deployment_id": "DEPLOYMENT_ID",
    "model": "PAGECALL_MODEL",
    "max_turns": "PAGECALL_MAX_TURNS",
    "request_timeout": "PAGECALL_REQUEST_TIMEOUT",
    "fetch_timeout": "PAGECALL_FETCH_TIMEOUT",
}


class Settings(BaseModel):
    """Process-level configuration."""

    api_base: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    api_version: Optional[str] = None
    deployment_id: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_turns: int = Field(default=10, ge=1)
    request_timeout: float = Field(default=120.0, gt=0)
    fetch_timeout: float = Field(default=30.0, gt=0)

    @property
    def is_azure(self) -> bool:
        return bool(self.api_version and self.deployment_id)


def load_settings(env_file: str | None = None) -> Settings:
    """Load settings from the environment.

    Args:
        env_file: Path to a dotenv file. When None, python-dotenv searches
            for a ``.env`` file from the working directory upwards.
            Variables already set in the environment win.

    Raises:
        LLMConfigError: If a required variable is missing or a value is
            invalid.
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True))
    raw: dict[str, str] = {}
    for field_name, env_name in _ENV_FIELDS.items():
        value = os.environ.get(env_name, "").strip()
        if value:
            raw[field_name] = value
    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        problems = []
        for err in exc.errors():
            field_name = str(err["loc"][0]) if err.get("loc") else "<root>"
            env_name = _ENV_FIELDS.get(field_name, field_name)
            problems.append(f"{env_name}: {err.get('msg', 'invalid')}")
        raise LLMConfigError(
            "Invalid configuration: " + "; ".join(problems)
        ) from exc


def create_client(settings: Settings) -> OpenAIClient:
    """Build the chat client matching ``settings``."""
    if settings.is_azure:
        return AzureOpenAIClient(
            api_key=settings.api_key,
            api_base=settings.api_base,
            api_version=settings.api_version,
            deployment_id=settings.deployment_id,
            default_model=settings.model,
            timeout=settings.request_timeout,
        )
    return OpenAIClient(
        api_key=settings.api_key,
        base_url=settings.api_base,
        default_model=settings.model,
        timeout=settings.request_timeout,
    )
