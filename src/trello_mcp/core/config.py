from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

TRELLO_BASE_URL = "https://api.trello.com/1"

ENV_VARS = ("TRELLO_API_KEY", "TRELLO_TOKEN", "LOG_LEVEL", "API_TIMEOUT")


class TrelloSettings(BaseModel):
    """Credentials and transport settings, validated once at startup."""

    api_key: str = Field(alias="TRELLO_API_KEY", min_length=1)
    token: str = Field(alias="TRELLO_TOKEN", min_length=1)
    log_level: Literal["debug", "info", "warn", "error"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    api_timeout_ms: int = Field(default=10000, alias="API_TIMEOUT", gt=0)

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, str_strip_whitespace=True
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_level(cls, value):
        return value.lower() if isinstance(value, str) else value

    @property
    def timeout_seconds(self) -> float:
        return self.api_timeout_ms / 1000


def load_settings(
    environ: Optional[Mapping[str, str]] = None, *, use_dotenv: bool = True
) -> TrelloSettings:
    """Load settings from the environment (optional .env); raise ConfigError on bad input."""
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    raw = {}
    for name in ENV_VARS:
        value = environ.get(name)
        # Blank optional values fall back to defaults; blank required ones fail below.
        if value is None or not value.strip():
            continue
        raw[name] = value

    try:
        return TrelloSettings.model_validate(raw)
    except ValidationError as exc:
        names = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ConfigError(
            f"Missing or invalid environment variables: {', '.join(names)}"
        ) from exc


__all__ = ["TRELLO_BASE_URL", "TrelloSettings", "load_settings"]
