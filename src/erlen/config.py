import logging
import os

from typing import Mapping

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator


class Config(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    show_error_details: bool = True
    log_level: str | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level: {value}")
        return value

    @classmethod
    def from_env(cls, prefix: str = "ERLEN_", environ: Mapping[str, str] | None = None) -> "Config":
        """Build a config from ``{prefix}FIELD_NAME`` environment variables."""
        environ = os.environ if environ is None else environ
        data = {
            key[len(prefix):].lower(): value
            for key, value in environ.items()
            if key.startswith(prefix)
        }
        return cls.model_validate(data)
