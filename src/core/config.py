"""
Application settings + logging setup.

Settings are read from environment variables prefixed with CHESS_, ex.
CHESS_DATABASE_URL=sqlite:///games.db CHESS_LOG_LEVEL=debug
"""

import logging
import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError

ENV_PREFIX = "CHESS_"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    database_url: str = "sqlite:///chess_match.db"
    database_echo: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise InvalidRequestError(
                f"Unknown log level {value!r}. Pick one from {', '.join(LOG_LEVELS)}"
            )
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Only the variables that are set override the defaults"""
        env = os.environ if environ is None else environ
        values = {
            name: env[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in env
        }
        return cls(**values)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
