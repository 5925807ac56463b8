"""
Configuration Management for Schema Semantics
Uses Pydantic for validation and type safety

Configuration is passed explicitly (SemanticModel(config=...),
configure_logging(config)); there is no process-wide instance.
"""
from __future__ import annotations

import os
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .module_grouper import GLOBAL_ROUTINE_KEY
from .utils.errors import ConfigurationError
from .utils.logging import setup_logging

ENV_PREFIX = "SCHEMA_SEMANTICS_"


class LogLevel(str, Enum):
    """Log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class NamingConfig(BaseModel):
    """Routine association naming"""
    global_routine_key: str = Field(default=GLOBAL_ROUTINE_KEY, min_length=1)

    model_config = {"frozen": True, "extra": "forbid"}


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: LogLevel = LogLevel.INFO
    json_format: bool = False
    log_file: Optional[str] = None

    model_config = {"use_enum_values": True, "frozen": True}


class EngineConfig(BaseModel):
    """Main engine configuration"""
    naming: NamingConfig = Field(default_factory=NamingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineConfig":
        """Create configuration from environment variables (and an optional .env file)"""
        if env_file:
            load_dotenv(env_file, override=False)

        naming_kwargs = {}
        global_key = os.getenv(f"{ENV_PREFIX}GLOBAL_ROUTINE_KEY")
        if global_key is not None:
            naming_kwargs["global_routine_key"] = global_key

        try:
            return cls(
                naming=NamingConfig(**naming_kwargs),
                logging=LoggingConfig(
                    level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
                    json_format=os.getenv(f"{ENV_PREFIX}LOG_JSON", "false").lower() == "true",
                    log_file=os.getenv(f"{ENV_PREFIX}LOG_FILE"),
                ),
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e.errors()[0].get('msg')}",
                config_key=".".join(str(p) for p in e.errors()[0].get("loc", ())),
                original_error=e,
            ) from e

    model_config = {"frozen": True}


def configure_logging(config: EngineConfig) -> None:
    """Apply the logging section of a configuration"""
    settings = config.logging
    setup_logging(
        level=settings.level,
        json_format=settings.json_format,
        log_file=settings.log_file,
    )
