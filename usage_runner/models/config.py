"""Logging configuration for the usage reporter."""

from __future__ import annotations

import os
from typing import Any, MutableMapping, Optional, Union

from pydantic import BaseModel, Field, model_validator

from usage_common.config import parse_bool_env, parse_int_env, parse_str_env

LOG_LEVEL_ENV = "USAGE_LOG_LEVEL"
LOG_JSON_ENV = "USAGE_LOG_JSON"
LOG_FILE_ENV = "USAGE_LOG_FILE"


class LoggingConfig(BaseModel):
    """Where and how verbosely the reporter logs."""

    level: Union[int, str] = Field(default="WARNING", description="Log level name or number")
    json_logs: bool = Field(default=False, description="Render log lines as JSON")
    log_file: Optional[str] = Field(default=None, description="Optional file receiving a copy of the logs")

    @model_validator(mode="before")
    @classmethod
    def apply_env_fallbacks(cls, values: Any) -> Any:
        if not isinstance(values, MutableMapping):
            return values
        values = dict(values)
        if values.get("level") is None:
            env_level = parse_str_env(os.environ.get(LOG_LEVEL_ENV))
            if env_level is not None:
                numeric = parse_int_env(env_level)
                values["level"] = numeric if numeric is not None else env_level
        if values.get("json_logs") is None:
            env_json = parse_bool_env(os.environ.get(LOG_JSON_ENV))
            if env_json is not None:
                values["json_logs"] = env_json
        if not values.get("log_file"):
            env_file = parse_str_env(os.environ.get(LOG_FILE_ENV))
            if env_file is not None:
                values["log_file"] = env_file
        return {key: val for key, val in values.items() if val is not None}

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls.model_validate({})
