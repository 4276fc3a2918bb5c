"""Application configuration: settings schema and environment loader"""

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator


ENV_PREFIX = "HASHCALC_"


class Settings(BaseModel):
    app_name:         str = "hashcalc"
    cors_origins:     list[str] = Field(default_factory=lambda: ["http://localhost:5173"],
                                        description="Origins allowed by the API's CORS middleware")
    enable_trace:     bool = Field(default=True, description="Include the step trace in API responses")
    max_input_bytes:  int = Field(default=1_000_000, ge=0, description="Largest UTF-8 input the API accepts")
    host:             str = "127.0.0.1"
    port:             int = Field(default=8000, ge=1, le=65535)
    log_level:        str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    analysis_samples: int = Field(default=1000, ge=1, description="Random strings per analysis run")
    analysis_buckets: int = Field(default=64, ge=1, description="Histogram buckets for uniformity")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from defaults, then HASHCALC_<FIELD> env vars, then non-None overrides."""
    load_dotenv()
    data: dict[str, Any] = {}

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
