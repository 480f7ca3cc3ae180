from __future__ import annotations

import os
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

ResponseFormat = Literal["xml", "json"]

ENV_PREFIX = "FITAPI_"


class FitapiSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_version: str = "1"
    base_url: str = "https://api.fitbit.com"
    timeout: float = Field(default=30.0, gt=0)
    default_response_format: ResponseFormat = "xml"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "FitapiSettings":
        """
        Build settings from FITAPI_* variables, falling back to defaults.
        Raises pydantic.ValidationError on bad values.
        """
        env = os.environ if environ is None else environ
        keys = {
            "api_version": "API_VERSION",
            "base_url": "BASE_URL",
            "timeout": "TIMEOUT",
            "default_response_format": "RESPONSE_FORMAT",
        }
        data = {}
        for field_name, suffix in keys.items():
            raw = env.get(ENV_PREFIX + suffix)
            if raw is not None and raw.strip():
                data[field_name] = raw.strip()
        if "default_response_format" in data:
            data["default_response_format"] = data["default_response_format"].lower()
        return cls.model_validate(data)
