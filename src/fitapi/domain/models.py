from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

HttpMethod = Literal["GET", "POST", "DELETE"]


class Credentials(BaseModel):
    """OAuth 1.0a material handed to the transport. Empty string means absent."""

    model_config = ConfigDict(frozen=True)

    consumer_key: str = ""
    consumer_secret: str = ""
    auth_token: str = ""
    auth_secret: str = ""

    @property
    def has_user_token(self) -> bool:
        return bool(self.auth_token) and bool(self.auth_secret)


class RequestDescriptor(BaseModel):
    """Transport-ready form of one compiled API call."""

    model_config = ConfigDict(frozen=True)

    method: str  # registry name, e.g. api-log-water
    verb: HttpMethod
    path: str  # /1/foods/search.xml?query=apple
    query: str = ""  # the query string of path, without "?"
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""