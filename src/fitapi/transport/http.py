from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

import requests
from requests.auth import AuthBase

from fitapi.domain.errors import TransportError
from fitapi.domain.models import Credentials, RequestDescriptor
from fitapi.settings import FitapiSettings

logger = logging.getLogger(__name__)

# Builds the signing hook for a call, e.g. an OAuth1 auth object.
AuthFactory = Callable[[Credentials], Optional[AuthBase]]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Transport(Protocol):
    def send(self, request: RequestDescriptor, credentials: Credentials) -> Any: ...


class RequestsTransport:
    """
    Sends compiled descriptors with a requests.Session.

    Signing is delegated to `auth_factory`; without one, requests go out
    unsigned (enough for methods that need no user token) and a warning is
    logged if user credentials were handed in.
    """

    def __init__(
        self,
        settings: FitapiSettings | None = None,
        session: requests.Session | None = None,
        auth_factory: AuthFactory | None = None,
    ):
        self.settings = settings or FitapiSettings()
        self.session = session or requests.Session()
        self.auth_factory = auth_factory

    def url_for(self, request: RequestDescriptor) -> str:
        return self.settings.base_url.rstrip("/") + request.path

    def send(self, request: RequestDescriptor, credentials: Credentials) -> requests.Response:
        url = self.url_for(request)
        headers = dict(request.headers)
        data = request.body or None
        if data is not None:
            headers.setdefault("Content-Type", FORM_CONTENT_TYPE)

        if self.auth_factory is not None:
            auth = self.auth_factory(credentials)
        else:
            auth = None
            if credentials.has_user_token:
                logger.warning(
                    "%s %s: user token supplied but no auth_factory is set, sending unsigned",
                    request.verb,
                    url,
                )

        logger.info("%s %s", request.verb, url)
        try:
            response = self.session.request(
                request.verb,
                url,
                headers=headers,
                data=data,
                auth=auth,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{request.verb} {url} failed: {e}") from e

        logger.debug("%s %s -> %s", request.verb, url, response.status_code)
        return response
