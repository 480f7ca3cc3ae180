from __future__ import annotations

import logging
from typing import Any, Mapping

from fitapi.compiler.request import CompileResult, compile_request
from fitapi.domain.errors import ApiCallError
from fitapi.domain.failures import CompileFailure
from fitapi.domain.models import Credentials, RequestDescriptor
from fitapi.settings import FitapiSettings
from fitapi.transport.http import RequestsTransport, Transport

logger = logging.getLogger(__name__)


class FitbitClient:
    """Compile-then-send entry point. Rejected calls raise ApiCallError and send nothing."""

    def __init__(
        self,
        consumer_key: str = "",
        consumer_secret: str = "",
        transport: Transport | None = None,
        settings: FitapiSettings | None = None,
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.settings = settings or FitapiSettings()
        self.transport = transport or RequestsTransport(settings=self.settings)

    def compile(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        auth_token: str = "",
        auth_secret: str = "",
    ) -> CompileResult:
        return compile_request(
            method, params, auth_token, auth_secret, settings=self.settings
        )

    def call(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        auth_token: str = "",
        auth_secret: str = "",
    ) -> Any:
        result = self.compile(method, params, auth_token, auth_secret)
        if isinstance(result, CompileFailure):
            logger.warning("not sending %s: %s", method, result.message)
            raise ApiCallError(result)

        return self.send(result, auth_token, auth_secret)

    def send(self, request: RequestDescriptor, auth_token: str = "", auth_secret: str = "") -> Any:
        credentials = Credentials(
            consumer_key=self.consumer_key,
            consumer_secret=self.consumer_secret,
            auth_token=auth_token or "",
            auth_secret=auth_secret or "",
        )
        return self.transport.send(request, credentials)
