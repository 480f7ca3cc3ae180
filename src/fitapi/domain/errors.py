"""
Exceptions raised at the edges of fitapi.

The compiler itself returns CompileFailure values. These exist for callers
that prefer raising (FitbitClient.call, raise_for_failure), for the transport,
and for a malformed method table detected at import.
"""

from __future__ import annotations

from fitapi.domain.failures import CompileFailure


class FitapiError(Exception):
    """Base class for fitapi exceptions."""


class RegistryError(FitapiError):
    """The static method table is malformed."""


class ApiCallError(FitapiError):
    """A call was rejected before anything was sent."""

    def __init__(self, failure: CompileFailure):
        super().__init__(failure.message)
        self.failure = failure


class TransportError(FitapiError):
    """The transport could not deliver a compiled request."""
