from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Union
from urllib.parse import quote

from fitapi.domain.errors import ApiCallError
from fitapi.domain.failures import CompileFailure, UnknownMethod
from fitapi.domain.models import RequestDescriptor
from fitapi.registry.lookup import lookup
from fitapi.registry.model import MethodDescriptor
from fitapi.resolve.url import Resolution
from fitapi.settings import FitapiSettings
from fitapi.validate.params import (
    API_METHOD,
    META_FIELDS,
    RESPONSE_FORMAT,
    ParameterBag,
    as_text,
    normalize_params,
)
from fitapi.validate.rules import Ok, validate

logger = logging.getLogger(__name__)

CompileResult = Union[RequestDescriptor, CompileFailure]

_DEFAULT_SETTINGS = FitapiSettings()

# RFC 3986 unreserved characters, the set OAuth 1.0a leaves unescaped
_UNRESERVED = "-._~"


def _escape(value: str) -> str:
    return quote(value, safe=_UNRESERVED)


def normalize_query(pairs: Iterable[tuple[str, str]]) -> str:
    """Percent-encode, sort by key then value and join as k=v&k=v."""
    encoded = sorted((_escape(k), _escape(v)) for k, v in pairs)
    return "&".join(f"{k}={v}" for k, v in encoded)


def response_format(bag: ParameterBag, default: str = "xml") -> str:
    requested = bag.get(RESPONSE_FORMAT)
    if requested is None:
        return "json" if default == "json" else "xml"
    return "json" if as_text(requested).strip().lower() == "json" else "xml"


def select_headers(method: MethodDescriptor, bag: ParameterBag) -> dict[str, str]:
    """Allowed headers the caller supplied, keyed by their declared spelling."""
    out: dict[str, str] = {}
    for name in method.allowed_headers:
        value = bag.header(name)
        if value is not None:
            out[name] = as_text(value)
    return out


def _query(method: MethodDescriptor, bag: ParameterBag) -> str:
    declared = method.declared_names()
    pairs = [
        (declared.get(q.lower(), q), as_text(bag.get(q)))
        for q in method.query_parameters
        if bag.has(q)
    ]
    return normalize_query(pairs)


def _body(method: MethodDescriptor, bag: ParameterBag, resolution: Resolution) -> str:
    if method.http_method != "POST" or not method.encodes_body:
        return ""

    consumed = set(META_FIELDS)
    consumed.update(resolution.consumed)
    consumed.update(h.lower() for h in method.allowed_headers)
    consumed.update(q.lower() for q in method.query_parameters)

    declared = method.declared_names()
    pairs = [
        (declared.get(k, k), as_text(v))
        for k, v in bag.values.items()
        if k not in consumed and not isinstance(v, Mapping)
    ]
    return normalize_query(pairs)


def assemble(
    method: MethodDescriptor,
    bag: ParameterBag,
    resolution: Resolution,
    api_version: str,
    default_format: str = "xml",
) -> RequestDescriptor:
    version = str(api_version).strip("/")
    fmt = response_format(bag, default_format)
    path = "/" + "/".join((version,) + resolution.segments) + f".{fmt}"
    query = _query(method, bag)
    if query:
        path = f"{path}?{query}"

    return RequestDescriptor(
        method=method.name,
        verb=method.http_method,
        path=path,
        query=query,
        headers=select_headers(method, bag),
        body=_body(method, bag, resolution),
    )


def compile_request(
    name: str,
    params: Mapping[str, Any] | None = None,
    auth_token: str = "",
    auth_secret: str = "",
    *,
    api_version: str | int | None = None,
    settings: FitapiSettings | None = None,
) -> CompileResult:
    """
    Compile one API call into a RequestDescriptor.

    Returns a CompileFailure (UnknownMethod or a ValidationFailure) instead of
    raising when the call is not valid. Pure: no I/O, no shared state.
    """
    settings = settings or _DEFAULT_SETTINGS
    bag = normalize_params(params)

    method = lookup(name)
    if isinstance(method, UnknownMethod):
        logger.debug("unknown method %r", name)
        return method

    outcome = validate(method, bag, auth_token, auth_secret)
    if not isinstance(outcome, Ok):
        logger.debug("%s rejected: %s", method.name, outcome.kind)
        return outcome

    version = settings.api_version if api_version is None else str(api_version)
    descriptor = assemble(
        method, bag, outcome.resolution, version, settings.default_response_format
    )
    logger.debug(
        "compiled %s -> %s %s (variant=%s)",
        method.name,
        descriptor.verb,
        descriptor.path,
        outcome.resolution.variant,
    )
    return descriptor


def compile_params(
    params: Mapping[str, Any],
    auth_token: str = "",
    auth_secret: str = "",
    **kwargs: Any,
) -> CompileResult:
    """Like compile_request, but takes the method name from the `api-method` parameter."""
    name = ""
    for k, v in params.items():
        if str(k).strip().lower() == API_METHOD:
            name = as_text(v)
            break
    return compile_request(name, params, auth_token, auth_secret, **kwargs)


def raise_for_failure(result: CompileResult) -> RequestDescriptor:
    if isinstance(result, CompileFailure):
        raise ApiCallError(result)
    return result
