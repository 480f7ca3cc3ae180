from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from fitapi.domain.failures import (
    ExclusiveParameterViolation,
    MissingAuthentication,
    MissingConditionalParameter,
    MissingOneOfRequired,
    MissingRequiredParameters,
    UnresolvableUrl,
    ValidationFailure,
)
from fitapi.registry.model import (
    USER_ID,
    AuthRequirement,
    Exclusive,
    MethodDescriptor,
    OneRequired,
    OptionalParams,
    ParameterRule,
    Required,
    RequiredIf,
)
from fitapi.resolve.url import Resolution, Unresolvable, resolve
from fitapi.validate.params import ParameterBag, normalize_params


@dataclass(frozen=True)
class Ok:
    """Validation passed; carries the URL resolution it had to compute anyway."""

    resolution: Resolution


def check_rule(
    method: MethodDescriptor, rule: ParameterRule, bag: ParameterBag
) -> ValidationFailure | None:
    name = method.name
    post = method.http_method == "POST"

    if isinstance(rule, Required):
        missing = tuple(n for n in rule.names if not bag.has(n))
        if missing:
            return MissingRequiredParameters(
                method=name, required=rule.names, missing=missing, post=post
            )
        return None

    if isinstance(rule, Exclusive):
        supplied = bag.supplied(rule.names)
        if len(supplied) != 1:
            return ExclusiveParameterViolation(
                method=name, allowed=rule.names, supplied=supplied, post=post
            )
        return None

    if isinstance(rule, OneRequired):
        if not bag.supplied(rule.names):
            return MissingOneOfRequired(method=name, choices=rule.names, post=post)
        return None

    if isinstance(rule, RequiredIf):
        for trigger, dependent in rule.pairs:
            if bag.has(trigger) and not bag.has(dependent):
                return MissingConditionalParameter(
                    method=name, trigger=trigger, dependent=dependent, post=post
                )
        return None

    if isinstance(rule, OptionalParams):
        return None

    raise TypeError(f"unsupported parameter rule: {type(rule).__name__}")


def check_auth(
    method: MethodDescriptor, bag: ParameterBag, auth_token: str, auth_secret: str
) -> MissingAuthentication | None:
    has_token = bool(auth_token) and bool(auth_secret)

    if method.auth is AuthRequirement.REQUIRED and not has_token:
        return MissingAuthentication(method=method.name)

    if (
        method.auth is AuthRequirement.REQUIRED_UNLESS_USER_ID
        and not has_token
        and not bag.filled(USER_ID)
    ):
        return MissingAuthentication(method=method.name, exemption_hint=USER_ID)

    return None


def validate(
    method: MethodDescriptor,
    params: ParameterBag | Mapping[str, Any],
    auth_token: str = "",
    auth_secret: str = "",
) -> Ok | ValidationFailure:
    """
    Check a call against its method's rules.

    Order: parameter rules (declared order), URL resolution, authentication.
    The first failure is returned and the remaining checks are skipped.
    """
    bag = params if isinstance(params, ParameterBag) else normalize_params(params)

    for rule in method.rules:
        failure = check_rule(method, rule, bag)
        if failure is not None:
            return failure

    resolution = resolve(method.resources, bag, method.auth)
    if isinstance(resolution, Unresolvable):
        return UnresolvableUrl(
            method=method.name,
            candidates=resolution.candidates,
            supplied=resolution.supplied,
        )

    failure = check_auth(method, bag, auth_token or "", auth_secret or "")
    if failure is not None:
        return failure

    return Ok(resolution=resolution)
