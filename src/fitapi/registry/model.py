from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from fitapi.domain.models import HttpMethod

USER_ID = "user-id"
CURRENT_USER = "-"


class AuthRequirement(str, Enum):
    NONE = "none"
    REQUIRED = "required"
    REQUIRED_UNLESS_USER_ID = "user-id"


def placeholder_name(segment: str) -> str | None:
    """`<food-id>` -> `food-id`; literal segments -> None."""
    if len(segment) > 2 and segment.startswith("<") and segment.endswith(">"):
        return segment[1:-1]
    return None


@dataclass(frozen=True)
class FlatTemplate:
    segments: Tuple[str, ...]

    @property
    def placeholders(self) -> Tuple[str, ...]:
        names = (placeholder_name(s) for s in self.segments)
        return tuple(n for n in names if n is not None)


@dataclass(frozen=True)
class OptionalSegments:
    """Trailing segments appended when any of `triggers` is supplied."""

    triggers: Tuple[str, ...]
    segments: Tuple[str, ...]

    @property
    def placeholders(self) -> Tuple[str, ...]:
        return FlatTemplate(self.segments).placeholders


@dataclass(frozen=True)
class VariantTemplate:
    # ordered: the first satisfiable variant is selected
    variants: Tuple[Tuple[str, FlatTemplate], ...]
    optional: Tuple[OptionalSegments, ...] = ()


ResourceTemplate = Union[FlatTemplate, VariantTemplate]


# ----------------------------
# Parameter rules
# ----------------------------


@dataclass(frozen=True)
class Required:
    names: Tuple[str, ...]


@dataclass(frozen=True)
class Exclusive:
    names: Tuple[str, ...]


@dataclass(frozen=True)
class OneRequired:
    names: Tuple[str, ...]


@dataclass(frozen=True)
class RequiredIf:
    pairs: Tuple[Tuple[str, str], ...]  # (trigger, dependent)

    @property
    def names(self) -> Tuple[str, ...]:
        out: list[str] = []
        for trigger, dependent in self.pairs:
            out.extend((trigger, dependent))
        return tuple(out)


@dataclass(frozen=True)
class OptionalParams:
    names: Tuple[str, ...]


ParameterRule = Union[Required, Exclusive, OneRequired, RequiredIf, OptionalParams]


@dataclass(frozen=True)
class MethodDescriptor:
    """Static description of one remote operation."""

    name: str
    http_method: HttpMethod
    auth: AuthRequirement
    resources: ResourceTemplate
    rules: Tuple[ParameterRule, ...] = ()
    allowed_headers: Tuple[str, ...] = ()
    query_parameters: Tuple[str, ...] = ()
    encodes_body: bool = True
    description: str = ""

    def declared_names(self) -> dict[str, str]:
        """Lower-cased parameter name -> name as the remote API spells it."""
        out: dict[str, str] = {}
        for rule in self.rules:
            for n in rule.names:
                out.setdefault(n.lower(), n)
        for n in self.query_parameters:
            out.setdefault(n.lower(), n)
        return out
