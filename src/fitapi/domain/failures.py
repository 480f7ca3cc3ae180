from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple


def _names(names: Tuple[str, ...]) -> str:
    return str(list(names))


def _params(post: bool) -> str:
    return "POST parameters" if post else "parameters"


@dataclass(frozen=True)
class CompileFailure:
    """Base for every reason a call cannot be compiled. Returned, never raised."""

    kind: ClassVar[str] = "failure"

    method: str

    @property
    def message(self) -> str:
        return f"{self.method} cannot be compiled."

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class UnknownMethod(CompileFailure):
    kind: ClassVar[str] = "unknown_method"

    @property
    def message(self) -> str:
        return f"{self.method} is not a valid Fitbit API method."


@dataclass(frozen=True)
class ValidationFailure(CompileFailure):
    """A known method whose parameters or credentials do not satisfy its rules."""

    kind: ClassVar[str] = "validation"


@dataclass(frozen=True)
class MissingRequiredParameters(ValidationFailure):
    kind: ClassVar[str] = "missing_required_parameters"

    required: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()
    post: bool = False

    @property
    def message(self) -> str:
        return (
            f"{self.method} requires {_params(self.post)} {_names(self.required)}. "
            f"You're missing {_names(self.missing)}."
        )


@dataclass(frozen=True)
class ExclusiveParameterViolation(ValidationFailure):
    kind: ClassVar[str] = "exclusive_parameter_violation"

    allowed: Tuple[str, ...] = ()
    supplied: Tuple[str, ...] = ()  # offending keys, in the order they were passed
    post: bool = False

    @property
    def too_few(self) -> bool:
        return not self.supplied

    @property
    def message(self) -> str:
        if self.too_few:
            return f"{self.method} requires one of these {_params(self.post)}: {_names(self.allowed)}."
        used = " AND ".join(f"'{s}'" for s in self.supplied)
        return (
            f"{self.method} allows only one of these {_params(self.post)}: "
            f"{_names(self.allowed)}. You used {used}."
        )


@dataclass(frozen=True)
class MissingOneOfRequired(ValidationFailure):
    kind: ClassVar[str] = "missing_one_of_required"

    choices: Tuple[str, ...] = ()
    post: bool = False

    @property
    def message(self) -> str:
        return (
            f"{self.method} requires at least one of the following "
            f"{_params(self.post)}: {_names(self.choices)}."
        )


@dataclass(frozen=True)
class MissingConditionalParameter(ValidationFailure):
    kind: ClassVar[str] = "missing_conditional_parameter"

    trigger: str = ""
    dependent: str = ""
    post: bool = False

    @property
    def message(self) -> str:
        noun = "POST parameter" if self.post else "parameter"
        return f"{self.method} requires {noun} {self.dependent} when you use {noun} {self.trigger}."


@dataclass(frozen=True)
class UnresolvableUrl(ValidationFailure):
    kind: ClassVar[str] = "unresolvable_url"

    candidates: Tuple[Tuple[str, ...], ...] = ()
    supplied: Tuple[str, ...] = ()

    @property
    def missing(self) -> Tuple[str, ...]:
        """Missing names for the first candidate (the only one for flat templates)."""
        if not self.candidates:
            return ()
        return tuple(n for n in self.candidates[0] if n not in self.supplied)

    @property
    def message(self) -> str:
        if len(self.candidates) == 1:
            return (
                f"{self.method} requires {_names(self.candidates[0])}. "
                f"You're missing {_names(self.missing)}."
            )
        options = " ".join(f"({i + 1}) {_names(c)}" for i, c in enumerate(self.candidates))
        return (
            f"{self.method} requires 1 of {len(self.candidates)} options: {options}. "
            f"You supplied: {_names(self.supplied)}."
        )


@dataclass(frozen=True)
class MissingAuthentication(ValidationFailure):
    kind: ClassVar[str] = "missing_authentication"

    exemption_hint: str | None = None

    @property
    def message(self) -> str:
        if self.exemption_hint:
            return (
                f"{self.method} requires user auth_token and auth_secret, "
                f"unless you include [\"{self.exemption_hint}\"]."
            )
        return f"{self.method} requires user auth_token and auth_secret."
