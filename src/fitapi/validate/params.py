from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

API_METHOD = "api-method"
RESPONSE_FORMAT = "response-format"
POST_PARAMETERS = "post_parameters"
REQUEST_HEADERS = "request_headers"

META_FIELDS = frozenset({API_METHOD, RESPONSE_FORMAT})


@dataclass(frozen=True)
class ParameterBag:
    """
    Flat, case-normalized view of caller parameters.

    `values` keeps the order keys were passed in; nested `post_parameters`
    are merged into it. `headers` holds the `request_headers` block.
    """

    values: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, Any] = field(default_factory=dict)

    def has(self, name: str) -> bool:
        return name.lower() in self.values

    def filled(self, name: str) -> bool:
        """Supplied with a non-empty value."""
        return self.has(name) and as_text(self.get(name)) != ""

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name.lower(), default)

    def keys(self) -> tuple[str, ...]:
        return tuple(self.values)

    def supplied(self, names: Iterable[str]) -> tuple[str, ...]:
        """Members of `names` present in the bag, in the order they were passed."""
        wanted = {n.lower(): n for n in names}
        return tuple(wanted[k] for k in self.values if k in wanted)

    def header(self, name: str) -> Any:
        key = name.lower()
        if key in self.headers:
            return self.headers[key]
        return self.values.get(key)


def as_text(value: Any) -> str:
    # booleans go over the wire the way the remote API spells them
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_params(params: Mapping[str, Any] | None) -> ParameterBag:
    """
    Lower-case keys and top-level string values.

    Sub-maps (`post_parameters`, `request_headers`) keep their values as given;
    their keys are lower-cased so lookups stay case-insensitive. None values
    count as absent.
    """
    values: dict[str, Any] = {}
    headers: dict[str, Any] = {}

    for k, v in (params or {}).items():
        key = str(k).strip().lower()
        if v is None:
            continue
        if key == POST_PARAMETERS and isinstance(v, Mapping):
            for pk, pv in v.items():
                if pv is not None:
                    values[str(pk).strip().lower()] = pv
        elif key == REQUEST_HEADERS and isinstance(v, Mapping):
            for hk, hv in v.items():
                if hv is not None:
                    headers[str(hk).strip().lower()] = hv
        elif isinstance(v, str):
            values[key] = v.lower()
        else:
            values[key] = v

    return ParameterBag(values=values, headers=headers)
