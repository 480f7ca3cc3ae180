from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from fitapi.domain.errors import RegistryError
from fitapi.domain.failures import UnknownMethod
from fitapi.registry.methods import METHOD_ALIASES, METHOD_TABLE
from fitapi.registry.model import FlatTemplate, MethodDescriptor, VariantTemplate


def _template_placeholders(descriptor: MethodDescriptor) -> set[str]:
    t = descriptor.resources
    if isinstance(t, FlatTemplate):
        return set(t.placeholders)
    names: set[str] = set()
    for _, flat in t.variants:
        names.update(flat.placeholders)
    for opt in t.optional:
        names.update(opt.placeholders)
    return names


def _check(descriptor: MethodDescriptor) -> None:
    if descriptor.name != descriptor.name.strip().lower():
        raise RegistryError(f"method name must be lower-case: {descriptor.name!r}")
    if isinstance(descriptor.resources, VariantTemplate) and not descriptor.resources.variants:
        raise RegistryError(f"{descriptor.name}: variant template has no variants")
    in_url = _template_placeholders(descriptor) & {q.lower() for q in descriptor.query_parameters}
    if in_url:
        raise RegistryError(f"{descriptor.name}: {sorted(in_url)} bound to both URL and query string")
    if descriptor.query_parameters and descriptor.http_method != "GET":
        raise RegistryError(f"{descriptor.name}: query parameters are only sent with GET")


def build_registry(
    methods: Iterable[MethodDescriptor], aliases: Mapping[str, str] | None = None
) -> Mapping[str, MethodDescriptor]:
    """
    Validate a method table and freeze it into a read-only name -> descriptor map.
    Each alias maps to the descriptor of the name it points at.
    Raises RegistryError on duplicates or malformed entries.
    """
    table: dict[str, MethodDescriptor] = {}
    for m in methods:
        _check(m)
        if m.name in table:
            raise RegistryError(f"duplicate method name: {m.name}")
        table[m.name] = m

    for alias, target in (aliases or {}).items():
        if alias in table:
            raise RegistryError(f"alias shadows a method name: {alias}")
        if target not in table:
            raise RegistryError(f"alias {alias} points at unknown method {target}")
        table[alias] = table[target]

    return MappingProxyType(table)


_REGISTRY = build_registry(METHOD_TABLE, METHOD_ALIASES)
_METHODS = MappingProxyType({k: m for k, m in _REGISTRY.items() if k == m.name})


def all_methods() -> Mapping[str, MethodDescriptor]:
    """Registered methods by name, aliases excluded."""
    return _METHODS


def method_names() -> tuple[str, ...]:
    return tuple(sorted(all_methods()))


def lookup(name: str) -> MethodDescriptor | UnknownMethod:
    key = (name or "").strip().lower()
    descriptor = _REGISTRY.get(key)
    if descriptor is None:
        return UnknownMethod(method=key or name)
    return descriptor
