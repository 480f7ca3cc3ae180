from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
from urllib.parse import quote

from fitapi.registry.model import (
    CURRENT_USER,
    USER_ID,
    AuthRequirement,
    FlatTemplate,
    ResourceTemplate,
    VariantTemplate,
    placeholder_name,
)
from fitapi.validate.params import META_FIELDS, ParameterBag, as_text

COLLECTION_PATH = "collection-path"
SUBSCRIPTION_ID = "subscription-id"
ALL_COLLECTIONS = "all"
RESOURCE_PATH = "resource-path"  # spans several segments, e.g. activities/steps

# unreserved characters plus the ":" and "@" a path segment may carry as is
_SEGMENT_SAFE = "-._~:@"


@dataclass(frozen=True)
class Resolution:
    segments: Tuple[str, ...]
    consumed: Tuple[str, ...]  # parameter names bound into the path
    variant: str | None = None  # selected variant key; None for flat templates


@dataclass(frozen=True)
class Unresolvable:
    candidates: Tuple[Tuple[str, ...], ...]  # placeholder set per variant, declared order
    supplied: Tuple[str, ...]


def placeholders(template: ResourceTemplate) -> Tuple[Tuple[str, ...], ...]:
    """Placeholder names of each shape the template can take."""
    if isinstance(template, FlatTemplate):
        return (template.placeholders,)
    if isinstance(template, VariantTemplate):
        return tuple(flat.placeholders for _, flat in template.variants)
    raise TypeError(f"unsupported resource template: {type(template).__name__}")


def escape_segment(value: str) -> str:
    return quote(value, safe=_SEGMENT_SAFE)


def _escape_value(name: str, value: str) -> str:
    if name == RESOURCE_PATH:
        return "/".join(escape_segment(part) for part in value.split("/"))
    return escape_segment(value)


def _satisfied(names: Tuple[str, ...], bag: ParameterBag) -> bool:
    return all(bag.filled(n) for n in names)


def _supplied(bag: ParameterBag) -> Tuple[str, ...]:
    return tuple(k for k in bag.keys() if k not in META_FIELDS)


def _substitute(
    segments: Tuple[str, ...], bag: ParameterBag, auth: AuthRequirement
) -> tuple[list[str], list[str]]:
    out: list[str] = []
    consumed: list[str] = []

    fused = any(placeholder_name(s) == SUBSCRIPTION_ID for s in segments)
    collection = as_text(bag.get(COLLECTION_PATH)) if bag.filled(COLLECTION_PATH) else None
    all_collections = collection is None or collection == ALL_COLLECTIONS

    for seg in segments:
        name = placeholder_name(seg)

        if name is None:
            if (
                seg == CURRENT_USER
                and auth is AuthRequirement.REQUIRED_UNLESS_USER_ID
                and bag.filled(USER_ID)
            ):
                out.append(escape_segment(as_text(bag.get(USER_ID))))
                consumed.append(USER_ID)
            else:
                out.append(seg)
            continue

        if not bag.filled(name):
            # only reachable for a template that skipped validation
            out.append(seg)
            continue

        consumed.append(name)
        value = _escape_value(name, as_text(bag.get(name)))

        if name == COLLECTION_PATH:
            # folded into subscription-id, or dropped for "all"
            if fused or all_collections:
                continue
            out.append(value)
        elif name == SUBSCRIPTION_ID:
            out.append(value if all_collections else f"{value}-{escape_segment(collection)}")
        else:
            out.append(value)

    return out, consumed


def resolve(
    template: ResourceTemplate, bag: ParameterBag, auth: AuthRequirement
) -> Resolution | Unresolvable:
    """
    Turn a resource template into concrete path segments.

    Variants are tried in declared order and the first one whose placeholders
    are all supplied wins. Optional trailing segments are appended when any of
    their triggers is supplied.
    """
    variant: str | None = None

    if isinstance(template, FlatTemplate):
        if not _satisfied(template.placeholders, bag):
            return Unresolvable(candidates=(template.placeholders,), supplied=_supplied(bag))
        chosen = template.segments

    elif isinstance(template, VariantTemplate):
        for key, flat in template.variants:
            if _satisfied(flat.placeholders, bag):
                variant, chosen = key, flat.segments
                break
        else:
            return Unresolvable(candidates=placeholders(template), supplied=_supplied(bag))

        base_names = FlatTemplate(chosen).placeholders
        for opt in template.optional:
            if not any(bag.filled(t) for t in opt.triggers):
                continue
            if not _satisfied(opt.placeholders, bag):
                return Unresolvable(
                    candidates=(base_names + opt.placeholders,), supplied=_supplied(bag)
                )
            chosen = chosen + opt.segments

    else:
        raise TypeError(f"unsupported resource template: {type(template).__name__}")

    segments, consumed = _substitute(chosen, bag, auth)
    return Resolution(segments=tuple(segments), consumed=tuple(consumed), variant=variant)
