"""Effective tag resolution for a customer + delivery address.

Pure functions, no I/O. Address overrides replace customer tags that share a
prefix; tags of other prefixes pass through. Output order is every surviving
customer tag (original order) followed by every override (original order).

    customer: [sconto:45, clienti:idraulico]   overrides: [sconto:50]
    effective: [clienti:idraulico, sconto:50]
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable, Sequence

from domain.entities.tag import TagReference


class TagSource(StrEnum):
    """Where an effective tag came from."""

    CUSTOMER = "customer"
    ADDRESS_OVERRIDE = "address_override"


@dataclass(frozen=True, slots=True)
class EffectiveTag:
    """Read-only value object: one resolved tag with provenance."""

    prefix: str
    tag: TagReference
    source: TagSource


def find_by_prefix(refs: Iterable[TagReference], prefix: str) -> TagReference | None:
    """Return the entry holding ``prefix``, if any."""
    return next((ref for ref in refs if ref.prefix == prefix), None)


def replace_by_prefix(
    refs: Sequence[TagReference], new_ref: TagReference
) -> list[TagReference]:
    """Drop any entry sharing ``new_ref``'s prefix, then append ``new_ref``.

    This is the only way tags are added to an owning list, which keeps the
    one-tag-per-prefix invariant.
    """
    return [ref for ref in refs if ref.prefix != new_ref.prefix] + [new_ref]


def remove_by_full_tag(refs: Sequence[TagReference], full_tag: str) -> list[TagReference]:
    """Drop the entry with exactly ``full_tag``. Absent tags leave the list as is."""
    return [ref for ref in refs if ref.full_tag != full_tag]


def _one_per_prefix(refs: Sequence[TagReference]) -> list[TagReference]:
    # Identity for lists built through replace_by_prefix; older stored data
    # may carry duplicates, which collapse the same way (last one wins).
    collapsed: list[TagReference] = []
    for ref in refs:
        collapsed = replace_by_prefix(collapsed, ref)
    return collapsed


def resolve_effective_tags_detailed(
    customer_tags: Sequence[TagReference] | None,
    address_overrides: Sequence[TagReference] | None,
) -> list[EffectiveTag]:
    """Resolve the effective tags with their provenance."""
    defaults = _one_per_prefix(customer_tags or [])
    overrides = _one_per_prefix(address_overrides or [])
    overridden_prefixes = {ref.prefix for ref in overrides}

    resolved = [
        EffectiveTag(prefix=ref.prefix, tag=ref, source=TagSource.CUSTOMER)
        for ref in defaults
        if ref.prefix not in overridden_prefixes
    ]
    resolved.extend(
        EffectiveTag(prefix=ref.prefix, tag=ref, source=TagSource.ADDRESS_OVERRIDE)
        for ref in overrides
    )
    return resolved


def resolve_effective_tags(
    customer_tags: Sequence[TagReference] | None,
    address_overrides: Sequence[TagReference] | None,
) -> list[str]:
    """Resolve the effective full tag strings for a customer + address."""
    return [
        entry.tag.full_tag
        for entry in resolve_effective_tags_detailed(customer_tags, address_overrides)
    ]
