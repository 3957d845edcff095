"""Filter promotions and packaging pricing by a customer's effective tags."""

from dataclasses import replace
from typing import Iterable, Sequence

from domain.entities.pricing import PackagingOption, PackagingPricing, Promotion


def _matches(tag_filter: Sequence[str], effective: set[str]) -> bool:
    """An empty filter matches everyone; otherwise any overlap matches."""
    if not tag_filter:
        return True
    return any(tag in effective for tag in tag_filter)


def filter_promotions_by_tags(
    promotions: Iterable[Promotion], effective_tags: Iterable[str]
) -> list[Promotion]:
    """Keep untagged promotions plus tagged ones matching an effective tag."""
    effective = set(effective_tags)
    return [promo for promo in promotions if _matches(promo.tag_filter, effective)]


def _resolve_pricing(
    pricing: PackagingPricing | None, effective: set[str]
) -> PackagingPricing | None:
    if pricing is None or _matches(pricing.tag_filter, effective):
        return pricing
    # Tagged pricing for another tier: no price for this customer
    return None


def resolve_packaging_by_tags(
    packaging_options: Iterable[PackagingOption], effective_tags: Iterable[str]
) -> list[PackagingOption]:
    """Return copies of the options with pricing and promotions resolved."""
    effective = set(effective_tags)
    resolved = []
    for option in packaging_options:
        promotions = option.promotions
        if promotions is not None:
            promotions = tuple(filter_promotions_by_tags(promotions, effective))
        resolved.append(
            replace(
                option,
                pricing=_resolve_pricing(option.pricing, effective),
                promotions=promotions,
            )
        )
    return resolved
