"""Pydantic schemas for tag-based pricing resolution."""

from decimal import Decimal

from pydantic import BaseModel, Field

from domain.entities.pricing import PackagingOption, PackagingPricing, Promotion


class PromotionSchema(BaseModel):
    """A promotion; an empty ``tag_filter`` applies to everyone."""

    promo_code: str
    promo_label: str | None = None
    promo_row: int | None = None
    discount_percent: Decimal | None = None
    promo_price: Decimal | None = None
    tag_filter: list[str] = Field(default_factory=list)

    def to_entity(self) -> Promotion:
        return Promotion(
            promo_code=self.promo_code,
            promo_label=self.promo_label,
            promo_row=self.promo_row,
            discount_percent=self.discount_percent,
            promo_price=self.promo_price,
            tag_filter=tuple(self.tag_filter),
        )

    @classmethod
    def from_entity(cls, promo: Promotion) -> "PromotionSchema":
        return cls(
            promo_code=promo.promo_code,
            promo_label=promo.promo_label,
            promo_row=promo.promo_row,
            discount_percent=promo.discount_percent,
            promo_price=promo.promo_price,
            tag_filter=list(promo.tag_filter),
        )


class PackagingPricingSchema(BaseModel):
    """Price block, optionally restricted to some tags."""

    list_price: Decimal
    sell_price: Decimal
    sell_discount_pct: Decimal | None = None
    sell_discount_amt: Decimal | None = None
    tag_filter: list[str] = Field(default_factory=list)

    def to_entity(self) -> PackagingPricing:
        return PackagingPricing(
            list_price=self.list_price,
            sell_price=self.sell_price,
            sell_discount_pct=self.sell_discount_pct,
            sell_discount_amt=self.sell_discount_amt,
            tag_filter=tuple(self.tag_filter),
        )

    @classmethod
    def from_entity(cls, pricing: PackagingPricing) -> "PackagingPricingSchema":
        return cls(
            list_price=pricing.list_price,
            sell_price=pricing.sell_price,
            sell_discount_pct=pricing.sell_discount_pct,
            sell_discount_amt=pricing.sell_discount_amt,
            tag_filter=list(pricing.tag_filter),
        )


class PackagingOptionSchema(BaseModel):
    """A sellable packaging with its pricing and promotions."""

    packaging_code: str = Field(..., min_length=1)
    packaging_label: str | None = None
    packaging_type: str | None = None
    pack_size: int = Field(1, ge=1)
    min_order_quantity: int = Field(1, ge=1)
    pricing: PackagingPricingSchema | None = None
    promotions: list[PromotionSchema] | None = None

    def to_entity(self) -> PackagingOption:
        return PackagingOption(
            packaging_code=self.packaging_code,
            packaging_label=self.packaging_label,
            packaging_type=self.packaging_type,
            pack_size=self.pack_size,
            min_order_quantity=self.min_order_quantity,
            pricing=self.pricing.to_entity() if self.pricing else None,
            promotions=(
                tuple(p.to_entity() for p in self.promotions)
                if self.promotions is not None
                else None
            ),
        )

    @classmethod
    def from_entity(cls, option: PackagingOption) -> "PackagingOptionSchema":
        return cls(
            packaging_code=option.packaging_code,
            packaging_label=option.packaging_label,
            packaging_type=option.packaging_type,
            pack_size=option.pack_size,
            min_order_quantity=option.min_order_quantity,
            pricing=(
                PackagingPricingSchema.from_entity(option.pricing) if option.pricing else None
            ),
            promotions=(
                [PromotionSchema.from_entity(p) for p in option.promotions]
                if option.promotions is not None
                else None
            ),
        )


class PricingResolveRequest(BaseModel):
    """Packaging options to resolve for a delivery address."""

    packaging_options: list[PackagingOptionSchema] = Field(..., max_length=200)


class PricingResolveResponse(BaseModel):
    """Effective tags and the packaging options resolved against them."""

    effective_tags: list[str]
    packaging_options: list[PackagingOptionSchema]
