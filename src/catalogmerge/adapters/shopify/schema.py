"""Pydantic models describing the Shopify Admin and Storefront API payloads."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# Admin REST -----------------------------------------------------------------


class AdminImage(ShopifyBaseModel):
    id: int
    product_id: int | None = None
    position: int
    src: str
    alt: str | None = None
    width: int | None = None
    height: int | None = None
    variant_ids: list[int] = Field(default_factory=list)

    @field_validator("variant_ids", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class AdminImagesResponse(ShopifyBaseModel):
    images: list[AdminImage]


# Storefront GraphQL ---------------------------------------------------------


class GraphQLErrorPayload(ShopifyBaseModel):
    message: str


class MoneyPayload(ShopifyBaseModel):
    amount: Decimal
    currency_code: str = Field(alias="currencyCode")


class ImagePayload(ShopifyBaseModel):
    url: str


class SelectedOption(ShopifyBaseModel):
    name: str
    value: str


class VariantPayload(ShopifyBaseModel):
    id: str
    available_for_sale: bool = Field(default=True, alias="availableForSale")
    price: MoneyPayload
    selected_options: list[SelectedOption] = Field(
        default_factory=list, alias="selectedOptions"
    )
    image: ImagePayload | None = None


class ImageConnection(ShopifyBaseModel):
    nodes: list[ImagePayload] = Field(default_factory=list)


class VariantConnection(ShopifyBaseModel):
    nodes: list[VariantPayload] = Field(default_factory=list)


class ProductPayload(ShopifyBaseModel):
    id: str
    handle: str
    title: str = ""
    images: ImageConnection = Field(default_factory=ImageConnection)
    variants: VariantConnection = Field(default_factory=VariantConnection)


class ProductConnection(ShopifyBaseModel):
    nodes: list[ProductPayload] = Field(default_factory=list)


class ProductByHandleData(ShopifyBaseModel):
    product: ProductPayload | None = None


class ProductsData(ShopifyBaseModel):
    products: ProductConnection


class GraphQLResponse(ShopifyBaseModel):
    data: dict[str, object] | None = None
    errors: list[GraphQLErrorPayload] | None = None
