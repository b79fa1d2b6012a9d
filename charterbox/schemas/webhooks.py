"""Pydantic schemas for inbound webhook payloads and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WooCommerceBilling(BaseModel):
    """Billing block of a WooCommerce order."""

    model_config = ConfigDict(extra="ignore")

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""


class WooCommerceMeta(BaseModel):
    """Line item metadata entry (booking date, time slot, etc.)."""

    model_config = ConfigDict(extra="ignore")

    key: str = ""
    value: Any = None
    display_key: str | None = None
    display_value: Any = None


class WooCommerceLineItem(BaseModel):
    """A product line of a WooCommerce order."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    name: str = ""
    quantity: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    meta_data: list[WooCommerceMeta] = Field(default_factory=list)

    @field_validator("price", mode="before")
    @classmethod
    def _blank_price(cls, value: Any) -> Any:
        return 0 if value in (None, "") else value


class WooCommerceOrder(BaseModel):
    """Subset of the WooCommerce "order.created" webhook payload we consume."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    status: str = ""
    billing: WooCommerceBilling = Field(default_factory=WooCommerceBilling)
    total: float = 0.0
    payment_method_title: str = ""
    transaction_id: str = ""
    line_items: list[WooCommerceLineItem] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: int | str) -> int | str:
        if isinstance(value, str) and not value.strip():
            raise ValueError("order id must not be blank")
        return value

    @field_validator("total", mode="before")
    @classmethod
    def _blank_total(cls, value: Any) -> Any:
        return 0 if value in (None, "") else value


class WebhookResponse(BaseModel):
    """Response returned to webhook senders."""

    message: str
    id: str | None = None
    inserted: int = 0
    updated: int = 0
    failed: int = 0
