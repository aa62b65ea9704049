"""Pydantic schemas for card endpoints."""

from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from app.core.validation import (
    Err,
    required_text,
    unwrap,
    validate_amount,
    validate_card_brand,
    validate_card_expiry,
    validate_currency,
    validate_last_four,
)
from app.schemas.common import ApiModel

_opening_balance = validate_amount(0, 10000000, allow_negative=False)


class CardFields(ApiModel):
    """Editable card fields shared by create and update."""

    holder_name: str = Field(description="Cardholder name")
    last_four: str = Field(description="Last 4 digits of card number")
    expiry: str = Field(default="", description="Expiry in MM/YY")
    currency: str = Field(default="USD", description="ISO currency code")
    brand: str = Field(default="visa", description="Card brand")

    @field_validator("holder_name", mode="before")
    @classmethod
    def check_holder_name(cls, value: Any) -> str:
        return unwrap(required_text("Cardholder name", 100)(value))

    @field_validator("last_four", mode="before")
    @classmethod
    def check_last_four(cls, value: Any) -> str:
        return unwrap(validate_last_four(value))

    @field_validator("expiry", mode="before")
    @classmethod
    def check_expiry(cls, value: Any) -> str:
        return unwrap(validate_card_expiry(value))

    @field_validator("currency", mode="before")
    @classmethod
    def check_currency(cls, value: Any) -> str:
        return unwrap(validate_currency(value))

    @field_validator("brand", mode="before")
    @classmethod
    def check_brand(cls, value: Any) -> str:
        return unwrap(validate_card_brand(value))


class CardCreate(CardFields):
    balance: Decimal = Field(default=Decimal("0"), description="Opening balance")

    @field_validator("balance", mode="before")
    @classmethod
    def check_balance(cls, value: Any) -> Decimal:
        # An unusable opening balance falls back to zero rather than failing.
        result = _opening_balance(value)
        return Decimal("0") if isinstance(result, Err) else result.value


class CardUpdate(CardFields):
    id: UUID


class DefaultCardRequest(ApiModel):
    card_id: UUID


class CardResponse(ApiModel):
    """Card data for API responses."""

    id: UUID | None = None
    holder_name: str
    last_four: str
    expiry: str = ""
    balance: float = 0
    currency: str = "USD"
    brand: str = "visa"
    is_default: bool = False


class CardCreated(ApiModel):
    message: str
    id: UUID
