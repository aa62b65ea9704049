"""Transaction request/response schemas."""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from app.core.validation import (
    optional_text,
    required_text,
    unwrap,
    validate_amount,
    validate_date,
    validate_transaction_type,
)
from app.schemas.common import ApiModel, blank_to_none


class TransactionCreate(ApiModel):
    title: str
    txn_date: date = Field(alias="date", description="Transaction day (YYYY-MM-DD)")
    amount: Decimal = Field(description="Signed amount; negative for expenses")
    category: str = Field(default="other", alias="type", description="Transaction category")
    icon: str = "circle"
    card_id: UUID | None = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, value: Any) -> str:
        return unwrap(required_text("Transaction title", 200)(value))

    @field_validator("txn_date", mode="before")
    @classmethod
    def check_date(cls, value: Any) -> date:
        return unwrap(validate_date(value))

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> Decimal:
        return unwrap(validate_amount()(value))

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, value: Any) -> str:
        return unwrap(validate_transaction_type(value))

    @field_validator("icon", mode="before")
    @classmethod
    def check_icon(cls, value: Any) -> str:
        return unwrap(optional_text(50, default="circle")(value))

    @field_validator("card_id", mode="before")
    @classmethod
    def check_card_id(cls, value: Any) -> Any:
        return blank_to_none(value)


class TransactionResponse(ApiModel):
    id: UUID
    card_id: UUID | None = None
    title: str
    txn_date: date = Field(alias="date")
    amount: float
    category: str = Field(alias="type")
    icon: str


class TransactionCreated(ApiModel):
    message: str
    transaction: TransactionResponse
