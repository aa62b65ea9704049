"""Schemas for payments, transfers, recurring charges and budget goals."""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from app.config import settings
from app.core.validation import (
    Err,
    optional_text,
    required_text,
    unwrap,
    validate_amount,
    validate_budget_category,
    validate_budget_period,
    validate_date,
    validate_frequency,
    validate_payment_status,
    validate_transaction_type,
)
from app.schemas.common import ApiModel, blank_to_none


# ===== Payments =====

class PaymentCreate(ApiModel):
    amount: Decimal
    recipient: str
    payment_date: date = Field(alias="date")
    status: str = "pending"
    card_id: UUID | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> Decimal:
        return unwrap(validate_amount("0.01", 1000000, allow_negative=False)(value))

    @field_validator("recipient", mode="before")
    @classmethod
    def check_recipient(cls, value: Any) -> str:
        return unwrap(required_text("Recipient", 200)(value))

    @field_validator("payment_date", mode="before")
    @classmethod
    def check_date(cls, value: Any) -> date:
        return unwrap(validate_date(value))

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, value: Any) -> str:
        return unwrap(validate_payment_status(value))

    @field_validator("card_id", mode="before")
    @classmethod
    def check_card_id(cls, value: Any) -> Any:
        return blank_to_none(value)


class PaymentResponse(ApiModel):
    id: UUID
    card_id: UUID | None = None
    amount: float
    recipient: str
    payment_date: date = Field(alias="date")
    status: str
    reference: str


class PaymentCreated(ApiModel):
    message: str
    id: UUID
    reference: str


# ===== Transfers =====

class TransferRequest(ApiModel):
    card_id: UUID
    recipient_name: str
    recipient_contact: str = ""
    amount: Decimal
    note: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> Decimal:
        result = validate_amount()(value)
        if isinstance(result, Err) or result.value <= 0:
            raise ValueError("Please enter a valid amount")
        if result.value > settings.transfer_max_amount:
            raise ValueError(f"Transfer amount cannot exceed ${settings.transfer_max_amount:,}")
        return result.value

    @field_validator("recipient_name", mode="before")
    @classmethod
    def check_recipient(cls, value: Any) -> str:
        return unwrap(required_text("Recipient name", 200)(value))

    @field_validator("recipient_contact", mode="before")
    @classmethod
    def check_contact(cls, value: Any) -> str:
        return unwrap(optional_text(200)(value))

    @field_validator("note", mode="before")
    @classmethod
    def check_note(cls, value: Any) -> str:
        return unwrap(optional_text(500)(value))


class TransferResponse(ApiModel):
    message: str
    reference: str
    amount: float
    recipient: str
    new_balance: float


# ===== Recurring charges =====

class RecurringCreate(ApiModel):
    title: str
    amount: Decimal
    category: str = Field(default="other", alias="type")
    frequency: str = "monthly"
    next_due_date: date
    icon: str = "circle"

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, value: Any) -> str:
        return unwrap(required_text("Title", 200)(value))

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> Decimal:
        return unwrap(validate_amount()(value))

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, value: Any) -> str:
        return unwrap(validate_transaction_type(value))

    @field_validator("frequency", mode="before")
    @classmethod
    def check_frequency(cls, value: Any) -> str:
        return unwrap(validate_frequency(value))

    @field_validator("next_due_date", mode="before")
    @classmethod
    def check_due_date(cls, value: Any) -> date:
        return unwrap(validate_date(value))

    @field_validator("icon", mode="before")
    @classmethod
    def check_icon(cls, value: Any) -> str:
        return unwrap(optional_text(50, default="circle")(value))


class RecurringResponse(ApiModel):
    id: UUID
    title: str
    amount: float
    category: str = Field(alias="type")
    frequency: str
    next_due_date: date
    icon: str
    is_active: bool


class RecurringCreated(ApiModel):
    message: str
    id: UUID


# ===== Budget goals =====

class BudgetGoalSet(ApiModel):
    category: str
    amount_limit: Decimal
    period: str = "monthly"

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, value: Any) -> str:
        return unwrap(validate_budget_category(value))

    @field_validator("amount_limit", mode="before")
    @classmethod
    def check_limit(cls, value: Any) -> Decimal:
        return unwrap(validate_amount(1, 10000000, allow_negative=False)(value))

    @field_validator("period", mode="before")
    @classmethod
    def check_period(cls, value: Any) -> str:
        return unwrap(validate_budget_period(value))


class BudgetGoalResponse(ApiModel):
    id: UUID
    category: str
    amount_limit: float
    period: str
