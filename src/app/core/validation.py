"""Field validators returning Result values.

Every validator takes a raw value and returns either ``Ok(value)`` carrying the
normalized value or ``Err(message)``. ``pipeline`` chains validators and stops
at the first failure. Pydantic schemas call ``unwrap`` inside their
``field_validator``s so a failure surfaces as a 400 validation error.
"""

import math
import re
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: str


Result = Union[Ok[T], Err]
Validator = Callable[[Any], "Result[Any]"]


def pipeline(value: Any, *validators: Validator) -> Result:
    """Run validators in order, feeding each the previous normalized value."""
    for validator in validators:
        result = validator(value)
        if isinstance(result, Err):
            return result
        value = result.value
    return Ok(value)


def unwrap(result: Result) -> Any:
    """Return the Ok value or raise ValueError with the Err message."""
    if isinstance(result, Err):
        raise ValueError(result.error)
    return result.value


# ===== Closed enumerations =====

ALLOWED_BRANDS = ("visa", "mastercard", "amex", "discover", "rupay", "jcb", "diners", "unionpay")
ALLOWED_CURRENCIES = ("USD", "EUR", "GBP", "INR", "JPY", "AUD", "CAD", "CHF", "CNY", "SEK", "NZD", "SGD")
TRANSACTION_CATEGORIES = (
    "grocery", "food", "transport", "entertainment", "shopping",
    "bills", "health", "education", "travel", "subscription",
    "salary", "freelance", "investment", "transfer", "other",
)
ALLOWED_FREQUENCIES = ("daily", "weekly", "biweekly", "monthly", "quarterly", "yearly")
PAYMENT_STATUSES = ("pending", "completed", "failed", "cancelled")
BUDGET_PERIODS = ("daily", "weekly", "monthly", "yearly")

PASSWORD_SYMBOLS = '!@#$%^&*(),.?":{}|<>'
PASSWORD_MIN_LENGTH = 8

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")
_LAST_FOUR_RE = re.compile(r"^\d{4}$")
_TAG_RE = re.compile(r"<[^>]*>")
_EVENT_HANDLER_RE = re.compile(r"on\w+\s*=", re.IGNORECASE)
_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)

_CENT = Decimal("0.01")


# ===== Sanitization =====

def sanitize_string(value: Any, max_length: int = 255) -> str:
    """Trim, strip markup and script vectors, and truncate."""
    if not isinstance(value, str):
        return ""
    cleaned = _TAG_RE.sub("", value.strip())
    cleaned = cleaned.replace("<", "").replace(">", "")
    cleaned = _JS_PROTOCOL_RE.sub("", cleaned)
    cleaned = _EVENT_HANDLER_RE.sub("", cleaned)
    return cleaned[:max_length]


def required_text(field: str, max_length: int = 255) -> Validator:
    """Validator for a sanitized, non-empty free-text field."""

    def validate(value: Any) -> Result[str]:
        cleaned = sanitize_string(value, max_length)
        if not cleaned:
            return Err(f"{field} is required")
        return Ok(cleaned)

    return validate


def optional_text(max_length: int = 255, default: str = "") -> Validator:
    def validate(value: Any) -> Result[str]:
        return Ok(sanitize_string(value, max_length) or default)

    return validate


# ===== Identity =====

def validate_email(value: Any) -> Result[str]:
    if not value or not isinstance(value, str):
        return Err("Email is required")
    normalized = value.strip().lower()[:254]
    if not _EMAIL_RE.match(normalized):
        return Err("Please enter a valid email address")
    return Ok(normalized)


def _min_length(value: str) -> Result[str]:
    if len(value) < PASSWORD_MIN_LENGTH:
        return Err(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    return Ok(value)


def _has_uppercase(value: str) -> Result[str]:
    if not any(ch.isupper() for ch in value):
        return Err("Password must contain at least one uppercase letter")
    return Ok(value)


def _has_lowercase(value: str) -> Result[str]:
    if not any(ch.islower() for ch in value):
        return Err("Password must contain at least one lowercase letter")
    return Ok(value)


def _has_digit(value: str) -> Result[str]:
    if not any(ch.isdigit() for ch in value):
        return Err("Password must contain at least one number")
    return Ok(value)


def _has_symbol(value: str) -> Result[str]:
    if not any(ch in PASSWORD_SYMBOLS for ch in value):
        return Err("Password must contain at least one special character (!@#$%^&*...)")
    return Ok(value)


def _is_string(field: str) -> Validator:
    def validate(value: Any) -> Result[str]:
        if not isinstance(value, str) or not value:
            return Err(f"{field} is required")
        return Ok(value)

    return validate


def validate_password(value: Any) -> Result[str]:
    """Password policy: length, upper, lower, digit, symbol, in that order."""
    return pipeline(
        value,
        _is_string("Password"),
        _min_length,
        _has_uppercase,
        _has_lowercase,
        _has_digit,
        _has_symbol,
    )


# ===== Money and dates =====

def validate_amount(
    minimum: Decimal | int | str = -1000000,
    maximum: Decimal | int | str = 1000000,
    allow_negative: bool = True,
) -> Validator:
    """Build an amount validator; amounts are rounded to two decimal places."""
    low, high = Decimal(str(minimum)), Decimal(str(maximum))

    def validate(value: Any) -> Result[Decimal]:
        if isinstance(value, bool) or value is None:
            return Err("Amount must be a valid number")
        if isinstance(value, float) and not math.isfinite(value):
            return Err("Amount must be a valid number")
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            return Err("Amount must be a valid number")
        if not amount.is_finite():
            return Err("Amount must be a valid number")
        if not allow_negative and amount < 0:
            return Err("Amount cannot be negative")
        if amount < low or amount > high:
            return Err(f"Amount must be between {low} and {high}")
        return Ok(amount.quantize(_CENT, rounding=ROUND_HALF_UP))

    return validate


def validate_date(value: Any) -> Result[date]:
    """Accept a ``YYYY-MM-DD`` string (or a date) and return a date."""
    if isinstance(value, date):
        return Ok(value)
    if not value or not isinstance(value, str):
        return Err("Date is required")
    trimmed = value.strip()
    if not _DATE_RE.match(trimmed):
        return Err("Date must be in YYYY-MM-DD format")
    try:
        return Ok(date.fromisoformat(trimmed))
    except ValueError:
        return Err("Invalid date")


# ===== Cards =====

def validate_card_expiry(value: Any) -> Result[str]:
    if not value or not isinstance(value, str) or not value.strip():
        return Ok("")
    trimmed = value.strip()
    if not _EXPIRY_RE.match(trimmed):
        return Err("Expiry must be in MM/YY format")
    return Ok(trimmed)


def validate_last_four(value: Any) -> Result[str]:
    if not value or not isinstance(value, str):
        return Err("Last 4 digits are required")
    if not _LAST_FOUR_RE.match(value.strip()):
        return Err("Please enter valid last 4 digits (numbers only)")
    return Ok(value.strip())


def choice(field: str, allowed: tuple[str, ...], default: str | None, upper: bool = False) -> Validator:
    """Validator for a value from a closed set, normalized for case.

    A missing value falls back to ``default``; when ``default`` is None the
    field is required.
    """

    def validate(value: Any) -> Result[str]:
        if not value or not isinstance(value, str):
            if default is None:
                return Err(f"{field} is required")
            return Ok(default)
        normalized = value.strip().upper() if upper else value.strip().lower()
        if normalized not in allowed:
            return Err(f"{field} must be one of: {', '.join(allowed)}")
        return Ok(normalized)

    return validate


validate_card_brand = choice("Card brand", ALLOWED_BRANDS, default="visa")
validate_currency = choice("Currency", ALLOWED_CURRENCIES, default="USD", upper=True)
validate_transaction_type = choice("Transaction type", TRANSACTION_CATEGORIES, default="other")
validate_frequency = choice("Frequency", ALLOWED_FREQUENCIES, default="monthly")
validate_payment_status = choice("Status", PAYMENT_STATUSES, default="pending")
validate_budget_period = choice("Period", BUDGET_PERIODS, default="monthly")


def validate_budget_category(value: Any) -> Result[str]:
    if not value or not isinstance(value, str):
        return Err("Category is required")
    cleaned = sanitize_string(value, 50)
    if not cleaned:
        return Err("Category cannot be empty")
    return Ok(cleaned)
