"""Unit tests for Result-based field validators."""

from datetime import date
from decimal import Decimal

import pytest

from app.core.validation import (
    Err,
    Ok,
    pipeline,
    sanitize_string,
    unwrap,
    validate_amount,
    validate_budget_category,
    validate_card_brand,
    validate_card_expiry,
    validate_currency,
    validate_date,
    validate_email,
    validate_last_four,
    validate_password,
    validate_transaction_type,
)


class TestPipeline:
    def test_passes_normalized_value_along(self):
        result = pipeline(" 5 ", lambda v: Ok(v.strip()), lambda v: Ok(int(v)))

        assert result == Ok(5)

    def test_stops_at_first_error(self):
        calls = []

        def record(value):
            calls.append(value)
            return Ok(value)

        result = pipeline("x", lambda v: Err("first"), record)

        assert result == Err("first")
        assert calls == []

    def test_unwrap_raises_value_error(self):
        with pytest.raises(ValueError, match="boom"):
            unwrap(Err("boom"))

        assert unwrap(Ok(3)) == 3


class TestPasswordPolicy:
    """Rules are checked in order: length, upper, lower, digit, symbol."""

    @pytest.mark.parametrize(
        "password, message",
        [
            ("Ab1!", "at least 8 characters"),
            ("lowercase1!", "uppercase"),
            ("UPPERCASE1!", "lowercase"),
            ("NoDigits!!", "number"),
            ("NoSymbol123", "special character"),
        ],
    )
    def test_rejects_weak_passwords(self, password, message):
        result = validate_password(password)

        assert isinstance(result, Err)
        assert message in result.error

    def test_accepts_strong_password(self):
        assert validate_password("SecurePass123!") == Ok("SecurePass123!")

    def test_missing_password(self):
        assert validate_password(None) == Err("Password is required")


class TestEmail:
    def test_trims_and_lowercases(self):
        assert validate_email("  User@Example.COM ") == Ok("user@example.com")

    @pytest.mark.parametrize("email", ["not-an-email", "a@b", "a b@c.com", "@example.com"])
    def test_rejects_malformed(self, email):
        assert isinstance(validate_email(email), Err)

    def test_missing(self):
        assert validate_email("") == Err("Email is required")


class TestAmount:
    def test_rounds_to_cents(self):
        assert validate_amount()("12.345") == Ok(Decimal("12.35"))

    def test_accepts_negative_by_default(self):
        assert validate_amount()(-40) == Ok(Decimal("-40.00"))

    def test_rejects_negative_when_disallowed(self):
        assert validate_amount(0, 100, allow_negative=False)(-1) == Err("Amount cannot be negative")

    @pytest.mark.parametrize("value", ["abc", None, True, float("nan"), float("inf")])
    def test_rejects_non_numbers(self, value):
        assert validate_amount()(value) == Err("Amount must be a valid number")

    def test_enforces_bounds(self):
        result = validate_amount(1, 100)(1000)

        assert isinstance(result, Err)
        assert "between" in result.error


class TestDate:
    def test_parses_iso_date(self):
        assert validate_date("2024-06-15") == Ok(date(2024, 6, 15))

    def test_rejects_wrong_format(self):
        assert validate_date("15/06/2024") == Err("Date must be in YYYY-MM-DD format")

    def test_rejects_impossible_date(self):
        assert validate_date("2024-02-30") == Err("Invalid date")


class TestCardFields:
    def test_expiry_is_optional(self):
        assert validate_card_expiry("") == Ok("")
        assert validate_card_expiry("09/27") == Ok("09/27")
        assert isinstance(validate_card_expiry("13/27"), Err)

    def test_last_four_digits_only(self):
        assert validate_last_four("1234") == Ok("1234")
        assert isinstance(validate_last_four("12a4"), Err)
        assert isinstance(validate_last_four("12345"), Err)

    def test_brand_and_currency_normalized(self):
        assert validate_card_brand("VISA") == Ok("visa")
        assert validate_card_brand(None) == Ok("visa")
        assert validate_currency("eur") == Ok("EUR")
        assert isinstance(validate_currency("XYZ"), Err)

    def test_transaction_type_closed_set(self):
        assert validate_transaction_type("Food") == Ok("food")
        assert isinstance(validate_transaction_type("lottery"), Err)


class TestSanitize:
    def test_strips_markup_and_script_vectors(self):
        cleaned = sanitize_string('  <b>Coffee</b> onclick=alert(1) javascript:x  ')

        assert "<" not in cleaned
        assert "onclick=" not in cleaned
        assert "javascript:" not in cleaned
        assert cleaned.startswith("Coffee")

    def test_truncates(self):
        assert sanitize_string("x" * 300, 10) == "x" * 10

    def test_non_string_is_empty(self):
        assert sanitize_string(42) == ""

    def test_budget_category_cannot_be_only_markup(self):
        assert validate_budget_category("<i></i>") == Err("Category cannot be empty")
