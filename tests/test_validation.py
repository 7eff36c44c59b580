"""Tests for input validation."""

from decimal import Decimal

import pytest

from cashbook.validation import (
    AMOUNT_ERROR,
    CREDENTIALS_ERROR,
    FormValidationError,
    parse_amount,
    parse_optional_money,
    require_credentials,
    require_name,
)


class TestParseAmount:
    """Tests for parse_amount()."""

    @pytest.mark.parametrize("raw", ["0", "-5", "abc", "", "   ", None, "nan", "inf", "-0.00"])
    def test_rejected(self, raw):
        with pytest.raises(FormValidationError) as exc:
            parse_amount(raw)
        assert exc.value.message == AMOUNT_ERROR
        assert exc.value.field == "amount"

    def test_accepted(self):
        assert parse_amount("12.34") == Decimal("12.34")
        assert parse_amount(" 5 ") == Decimal("5")
        assert parse_amount(Decimal("0.01")) == Decimal("0.01")


class TestParseOptionalMoney:
    """Tests for parse_optional_money()."""

    def test_blank_is_none(self):
        assert parse_optional_money("", "base_salary") is None
        assert parse_optional_money(None, "base_salary") is None

    def test_zero_allowed(self):
        assert parse_optional_money("0", "base_salary") == Decimal("0")

    def test_negative_rejected(self):
        with pytest.raises(FormValidationError) as exc:
            parse_optional_money("-1", "base_salary")
        assert exc.value.message == "Base salary must be a non-negative number"

    def test_custom_label(self):
        with pytest.raises(FormValidationError, match="SSS must"):
            parse_optional_money("x", "sss", label="SSS")


class TestCredentials:
    """Tests for require_credentials() and require_name()."""

    @pytest.mark.parametrize("email,password", [
        ("", "secret"),
        ("   ", "secret"),
        ("a@b.com", ""),
        (None, None),
    ])
    def test_missing(self, email, password):
        with pytest.raises(FormValidationError, match=CREDENTIALS_ERROR):
            require_credentials(email, password)

    def test_email_trimmed(self):
        assert require_credentials(" a@b.com ", " pw ") == ("a@b.com", " pw ")

    def test_name_required(self):
        with pytest.raises(FormValidationError):
            require_name("  ")
        assert require_name(" Ana ") == "Ana"
