"""
Tests for invoice form validation.

Covers:
- Accepted submissions and the typed record they produce
- One message list per failing field, all fields reported at once
- Amount parsing edge cases (blank, non-numeric, non-finite, negative)
"""

from decimal import Decimal

import pytest

from dashboard.services.validation import (
    AMOUNT_NOT_POSITIVE_MESSAGE,
    AMOUNT_PRECISION_MESSAGE,
    AMOUNT_TOO_LARGE_MESSAGE,
    CUSTOMER_REQUIRED_MESSAGE,
    STATUS_INVALID_MESSAGE,
    ValidationFailure,
    ValidationSuccess,
    parse_amount,
    validate_invoice_form,
)


class TestValidSubmissions:
    """Tests for submissions that pass validation."""

    def test_valid_form_returns_typed_record(self):
        result = validate_invoice_form({"customerId": "c1", "amount": "50", "status": "pending"})

        assert isinstance(result, ValidationSuccess)
        assert result.success is True
        assert result.data.customer_id == "c1"
        assert result.data.amount == Decimal("50")
        assert result.data.status == "pending"

    def test_numeric_amount_is_accepted(self):
        result = validate_invoice_form({"customerId": "c1", "amount": 19.99, "status": "paid"})

        assert result.success is True
        assert result.data.amount == Decimal("19.99")

    def test_amount_text_with_whitespace_and_exponent(self):
        assert validate_invoice_form(
            {"customerId": "c1", "amount": " 12.50 ", "status": "paid"}
        ).data.amount == Decimal("12.50")
        assert validate_invoice_form(
            {"customerId": "c1", "amount": "1e2", "status": "paid"}
        ).data.amount == Decimal("100")

    def test_customer_id_is_stripped(self):
        result = validate_invoice_form({"customerId": "  c1  ", "amount": "5", "status": "paid"})

        assert result.data.customer_id == "c1"

    def test_unknown_fields_are_ignored(self):
        """id and date are assigned by the pipeline, never taken from the form."""
        result = validate_invoice_form({
            "id": "should-not-matter",
            "date": "1999-01-01",
            "customerId": "c1",
            "amount": "5",
            "status": "paid",
        })

        assert result.success is True
        assert not hasattr(result.data, "date")

    def test_input_is_not_mutated(self):
        raw = {"customerId": " c1 ", "amount": "5", "status": "paid"}
        validate_invoice_form(raw)

        assert raw == {"customerId": " c1 ", "amount": "5", "status": "paid"}


class TestFieldErrors:
    """Tests for the field -> messages map returned on failure."""

    def test_zero_amount_reports_only_amount(self):
        result = validate_invoice_form({"customerId": "c1", "amount": "0", "status": "paid"})

        assert isinstance(result, ValidationFailure)
        assert result.success is False
        assert result.field_errors == {"amount": [AMOUNT_NOT_POSITIVE_MESSAGE]}

    def test_empty_form_reports_every_field(self):
        result = validate_invoice_form({})

        assert result.field_errors == {
            "customerId": [CUSTOMER_REQUIRED_MESSAGE],
            "amount": [AMOUNT_NOT_POSITIVE_MESSAGE],
            "status": [STATUS_INVALID_MESSAGE],
        }

    def test_blank_customer_is_rejected(self):
        result = validate_invoice_form({"customerId": "   ", "amount": "5", "status": "paid"})

        assert result.field_errors == {"customerId": [CUSTOMER_REQUIRED_MESSAGE]}

    @pytest.mark.parametrize("status", ["", "PAID", "overdue", None, 1])
    def test_unknown_status_is_rejected(self, status):
        result = validate_invoice_form({"customerId": "c1", "amount": "5", "status": status})

        assert result.field_errors == {"status": [STATUS_INVALID_MESSAGE]}

    @pytest.mark.parametrize("amount", ["", "   ", "abc", "-5", "0.00", "NaN", "Infinity", None, True])
    def test_bad_amount_is_rejected(self, amount):
        result = validate_invoice_form({"customerId": "c1", "amount": amount, "status": "pending"})

        assert result.field_errors == {"amount": [AMOUNT_NOT_POSITIVE_MESSAGE]}

    @pytest.mark.parametrize("amount", ["1e30", "21474836.48", "9" * 29, 1e30])
    def test_amount_beyond_storable_cents_is_rejected(self, amount):
        result = validate_invoice_form({"customerId": "c1", "amount": amount, "status": "pending"})

        assert result.field_errors == {"amount": [AMOUNT_TOO_LARGE_MESSAGE]}

    def test_largest_storable_amount_is_accepted(self):
        result = validate_invoice_form({"customerId": "c1", "amount": "21474836.47", "status": "paid"})

        assert result.success is True

    @pytest.mark.parametrize("amount", ["0.004", "12.345", "0.001", "1e-5"])
    def test_sub_cent_amount_is_rejected(self, amount):
        """Amounts that would not survive conversion to whole cents unchanged."""
        result = validate_invoice_form({"customerId": "c1", "amount": amount, "status": "pending"})

        assert result.field_errors == {"amount": [AMOUNT_PRECISION_MESSAGE]}

    def test_trailing_zeros_beyond_cents_are_accepted(self):
        result = validate_invoice_form({"customerId": "c1", "amount": "12.3400", "status": "paid"})

        assert result.data.amount == Decimal("12.34")

    def test_error_messages_are_exact_text(self):
        """No pydantic prefixes such as 'Value error, ' leak into messages."""
        result = validate_invoice_form({"customerId": "", "amount": "x", "status": "x"})

        for messages in result.field_errors.values():
            assert len(messages) == 1
            assert not messages[0].startswith("Value error")


class TestParseAmount:
    """Tests for the total amount parser."""

    def test_parses_numeric_text(self):
        assert parse_amount("12.34") == Decimal("12.34")
        assert parse_amount(" 7 ") == Decimal("7")

    def test_parses_numbers(self):
        assert parse_amount(3) == Decimal("3")
        assert parse_amount(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("raw", [None, "", " ", "1,000", "12abc", "nan", "-inf", False, [], {}])
    def test_returns_none_for_unparseable_input(self, raw):
        assert parse_amount(raw) is None

    def test_negative_values_parse(self):
        """Sign is checked by the validator, not the parser."""
        assert parse_amount("-5") == Decimal("-5")
