"""
Invoice form validation.

Turns the untrusted values submitted by the create / edit invoice forms into
a typed record, or into a field -> messages map describing every field that
failed. Pure: no I/O, no logging, never raises for bad input.

The invoice id and date are not part of the form; the mutation pipeline
assigns them.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from dashboard.schemas.invoices import InvoiceStatus

CUSTOMER_REQUIRED_MESSAGE = "Please select a customer."
AMOUNT_NOT_POSITIVE_MESSAGE = "Please enter an amount greater than $0."
AMOUNT_TOO_LARGE_MESSAGE = "Please enter an amount of at most $21,474,836.47."
AMOUNT_PRECISION_MESSAGE = "Please enter an amount with at most two decimal places."
STATUS_INVALID_MESSAGE = "Please select an invoice status."

# amounts are stored as cents in a Postgres integer column
MAX_AMOUNT_IN_CENTS = 2**31 - 1
MAX_AMOUNT = Decimal(MAX_AMOUNT_IN_CENTS).scaleb(-2)
CENT = Decimal("0.01")

INVOICE_FORM_FIELDS = ("customerId", "amount", "status")
INVOICE_STATUSES = ("pending", "paid")


def parse_amount(raw: Any) -> Optional[Decimal]:
    """
    Parse a submitted amount into a finite Decimal.

    Accepts numeric text (surrounding whitespace allowed) and int/float values.
    Returns None for anything else (missing, blank, non-numeric, NaN,
    infinities, booleans) instead of raising.

    >>> parse_amount(" 12.50 ")
    Decimal('12.50')
    >>> parse_amount("abc") is None
    True
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not value.is_finite():
        return None
    return value


class InvoiceFormSchema(BaseModel):
    """
    Accepted shape of an invoice form submission.

    Each field has its own before-validator so that a failure in one field
    never hides a failure in another.
    """
    customer_id: str = Field(..., alias="customerId")
    amount: Decimal = Field(..., description="Amount in major currency units, > 0, in whole cents")
    status: InvoiceStatus

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("customer_id", mode="before")
    @classmethod
    def customer_must_be_selected(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("customer_required", CUSTOMER_REQUIRED_MESSAGE)
        return value.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def amount_must_be_positive(cls, value: Any) -> Decimal:
        amount = parse_amount(value)
        if amount is None or amount <= 0:
            raise PydanticCustomError("amount_not_positive", AMOUNT_NOT_POSITIVE_MESSAGE)
        if amount > MAX_AMOUNT:
            raise PydanticCustomError("amount_too_large", AMOUNT_TOO_LARGE_MESSAGE)
        if amount != amount.quantize(CENT):
            raise PydanticCustomError("amount_precision", AMOUNT_PRECISION_MESSAGE)
        return amount

    @field_validator("status", mode="before")
    @classmethod
    def status_must_be_known(cls, value: Any) -> str:
        if not isinstance(value, str) or value not in INVOICE_STATUSES:
            raise PydanticCustomError("status_invalid", STATUS_INVALID_MESSAGE)
        return value


@dataclass(frozen=True)
class ValidationSuccess:
    data: InvoiceFormSchema
    success: Literal[True] = True


@dataclass(frozen=True)
class ValidationFailure:
    field_errors: Dict[str, List[str]]
    success: Literal[False] = False


ValidationResult = Union[ValidationSuccess, ValidationFailure]


def _field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "form"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def validate_invoice_form(raw: Mapping[str, Any]) -> ValidationResult:
    """
    Validate the editable invoice fields (used by both create and update).

    Args:
        raw: Submitted values keyed by form field name
             (customerId, amount, status). Other keys are ignored.

    Returns:
        ValidationSuccess with the typed record, or ValidationFailure with
        a message list for every failing field.

    Example:
        >>> result = validate_invoice_form({"customerId": "c1", "amount": "0", "status": "paid"})
        >>> result.field_errors
        {'amount': ['Please enter an amount greater than $0.']}
    """
    candidate = {field: raw.get(field) for field in INVOICE_FORM_FIELDS}
    try:
        return ValidationSuccess(data=InvoiceFormSchema.model_validate(candidate))
    except ValidationError as exc:
        return ValidationFailure(field_errors=_field_errors(exc))
