"""
Input Validation

Checks that run before any network call. A failure raises
FormValidationError, whose message is shown inline next to the form; these
are user mistakes, not system faults, and are never logged as errors.

Validation never silently fixes input beyond trimming whitespace.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union


AMOUNT_ERROR = "Amount must be a positive number"
CREDENTIALS_ERROR = "Email and password are required"
EMPLOYEE_NAME_ERROR = "Employee name is required"


class FormValidationError(Exception):
    """Input rejected locally, before contacting the data platform."""
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def _to_decimal(raw: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """Parse a finite decimal, or None if raw is not one."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_amount(raw: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse a transaction amount.
    
    The amount must be a finite number strictly greater than zero.
    
    Raises:
        FormValidationError: For empty, non-numeric, non-finite, zero
            or negative input
    """
    value = _to_decimal(raw)
    if value is None or value <= 0:
        raise FormValidationError(AMOUNT_ERROR, field="amount")
    return value


def parse_optional_money(
    raw: Union[str, int, float, Decimal, None],
    field: str,
    label: Optional[str] = None,
) -> Optional[Decimal]:
    """
    Parse an optional non-negative money field.
    
    Blank input means "not set" and returns None.
    """
    if raw is None or not str(raw).strip():
        return None
    value = _to_decimal(raw)
    if value is None or value < 0:
        raise FormValidationError(
            f"{label or field.replace('_', ' ').capitalize()} must be a non-negative number",
            field=field,
        )
    return value


def require_credentials(email: Optional[str], password: Optional[str]) -> tuple[str, str]:
    """
    Check sign-in credentials are present.
    
    Returns the trimmed email and the password as typed.
    """
    email = (email or "").strip()
    if not email or not password:
        raise FormValidationError(CREDENTIALS_ERROR)
    return email, password


def require_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise FormValidationError(EMPLOYEE_NAME_ERROR, field="name")
    return name
