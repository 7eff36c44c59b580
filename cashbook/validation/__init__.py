"""Validation package."""

from cashbook.validation.validator import (
    AMOUNT_ERROR,
    CREDENTIALS_ERROR,
    EMPLOYEE_NAME_ERROR,
    FormValidationError,
    parse_amount,
    parse_optional_money,
    require_credentials,
    require_name,
)

__all__ = [
    "AMOUNT_ERROR",
    "CREDENTIALS_ERROR",
    "EMPLOYEE_NAME_ERROR",
    "FormValidationError",
    "parse_amount",
    "parse_optional_money",
    "require_credentials",
    "require_name",
]
