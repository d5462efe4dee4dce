"""Standard error codes for refund validation and calculation.

Validation problems are reported as ValidationError values collected into a
list; they are never raised. RefundCalculationError is reserved for results
that break the output invariants.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Error taxonomy for refund processing."""

    # Validation error codes (E001-E004)
    INVALID_DATE = "E001"
    INVALID_AMOUNT = "E002"
    MISSING_REQUIRED_FIELD = "E003"
    DATE_RANGE_VIOLATION = "E004"

    # Calculation error codes (E101)
    CALCULATION_FAILURE = "E101"


# Short category titles, prefixed to detailed messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE: "Invalid date",
    ErrorCode.INVALID_AMOUNT: "Invalid amount",
    ErrorCode.MISSING_REQUIRED_FIELD: "Missing required field",
    ErrorCode.DATE_RANGE_VIOLATION: "Date out of range",
    ErrorCode.CALCULATION_FAILURE: "Calculation failed",
}

# Guidance shown to the person filling in the refund form
USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE: "There is a problem with a date you entered.",
    ErrorCode.INVALID_AMOUNT: "There is a problem with an amount you entered.",
    ErrorCode.MISSING_REQUIRED_FIELD: "A required field has not been filled in.",
    ErrorCode.DATE_RANGE_VIOLATION: "The dates you entered are not in an acceptable range.",
    ErrorCode.CALCULATION_FAILURE: "The refund could not be calculated.",
}


class ValidationError(BaseModel):
    """A single problem found while validating a refund input."""

    model_config = ConfigDict(strict=True, frozen=True)

    error_code: ErrorCode
    field: str
    message: str
    details: Optional[str] = None

    @property
    def code(self) -> str:
        """Short error code such as E002, used in log lines."""
        return self.error_code.value

    @property
    def user_message(self) -> str:
        """Message suitable for display next to the form."""
        text = USER_MESSAGES[self.error_code]
        return f"{text} {self.details}" if self.details else text

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        field: str,
        details: Optional[str] = None,
    ) -> "ValidationError":
        """Create a ValidationError from an error code.

        Args:
            code: The error code
            field: Input field the problem relates to
            details: Specific description of the problem

        Returns:
            A ValidationError with the category message for the code.
        """
        message = ERROR_MESSAGES[code]
        if details:
            message = f"{message}: {details}"
        return cls(error_code=code, field=field, message=message, details=details)


class RefundCalculationError(Exception):
    """Raised when a computed result breaks the refund output invariants.

    Validated inputs never produce this; it signals a defect in the rules.
    """

    def __init__(self, code: ErrorCode, details: Optional[str] = None):
        self.code = code
        self.details = details
        self.message = ERROR_MESSAGES[code] if not details else f"{ERROR_MESSAGES[code]}: {details}"
        super().__init__(self.message)

    def to_validation_error(self, field: str = "result") -> ValidationError:
        """Convert this exception to a ValidationError for reporting."""
        return ValidationError.from_code(self.code, field, self.details)


def format_user_messages(errors: list[ValidationError]) -> list[str]:
    """Render validation errors for display to the end user.

    Args:
        errors: Errors returned by a validator

    Returns:
        One message per error, in the order reported.
    """
    return [error.user_message for error in errors]
