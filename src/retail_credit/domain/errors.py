"""Domain error classes.

Protocol-agnostic errors that represent credit lifecycle failures.
These errors are translated to appropriate formats (HTTP, CLI, jobs) by protocol adapters.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Protocol-agnostic. Contains business error information that
    can be translated to HTTP or any other caller-facing format.
    """

    # Default error code (can be used as i18n key)
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message (default locale)
            **context: Additional context for error (e.g., credit_id, sequence_number)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Business rule validation error.

    Used for rejected inputs: amounts, terms, tendered payments.

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "term_months", "message": "Must be one of [12, 18, 24]"}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class NotFoundError(DomainError):
    """Resource not found.

    Protocol mappings:
        - REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        """Create a not found error.

        Args:
            resource: Type of resource (e.g., "Credit", "Sale")
            identifier: Resource identifier
            **context: Additional context
        """
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class ConflictError(DomainError):
    """Business constraint conflict.

    Examples:
        - Client already has an active credit
        - Installment already paid
        - State transition not allowed

    Protocol mappings:
        - REST: 409 Conflict
    """

    error_code: str = "CONFLICT"


class InternalError(DomainError):
    """Internal domain error (unexpected conditions).

    Should be logged for investigation.

    Protocol mappings:
        - REST: 500 Internal Server Error
    """

    error_code: str = "INTERNAL_ERROR"


# ==============================================================================
# Credit lifecycle errors
# ==============================================================================


class InvalidAmountError(ValidationError):
    """A monetary input is non-positive, negative or out of range."""

    error_code: str = "INVALID_AMOUNT"


class InvalidTermError(ValidationError):
    """Term in months is not one of the admissible terms."""

    error_code: str = "INVALID_TERM"


class InsufficientAmountError(ValidationError):
    """Amount tendered does not cover the installment value."""

    error_code: str = "INSUFFICIENT_AMOUNT"


class CreditNotFoundError(NotFoundError):
    error_code: str = "CREDIT_NOT_FOUND"

    def __init__(self, credit_id: str) -> None:
        super().__init__(resource="Credit", identifier=credit_id)


class InstallmentNotFoundError(NotFoundError):
    error_code: str = "INSTALLMENT_NOT_FOUND"

    def __init__(self, credit_id: str, sequence_number: int) -> None:
        super().__init__(
            resource="Installment",
            identifier=f"{credit_id}#{sequence_number}",
            credit_id=credit_id,
            sequence_number=sequence_number,
        )


class SaleNotFoundError(NotFoundError):
    error_code: str = "SALE_NOT_FOUND"

    def __init__(self, sale_id: str) -> None:
        super().__init__(resource="Sale", identifier=sale_id)


class ClientNotFoundError(NotFoundError):
    error_code: str = "CLIENT_NOT_FOUND"

    def __init__(self, client_id: str) -> None:
        super().__init__(resource="Client", identifier=client_id)


class DuplicateActiveCreditError(ConflictError):
    """Client already holds an ACTIVE credit with a remaining balance."""

    error_code: str = "DUPLICATE_ACTIVE_CREDIT"


class InstallmentAlreadyPaidError(ConflictError):
    error_code: str = "INSTALLMENT_ALREADY_PAID"


class CreditNotActiveError(ConflictError):
    """Operation requires an ACTIVE credit but the credit is CLOSED or CANCELLED."""

    error_code: str = "CREDIT_NOT_ACTIVE"


class SaleAlreadyCreditedError(ConflictError):
    error_code: str = "SALE_ALREADY_CREDITED"


class SaleNotEligibleError(ConflictError):
    """Sale is voided, not a credit sale, or belongs to another client."""

    error_code: str = "SALE_NOT_ELIGIBLE"


class StorageFailureError(InternalError):
    """Wraps any underlying persistence failure.

    Raised after the unit of work has discarded every write of the failed operation.
    """

    error_code: str = "STORAGE_FAILURE"
