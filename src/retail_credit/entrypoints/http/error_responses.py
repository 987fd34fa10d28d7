"""REST API error response models.

Structured error responses that provide consistent format for all HTTP errors.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Individual error detail for field-level errors."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "amount_tendered",
                "message": "Must be a valid decimal: abc",
                "code": "INVALID_DECIMAL",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Examples:
        Lifecycle error:
            {
                "detail": "Installment 3 of credit '...' is already paid",
                "code": "INSTALLMENT_ALREADY_PAID"
            }

        Validation error with fields:
            {
                "detail": "Validation failed",
                "code": "VALIDATION_ERROR",
                "errors": [
                    {
                        "field": "amount_tendered",
                        "message": "Must be a valid decimal: abc",
                        "code": "INVALID_DECIMAL"
                    }
                ]
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Credit with identifier 'abc' not found", "code": "CREDIT_NOT_FOUND"},
                {
                    "detail": "Client 'C-77' already has an active credit",
                    "code": "DUPLICATE_ACTIVE_CREDIT",
                },
            ]
        }
    )


# Reusable OpenAPI `responses` fragments for routes
NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Resource not found"}}
CONFLICT_RESPONSE = {409: {"model": ErrorResponse, "description": "Lifecycle conflict"}}
VALIDATION_RESPONSE = {422: {"model": ErrorResponse, "description": "Validation error"}}
STORAGE_RESPONSE = {500: {"model": ErrorResponse, "description": "Storage failure, nothing changed"}}
