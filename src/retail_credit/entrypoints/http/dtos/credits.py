from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

MONEY_PATTERN = r"^\d+(\.\d{1,2})?$"


# ==============================================================================
# Requests
# ==============================================================================


class CreditQuoteRequestDTO(BaseModel):
    """Request payload for previewing a credit sale."""

    total: str = Field(
        description="Sale total as decimal string",
        examples=["1000000.00"],
        pattern=MONEY_PATTERN,
    )
    term_months: int = Field(
        description="Term in months. Must be one of: 12, 18, 24",
        examples=[12],
        ge=1,
    )
    down_payment: str | None = Field(
        default=None,
        description="Down payment as decimal string. Defaults to 30% of the total",
        examples=["300000.00"],
        pattern=MONEY_PATTERN,
    )
    sale_date: date | None = Field(
        default=None,
        description="Date the due dates are seeded from. Defaults to today",
        examples=["2025-01-15"],
    )


class OpenCreditRequestDTO(BaseModel):
    """Request payload for opening a credit from a credit sale."""

    sale_id: str = Field(min_length=1, max_length=64, examples=["V-1024"])
    client_id: str = Field(min_length=1, max_length=64, examples=["C-77"])
    term_months: int = Field(
        description="Term in months. Must be one of: 12, 18, 24",
        examples=[12],
        ge=1,
    )
    down_payment: str | None = Field(
        default=None,
        description="Down payment as decimal string. Defaults to 30% of the sale total",
        examples=["300000.00"],
        pattern=MONEY_PATTERN,
    )
    sale_date: date | None = Field(default=None, examples=["2025-01-15"])

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "sale_id": "V-1024",
                "client_id": "C-77",
                "term_months": 12,
            }
        }
    )


class PaymentRequestDTO(BaseModel):
    amount_tendered: str = Field(
        description="Amount handed over by the client as decimal string",
        examples=["61250.00"],
        pattern=MONEY_PATTERN,
    )


# ==============================================================================
# Responses
# ==============================================================================


class QuotedInstallmentDTO(BaseModel):
    sequence_number: int
    due_date: date
    value: str


class CreditQuoteResponseDTO(BaseModel):
    """Previewed financing figures; monetary values are decimal strings."""

    down_payment: str
    financed_balance: str
    interest_rate: str
    interest: str
    installment_value: str
    total_obligation: str
    term_months: int
    installments: list[QuotedInstallmentDTO]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "down_payment": "300000.00",
                "financed_balance": "700000.00",
                "interest_rate": "0.05",
                "interest": "35000.0000",
                "installment_value": "61250.0000",
                "total_obligation": "735000.00",
                "term_months": 12,
                "installments": [
                    {"sequence_number": 1, "due_date": "2025-02-15", "value": "61250.00"}
                ],
            }
        }
    )


class InstallmentDTO(BaseModel):
    credit_id: str
    sequence_number: int
    value: str
    due_date: date
    paid: bool
    payment_date: datetime | None = None


class OverdueInstallmentDTO(InstallmentDTO):
    days_overdue: int = Field(description="Whole days past the due date")


class CreditDTO(BaseModel):
    id: str
    sale_id: str
    client_id: str
    status: str
    total_amount: str
    down_payment: str
    financed_balance: str
    interest_rate: str
    interest: str
    total_obligation: str
    term_months: int
    remaining_balance: str
    created_at: datetime


class CreditSnapshotResponseDTO(BaseModel):
    credit: CreditDTO
    paid_installments: int
    pending_installments: int
    next_installment: InstallmentDTO | None = None
    installments: list[InstallmentDTO]


class ClientBalanceDTO(BaseModel):
    outstanding_balance: str
    available_credit: str


class PaymentResponseDTO(BaseModel):
    credit_id: str
    sequence_number: int
    amount_applied: str
    amount_tendered: str
    paid_at: datetime
    remaining_balance: str
    credit_status: str
    client_balance: ClientBalanceDTO


class CancellationResponseDTO(BaseModel):
    credit_id: str
    sale_id: str
    status: str = "CANCELLED"
    reversed_amount: str = Field(description="Full financed-plus-interest obligation reversed")
    unpaid_installments: int
    client_balance: ClientBalanceDTO


class OverdueInstallmentsResponseDTO(BaseModel):
    client_id: str
    as_of: date
    installments: list[OverdueInstallmentDTO]


class PendingInstallmentsResponseDTO(BaseModel):
    client_id: str
    installments: list[InstallmentDTO]


class DelinquentCreditsResponseDTO(BaseModel):
    as_of: date
    credits: list[CreditDTO]


class CreditListResponseDTO(BaseModel):
    client_id: str | None = None
    status: str | None = Field(default=None, description="Status filter applied, if any")
    credits: list[CreditDTO]
