"""
Invoice Manager Backend — Pydantic Form and Response Schemas
==============================================================

What:  Pydantic models for the invoice form, the form state handed back to
       the page, and the JSON returned by the read endpoints.
How:   InvoiceForm declares the field constraints (required customer,
       amount coerced to a number > 0, status enum). Validation failures are
       flattened into {field: [messages]} with fixed, user-facing wording.
Who:   InvoiceService validates with these; routes serialize them.
"""

import datetime
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.models.invoice import ID_LENGTH


# Form keys read from a submission, in the order they are reported
FORM_FIELDS = ("customerId", "amount", "status")

CUSTOMER_REQUIRED_MESSAGE = "Please select a customer."
AMOUNT_POSITIVE_MESSAGE = "Please enter an amount greater than $0."
AMOUNT_INVALID_MESSAGE = "Please enter a valid amount."
STATUS_INVALID_MESSAGE = "Please select an invoice status."

InvoiceStatus = Literal["pending", "paid"]


# ══════════════════════════════════════════════════════════════════════════
# Form Validation — What the invoice page submits
# ══════════════════════════════════════════════════════════════════════════


class InvoiceForm(BaseModel):
    """
    What:  Validated create/update form.
    How:   Built from the raw form mapping with `InvoiceForm.from_form()`.

    Rules:
        customerId: required, non-blank string that fits the id column
        amount:     coerced to float; missing/blank counts as 0; must be finite and > 0
        status:     'pending' or 'paid'
    """
    customer_id: str = Field(alias="customerId", min_length=1, max_length=ID_LENGTH)
    amount: float = Field(gt=0, allow_inf_nan=False)
    status: InvoiceStatus

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_blank_amount(cls, v: Any) -> Any:
        # An empty amount input reads as zero, so it fails the > 0 bound
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return v

    @property
    def amount_in_cents(self) -> int:
        return round(self.amount * 100)

    @classmethod
    def from_form(cls, form_data: Mapping[str, Any]) -> "InvoiceForm":
        """
        Validate a raw form submission.

        Only the keys in FORM_FIELDS are read; anything else in the
        submission (ids, CSRF tokens, buttons) is ignored.

        Raises:
            pydantic.ValidationError: one entry per failing field
        """
        return cls.model_validate({name: form_data.get(name) for name in FORM_FIELDS})


def flatten_field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """
    Collapse a pydantic ValidationError into {form field: [messages]}.

    Error locations use the form aliases (customerId, not customer_id), so the
    keys line up with the inputs on the page. Messages are fixed per field;
    the amount field distinguishes "not above zero" from "not a number".
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "form"
        if field == "customerId":
            message = CUSTOMER_REQUIRED_MESSAGE
        elif field == "amount":
            message = (
                AMOUNT_POSITIVE_MESSAGE
                if error["type"] == "greater_than"
                else AMOUNT_INVALID_MESSAGE
            )
        elif field == "status":
            message = STATUS_INVALID_MESSAGE
        else:
            message = error["msg"]
        messages = errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return errors


class InvoiceFormState(BaseModel):
    """
    What:  Result of a mutation handler, handed back to the form.
    When:  Validation failure (errors + message), storage failure (message),
           delete success (message). Create/update success redirects instead.

    The previous state is threaded back into the next submission by the
    caller so the page can re-render earlier errors.

    Example:
        {
            "errors": {"amount": ["Please enter an amount greater than $0."]},
            "message": "Missing fields. Failed to create invoice."
        }
    """
    errors: Optional[Dict[str, List[str]]] = Field(
        default=None,
        description="Field name → validation messages",
    )
    message: Optional[str] = Field(default=None, description="Form-level message")

    def to_response(self) -> Dict[str, Any]:
        """JSON body with unset parts omitted."""
        return self.model_dump(exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the read endpoints return
# ══════════════════════════════════════════════════════════════════════════


class InvoiceResponse(BaseModel):
    """
    What:  One invoice row.
    Who:   Returned by GET /dashboard/invoices/{id} (edit form pre-fill)
           and as list items.
    """
    id: str = Field(description="Invoice identifier")
    customer_id: str = Field(description="Customer identifier")
    amount: int = Field(description="Amount in cents")
    status: InvoiceStatus = Field(description="Payment state: pending, paid")
    date: datetime.date = Field(description="Creation date (YYYY-MM-DD)")

    model_config = ConfigDict(from_attributes=True)


class InvoiceListResponse(BaseModel):
    """
    What:  The invoice list view, newest first.
    Who:   Returned by GET /dashboard/invoices; cached until a mutation
           revalidates the path.
    """
    invoices: List[InvoiceResponse] = Field(description="Invoices ordered by date, newest first")
    total_count: int = Field(description="Number of invoices")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error format for the read endpoints and unexpected failures.

    Fields:
        error: Machine-readable error code (e.g., "not_found", "server_error")
        message: Human-readable description for display to users
        details: Optional extra context
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
