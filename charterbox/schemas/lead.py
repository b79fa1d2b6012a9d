"""Pydantic schemas for canonical booking (lead) records."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Amounts are compared against this tolerance when checking derived totals
AMOUNT_TOLERANCE = 0.01


class PackageQuantity(BaseModel):
    """A line item of tickets sold within one booking."""

    package_id: str = ""
    package_name: str = Field(..., min_length=1)
    quantity: int = Field(default=0, ge=0)
    rate: float = Field(default=0.0, ge=0)


class LeadRecord(BaseModel):
    """Canonical booking record as persisted by the reconciliation engine.

    The money invariants (net = total - commission, balance = net - paid)
    are re-derived on validation, so every LeadRecord that exists satisfies
    them regardless of what the source row claimed.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    client_name: str = "N/A"
    agent: str = ""
    yacht: str = ""
    status: str = "Confirmed"
    month: str | None = None
    type: str = "Shared Cruise"
    booking_ref_no: str = ""
    transaction_id: str | None = None
    mode_of_payment: str = "CARD"
    payment_confirmation_status: str = "CONFIRMED"

    package_quantities: list[PackageQuantity] = Field(default_factory=list)
    free_guest_count: int = Field(default=0, ge=0)
    per_ticket_rate: float | None = None

    total_amount: float = Field(default=0.0, ge=0)
    commission_percentage: float = Field(default=0.0, ge=0)
    commission_amount: float = Field(default=0.0, ge=0)
    net_amount: float = 0.0
    paid_amount: float = Field(default=0.0, ge=0)
    # Negative balance means the booking was overpaid
    balance_amount: float = 0.0
    collected_at_check_in: float = Field(default=0.0, ge=0)

    notes: str = ""
    customer_email: str | None = None
    customer_phone: str | None = None
    check_in_time: str | None = None
    source: str | None = None

    owner_user_id: str | None = None
    last_modified_by_user_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _derive_amounts(self) -> "LeadRecord":
        self.total_amount = round(self.total_amount, 2)
        self.commission_amount = round(self.commission_amount, 2)
        self.paid_amount = round(self.paid_amount, 2)
        self.net_amount = round(self.total_amount - self.commission_amount, 2)
        self.balance_amount = round(self.net_amount - self.paid_amount, 2)
        return self

    def amounts_consistent(self) -> bool:
        """Check the money invariants within AMOUNT_TOLERANCE."""
        return (
            abs(self.net_amount - (self.total_amount - self.commission_amount)) <= AMOUNT_TOLERANCE
            and abs(self.balance_amount - (self.net_amount - self.paid_amount)) <= AMOUNT_TOLERANCE
        )

    def to_row(self) -> dict[str, Any]:
        """Dump to a plain dict suitable for merging with import rows."""
        return self.model_dump()
