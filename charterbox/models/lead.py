"""Lead (booking) document model for MongoDB."""

from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field

from charterbox.schemas.lead import LeadRecord, PackageQuantity


class Lead(Document):
    """A yacht trip booking.

    `lead_id` is the business identifier (e.g. DO-102); the Mongo `_id` is
    never exposed outside the storage layer.
    """

    lead_id: Indexed(str, unique=True)

    client_name: str = "N/A"
    agent: str = ""
    yacht: str = ""
    status: str = "Confirmed"
    month: Optional[str] = None
    type: str = "Shared Cruise"
    booking_ref_no: str = ""
    transaction_id: Optional[str] = None
    mode_of_payment: str = "CARD"
    payment_confirmation_status: str = "CONFIRMED"

    package_quantities: list[PackageQuantity] = Field(default_factory=list)
    free_guest_count: int = 0
    per_ticket_rate: Optional[float] = None

    total_amount: float = 0.0
    commission_percentage: float = 0.0
    commission_amount: float = 0.0
    net_amount: float = 0.0
    paid_amount: float = 0.0
    balance_amount: float = 0.0
    collected_at_check_in: float = 0.0

    notes: str = ""
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    check_in_time: Optional[str] = None
    source: Optional[str] = None

    owner_user_id: Optional[str] = None
    last_modified_by_user_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "leads"
        indexes = [
            "lead_id",
            "booking_ref_no",
            "transaction_id",
            "agent",
            "yacht",
        ]

    @classmethod
    def field_values(cls, record: LeadRecord) -> dict:
        """Document field values for a record (everything except identity)."""
        data = record.model_dump()
        data["lead_id"] = data.pop("id")
        return data

    def to_record(self) -> LeadRecord:
        data = self.model_dump(exclude={"id", "revision_id", "lead_id"})
        data["id"] = self.lead_id
        return LeadRecord.model_validate(data)

    def __repr__(self) -> str:
        return f"<Lead(lead_id={self.lead_id}, client={self.client_name}, ref={self.booking_ref_no})>"
