"""Sales lead (website enquiry) document model."""

from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field


class SalesLead(Document):
    """Enquiry captured from the marketing site contact forms."""

    sales_lead_id: Indexed(str, unique=True)
    client_name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""
    source: str = "Website"
    status: str = "New"
    priority: str = "Medium"
    preferred_date: Optional[str] = None
    pax_count: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "sales_leads"
        indexes = [
            "sales_lead_id",
            "status",
        ]

    def __repr__(self) -> str:
        return f"<SalesLead(sales_lead_id={self.sales_lead_id}, client={self.client_name})>"
