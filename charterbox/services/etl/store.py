"""MongoDB (Beanie) implementation of the booking store."""

import re

from pymongo.errors import DuplicateKeyError

from charterbox.models.lead import Lead
from charterbox.models.sales_lead import SalesLead
from charterbox.schemas.lead import LeadRecord

from .reconcile import LeadIdConflictError


class BeanieBookingStore:
    """Booking store backed by the `leads` collection."""

    async def find_booking_by_ref(self, ref: str) -> LeadRecord | None:
        lead = await Lead.find_one(Lead.booking_ref_no == ref)
        return lead.to_record() if lead else None

    async def find_booking_by_transaction_id(self, transaction_id: str) -> LeadRecord | None:
        lead = await Lead.find_one(Lead.transaction_id == transaction_id)
        return lead.to_record() if lead else None

    async def upsert_booking(self, lead: LeadRecord, create: bool = False) -> None:
        values = Lead.field_values(lead)
        if create:
            try:
                await Lead(**values).insert()
            except DuplicateKeyError as e:
                raise LeadIdConflictError(f"Lead id {lead.id} already exists") from e
            return

        document = await Lead.find_one(Lead.lead_id == lead.id)
        if document is None:
            await Lead(**values).insert()
            return
        await document.set(values)

    async def list_lead_ids(self, prefix: str) -> list[str]:
        pattern = f"^{re.escape(prefix)}"
        leads = await Lead.find({"lead_id": {"$regex": pattern}}).to_list()
        return [lead.lead_id for lead in leads]


class BeanieSalesLeadStore:
    """Sales lead store backed by the `sales_leads` collection."""

    async def insert_sales_lead(self, data: dict) -> str:
        lead = SalesLead(**data)
        await lead.insert()
        return lead.sales_lead_id
