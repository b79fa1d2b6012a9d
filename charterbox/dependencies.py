"""FastAPI dependencies providing storage backends and reference data."""

from typing import Annotated

from fastapi import Depends

from charterbox.services.etl.reconcile import BookingStore
from charterbox.services.etl.reference import ReferenceData
from charterbox.services.etl.store import BeanieBookingStore, BeanieSalesLeadStore
from charterbox.services.webhooks import SalesLeadStore


def get_booking_store() -> BookingStore:
    return BeanieBookingStore()


def get_sales_lead_store() -> SalesLeadStore:
    return BeanieSalesLeadStore()


async def get_reference_data() -> ReferenceData:
    """Load agents, yachts and users for the current request."""
    return await ReferenceData.load()


BookingStoreDep = Annotated[BookingStore, Depends(get_booking_store)]
SalesLeadStoreDep = Annotated[SalesLeadStore, Depends(get_sales_lead_store)]
ReferenceDataDep = Annotated[ReferenceData, Depends(get_reference_data)]
