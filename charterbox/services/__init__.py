"""Services for CharterBox application."""

from charterbox.services.etl import ETLModule, ReferenceData
from charterbox.services.webhooks import create_sales_lead, sync_woocommerce_order

__all__ = ["ETLModule", "ReferenceData", "create_sales_lead", "sync_woocommerce_order"]
