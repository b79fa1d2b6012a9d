"""Pydantic schemas for CharterBox API."""

from charterbox.schemas.import_schemas import (
    ImportPreviewResponse,
    ImportResultResponse,
    QualityIssue,
)
from charterbox.schemas.lead import AMOUNT_TOLERANCE, LeadRecord, PackageQuantity
from charterbox.schemas.webhooks import (
    WebhookResponse,
    WooCommerceBilling,
    WooCommerceLineItem,
    WooCommerceMeta,
    WooCommerceOrder,
)

__all__ = [
    "AMOUNT_TOLERANCE",
    "LeadRecord",
    "PackageQuantity",
    "ImportPreviewResponse",
    "ImportResultResponse",
    "QualityIssue",
    "WebhookResponse",
    "WooCommerceBilling",
    "WooCommerceLineItem",
    "WooCommerceMeta",
    "WooCommerceOrder",
]
