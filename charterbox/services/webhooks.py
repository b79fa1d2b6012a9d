"""Adapters turning WooCommerce orders and WordPress form posts into records."""

import base64
import hashlib
import hmac
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Protocol

from charterbox.config import Settings, get_settings
from charterbox.schemas.webhooks import WebhookResponse, WooCommerceOrder
from charterbox.services.etl.converters import convert_value, parse_datetime
from charterbox.services.etl.packages import PackageDetector
from charterbox.services.etl.reconcile import BookingStore, insert_unless_exists

logger = logging.getLogger(__name__)

WOOCOMMERCE_SOURCE_LABEL = "Website (WooCommerce)"
WORDPRESS_SOURCE_LABEL = "Website (LotusYacht)"
ALREADY_SYNCED_MESSAGE = "Order already synced"
SYNCED_MESSAGE = "WooCommerce Order Synced"
STORE_FAILED_MESSAGE = "WooCommerce order could not be stored"

# Form field -> accepted WordPress field names, in order of preference
FORM_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "client_name": ("your-name", "name"),
    "email": ("your-email", "email"),
    "phone": ("your-phone", "phone"),
    "subject": ("your-subject", "interest"),
    "message": ("your-message", "message"),
    "preferred_date": ("trip-date", "date"),
    "pax_count": ("pax", "guests"),
}


class InvalidFormError(ValueError):
    """Raised when a form submission carries no way to contact the client."""


class SalesLeadStore(Protocol):
    async def insert_sales_lead(self, data: dict[str, Any]) -> str: ...


# =============================================================================
# WooCommerce
# =============================================================================


def verify_woocommerce_signature(body: bytes, signature: str | None, secret: str | None) -> bool:
    """Check X-WC-Webhook-Signature, base64(HMAC-SHA256(secret, body)).

    Always passes when no secret is configured.
    """
    if not secret:
        return True
    if not signature:
        return False
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode("ascii")
    return hmac.compare_digest(expected, signature.strip())


def is_woocommerce_ping(body: bytes) -> bool:
    """WooCommerce sends a form-encoded `webhook_id=<n>` body when a hook is saved."""
    return body.lstrip().startswith(b"webhook_id=")


def map_woocommerce_status(status: str) -> str:
    status = (status or "").strip().lower()
    if status in ("processing", "completed"):
        return "Confirmed"
    if status in ("cancelled", "failed"):
        return "Closed (Lost)"
    return "Unconfirmed"


def _order_event_date(order: WooCommerceOrder) -> datetime | None:
    for item in order.line_items:
        for meta in item.meta_data:
            label = str(meta.display_key or meta.key or "").lower()
            if "date" not in label:
                continue
            value = meta.display_value if meta.display_value not in (None, "") else meta.value
            parsed = parse_datetime(str(value or ""))
            if parsed is not None:
                return parsed
    return None


def woocommerce_order_to_lead(
    order: WooCommerceOrder,
    detector: PackageDetector,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Build an import row for a WooCommerce order.

    Online orders are paid in full and carry no commission. The yacht and
    packages are inferred from the product names of the line items.
    """
    etl_config = (settings or get_settings()).etl
    order_id = str(order.id)
    billing = order.billing
    client_name = f"{billing.first_name} {billing.last_name}".strip() or "Online Customer"
    payment_method = order.payment_method_title or "Online"

    yacht = ""
    package_lines: list[dict[str, Any]] = []
    for item in order.line_items:
        if not yacht:
            yacht = detector.detect_yacht_id(item.name, "")
        package_lines.append({
            "package_id": f"pq-{item.id}" if item.id is not None else "",
            "package_name": detector.detect_package_name(item.name),
            "quantity": item.quantity,
            "rate": item.price,
        })

    event_date = _order_event_date(order) or datetime.now(timezone.utc)
    mode_of_payment = convert_value("mode_of_payment", payment_method, detector.reference).value

    return {
        "client_name": client_name,
        "agent": etl_config.online_agent_id,
        "yacht": yacht or etl_config.default_yacht_id,
        "status": map_woocommerce_status(order.status),
        "month": event_date.isoformat(),
        "type": "Shared Cruise",
        "payment_confirmation_status": "CONFIRMED",
        "transaction_id": order.transaction_id or f"WC-{order_id}",
        "booking_ref_no": order_id,
        "mode_of_payment": mode_of_payment,
        "package_quantities": package_lines,
        "total_amount": order.total,
        "commission_percentage": 0,
        "commission_amount": 0,
        "paid_amount": order.total,
        "notes": f"WooCommerce Order #{order_id}. Payment: {payment_method}",
        "customer_email": billing.email or None,
        "customer_phone": billing.phone or None,
        "source": WOOCOMMERCE_SOURCE_LABEL,
    }


async def sync_woocommerce_order(
    order: WooCommerceOrder,
    store: BookingStore,
    detector: PackageDetector,
    settings: Settings | None = None,
) -> WebhookResponse:
    """Insert a lead for an order unless that order was already synced.

    A replayed delivery is recognized by the order id stored as the lead's
    booking reference and reported as a no-op.
    """
    settings = settings or get_settings()
    order_id = str(order.id)
    row = woocommerce_order_to_lead(order, detector, settings)

    try:
        lead_id, inserted = await insert_unless_exists(
            row,
            store,
            prefix=settings.etl.lead_id_prefix,
            floor=settings.etl.lead_id_floor,
            width=settings.etl.lead_id_width,
        )
    except Exception as e:
        logger.warning("Failed to store WooCommerce order %s: %s", order_id, e)
        return WebhookResponse(message=STORE_FAILED_MESSAGE, failed=1)

    if not inserted:
        logger.info("WooCommerce order %s already synced as %s", order_id, lead_id)
        return WebhookResponse(message=ALREADY_SYNCED_MESSAGE, id=lead_id)

    logger.info("Synced WooCommerce order %s as lead %s", order_id, lead_id)
    return WebhookResponse(message=SYNCED_MESSAGE, id=lead_id, inserted=1)


# =============================================================================
# WordPress forms
# =============================================================================


def generate_sales_lead_id() -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "SL-WP-" + "".join(secrets.choice(alphabet) for _ in range(5))


def _form_value(body: dict[str, Any], names: tuple[str, ...]) -> str:
    for name in names:
        value = body.get(name)
        if value is None:
            continue
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        text = str(value).strip()
        if text:
            return text
    return ""


def wordpress_form_to_sales_lead(body: dict[str, Any]) -> dict[str, Any]:
    """Map a contact form submission to sales lead fields.

    Raises:
        InvalidFormError: If the body has no name, email or phone.
    """
    values = {field: _form_value(body, names) for field, names in FORM_FIELD_ALIASES.items()}
    if not (values["client_name"] or values["email"] or values["phone"]):
        raise InvalidFormError("Form submission has no name, email or phone")

    preferred_date = values["preferred_date"] or None
    if preferred_date:
        parsed = parse_datetime(preferred_date)
        if parsed is not None:
            preferred_date = parsed.isoformat()

    pax_count = None
    if values["pax_count"]:
        try:
            pax_count = int(float(values["pax_count"]))
        except ValueError:
            logger.debug("Ignoring non-numeric pax count %r", values["pax_count"])

    return {
        "sales_lead_id": generate_sales_lead_id(),
        "client_name": values["client_name"] or "Unknown",
        "email": values["email"],
        "phone": values["phone"],
        "subject": values["subject"] or "Website Inquiry",
        "message": values["message"],
        "source": WORDPRESS_SOURCE_LABEL,
        "status": "New",
        "priority": "Medium",
        "preferred_date": preferred_date,
        "pax_count": pax_count,
    }


async def create_sales_lead(body: dict[str, Any], store: SalesLeadStore) -> str:
    """Store a sales lead for a form submission and return its id."""
    data = wordpress_form_to_sales_lead(body)
    sales_lead_id = await store.insert_sales_lead(data)
    logger.info("Created sales lead %s from website form", sales_lead_id)
    return sales_lead_id
