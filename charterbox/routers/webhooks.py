"""Inbound webhook endpoints (WooCommerce orders, website contact forms)."""

import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response, status
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address

from charterbox.config import get_settings, settings
from charterbox.dependencies import BookingStoreDep, ReferenceDataDep, SalesLeadStoreDep
from charterbox.schemas.webhooks import WebhookResponse, WooCommerceOrder
from charterbox.services.etl.packages import PackageDetector
from charterbox.services.webhooks import (
    InvalidFormError,
    create_sales_lead,
    is_woocommerce_ping,
    sync_woocommerce_order,
    verify_woocommerce_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

SIGNATURE_HEADER = "X-WC-Webhook-Signature"


def _webhook_rate_limit() -> str:
    return settings.webhook_rate_limit


def _parse_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body is not valid JSON",
        )


@router.get("/woocommerce")
async def woocommerce_endpoint_status() -> dict[str, str]:
    """Liveness check used when configuring the WooCommerce webhook."""
    return {"message": "WooCommerce Webhook Endpoint is Active"}


@router.post("/woocommerce", response_model=WebhookResponse)
@limiter.limit(_webhook_rate_limit)
async def woocommerce_order_webhook(
    request: Request,
    response: Response,
    store: BookingStoreDep,
    reference: ReferenceDataDep,
) -> WebhookResponse:
    """Create a booking from a WooCommerce order.

    Returns 201 when a lead is created and 200 when the order was already
    synced by an earlier delivery.
    """
    if not settings.woocommerce_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Webhook disabled")

    body = await request.body()
    if is_woocommerce_ping(body):
        return WebhookResponse(message="Webhook ping received")

    signature = request.headers.get(SIGNATURE_HEADER)
    if not verify_woocommerce_signature(body, signature, settings.woocommerce_webhook_secret):
        logger.warning("Rejected WooCommerce webhook with invalid signature")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature",
        )

    try:
        order = WooCommerceOrder.model_validate(_parse_json(body))
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid WooCommerce order payload: {e.error_count()} error(s)",
        )

    detector = PackageDetector(reference=reference)
    try:
        result = await sync_woocommerce_order(order, store, detector, get_settings())
    except Exception:
        logger.exception("Error processing WooCommerce order %s", order.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing WooCommerce webhook",
        )

    if result.failed:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing WooCommerce webhook",
        )

    response.status_code = status.HTTP_201_CREATED if result.inserted else status.HTTP_200_OK
    return result


@router.post("/lotus-leads", response_model=WebhookResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(_webhook_rate_limit)
async def website_form_webhook(
    request: Request,
    store: SalesLeadStoreDep,
) -> WebhookResponse:
    """Create a sales lead from a website contact form (JSON or form-encoded)."""
    if not settings.wordpress_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Webhook disabled")

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        body: Any = {key: value for key, value in form.items()}
    else:
        body = _parse_json(await request.body())

    if not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be an object",
        )

    try:
        sales_lead_id = await create_sales_lead(body, store)
    except InvalidFormError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error processing website form webhook")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing webhook",
        )

    return WebhookResponse(message="Webhook received and lead created", id=sales_lead_id)
