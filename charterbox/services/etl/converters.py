"""Typed coercion of raw spreadsheet cells into lead field values."""

import json
import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .constants import (
    COUNT_FIELDS,
    EMPTY_STRING_FIELDS,
    EVENT_DATE_FIELDS,
    LEAD_STATUSES,
    LEAD_TYPES,
    MODES_OF_PAYMENT,
    MONEY_FIELDS,
    PACKAGE_JSON_FIELD,
    PAX_FIELD,
    PAYMENT_CONFIRMATION_STATUSES,
    TIMESTAMP_FIELDS,
    USER_FIELDS,
)
from .packages import split_product_label
from .reference import ReferenceData

logger = logging.getLogger(__name__)

_DMY_SLASH = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})")

# Formats tried after DD/MM/YYYY and ISO 8601, in order
_DATE_FORMATS = (
    "%d-%m-%Y",
    "%d-%m-%Y %H:%M:%S",
    "%b %Y",
    "%B %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


@dataclass(frozen=True)
class ConvertedValue:
    """Result of converting one cell.

    `used_default` is set when a non-empty cell could not be interpreted and
    a documented default (or the raw text, for event dates) was used instead.
    """

    value: Any
    used_default: bool = False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(text: str) -> datetime | None:
    """Parse the date formats seen in booking exports, or return None."""
    text = text.strip()
    if not text:
        return None

    match = _DMY_SLASH.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            return datetime(year, month, day)
        except ValueError:
            pass

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _coerce_int(text: str) -> int | None:
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


def _coerce_float(text: str) -> float | None:
    try:
        value = float(text.replace(",", ""))
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _match_option(text: str, options: tuple[str, ...]) -> str | None:
    lowered = text.lower()
    for option in options:
        if option.lower() == lowered:
            return option
    return None


def _convert_package_json(text: str) -> ConvertedValue:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Could not parse package JSON %r: %s", text, e)
        return ConvertedValue(None, True)
    if not isinstance(parsed, list):
        return ConvertedValue(None, True)

    lines: list[dict[str, Any]] = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        name = str(item.get("package_name") or item.get("packageName") or "").strip()
        if not name:
            continue
        quantity = _coerce_int(str(item.get("quantity") or 0)) or 0
        rate = _coerce_float(str(item.get("rate") or 0)) or 0.0
        lines.append({
            "package_id": str(item.get("package_id") or item.get("packageId") or ""),
            "package_name": name,
            "quantity": max(quantity, 0),
            "rate": max(rate, 0.0),
        })
    return ConvertedValue(lines)


def _convert_empty(field: str, acting_user_id: str | None) -> ConvertedValue:
    if field in MONEY_FIELDS or field in COUNT_FIELDS:
        return ConvertedValue(0)
    if field == "status":
        return ConvertedValue("Confirmed")
    if field == "type":
        return ConvertedValue("Shared Cruise")
    if field == "mode_of_payment":
        return ConvertedValue("CARD")
    if field == "payment_confirmation_status":
        return ConvertedValue("CONFIRMED")
    if field == "month":
        return ConvertedValue(_now().isoformat(timespec="seconds"))
    if field in TIMESTAMP_FIELDS:
        return ConvertedValue(_now())
    if field in USER_FIELDS:
        return ConvertedValue(acting_user_id)
    if field in EMPTY_STRING_FIELDS:
        return ConvertedValue("")
    return ConvertedValue(None)


def convert_value(
    field: str,
    raw: Any,
    reference: ReferenceData,
    acting_user_id: str | None = None,
) -> ConvertedValue:
    """Convert a raw cell for a canonical field. Never raises.

    Args:
        field: Canonical field name produced by the header mapper.
        raw: Raw cell content.
        reference: Agent, yacht and user lookups.
        acting_user_id: User stamped on empty owner/modifier cells.

    Returns:
        ConvertedValue with the typed value and whether a default was used.
    """
    text = "" if raw is None else str(raw).strip()

    if field.startswith("pkg_") and field != PAX_FIELD:
        if not text:
            return ConvertedValue(0)
        number = _coerce_int(text)
        if number is None or number < 0:
            return ConvertedValue(0, True)
        return ConvertedValue(number)

    if field == PACKAGE_JSON_FIELD:
        return _convert_package_json(text) if text else ConvertedValue(None)

    if not text:
        return _convert_empty(field, acting_user_id)

    if field == PAX_FIELD:
        return ConvertedValue(text)

    if field in MONEY_FIELDS:
        number = _coerce_float(text)
        return ConvertedValue(0, True) if number is None else ConvertedValue(number)

    if field in COUNT_FIELDS:
        number = _coerce_int(text.replace(",", ""))
        if number is None or number < 0:
            return ConvertedValue(0, True)
        return ConvertedValue(number)

    if field == "per_ticket_rate":
        number = _coerce_float(text)
        return ConvertedValue(None, True) if number is None else ConvertedValue(number)

    if field == "status":
        if text.lower() == "confirm":
            return ConvertedValue("Confirmed")
        status = _match_option(text, LEAD_STATUSES)
        return ConvertedValue(status) if status else ConvertedValue("Balance", True)

    if field == "type":
        lead_type = _match_option(text, LEAD_TYPES)
        return ConvertedValue(lead_type) if lead_type else ConvertedValue("Private Cruise", True)

    if field == "mode_of_payment":
        if text.lower() in ("credit", "online"):
            return ConvertedValue("CARD")
        mode = _match_option(text, MODES_OF_PAYMENT)
        return ConvertedValue(mode) if mode else ConvertedValue("CARD", True)

    if field == "payment_confirmation_status":
        upper = text.upper()
        if upper in PAYMENT_CONFIRMATION_STATUSES:
            return ConvertedValue(upper)
        if upper == "PAID":
            return ConvertedValue("CONFIRMED")
        if upper == "UNPAID":
            return ConvertedValue("UNCONFIRMED")
        return ConvertedValue("CONFIRMED", True)

    if field in EVENT_DATE_FIELDS:
        parsed = parse_datetime(text)
        if parsed is None:
            logger.debug("Unparsable date %r for %s, keeping raw text", text, field)
            return ConvertedValue(text, True)
        return ConvertedValue(parsed.isoformat())

    if field in TIMESTAMP_FIELDS:
        parsed = parse_datetime(text)
        if parsed is None:
            return ConvertedValue(_now(), True)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return ConvertedValue(parsed)

    if field == "agent":
        return ConvertedValue(reference.resolve_agent(text) or text)

    if field in USER_FIELDS:
        return ConvertedValue(reference.resolve_user(text) or text)

    if field == "yacht":
        label = split_product_label(text).yacht_label
        return ConvertedValue(reference.resolve_yacht(label) or label)

    return ConvertedValue(text)
