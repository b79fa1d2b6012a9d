"""Reconciliation of import rows against stored bookings."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol

from charterbox.schemas.lead import LeadRecord

logger = logging.getLogger(__name__)

# Attempts at allocating a fresh lead id before the row is counted as failed
MAX_ID_ATTEMPTS = 3

# Fields an incoming row can never change on an existing lead
PRESERVED_FIELDS = frozenset({"id", "created_at"})

# Serializes id generation and writes for every reconcile run in this process
_upsert_lock = asyncio.Lock()


class LeadIdConflictError(Exception):
    """Raised by a store when a new lead's id is already taken."""


class BookingStore(Protocol):
    """Persistence operations the reconciliation engine needs."""

    async def find_booking_by_ref(self, ref: str) -> LeadRecord | None: ...

    async def find_booking_by_transaction_id(self, transaction_id: str) -> LeadRecord | None: ...

    async def upsert_booking(self, lead: LeadRecord, create: bool = False) -> None:
        """Persist a lead keyed by its id.

        With `create=True` the lead must be new and LeadIdConflictError is
        raised if its id already exists.
        """
        ...

    async def list_lead_ids(self, prefix: str) -> list[str]: ...


@dataclass
class UpsertStats:
    """Outcome of a reconcile run."""

    inserted: int = 0
    updated: int = 0
    failed: int = 0
    lead_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "inserted": self.inserted,
            "updated": self.updated,
            "failed": self.failed,
            "lead_ids": list(self.lead_ids),
            "errors": list(self.errors),
        }


def next_lead_id(
    existing_ids: Iterable[str],
    prefix: str = "DO-",
    floor: int = 100,
    width: int = 3,
) -> str:
    """Return the next sequential id for a prefix.

    The highest numeric suffix among ids with the prefix (never lower than
    `floor`) plus one, zero-padded to `width` digits.
    """
    highest = floor
    for lead_id in existing_ids:
        if not lead_id or not lead_id.startswith(prefix):
            continue
        suffix = lead_id[len(prefix) :]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:0{width}d}"


def merge_lead(existing: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    """Shallow-merge an incoming row over an existing lead.

    Incoming values win, except None values (never overwrite), the lead's
    identity and creation time, and notes, which accumulate.
    """
    merged = dict(existing)
    for key, value in incoming.items():
        if key in PRESERVED_FIELDS or value is None:
            continue
        merged[key] = value

    existing_notes = existing.get("notes") or ""
    incoming_notes = incoming.get("notes") or ""
    if existing_notes and incoming_notes:
        merged["notes"] = f"{existing_notes}\n{incoming_notes}"
    elif existing_notes:
        merged["notes"] = existing_notes
    return merged


def build_lead_record(data: dict[str, Any], lead_id: str, now: datetime) -> LeadRecord:
    """Validate a merged or new row into a LeadRecord with fresh timestamps.

    Raises:
        pydantic.ValidationError: If the row violates the lead schema.
    """
    payload = {k: v for k, v in data.items() if v is not None}
    payload["id"] = lead_id
    payload.setdefault("created_at", now)
    payload["updated_at"] = now
    return LeadRecord.model_validate(payload)


async def _find_existing(row: dict[str, Any], store: BookingStore) -> LeadRecord | None:
    existing = None
    ref = row.get("booking_ref_no")
    if ref:
        existing = await store.find_booking_by_ref(ref)
    transaction_id = row.get("transaction_id")
    if existing is None and transaction_id:
        existing = await store.find_booking_by_transaction_id(transaction_id)
    return existing


async def _insert_new(
    row: dict[str, Any],
    store: BookingStore,
    prefix: str,
    floor: int,
    width: int,
    now: datetime,
) -> str:
    supplied_id = row.get("id")
    if supplied_id:
        record = build_lead_record(row, supplied_id, now)
        await store.upsert_booking(record, create=True)
        return record.id

    for attempt in range(1, MAX_ID_ATTEMPTS + 1):
        lead_id = next_lead_id(await store.list_lead_ids(prefix), prefix, floor, width)
        record = build_lead_record(row, lead_id, now)
        try:
            await store.upsert_booking(record, create=True)
        except LeadIdConflictError:
            logger.warning("Lead id %s taken (attempt %d/%d)", lead_id, attempt, MAX_ID_ATTEMPTS)
            continue
        return lead_id

    raise LeadIdConflictError(f"Could not allocate a lead id after {MAX_ID_ATTEMPTS} attempts")


async def insert_unless_exists(
    row: dict[str, Any],
    store: BookingStore,
    prefix: str = "DO-",
    floor: int = 100,
    width: int = 3,
) -> tuple[str, bool]:
    """Insert a row as a new lead unless a lead already matches it.

    The lookup and the insert run under the reconcile lock, so overlapping
    calls for the same booking reference insert a single lead.

    Returns:
        Tuple of (lead id, inserted). When a lead already matches, its id is
        returned with inserted=False and the store is not written.
    """
    async with _upsert_lock:
        existing = await _find_existing(row, store)
        if existing is not None:
            return existing.id, False
        lead_id = await _insert_new(row, store, prefix, floor, width, datetime.now(timezone.utc))
        return lead_id, True


async def upsert_leads(
    rows: list[dict[str, Any]],
    store: BookingStore,
    prefix: str = "DO-",
    floor: int = 100,
    width: int = 3,
) -> UpsertStats:
    """Insert or merge each row into the store, one row at a time.

    A row matches an existing lead by booking reference, then by transaction
    id. A failure on one row is logged and counted and does not stop the run.

    Args:
        rows: Transformed import rows.
        store: Storage backend.
        prefix: Prefix of generated lead ids.
        floor: Lowest numeric suffix considered when generating ids.
        width: Zero padding of generated id suffixes.

    Returns:
        UpsertStats with counts, affected lead ids and per-row errors.
    """
    stats = UpsertStats()

    async with _upsert_lock:
        for index, row in enumerate(rows, start=1):
            now = datetime.now(timezone.utc)
            try:
                existing = await _find_existing(row, store)
                if existing is not None:
                    merged = merge_lead(existing.to_row(), row)
                    record = build_lead_record(merged, existing.id, now)
                    await store.upsert_booking(record)
                    stats.updated += 1
                    stats.lead_ids.append(record.id)
                else:
                    lead_id = await _insert_new(row, store, prefix, floor, width, now)
                    stats.inserted += 1
                    stats.lead_ids.append(lead_id)
            except Exception as e:
                stats.failed += 1
                stats.errors.append(f"Row {index}: {e}")
                logger.warning("Failed to upsert row %d %r: %s", index, row, e)

    logger.info(
        "Reconciled %d rows: %d inserted, %d updated, %d failed",
        len(rows),
        stats.inserted,
        stats.updated,
        stats.failed,
    )
    return stats
