"""Import endpoints for booking spreadsheets."""

import logging
from zipfile import BadZipFile

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status

from charterbox.config import settings
from charterbox.dependencies import BookingStoreDep, ReferenceDataDep
from charterbox.schemas.import_schemas import ImportPreviewResponse, ImportResultResponse
from charterbox.services.etl import SOURCE_DEFAULT, ETLModule, ReferenceData

logger = logging.getLogger(__name__)

router = APIRouter()

# Allowed file extensions
ALLOWED_EXTENSIONS = {"csv", "tsv", "txt", "xlsx"}


def _get_file_extension(filename: str | None) -> str:
    """Extract file extension from filename."""
    if not filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


async def _read_upload(file: UploadFile) -> bytes:
    """Validate the extension and read the upload in chunks up to the size limit."""
    ext = _get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '.{ext}'. Allowed: CSV, TSV, XLSX",
        )

    max_bytes = settings.max_upload_size_bytes
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await file.read(64 * 1024)  # 64 KB chunks
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds maximum size of {settings.etl.max_upload_mb} MB",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _parse(
    content: bytes,
    filename: str,
    source: str,
    reference: ReferenceData,
) -> tuple[ETLModule, list[dict]]:
    etl = ETLModule(reference=reference)
    try:
        rows = etl.load_file(content, filename, source)
    except (ValueError, BadZipFile) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e) or "Could not read spreadsheet",
        )

    if not rows:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Spreadsheet has no data rows",
        )
    return etl, rows


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_import(
    reference: ReferenceDataDep,
    file: UploadFile = File(..., description="CSV, TSV or XLSX booking file"),
    source: str = Query(SOURCE_DEFAULT, description="Import source tag, e.g. DEFAULT or MASTER"),
) -> ImportPreviewResponse:
    """Parse a booking file and return the rows it would import, without saving."""
    content = await _read_upload(file)
    filename = file.filename or "upload.csv"
    etl, rows = _parse(content, filename, source, reference)

    return ImportPreviewResponse(
        filename=filename,
        source=source.upper(),
        row_count=len(rows),
        rows=rows,
        quality_issues=etl.quality_report,
    )


@router.post("", response_model=ImportResultResponse)
async def run_import(
    store: BookingStoreDep,
    reference: ReferenceDataDep,
    file: UploadFile = File(..., description="CSV, TSV or XLSX booking file"),
    source: str = Query(SOURCE_DEFAULT, description="Import source tag, e.g. DEFAULT or MASTER"),
) -> ImportResultResponse:
    """Import a booking file, merging rows into existing bookings.

    Rows are matched by booking reference, then transaction id. Rows that
    fail to save are reported in `errors` and do not stop the import.
    """
    content = await _read_upload(file)
    filename = file.filename or "upload.csv"
    etl, rows = _parse(content, filename, source, reference)

    stats = await etl.upsert_to_db(rows, store)
    logger.info(
        "Imported %s (%s): %d inserted, %d updated, %d failed",
        filename,
        source.upper(),
        stats.inserted,
        stats.updated,
        stats.failed,
    )

    return ImportResultResponse(
        filename=filename,
        source=source.upper(),
        row_count=len(rows),
        inserted=stats.inserted,
        updated=stats.updated,
        failed=stats.failed,
        lead_ids=stats.lead_ids,
        errors=stats.errors,
        quality_issues=etl.quality_report,
    )
