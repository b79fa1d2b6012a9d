"""Pydantic schemas for spreadsheet booking imports."""

from typing import Any

from pydantic import BaseModel, Field


class QualityIssue(BaseModel):
    """A cell that was replaced by a default or left unresolved during import."""

    row: int = Field(..., description="1-based data row number")
    field: str
    raw: str | None = None
    issue: str = "default"


class ImportPreviewResponse(BaseModel):
    """Response after parsing a spreadsheet without persisting it."""

    filename: str
    source: str
    row_count: int
    rows: list[dict[str, Any]]
    quality_issues: list[QualityIssue]


class ImportResultResponse(BaseModel):
    """Response after reconciling an import against stored bookings."""

    filename: str
    source: str
    row_count: int
    inserted: int
    updated: int
    failed: int
    lead_ids: list[str]
    errors: list[str]
    quality_issues: list[QualityIssue]
