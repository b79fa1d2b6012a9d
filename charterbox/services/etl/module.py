"""ETL orchestrator composing parsing, conversion, detection and reconciliation."""

import logging
from typing import Any

from charterbox.config import Settings, get_settings
from charterbox.schemas.import_schemas import QualityIssue

from .constants import IMPORT_SOURCES, SOURCE_DEFAULT, SOURCE_MASTER
from .converters import convert_value
from .mapping import map_headers
from .packages import DEFAULT_KEYWORD_TABLES, UNCATEGORIZED_FLAG, KeywordTables, PackageDetector
from .parsers import read_csv_table, read_xlsx_table
from .reconcile import BookingStore, UpsertStats, upsert_leads
from .reference import ReferenceData
from .transform import transform_row

logger = logging.getLogger(__name__)


class ETLModule:
    """Turns booking files into lead rows and reconciles them with the store.

    One instance holds the reference data of an import; `quality_report`
    lists the cells replaced by defaults during the last load.
    """

    def __init__(
        self,
        reference: ReferenceData | None = None,
        tables: KeywordTables = DEFAULT_KEYWORD_TABLES,
        acting_user_id: str | None = None,
        settings: Settings | None = None,
    ):
        self.reference = reference or ReferenceData()
        self.detector = PackageDetector(tables, self.reference)
        self.acting_user_id = acting_user_id
        self.etl_config = (settings or get_settings()).etl
        self.quality_report: list[QualityIssue] = []

    def load_input_a(self, text: str | bytes) -> list[dict[str, Any]]:
        """Load a booking file (ticketing system export)."""
        return self.load_input(text, SOURCE_DEFAULT)

    def load_input_b(self, text: str | bytes) -> list[dict[str, Any]]:
        """Load a master operations file."""
        return self.load_input(text, SOURCE_MASTER)

    def load_input(self, content: str | bytes, source: str = SOURCE_DEFAULT) -> list[dict[str, Any]]:
        """Load delimited text for any import source.

        Raises:
            EmptyImportError: If the content is empty.
            ValueError: If the source tag is unknown.
        """
        headers, rows = read_csv_table(content, self.etl_config.max_rows + 1)
        return self.load_table(headers, rows, source)

    def load_file(self, content: bytes, filename: str, source: str = SOURCE_DEFAULT) -> list[dict[str, Any]]:
        """Load an uploaded CSV, TSV or XLSX file."""
        if filename.lower().endswith(".xlsx"):
            headers, rows = read_xlsx_table(content, self.etl_config.max_rows + 1)
            return self.load_table(headers, rows, source)
        return self.load_input(content, source)

    def load_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        source: str = SOURCE_DEFAULT,
    ) -> list[dict[str, Any]]:
        """Map, convert, detect and transform pre-split rows.

        Rows beyond `etl.max_rows` are dropped and reported as a
        `rows_truncated` quality issue.
        """
        source = normalize_source(source)
        self.quality_report = []
        fields = map_headers(headers)

        max_rows = self.etl_config.max_rows
        truncated = len(rows) > max_rows
        rows = rows[:max_rows]

        results: list[dict[str, Any]] = []
        for row_number, cells in enumerate(rows, start=1):
            row = self._convert_row(fields, cells, row_number)
            raw_yacht = _last_cell_for(fields, cells, "yacht")
            self.detector.apply(raw_yacht, row, source)

            uncategorized = row.pop(UNCATEGORIZED_FLAG, None)
            if uncategorized:
                self.quality_report.append(
                    QualityIssue(
                        row=row_number,
                        field="package_quantities",
                        raw=uncategorized,
                        issue="package_uncategorized",
                    )
                )
            results.append(self.transform_row(row))

        if self.quality_report:
            logger.warning(
                "%s import: %d of %d rows parsed with %d defaulted values",
                source,
                len({issue.row for issue in self.quality_report}),
                len(results),
                len(self.quality_report),
            )
        if truncated:
            logger.warning("%s import truncated: rows after %d were ignored", source, max_rows)
            self.quality_report.append(
                QualityIssue(row=max_rows + 1, field="rows", issue="rows_truncated")
            )
        logger.info("Parsed %d %s rows", len(results), source)
        return results

    def transform_row(self, row: dict[str, Any]) -> dict[str, Any]:
        return transform_row(row, self.reference)

    async def upsert_to_db(self, rows: list[dict[str, Any]], store: BookingStore) -> UpsertStats:
        """Reconcile transformed rows against the store."""
        return await upsert_leads(
            rows,
            store,
            prefix=self.etl_config.lead_id_prefix,
            floor=self.etl_config.lead_id_floor,
            width=self.etl_config.lead_id_width,
        )

    def _convert_row(self, fields: list[str | None], cells: list[str], row_number: int) -> dict[str, Any]:
        row: dict[str, Any] = {}
        for index, field in enumerate(fields):
            if field is None:
                continue
            raw = cells[index] if index < len(cells) else ""
            converted = convert_value(field, raw, self.reference, self.acting_user_id)
            if converted.used_default:
                self.quality_report.append(QualityIssue(row=row_number, field=field, raw=raw))

            # Several ticketing columns can feed the same package counter
            if field.startswith("pkg_") and isinstance(converted.value, int) and field in row:
                row[field] += converted.value
            else:
                row[field] = converted.value
        return row


def normalize_source(source: str | None) -> str:
    """Upper-case a source tag, rejecting unknown ones."""
    tag = (source or SOURCE_DEFAULT).strip().upper()
    if tag not in IMPORT_SOURCES:
        raise ValueError(f"Unknown import source '{source}'. Expected one of: {', '.join(IMPORT_SOURCES)}")
    return tag


def _last_cell_for(fields: list[str | None], cells: list[str], target: str) -> str:
    raw = ""
    for index, field in enumerate(fields):
        if field == target and index < len(cells):
            raw = cells[index]
    return raw
