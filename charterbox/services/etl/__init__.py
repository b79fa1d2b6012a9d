"""Booking import pipeline: parse, map, convert, detect packages, reconcile."""

from .constants import (
    HEADER_MAPPING,
    IMPORT_SOURCES,
    MAX_ROWS,
    PACKAGE_COUNTERS,
    SOURCE_DEFAULT,
    SOURCE_GYG,
    SOURCE_MASTER,
    SOURCE_RAYNA,
    SOURCE_RUZINN,
)
from .converters import ConvertedValue, convert_value, parse_datetime
from .mapping import map_header, map_headers, normalize_header
from .module import ETLModule, normalize_source
from .packages import (
    DEFAULT_KEYWORD_TABLES,
    KeywordTables,
    PackageDetector,
    PackageRule,
    ProductLabel,
    detect_package_name,
    detect_yacht_id,
    parse_pax,
    split_product_label,
)
from .parsers import (
    EmptyImportError,
    detect_delimiter,
    parse_csv_line,
    read_csv_table,
    read_xlsx_table,
    split_lines,
    strip_bom,
)
from .reconcile import (
    BookingStore,
    LeadIdConflictError,
    UpsertStats,
    build_lead_record,
    insert_unless_exists,
    merge_lead,
    next_lead_id,
    upsert_leads,
)
from .reference import ReferenceData
from .transform import transform_row

__all__ = [
    # Constants
    "HEADER_MAPPING",
    "IMPORT_SOURCES",
    "MAX_ROWS",
    "PACKAGE_COUNTERS",
    "SOURCE_DEFAULT",
    "SOURCE_GYG",
    "SOURCE_MASTER",
    "SOURCE_RAYNA",
    "SOURCE_RUZINN",
    # Parsers
    "EmptyImportError",
    "detect_delimiter",
    "parse_csv_line",
    "read_csv_table",
    "read_xlsx_table",
    "split_lines",
    "strip_bom",
    # Mapping
    "map_header",
    "map_headers",
    "normalize_header",
    # Converters
    "ConvertedValue",
    "convert_value",
    "parse_datetime",
    # Packages
    "DEFAULT_KEYWORD_TABLES",
    "KeywordTables",
    "PackageDetector",
    "PackageRule",
    "ProductLabel",
    "detect_package_name",
    "detect_yacht_id",
    "parse_pax",
    "split_product_label",
    # Transform
    "transform_row",
    # Reconciliation
    "BookingStore",
    "LeadIdConflictError",
    "UpsertStats",
    "build_lead_record",
    "insert_unless_exists",
    "merge_lead",
    "next_lead_id",
    "upsert_leads",
    # Orchestration
    "ETLModule",
    "ReferenceData",
    "normalize_source",
]
