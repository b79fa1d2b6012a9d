"""Column header mapping for booking imports."""

import re

from .constants import HEADER_MAPPING

_WHITESPACE = re.compile(r"\s+")


def normalize_header(header: str) -> str:
    """Trim, lower-case and collapse whitespace runs to underscores.

    Args:
        header: Column header as written in the file.

    Returns:
        Normalized header token, e.g. "Booking RefNO" -> "booking_refno".
    """
    return _WHITESPACE.sub("_", header.strip().lower())


def map_header(header: str) -> str | None:
    """Look up the canonical field for a header, or None if the column is ignored."""
    return HEADER_MAPPING.get(normalize_header(header))


def map_headers(headers: list[str]) -> list[str | None]:
    """Map every header of a file, keeping positions aligned with the columns."""
    return [map_header(h) for h in headers]
