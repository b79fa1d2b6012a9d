"""File parsing functions for CSV and XLSX booking imports."""

import io
import re

from openpyxl import load_workbook

from .constants import MAX_ROWS

BOM = "﻿"

_LINE_BREAK = re.compile(r"\r\n|\n")


class EmptyImportError(ValueError):
    """Raised when an import file has no usable content."""


def split_lines(text: str) -> list[str]:
    """Split text on CRLF/LF and drop blank lines."""
    return [line for line in _LINE_BREAK.split(text) if line.strip()]


def strip_bom(line: str) -> str:
    return line[1:] if line.startswith(BOM) else line


def detect_delimiter(header_line: str) -> str:
    """Pick tab when the header has strictly more tabs than commas."""
    return "\t" if header_line.count("\t") > header_line.count(",") else ","


def parse_csv_line(line: str, delimiter: str = ",") -> list[str]:
    """Tokenize one line into trimmed fields.

    A field wrapped in double quotes may contain the delimiter, and a doubled
    quote inside a quoted field is a literal quote. A quote left open at the
    end of the line closes there.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def decode_content(content: str | bytes) -> str:
    """Decode upload bytes as UTF-8 (BOM aware), falling back to Latin-1."""
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def read_csv_table(
    content: str | bytes,
    max_rows: int = MAX_ROWS,
) -> tuple[list[str], list[list[str]]]:
    """Parse CSV or TSV content into raw headers and rows.

    Args:
        content: File content as text or raw bytes.
        max_rows: Maximum number of data rows to return.

    Returns:
        Tuple of (headers, rows). Headers are returned as written; rows are
        lists of trimmed cell strings aligned with the headers.

    Raises:
        EmptyImportError: If the content has no non-blank line.
    """
    lines = split_lines(decode_content(content))
    if not lines:
        raise EmptyImportError("Import file is empty")

    header_line = strip_bom(lines[0])
    delimiter = detect_delimiter(header_line)
    headers = parse_csv_line(header_line, delimiter)

    rows = [parse_csv_line(line, delimiter) for line in lines[1 : max_rows + 1]]
    return headers, rows


def read_xlsx_table(
    content: bytes,
    max_rows: int = MAX_ROWS,
) -> tuple[list[str], list[list[str]]]:
    """Parse the first worksheet of an XLSX file into raw headers and rows.

    Uses openpyxl read_only mode and iterates rows lazily.

    Raises:
        EmptyImportError: If the workbook has no sheet or no header row.
    """
    wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    try:
        ws = wb.active
        if ws is None:
            raise EmptyImportError("XLSX file has no worksheets")

        row_iter = ws.iter_rows(values_only=True)
        try:
            raw_headers = next(row_iter)
        except StopIteration:
            raise EmptyImportError("XLSX file is empty") from None

        headers = [_cell_text(h) for h in raw_headers]
        if not any(headers):
            raise EmptyImportError("XLSX file has no valid headers")

        rows: list[list[str]] = []
        for row_values in row_iter:
            if len(rows) >= max_rows:
                break
            cells = [_cell_text(v) for v in row_values]
            if any(cells):
                rows.append(cells)
        return headers, rows
    finally:
        wb.close()


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
