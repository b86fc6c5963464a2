"""Decoder for quoted, comma-delimited spreadsheet exports.

Handles the dialect Google Sheets and most spreadsheet tools emit:

* fields separated by ``,``; rows by CRLF, LF or a lone CR
* quoted fields may contain commas, quotes (doubled: ``""``) and newlines
* every field is stripped of surrounding whitespace
* rows with no non-empty field are dropped
"""

from __future__ import annotations

import csv
import io

from carnabot.exceptions import ParseError

_BOM = "\ufeff"


def parse_rows(text: str) -> list[list[str]]:
    """Split *text* into rows of stripped string fields.

    Text after a closing quote is kept, as spreadsheet tools do. Raises
    :class:`ParseError` when the reader rejects the text.
    """
    if text.startswith(_BOM):
        text = text[1:]

    reader = csv.reader(io.StringIO(text, newline=""), skipinitialspace=True)
    rows: list[list[str]] = []
    try:
        for record in reader:
            row = [cell.strip() for cell in record]
            if any(row):
                rows.append(row)
    except csv.Error as exc:
        raise ParseError(f"Malformed CSV near line {reader.line_num}: {exc}") from exc
    return rows
