"""Fetch the spreadsheet export and turn it into a :class:`Snapshot`."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from carnabot._tabular import parse_rows
from carnabot._transport import Transport
from carnabot.config import PollerConfig
from carnabot.exceptions import ParseError
from carnabot.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)


def _cell(row: Sequence[str], index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


def _resolve_columns(header: Sequence[str], config: PollerConfig) -> tuple[int, dict[str, int | None]]:
    """Map the identifier and tracked columns to header positions."""
    normalized = [cell.strip().lower() for cell in header]

    def position(column: str) -> int | None:
        target = column.strip().lower()
        return normalized.index(target) if target in normalized else None

    id_index = position(config.identifier_column)
    if id_index is None:
        raise ParseError(f"Identifier column {config.identifier_column!r} not found in header {normalized}")

    field_indexes: dict[str, int | None] = {}
    for tracked in config.tracked_fields:
        index = position(tracked.column)
        if index is None:
            _logger.warning("Tracked column %r not found in header; values read as empty", tracked.column)
        field_indexes[tracked.name] = index
    return id_index, field_indexes


def build_snapshot(rows: Sequence[Sequence[str]], config: PollerConfig) -> Snapshot:
    """Build a snapshot from decoded rows; the first row is the header.

    Rows without an identifier are skipped.  Duplicate identifiers keep the
    last occurrence.
    """
    if not rows:
        raise ParseError("Payload contains no rows; cannot resolve header")

    id_index, field_indexes = _resolve_columns(rows[0], config)

    entities: dict[str, dict[str, str]] = {}
    skipped = 0
    for row in rows[1:]:
        name = _cell(row, id_index)
        if not name:
            skipped += 1
            continue
        entities[name] = {field: _cell(row, index) for field, index in field_indexes.items()}

    if skipped:
        _logger.debug("Skipped %d rows without identifier", skipped)
    return Snapshot(entities=entities)


class SnapshotFetcher:
    """Retrieve the current dataset from the configured source."""

    def __init__(self, config: PollerConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def fetch_rows(self) -> list[list[str]]:
        text = await self._transport.get_text(self._config.source_url)
        return parse_rows(text)

    async def fetch(self) -> Snapshot:
        """Fetch and parse the current snapshot.

        Raises
        ------
        FetchError
            The source could not be reached.
        ParseError
            The identifier column is missing from the header.
        """
        rows = await self.fetch_rows()
        snapshot = build_snapshot(rows, self._config)
        _logger.info("Fetched %d entities from source", len(snapshot))
        return snapshot
