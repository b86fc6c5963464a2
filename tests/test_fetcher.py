from __future__ import annotations

import pytest
from conftest import SOURCE_URL, FakeTransport, make_config

from carnabot.exceptions import FetchError, ParseError
from carnabot.fetcher import SnapshotFetcher, build_snapshot


def test_header_is_case_insensitive_and_trimmed() -> None:
    rows = [[" Bloco ", "LOCAL", "Hora"], ["BlocoX", "Praça A", "14h"]]
    snapshot = build_snapshot(rows, make_config())
    assert snapshot.to_mapping() == {"BlocoX": {"location": "Praça A", "time": "14h"}}


def test_columns_resolved_by_name_not_position() -> None:
    rows = [["hora", "obs", "bloco", "local"], ["16h", "", "BlocoY", "Largo B"]]
    snapshot = build_snapshot(rows, make_config())
    assert snapshot.get("BlocoY") == {"location": "Largo B", "time": "16h"}


def test_missing_identifier_column_raises_parse_error() -> None:
    with pytest.raises(ParseError):
        build_snapshot([["nome", "local", "hora"], ["X", "A", "1h"]], make_config())


def test_empty_payload_raises_parse_error() -> None:
    with pytest.raises(ParseError):
        build_snapshot([], make_config())


def test_short_and_nameless_rows_are_skipped() -> None:
    rows = [
        ["local", "hora", "bloco"],
        ["Praça A"],
        ["Praça B", "10h", ""],
        ["Praça C", "11h", "BlocoZ"],
    ]
    snapshot = build_snapshot(rows, make_config())
    assert snapshot.names() == ["BlocoZ"]


def test_short_row_fills_missing_tracked_values_with_empty() -> None:
    snapshot = build_snapshot([["bloco", "local", "hora"], ["BlocoX"]], make_config())
    assert snapshot.get("BlocoX") == {"location": "", "time": ""}


def test_duplicate_names_keep_last_occurrence() -> None:
    rows = [["bloco", "local", "hora"], ["X", "A", "1h"], ["X", "B", "2h"]]
    snapshot = build_snapshot(rows, make_config())
    assert snapshot.get("X") == {"location": "B", "time": "2h"}


def test_missing_tracked_column_reads_empty() -> None:
    snapshot = build_snapshot([["bloco", "local"], ["X", "A"]], make_config())
    assert snapshot.get("X") == {"location": "A", "time": ""}


@pytest.mark.asyncio
async def test_fetch_parses_quoted_payload() -> None:
    transport = FakeTransport(csv_text='Bloco,Local,Hora\r\n"Bloco, Alegre","Praça ""Nova""",14h\r\n\r\n')
    snapshot = await SnapshotFetcher(make_config(), transport).fetch()

    assert transport.gets == [SOURCE_URL]
    assert snapshot.get("Bloco, Alegre") == {"location": 'Praça "Nova"', "time": "14h"}


@pytest.mark.asyncio
async def test_fetch_propagates_fetch_error() -> None:
    transport = FakeTransport(fetch_error=FetchError("HTTP 503", status_code=503, url=SOURCE_URL))
    with pytest.raises(FetchError) as exc_info:
        await SnapshotFetcher(make_config(), transport).fetch()
    assert exc_info.value.status_code == 503
