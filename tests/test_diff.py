from __future__ import annotations

from carnabot.diff import diff_snapshots, group_by_entity
from carnabot.models.change import FieldChange
from carnabot.models.snapshot import Snapshot

FIELDS = ("location", "time")


def _snap(data: dict[str, dict[str, str]]) -> Snapshot:
    return Snapshot.from_mapping(data)


def test_single_field_change() -> None:
    prior = _snap({"BlocoX": {"location": "Praça A", "time": "14h"}})
    current = _snap({"BlocoX": {"location": "Praça B", "time": "14h"}})

    assert diff_snapshots(prior, current, FIELDS) == [
        FieldChange(entity="BlocoX", field="location", old="Praça A", new="Praça B")
    ]


def test_both_fields_change() -> None:
    prior = _snap({"BlocoX": {"location": "Praça A", "time": "14h"}})
    current = _snap({"BlocoX": {"location": "Praça B", "time": "16h"}})

    changes = diff_snapshots(prior, current, FIELDS)
    assert [(c.field, c.new) for c in changes] == [("location", "Praça B"), ("time", "16h")]


def test_first_sighting_produces_no_changes() -> None:
    prior = _snap({})
    current = _snap({"Novo": {"location": "Praça A", "time": "14h"}})

    assert diff_snapshots(prior, current, FIELDS) == []


def test_blanked_field_is_not_a_change() -> None:
    prior = _snap({"BlocoX": {"location": "Praça A", "time": "14h"}})
    current = _snap({"BlocoX": {"location": "", "time": "14h"}})

    assert diff_snapshots(prior, current, FIELDS) == []


def test_previously_empty_field_filled_in_is_a_change() -> None:
    prior = _snap({"BlocoX": {"location": "", "time": "14h"}})
    current = _snap({"BlocoX": {"location": "Praça A", "time": "14h"}})

    assert [c.field for c in diff_snapshots(prior, current, FIELDS)] == ["location"]


def test_disappeared_entity_produces_nothing() -> None:
    prior = _snap({"Sumiu": {"location": "A", "time": "1h"}})
    current = _snap({})

    assert diff_snapshots(prior, current, FIELDS) == []


def test_identical_snapshots_are_idempotent() -> None:
    data = {"A": {"location": "1", "time": "2"}, "B": {"location": "3", "time": ""}}
    assert diff_snapshots(_snap(data), _snap(data), FIELDS) == []


def test_field_missing_from_prior_record_compares_as_empty() -> None:
    prior = _snap({"BlocoX": {"location": "Praça A"}})
    current = _snap({"BlocoX": {"location": "Praça A", "time": "14h"}})

    assert diff_snapshots(prior, current, FIELDS) == [
        FieldChange(entity="BlocoX", field="time", old="", new="14h")
    ]


def test_group_by_entity_preserves_order() -> None:
    changes = [
        FieldChange(entity="B", field="time", old="1", new="2"),
        FieldChange(entity="A", field="location", old="x", new="y"),
        FieldChange(entity="B", field="location", old="p", new="q"),
    ]
    grouped = group_by_entity(changes)

    assert list(grouped) == ["B", "A"]
    assert [c.field for c in grouped["B"]] == ["time", "location"]
