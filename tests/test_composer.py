from __future__ import annotations

from conftest import make_config

from carnabot.composer import NotificationComposer
from carnabot.config import TrackedField
from carnabot.models.change import FieldChange


def _change(field: str, new: str, entity: str = "BlocoX") -> FieldChange:
    return FieldChange(entity=entity, field=field, old="old", new=new)


def test_location_only_message() -> None:
    messages = NotificationComposer(make_config()).compose("BlocoX", [_change("location", "Praça B")])

    assert len(messages) == 1
    message = messages[0]
    assert message.changed_fields == ("location",)
    assert "BlocoX" in message.body
    assert "Praça B" in message.body
    assert message.title == "Carnabot Avisa! 🥁"


def test_time_only_message() -> None:
    messages = NotificationComposer(make_config()).compose("BlocoX", [_change("time", "16h")])

    assert [m.changed_fields for m in messages] == [("time",)]
    assert "16h" in messages[0].body


def test_all_fields_collapse_into_one_combined_message() -> None:
    messages = NotificationComposer(make_config()).compose(
        "BlocoX", [_change("location", "Praça B"), _change("time", "16h")]
    )

    assert len(messages) == 1
    assert messages[0].changed_fields == ("location", "time")
    assert messages[0].body == '🎊 O bloco "BlocoX" mudou tudo! Novo local: Praça B às 16h.'


def test_no_changes_no_messages() -> None:
    assert NotificationComposer(make_config()).compose("BlocoX", []) == []


def test_partial_change_with_three_fields_emits_one_per_field() -> None:
    config = make_config(
        tracked_fields=(
            TrackedField(name="location", column="local", template="{entity} @ {location}"),
            TrackedField(name="time", column="hora", template="{entity} at {time}"),
            TrackedField(name="date", column="data", template="{entity} on {date}"),
        ),
        combined_template="{entity}: {location} {time} {date}",
    )
    messages = NotificationComposer(config).compose("X", [_change("location", "L", "X"), _change("date", "D", "X")])

    assert [m.body for m in messages] == ["X @ L", "X on D"]


def test_single_field_template_uses_current_values_for_other_fields() -> None:
    config = make_config(
        tracked_fields=(
            TrackedField(name="location", column="local", template="{entity} em {location} às {time}"),
            TrackedField(name="time", column="hora", template="{entity} agora às {time} em {location}"),
        ),
    )
    messages = NotificationComposer(config).compose(
        "BlocoX", [_change("time", "16h")], {"location": "Praça A", "time": "16h"}
    )

    assert [m.body for m in messages] == ["BlocoX agora às 16h em Praça A"]


def test_missing_current_record_renders_other_fields_empty() -> None:
    config = make_config(
        tracked_fields=(
            TrackedField(name="location", column="local", template="{location}|{time}"),
            TrackedField(name="time", column="hora", template="{time}|{location}"),
        ),
    )
    messages = NotificationComposer(config).compose("BlocoX", [_change("time", "16h")])

    assert [m.body for m in messages] == ["16h|"]
