"""Field-level comparison of two snapshots."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from carnabot.models.change import FieldChange
from carnabot.models.snapshot import Snapshot


def diff_snapshots(prior: Snapshot, current: Snapshot, fields: Sequence[str]) -> list[FieldChange]:
    """Return the changes between *prior* and *current*.

    Only entities present in both snapshots are compared: a first sighting is
    baseline only, and an entity that disappeared produces nothing.  A field
    changes when its new value is non-empty and differs from the old one, so
    a source that temporarily blanks a cell does not trigger an alert.
    """
    changes: list[FieldChange] = []
    for name, values in current.entities.items():
        previous = prior.get(name)
        if previous is None:
            continue
        for field in fields:
            new = values.get(field, "")
            old = previous.get(field, "")
            if new and new != old:
                changes.append(FieldChange(entity=name, field=field, old=old, new=new))
    return changes


def group_by_entity(changes: Iterable[FieldChange]) -> dict[str, list[FieldChange]]:
    grouped: dict[str, list[FieldChange]] = {}
    for change in changes:
        grouped.setdefault(change.entity, []).append(change)
    return grouped
