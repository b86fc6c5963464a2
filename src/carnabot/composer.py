"""Turn an entity's field changes into notification text."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from carnabot.config import PollerConfig
from carnabot.models.change import FieldChange
from carnabot.models.notification import NotificationMessage


class NotificationComposer:
    """Compose messages from the configured templates.

    When every tracked field changed at once a single combined message is
    produced; otherwise there is one message per changed field. Placeholders
    for fields that did not change are filled from *current*, the entity's
    record in the newest snapshot.
    """

    def __init__(self, config: PollerConfig) -> None:
        self._config = config
        self._templates = {field.name: field.template for field in config.tracked_fields}

    def _render(self, template: str, entity: str, values: dict[str, str]) -> str:
        return template.format(entity=entity, **values)

    def compose(
        self,
        entity: str,
        changes: Sequence[FieldChange],
        current: Mapping[str, str] | None = None,
    ) -> list[NotificationMessage]:
        relevant = [c for c in changes if c.entity == entity and c.field in self._templates]
        if not relevant:
            return []

        values = {name: (current or {}).get(name, "") for name in self._config.field_names}
        values.update({change.field: change.new for change in relevant})
        changed = tuple(name for name in self._config.field_names if any(c.field == name for c in relevant))

        if len(changed) == len(self._config.field_names):
            body = self._render(self._config.combined_template, entity, values)
            return [
                NotificationMessage(entity=entity, title=self._config.title, body=body, changed_fields=changed)
            ]

        return [
            NotificationMessage(
                entity=entity,
                title=self._config.title,
                body=self._render(self._templates[name], entity, values),
                changed_fields=(name,),
            )
            for name in changed
        ]
