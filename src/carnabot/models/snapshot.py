"""Snapshot of the tracked dataset at one fetch."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Snapshot(BaseModel):
    """Mapping of entity name to its tracked-field values.

    Names are unique and never empty; values are strings, possibly empty.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    entities: dict[str, dict[str, str]] = Field(default_factory=dict)

    @field_validator("entities")
    @classmethod
    def _reject_empty_names(cls, value: dict[str, dict[str, str]]) -> dict[str, dict[str, str]]:
        for name in value:
            if not name.strip():
                raise ValueError("entity name must be non-empty")
        return value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, str]]) -> Snapshot:
        return cls(entities={name: dict(fields) for name, fields in data.items()})

    def to_mapping(self) -> dict[str, dict[str, str]]:
        return {name: dict(fields) for name, fields in self.entities.items()}

    def get(self, name: str) -> dict[str, str] | None:
        return self.entities.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.entities

    def names(self) -> list[str]:
        return list(self.entities)

    def __len__(self) -> int:
        return len(self.entities)
