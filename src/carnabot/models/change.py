"""Field-level change events produced by the diff engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class FieldChange(BaseModel):
    """A tracked field of a known entity took a new, non-empty value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entity: str
    field: str
    old: str
    new: str
