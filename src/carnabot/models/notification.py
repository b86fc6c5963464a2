"""Composed notification message."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NotificationMessage(BaseModel):
    """One push notification about one entity."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entity: str
    title: str
    body: str
    changed_fields: tuple[str, ...] = Field(default=())
    """Tracked fields this message reports."""
