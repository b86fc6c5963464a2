"""Aggregated result of one poll cycle.

A run never raises for per-entity delivery problems; instead every entity
with changes gets an :class:`EntityOutcome` and the caller inspects the
:class:`RunResult`.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class OutcomeStatus(StrEnum):
    DELIVERED = "delivered"
    FAILED = "failed"
    SKIPPED = "skipped"


class RunStatus(StrEnum):
    COMPLETED = "completed"
    ABORTED = "aborted"


class EntityOutcome(BaseModel):
    """Delivery outcome for one entity (or one of its messages)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entity: str
    status: OutcomeStatus
    changed_fields: tuple[str, ...] = ()
    message: str = ""
    error: str | None = None


class RunResult(BaseModel):
    """Everything one invocation of the poller did."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: RunStatus
    entities_seen: int = 0
    changes: int = 0
    outcomes: tuple[EntityOutcome, ...] = Field(default=())
    error: str | None = None
    """Cause of an aborted run."""

    @property
    def delivered(self) -> list[EntityOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.DELIVERED]

    @property
    def failed(self) -> list[EntityOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILED]

    @property
    def skipped(self) -> list[EntityOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.SKIPPED]

    @property
    def exit_code(self) -> int:
        """Process exit status: 0 when fetch and persist completed."""
        return 0 if self.status == RunStatus.COMPLETED else 1
