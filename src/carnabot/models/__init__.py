"""Data models for the poller."""

from carnabot.models.change import FieldChange
from carnabot.models.notification import NotificationMessage
from carnabot.models.run import EntityOutcome, OutcomeStatus, RunResult, RunStatus
from carnabot.models.snapshot import Snapshot

__all__ = [
    "EntityOutcome",
    "FieldChange",
    "NotificationMessage",
    "OutcomeStatus",
    "RunResult",
    "RunStatus",
    "Snapshot",
]
