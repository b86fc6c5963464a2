"""carnabot - spreadsheet change detection with push notifications."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("carnabot")
except PackageNotFoundError:
    __version__ = "0+local"
from carnabot.composer import NotificationComposer
from carnabot.config import PollerConfig, PushProviderConfig, TrackedField
from carnabot.diff import diff_snapshots
from carnabot.dispatcher import NotificationDispatcher
from carnabot.exceptions import (
    CarnabotError,
    ConfigError,
    DispatchError,
    FetchError,
    ParseError,
    RunInProgressError,
    SnapshotStoreError,
    TransportError,
)
from carnabot.fetcher import SnapshotFetcher
from carnabot.models import (
    EntityOutcome,
    FieldChange,
    NotificationMessage,
    OutcomeStatus,
    RunResult,
    RunStatus,
    Snapshot,
)
from carnabot.poller import Poller
from carnabot.store import SnapshotStore

__all__ = [
    "__version__",
    "CarnabotError",
    "ConfigError",
    "DispatchError",
    "EntityOutcome",
    "FetchError",
    "FieldChange",
    "NotificationComposer",
    "NotificationDispatcher",
    "NotificationMessage",
    "OutcomeStatus",
    "ParseError",
    "Poller",
    "PollerConfig",
    "PushProviderConfig",
    "RunInProgressError",
    "RunResult",
    "RunStatus",
    "Snapshot",
    "SnapshotFetcher",
    "SnapshotStore",
    "SnapshotStoreError",
    "TrackedField",
    "TransportError",
    "diff_snapshots",
]
