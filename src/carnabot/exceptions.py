"""Custom exception hierarchy for carnabot."""

from __future__ import annotations


class CarnabotError(Exception):
    """Base exception for all carnabot errors."""


class ConfigError(CarnabotError):
    """Invalid or missing configuration."""


class TransportError(CarnabotError):
    """HTTP-level failure (network error, timeout, non-2xx)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class FetchError(TransportError):
    """The data source could not be reached."""


class ParseError(CarnabotError):
    """The fetched payload does not have the expected header.

    Usually means the upstream spreadsheet was restructured (the identifier
    column was renamed or removed).  Runs abort without touching the
    persisted snapshot.
    """


class DispatchError(CarnabotError):
    """A notification could not be delivered to the push provider."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        entity: str = "",
    ) -> None:
        self.status_code = status_code
        self.entity = entity
        super().__init__(message)


class SnapshotStoreError(CarnabotError):
    """The snapshot file could not be written."""


class RunInProgressError(CarnabotError):
    """Another run for the same data source holds the run lock."""
