"""One fetch → diff → notify → persist cycle."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from carnabot._lock import RunLock, lock_path_for
from carnabot._transport import HttpTransport, Transport
from carnabot.composer import NotificationComposer
from carnabot.config import PollerConfig
from carnabot.diff import diff_snapshots, group_by_entity
from carnabot.dispatcher import NotificationDispatcher
from carnabot.exceptions import CarnabotError, FetchError, ParseError, RunInProgressError
from carnabot.fetcher import SnapshotFetcher
from carnabot.models.run import EntityOutcome, OutcomeStatus, RunResult, RunStatus
from carnabot.store import SnapshotStore

_logger = logging.getLogger(__name__)


class Poller:
    """Run poll cycles against one data source.

    Usage::

        async with Poller(config) as poller:
            result = await poller.run_once()

    The poller keeps no state between runs other than the persisted
    snapshot; scheduling is left to the caller (cron, systemd timer, ...).
    """

    def __init__(
        self,
        config: PollerConfig,
        *,
        transport: Transport | None = None,
        store: SnapshotStore | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._external_session = session is not None
        self._http_session = session
        self._store = store or SnapshotStore(
            config.snapshot_path,
            columns={field.name: field.column for field in config.tracked_fields},
        )
        self._lock = RunLock(lock_path_for(config.source_url, self._store.path.parent))
        self._composer = NotificationComposer(config)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Poller:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.http_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise CarnabotError("Poller not initialized. Use 'async with Poller(...) as poller:'")
        return self._transport

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run_once(self) -> RunResult:
        """Perform one poll cycle.

        Fetch and header failures abort the run before the snapshot is
        touched.  Once the fetch succeeded the run always completes and
        persists the new snapshot, whatever happened to individual
        notifications.
        """
        transport = self._require_transport()
        try:
            with self._lock:
                return await self._run(transport)
        except RunInProgressError as exc:
            _logger.error("Run aborted: %s", exc)
            return RunResult(status=RunStatus.ABORTED, error=str(exc))

    async def _run(self, transport: Transport) -> RunResult:
        fetcher = SnapshotFetcher(self._config, transport)
        try:
            current = await fetcher.fetch()
        except (FetchError, ParseError) as exc:
            _logger.error("Run aborted, snapshot left untouched: %s", exc)
            return RunResult(status=RunStatus.ABORTED, error=str(exc))

        prior = self._store.load()
        changes = diff_snapshots(prior, current, self._config.field_names)
        _logger.info("Detected %d field changes across %d known entities", len(changes), len(prior))

        dispatcher = NotificationDispatcher(self._config.push, transport)
        outcomes: list[EntityOutcome] = []
        for entity, entity_changes in group_by_entity(changes).items():
            messages = self._composer.compose(entity, entity_changes, current.get(entity))
            if not messages:
                outcomes.append(
                    EntityOutcome(
                        entity=entity,
                        status=OutcomeStatus.SKIPPED,
                        changed_fields=tuple(c.field for c in entity_changes),
                    )
                )
                continue
            for message in messages:
                if self._config.dry_run:
                    _logger.info("Dry run, not sending: %s", message.body)
                    outcomes.append(
                        EntityOutcome(
                            entity=entity,
                            status=OutcomeStatus.SKIPPED,
                            changed_fields=message.changed_fields,
                            message=message.body,
                        )
                    )
                    continue
                outcomes.append(await dispatcher.dispatch(message))

        self._store.save(current)

        result = RunResult(
            status=RunStatus.COMPLETED,
            entities_seen=len(current),
            changes=len(changes),
            outcomes=tuple(outcomes),
        )
        _logger.info(
            "Run complete: %d delivered, %d failed, %d skipped",
            len(result.delivered),
            len(result.failed),
            len(result.skipped),
        )
        return result
