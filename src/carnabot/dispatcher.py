"""Deliver notifications through the OneSignal REST API.

Endpoint:
  - POST /api/v1/notifications  (broadcast to a segment)
"""

from __future__ import annotations

import logging
from typing import Any

from carnabot._transport import Transport
from carnabot.config import PushProviderConfig
from carnabot.exceptions import DispatchError, TransportError
from carnabot.models.notification import NotificationMessage
from carnabot.models.run import EntityOutcome, OutcomeStatus

_logger = logging.getLogger(__name__)


def build_notification_payload(config: PushProviderConfig, message: NotificationMessage) -> dict[str, Any]:
    """Build the request body for a segment broadcast."""
    return {
        "app_id": config.app_id,
        "included_segments": [config.segment],
        "contents": {locale: message.body for locale in config.locales},
        "headings": {locale: message.title for locale in config.locales},
    }


class NotificationDispatcher:
    """Send composed messages to every subscriber."""

    def __init__(self, config: PushProviderConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def send(self, message: NotificationMessage) -> None:
        """Deliver *message*; raises :class:`DispatchError` on any failure."""
        payload = build_notification_payload(self._config, message)
        headers = {"authorization": f"Basic {self._config.rest_key}"}

        try:
            response = await self._transport.post_json(self._config.api_url, payload, headers=headers)
        except TransportError as exc:
            raise DispatchError(
                f"Push request for {message.entity!r} failed: {exc}",
                entity=message.entity,
            ) from exc

        if not response.ok:
            raise DispatchError(
                f"Push provider returned HTTP {response.status} for {message.entity!r}: {response.text[:200]}",
                status_code=response.status,
                entity=message.entity,
            )
        _logger.debug("Push accepted for %r: HTTP %d %s", message.entity, response.status, response.text[:200])

    async def dispatch(self, message: NotificationMessage) -> EntityOutcome:
        """Deliver *message* and report the outcome without raising."""
        try:
            await self.send(message)
        except DispatchError as exc:
            _logger.warning("Notification for %r not delivered: %s", message.entity, exc)
            return EntityOutcome(
                entity=message.entity,
                status=OutcomeStatus.FAILED,
                changed_fields=message.changed_fields,
                message=message.body,
                error=str(exc),
            )

        _logger.info("Notification sent for %r", message.entity)
        return EntityOutcome(
            entity=message.entity,
            status=OutcomeStatus.DELIVERED,
            changed_fields=message.changed_fields,
            message=message.body,
        )
