"""Poller configuration for carnabot."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from carnabot._constants import (
    COMBINED_TEMPLATE,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_IDENTIFIER_COLUMN,
    DEFAULT_LOCALES,
    DEFAULT_SEGMENT,
    DEFAULT_SNAPSHOT_PATH,
    DEFAULT_TITLE,
    LOCATION_TEMPLATE,
    ONESIGNAL_API_URL,
    TIME_TEMPLATE,
)
from carnabot.exceptions import ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclasses.dataclass(frozen=True)
class TrackedField:
    """A spreadsheet column whose changes are worth a notification.

    Parameters
    ----------
    name : str
        Field identifier used in snapshots and message templates.
    column : str
        Header name of the column in the source (case-insensitive).
    template : str
        Message used when only this field changed.  Formatted with
        ``entity`` and every tracked field name.
    """

    name: str
    column: str
    template: str


def _default_tracked_fields() -> tuple[TrackedField, ...]:
    return (
        TrackedField(name="location", column="local", template=LOCATION_TEMPLATE),
        TrackedField(name="time", column="hora", template=TIME_TEMPLATE),
    )


@dataclasses.dataclass(frozen=True)
class PushProviderConfig:
    """OneSignal credentials and targeting.

    Parameters
    ----------
    app_id : str
        OneSignal application identifier.
    rest_key : str
        OneSignal REST API key, sent as ``Authorization: Basic <key>``.
    api_url : str
        Notifications endpoint.
    segment : str
        Target segment; the default reaches every subscriber.
    locales : tuple[str, ...]
        Locales the message body and title are published under.
    """

    app_id: str
    rest_key: str = dataclasses.field(repr=False)
    api_url: str = ONESIGNAL_API_URL
    segment: str = DEFAULT_SEGMENT
    locales: tuple[str, ...] = DEFAULT_LOCALES


@dataclasses.dataclass(frozen=True)
class PollerConfig:
    """Configuration for one poll cycle.

    Parameters
    ----------
    source_url : str
        URL of the CSV export to poll.
    push : PushProviderConfig
        Push provider credentials.
    snapshot_path : str
        File holding the last known snapshot.
    identifier_column : str
        Header name of the column identifying each entity.
    tracked_fields : tuple[TrackedField, ...]
        Columns to diff between polls.
    title : str
        Notification heading.
    combined_template : str
        Message used when every tracked field changed at once.
    http_timeout : float
        Total timeout in seconds for each HTTP request.
    dry_run : bool
        Compose and log messages without sending them.  The snapshot is
        still persisted.
    """

    source_url: str
    push: PushProviderConfig
    snapshot_path: str = DEFAULT_SNAPSHOT_PATH
    identifier_column: str = DEFAULT_IDENTIFIER_COLUMN
    tracked_fields: tuple[TrackedField, ...] = dataclasses.field(default_factory=_default_tracked_fields)
    title: str = DEFAULT_TITLE
    combined_template: str = COMBINED_TEMPLATE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    dry_run: bool = False

    def __post_init__(self) -> None:
        if not self.source_url:
            raise ConfigError("source_url is required")
        if not self.tracked_fields:
            raise ConfigError("at least one tracked field is required")
        names = [field.name for field in self.tracked_fields]
        if len(set(names)) != len(names):
            raise ConfigError(f"tracked field names must be unique, got {names}")

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(field.name for field in self.tracked_fields)

    @classmethod
    def from_env(cls, **overrides: Any) -> PollerConfig:
        """Create configuration from environment variables.

        Reads ``CARNABOT_SOURCE_URL``, ``ONESIGNAL_APP_ID`` and
        ``ONESIGNAL_REST_KEY`` plus the optional ``CARNABOT_*`` and
        ``ONESIGNAL_*`` variables.  Explicit keyword arguments override
        environment values.

        Raises
        ------
        ConfigError
            If a required value is missing or a numeric value is malformed.
        """
        env = os.environ

        push_kwargs: dict[str, Any] = {}
        _ENV_PUSH_MAP = {
            "ONESIGNAL_APP_ID": "app_id",
            "ONESIGNAL_REST_KEY": "rest_key",
            "ONESIGNAL_API_URL": "api_url",
            "ONESIGNAL_SEGMENT": "segment",
        }
        for env_key, field_name in _ENV_PUSH_MAP.items():
            val = env.get(env_key)
            if val:
                push_kwargs[field_name] = val

        locales_env = env.get("ONESIGNAL_LOCALES")
        if locales_env:
            push_kwargs["locales"] = _env_list(locales_env)

        push_overrides = overrides.pop("push", None)
        if isinstance(push_overrides, dict):
            push_kwargs.update(push_overrides)
        elif isinstance(push_overrides, PushProviderConfig):
            push_kwargs = dataclasses.asdict(push_overrides)

        for required in ("app_id", "rest_key"):
            if not push_kwargs.get(required):
                raise ConfigError(f"push.{required} is required (set ONESIGNAL_{required.upper()})")
        push = PushProviderConfig(**push_kwargs)

        _ENV_CONFIG_MAP = {
            "CARNABOT_SOURCE_URL": "source_url",
            "CARNABOT_SNAPSHOT_PATH": "snapshot_path",
            "CARNABOT_IDENTIFIER_COLUMN": "identifier_column",
            "CARNABOT_TITLE": "title",
        }
        config_kwargs: dict[str, Any] = {"push": push}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        timeout_env = env.get("CARNABOT_HTTP_TIMEOUT")
        if timeout_env is not None and "http_timeout" not in overrides:
            try:
                config_kwargs["http_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise ConfigError(f"CARNABOT_HTTP_TIMEOUT must be numeric, got {timeout_env!r}") from exc

        if "dry_run" not in overrides:
            config_kwargs["dry_run"] = _env_bool(env.get("CARNABOT_DRY_RUN"), False)

        config_kwargs.update(overrides)

        if not config_kwargs.get("source_url"):
            raise ConfigError("source_url is required (set CARNABOT_SOURCE_URL)")

        return cls(**config_kwargs)
