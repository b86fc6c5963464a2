from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from carnabot._transport import HttpResponse
from carnabot.config import PollerConfig, PushProviderConfig
from carnabot.exceptions import FetchError, TransportError

SOURCE_URL = "https://sheets.example.com/export?format=csv"
PUSH_URL = "https://push.example.com/api/v1/notifications"


@dataclass
class FakeTransport:
    """In-memory stand-in for the HTTP transport."""

    csv_text: str = "bloco,local,hora\n"
    fetch_error: FetchError | None = None
    push_status: int = 200
    push_statuses: dict[str, int] = field(default_factory=dict)
    push_network_error: bool = False
    gets: list[str] = field(default_factory=list)
    posts: list[dict[str, Any]] = field(default_factory=list)

    async def get_text(self, url: str) -> str:
        self.gets.append(url)
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.csv_text

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        self.posts.append({"url": url, "payload": dict(payload), "headers": dict(headers or {})})
        if self.push_network_error:
            raise TransportError("connection reset", url=url)
        body = next(iter(payload["contents"].values()))
        for needle, status in self.push_statuses.items():
            if needle in body:
                return HttpResponse(status=status, text='{"errors":["nope"]}')
        return HttpResponse(status=self.push_status, text='{"id":"abc","recipients":3}')

    @property
    def sent_bodies(self) -> list[str]:
        return [next(iter(p["payload"]["contents"].values())) for p in self.posts]


def make_config(tmp_path: Any = None, **overrides: Any) -> PollerConfig:
    kwargs: dict[str, Any] = {
        "source_url": SOURCE_URL,
        "push": PushProviderConfig(app_id="app-123", rest_key="rest-secret", api_url=PUSH_URL),
    }
    if tmp_path is not None:
        kwargs["snapshot_path"] = str(tmp_path / "snapshot.json")
    kwargs.update(overrides)
    return PollerConfig(**kwargs)


@pytest.fixture
def config(tmp_path: Any) -> PollerConfig:
    return make_config(tmp_path)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
