"""HTTP transport for the data source and the push provider."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from carnabot._constants import USER_AGENT
from carnabot._redact import redact_for_log
from carnabot.exceptions import FetchError, TransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and body of a completed request."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by the fetcher and dispatcher.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_text(self, url: str) -> str:
        ...

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        ...


class HttpTransport:
    """aiohttp-backed transport."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_text(self, url: str) -> str:
        """GET *url* and return the decoded body.

        Raises :class:`FetchError` on network failure, a non-2xx status or a
        body that does not decode as UTF-8.
        """
        _logger.debug("GET %s", url)
        try:
            async with self._http.get(
                url,
                headers={"user-agent": USER_AGENT},
                timeout=self._timeout,
            ) as resp:
                text = await resp.text(encoding="utf-8")
                if not 200 <= resp.status < 300:
                    raise FetchError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except FetchError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc
        except UnicodeDecodeError as exc:
            raise FetchError(f"Response from {url} is not valid UTF-8: {exc}", url=url) from exc
        return text

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """POST *payload* as JSON.

        Any HTTP status is returned to the caller; only network-level
        failures raise :class:`TransportError`.
        """
        request_headers: dict[str, str] = {
            "content-type": "application/json; charset=utf-8",
            "user-agent": USER_AGENT,
        }
        if headers:
            request_headers.update(headers)

        _logger.debug("POST %s headers=%s body=%s", url, redact_for_log(request_headers), redact_for_log(payload))

        body = json.dumps(payload, ensure_ascii=False)
        try:
            async with self._http.post(
                url,
                data=body.encode("utf-8"),
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                return HttpResponse(status=resp.status, text=text)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc
