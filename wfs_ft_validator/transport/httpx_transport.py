"""``httpx`` implementation of the ``Transport`` interface."""

from __future__ import annotations

import logging

import httpx

from wfs_ft_validator.core.config import DEFAULT_HTTP_TIMEOUT_S, DEFAULT_USER_AGENT
from wfs_ft_validator.core.exceptions import TransportError
from wfs_ft_validator.transport.base import Transport

logger = logging.getLogger("wfs_ft_validator.transport")


class HttpxTransport(Transport):
    """Synchronous transport backed by a shared ``httpx.Client``.

    Redirects are followed.  Any ``httpx.HTTPError`` (including the one
    raised for a 4xx/5xx status) is translated into ``TransportError``.

    Args:
        timeout_s: Timeout in seconds applied to every request.
        user_agent: ``User-Agent`` header value.
        client: Pre-built client, mainly for tests.  When given, the
            transport does not own (and will not close) it.
    """

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout_s),
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    def fetch_text(self, url: str) -> str:
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"HTTP {exc.response.status_code} for {url}"
            raise TransportError(
                msg, url=url, status_code=exc.response.status_code
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            msg = f"Request to {url} failed: {exc}"
            raise TransportError(msg, url=url) from exc

        logger.debug(
            "GET %s | status=%d | bytes=%d",
            url,
            response.status_code,
            len(response.content),
        )
        return response.text

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
