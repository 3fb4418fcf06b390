"""Transport abstract base class.

Defines the one operation every part of the validator needs from the
network: fetch a URL with HTTP GET and return the body as text.

Implementations must raise ``TransportError`` for every failure
(connection errors, timeouts, non-success status codes) and must not
retry.  Callers decide whether a failure is fatal for the run.
"""

from __future__ import annotations

import abc


class Transport(abc.ABC):
    """Abstract base class for HTTP transports.

    Example usage::

        with HttpxTransport(timeout_s=30.0) as transport:
            text = transport.fetch_text(url)
    """

    @abc.abstractmethod
    def fetch_text(self, url: str) -> str:
        """GET *url* and return the full response body as text.

        Raises:
            TransportError: If the request fails or the server answers
                with an error status.
        """

    def close(self) -> None:  # noqa: B027
        """Release any resources held by the transport."""

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
