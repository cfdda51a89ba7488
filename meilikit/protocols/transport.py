"""
Transport Protocol Definition

Defines the interface the index client uses to talk to the remote service. The
default implementation is :class:`meilikit.transport.HttpTransport`; alternative
transports (instrumented, retrying, recording) only need to satisfy this protocol.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import httpx  # noqa: F401


@runtime_checkable
class TransportProtocol(Protocol):
    """
    Protocol for request transports.

    All request methods are asynchronous. A transport performs exactly one HTTP round
    trip per call and never interprets status codes: non-2xx responses are returned
    to the caller for error translation.

    Exception contract:
    - TransportError: No response was received (connection refused, timeout, ...)
    """

    async def send(self, method, path, json=None, params=None):
        # type: (str, str, object|None, dict|None) -> httpx.Response
        """
        Perform a single HTTP request.

        :param method: HTTP method (GET, POST, PATCH, DELETE)
        :param path: Path relative to the service base URL (e.g. "/indexes")
        :param json: Optional JSON-serializable request body
        :param params: Optional query parameters
        :return: Response with status and body
        :raises TransportError: If no response was received
        """
        ...

    async def aclose(self):
        # type: () -> None
        """
        Release network resources.

        Must be idempotent. The transport should not be used after closing.
        """
        ...
