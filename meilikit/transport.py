"""
HTTP transport for the remote search service.

Wraps a lazily created ``httpx.AsyncClient`` and converts connection level failures
into :class:`meilikit.errors.TransportError`. Status codes are not interpreted here.
"""

import httpx
from loguru import logger

import meilikit
from meilikit.errors import TransportError


__all__ = ["HttpTransport"]


class HttpTransport:
    """
    Asynchronous HTTP transport implementing TransportProtocol.

    The underlying ``httpx.AsyncClient`` is created on first use unless one is passed
    in. An injected client is not owned by the transport and is left open by
    :meth:`aclose`.
    """

    def __init__(self, url, api_key=None, timeout=10.0, client=None):
        # type: (str, str|None, float, httpx.AsyncClient|None) -> None
        """
        Initialize HTTP transport.

        :param url: Base URL of the search service (e.g., "http://localhost:7700")
        :param api_key: Optional API key sent as bearer token
        :param timeout: Request timeout in seconds
        :param client: Optional preconfigured httpx.AsyncClient to use instead
        """
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client  # type: httpx.AsyncClient|None
        self._owns_client = client is None

    @property
    def headers(self):
        # type: () -> dict[str, str]
        headers = {"User-Agent": f"meilikit/{meilikit.__version__}"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @property
    def client(self):
        # type: () -> httpx.AsyncClient
        """
        Get or create HTTP client.

        :return: httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.url,
                headers=self.headers,
                timeout=self.timeout,
            )
            self._owns_client = True
        return self._client

    async def send(self, method, path, json=None, params=None):
        # type: (str, str, object|None, dict|None) -> httpx.Response
        """
        Perform a single HTTP request.

        :param method: HTTP method
        :param path: Path relative to the base URL
        :param json: Optional JSON request body
        :param params: Optional query parameters
        :return: httpx Response (any status)
        :raises TransportError: If the request failed without a response
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self.client.request(
                method,
                path,
                json=json,
                params=params or None,
                headers=None if self._owns_client else self.headers,
            )
        except httpx.TransportError as e:
            logger.debug(f"{method} {path} failed: {e!r}")
            raise TransportError(f"{method} {path} failed: {e}") from e
        logger.debug(f"{method} {path} -> {response.status_code}")
        return response

    async def aclose(self):
        # type: () -> None
        """
        Close HTTP client and cleanup resources.

        Idempotent - safe to call multiple times.
        """
        if self._client is not None:
            if self._owns_client:
                await self._client.aclose()
                logger.debug(f"Closed transport for {self.url}")
            self._client = None
