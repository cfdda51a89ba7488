"""
Index lifecycle client.

Maps index-management intents (create, get, get-or-create, list, delete) onto the
remote HTTP API and returns :class:`meilikit.index.Index` handles.
"""

from typing import TYPE_CHECKING

from loguru import logger

from meilikit.errors import ConflictError, NotFoundError, raise_for_response
from meilikit.index import Index, index_path
from meilikit.schema import IndexesPage, IndexInfo
from meilikit.tasks import enqueue, get_task, raise_for_task, wait_for_task
from meilikit.transport import HttpTransport

if TYPE_CHECKING:
    import httpx  # noqa: F401
    from meilikit.protocols.transport import TransportProtocol  # noqa: F401
    from meilikit.schema import Task  # noqa: F401
    from meilikit.settings import ClientSettings  # noqa: F401


__all__ = ["Client"]


class Client:
    """
    Asynchronous client for index management on a remote search service.

    The client keeps no state across calls other than its transport. Use it as an
    async context manager, or call :meth:`aclose` when done.

    Example::

        async with Client("http://localhost:7700", api_key="masterKey") as client:
            movies = await client.get_or_create_index("movies", primary_key="movieId")
            await movies.fetch_primary_key()
    """

    def __init__(
        self,
        url="http://localhost:7700",
        api_key=None,
        timeout=10.0,
        task_timeout=5.0,
        task_interval=0.05,
        http_client=None,
        transport=None,
    ):
        # type: (str, str|None, float, float, float, httpx.AsyncClient|None, TransportProtocol|None) -> None
        """
        Initialize client.

        :param url: Base URL of the search service
        :param api_key: Optional API key sent as bearer token
        :param timeout: HTTP request timeout in seconds
        :param task_timeout: Default maximum seconds to wait for tasks
        :param task_interval: Default seconds between task polls
        :param http_client: Optional preconfigured httpx.AsyncClient
        :param transport: Optional transport replacing the default HttpTransport
        """
        if transport is None:
            transport = HttpTransport(url, api_key=api_key, timeout=timeout, client=http_client)
        self.transport = transport  # type: TransportProtocol
        self.task_timeout = task_timeout
        self.task_interval = task_interval

    @classmethod
    def from_settings(cls, settings=None, **kwargs):
        # type: (...) -> Client
        """
        Create client from settings.

        :param settings: ClientSettings instance (defaults to module-level settings)
        :param kwargs: Extra keyword arguments passed to the constructor
        :return: Configured Client
        """
        if settings is None:
            from meilikit.settings import client_settings as settings

        return cls(
            url=settings.url,
            api_key=settings.api_key,
            timeout=settings.timeout,
            task_timeout=settings.task_timeout,
            task_interval=settings.task_interval,
            **kwargs,
        )

    async def __aenter__(self):
        # type: () -> Client
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.aclose()

    async def aclose(self):
        # type: () -> None
        """Close the underlying transport. Idempotent."""
        await self.transport.aclose()

    def index(self, uid):
        # type: (str) -> Index
        """
        Create a local handle for an index without contacting the server.

        The handle's primary key is None. The remote index is not guaranteed to exist.

        :param uid: Index identifier
        :return: Index handle
        """
        return Index(self, uid)

    async def create_index(self, uid, primary_key=None):
        # type: (str, str|None) -> Index
        """
        Create a new index and wait until the server has processed it.

        :param uid: Index identifier
        :param primary_key: Optional primary key
        :return: Index handle populated from the server
        :raises ConflictError: If the index already exists (``index_already_exists``)
        :raises ValidationError: If the uid is malformed (``invalid_index_uid``)
        """
        task_info = await enqueue(self.transport, "POST", "/indexes", json={"uid": uid, "primaryKey": primary_key})
        task = await self.wait_for_task(task_info.task_uid)
        raise_for_task(task)
        logger.info(f"Created index '{uid}'")
        return await self.get_index(uid)

    async def get_index(self, uid):
        # type: (str) -> Index
        """
        Fetch an index.

        :param uid: Index identifier
        :return: Index handle with authoritative primary key and timestamps
        :raises NotFoundError: If the index doesn't exist (``index_not_found``)
        """
        response = await self.transport.send("GET", index_path(uid))
        raise_for_response(response)
        return Index.from_info(self, IndexInfo.model_validate(response.json()))

    async def get_all_indexes(self, offset=None, limit=None):
        # type: (int|None, int|None) -> list[Index]
        """
        List indexes visible to the caller.

        Without ``limit`` every index is returned, fetching as many pages as the server
        needs. With ``limit`` a single page is requested. Order is defined by the
        server. An empty list is a valid result.

        :param offset: Number of indexes to skip
        :param limit: Maximum number of indexes to return (single page)
        :return: List of Index handles
        """
        if limit is not None:
            page = await self._get_indexes_page(offset, limit)
            return [Index.from_info(self, info) for info in page.results]

        indexes = []  # type: list[Index]
        offset = offset or 0
        while True:
            page = await self._get_indexes_page(offset, None)
            indexes.extend(Index.from_info(self, info) for info in page.results)
            offset += len(page.results)
            if not page.results or offset >= page.total:
                return indexes

    async def _get_indexes_page(self, offset, limit):
        # type: (int|None, int|None) -> IndexesPage
        response = await self.transport.send("GET", "/indexes", params={"offset": offset, "limit": limit})
        raise_for_response(response)
        return IndexesPage.model_validate(response.json())

    async def get_or_create_index(self, uid, primary_key=None):
        # type: (str, str|None) -> Index
        """
        Fetch an index, creating it if it doesn't exist.

        An existing index is returned unchanged; ``primary_key`` is only used when
        the index is created. If another caller creates the index between the lookup
        and the create, the conflict is resolved with one more lookup.

        :param uid: Index identifier
        :param primary_key: Primary key to use when creating
        :return: Index handle populated from the server
        """
        try:
            return await self.get_index(uid)
        except NotFoundError:
            pass

        try:
            return await self.create_index(uid, primary_key)
        except ConflictError as e:
            if e.code != "index_already_exists":
                raise
            logger.debug(f"Index '{uid}' was created concurrently, fetching it")
            return await self.get_index(uid)

    async def delete_index(self, uid):
        # type: (str) -> None
        """
        Delete an index and all its documents.

        :param uid: Index identifier
        :raises NotFoundError: If the index doesn't exist
        """
        await self.index(uid).delete()

    async def delete_index_if_exists(self, uid):
        # type: (str) -> bool
        """
        Delete an index if it exists.

        :param uid: Index identifier
        :return: True if an index was deleted, False if there was none
        """
        return await self.index(uid).delete_if_exists()

    async def get_task(self, task_uid):
        # type: (int) -> Task
        """
        Fetch a task record.

        :param task_uid: Task identifier
        :return: Task with current status
        """
        return await get_task(self.transport, task_uid)

    async def wait_for_task(self, task_uid, timeout=None, interval=None):
        # type: (int, float|None, float|None) -> Task
        """
        Wait until a task reaches a terminal status.

        :param task_uid: Task identifier
        :param timeout: Maximum seconds to wait (defaults to ``task_timeout``)
        :param interval: Seconds between polls (defaults to ``task_interval``)
        :return: Finished task (succeeded, failed or canceled)
        :raises TaskTimeoutError: If the task does not finish in time
        """
        return await wait_for_task(
            self.transport,
            task_uid,
            timeout=self.task_timeout if timeout is None else timeout,
            interval=self.task_interval if interval is None else interval,
        )
