"""
Index handle.

An :class:`Index` is a local, possibly stale reference to a remote index. Handles
created with :meth:`meilikit.client.Client.index` perform no remote call and start
without a primary key, whatever the remote state is.
"""

from typing import TYPE_CHECKING
from urllib.parse import quote

from loguru import logger

from meilikit.errors import NotFoundError, raise_for_response
from meilikit.schema import IndexInfo, IndexStats
from meilikit.tasks import enqueue, raise_for_task

if TYPE_CHECKING:
    from datetime import datetime  # noqa: F401
    from meilikit.client import Client  # noqa: F401
    from meilikit.schema import TaskInfo  # noqa: F401


__all__ = ["Index", "index_path"]


def index_path(uid):
    # type: (str) -> str
    """Resource path of an index, with the uid percent-encoded as a single segment."""
    return f"/indexes/{quote(uid, safe='')}"


class Index:
    """
    Reference to a remote index by uid.

    The cached ``primary_key``, ``created_at`` and ``updated_at`` fields reflect the
    last server response seen by this handle. They are replaced together whenever
    fresher state arrives.
    """

    def __init__(self, client, uid, primary_key=None, created_at=None, updated_at=None):
        # type: (Client, str, str|None, datetime|None, datetime|None) -> None
        """
        Initialize index handle.

        :param client: Client the handle sends its requests through
        :param uid: Unique identifier of the remote index
        :param primary_key: Cached primary key (None if unknown)
        :param created_at: Cached creation timestamp
        :param updated_at: Cached last update timestamp
        """
        self._client = client
        self.uid = uid
        self.primary_key = primary_key
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_info(cls, client, info):
        # type: (Client, IndexInfo) -> Index
        """Build a fully-populated handle from a server response."""
        return cls(client, info.uid, info.primary_key, info.created_at, info.updated_at)

    def __repr__(self):
        # type: () -> str
        return f"Index(uid={self.uid!r}, primary_key={self.primary_key!r})"

    @property
    def path(self):
        # type: () -> str
        return index_path(self.uid)

    def _apply(self, info):
        # type: (IndexInfo) -> None
        self.primary_key, self.created_at, self.updated_at = info.primary_key, info.created_at, info.updated_at

    async def fetch_info(self):
        # type: () -> Index
        """
        Refresh the cached fields from the server.

        :return: This handle, updated in place
        :raises NotFoundError: If the index doesn't exist
        """
        response = await self._client.transport.send("GET", self.path)
        raise_for_response(response)
        self._apply(IndexInfo.model_validate(response.json()))
        return self

    async def fetch_primary_key(self):
        # type: () -> str|None
        """
        Fetch the authoritative primary key and cache it on the handle.

        :return: Primary key, or None if the index has none yet
        :raises NotFoundError: If the index doesn't exist
        """
        await self.fetch_info()
        return self.primary_key

    async def update(self, primary_key):
        # type: (str) -> Index
        """
        Change the primary key of the index.

        Whether a primary key may be changed is decided by the service; a rejected
        change raises the translated error (e.g. ``index_primary_key_already_exists``).

        :param primary_key: New primary key
        :return: This handle, refreshed with the server's state after the update
        :raises NotFoundError: If the index doesn't exist
        :raises ApiError: If the service rejects the change
        """
        task_info = await enqueue(self._client.transport, "PATCH", self.path, json={"primaryKey": primary_key})
        task = await self._client.wait_for_task(task_info.task_uid)
        raise_for_task(task)
        logger.info(f"Updated primary key of index '{self.uid}' to '{primary_key}'")
        return await self.fetch_info()

    async def get_stats(self):
        # type: () -> IndexStats
        """
        Fetch operational statistics of the index.

        :return: IndexStats with document count and field distribution
        :raises NotFoundError: If the index doesn't exist
        """
        response = await self._client.transport.send("GET", f"{self.path}/stats")
        raise_for_response(response)
        return IndexStats.model_validate(response.json())

    async def add_documents(self, documents, primary_key=None):
        # type: (list[dict], str|None) -> TaskInfo
        """
        Enqueue documents for indexing.

        Does not wait for the task. Creates the index on the server if missing.

        :param documents: JSON-serializable documents
        :param primary_key: Optional primary key to set if the index has none
        :return: TaskInfo of the enqueued task
        """
        return await enqueue(
            self._client.transport,
            "POST",
            f"{self.path}/documents",
            json=documents,
            params={"primaryKey": primary_key},
        )

    async def delete(self):
        # type: () -> None
        """
        Delete the remote index. The handle must not be used afterwards.

        :raises NotFoundError: If the index doesn't exist
        """
        task_info = await enqueue(self._client.transport, "DELETE", self.path)
        task = await self._client.wait_for_task(task_info.task_uid)
        raise_for_task(task)
        logger.info(f"Deleted index '{self.uid}'")

    async def delete_if_exists(self):
        # type: () -> bool
        """
        Delete the remote index if it exists.

        :return: True if an index was deleted, False if there was none
        """
        try:
            await self.delete()
        except NotFoundError:
            logger.debug(f"Index '{self.uid}' does not exist, nothing to delete")
            return False
        return True
