"""
Asynchronous task handling.

Mutating index operations are processed by the service in the background. The
service answers with a task summary (``202 Accepted``) and the final outcome has
to be read from ``GET /tasks/{uid}``.
"""

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

from meilikit.errors import ApiError, TaskTimeoutError, error_from_payload, raise_for_response
from meilikit.schema import Task, TaskInfo, TaskStatus

if TYPE_CHECKING:
    from meilikit.protocols.transport import TransportProtocol  # noqa: F401


__all__ = ["enqueue", "get_task", "wait_for_task", "raise_for_task"]


async def enqueue(transport, method, path, json=None, params=None):
    # type: (TransportProtocol, str, str, object|None, dict|None) -> TaskInfo
    """
    Send a mutating request and parse the returned task summary.

    :param transport: Transport to send the request with
    :param method: HTTP method
    :param path: Request path
    :param json: Optional request body
    :param params: Optional query parameters
    :return: TaskInfo for the enqueued task
    :raises ApiError: If the request was rejected synchronously
    """
    response = await transport.send(method, path, json=json, params=params)
    raise_for_response(response)
    task_info = TaskInfo.model_validate(response.json())
    logger.debug(f"Enqueued task {task_info.task_uid} ({task_info.type}) for '{task_info.index_uid}'")
    return task_info


async def get_task(transport, task_uid):
    # type: (TransportProtocol, int) -> Task
    """
    Fetch a task record.

    :param transport: Transport to send the request with
    :param task_uid: Task identifier
    :return: Task with current status
    :raises NotFoundError: If the task does not exist
    """
    response = await transport.send("GET", f"/tasks/{task_uid}")
    raise_for_response(response)
    return Task.model_validate(response.json())


async def wait_for_task(transport, task_uid, timeout=5.0, interval=0.05):
    # type: (TransportProtocol, int, float, float) -> Task
    """
    Poll a task until it reaches a terminal status.

    The returned task may have failed; use :func:`raise_for_task` to turn a failure
    into an exception.

    :param transport: Transport to send the requests with
    :param task_uid: Task identifier
    :param timeout: Maximum seconds to wait
    :param interval: Seconds between polls
    :return: Task in status succeeded, failed or canceled
    :raises TaskTimeoutError: If the task is still pending after ``timeout`` seconds
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        task = await get_task(transport, task_uid)
        if task.status.is_terminal:
            logger.debug(f"Task {task_uid} finished with status {task.status.value}")
            return task
        if loop.time() >= deadline:
            raise TaskTimeoutError(
                f"Task {task_uid} still {task.status.value} after {timeout} seconds",
                task_uid=task_uid,
            )
        await asyncio.sleep(interval)


def raise_for_task(task):
    # type: (Task) -> None
    """
    Raise the translated error of an unsuccessful task.

    :param task: Task in a terminal status
    :raises ApiError: If the task failed or was canceled
    """
    if task.status == TaskStatus.failed:
        if task.error is None:
            raise ApiError(f"Task {task.uid} failed", code="task_failed")
        raise error_from_payload(task.error.model_dump())
    if task.status == TaskStatus.canceled:
        raise ApiError(f"Task {task.uid} was canceled", code="task_canceled")
