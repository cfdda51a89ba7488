"""
Error types and translation for meilikit.

The remote service reports failures with a structured JSON body::

    {"message": "...", "code": "index_not_found", "type": "invalid_request", "link": "..."}

The same shape is used for the ``error`` field of failed tasks. Codes are an open,
server-defined enumeration: they are classified by naming convention into a few
broad categories, and any code that fits none of them still becomes a plain
:class:`ApiError` carrying the code verbatim.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx  # noqa: F401


__all__ = [
    "MeilikitError",
    "ApiError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "TransportError",
    "TaskTimeoutError",
    "error_from_payload",
    "raise_for_response",
]


class MeilikitError(Exception):
    """Base class for all errors raised by meilikit."""

    code = "meilikit_error"

    def __init__(self, message, code=None):
        # type: (str, str|None) -> None
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self):
        # type: () -> str
        return f"{self.message} ({self.code})"


class ApiError(MeilikitError):
    """
    Error reported by the remote service.

    :ivar code: Server error code, preserved verbatim (e.g. ``index_not_found``)
    :ivar message: Human readable message from the server
    :ivar type: Server error category (e.g. ``invalid_request``)
    :ivar link: Documentation link supplied by the server
    :ivar status_code: HTTP status of the response, None for failed tasks
    """

    def __init__(self, message, code, type=None, link=None, status_code=None):
        # type: (str, str, str|None, str|None, int|None) -> None
        super().__init__(message, code=code)
        self.type = type
        self.link = link
        self.status_code = status_code


class ValidationError(ApiError, ValueError):
    """The request was rejected as malformed (e.g. ``invalid_index_uid``)."""


class NotFoundError(ApiError, LookupError):
    """The addressed resource does not exist (e.g. ``index_not_found``)."""


class ConflictError(ApiError):
    """The resource already exists (e.g. ``index_already_exists``)."""


class TransportError(MeilikitError):
    """No response was received from the remote service."""

    code = "network_error"


class TaskTimeoutError(MeilikitError):
    """A task did not reach a terminal status within the allotted time."""

    code = "task_timeout"

    def __init__(self, message, task_uid):
        # type: (str, int) -> None
        super().__init__(message)
        self.task_uid = task_uid


def _classify(code, status_code):
    # type: (str, int|None) -> type[ApiError]
    if code.endswith("_not_found"):
        return NotFoundError
    if code.endswith("_already_exists"):
        return ConflictError
    if code.startswith(("invalid_", "missing_")):
        return ValidationError
    if status_code == 404:
        return NotFoundError
    if status_code == 409:
        return ConflictError
    if status_code == 400:
        return ValidationError
    return ApiError


def error_from_payload(payload, status_code=None):
    # type: (dict, int|None) -> ApiError
    """
    Build a typed error from a structured error body.

    :param payload: Error body with ``message``, ``code``, ``type`` and ``link`` keys
    :param status_code: HTTP status the body arrived with, if any
    :return: ApiError subclass instance carrying the server code verbatim
    """
    code = payload.get("code") or (f"http_{status_code}" if status_code else "unknown_error")
    message = payload.get("message") or code
    error_cls = _classify(code, status_code)
    return error_cls(
        message,
        code=code,
        type=payload.get("type"),
        link=payload.get("link"),
        status_code=status_code,
    )


def raise_for_response(response):
    # type: (httpx.Response) -> None
    """
    Convert a non-success HTTP response to a typed error.

    :param response: httpx Response object
    :raises ApiError: For any non-2xx response
    """
    if response.is_success:
        return

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        payload = {"message": response.text or response.reason_phrase}

    raise error_from_payload(payload, status_code=response.status_code)
