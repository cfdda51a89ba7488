"""
Wire models for the remote index-management API.

The service speaks camelCase JSON; models expose snake_case attributes and accept
either form on input.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


__all__ = [
    "IndexInfo",
    "IndexesPage",
    "IndexStats",
    "TaskStatus",
    "TaskInfo",
    "TaskError",
    "Task",
]


# RFC 3339 timestamps from the service carry up to nanosecond precision
_FRACTION = re.compile(r"(\.\d{6})\d+")


def _truncate_fraction(value):
    # type: (Any) -> Any
    if isinstance(value, str):
        return _FRACTION.sub(r"\1", value)
    return value


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class IndexInfo(WireModel):
    """Index metadata as reported by ``GET /indexes/{uid}``."""

    uid: str
    primary_key: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_timestamp(cls, v):
        # type: (Any) -> Any
        return _truncate_fraction(v)


class IndexesPage(WireModel):
    """One page of ``GET /indexes``."""

    results: list[IndexInfo] = Field(default_factory=list)
    offset: int = 0
    limit: int = 20
    total: int = 0


class IndexStats(WireModel):
    """Operational statistics for a single index."""

    number_of_documents: int = 0
    is_indexing: bool = False
    field_distribution: dict[str, int] = Field(default_factory=dict)


class TaskStatus(str, Enum):
    enqueued = "enqueued"
    processing = "processing"
    succeeded = "succeeded"
    failed = "failed"
    canceled = "canceled"

    @property
    def is_terminal(self):
        # type: () -> bool
        return self in (TaskStatus.succeeded, TaskStatus.failed, TaskStatus.canceled)


class TaskInfo(WireModel):
    """Summary returned with ``202 Accepted`` by every mutating call."""

    task_uid: int
    index_uid: str | None = None
    status: TaskStatus
    type: str
    enqueued_at: datetime | None = None

    @field_validator("enqueued_at", mode="before")
    @classmethod
    def parse_timestamp(cls, v):
        # type: (Any) -> Any
        return _truncate_fraction(v)


class TaskError(WireModel):
    message: str
    code: str
    type: str | None = None
    link: str | None = None


class Task(WireModel):
    """Full task record from ``GET /tasks/{uid}``."""

    uid: int
    index_uid: str | None = None
    status: TaskStatus
    type: str
    details: dict[str, Any] | None = None
    error: TaskError | None = None
    duration: str | None = None
    enqueued_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @field_validator("enqueued_at", "started_at", "finished_at", mode="before")
    @classmethod
    def parse_timestamp(cls, v):
        # type: (Any) -> Any
        return _truncate_fraction(v)
