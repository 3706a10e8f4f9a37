"""
Result type returned by the mirror stores.

Store operations never raise on datastore errors.  Instead they return
a :class:`StoreResult` whose ``status`` tells callers whether the
operation succeeded, found nothing, or failed.  Handlers that only
need the legacy sentinel (``None``/``False``) use :attr:`StoreResult.value`
or :attr:`StoreResult.ok`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class StoreStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    status: StoreStatus
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "StoreResult":
        return cls(StoreStatus.OK, data)

    @classmethod
    def not_found(cls) -> "StoreResult":
        return cls(StoreStatus.NOT_FOUND)

    @classmethod
    def failure(cls, error: str) -> "StoreResult":
        return cls(StoreStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status is StoreStatus.OK

    @property
    def failed(self) -> bool:
        return self.status is StoreStatus.FAILED

    @property
    def value(self) -> Optional[T]:
        """The stored data on success, ``None`` otherwise."""
        return self.data if self.ok else None
