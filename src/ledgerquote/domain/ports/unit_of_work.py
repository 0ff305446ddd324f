"""Unit-of-work abstraction around an open ledger store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from .storage import LedgerStore


@runtime_checkable
class LedgerUnitOfWork(Protocol):
    """Transaction boundary for one quote update run."""

    @property
    def store(self) -> LedgerStore: ...

    def __enter__(self) -> LedgerUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
