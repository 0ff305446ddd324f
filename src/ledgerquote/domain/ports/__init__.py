"""Domain port definitions for adapters."""

from __future__ import annotations

from .feed import QuoteFeed
from .storage import LedgerStore, LedgerTable
from .unit_of_work import LedgerUnitOfWork

__all__ = [
    "LedgerStore",
    "LedgerTable",
    "LedgerUnitOfWork",
    "QuoteFeed",
]
