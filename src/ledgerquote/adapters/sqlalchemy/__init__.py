"""SQLAlchemy adapter package for the ledger store."""

from __future__ import annotations

from .mappings import TABLES, create_all_tables, metadata
from .store import SqlAlchemyLedgerStore, SqlAlchemyLedgerTable
from .unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "TABLES",
    "SqlAlchemyLedgerStore",
    "SqlAlchemyLedgerTable",
    "SqlAlchemyLedgerUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
