"""Merge typed quotes into the ledger's current-state and time-series tables."""

from __future__ import annotations

from .batch import BatchAppender
from .contracts import Reconciler
from .currency import CurrencyReconciler, load_currency_instruments
from .history import HistorySearchResult, search_history
from .pipeline import QuotePipeline
from .security import SecurityReconciler, load_security_instruments

__all__ = [
    "BatchAppender",
    "CurrencyReconciler",
    "HistorySearchResult",
    "QuotePipeline",
    "Reconciler",
    "SecurityReconciler",
    "load_currency_instruments",
    "load_security_instruments",
    "search_history",
]
