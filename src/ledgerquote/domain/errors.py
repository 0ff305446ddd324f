"""Run-level failures.

Row-level problems are reported as ``RowRejection`` values and never raised.
"""

from __future__ import annotations


class StorageFailure(RuntimeError):
    """Raised when the ledger store cannot be read or written; aborts the run."""
