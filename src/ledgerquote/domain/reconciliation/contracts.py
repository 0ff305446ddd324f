"""Shared reconciliation contracts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ledgerquote.domain.model import InstrumentKind, InstrumentSet, TypedRow
    from ledgerquote.domain.schema import InstrumentSchema
    from ledgerquote.domain.status import UpdateStatus


class Reconciler(Protocol):
    """Merge typed quote rows of one instrument kind into the ledger."""

    @property
    def kind(self) -> InstrumentKind: ...

    @property
    def schema(self) -> InstrumentSchema: ...

    @property
    def instruments(self) -> InstrumentSet: ...

    def reconcile(self, row: TypedRow) -> UpdateStatus:
        """Apply one quote and return its outcome; storage errors propagate."""
        ...

    def flush(self) -> int:
        """Write deferred rows and return how many were appended."""
        ...
