"""Deferred appends of new time-series rows."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ledgerquote.domain.model import LedgerRow
    from ledgerquote.domain.ports import LedgerTable
    from ledgerquote.domain.sequence import SequenceAllocator

log = logging.getLogger(__name__)


class BatchAppender:
    """Stage rows for one bulk append, persisted together with the key counter.

    The counter is written only after the append succeeded, so a failed append
    never leaves an advanced counter on disk.
    """

    def __init__(self, table: LedgerTable, allocator: SequenceAllocator) -> None:
        self._table = table
        self._allocator = allocator
        self._staged: list[LedgerRow] = []

    @property
    def pending(self) -> int:
        return len(self._staged)

    def stage(self, row: LedgerRow) -> None:
        self._staged.append(row)

    def staged_matching(self, pattern: Mapping[str, object]) -> list[LedgerRow]:
        return [
            row
            for row in self._staged
            if all(row.get(column) == value for column, value in pattern.items())
        ]

    def is_staged(self, row: LedgerRow) -> bool:
        return any(staged is row for staged in self._staged)

    def flush(self) -> int:
        if not self._staged:
            return 0
        count = len(self._staged)
        total = self._table.append_rows(self._staged)
        self._allocator.flush()
        log.info(
            "Added %s new %s to %s table, total %s table rows=%s",
            count,
            "quote" if count == 1 else "quotes",
            self._table.name,
            self._table.name,
            total,
        )
        self._staged.clear()
        return count
