"""Ports for the ledger storage engine.

The ledger file format is owned by an external storage engine; the domain only
needs indexed tables of field-name rows plus the header blob of the ``DHD``
table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from ledgerquote.domain.model import LedgerRow


@runtime_checkable
class LedgerTable(Protocol):
    """One ledger table, iterated in primary-key order."""

    @property
    def name(self) -> str: ...

    def find_first(self, pattern: Mapping[str, object]) -> LedgerRow | None:
        """Return the first row whose columns equal every value in ``pattern``."""
        ...

    def iter_matching(
        self,
        pattern: Mapping[str, object],
        *,
        reverse: bool = False,
    ) -> Iterator[LedgerRow]: ...

    def update_row(self, row: Mapping[str, object]) -> None:
        """Write ``row`` back by primary key; keys the table lacks are ignored."""
        ...

    def append_rows(self, rows: Iterable[Mapping[str, object]]) -> int:
        """Insert ``rows`` in one call and return the table's resulting row count."""
        ...

    def row_count(self) -> int: ...


@runtime_checkable
class LedgerStore(Protocol):
    """Entry point to an open ledger."""

    def table(self, name: str) -> LedgerTable: ...

    def read_header(self) -> bytes:
        """Return the opaque header blob (``DHD.rgbNhdata``)."""
        ...

    def write_header(self, data: bytes) -> None: ...

    def header_value(self, column: str) -> object:
        """Return a plain column of the single header row (``DHD``)."""
        ...

    def country_code(self, hcntry: int) -> str | None: ...

    def set_client_value(self, id_data: int, column: str, value: object) -> bool:
        """Set one value in the client data table; ``False`` when the row is absent."""
        ...
