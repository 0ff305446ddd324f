"""Primary-key allocation backed by counters in the ledger header blob."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

if TYPE_CHECKING:
    from ledgerquote.domain.ports import LedgerStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HeaderField:
    """A named little-endian signed 32-bit integer at a fixed byte offset."""

    name: str
    offset: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<i")

    @property
    def size(self) -> int:
        return self._FORMAT.size

    def read(self, buffer: bytes | bytearray) -> int:
        self._check_bounds(buffer)
        (value,) = self._FORMAT.unpack_from(buffer, self.offset)
        return value

    def write(self, buffer: bytearray, value: int) -> None:
        """Overwrite exactly this field's bytes inside ``buffer``."""

        self._check_bounds(buffer)
        self._FORMAT.pack_into(buffer, self.offset, value)

    def _check_bounds(self, buffer: bytes | bytearray) -> None:
        if self.offset < 0 or self.offset + self.size > len(buffer):
            raise ValueError(
                f"Header field {self.name} at offset {self.offset} does not fit a "
                f"{len(buffer)}-byte header"
            )


class HeaderLayout:
    """Known fields of the ``DHD.rgbNhdata`` blob."""

    SEC_NEXT_PK: Final = HeaderField("SEC_NEXT_PK", 236)
    SP_NEXT_PK: Final = HeaderField("SP_NEXT_PK", 260)


class SequenceAllocator:
    """Hand out primary keys from a header counter, persisting once.

    The stored counter is the next free key. ``next()`` returns it and advances
    the in-memory value; ``flush()`` writes the advanced counter back into the
    header blob and hands the whole blob to the store in a single write.
    """

    def __init__(self, store: LedgerStore, field: HeaderField) -> None:
        self._store = store
        self._field = field
        self._header = bytearray(store.read_header())
        self._initial = field.read(self._header)
        self._next = self._initial
        log.debug("Next %s=%s", field.name, self._next)

    @property
    def allocated(self) -> int:
        return self._next - self._initial

    def next(self) -> int:
        key = self._next
        self._next += 1
        return key

    def flush(self) -> bool:
        """Persist the counter; returns ``False`` when there was nothing to write."""

        if self._field.read(self._header) == self._next:
            return False
        self._field.write(self._header, self._next)
        self._store.write_header(bytes(self._header))
        log.debug("Stored %s=%s (%s allocated)", self._field.name, self._next, self.allocated)
        return True
