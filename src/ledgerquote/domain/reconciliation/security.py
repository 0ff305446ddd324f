"""Reconcile security quotes into the SEC and SP tables."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Final

from ledgerquote.domain.clock import age_in_days, local_now
from ledgerquote.domain.coercion import truncate_to_day
from ledgerquote.domain.model import Instrument, InstrumentKind, InstrumentSet, PriceSource
from ledgerquote.domain.schema import LAST_UPDATE_COLUMN, WHOLE_DATE_COLUMN
from ledgerquote.domain.sequence import HeaderLayout, SequenceAllocator
from ledgerquote.domain.status import UpdateStatus

from .batch import BatchAppender
from .history import search_history

if TYPE_CHECKING:
    from ledgerquote.domain.clock import Clock
    from ledgerquote.domain.model import LedgerRow, TypedRow
    from ledgerquote.domain.ports import LedgerStore, LedgerTable
    from ledgerquote.domain.schema import InstrumentSchema

log = logging.getLogger(__name__)

SEC_TABLE: Final[str] = "SEC"
SP_TABLE: Final[str] = "SP"
CHANGE_COLUMN: Final[str] = "dChange"
PRICE_COLUMN: Final[str] = "dPrice"


def load_security_instruments(store: LedgerStore, sec_table: LedgerTable) -> InstrumentSet:
    """Securities flagged for online quotes, with their country codes."""

    instruments = InstrumentSet()
    for row in sec_table.iter_matching({"fOLQuotes": True}):
        symbol = row.get("szSymbol")
        if not symbol:
            continue
        hcntry = row.get("hcntry")
        country = store.country_code(hcntry) if isinstance(hcntry, int) else None
        instruments.add(Instrument(str(symbol), InstrumentKind.SECURITY, country))
    return instruments


class SecurityReconciler:
    """Update a security's SEC row and merge or append its SP price row."""

    kind = InstrumentKind.SECURITY

    def __init__(
        self,
        store: LedgerStore,
        schema: InstrumentSchema,
        *,
        clock: Clock = local_now,
    ) -> None:
        self._schema = schema
        self._clock = clock
        self._sec = store.table(SEC_TABLE)
        self._sp = store.table(SP_TABLE)
        self._allocator = SequenceAllocator(store, HeaderLayout.SP_NEXT_PK)
        self._batch = BatchAppender(self._sp, self._allocator)
        self._instruments = load_security_instruments(store, self._sec)
        log.info("Tracking %s securities for online quotes", len(self._instruments))

    @property
    def schema(self) -> InstrumentSchema:
        return self._schema

    @property
    def instruments(self) -> InstrumentSet:
        return self._instruments

    @property
    def pending(self) -> int:
        return self._batch.pending

    def reconcile(self, row: TypedRow) -> UpdateStatus:
        symbol = row.symbol
        quote_time = row.get(LAST_UPDATE_COLUMN)
        quote_day = self._quote_day(row)
        if quote_day is None:
            log.error(
                "Cannot date quote for symbol %s: no %s or %s",
                symbol,
                WHOLE_DATE_COLUMN,
                LAST_UPDATE_COLUMN,
            )
            return UpdateStatus.MISSING_REQUIRED

        sec_row = self._sec.find_first({"szSymbol": symbol})
        if sec_row is None:
            log.error("Cannot find symbol %s in %s table", symbol, SEC_TABLE)
            return UpdateStatus.NOT_FOUND
        hsec = sec_row["hsec"]
        log.info(
            "Found symbol %s in %s table: sct=%s, hsec=%s",
            symbol,
            SEC_TABLE,
            sec_row.get("sct"),
            hsec,
        )

        pending = UpdateStatus.OK
        age_days = 0
        if isinstance(quote_time, datetime):
            if quote_time != sec_row.get(LAST_UPDATE_COLUMN):
                sec_row.update(row.as_ledger_row())
                self._sec.update_row(sec_row)
                log.info("Updated %s table for symbol %s", SEC_TABLE, symbol)
            elif (age_days := age_in_days(quote_time, clock=self._clock)) > self._schema.stale_days:
                pending = UpdateStatus.STALE
            else:
                log.info(
                    "Skipped update for symbol %s, new quote has same timestamp as previous "
                    "quote: timestamp=%s",
                    symbol,
                    quote_time,
                )
                return UpdateStatus.NO_CHANGE

        quote = row.as_ledger_row()
        quote[WHOLE_DATE_COLUMN] = quote_day
        quote["dtSerial"] = self._clock()
        quote["src"] = int(PriceSource.ONLINE)

        pattern = {"hsec": hsec}
        history = [*self._sp.iter_matching(pattern), *self._batch.staged_matching(pattern)]
        result = search_history(history, quote_day.date())
        log.debug(
            "Searched %s of %s %s rows for symbol %s from the %s end",
            result.scanned,
            len(history),
            SP_TABLE,
            symbol,
            "latest" if result.from_latest else "earliest",
        )

        if result.match is not None:
            return self._merge(result.match, quote, pending, symbol, age_days)

        if result.previous is None:
            log.info(
                "Cannot find quote for symbol %s in %s table dated on or before %s",
                symbol,
                SP_TABLE,
                quote_day.date(),
            )
        else:
            log.info(
                "Found previous quote for symbol %s in %s table: price=%s, hsp=%s, timestamp=%s",
                symbol,
                SP_TABLE,
                result.previous.get(PRICE_COLUMN),
                result.previous.get("hsp"),
                result.previous.get(WHOLE_DATE_COLUMN),
            )

        hsp = self._allocator.next()
        new_row: LedgerRow = {"hsp": hsp, "hsec": hsec, **quote}
        self._batch.stage(new_row)
        log.info(
            "Added new quote for symbol %s to %s append list: price=%s, hsp=%s, timestamp=%s",
            symbol,
            SP_TABLE,
            new_row.get(PRICE_COLUMN),
            hsp,
            quote_time or quote_day,
        )
        return pending

    def flush(self) -> int:
        return self._batch.flush()

    def _merge(
        self,
        target: LedgerRow,
        quote: LedgerRow,
        pending: UpdateStatus,
        symbol: str,
        age_days: int,
    ) -> UpdateStatus:
        if pending is UpdateStatus.STALE:
            if not target.get(CHANGE_COLUMN):
                log.warning(
                    "Skipped update for symbol %s, received stale quote data: timestamp=%s, "
                    "age days=%s",
                    symbol,
                    target.get(WHOLE_DATE_COLUMN),
                    age_days,
                )
                return UpdateStatus.STALE
            log.warning(
                "Received new stale quote data for symbol %s, setting change value in %s table "
                "to zero: age days=%s",
                symbol,
                SP_TABLE,
                age_days,
            )
            quote[CHANGE_COLUMN] = 0.0
            pending = UpdateStatus.STALE_SUPERSEDED

        target.update(quote)
        if not self._batch.is_staged(target):
            self._sp.update_row(target)
        log.info(
            "Updated previous quote for symbol %s in %s table: new price=%s, hsp=%s",
            symbol,
            SP_TABLE,
            target.get(PRICE_COLUMN),
            target.get("hsp"),
        )
        return pending

    @staticmethod
    def _quote_day(row: TypedRow) -> datetime | None:
        for column in (WHOLE_DATE_COLUMN, LAST_UPDATE_COLUMN):
            value = row.get(column)
            if isinstance(value, datetime):
                return truncate_to_day(value)
        return None
