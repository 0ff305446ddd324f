"""Reconcile currency exchange rates into the CRNC_EXCHG table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from ledgerquote.domain.model import (
    Instrument,
    InstrumentKind,
    InstrumentSet,
    currency_pair_symbol,
    split_currency_pair,
)
from ledgerquote.domain.schema import RATE_COLUMN
from ledgerquote.domain.status import UpdateStatus

if TYPE_CHECKING:
    from ledgerquote.domain.model import TypedRow
    from ledgerquote.domain.ports import LedgerStore, LedgerTable
    from ledgerquote.domain.schema import InstrumentSchema

log = logging.getLogger(__name__)

CRNC_TABLE: Final[str] = "CRNC"
FX_TABLE: Final[str] = "CRNC_EXCHG"
BASE_CURRENCY_COLUMN: Final[str] = "hcrncDef"


def load_currency_instruments(
    crnc_table: LedgerTable,
    base_hcrnc: object,
) -> tuple[str | None, InstrumentSet]:
    """Return the base ISO code and a pair symbol per other online currency."""

    base_iso: str | None = None
    others: list[str] = []
    for row in crnc_table.iter_matching({"fOnline": True, "fHidden": False}):
        iso_code = row.get("szIsoCode")
        if not iso_code:
            continue
        if row.get("hcrnc") == base_hcrnc:
            base_iso = str(iso_code)
            log.info("Base currency is %s, hcrnc=%s", base_iso, base_hcrnc)
        else:
            others.append(str(iso_code))

    instruments = InstrumentSet()
    if base_iso is None:
        log.warning("Cannot find base currency hcrnc=%s among online currencies", base_hcrnc)
        return None, instruments
    for iso_code in others:
        instruments.add(
            Instrument(currency_pair_symbol(base_iso, iso_code), InstrumentKind.CURRENCY)
        )
    return base_iso, instruments


class CurrencyReconciler:
    """Update the stored exchange rate of a currency pair in either direction."""

    kind = InstrumentKind.CURRENCY

    def __init__(self, store: LedgerStore, schema: InstrumentSchema) -> None:
        self._schema = schema
        self._crnc = store.table(CRNC_TABLE)
        self._fx = store.table(FX_TABLE)
        self._base_iso, self._instruments = load_currency_instruments(
            self._crnc, store.header_value(BASE_CURRENCY_COLUMN)
        )
        log.info("Tracking %s currency pairs for online rates", len(self._instruments))

    @property
    def schema(self) -> InstrumentSchema:
        return self._schema

    @property
    def instruments(self) -> InstrumentSet:
        return self._instruments

    @property
    def base_currency(self) -> str | None:
        return self._base_iso

    def reconcile(self, row: TypedRow) -> UpdateStatus:
        symbol = row.symbol
        log.info("Updating exchange rate for symbol %s", symbol)
        try:
            first_iso, second_iso = split_currency_pair(symbol)
        except ValueError:
            log.error("Cannot split symbol %s into a currency pair", symbol)
            return UpdateStatus.NOT_FOUND

        first = self._find_hcrnc(first_iso)
        second = self._find_hcrnc(second_iso)
        if first is None or second is None:
            return UpdateStatus.NOT_FOUND

        rate = row.get(RATE_COLUMN)
        if not isinstance(rate, float | int) or rate == 0:
            log.error("Invalid exchange rate for symbol %s: rate=%s", symbol, rate)
            return UpdateStatus.INVALID_REQUIRED

        for hcrnc_from, hcrnc_to, new_rate in ((first, second, rate), (second, first, 1 / rate)):
            fx_row = self._fx.find_first({"hcrncFrom": hcrnc_from, "hcrncTo": hcrnc_to})
            if fx_row is None:
                continue
            log.info("Found exchange rate: from hcrnc=%s, to hcrnc=%s", hcrnc_from, hcrnc_to)
            old_rate = fx_row.get(RATE_COLUMN)
            if old_rate == new_rate:
                log.info(
                    "Skipped update for symbol %s, rate has not changed: new rate=%s, "
                    "previous rate=%s",
                    symbol,
                    new_rate,
                    old_rate,
                )
                return UpdateStatus.NO_CHANGE
            fx_row.update(row.as_ledger_row())
            fx_row[RATE_COLUMN] = new_rate
            self._fx.update_row(fx_row)
            log.info("Updated exchange rate: new rate=%s, previous rate=%s", new_rate, old_rate)
            return UpdateStatus.OK

        log.error("Cannot find previous exchange rate for symbol %s", symbol)
        return UpdateStatus.NOT_FOUND

    def flush(self) -> int:
        return 0

    def _find_hcrnc(self, iso_code: str) -> int | None:
        row = self._crnc.find_first({"szIsoCode": iso_code})
        if row is None:
            log.warning("Cannot find currency %s", iso_code)
            return None
        hcrnc = row.get("hcrnc")
        log.debug("Found currency %s, hcrnc=%s", iso_code, hcrnc)
        return hcrnc if isinstance(hcrnc, int) else None
