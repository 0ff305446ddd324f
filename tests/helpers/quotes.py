"""Builders for schemas, catalogs and raw quote rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledgerquote.domain.model import InstrumentKind
from ledgerquote.domain.schema import ColumnRule, InstrumentSchema, SchemaCatalog

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def rules(*entries: str) -> tuple[ColumnRule, ...]:
    return tuple(ColumnRule.parse(entry) for entry in entries)


def security_schema(
    *,
    optional: Mapping[str, Sequence[str]] | None = None,
    stale_days: int = 5,
) -> InstrumentSchema:
    optional_entries = {"stock": ()} if optional is None else optional
    return InstrumentSchema(
        kind=InstrumentKind.SECURITY,
        required=rules("xSymbol", "xType", "dtLastUpdate", "dPrice"),
        optional={quote_type: rules(*entries) for quote_type, entries in optional_entries.items()},
        stale_days=stale_days,
    )


def currency_schema() -> InstrumentSchema:
    return InstrumentSchema(
        kind=InstrumentKind.CURRENCY,
        required=rules("xSymbol", "xType", "rate"),
        optional={"currency": ()},
    )


def make_catalog(
    *,
    optional: Mapping[str, Sequence[str]] | None = None,
    stale_days: int = 5,
) -> SchemaCatalog:
    return SchemaCatalog(
        [security_schema(optional=optional, stale_days=stale_days), currency_schema()]
    )


def stock_row(
    symbol: str = "FOO",
    *,
    last_update: str = "2024-01-02T00:00:00Z",
    price: str = "101.5",
    **extra: object,
) -> dict[str, object]:
    return {
        "xSymbol": symbol,
        "xType": "stock",
        "dtLastUpdate": last_update,
        "dPrice": price,
        **extra,
    }


def currency_row(symbol: str = "USDGBP=X", *, rate: str = "0.78") -> dict[str, object]:
    return {"xSymbol": symbol, "xType": "currency", "rate": rate}
