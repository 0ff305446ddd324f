"""Domain model for quotes, instruments and ledger rows."""

from __future__ import annotations

from .enums import InstrumentKind, PriceSource
from .instruments import (
    MAX_SYMBOL_LENGTH,
    Instrument,
    InstrumentSet,
    currency_pair_symbol,
    has_exchange_prefix,
    split_currency_pair,
    truncate_symbol,
)
from .rows import (
    QUOTE_TYPE_COLUMN,
    SYMBOL_COLUMN,
    UNKNOWN_QUOTE_TYPE,
    Diagnostics,
    LedgerRow,
    RawRow,
    RowRejection,
    TypedRow,
    TypedValue,
    ValidatedRow,
    quote_type_of,
)

__all__ = [
    "MAX_SYMBOL_LENGTH",
    "QUOTE_TYPE_COLUMN",
    "SYMBOL_COLUMN",
    "UNKNOWN_QUOTE_TYPE",
    "Diagnostics",
    "Instrument",
    "InstrumentKind",
    "InstrumentSet",
    "LedgerRow",
    "PriceSource",
    "RawRow",
    "RowRejection",
    "TypedRow",
    "TypedValue",
    "ValidatedRow",
    "currency_pair_symbol",
    "has_exchange_prefix",
    "quote_type_of",
    "split_currency_pair",
    "truncate_symbol",
]
