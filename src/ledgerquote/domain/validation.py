"""Schema-driven validation of raw quote rows."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from ledgerquote.domain.model import (
    MAX_SYMBOL_LENGTH,
    QUOTE_TYPE_COLUMN,
    SYMBOL_COLUMN,
    Diagnostics,
    RowRejection,
    ValidatedRow,
    quote_type_of,
    truncate_symbol,
)
from ledgerquote.domain.schema import ColumnRule
from ledgerquote.domain.status import UpdateStatus

if TYPE_CHECKING:
    from collections.abc import Container, Sequence

    from ledgerquote.domain.model import InstrumentKind, RawRow
    from ledgerquote.domain.schema import InstrumentSchema

log = logging.getLogger(__name__)

_IDENTITY_COLUMNS = (SYMBOL_COLUMN, QUOTE_TYPE_COLUMN)


def log_column_findings(symbol: str, findings: Sequence[tuple[str, Sequence[str]]]) -> None:
    """Emit one warning per non-empty category instead of one per column."""

    for prefix, columns in findings:
        if columns:
            log.warning("%s for symbol %s: %s", prefix, symbol, ", ".join(columns))


def _as_text(value: object) -> str:
    # JSON numbers: fixed-point text, never exponent notation
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value)


class RowValidator:
    """Restrict a raw row to schema columns, fill defaults and check identity."""

    def __init__(
        self,
        schema: InstrumentSchema,
        symbols: Container[str],
        *,
        max_symbol_length: int = MAX_SYMBOL_LENGTH,
    ) -> None:
        self.schema = schema
        self._symbols = symbols
        self._max_symbol_length = max_symbol_length
        declared = {rule.name for rule in schema.required}
        self._required = tuple(
            ColumnRule(name) for name in _IDENTITY_COLUMNS if name not in declared
        ) + schema.required

    def validate(
        self,
        raw_row: RawRow,
        kind_hint: InstrumentKind | None = None,
    ) -> ValidatedRow | RowRejection:
        quote_type = quote_type_of(raw_row)
        values: dict[str, str] = {}

        missing_required = [
            rule.name for rule in self._required if raw_row.get(rule.name) is None
        ]
        if missing_required:
            raw_symbol = raw_row.get(SYMBOL_COLUMN)
            return RowRejection(
                status=UpdateStatus.MISSING_REQUIRED,
                quote_type=quote_type,
                symbol=None if raw_symbol is None else str(raw_symbol),
                reason=(
                    f"Missing required quote data for symbol {raw_symbol}: "
                    f"{', '.join(missing_required)}"
                ),
            )
        for rule in self._required:
            values[rule.name] = _as_text(raw_row[rule.name])

        diagnostics = Diagnostics()
        for rule in self.schema.optional_for(quote_type):
            value = raw_row.get(rule.name)
            if value is not None:
                values[rule.name] = _as_text(value)
                continue
            diagnostics.missing_optional.append(rule.name)
            if rule.default is not None:
                values[rule.name] = rule.default
                diagnostics.defaults_applied.append(f"{rule.name}={rule.default}")

        symbol = values[SYMBOL_COLUMN]
        truncated = truncate_symbol(symbol, max_length=self._max_symbol_length)
        if truncated != symbol:
            log.info("Truncated symbol %s to %s", symbol, truncated)
            values[SYMBOL_COLUMN] = truncated
            symbol = truncated

        if symbol not in self._symbols:
            return RowRejection(
                status=UpdateStatus.NOT_FOUND,
                quote_type=quote_type,
                symbol=symbol,
                reason=f"Cannot find symbol {symbol} in symbols list",
            )

        log_column_findings(
            symbol,
            (
                ("Missing optional quote data", diagnostics.missing_optional),
                ("Applied optional quote data default values", diagnostics.defaults_applied),
            ),
        )
        return ValidatedRow(
            kind=kind_hint or self.schema.kind,
            quote_type=quote_type,
            symbol=symbol,
            values=values,
            diagnostics=diagnostics,
        )
