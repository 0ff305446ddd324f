"""Row shapes flowing through the quote pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, TypeAlias

from ledgerquote.domain.status import UpdateStatus, worst_status

if TYPE_CHECKING:
    from .enums import InstrumentKind

RawRow: TypeAlias = Mapping[str, object]
TypedValue: TypeAlias = datetime | float | int | str
LedgerRow: TypeAlias = dict[str, object]

SYMBOL_COLUMN = "xSymbol"
QUOTE_TYPE_COLUMN = "xType"
UNKNOWN_QUOTE_TYPE = "unknown"


@dataclass(slots=True)
class Diagnostics:
    """Column-level findings collected while validating and coercing one row."""

    missing_optional: list[str] = field(default_factory=list[str])
    defaults_applied: list[str] = field(default_factory=list[str])
    invalid: list[str] = field(default_factory=list[str])
    invalid_defaulted: list[str] = field(default_factory=list[str])

    def status(self) -> UpdateStatus:
        statuses: list[UpdateStatus] = []
        if self.missing_optional:
            statuses.append(UpdateStatus.MISSING_OPTIONAL)
        if self.invalid:
            statuses.append(UpdateStatus.INVALID_OPTIONAL)
        if self.invalid_defaulted:
            statuses.append(UpdateStatus.DEFAULT_APPLIED)
        return worst_status(statuses)


@dataclass(slots=True, kw_only=True)
class RowRejection:
    """Row-level failure; the row is dropped and the run continues."""

    status: UpdateStatus
    quote_type: str
    reason: str
    symbol: str | None = None


@dataclass(slots=True, kw_only=True)
class ValidatedRow:
    """Schema-restricted row of string values."""

    kind: InstrumentKind
    quote_type: str
    symbol: str
    values: dict[str, str]
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


@dataclass(slots=True, kw_only=True)
class TypedRow:
    """Validated row with values coerced to their column domains."""

    kind: InstrumentKind
    quote_type: str
    symbol: str
    values: dict[str, TypedValue]
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def get(self, column: str) -> TypedValue | None:
        return self.values.get(column)

    def as_ledger_row(self) -> LedgerRow:
        return dict(self.values)


def quote_type_of(row: Mapping[str, object]) -> str:
    value = row.get(QUOTE_TYPE_COLUMN)
    if value is None or not str(value).strip():
        return UNKNOWN_QUOTE_TYPE
    return str(value)
