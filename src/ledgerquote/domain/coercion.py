"""Coerce validated string values into typed ledger values.

The column name decides the domain:

- ``dt`` (the whole-date column) and ``dt*`` columns are timestamps,
- other ``d*`` columns and ``rate`` are decimals,
- ``x*`` columns are internal identifiers passed through untouched,
- anything else is an integer.

Timestamps arrive in UTC (epoch seconds or ``YYYY-MM-DDTHH:MM:SSZ``) and are
stored as naive local date-times, matching the ledger's date handling.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from ledgerquote.domain.model import Diagnostics, RowRejection, TypedRow
from ledgerquote.domain.schema import RATE_COLUMN, WHOLE_DATE_COLUMN
from ledgerquote.domain.status import UpdateStatus
from ledgerquote.domain.validation import log_column_findings

if TYPE_CHECKING:
    from datetime import tzinfo

    from ledgerquote.domain.model import TypedValue, ValidatedRow
    from ledgerquote.domain.schema import InstrumentSchema

log = logging.getLogger(__name__)

_EPOCH_SECONDS = re.compile(r"^(\d+)(?:\.0+)?$")
_UTC_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DECIMAL = re.compile(r"^[+-]?\d+\.\d+$")
_INTEGER = re.compile(r"^[+-]?\d+$")


class ColumnDomain(StrEnum):
    WHOLE_DATE = "whole_date"
    TIMESTAMP = "timestamp"
    DECIMAL = "decimal"
    IDENTIFIER = "identifier"
    INTEGER = "integer"


def column_domain(column: str) -> ColumnDomain:
    if column == WHOLE_DATE_COLUMN:
        return ColumnDomain.WHOLE_DATE
    if column.startswith("dt"):
        return ColumnDomain.TIMESTAMP
    if column.startswith("d") or column == RATE_COLUMN:
        return ColumnDomain.DECIMAL
    if column.startswith("x"):
        return ColumnDomain.IDENTIFIER
    return ColumnDomain.INTEGER


def truncate_to_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


class TypeCoercer:
    """Convert a ``ValidatedRow`` into a ``TypedRow``.

    ``zone`` is the local time zone timestamps are converted into; ``None``
    uses the zone of the running process.
    """

    def __init__(self, schema: InstrumentSchema, *, zone: tzinfo | None = None) -> None:
        self.schema = schema
        self._zone = zone

    def coerce(self, row: ValidatedRow) -> TypedRow | RowRejection:
        rules = {rule.name: rule for rule in self.schema.columns_for(row.quote_type)}
        diagnostics = Diagnostics(
            missing_optional=list(row.diagnostics.missing_optional),
            defaults_applied=list(row.diagnostics.defaults_applied),
        )
        typed: dict[str, TypedValue] = {}
        invalid_values: list[str] = []
        invalid_required: list[str] = []

        for column, text in row.values.items():
            value = self.parse(column, text)
            if value is not None:
                typed[column] = value
                continue

            invalid_values.append(f"{column}={text}")
            rule = rules.get(column)
            if rule is not None and rule.default is not None:
                value = self.parse(column, rule.default)
                if value is not None:
                    typed[column] = value
                    diagnostics.invalid_defaulted.append(column)
                    continue
            if self.schema.is_required(column):
                invalid_required.append(column)
            else:
                diagnostics.invalid.append(column)

        log_column_findings(
            row.symbol,
            (
                ("Invalid quote data", invalid_values),
                ("Default values applied", diagnostics.invalid_defaulted),
            ),
        )
        if invalid_required:
            return RowRejection(
                status=UpdateStatus.INVALID_REQUIRED,
                quote_type=row.quote_type,
                symbol=row.symbol,
                reason=(
                    f"Invalid required quote data for symbol {row.symbol}: "
                    f"{', '.join(invalid_required)}"
                ),
            )
        return TypedRow(
            kind=row.kind,
            quote_type=row.quote_type,
            symbol=row.symbol,
            values=typed,
            diagnostics=diagnostics,
        )

    def parse(self, column: str, text: str) -> TypedValue | None:
        """Parse one value, returning ``None`` when it does not fit the column."""

        domain = column_domain(column)
        if domain is ColumnDomain.IDENTIFIER:
            return text
        text = text.strip()
        match domain:
            case ColumnDomain.WHOLE_DATE:
                if _DATE_ONLY.match(text):
                    return _strptime(text, "%Y-%m-%d")
                timestamp = self._parse_timestamp(text)
                return None if timestamp is None else truncate_to_day(timestamp)
            case ColumnDomain.TIMESTAMP:
                return self._parse_timestamp(text)
            case ColumnDomain.DECIMAL:
                return float(text) if _DECIMAL.match(text) else None
            case _:
                return int(text) if _INTEGER.match(text) else None

    def _parse_timestamp(self, text: str) -> datetime | None:
        if epoch := _EPOCH_SECONDS.match(text):
            try:
                instant = datetime.fromtimestamp(int(epoch.group(1)), tz=UTC)
            except (OverflowError, OSError, ValueError):
                return None
        elif _UTC_TIMESTAMP.match(text):
            parsed = _strptime(text, "%Y-%m-%dT%H:%M:%SZ")
            if parsed is None:
                return None
            instant = parsed.replace(tzinfo=UTC)
        else:
            return None
        return instant.astimezone(self._zone).replace(tzinfo=None)


def _strptime(text: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(text, fmt)  # noqa: DTZ007
    except ValueError:
        return None
