"""Date-proximity search over one instrument's price history.

Histories are expected to grow roughly in date order, so the scan starts from
whichever end of the history is calendar-closer to the quote date and stops at
the first same-day row carrying an authoritative (manual or online) source.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING

from ledgerquote.domain.model import PriceSource
from ledgerquote.domain.schema import WHOLE_DATE_COLUMN

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ledgerquote.domain.model import LedgerRow


@dataclass(frozen=True, slots=True)
class HistorySearchResult:
    match: LedgerRow | None
    """Same-day row with an authoritative source, the update target."""

    previous: LedgerRow | None
    """Latest other row dated on or before the quote date; logging only."""

    scanned: int
    from_latest: bool


def row_date(row: LedgerRow) -> date | None:
    value = row.get(WHOLE_DATE_COLUMN)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def is_authoritative(row: LedgerRow) -> bool:
    return PriceSource.is_authoritative(row.get("src"))


def _outranks(candidate: LedgerRow, candidate_date: date, current: LedgerRow | None) -> bool:
    if current is None:
        return True
    current_date = row_date(current)
    if current_date is None or candidate_date > current_date:
        return True
    return (
        candidate_date == current_date
        and is_authoritative(candidate)
        and not is_authoritative(current)
    )


def _scan_from_latest(history: Sequence[LedgerRow], quote_date: date) -> bool:
    first = row_date(history[0])
    last = row_date(history[-1])
    if first is None or last is None:
        return True
    first_gap = abs((first - quote_date).days)
    last_gap = abs((last - quote_date).days)
    return not first_gap < last_gap


def search_history(history: Sequence[LedgerRow], quote_date: date) -> HistorySearchResult:
    """Find the update target for ``quote_date`` in ``history`` (primary-key order)."""

    if not history:
        return HistorySearchResult(match=None, previous=None, scanned=0, from_latest=True)

    from_latest = _scan_from_latest(history, quote_date)
    ordered = reversed(history) if from_latest else iter(history)
    previous: LedgerRow | None = None
    scanned = 0
    for row in ordered:
        scanned += 1
        current_date = row_date(row)
        if current_date is None or current_date > quote_date:
            continue
        if current_date == quote_date and is_authoritative(row):
            return HistorySearchResult(
                match=row, previous=previous, scanned=scanned, from_latest=from_latest
            )
        if _outranks(row, current_date, previous):
            previous = row
    return HistorySearchResult(
        match=None, previous=previous, scanned=scanned, from_latest=from_latest
    )
