from __future__ import annotations

from datetime import date, datetime

import pytest

from ledgerquote.domain.reconciliation.history import search_history


def _price(hsp: int, day: int, *, src: int = 6, month: int = 1) -> dict[str, object]:
    return {"hsp": hsp, "dt": datetime(2024, month, day), "src": src, "dPrice": float(hsp)}


HISTORY = [_price(index, day) for index, day in enumerate((2, 5, 9, 12, 16, 19, 23, 26), start=1)]


def test_empty_history_has_no_match() -> None:
    result = search_history([], date(2024, 1, 2))

    assert result.match is None
    assert result.previous is None
    assert result.scanned == 0


@pytest.mark.parametrize("day", [2, 5, 9, 12, 16, 19, 23, 26])
def test_exact_match_is_found_from_either_end(day: int) -> None:
    result = search_history(HISTORY, date(2024, 1, day))

    assert result.match is not None
    assert result.match["dt"] == datetime(2024, 1, day)


def test_scan_starts_from_the_calendar_closer_end() -> None:
    early = search_history(HISTORY, date(2024, 1, 5))
    late = search_history(HISTORY, date(2024, 1, 23))

    assert early.from_latest is False
    assert early.scanned == 2
    assert late.from_latest is True
    assert late.scanned == 2


def test_equal_distance_scans_from_latest_end() -> None:
    history = [_price(1, 1), _price(2, 21)]

    assert search_history(history, date(2024, 1, 11)).from_latest is True


def test_transactional_price_is_not_an_update_target() -> None:
    history = [_price(1, 2), _price(2, 5, src=1)]

    result = search_history(history, date(2024, 1, 5))

    assert result.match is None
    assert result.previous is not None
    assert result.previous["hsp"] == 2


def test_authoritative_same_day_row_wins_over_transactional_row() -> None:
    history = [_price(1, 5, src=1), _price(2, 5, src=5), _price(3, 7)]

    result = search_history(history, date(2024, 1, 5))

    assert result.match is not None
    assert result.match["hsp"] == 2


def test_previous_is_latest_row_before_the_quote_date() -> None:
    result = search_history(HISTORY, date(2024, 1, 14))

    assert result.match is None
    assert result.previous is not None
    assert result.previous["dt"] == datetime(2024, 1, 12)


def test_quote_before_all_history_has_no_previous() -> None:
    result = search_history(HISTORY, date(2023, 12, 30))

    assert result.match is None
    assert result.previous is None
