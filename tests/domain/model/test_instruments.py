from __future__ import annotations

import pytest

from ledgerquote.domain.model import (
    Instrument,
    InstrumentKind,
    InstrumentSet,
    PriceSource,
    currency_pair_symbol,
    has_exchange_prefix,
    split_currency_pair,
    truncate_symbol,
)


@pytest.mark.parametrize(
    ("symbol", "expected"),
    [
        ("FOO", "FOO"),
        ("ABCDEFGHIJKL", "ABCDEFGHIJKL"),
        ("ABCDEFGHIJKLM", "ABCDEFGHIJKL"),
        ("LSE:ABCDEFGHIJKLM", "LSE:ABCDEFGHIJKLM"),
        ("$US:ABCDEFGHIJKLM", "$US:ABCDEFGHIJKLM"),
    ],
)
def test_truncate_symbol(symbol: str, expected: str) -> None:
    assert truncate_symbol(symbol) == expected


def test_exchange_prefix_requires_two_character_code() -> None:
    assert has_exchange_prefix("GB:VOD")
    assert not has_exchange_prefix("NASDAQ:AAPL")


def test_currency_pair_symbols() -> None:
    assert currency_pair_symbol("USD", "GBP") == "USDGBP=X"
    assert split_currency_pair("USDGBP=X") == ("USD", "GBP")
    with pytest.raises(ValueError, match="Not a currency pair"):
        split_currency_pair("USD")


def test_instrument_set_keeps_first_instrument_per_symbol() -> None:
    instruments = InstrumentSet(
        [
            Instrument("FOO", InstrumentKind.SECURITY, "US"),
            Instrument("FOO", InstrumentKind.SECURITY, "GB"),
            Instrument("USDGBP=X", InstrumentKind.CURRENCY),
        ]
    )

    assert len(instruments) == 2
    assert "FOO" in instruments
    assert instruments.get("FOO") == Instrument("FOO", InstrumentKind.SECURITY, "US")
    assert [instrument.symbol for instrument in instruments] == ["FOO", "USDGBP=X"]


def test_authoritative_price_sources() -> None:
    assert PriceSource.is_authoritative(5)
    assert PriceSource.is_authoritative(6)
    assert not PriceSource.is_authoritative(1)
    assert not PriceSource.is_authoritative(None)
