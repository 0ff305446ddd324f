"""Instrument identities and symbol rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .enums import InstrumentKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

MAX_SYMBOL_LENGTH: Final[int] = 12
"""Maximum ledger symbol size, excluding an exchange prefix."""

EXCHANGE_PREFIX: Final[re.Pattern[str]] = re.compile(r"^\$?..:.+")
CURRENCY_PAIR_SUFFIX: Final[str] = "=X"


def has_exchange_prefix(symbol: str) -> bool:
    return EXCHANGE_PREFIX.match(symbol) is not None


def truncate_symbol(symbol: str, *, max_length: int = MAX_SYMBOL_LENGTH) -> str:
    """Cut ``symbol`` to ``max_length`` unless it carries an exchange prefix."""

    if len(symbol) > max_length and not has_exchange_prefix(symbol):
        return symbol[:max_length]
    return symbol


def currency_pair_symbol(base_iso: str, other_iso: str) -> str:
    return f"{base_iso}{other_iso}{CURRENCY_PAIR_SUFFIX}"


def split_currency_pair(symbol: str) -> tuple[str, str]:
    """Return the two ISO codes of a ``FOOBAR=X`` pseudo-symbol."""

    if len(symbol) < 6:
        raise ValueError(f"Not a currency pair symbol: {symbol!r}")
    return symbol[0:3], symbol[3:6]


@dataclass(frozen=True, slots=True)
class Instrument:
    """A tracked security or currency pair."""

    symbol: str
    kind: InstrumentKind
    country: str | None = None


class InstrumentSet:
    """Trackable instruments keyed by symbol, in discovery order."""

    def __init__(self, instruments: Iterable[Instrument] = ()) -> None:
        self._by_symbol: dict[str, Instrument] = {}
        for instrument in instruments:
            self.add(instrument)

    def add(self, instrument: Instrument) -> None:
        self._by_symbol.setdefault(instrument.symbol, instrument)

    def get(self, symbol: str) -> Instrument | None:
        return self._by_symbol.get(symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._by_symbol.values())

    def __len__(self) -> int:
        return len(self._by_symbol)
