"""A small ledger used across adapter, app and domain tests.

Base currency USD; GBP is online with a stored GBP->USD rate; EUR is online
but hidden; JPY is not updated online. FOO (US) is tracked for online quotes,
BAR is not.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import insert

from ledgerquote.adapters.sqlalchemy.mappings import (
    client_data_table,
    country_table,
    currency_table,
    exchange_rate_table,
    header_table,
    security_price_table,
    security_table,
)
from tests.helpers.ledger import InMemoryLedgerStore, build_header

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

ONLINE_UPDATE_ID: Final[int] = 917505
SP_NEXT: Final[int] = 100
FOO_HSEC: Final[int] = 10
GBP_TO_USD: Final[float] = 1.25

COUNTRIES: Final[list[dict[str, object]]] = [
    {"hcntry": 1, "szCode": "US", "szName": "United States"},
]
CURRENCIES: Final[list[dict[str, object]]] = [
    {"hcrnc": 1, "szName": "US Dollar", "szIsoCode": "USD", "fOnline": True, "fHidden": False},
    {"hcrnc": 2, "szName": "Pound", "szIsoCode": "GBP", "fOnline": True, "fHidden": False},
    {"hcrnc": 3, "szName": "Euro", "szIsoCode": "EUR", "fOnline": True, "fHidden": True},
    {"hcrnc": 4, "szName": "Yen", "szIsoCode": "JPY", "fOnline": False, "fHidden": False},
]
EXCHANGE_RATES: Final[list[dict[str, object]]] = [
    {"hcrncExchg": 1, "hcrncFrom": 2, "hcrncTo": 1, "rate": GBP_TO_USD},
]
SECURITIES: Final[list[dict[str, object]]] = [
    {
        "hsec": FOO_HSEC,
        "szSymbol": "FOO",
        "hcntry": 1,
        "sct": 1,
        "fOLQuotes": True,
        "dtLastUpdate": datetime(2024, 1, 1),
        "dPrice": 100.0,
    },
    {"hsec": 11, "szSymbol": "BAR", "hcntry": 1, "sct": 1, "fOLQuotes": False},
]
PRICES: Final[list[dict[str, object]]] = [
    {"hsp": 50, "hsec": FOO_HSEC, "dt": datetime(2023, 12, 29), "src": 6, "dPrice": 99.0},
    {"hsp": 51, "hsec": FOO_HSEC, "dt": datetime(2024, 1, 1), "src": 6, "dPrice": 100.0},
]


def seed_sqlite_ledger(engine: Engine) -> None:
    with engine.begin() as connection:
        connection.execute(
            insert(header_table),
            [{"hdhd": 1, "hcrncDef": 1, "rgbNhdata": build_header(sp_next=SP_NEXT)}],
        )
        connection.execute(insert(country_table), COUNTRIES)
        connection.execute(insert(currency_table), CURRENCIES)
        connection.execute(insert(exchange_rate_table), EXCHANGE_RATES)
        for security in SECURITIES:
            connection.execute(insert(security_table).values(security))
        connection.execute(insert(security_price_table), PRICES)
        connection.execute(insert(client_data_table), [{"idData": ONLINE_UPDATE_ID}])


def make_memory_store() -> InMemoryLedgerStore:
    store = InMemoryLedgerStore(
        header=build_header(sp_next=SP_NEXT),
        base_hcrnc=1,
        countries={1: "US"},
        client_data={ONLINE_UPDATE_ID: {"dtVal": None}},
    )
    store.tables["CRNC"].rows.extend(dict(row) for row in CURRENCIES)
    store.tables["CRNC_EXCHG"].rows.extend(dict(row) for row in EXCHANGE_RATES)
    store.tables["SEC"].rows.extend(dict(row) for row in SECURITIES)
    store.tables["SP"].rows.extend(dict(row) for row in PRICES)
    return store
