"""SQLAlchemy Core table metadata for the ledger tables the engine touches."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData()

security_table = Table(
    "SEC",
    metadata,
    Column("hsec", Integer, primary_key=True, autoincrement=False),
    Column("szSymbol", String(64), index=True),
    Column("szFull", String(255)),
    Column("hcntry", Integer),
    Column("sct", Integer),
    Column("fOLQuotes", Boolean, nullable=False, default=False),
    Column("dtLastUpdate", DateTime),
    Column("dPrice", Float),
    Column("dChange", Float),
    Column("dOpen", Float),
    Column("dHigh", Float),
    Column("dLow", Float),
    Column("dPrevClose", Float),
    Column("vol", Integer),
)

security_price_table = Table(
    "SP",
    metadata,
    Column("hsp", Integer, primary_key=True, autoincrement=False),
    Column("hsec", Integer, nullable=False, index=True),
    Column("dt", DateTime),
    Column("dtSerial", DateTime),
    Column("src", Integer),
    Column("dPrice", Float),
    Column("dChange", Float),
    Column("dOpen", Float),
    Column("dHigh", Float),
    Column("dLow", Float),
    Column("dPrevClose", Float),
    Column("vol", Integer),
)

currency_table = Table(
    "CRNC",
    metadata,
    Column("hcrnc", Integer, primary_key=True, autoincrement=False),
    Column("szName", String(64)),
    Column("szIsoCode", String(3), index=True),
    Column("fOnline", Boolean, nullable=False, default=False),
    Column("fHidden", Boolean, nullable=False, default=False),
)

exchange_rate_table = Table(
    "CRNC_EXCHG",
    metadata,
    Column("hcrncExchg", Integer, primary_key=True, autoincrement=False),
    Column("hcrncFrom", Integer, nullable=False),
    Column("hcrncTo", Integer, nullable=False),
    Column("rate", Float),
    Column("dtRate", DateTime),
)

country_table = Table(
    "CNTRY",
    metadata,
    Column("hcntry", Integer, primary_key=True, autoincrement=False),
    Column("szCode", String(8)),
    Column("szName", String(64)),
)

header_table = Table(
    "DHD",
    metadata,
    Column("hdhd", Integer, primary_key=True, autoincrement=False),
    Column("hcrncDef", Integer),
    Column("rgbNhdata", LargeBinary, nullable=False),
)

client_data_table = Table(
    "CLI_DAT",
    metadata,
    Column("idData", Integer, primary_key=True, autoincrement=False),
    Column("dtVal", DateTime),
    Column("rgbVal", LargeBinary),
)

TABLES: Final[dict[str, Table]] = {table.name: table for table in metadata.sorted_tables}


def create_all_tables(engine: Engine) -> None:
    """Create any missing ledger tables on ``engine``."""

    metadata.create_all(engine, checkfirst=True)
    log.debug("Ensured ledger tables: %s", ", ".join(TABLES))
