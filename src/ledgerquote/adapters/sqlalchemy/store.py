"""Ledger store implementation backed by a SQLAlchemy session."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from ledgerquote.adapters.sqlalchemy.mappings import (
    TABLES,
    client_data_table,
    country_table,
    header_table,
)
from ledgerquote.domain.errors import StorageFailure

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from sqlalchemy import ColumnElement, Select, Table
    from sqlalchemy.orm import Session

    from ledgerquote.domain.model import LedgerRow

log = logging.getLogger(__name__)


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageFailure(f"Failed to {action}: {exc}") from exc


class SqlAlchemyLedgerTable:
    """One ledger table addressed through SQLAlchemy Core statements."""

    def __init__(self, session: Session, table: Table) -> None:
        self.session = session
        self._table = table
        self._primary_key = tuple(table.primary_key.columns)

    @property
    def name(self) -> str:
        return self._table.name

    def find_first(self, pattern: Mapping[str, object]) -> LedgerRow | None:
        stmt = self._select(pattern).limit(1)
        with _storage_errors(f"read {self.name} table"):
            row = self.session.execute(stmt).mappings().first()
        return None if row is None else dict(row)

    def iter_matching(
        self,
        pattern: Mapping[str, object],
        *,
        reverse: bool = False,
    ) -> Iterator[LedgerRow]:
        stmt = self._select(pattern, reverse=reverse)
        with _storage_errors(f"read {self.name} table"):
            rows = self.session.execute(stmt).mappings().all()
        return (dict(row) for row in rows)

    def update_row(self, row: Mapping[str, object]) -> None:
        try:
            key = [column == row[column.name] for column in self._primary_key]
        except KeyError as exc:
            raise StorageFailure(f"Row for {self.name} table lacks primary key {exc}") from None
        values = {
            name: value
            for name, value in self._known(row).items()
            if name not in {column.name for column in self._primary_key}
        }
        if not values:
            return
        with _storage_errors(f"update {self.name} table"):
            self.session.execute(update(self._table).where(*key).values(values))

    def append_rows(self, rows: Iterable[Mapping[str, object]]) -> int:
        payload = [self._known(row) for row in rows]
        if payload:
            with _storage_errors(f"append to {self.name} table"):
                self.session.execute(insert(self._table), payload)
        return self.row_count()

    def row_count(self) -> int:
        stmt = select(func.count()).select_from(self._table)
        with _storage_errors(f"count {self.name} table"):
            return self.session.execute(stmt).scalar_one()

    def _known(self, row: Mapping[str, object]) -> dict[str, object]:
        return {name: value for name, value in row.items() if name in self._table.c}

    def _select(self, pattern: Mapping[str, object], *, reverse: bool = False) -> Select[tuple]:
        criteria: list[ColumnElement[bool]] = []
        for name, value in pattern.items():
            if name not in self._table.c:
                raise StorageFailure(f"Unknown column {name} in {self.name} table")
            criteria.append(self._table.c[name] == value)
        order = [column.desc() if reverse else column.asc() for column in self._primary_key]
        return select(self._table).where(*criteria).order_by(*order)


class SqlAlchemyLedgerStore:
    """``LedgerStore`` over the tables declared in ``mappings``."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._tables: dict[str, SqlAlchemyLedgerTable] = {}

    def table(self, name: str) -> SqlAlchemyLedgerTable:
        if name not in self._tables:
            try:
                table = TABLES[name]
            except KeyError:
                raise StorageFailure(f"Unknown ledger table {name}") from None
            self._tables[name] = SqlAlchemyLedgerTable(self.session, table)
        return self._tables[name]

    def read_header(self) -> bytes:
        return bytes(self._header_row()["rgbNhdata"])

    def write_header(self, data: bytes) -> None:
        hdhd = self._header_row()["hdhd"]
        stmt = (
            update(header_table).where(header_table.c.hdhd == hdhd).values(rgbNhdata=data)
        )
        with _storage_errors("write ledger header"):
            self.session.execute(stmt)
        log.debug("Wrote %s-byte ledger header", len(data))

    def header_value(self, column: str) -> object:
        if column not in header_table.c:
            raise StorageFailure(f"Unknown column {column} in {header_table.name} table")
        return self._header_row()[column]

    def country_code(self, hcntry: int) -> str | None:
        stmt = select(country_table.c.szCode).where(country_table.c.hcntry == hcntry)
        with _storage_errors(f"read {country_table.name} table"):
            return self.session.execute(stmt).scalar_one_or_none()

    def set_client_value(self, id_data: int, column: str, value: object) -> bool:
        if column not in client_data_table.c:
            raise StorageFailure(f"Unknown column {column} in {client_data_table.name} table")
        stmt = (
            update(client_data_table)
            .where(client_data_table.c.idData == id_data)
            .values({column: value})
        )
        with _storage_errors(f"update {client_data_table.name} table"):
            result = self.session.execute(stmt)
        return bool(result.rowcount)

    def _header_row(self) -> Mapping[str, object]:
        stmt = select(header_table).order_by(header_table.c.hdhd).limit(1)
        with _storage_errors("read ledger header"):
            row = self.session.execute(stmt).mappings().first()
        if row is None:
            raise StorageFailure(f"Ledger has no {header_table.name} row")
        return row

