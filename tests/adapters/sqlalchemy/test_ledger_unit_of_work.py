from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from ledgerquote.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.seed import FOO_HSEC

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyLedgerUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_can_create_the_ledger_tables() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine, create_schema=True)

    assert {"SEC", "SP", "CRNC", "CRNC_EXCHG", "CNTRY", "DHD", "CLI_DAT"} <= set(
        inspect(engine).get_table_names()
    )


def test_store_requires_an_open_unit_of_work(seeded_engine: Engine) -> None:
    startup(engine=seeded_engine, force=True)
    uow = SqlAlchemyLedgerUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.store


def test_commit_persists_changes(seeded_engine: Engine) -> None:
    startup(engine=seeded_engine, force=True)

    with SqlAlchemyLedgerUnitOfWork() as uow:
        uow.store.table("SEC").update_row({"hsec": FOO_HSEC, "dPrice": 123.0})
        uow.commit()

    with SqlAlchemyLedgerUnitOfWork() as uow:
        row = uow.store.table("SEC").find_first({"hsec": FOO_HSEC})
        assert row is not None
        assert row["dPrice"] == 123.0


def test_exception_rolls_back_uncommitted_changes(seeded_engine: Engine) -> None:
    startup(engine=seeded_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyLedgerUnitOfWork() as uow:
        uow.store.table("SEC").update_row({"hsec": FOO_HSEC, "dPrice": 1.0})
        raise RuntimeError("boom")

    with SqlAlchemyLedgerUnitOfWork() as uow:
        row = uow.store.table("SEC").find_first({"hsec": FOO_HSEC})
        assert row is not None
        assert row["dPrice"] == 100.0
