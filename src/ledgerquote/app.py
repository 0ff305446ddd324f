"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from ledgerquote.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    is_started,
    startup,
)
from ledgerquote.config import get_schema_catalog
from ledgerquote.domain.clock import local_now
from ledgerquote.domain.ports import LedgerUnitOfWork
from ledgerquote.domain.reconciliation import (
    CurrencyReconciler,
    QuotePipeline,
    SecurityReconciler,
    load_currency_instruments,
    load_security_instruments,
)
from ledgerquote.domain.reconciliation.currency import BASE_CURRENCY_COLUMN, CRNC_TABLE
from ledgerquote.domain.reconciliation.security import SEC_TABLE
from ledgerquote.domain.status import StatusAggregator

if TYPE_CHECKING:
    from datetime import tzinfo

    from ledgerquote.domain.clock import Clock
    from ledgerquote.domain.model import Instrument
    from ledgerquote.domain.ports import LedgerStore, QuoteFeed
    from ledgerquote.domain.reconciliation import Reconciler
    from ledgerquote.domain.schema import SchemaCatalog
    from ledgerquote.domain.status import RunSummary

UnitOfWorkFactory = Callable[[], LedgerUnitOfWork]

ONLINE_UPDATE_ID: Final[int] = 917505
"""``CLI_DAT.idData`` of the last-online-update timestamp."""
ONLINE_UPDATE_COLUMN: Final[str] = "dtVal"

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateQuotesResult:
    summary: RunSummary
    processed: int
    appended: int
    stamped: bool

    @property
    def exit_code(self) -> int:
        return self.summary.exit_code


def _default_unit_of_work_factory(database_uri: str | None) -> UnitOfWorkFactory:
    if not is_started():
        startup(database_uri=database_uri)
    return SqlAlchemyLedgerUnitOfWork


def build_reconcilers(
    store: LedgerStore,
    catalog: SchemaCatalog,
    *,
    clock: Clock = local_now,
) -> list[Reconciler]:
    """One reconciler per instrument kind, reading the ledger's tracked instruments."""

    return [
        SecurityReconciler(store, catalog.schema_for(SecurityReconciler.kind), clock=clock),
        CurrencyReconciler(store, catalog.schema_for(CurrencyReconciler.kind)),
    ]


def update_quotes(
    feed: QuoteFeed,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    catalog: SchemaCatalog | None = None,
    clock: Clock = local_now,
    zone: tzinfo | None = None,
    database_uri: str | None = None,
) -> UpdateQuotesResult:
    """Reconcile every row of ``feed`` into the ledger.

    Each row is committed on its own; appended price rows and the key counter
    are flushed and committed once after the last row. A ``StorageFailure``
    aborts the run and leaves the last committed row as the final state.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory(database_uri)
    effective_catalog = catalog or get_schema_catalog()
    aggregator = StatusAggregator()

    with effective_uow() as uow:
        store = uow.store
        pipeline = QuotePipeline(
            effective_catalog,
            build_reconcilers(store, effective_catalog, clock=clock),
            aggregator,
            zone=zone,
        )
        processed = 0
        for raw_row in feed:
            pipeline.process(raw_row)
            uow.commit()
            processed += 1

        appended = pipeline.flush()
        stamped = False
        if aggregator.updated() or appended:
            stamped = store.set_client_value(ONLINE_UPDATE_ID, ONLINE_UPDATE_COLUMN, clock())
            if not stamped:
                log.warning("Cannot find online update timestamp row idData=%s", ONLINE_UPDATE_ID)
        uow.commit()

    summary = aggregator.finalize()
    log.info(
        "Finished quote update: processed=%s, appended=%s, exit code=%s",
        processed,
        appended,
        summary.exit_code,
    )
    return UpdateQuotesResult(
        summary=summary, processed=processed, appended=appended, stamped=stamped
    )


def list_symbols(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    database_uri: str | None = None,
) -> list[Instrument]:
    """Return every trackable security and currency pair in the ledger."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory(database_uri)
    with effective_uow() as uow:
        store = uow.store
        securities = load_security_instruments(store, store.table(SEC_TABLE))
        _, currencies = load_currency_instruments(
            store.table(CRNC_TABLE), store.header_value(BASE_CURRENCY_COLUMN)
        )
    return [*securities, *currencies]
