"""Drive raw quote rows through validation, coercion and reconciliation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ledgerquote.domain.coercion import TypeCoercer
from ledgerquote.domain.model import RowRejection, quote_type_of
from ledgerquote.domain.status import UpdateStatus
from ledgerquote.domain.validation import RowValidator

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import tzinfo

    from ledgerquote.domain.model import InstrumentKind, RawRow
    from ledgerquote.domain.schema import SchemaCatalog
    from ledgerquote.domain.status import StatusAggregator

    from .contracts import Reconciler

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Route:
    validator: RowValidator
    coercer: TypeCoercer
    reconciler: Reconciler


class QuotePipeline:
    """Process raw rows one at a time and record exactly one outcome per row.

    Row-level problems end as recorded statuses. Storage errors raised by a
    reconciler propagate unchanged and abort the run.
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        reconcilers: Iterable[Reconciler],
        aggregator: StatusAggregator,
        *,
        zone: tzinfo | None = None,
    ) -> None:
        self._catalog = catalog
        self._aggregator = aggregator
        self._routes: dict[InstrumentKind, _Route] = {}
        for reconciler in reconcilers:
            self._routes[reconciler.kind] = _Route(
                validator=RowValidator(reconciler.schema, reconciler.instruments),
                coercer=TypeCoercer(reconciler.schema, zone=zone),
                reconciler=reconciler,
            )

    @property
    def aggregator(self) -> StatusAggregator:
        return self._aggregator

    def process(self, raw_row: RawRow) -> UpdateStatus:
        quote_type = quote_type_of(raw_row)
        kind = self._catalog.kind_for_quote_type(quote_type)
        route = self._routes.get(kind)
        if route is None:
            log.error("No reconciler configured for quote type %s (%s)", quote_type, kind)
            return self._record(quote_type, UpdateStatus.NOT_FOUND)

        validated = route.validator.validate(raw_row, kind_hint=kind)
        if isinstance(validated, RowRejection):
            return self._reject(validated)

        typed = route.coercer.coerce(validated)
        if isinstance(typed, RowRejection):
            return self._reject(typed)

        outcome = route.reconciler.reconcile(typed)
        if outcome is UpdateStatus.OK:
            outcome = typed.diagnostics.status()
        return self._record(typed.quote_type, outcome)

    def run(self, rows: Iterable[RawRow]) -> int:
        """Process every row of ``rows`` and return how many were seen."""

        count = 0
        for raw_row in rows:
            self.process(raw_row)
            count += 1
        return count

    def flush(self) -> int:
        """Write every reconciler's deferred rows; returns the number appended."""

        return sum(route.reconciler.flush() for route in self._routes.values())

    def _reject(self, rejection: RowRejection) -> UpdateStatus:
        log.error("%s", rejection.reason)
        return self._record(rejection.quote_type, rejection.status)

    def _record(self, quote_type: str, status: UpdateStatus) -> UpdateStatus:
        self._aggregator.record(quote_type, status)
        return status
