"""Row outcome classification and run-level status aggregation.

Every row processed in a run ends in exactly one ``UpdateStatus``. Each status
maps to exactly one ``Severity``; the worst severity seen during the run picks
the process exit code.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Final

log = logging.getLogger(__name__)


class Severity(IntEnum):
    """Ordered severity lattice; the value doubles as the process exit code."""

    OK = 0
    WARNING = 1
    ERROR = 2

    @property
    def exit_code(self) -> int:
        return int(self)


class UpdateStatus(StrEnum):
    OK = "ok"
    NO_CHANGE = "no_change"
    MISSING_OPTIONAL = "missing_optional"
    INVALID_OPTIONAL = "invalid_optional"
    DEFAULT_APPLIED = "default_applied"
    STALE = "stale"
    STALE_SUPERSEDED = "stale_superseded"
    MISSING_REQUIRED = "missing_required"
    INVALID_REQUIRED = "invalid_required"
    NOT_FOUND = "not_found"

    @property
    def severity(self) -> Severity:
        return _SEVERITY[self]

    @property
    def label(self) -> str:
        return _LABEL[self]

    @property
    def is_update(self) -> bool:
        """Whether the row wrote new quote data to the ledger."""

        return self in _UPDATED


_SEVERITY: Final[dict[UpdateStatus, Severity]] = {
    UpdateStatus.OK: Severity.OK,
    UpdateStatus.NO_CHANGE: Severity.OK,
    UpdateStatus.MISSING_OPTIONAL: Severity.WARNING,
    UpdateStatus.INVALID_OPTIONAL: Severity.WARNING,
    UpdateStatus.DEFAULT_APPLIED: Severity.WARNING,
    UpdateStatus.STALE: Severity.WARNING,
    UpdateStatus.STALE_SUPERSEDED: Severity.WARNING,
    UpdateStatus.MISSING_REQUIRED: Severity.ERROR,
    UpdateStatus.INVALID_REQUIRED: Severity.ERROR,
    UpdateStatus.NOT_FOUND: Severity.ERROR,
}

_LABEL: Final[dict[UpdateStatus, str]] = {
    UpdateStatus.OK: "updated OK",
    UpdateStatus.NO_CHANGE: "no change",
    UpdateStatus.MISSING_OPTIONAL: "missing optional data",
    UpdateStatus.INVALID_OPTIONAL: "invalid optional data",
    UpdateStatus.DEFAULT_APPLIED: "default applied",
    UpdateStatus.STALE: "stale",
    UpdateStatus.STALE_SUPERSEDED: "stale superseded",
    UpdateStatus.MISSING_REQUIRED: "missing required data",
    UpdateStatus.INVALID_REQUIRED: "invalid required data",
    UpdateStatus.NOT_FOUND: "not found",
}

_UPDATED: Final[frozenset[UpdateStatus]] = frozenset(
    {
        UpdateStatus.OK,
        UpdateStatus.MISSING_OPTIONAL,
        UpdateStatus.INVALID_OPTIONAL,
        UpdateStatus.DEFAULT_APPLIED,
        UpdateStatus.STALE_SUPERSEDED,
    }
)


def worst_status(statuses: list[UpdateStatus] | tuple[UpdateStatus, ...]) -> UpdateStatus:
    """Return the most severe status, preferring the earliest on ties."""

    worst = UpdateStatus.OK
    for status in statuses:
        if status.severity > worst.severity:
            worst = status
    return worst


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Result of ``StatusAggregator.finalize``."""

    lines: tuple[str, ...]
    worst: Severity

    @property
    def exit_code(self) -> int:
        return self.worst.exit_code


class StatusAggregator:
    """Count row outcomes per quote type and track the worst severity."""

    def __init__(self) -> None:
        self._counts: dict[str, dict[UpdateStatus, int]] = defaultdict(
            lambda: dict.fromkeys(UpdateStatus, 0)
        )
        self._worst = Severity.OK

    @property
    def worst(self) -> Severity:
        return self._worst

    def record(self, quote_type: str, status: UpdateStatus) -> None:
        self._counts[quote_type][status] += 1
        self._worst = max(self._worst, status.severity)

    def count(self, quote_type: str, status: UpdateStatus) -> int:
        counts = self._counts.get(quote_type)
        return counts[status] if counts else 0

    def total(self, quote_type: str | None = None) -> int:
        if quote_type is not None:
            counts = self._counts.get(quote_type)
            return sum(counts.values()) if counts else 0
        return sum(sum(counts.values()) for counts in self._counts.values())

    def updated(self) -> int:
        return sum(
            n
            for counts in self._counts.values()
            for status, n in counts.items()
            if status.is_update
        )

    def quote_types(self) -> tuple[str, ...]:
        return tuple(self._counts)

    def finalize(self) -> RunSummary:
        lines: list[str] = []
        for quote_type, counts in self._counts.items():
            total = sum(counts.values())
            updated = sum(n for status, n in counts.items() if status.is_update)
            breakdown = ", ".join(
                f"{status.label}={n}" for status, n in counts.items() if n > 0
            )
            line = f"Summary for quote type {quote_type}: updated={updated}/{total} [{breakdown}]"
            log.info("%s", line)
            lines.append(line)
        return RunSummary(lines=tuple(lines), worst=self._worst)
