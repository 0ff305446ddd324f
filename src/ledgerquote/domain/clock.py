"""Wall-clock access for staleness checks and record stamps."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def local_now() -> datetime:
    """Naive local time, the representation the ledger stores."""

    return datetime.now().replace(microsecond=0)  # noqa: DTZ005


def age_in_days(timestamp: datetime, *, clock: Clock = local_now) -> int:
    """Whole days elapsed between ``timestamp`` and now."""

    return (clock() - timestamp).days
