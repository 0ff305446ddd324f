"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class InstrumentKind(StrEnum):
    SECURITY = "security"
    CURRENCY = "currency"


class PriceSource(IntEnum):
    """Origin flag of a time-series price (``SP.src``).

    Values below ``MANUAL`` are prices taken from transactions.
    """

    MANUAL = 5
    ONLINE = 6

    @classmethod
    def is_authoritative(cls, value: object) -> bool:
        return value in (cls.MANUAL, cls.ONLINE)
