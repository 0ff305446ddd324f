"""Ports for obtaining raw quote rows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ledgerquote.domain.model import RawRow


@runtime_checkable
class QuoteFeed(Protocol):
    """Iterable source of raw quote rows, consumed once in submission order."""

    def __iter__(self) -> Iterator[RawRow]: ...


__all__ = ["QuoteFeed"]
