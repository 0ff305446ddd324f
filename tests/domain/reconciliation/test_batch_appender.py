from __future__ import annotations

import pytest

from ledgerquote.domain.errors import StorageFailure
from ledgerquote.domain.reconciliation.batch import BatchAppender
from ledgerquote.domain.sequence import HeaderLayout, SequenceAllocator
from tests.helpers.ledger import InMemoryLedgerStore, build_header, read_counter


def _appender(store: InMemoryLedgerStore) -> tuple[BatchAppender, SequenceAllocator]:
    allocator = SequenceAllocator(store, HeaderLayout.SP_NEXT_PK)
    return BatchAppender(store.table("SP"), allocator), allocator


def test_empty_flush_makes_no_store_calls() -> None:
    store = InMemoryLedgerStore(header=build_header(sp_next=10))
    appender, _ = _appender(store)

    assert appender.flush() == 0
    assert store.table("SP").append_calls == []
    assert store.header_writes == 0


def test_flush_appends_in_one_call_then_persists_counter() -> None:
    store = InMemoryLedgerStore(header=build_header(sp_next=10))
    appender, allocator = _appender(store)
    for _ in range(2):
        appender.stage({"hsp": allocator.next(), "hsec": 1, "dPrice": 1.0})

    assert appender.pending == 2
    assert appender.flush() == 2

    assert len(store.table("SP").append_calls) == 1
    assert [row["hsp"] for row in store.table("SP").rows] == [10, 11]
    assert read_counter(store.header, 260) == 12
    assert appender.pending == 0
    assert appender.flush() == 0


def test_failed_append_leaves_counter_untouched() -> None:
    store = InMemoryLedgerStore(header=build_header(sp_next=10))
    store.table("SP").fail_on_append = True
    appender, allocator = _appender(store)
    appender.stage({"hsp": allocator.next(), "hsec": 1})

    with pytest.raises(StorageFailure):
        appender.flush()

    assert store.header_writes == 0
    assert read_counter(store.header, 260) == 10


def test_staged_rows_are_searchable_by_pattern() -> None:
    store = InMemoryLedgerStore()
    appender, _ = _appender(store)
    first = {"hsp": 1, "hsec": 1}
    appender.stage(first)
    appender.stage({"hsp": 2, "hsec": 2})

    assert appender.staged_matching({"hsec": 1}) == [first]
    assert appender.is_staged(first)
    assert not appender.is_staged({"hsp": 1, "hsec": 1})
