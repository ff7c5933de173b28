"""Mini README: Tests for linking advances to memos and bills.

Structure:
    * test_link_appends_advance_and_sets_back_link - parent gains the advance.
    * test_link_is_idempotent_per_banking_entry - relinking replaces, never duplicates.
    * test_link_unknown_parent_raises - advances need an existing document.
    * test_unlink_twice_is_a_no_op - second unlink only warns.
    * test_store_moves_advance_when_reference_changes - banking edit relinks.
    * test_memo_edit_keeps_linked_advances - the edit form never drops advances.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict

import pytest

from freightbooks.errors import ReferenceNotFound
from freightbooks.linking import AdvanceLinker
from freightbooks.records import BankingCategory, BankingEntry, Bill, EntryType, Memo, PaymentMode, SourceType
from freightbooks.store import LedgerStore


def _memos() -> Dict[str, Memo]:
    return {
        "memo-1": Memo(
            id="memo-1",
            memo_number="MO-1",
            loading_slip_id="ls-market",
            date=date(2024, 4, 5),
            supplier="Sharma Roadlines",
            freight=50000.0,
        )
    }


def _advance(**overrides: object) -> BankingEntry:
    values = dict(
        id="bk-1",
        type=EntryType.DEBIT,
        category=BankingCategory.MEMO_ADVANCE,
        amount=10000.0,
        date=date(2024, 4, 6),
        reference_id="MO-1",
        narration="NEFT 4411",
    )
    values.update(overrides)
    return BankingEntry(**values)  # type: ignore[arg-type]


def test_link_appends_advance_and_sets_back_link() -> None:
    memos = _memos()
    linker = AdvanceLinker(memos, {})

    linked = linker.link(_advance(payment_mode="cash"))

    assert linked.advance_id == "bk-1-advance"
    (advance,) = memos["memo-1"].advance_payments
    assert advance.id == "bk-1-advance"
    assert advance.memo_number == "MO-1"
    assert advance.amount == pytest.approx(10000.0)
    assert advance.mode is PaymentMode.CASH
    assert advance.reference == "NEFT 4411"


def test_link_is_idempotent_per_banking_entry() -> None:
    memos = _memos()
    linker = AdvanceLinker(memos, {})

    linker.link(_advance())
    linker.link(_advance(amount=12000.0))

    assert [advance.amount for advance in memos["memo-1"].advance_payments] == [12000.0]


def test_link_unknown_parent_raises() -> None:
    bills: Dict[str, Bill] = {}
    linker = AdvanceLinker(_memos(), bills)

    with pytest.raises(ReferenceNotFound):
        linker.link(_advance(reference_id="MO-404"))
    with pytest.raises(ReferenceNotFound):
        linker.link(_advance(category=BankingCategory.BILL_ADVANCE, reference_id="BL-1"))


def test_unlink_twice_is_a_no_op(caplog: pytest.LogCaptureFixture) -> None:
    memos = _memos()
    linker = AdvanceLinker(memos, {})
    linked = linker.link(_advance())

    removed = linker.unlink(linked)
    with caplog.at_level(logging.WARNING):
        again = linker.unlink(linked)

    assert removed is not None and removed.id == "bk-1-advance"
    assert again is None
    assert memos["memo-1"].advance_payments == ()
    assert "already unlinked" in caplog.text


def _second_memo(store: LedgerStore) -> None:
    for memo_id, number in (("memo-1", "MO-1"), ("memo-2", "MO-2")):
        store.on_memo_created(
            Memo(
                id=memo_id,
                memo_number=number,
                loading_slip_id="ls-market",
                date=date(2024, 4, 5),
                supplier="Sharma Roadlines",
                freight=50000.0,
            )
        )


def test_store_moves_advance_when_reference_changes(store: LedgerStore) -> None:
    _second_memo(store)
    store.on_banking_entry_created(_advance())

    store.on_banking_entry_updated(_advance(reference_id="MO-2", amount=8000.0))

    assert store.get_memo("memo-1").advance_payments == ()
    (moved,) = store.get_memo("memo-2").advance_payments
    assert moved.amount == pytest.approx(8000.0)
    assert store.get_banking_entry("bk-1").advance_id == "bk-1-advance"
    assert store.entries_for_source(SourceType.BANKING, "bk-1") == []


def test_memo_edit_keeps_linked_advances(store: LedgerStore) -> None:
    _second_memo(store)
    store.on_banking_entry_created(_advance())

    edited = replace(store.get_memo("memo-1"), freight=55000.0, advance_payments=())
    store.on_memo_updated(edited)

    memo = store.get_memo("memo-1")
    assert memo.freight == pytest.approx(55000.0)
    assert [advance.id for advance in memo.advance_payments] == ["bk-1-advance"]
    assert memo.outstanding_balance == pytest.approx(45000.0)
