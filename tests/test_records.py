"""Mini README: Tests for the domain record helpers.

Structure:
    * test_memo_amounts_exclude_rto_from_outstanding - net includes RTO, outstanding does not.
    * test_bill_net_amount - additions and deductions on a bill.
    * test_from_dict_coerces_loose_payloads - strings for numbers and dates are accepted.
    * test_banking_entry_validation - category/field pairings are enforced.
    * test_unknown_category_is_rejected - the category set is closed.
    * test_derived_entry_id_string_form - ids read ``source-role``.
    * test_unknown_statuses_and_books_are_invalid_records - closed enums fail as InvalidRecord.
"""

from __future__ import annotations

from datetime import date

import pytest

from freightbooks.errors import InvalidCategoryCombination, InvalidRecord
from freightbooks.records import (
    AdvancePayment,
    BankingCategory,
    BankingEntry,
    Bill,
    DerivedEntryId,
    EntryRole,
    EntryType,
    LoadingSlip,
    Memo,
    MemoStatus,
)


def test_memo_amounts_exclude_rto_from_outstanding() -> None:
    memo = Memo(
        id="m1",
        memo_number="MO-1",
        loading_slip_id="ls-1",
        date=date(2024, 4, 1),
        supplier="Sharma Roadlines",
        freight=10000.0,
        commission=500.0,
        mamool=100.0,
        detention=300.0,
        extra=200.0,
        rto=400.0,
        advance_payments=(
            AdvancePayment(id="b1-advance", amount=1000.0, date=date(2024, 4, 2), memo_number="MO-1"),
        ),
    )

    assert memo.net_amount == pytest.approx(10300.0)
    assert memo.total_advances == pytest.approx(1000.0)
    assert memo.outstanding_balance == pytest.approx(8900.0)


def test_bill_net_amount() -> None:
    bill = Bill(
        id="b1",
        bill_number="BL-1",
        loading_slip_id="ls-1",
        date=date(2024, 4, 1),
        party="Acme Cement",
        bill_amount=20000.0,
        detention=500.0,
        rto=300.0,
        mamool=200.0,
        tds=400.0,
        penalties=100.0,
    )

    assert bill.net_amount == pytest.approx(20100.0)
    assert bill.outstanding_balance == pytest.approx(20100.0)


def test_from_dict_coerces_loose_payloads() -> None:
    slip = LoadingSlip.from_dict(
        {
            "id": "ls-9",
            "slip_number": "LS-9",
            "date": "2024-05-06T10:30:00",
            "party": "Acme Cement",
            "vehicle_no": " KA01AB1234 ",
            "freight": "45000",
            "advance": "5000",
            "rto": "",
        }
    )
    memo = Memo.from_dict(
        {
            "id": "m9",
            "memo_number": "MO-9",
            "loading_slip_id": "ls-9",
            "date": "2024-05-07",
            "supplier": "Sharma Roadlines",
            "freight": "40000",
            "status": "paid",
            "paid_date": "2024-05-20",
        }
    )

    assert slip.date == date(2024, 5, 6)
    assert slip.vehicle_no == "KA01AB1234"
    assert slip.balance == pytest.approx(40000.0)
    assert slip.rto == 0.0
    assert memo.status is MemoStatus.PAID
    assert memo.paid_date == date(2024, 5, 20)
    assert memo.as_dict()["date"] == "2024-05-07"

    with pytest.raises(InvalidRecord):
        Memo.from_dict({"id": "m10", "memo_number": "MO-10", "loading_slip_id": "ls-9", "date": "yesterday"})
    with pytest.raises(InvalidRecord):
        LoadingSlip.from_dict({"id": "ls-10", "slip_number": "LS-10", "date": "2024-05-06", "freight": "lots"})


def test_banking_entry_validation() -> None:
    missing_vehicle = BankingEntry(
        id="bk-1",
        type=EntryType.DEBIT,
        category=BankingCategory.VEHICLE_EXPENSE,
        amount=1500.0,
        date=date(2024, 4, 3),
    )
    missing_reference = BankingEntry(
        id="bk-2",
        type=EntryType.DEBIT,
        category=BankingCategory.MEMO_ADVANCE,
        amount=1500.0,
        date=date(2024, 4, 3),
    )
    negative = BankingEntry(
        id="bk-3",
        type=EntryType.DEBIT,
        category=BankingCategory.EXPENSE,
        amount=-1.0,
        date=date(2024, 4, 3),
    )

    with pytest.raises(InvalidCategoryCombination):
        missing_vehicle.validate()
    with pytest.raises(InvalidCategoryCombination):
        missing_reference.validate()
    with pytest.raises(InvalidRecord):
        negative.validate()


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(InvalidRecord):
        BankingCategory.from_str("party_payment")
    assert BankingCategory.from_str(" Memo_Advance ") is BankingCategory.MEMO_ADVANCE


def test_derived_entry_id_string_form() -> None:
    assert str(DerivedEntryId("memo-1", EntryRole.DETENTION)) == "memo-1-detention"
    assert str(DerivedEntryId("bk-7", EntryRole.CATEGORY_LEDGER)) == "bk-7-ledger"


def test_unknown_statuses_and_books_are_invalid_records() -> None:
    memo_payload = {
        "id": "m1",
        "memo_number": "MO-1",
        "loading_slip_id": "ls-1",
        "date": "2024-04-01",
        "supplier": "Sharma Roadlines",
        "freight": 1000,
        "status": "archived",
    }
    bill_payload = {
        "id": "b1",
        "bill_number": "BL-1",
        "loading_slip_id": "ls-1",
        "date": "2024-04-01",
        "party": "Acme Cement",
        "bill_amount": 1000,
        "status": "disputed",
    }
    banking_payload = {
        "id": "bk-1",
        "type": "debit",
        "category": "expense",
        "amount": 100,
        "date": "2024-04-01",
        "book": "vault",
    }

    with pytest.raises(InvalidRecord):
        Memo.from_dict(memo_payload)
    with pytest.raises(InvalidRecord):
        Bill.from_dict(bill_payload)
    with pytest.raises(InvalidRecord):
        BankingEntry.from_dict(banking_payload)
    assert Memo.from_dict({**memo_payload, "status": " Paid "}).status is MemoStatus.PAID
