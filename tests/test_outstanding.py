"""Mini README: Tests for outstanding balances, statements and vehicle summaries.

Structure:
    * test_party_outstanding_nets_payments_and_advances - receivable formula.
    * test_supplier_outstanding_keeps_rto_and_payments_out - payable formula as shown on the master list.
    * test_all_supplier_balances_skip_own_fleet - own trips are not supplier debts.
    * test_supplier_statement_running_balance - memos net of advances, minus payments.
    * test_party_statement_date_filter_keeps_opening_balance - clipping happens after accumulation.
    * test_vehicle_summary_splits_fuel_from_other_expenses - profit per truck.
"""

from __future__ import annotations

from datetime import date

import pytest

from freightbooks.balances import (
    all_party_balances,
    all_supplier_balances,
    memo_balance,
    party_outstanding,
    party_statement,
    supplier_outstanding,
    supplier_statement,
    vehicle_summary,
)
from freightbooks.classification import VehicleClassifier
from freightbooks.records import (
    AdvancePayment,
    BankingCategory,
    BankingEntry,
    Bill,
    DerivedEntryId,
    EntryRole,
    EntryType,
    LedgerEntry,
    LedgerType,
    LoadingSlip,
    Memo,
    OwnershipType,
    SourceType,
    Vehicle,
)


def _bank(entry_id: str, category: BankingCategory, amount: float, reference_id: str, on: date) -> BankingEntry:
    return BankingEntry(
        id=entry_id,
        type=EntryType.CREDIT if category.targets_bill else EntryType.DEBIT,
        category=category,
        amount=amount,
        date=on,
        reference_id=reference_id,
    )


def _bills() -> list:
    return [
        Bill(
            id="bill-1",
            bill_number="BL-1",
            loading_slip_id="ls-1",
            date=date(2024, 4, 1),
            party="Acme Cement",
            bill_amount=100000.0,
            tds=2000.0,
            advance_payments=(
                AdvancePayment(id="bk-1-advance", amount=10000.0, date=date(2024, 4, 3), bill_number="BL-1"),
            ),
        ),
        Bill(
            id="bill-2",
            bill_number="BL-2",
            loading_slip_id="ls-2",
            date=date(2024, 4, 20),
            party="Acme Cement",
            bill_amount=50000.0,
        ),
        Bill(
            id="bill-3",
            bill_number="BL-3",
            loading_slip_id="ls-3",
            date=date(2024, 4, 5),
            party="Zenith Steel",
            bill_amount=5000.0,
        ),
    ]


def _bill_banking() -> list:
    return [
        _bank("bk-1", BankingCategory.BILL_ADVANCE, 10000.0, "BL-1", date(2024, 4, 3)),
        _bank("bk-2", BankingCategory.BILL_PAYMENT, 30000.0, "BL-1", date(2024, 4, 15)),
        _bank("bk-3", BankingCategory.BILL_PAYMENT, 999.0, "BL-404", date(2024, 4, 15)),
    ]


def _memos() -> list:
    return [
        Memo(
            id="memo-1",
            memo_number="MO-1",
            loading_slip_id="ls-market",
            date=date(2024, 4, 5),
            supplier="Sharma Roadlines",
            freight=100000.0,
            commission=6000.0,
            mamool=2000.0,
            detention=1000.0,
            extra=500.0,
            rto=1500.0,
            advance_payments=(
                AdvancePayment(id="bk-9-advance", amount=50000.0, date=date(2024, 4, 6), memo_number="MO-1"),
            ),
        ),
        Memo(
            id="memo-2",
            memo_number="MO-2",
            loading_slip_id="ls-own",
            date=date(2024, 4, 7),
            supplier="Sharma Roadlines",
            freight=20000.0,
        ),
    ]


def _memo_banking() -> list:
    return [
        _bank("bk-9", BankingCategory.MEMO_ADVANCE, 50000.0, "MO-1", date(2024, 4, 6)),
        _bank("bk-10", BankingCategory.MEMO_PAYMENT, 43500.0, "MO-1", date(2024, 4, 30)),
    ]


def test_party_outstanding_nets_payments_and_advances() -> None:
    balance = party_outstanding("Acme Cement", _bills(), _bill_banking())

    assert balance.total_bills == pytest.approx(148000.0)
    assert balance.total_advances == pytest.approx(10000.0)
    assert balance.total_payments == pytest.approx(30000.0)
    assert balance.outstanding_amount == pytest.approx(108000.0)
    assert balance.bill_count == 2
    assert balance.last_bill_date == date(2024, 4, 20)
    assert balance.status == "pending"

    ranked = all_party_balances(_bills(), _bill_banking())
    assert [row.party_name for row in ranked] == ["Acme Cement", "Zenith Steel"]


def test_supplier_outstanding_keeps_rto_and_payments_out() -> None:
    memos = _memos()[:1]

    balance = supplier_outstanding("Sharma Roadlines", memos, _memo_banking())

    assert balance.total_advances == pytest.approx(50000.0)
    assert balance.total_payments == pytest.approx(43500.0)
    # 100000 - 50000 - 6000 - 2000 + 500 + 1000; RTO 1500 not included.
    assert balance.outstanding_amount == pytest.approx(43500.0)
    assert memo_balance(memos[0], _memo_banking()).balance == pytest.approx(0.0)


def test_all_supplier_balances_skip_own_fleet() -> None:
    slips = {
        "ls-market": LoadingSlip(
            id="ls-market", slip_number="LS-2", date=date(2024, 4, 1), party="Acme", vehicle_no="MH12XY9876"
        ),
        "ls-own": LoadingSlip(
            id="ls-own", slip_number="LS-1", date=date(2024, 4, 1), party="Acme", vehicle_no="KA01AB1234"
        ),
    }
    classifier = VehicleClassifier([Vehicle(vehicle_no="KA01AB1234", ownership_type=OwnershipType.OWN)])

    everything = all_supplier_balances(_memos(), _memo_banking())
    market_only = all_supplier_balances(_memos(), _memo_banking(), loading_slips=slips, classifier=classifier)

    assert everything[0].memo_count == 2
    assert market_only[0].memo_count == 1
    assert market_only[0].outstanding_amount == pytest.approx(43500.0)


def test_supplier_statement_running_balance() -> None:
    lines = supplier_statement("Sharma Roadlines", _memos()[:1], _memo_banking())

    assert [line.kind for line in lines] == ["memo", "payment"]
    assert lines[0].charge == pytest.approx(43500.0)
    assert lines[-1].running_balance == pytest.approx(0.0)


def test_party_statement_date_filter_keeps_opening_balance() -> None:
    lines = party_statement("Acme Cement", _bills(), _bill_banking(), date_from="2024-04-10")

    assert [line.reference for line in lines] == ["bk-2", "BL-2"]
    # BL-1 contributes 98000 net less the 10000 advance before the window opens.
    assert lines[0].running_balance == pytest.approx(58000.0)
    assert lines[1].running_balance == pytest.approx(108000.0)


def _ledger(source_id: str, ledger_type: LedgerType, reference_name: str, **amounts: float) -> LedgerEntry:
    return LedgerEntry(
        entry_id=DerivedEntryId(source_id, EntryRole.VEHICLE_EXPENSE),
        ledger_type=ledger_type,
        reference_name=reference_name,
        date=date(2024, 4, 10),
        source_type=SourceType.BANKING,
        vehicle_no="KA01AB1234",
        **amounts,
    )


def test_vehicle_summary_splits_fuel_from_other_expenses() -> None:
    entries = [
        _ledger("memo-1", LedgerType.VEHICLE_INCOME, "Vehicle KA01AB1234 - Net Freight", credit=92000.0),
        _ledger("fuel_0001", LedgerType.VEHICLE_EXPENSE, "Vehicle KA01AB1234 - Fuel Expense", debit=12000.0),
        _ledger("bk-5", LedgerType.VEHICLE_EXPENSE, "Vehicle KA01AB1234 - Expense", debit=3000.0),
    ]

    summary = vehicle_summary("KA01AB1234", entries)

    assert summary.total_income == pytest.approx(92000.0)
    assert summary.fuel_expenses == pytest.approx(12000.0)
    assert summary.other_expenses == pytest.approx(3000.0)
    assert summary.net_profit == pytest.approx(77000.0)
    assert vehicle_summary("KA01AB1234", entries, date_to="2024-04-01").net_profit == 0.0
