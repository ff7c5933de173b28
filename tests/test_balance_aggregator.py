"""Mini README: Tests for running balances over ledger slices.

Structure:
    * test_running_balance_orders_by_date_then_id - the fold is deterministic.
    * test_sign_convention_is_explicit - the same slice read both ways.
    * test_date_range_filters_entries - inclusive bounds, invalid ranges rejected.
    * test_vehicle_ledgers_group_by_vehicle_number - reference names are ignored there.
    * test_ledger_accounts_lists_counterparties - distinct, sorted keys.
"""

from __future__ import annotations

from datetime import date

import pytest

from freightbooks.balances import SignConvention, compute_balance, ledger_accounts
from freightbooks.records import DerivedEntryId, EntryRole, LedgerEntry, LedgerType, SourceType


def _entry(
    source_id: str,
    on: date,
    *,
    ledger_type: LedgerType = LedgerType.PARTY,
    reference_name: str = "Acme Cement",
    debit: float = 0.0,
    credit: float = 0.0,
    vehicle_no: str = "",
) -> LedgerEntry:
    return LedgerEntry(
        entry_id=DerivedEntryId(source_id, EntryRole.PARTY),
        ledger_type=ledger_type,
        reference_name=reference_name,
        date=on,
        source_type=SourceType.BILL,
        debit=debit,
        credit=credit,
        vehicle_no=vehicle_no or None,
    )


def _party_entries() -> list:
    return [
        _entry("bill-2", date(2024, 4, 10), debit=5000.0),
        _entry("bill-1", date(2024, 4, 10), debit=10000.0),
        _entry("rcpt-1", date(2024, 4, 12), credit=4000.0),
        _entry("bill-9", date(2024, 4, 1), debit=100.0, reference_name="Other Party"),
    ]


def test_running_balance_orders_by_date_then_id() -> None:
    report = compute_balance(
        _party_entries(), "Acme Cement", LedgerType.PARTY, sign=SignConvention.DEBIT_MINUS_CREDIT
    )

    assert [line.entry.source_id for line in report.lines] == ["bill-1", "bill-2", "rcpt-1"]
    assert [line.running_balance for line in report.lines] == pytest.approx([10000.0, 15000.0, 11000.0])
    assert report.total_debit == pytest.approx(15000.0)
    assert report.total_credit == pytest.approx(4000.0)
    assert report.final_balance == pytest.approx(11000.0)


def test_sign_convention_is_explicit() -> None:
    report = compute_balance(
        _party_entries(), "Acme Cement", [LedgerType.PARTY], sign=SignConvention.CREDIT_MINUS_DEBIT
    )

    assert report.final_balance == pytest.approx(-11000.0)
    assert report.as_dict()["sign"] == "credit_minus_debit"


def test_date_range_filters_entries() -> None:
    report = compute_balance(
        _party_entries(),
        "Acme Cement",
        LedgerType.PARTY,
        sign=SignConvention.DEBIT_MINUS_CREDIT,
        date_from="2024-04-11",
        date_to=date(2024, 4, 12),
    )

    assert [line.entry.source_id for line in report.lines] == ["rcpt-1"]
    assert report.final_balance == pytest.approx(-4000.0)

    with pytest.raises(ValueError):
        compute_balance(
            _party_entries(),
            "Acme Cement",
            LedgerType.PARTY,
            sign=SignConvention.DEBIT_MINUS_CREDIT,
            date_from="2024-05-01",
            date_to="2024-04-01",
        )


def test_vehicle_ledgers_group_by_vehicle_number() -> None:
    entries = [
        _entry(
            "memo-1",
            date(2024, 4, 5),
            ledger_type=LedgerType.VEHICLE_INCOME,
            reference_name="Vehicle KA01AB1234 - Net Freight",
            credit=92000.0,
            vehicle_no="KA01AB1234",
        ),
        _entry(
            "bk-1",
            date(2024, 4, 6),
            ledger_type=LedgerType.VEHICLE_EXPENSE,
            reference_name="Vehicle KA01AB1234 - Expense",
            debit=2000.0,
            vehicle_no="KA01AB1234",
        ),
    ]

    report = compute_balance(
        entries,
        "KA01AB1234",
        [LedgerType.VEHICLE_INCOME, LedgerType.VEHICLE_EXPENSE],
        sign=SignConvention.CREDIT_MINUS_DEBIT,
    )

    assert report.final_balance == pytest.approx(90000.0)
    assert compute_balance(entries, "Vehicle KA01AB1234 - Expense", LedgerType.VEHICLE_EXPENSE, sign=SignConvention.DEBIT_MINUS_CREDIT).lines == []


def test_ledger_accounts_lists_counterparties() -> None:
    assert ledger_accounts(_party_entries(), LedgerType.PARTY) == ["Acme Cement", "Other Party"]
    assert ledger_accounts(_party_entries(), LedgerType.SUPPLIER) == []
