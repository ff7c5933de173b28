"""Mini README: Tests for workbook import/export.

Structure:
    * test_workbook_replay_rebuilds_the_same_books - dump then load gives the same ledger.
    * test_deletion_events_carry_ids - deletes are written by id.
    * test_malformed_events_are_rejected - unknown kinds and missing payloads fail loudly.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from freightbooks.configuration import FreightbooksSettings
from freightbooks.errors import InvalidRecord
from freightbooks.records import BankingCategory, BankingEntry, EntryType, LoadingSlip, Memo
from freightbooks.store import EventKind, LedgerStore
from freightbooks.store.serialization import build_store, dump_workbook, event_from_dict


def _populate(store: LedgerStore) -> None:
    store.on_memo_created(
        Memo(
            id="memo-1",
            memo_number="MO-1",
            loading_slip_id="ls-own",
            date=date(2024, 4, 5),
            supplier="Company",
            freight=60000.0,
            detention=500.0,
        )
    )
    store.on_banking_entry_created(
        BankingEntry(
            id="bk-1",
            type=EntryType.DEBIT,
            category=BankingCategory.MEMO_ADVANCE,
            amount=10000.0,
            date=date(2024, 4, 6),
            reference_id="MO-1",
        )
    )
    store.on_banking_entry_created(
        BankingEntry(
            id="bk-2",
            type=EntryType.DEBIT,
            category=BankingCategory.FUEL_WALLET,
            amount=9000.0,
            date=date(2024, 4, 6),
            narration="HPCL",
        )
    )
    store.allocate_fuel_to_vehicle("KA01AB1234", "HPCL", 4000.0, "2024-04-07")
    store.add_loading_slip(
        LoadingSlip(id="ls-temp", slip_number="LS-9", date=date(2024, 4, 8), party="Acme", vehicle_no="TN01ZZ0001")
    )
    store.delete_loading_slip("ls-temp")


def test_workbook_replay_rebuilds_the_same_books(
    store: LedgerStore, settings: FreightbooksSettings, tmp_path: Path
) -> None:
    _populate(store)

    path = dump_workbook(store, tmp_path / "books" / "workbook.json")
    reloaded = build_store(path, settings=settings)

    assert reloaded.ledger_entries() == store.ledger_entries()
    assert reloaded.memos() == store.memos()
    assert reloaded.fuel_wallet_balance("HPCL") == pytest.approx(5000.0)
    assert [vehicle.vehicle_no for vehicle in reloaded.vehicles()] == ["KA01AB1234", "MH12XY9876"]
    assert len(reloaded.events()) == len(store.events())


def test_deletion_events_carry_ids(store: LedgerStore, tmp_path: Path) -> None:
    _populate(store)

    data = json.loads(dump_workbook(store, tmp_path / "workbook.json").read_text(encoding="utf-8"))

    assert data["events"][-1] == {
        "sequence": len(store.events()),
        "kind": "loading_slip_deleted",
        "id": "ls-temp",
    }
    assert data["events"][0]["record"]["id"] == "ls-own"


def test_malformed_events_are_rejected() -> None:
    with pytest.raises(InvalidRecord):
        event_from_dict({"kind": "memo_archived", "id": "memo-1"})
    with pytest.raises(InvalidRecord):
        event_from_dict({"kind": "memo_deleted"})
    with pytest.raises(InvalidRecord):
        event_from_dict({"kind": "memo_created", "record": "memo-1"})

    kind, payload = event_from_dict({"kind": "Bill_Deleted", "id": "bill-7"})
    assert kind is EventKind.BILL_DELETED
    assert payload == "bill-7"
