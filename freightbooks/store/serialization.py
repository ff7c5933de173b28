"""Mini README: Workbook JSON import/export for the ledger store.

Structure:
    * event_to_dict / event_from_dict - one logged event <-> JSON object.
    * load_workbook / dump_workbook - read and write workbook files.
    * apply_workbook - feed a parsed workbook into a store.
    * build_store - convenience for the console: file in, populated store out.

A workbook holds vehicle master data and the event log::

    {
        "vehicles": [{"vehicle_no": "KA01AB1234", "ownership_type": "own"}],
        "events": [
            {"kind": "loading_slip_created", "record": {...}},
            {"kind": "memo_deleted", "id": "memo-7"}
        ]
    }

Create and update events carry the full ``record``; deletions carry the
record ``id``. Derived ledger entries are never written: loading a workbook
replays the events and derives them again.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..configuration import FreightbooksSettings
from ..errors import InvalidRecord
from ..logging_utils import get_logger
from ..records.banking import BankingEntry, FuelWallet, VehicleFuelExpense
from ..records.documents import Bill, LoadingSlip, Memo, Vehicle
from .event_log import EventKind, LedgerEvent, Payload
from .store import LedgerStore

LOGGER = get_logger(__name__)

_RECORD_PARSERS: Dict[EventKind, Callable[[Mapping[str, Any]], Payload]] = {
    EventKind.LOADING_SLIP_CREATED: LoadingSlip.from_dict,
    EventKind.LOADING_SLIP_UPDATED: LoadingSlip.from_dict,
    EventKind.MEMO_CREATED: Memo.from_dict,
    EventKind.MEMO_UPDATED: Memo.from_dict,
    EventKind.BILL_CREATED: Bill.from_dict,
    EventKind.BILL_UPDATED: Bill.from_dict,
    EventKind.BANKING_ENTRY_CREATED: BankingEntry.from_dict,
    EventKind.BANKING_ENTRY_UPDATED: BankingEntry.from_dict,
    EventKind.FUEL_WALLET_ADDED: FuelWallet.from_dict,
    EventKind.FUEL_ALLOCATED: VehicleFuelExpense.from_dict,
}

_STORE_CALLS: Dict[EventKind, Callable[[LedgerStore, Any], Any]] = {
    EventKind.LOADING_SLIP_CREATED: LedgerStore.add_loading_slip,
    EventKind.LOADING_SLIP_UPDATED: LedgerStore.update_loading_slip,
    EventKind.LOADING_SLIP_DELETED: LedgerStore.delete_loading_slip,
    EventKind.MEMO_CREATED: LedgerStore.on_memo_created,
    EventKind.MEMO_UPDATED: LedgerStore.on_memo_updated,
    EventKind.MEMO_DELETED: LedgerStore.on_memo_deleted,
    EventKind.BILL_CREATED: LedgerStore.on_bill_created,
    EventKind.BILL_UPDATED: LedgerStore.on_bill_updated,
    EventKind.BILL_DELETED: LedgerStore.on_bill_deleted,
    EventKind.BANKING_ENTRY_CREATED: LedgerStore.on_banking_entry_created,
    EventKind.BANKING_ENTRY_UPDATED: LedgerStore.on_banking_entry_updated,
    EventKind.BANKING_ENTRY_DELETED: LedgerStore.on_banking_entry_deleted,
    EventKind.FUEL_WALLET_ADDED: lambda store, wallet: store.add_fuel_wallet(wallet.name, wallet.balance),
    EventKind.FUEL_ALLOCATED: LedgerStore.on_fuel_allocated,
    EventKind.FUEL_ALLOCATION_DELETED: LedgerStore.on_fuel_allocation_deleted,
}


def event_to_dict(event: LedgerEvent) -> Dict[str, object]:
    exported: Dict[str, object] = {"sequence": event.sequence, "kind": event.kind.value}
    if event.kind.is_deletion:
        exported["id"] = event.payload
    else:
        exported["record"] = event.payload.as_dict()  # type: ignore[union-attr]
    return exported


def event_from_dict(payload: Mapping[str, Any]) -> Tuple[EventKind, Payload]:
    """Parse one workbook event into ``(kind, payload)``."""

    try:
        kind = EventKind(str(payload.get("kind", "")).strip().lower())
    except ValueError as error:
        raise InvalidRecord(f"Unsupported event kind: {payload.get('kind')!r}") from error
    if kind.is_deletion:
        record_id = payload.get("id")
        if not record_id:
            raise InvalidRecord(f"Event '{kind.value}' needs an 'id'")
        return kind, str(record_id)
    record = payload.get("record")
    if not isinstance(record, Mapping):
        raise InvalidRecord(f"Event '{kind.value}' needs a 'record' object")
    return kind, _RECORD_PARSERS[kind](record)


def load_workbook(path: Union[str, Path]) -> Dict[str, Any]:
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as workbook_file:
            data = json.load(workbook_file)
    except json.JSONDecodeError as error:
        raise InvalidRecord(f"Workbook {source} is not valid JSON") from error
    if not isinstance(data, dict):
        raise InvalidRecord(f"Workbook {source} must contain a JSON object")
    return data


def apply_workbook(store: LedgerStore, data: Mapping[str, Any]) -> int:
    """Register the workbook's vehicles and replay its events; returns the event count."""

    for vehicle in data.get("vehicles") or ():
        store.register_vehicle(Vehicle.from_dict(vehicle))
    events = [event_from_dict(item) for item in data.get("events") or ()]
    for kind, payload in events:
        _STORE_CALLS[kind](store, payload)
    LOGGER.info("Applied workbook with %s events", len(events))
    return len(events)


def workbook_from_store(store: LedgerStore) -> Dict[str, List[Dict[str, object]]]:
    return {
        "vehicles": [vehicle.as_dict() for vehicle in store.vehicles()],
        "events": [event_to_dict(event) for event in store.events()],
    }


def dump_workbook(store: LedgerStore, path: Union[str, Path]) -> Path:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", encoding="utf-8") as workbook_file:
        json.dump(workbook_from_store(store), workbook_file, indent=2)
    LOGGER.info("Wrote workbook with %s events to %s", len(store.events()), destination)
    return destination


def build_store(path: Union[str, Path], settings: Optional[FreightbooksSettings] = None) -> LedgerStore:
    store = LedgerStore(settings=settings)
    apply_workbook(store, load_workbook(path))
    return store
