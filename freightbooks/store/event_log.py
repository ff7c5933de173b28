"""Mini README: The append-only log of events the store has applied.

Structure:
    * EventKind - every mutation the store records.
    * LedgerEvent - one committed event: sequence number, kind and payload.
    * EventLog - ordered container with replay-friendly iteration.

Payloads are the full domain record for creates and updates and the record id
for deletes. Vehicle master data is deliberately not logged: it is read as it
stands when the log is replayed, which is what lets ``recompute_all``
reconcile old postings with corrected ownership.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Sequence, Union

from ..records.banking import BankingEntry, FuelWallet, VehicleFuelExpense
from ..records.documents import Bill, LoadingSlip, Memo

Payload = Union[LoadingSlip, Memo, Bill, BankingEntry, VehicleFuelExpense, FuelWallet, str]


class EventKind(str, Enum):
    LOADING_SLIP_CREATED = "loading_slip_created"
    LOADING_SLIP_UPDATED = "loading_slip_updated"
    LOADING_SLIP_DELETED = "loading_slip_deleted"
    MEMO_CREATED = "memo_created"
    MEMO_UPDATED = "memo_updated"
    MEMO_DELETED = "memo_deleted"
    BILL_CREATED = "bill_created"
    BILL_UPDATED = "bill_updated"
    BILL_DELETED = "bill_deleted"
    BANKING_ENTRY_CREATED = "banking_entry_created"
    BANKING_ENTRY_UPDATED = "banking_entry_updated"
    BANKING_ENTRY_DELETED = "banking_entry_deleted"
    FUEL_WALLET_ADDED = "fuel_wallet_added"
    FUEL_ALLOCATED = "fuel_allocated"
    FUEL_ALLOCATION_DELETED = "fuel_allocation_deleted"

    @property
    def is_deletion(self) -> bool:
        return self.value.endswith("_deleted")


@dataclass(slots=True, frozen=True)
class LedgerEvent:
    sequence: int
    kind: EventKind
    payload: Payload


class EventLog:
    """Ordered list of committed events."""

    def __init__(self) -> None:
        self._events: List[LedgerEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(list(self._events))

    @property
    def next_sequence(self) -> int:
        return self._events[-1].sequence + 1 if self._events else 1

    def stamp(self, pending: Sequence[tuple]) -> List[LedgerEvent]:
        """Number ``(kind, payload)`` pairs after the last committed event."""

        start = self.next_sequence
        return [
            LedgerEvent(sequence=start + offset, kind=kind, payload=payload)
            for offset, (kind, payload) in enumerate(pending)
        ]

    def extend(self, events: Sequence[LedgerEvent]) -> None:
        self._events.extend(events)

    def events(self) -> List[LedgerEvent]:
        return list(self._events)
