"""Mini README: The ledger store and its event handlers.

Structure:
    * LedgerStore - owns every collection, applies events atomically, keeps
      the event log, and serves snapshot-bound balance views.

Every public mutation goes through ``_commit``: the current state is cloned,
each pending ``(kind, payload)`` step is applied to the clone, and the clone
is swapped in only when all steps succeeded. A failed step raises and leaves
the previous state untouched. Readers take ``snapshot()`` and are never handed
a half-applied event.

``recompute_all`` folds the event log through the same handlers into a fresh
state seeded with the configured wallets and the vehicles as they stand now,
which is how a corrected own/market classification reaches old postings.
Vehicle master data edits are not events and do not re-derive on their own.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date
from typing import Callable, Container, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..balances import (
    BalanceReport,
    MemoBalance,
    PartyOutstanding,
    SignConvention,
    StatementLine,
    SupplierOutstanding,
    VehicleSummary,
    all_party_balances,
    all_supplier_balances,
    compute_balance,
    ledger_accounts,
    memo_balance,
    party_outstanding,
    party_statement,
    supplier_outstanding,
    supplier_statement,
    vehicle_summary,
)
from ..classification import VehicleClassifier
from ..configuration import FreightbooksSettings, get_settings
from ..derivation import (
    BankingEffect,
    DerivationContext,
    derive_banking_entries,
    derive_bill_entries,
    derive_fuel_entries,
    derive_memo_entries,
    fuel_wallet_for,
    resolve_banking_effect,
)
from ..errors import DuplicateRecord, InvalidRecord, ReferenceNotFound
from ..linking import AdvanceLinker
from ..logging_utils import get_logger
from ..records.banking import (
    BankingCategory,
    BankingEntry,
    Book,
    EntryType,
    FuelTransaction,
    FuelTransactionType,
    FuelWallet,
    VehicleFuelExpense,
)
from ..records.documents import Bill, BillStatus, LoadingSlip, Memo, MemoStatus, Vehicle
from ..records.ledger import LedgerEntry, LedgerType, SourceType
from ..utils.coercion import parse_date
from .event_log import EventKind, EventLog, LedgerEvent, Payload
from .state import LedgerState

LOGGER = get_logger(__name__)

CommitListener = Callable[[List[LedgerEvent]], None]
Handler = Callable[[LedgerState, Payload], bool]


def _fuel_transaction_id(source_id: str) -> str:
    return f"{source_id}-fuel-tx"


def _split_evenly(total: float, parts: int) -> List[float]:
    """Split ``total`` into ``parts`` shares of two decimals that add back up."""

    share = round(total / parts, 2)
    shares = [share] * (parts - 1)
    shares.append(round(total - share * (parts - 1), 2))
    return shares


class LedgerStore:
    """Thread-safe owner of the books and the derived ledger."""

    def __init__(
        self,
        settings: Optional[FreightbooksSettings] = None,
        vehicles: Optional[Iterable[Vehicle]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._lock = threading.RLock()
        self._log = EventLog()
        self._listeners: List[CommitListener] = []
        self._sequences: Dict[str, int] = {}
        self._state = self._fresh_state({vehicle.vehicle_no: vehicle for vehicle in vehicles or ()})
        self._handlers: Dict[EventKind, Handler] = {
            EventKind.LOADING_SLIP_CREATED: self._apply_loading_slip_created,
            EventKind.LOADING_SLIP_UPDATED: self._apply_loading_slip_updated,
            EventKind.LOADING_SLIP_DELETED: self._apply_loading_slip_deleted,
            EventKind.MEMO_CREATED: self._apply_memo_created,
            EventKind.MEMO_UPDATED: self._apply_memo_updated,
            EventKind.MEMO_DELETED: self._apply_memo_deleted,
            EventKind.BILL_CREATED: self._apply_bill_created,
            EventKind.BILL_UPDATED: self._apply_bill_updated,
            EventKind.BILL_DELETED: self._apply_bill_deleted,
            EventKind.BANKING_ENTRY_CREATED: self._apply_banking_created,
            EventKind.BANKING_ENTRY_UPDATED: self._apply_banking_updated,
            EventKind.BANKING_ENTRY_DELETED: self._apply_banking_deleted,
            EventKind.FUEL_WALLET_ADDED: self._apply_fuel_wallet_added,
            EventKind.FUEL_ALLOCATED: self._apply_fuel_allocated,
            EventKind.FUEL_ALLOCATION_DELETED: self._apply_fuel_allocation_deleted,
        }
        missing = set(EventKind) - set(self._handlers)
        if missing:  # pragma: no cover - guards edits to EventKind
            raise RuntimeError(f"Event kinds without a handler: {sorted(missing)}")
        LOGGER.debug(
            "Ledger store initialised with %s vehicles and wallets %s",
            len(self._state.vehicles),
            sorted(self._state.fuel_wallets),
        )

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------
    @property
    def settings(self) -> FreightbooksSettings:
        return self._settings

    def _fresh_state(self, vehicles: Dict[str, Vehicle]) -> LedgerState:
        return LedgerState.fresh(
            wallet_names=self._settings.fuel_wallets,
            vehicles=vehicles,
            strict_retraction=self._settings.strict_retraction,
        )

    def _context(self, state: LedgerState) -> DerivationContext:
        return state.context(
            tds_account_name=self._settings.tds_account_name,
            default_fuel_wallet=self._settings.default_fuel_wallet,
        )

    def _next_id(self, prefix: str, taken: Container[str]) -> str:
        """Generate a deterministic identifier such as ``fuel_0001``."""

        sequence = self._sequences.get(prefix, 0)
        while True:
            sequence += 1
            candidate = f"{prefix}_{sequence:04d}"
            if candidate not in taken:
                self._sequences[prefix] = sequence
                return candidate

    def subscribe(self, listener: CommitListener) -> None:
        """Call ``listener`` with the committed events after every successful commit."""

        with self._lock:
            self._listeners.append(listener)

    def _commit(self, pending: Sequence[Tuple[EventKind, Payload]]) -> LedgerState:
        """Apply ``pending`` atomically and return the state that was swapped in."""

        with self._lock:
            working = self._state.clone()
            applied: List[Tuple[EventKind, Payload]] = []
            for kind, payload in pending:
                if self._handlers[kind](working, payload):
                    applied.append((kind, payload))
            events = self._log.stamp(applied)
            self._state = working
            self._log.extend(events)
            listeners = list(self._listeners)
        if events:
            LOGGER.info(
                "Committed %s event(s): %s",
                len(events),
                ", ".join(event.kind.value for event in events),
            )
        for listener in listeners:
            listener(events)
        return working

    # ------------------------------------------------------------------
    # Event handlers (mutate the working clone only)
    # ------------------------------------------------------------------
    def _apply_loading_slip_created(self, state: LedgerState, slip: LoadingSlip) -> bool:
        if slip.id in state.loading_slips:
            raise DuplicateRecord(f"Loading slip {slip.id} already exists.")
        state.loading_slips[slip.id] = slip
        return True

    def _apply_loading_slip_updated(self, state: LedgerState, slip: LoadingSlip) -> bool:
        if slip.id not in state.loading_slips:
            raise ReferenceNotFound("Loading slip", slip.id)
        state.loading_slips[slip.id] = slip
        return True

    def _apply_loading_slip_deleted(self, state: LedgerState, slip_id: str) -> bool:
        if slip_id not in state.loading_slips:
            LOGGER.info("Loading slip %s already deleted; nothing to do", slip_id)
            return False
        for memo in [memo for memo in state.memos.values() if memo.loading_slip_id == slip_id]:
            self._apply_memo_deleted(state, memo.id)
        for bill in [bill for bill in state.bills.values() if bill.loading_slip_id == slip_id]:
            self._apply_bill_deleted(state, bill.id)
        del state.loading_slips[slip_id]
        return True

    def _retract_memo(self, state: LedgerState, memo: Memo) -> None:
        number = memo.memo_number
        state.journal.retract(
            SourceType.MEMO,
            memo.id,
            also=lambda entry: entry.source_type is SourceType.MEMO and entry.memo_number == number,
        )

    def _post_memo(self, state: LedgerState, memo: Memo) -> None:
        clash = state.memo_by_number(memo.memo_number)
        if clash is not None and clash.id != memo.id:
            raise DuplicateRecord(f"Memo number {memo.memo_number} is already used by {clash.id}.")
        state.journal.post(derive_memo_entries(memo, self._context(state)))
        state.memos[memo.id] = memo

    def _apply_memo_created(self, state: LedgerState, memo: Memo) -> bool:
        if memo.id in state.memos:
            raise DuplicateRecord(f"Memo {memo.id} already exists.")
        self._post_memo(state, memo)
        return True

    def _apply_memo_updated(self, state: LedgerState, memo: Memo) -> bool:
        existing = state.memos.get(memo.id)
        if existing is None:
            raise ReferenceNotFound("Memo", memo.id)
        self._retract_memo(state, existing)
        # Advances belong to banking entries, not to the edit form.
        self._post_memo(state, replace(memo, advance_payments=existing.advance_payments))
        return True

    def _apply_memo_deleted(self, state: LedgerState, memo_id: str) -> bool:
        existing = state.memos.get(memo_id)
        if existing is None:
            LOGGER.info("Memo %s already deleted; nothing to do", memo_id)
            return False
        self._retract_memo(state, existing)
        del state.memos[memo_id]
        return True

    def _retract_bill(self, state: LedgerState, bill: Bill) -> None:
        number = bill.bill_number
        state.journal.retract(
            SourceType.BILL,
            bill.id,
            also=lambda entry: entry.source_type is SourceType.BILL and entry.bill_number == number,
        )

    def _post_bill(self, state: LedgerState, bill: Bill) -> None:
        clash = state.bill_by_number(bill.bill_number)
        if clash is not None and clash.id != bill.id:
            raise DuplicateRecord(f"Bill number {bill.bill_number} is already used by {clash.id}.")
        state.journal.post(derive_bill_entries(bill, self._context(state)))
        state.bills[bill.id] = bill

    def _apply_bill_created(self, state: LedgerState, bill: Bill) -> bool:
        if bill.id in state.bills:
            raise DuplicateRecord(f"Bill {bill.id} already exists.")
        self._post_bill(state, bill)
        return True

    def _apply_bill_updated(self, state: LedgerState, bill: Bill) -> bool:
        existing = state.bills.get(bill.id)
        if existing is None:
            raise ReferenceNotFound("Bill", bill.id)
        self._retract_bill(state, existing)
        self._post_bill(state, replace(bill, advance_payments=existing.advance_payments))
        return True

    def _apply_bill_deleted(self, state: LedgerState, bill_id: str) -> bool:
        existing = state.bills.get(bill_id)
        if existing is None:
            LOGGER.info("Bill %s already deleted; nothing to do", bill_id)
            return False
        self._retract_bill(state, existing)
        del state.bills[bill_id]
        return True

    def _adjust_wallet(self, state: LedgerState, name: str, delta: float) -> FuelWallet:
        wallet = state.fuel_wallets.get(name) or FuelWallet(name=name)
        updated = replace(wallet, balance=wallet.balance + delta)
        state.fuel_wallets[name] = updated
        return updated

    def _post_banking(self, state: LedgerState, entry: BankingEntry) -> None:
        entry.validate()
        context = self._context(state)
        effect = resolve_banking_effect(entry, context.classifier)
        if effect is BankingEffect.ADVANCE_LINK:
            entry = AdvanceLinker(state.memos, state.bills).link(entry)
        elif effect is BankingEffect.FUEL_WALLET_TOPUP:
            wallet_name = fuel_wallet_for(entry, context)
            if wallet_name not in state.fuel_wallets:
                LOGGER.info("Creating fuel wallet %s on first top-up", wallet_name)
            wallet = self._adjust_wallet(state, wallet_name, entry.amount)
            state.fuel_transactions[_fuel_transaction_id(entry.id)] = FuelTransaction(
                id=_fuel_transaction_id(entry.id),
                type=FuelTransactionType.WALLET_CREDIT,
                wallet_name=wallet_name,
                amount=entry.amount,
                date=entry.date,
                narration=entry.narration,
            )
            entry = replace(entry, wallet_name=wallet_name)
            LOGGER.debug("Fuel wallet %s topped up to %.2f", wallet_name, wallet.balance)
        state.journal.post(derive_banking_entries(entry, effect, context))
        state.banking_entries[entry.id] = entry
        state.banking_effects[entry.id] = effect
        LOGGER.debug("Banking entry %s applied as %s", entry.id, effect.value)

    def _retract_banking(self, state: LedgerState, entry: BankingEntry) -> None:
        effect = state.banking_effects.pop(entry.id, None)
        if effect is None:
            effect = resolve_banking_effect(entry, state.classifier())
        if effect is BankingEffect.ADVANCE_LINK:
            AdvanceLinker(state.memos, state.bills).unlink(entry)
        elif effect is BankingEffect.FUEL_WALLET_TOPUP:
            wallet_name = entry.wallet_name or fuel_wallet_for(entry, self._context(state))
            self._adjust_wallet(state, wallet_name, -entry.amount)
            state.fuel_transactions.pop(_fuel_transaction_id(entry.id), None)
        state.journal.retract(SourceType.BANKING, entry.id, expected=effect.posts_ledger_entry)

    def _apply_banking_created(self, state: LedgerState, entry: BankingEntry) -> bool:
        if entry.id in state.banking_entries:
            raise DuplicateRecord(f"Banking entry {entry.id} already exists.")
        self._post_banking(state, entry)
        return True

    def _apply_banking_updated(self, state: LedgerState, entry: BankingEntry) -> bool:
        existing = state.banking_entries.get(entry.id)
        if existing is None:
            raise ReferenceNotFound("Banking entry", entry.id)
        self._retract_banking(state, existing)
        del state.banking_entries[entry.id]
        self._post_banking(state, entry)
        return True

    def _apply_banking_deleted(self, state: LedgerState, entry_id: str) -> bool:
        existing = state.banking_entries.get(entry_id)
        if existing is None:
            LOGGER.info("Banking entry %s already deleted; nothing to do", entry_id)
            return False
        self._retract_banking(state, existing)
        del state.banking_entries[entry_id]
        return True

    def _apply_fuel_wallet_added(self, state: LedgerState, wallet: FuelWallet) -> bool:
        if wallet.name in state.fuel_wallets:
            raise DuplicateRecord(f"Fuel wallet {wallet.name} already exists.")
        state.fuel_wallets[wallet.name] = wallet
        return True

    def _apply_fuel_allocated(self, state: LedgerState, expense: VehicleFuelExpense) -> bool:
        if expense.id in state.vehicle_fuel_expenses:
            raise DuplicateRecord(f"Fuel allocation {expense.id} already exists.")
        if expense.wallet_name not in state.fuel_wallets:
            raise ReferenceNotFound("Fuel wallet", expense.wallet_name)
        if expense.amount <= 0:
            raise InvalidRecord(f"Fuel allocation {expense.id} must have a positive amount")
        wallet = self._adjust_wallet(state, expense.wallet_name, -expense.amount)
        if wallet.balance < 0:
            LOGGER.warning(
                "Fuel wallet %s overdrawn to %.2f by allocation %s",
                wallet.name,
                wallet.balance,
                expense.id,
            )
        state.fuel_transactions[_fuel_transaction_id(expense.id)] = FuelTransaction(
            id=_fuel_transaction_id(expense.id),
            type=FuelTransactionType.FUEL_ALLOCATION,
            wallet_name=expense.wallet_name,
            amount=expense.amount,
            date=expense.date,
            vehicle_no=expense.vehicle_no,
            narration=expense.narration,
        )
        state.journal.post(derive_fuel_entries(expense, self._context(state)))
        state.vehicle_fuel_expenses[expense.id] = expense
        return True

    def _apply_fuel_allocation_deleted(self, state: LedgerState, expense_id: str) -> bool:
        existing = state.vehicle_fuel_expenses.get(expense_id)
        if existing is None:
            LOGGER.info("Fuel allocation %s already deleted; nothing to do", expense_id)
            return False
        self._adjust_wallet(state, existing.wallet_name, existing.amount)
        state.fuel_transactions.pop(_fuel_transaction_id(expense_id), None)
        state.journal.retract(SourceType.FUEL, expense_id)
        del state.vehicle_fuel_expenses[expense_id]
        return True

    # ------------------------------------------------------------------
    # Document events
    # ------------------------------------------------------------------
    def add_loading_slip(self, slip: LoadingSlip) -> LoadingSlip:
        self._commit([(EventKind.LOADING_SLIP_CREATED, slip)])
        return slip

    def update_loading_slip(self, slip: LoadingSlip) -> LoadingSlip:
        """Replace a slip; postings already made from it are left as they are."""

        self._commit([(EventKind.LOADING_SLIP_UPDATED, slip)])
        return slip

    def delete_loading_slip(self, slip_id: str) -> None:
        """Delete a slip together with the memos and bills raised against it."""

        self._commit([(EventKind.LOADING_SLIP_DELETED, slip_id)])

    def on_memo_created(self, memo: Memo) -> List[LedgerEntry]:
        """Store a memo and post its entries; returns the entries posted."""

        committed = self._commit([(EventKind.MEMO_CREATED, memo)])
        return committed.journal.for_source(SourceType.MEMO, memo.id)

    def on_memo_updated(self, memo: Memo) -> List[LedgerEntry]:
        committed = self._commit([(EventKind.MEMO_UPDATED, memo)])
        return committed.journal.for_source(SourceType.MEMO, memo.id)

    def on_memo_deleted(self, memo_id: str) -> None:
        self._commit([(EventKind.MEMO_DELETED, memo_id)])

    def on_bill_created(self, bill: Bill) -> List[LedgerEntry]:
        committed = self._commit([(EventKind.BILL_CREATED, bill)])
        return committed.journal.for_source(SourceType.BILL, bill.id)

    def on_bill_updated(self, bill: Bill) -> List[LedgerEntry]:
        committed = self._commit([(EventKind.BILL_UPDATED, bill)])
        return committed.journal.for_source(SourceType.BILL, bill.id)

    def on_bill_deleted(self, bill_id: str) -> None:
        self._commit([(EventKind.BILL_DELETED, bill_id)])

    def on_banking_entry_created(self, entry: BankingEntry) -> List[LedgerEntry]:
        committed = self._commit([(EventKind.BANKING_ENTRY_CREATED, entry)])
        return committed.journal.for_source(SourceType.BANKING, entry.id)

    def on_banking_entry_updated(self, entry: BankingEntry) -> List[LedgerEntry]:
        """Reverse whatever the stored version did, then apply the new version."""

        committed = self._commit([(EventKind.BANKING_ENTRY_UPDATED, entry)])
        return committed.journal.for_source(SourceType.BANKING, entry.id)

    def on_banking_entry_deleted(self, entry_id: str) -> None:
        self._commit([(EventKind.BANKING_ENTRY_DELETED, entry_id)])

    def mark_memo_paid(
        self, memo_id: str, paid_date: Union[date, str], paid_amount: Optional[float] = None
    ) -> Memo:
        with self._lock:
            memo = self.get_memo(memo_id)
            updated = replace(
                memo,
                status=MemoStatus.PAID,
                paid_date=parse_date(paid_date),
                paid_amount=memo.net_amount if paid_amount is None else float(paid_amount),
            )
            return self._commit([(EventKind.MEMO_UPDATED, updated)]).memos[memo_id]

    def mark_bill_received(
        self, bill_id: str, received_date: Union[date, str], received_amount: Optional[float] = None
    ) -> Bill:
        with self._lock:
            bill = self.get_bill(bill_id)
            updated = replace(
                bill,
                status=BillStatus.RECEIVED,
                received_date=parse_date(received_date),
                received_amount=bill.net_amount if received_amount is None else float(received_amount),
            )
            return self._commit([(EventKind.BILL_UPDATED, updated)]).bills[bill_id]

    def bulk_pay_supplier_memos(
        self,
        memo_ids: Sequence[str],
        total_amount: float,
        payment_date: Union[date, str],
        *,
        book: Book = Book.BANK,
        narration: str = "",
    ) -> List[BankingEntry]:
        """Pay several memos at once: one memo_payment per memo, all or nothing."""

        if not memo_ids:
            raise ValueError("At least one memo is required for a bulk payment")
        paid_on = parse_date(payment_date)
        with self._lock:
            memos = [self.get_memo(memo_id) for memo_id in memo_ids]
            taken = set(self._state.banking_entries)
            payments: List[BankingEntry] = []
            pending: List[Tuple[EventKind, Payload]] = []
            for memo, share in zip(memos, _split_evenly(total_amount, len(memos))):
                payment = BankingEntry(
                    id=self._next_id("pay", taken),
                    type=EntryType.DEBIT,
                    category=BankingCategory.MEMO_PAYMENT,
                    amount=share,
                    date=paid_on,
                    reference_id=memo.memo_number,
                    reference_name=memo.supplier,
                    narration=narration or f"Bulk payment for memo {memo.memo_number}",
                    book=book,
                )
                payments.append(payment)
                pending.append((EventKind.BANKING_ENTRY_CREATED, payment))
                pending.append(
                    (
                        EventKind.MEMO_UPDATED,
                        replace(memo, status=MemoStatus.PAID, paid_date=paid_on, paid_amount=share),
                    )
                )
            self._commit(pending)
        return payments

    def bulk_pay_bills(
        self,
        bill_ids: Sequence[str],
        total_amount: float,
        receipt_date: Union[date, str],
        *,
        book: Book = Book.BANK,
        narration: str = "",
    ) -> List[BankingEntry]:
        """Receive payment for several bills at once, all or nothing."""

        if not bill_ids:
            raise ValueError("At least one bill is required for a bulk payment")
        received_on = parse_date(receipt_date)
        with self._lock:
            bills = [self.get_bill(bill_id) for bill_id in bill_ids]
            taken = set(self._state.banking_entries)
            receipts: List[BankingEntry] = []
            pending: List[Tuple[EventKind, Payload]] = []
            for bill, share in zip(bills, _split_evenly(total_amount, len(bills))):
                receipt = BankingEntry(
                    id=self._next_id("rcpt", taken),
                    type=EntryType.CREDIT,
                    category=BankingCategory.BILL_PAYMENT,
                    amount=share,
                    date=received_on,
                    reference_id=bill.bill_number,
                    reference_name=bill.party,
                    narration=narration or f"Bulk receipt for bill {bill.bill_number}",
                    book=book,
                )
                receipts.append(receipt)
                pending.append((EventKind.BANKING_ENTRY_CREATED, receipt))
                pending.append(
                    (
                        EventKind.BILL_UPDATED,
                        replace(
                            bill,
                            status=BillStatus.RECEIVED,
                            received_date=received_on,
                            received_amount=share,
                        ),
                    )
                )
            self._commit(pending)
        return receipts

    # ------------------------------------------------------------------
    # Fuel
    # ------------------------------------------------------------------
    def add_fuel_wallet(self, name: str, balance: float = 0.0) -> FuelWallet:
        wallet = FuelWallet.from_dict({"name": name, "balance": balance})
        self._commit([(EventKind.FUEL_WALLET_ADDED, wallet)])
        return wallet

    def on_fuel_allocated(self, expense: VehicleFuelExpense) -> List[LedgerEntry]:
        committed = self._commit([(EventKind.FUEL_ALLOCATED, expense)])
        return committed.journal.for_source(SourceType.FUEL, expense.id)

    def allocate_fuel_to_vehicle(
        self,
        vehicle_no: str,
        wallet_name: str,
        amount: float,
        allocation_date: Union[date, str],
        narration: Optional[str] = None,
        fuel_quantity: Optional[float] = None,
        rate_per_liter: Optional[float] = None,
        odometer_reading: Optional[float] = None,
        expense_id: Optional[str] = None,
    ) -> VehicleFuelExpense:
        """Draw fuel for a vehicle from a wallet and post the matching entries."""

        with self._lock:
            expense = VehicleFuelExpense(
                id=expense_id or self._next_id("fuel", self._state.vehicle_fuel_expenses),
                vehicle_no=vehicle_no.strip(),
                wallet_name=wallet_name.strip(),
                amount=float(amount),
                date=parse_date(allocation_date),
                fuel_quantity=fuel_quantity,
                rate_per_liter=rate_per_liter,
                odometer_reading=odometer_reading,
                narration=narration or f"Fuel allocated from {wallet_name}",
            )
            self.on_fuel_allocated(expense)
        return expense

    def on_fuel_allocation_deleted(self, expense_id: str) -> None:
        self._commit([(EventKind.FUEL_ALLOCATION_DELETED, expense_id)])

    # ------------------------------------------------------------------
    # Vehicle master data (not logged; use recompute_all to reclassify)
    # ------------------------------------------------------------------
    def _swap_vehicles(self, change: Callable[[Dict[str, Vehicle]], None]) -> None:
        with self._lock:
            working = self._state.clone()
            change(working.vehicles)
            self._state = working

    def register_vehicle(self, vehicle: Vehicle) -> Vehicle:
        def change(vehicles: Dict[str, Vehicle]) -> None:
            if vehicle.vehicle_no in vehicles:
                raise DuplicateRecord(f"Vehicle {vehicle.vehicle_no} already exists.")
            vehicles[vehicle.vehicle_no] = vehicle

        self._swap_vehicles(change)
        LOGGER.info("Registered %s vehicle %s", vehicle.ownership_type.value, vehicle.vehicle_no)
        return vehicle

    def update_vehicle(self, vehicle: Vehicle) -> Vehicle:
        def change(vehicles: Dict[str, Vehicle]) -> None:
            if vehicle.vehicle_no not in vehicles:
                raise ReferenceNotFound("Vehicle", vehicle.vehicle_no)
            vehicles[vehicle.vehicle_no] = vehicle

        self._swap_vehicles(change)
        LOGGER.info(
            "Vehicle %s is now %s; run recompute_all to reclassify existing postings",
            vehicle.vehicle_no,
            vehicle.ownership_type.value,
        )
        return vehicle

    def remove_vehicle(self, vehicle_no: str) -> None:
        def change(vehicles: Dict[str, Vehicle]) -> None:
            if vehicles.pop(vehicle_no, None) is None:
                raise ReferenceNotFound("Vehicle", vehicle_no)

        self._swap_vehicles(change)

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------
    def recompute_all(self) -> int:
        """Rebuild every derived record from the event log; returns the ledger size."""

        with self._lock:
            rebuilt = self._fresh_state(dict(self._state.vehicles))
            for event in self._log:
                self._handlers[event.kind](rebuilt, event.payload)
            self._state = rebuilt
            size = len(rebuilt.journal)
        LOGGER.info("Recomputed ledger from %s events: %s entries", len(self._log), size)
        return size

    # ------------------------------------------------------------------
    # Reads (bound to the current snapshot)
    # ------------------------------------------------------------------
    def snapshot(self) -> LedgerState:
        """The committed state; treat it as read-only."""

        return self._state

    def events(self) -> List[LedgerEvent]:
        return self._log.events()

    def classifier(self) -> VehicleClassifier:
        return self._state.classifier()

    def ledger_entries(
        self,
        *,
        ledger_type: Optional[LedgerType] = None,
        reference_name: Optional[str] = None,
        vehicle_no: Optional[str] = None,
    ) -> List[LedgerEntry]:
        return self._state.journal.entries(
            ledger_type=ledger_type, reference_name=reference_name, vehicle_no=vehicle_no
        )

    def entries_for_source(self, source_type: SourceType, source_id: str) -> List[LedgerEntry]:
        return self._state.journal.for_source(source_type, source_id)

    def vehicles(self) -> List[Vehicle]:
        return sorted(self._state.vehicles.values(), key=lambda vehicle: vehicle.vehicle_no)

    def loading_slips(self) -> List[LoadingSlip]:
        return sorted(self._state.loading_slips.values(), key=lambda slip: (slip.date, slip.id))

    def memos(self) -> List[Memo]:
        return sorted(self._state.memos.values(), key=lambda memo: (memo.date, memo.id))

    def bills(self) -> List[Bill]:
        return sorted(self._state.bills.values(), key=lambda bill: (bill.date, bill.id))

    def banking_entries(self) -> List[BankingEntry]:
        return sorted(self._state.banking_entries.values(), key=lambda entry: (entry.date, entry.id))

    def get_loading_slip(self, slip_id: str) -> LoadingSlip:
        try:
            return self._state.loading_slips[slip_id]
        except KeyError as error:
            raise ReferenceNotFound("Loading slip", slip_id) from error

    def get_memo(self, memo_id: str) -> Memo:
        try:
            return self._state.memos[memo_id]
        except KeyError as error:
            raise ReferenceNotFound("Memo", memo_id) from error

    def get_bill(self, bill_id: str) -> Bill:
        try:
            return self._state.bills[bill_id]
        except KeyError as error:
            raise ReferenceNotFound("Bill", bill_id) from error

    def get_banking_entry(self, entry_id: str) -> BankingEntry:
        try:
            return self._state.banking_entries[entry_id]
        except KeyError as error:
            raise ReferenceNotFound("Banking entry", entry_id) from error

    def banking_effect(self, entry_id: str) -> BankingEffect:
        """The effect that was applied for a stored banking entry."""

        try:
            return self._state.banking_effects[entry_id]
        except KeyError as error:
            raise ReferenceNotFound("Banking entry", entry_id) from error

    def memo_by_number(self, memo_number: str) -> Optional[Memo]:
        return self._state.memo_by_number(memo_number)

    def bill_by_number(self, bill_number: str) -> Optional[Bill]:
        return self._state.bill_by_number(bill_number)

    def fuel_wallets(self) -> List[FuelWallet]:
        return sorted(self._state.fuel_wallets.values(), key=lambda wallet: wallet.name)

    def fuel_wallet_balance(self, name: str) -> float:
        wallet = self._state.fuel_wallets.get(name)
        if wallet is None:
            raise ReferenceNotFound("Fuel wallet", name)
        return wallet.balance

    def fuel_transactions(self, wallet_name: Optional[str] = None) -> List[FuelTransaction]:
        selected = [
            transaction
            for transaction in self._state.fuel_transactions.values()
            if wallet_name is None or transaction.wallet_name == wallet_name
        ]
        return sorted(selected, key=lambda transaction: (transaction.date, transaction.id))

    def vehicle_fuel_expenses(self, vehicle_no: Optional[str] = None) -> List[VehicleFuelExpense]:
        selected = [
            expense
            for expense in self._state.vehicle_fuel_expenses.values()
            if vehicle_no is None or expense.vehicle_no == vehicle_no
        ]
        return sorted(selected, key=lambda expense: (expense.date, expense.id))

    # ------------------------------------------------------------------
    # Balance views
    # ------------------------------------------------------------------
    def compute_balance(
        self,
        counterparty: str,
        ledger_types: Union[LedgerType, Iterable[LedgerType]],
        *,
        sign: SignConvention,
        date_from: Union[date, str, None] = None,
        date_to: Union[date, str, None] = None,
    ) -> BalanceReport:
        return compute_balance(
            self._state.journal.entries(),
            counterparty,
            ledger_types,
            sign=sign,
            date_from=date_from,
            date_to=date_to,
        )

    def ledger_accounts(self, ledger_type: LedgerType) -> List[str]:
        return ledger_accounts(self._state.journal.entries(), ledger_type)

    def party_outstanding(self, party_name: str) -> PartyOutstanding:
        state = self._state
        return party_outstanding(party_name, state.bills.values(), state.banking_entries.values())

    def supplier_outstanding(self, supplier_name: str) -> SupplierOutstanding:
        state = self._state
        return supplier_outstanding(supplier_name, state.memos.values(), state.banking_entries.values())

    def all_party_balances(self) -> List[PartyOutstanding]:
        state = self._state
        return all_party_balances(state.bills.values(), state.banking_entries.values())

    def all_supplier_balances(self) -> List[SupplierOutstanding]:
        state = self._state
        return all_supplier_balances(
            state.memos.values(),
            state.banking_entries.values(),
            loading_slips=state.loading_slips,
            classifier=state.classifier(),
        )

    def memo_balance(self, memo_number: str) -> MemoBalance:
        state = self._state
        memo = state.memo_by_number(memo_number)
        if memo is None:
            raise ReferenceNotFound("Memo", memo_number)
        return memo_balance(memo, state.banking_entries.values())

    def party_statement(
        self,
        party_name: str,
        *,
        date_from: Union[date, str, None] = None,
        date_to: Union[date, str, None] = None,
    ) -> List[StatementLine]:
        state = self._state
        return party_statement(
            party_name,
            state.bills.values(),
            state.banking_entries.values(),
            date_from=date_from,
            date_to=date_to,
        )

    def supplier_statement(
        self,
        supplier_name: str,
        *,
        date_from: Union[date, str, None] = None,
        date_to: Union[date, str, None] = None,
    ) -> List[StatementLine]:
        state = self._state
        return supplier_statement(
            supplier_name,
            state.memos.values(),
            state.banking_entries.values(),
            date_from=date_from,
            date_to=date_to,
        )

    def vehicle_summary(
        self,
        vehicle_no: str,
        *,
        date_from: Union[date, str, None] = None,
        date_to: Union[date, str, None] = None,
    ) -> VehicleSummary:
        return vehicle_summary(
            vehicle_no, self._state.journal.entries(), date_from=date_from, date_to=date_to
        )
