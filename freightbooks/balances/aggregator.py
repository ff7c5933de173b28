"""Mini README: Running balances over a slice of the ledger.

Structure:
    * SignConvention - which side increases the balance.
    * BalanceLine - one entry with the running balance after it.
    * BalanceReport - ordered lines plus totals and the final balance.
    * counterparty_key - the key an entry is grouped under.
    * compute_balance - pure fold over a filtered, date-ordered slice.
    * ledger_accounts - distinct counterparties of a ledger type.

Party, supplier and vehicle ledgers read with opposite conventions, so the
convention is always passed in by the caller rather than guessed from the
ledger type. Nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from ..records.ledger import LedgerEntry, LedgerType
from ..utils.coercion import parse_date


class SignConvention(str, Enum):
    DEBIT_MINUS_CREDIT = "debit_minus_credit"
    CREDIT_MINUS_DEBIT = "credit_minus_debit"

    def apply(self, debit: float, credit: float) -> float:
        if self is SignConvention.DEBIT_MINUS_CREDIT:
            return debit - credit
        return credit - debit


@dataclass(slots=True, frozen=True)
class BalanceLine:
    entry: LedgerEntry
    running_balance: float

    def as_dict(self) -> Dict[str, object]:
        exported = self.entry.as_dict()
        exported["running_balance"] = self.running_balance
        return exported


@dataclass(slots=True)
class BalanceReport:
    counterparty: str
    ledger_types: List[LedgerType]
    sign: SignConvention
    lines: List[BalanceLine] = field(default_factory=list)
    total_debit: float = 0.0
    total_credit: float = 0.0

    @property
    def final_balance(self) -> float:
        return self.lines[-1].running_balance if self.lines else 0.0

    def as_dict(self) -> Dict[str, object]:
        return {
            "counterparty": self.counterparty,
            "ledger_types": [ledger_type.value for ledger_type in self.ledger_types],
            "sign": self.sign.value,
            "lines": [line.as_dict() for line in self.lines],
            "total_debit": self.total_debit,
            "total_credit": self.total_credit,
            "final_balance": self.final_balance,
        }


def counterparty_key(entry: LedgerEntry) -> str:
    """Vehicle ledgers group by vehicle number, everything else by reference name."""

    if entry.ledger_type.is_vehicle_ledger:
        return entry.vehicle_no or ""
    return entry.reference_name


def _as_types(ledger_types: Union[LedgerType, Iterable[LedgerType]]) -> List[LedgerType]:
    if isinstance(ledger_types, LedgerType):
        return [ledger_types]
    resolved = [LedgerType(value) for value in ledger_types]
    if not resolved:
        raise ValueError("At least one ledger type is required")
    return resolved


def _in_range(entry_date: date, date_from: Optional[date], date_to: Optional[date]) -> bool:
    if date_from is not None and entry_date < date_from:
        return False
    if date_to is not None and entry_date > date_to:
        return False
    return True


def compute_balance(
    entries: Iterable[LedgerEntry],
    counterparty: str,
    ledger_types: Union[LedgerType, Iterable[LedgerType]],
    *,
    sign: SignConvention,
    date_from: Union[date, str, None] = None,
    date_to: Union[date, str, None] = None,
) -> BalanceReport:
    """Fold the matching entries, oldest first, into a running balance from zero."""

    types = _as_types(ledger_types)
    start = parse_date(date_from) if date_from is not None else None
    end = parse_date(date_to) if date_to is not None else None
    if start is not None and end is not None and start > end:
        raise ValueError(f"date_from {start} is after date_to {end}")

    selected = sorted(
        (
            entry
            for entry in entries
            if entry.ledger_type in types
            and counterparty_key(entry) == counterparty
            and _in_range(entry.date, start, end)
        ),
        key=lambda entry: (entry.date, entry.id),
    )

    report = BalanceReport(counterparty=counterparty, ledger_types=types, sign=sign)
    running = 0.0
    for entry in selected:
        running += sign.apply(entry.debit, entry.credit)
        report.total_debit += entry.debit
        report.total_credit += entry.credit
        report.lines.append(BalanceLine(entry=entry, running_balance=running))
    return report


def ledger_accounts(entries: Iterable[LedgerEntry], ledger_type: LedgerType) -> List[str]:
    """Sorted distinct counterparties that have entries in ``ledger_type``."""

    return sorted({counterparty_key(entry) for entry in entries if entry.ledger_type is ledger_type})
