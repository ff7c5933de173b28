"""Mini README: Read-time balance views over the ledger and documents.

Nothing here is stored; every view is recomputed from the records handed in.
"""

from .aggregator import (
    BalanceLine,
    BalanceReport,
    SignConvention,
    compute_balance,
    counterparty_key,
    ledger_accounts,
)
from .outstanding import (
    MemoBalance,
    PartyOutstanding,
    SupplierOutstanding,
    all_party_balances,
    all_supplier_balances,
    memo_balance,
    party_outstanding,
    supplier_outstanding,
)
from .statements import StatementLine, VehicleSummary, party_statement, supplier_statement, vehicle_summary

__all__ = [
    "BalanceLine",
    "BalanceReport",
    "MemoBalance",
    "PartyOutstanding",
    "SignConvention",
    "StatementLine",
    "SupplierOutstanding",
    "VehicleSummary",
    "all_party_balances",
    "all_supplier_balances",
    "compute_balance",
    "counterparty_key",
    "ledger_accounts",
    "memo_balance",
    "party_outstanding",
    "party_statement",
    "supplier_outstanding",
    "supplier_statement",
    "vehicle_summary",
]
