"""Mini README: Ledger derivation rules.

Pure functions that map one domain record to the ledger entries it posts.
``context`` carries the lookups the rules need; ``memo_rules``,
``bill_rules``, ``banking_rules`` and ``fuel_rules`` hold one fan-out each.
"""

from .banking_rules import (
    BankingEffect,
    derive_banking_entries,
    fuel_wallet_for,
    resolve_banking_effect,
)
from .bill_rules import derive_bill_entries
from .context import DerivationContext
from .fuel_rules import derive_fuel_entries
from .memo_rules import derive_memo_entries

__all__ = [
    "BankingEffect",
    "DerivationContext",
    "derive_banking_entries",
    "derive_bill_entries",
    "derive_fuel_entries",
    "derive_memo_entries",
    "fuel_wallet_for",
    "resolve_banking_effect",
]
