"""Mini README: Core package initializer for freightbooks.

freightbooks keeps the books of a road transport business: loading slips,
supplier memos, client bills, bank and cash transactions, fuel wallets and
the general ledger derived from them. The package root only re-exports the
store and the logging helper so callers can start with::

    from freightbooks import LedgerStore

and reach the rest through the subpackages.
"""

from .logging_utils import get_logger
from .store import LedgerStore

__all__ = ["LedgerStore", "get_logger"]
