"""Mini README: The store that owns the books and applies events atomically.

Modules:
    * journal - derived ledger entries with retraction by source.
    * state - every collection the store owns.
    * event_log - the append-only log replayed by ``recompute_all``.
    * store - ``LedgerStore`` itself.
    * serialization - workbook JSON import/export.
"""

from .event_log import EventKind, EventLog, LedgerEvent
from .journal import LedgerJournal
from .state import LedgerState
from .store import LedgerStore

__all__ = ["EventKind", "EventLog", "LedgerEvent", "LedgerJournal", "LedgerState", "LedgerStore"]
