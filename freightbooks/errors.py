"""Mini README: Exception taxonomy raised by the ledger core.

Structure:
    * LedgerError - base class for every error the core raises on purpose.
    * ReferenceNotFound - an event names a memo, bill, slip or wallet that is missing.
    * InvalidCategoryCombination - a banking entry is missing a vehicle or reference.
    * RetractionMismatch - an update/delete found nothing to retract.
    * DuplicateRecord / InvalidRecord - malformed or repeated input records.

Every error is raised synchronously before the store swaps in new state, so a
caller always sees either full success or a clean rejection.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger core failures."""


class ReferenceNotFound(LedgerError, KeyError):
    """A record referenced by an event does not exist in the current state."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} {key!r} not found")

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidCategoryCombination(LedgerError, ValueError):
    """A banking entry's category needs a field the entry does not carry."""


class RetractionMismatch(LedgerError):
    """Derived entries expected for a source are already gone.

    Only raised when ``strict_retraction`` is configured; otherwise the
    journal logs a warning and treats the retraction as a no-op.
    """


class DuplicateRecord(LedgerError, ValueError):
    """A record with the same identity is already held by the store."""


class InvalidRecord(LedgerError, ValueError):
    """A record carries values that cannot be interpreted."""
