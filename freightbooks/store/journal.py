"""Mini README: The materialised collection of derived ledger entries.

Structure:
    * LedgerJournal - entries keyed by source family and derived id, with an
      index by ``SourceKey``.

Memos, bills, banking entries and fuel draws are separate id spaces, so every
lookup is scoped by the source family as well as the id. Posting refuses ids
that are already present, so a derivation that was not retracted first fails
loudly instead of double counting. Retraction removes every entry derived from
a source; finding nothing is a recoverable no-op (warning) unless the journal
is strict.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from ..errors import DuplicateRecord, RetractionMismatch
from ..logging_utils import get_logger
from ..records.ledger import DerivedEntryId, LedgerEntry, LedgerType, SourceKey, SourceType

LOGGER = get_logger(__name__)

EntryKey = Tuple[SourceType, DerivedEntryId]


def _entry_key(entry: LedgerEntry) -> EntryKey:
    return (entry.source_type.family, entry.entry_id)


class LedgerJournal:
    """Hold derived ledger entries and support set-based retraction."""

    def __init__(self, entries: Optional[Iterable[LedgerEntry]] = None, *, strict: bool = False) -> None:
        self._entries: Dict[EntryKey, LedgerEntry] = {}
        self._by_source: Dict[SourceKey, Set[EntryKey]] = {}
        self.strict = strict
        if entries:
            self.post(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def copy(self) -> "LedgerJournal":
        clone = LedgerJournal(strict=self.strict)
        clone._entries = dict(self._entries)
        clone._by_source = {source: set(keys) for source, keys in self._by_source.items()}
        return clone

    def post(self, entries: Iterable[LedgerEntry]) -> List[LedgerEntry]:
        """Add entries; every id must be new within its source family."""

        batch = list(entries)
        keys = [_entry_key(entry) for entry in batch]
        if len(set(keys)) != len(keys):
            raise DuplicateRecord(f"Ledger batch repeats an entry id: {[entry.id for entry in batch]}")
        for key in keys:
            if key in self._entries:
                raise DuplicateRecord(f"Ledger entry {key[1]} from a {key[0].value} is already posted")
        for key, entry in zip(keys, batch):
            self._entries[key] = entry
            self._by_source.setdefault(entry.source_key, set()).add(key)
        return batch

    def retract(
        self,
        source_type: SourceType,
        source_id: str,
        *,
        also: Optional[Callable[[LedgerEntry], bool]] = None,
        expected: bool = True,
    ) -> List[LedgerEntry]:
        """Remove all entries derived from the ``source_type`` record ``source_id``.

        ``also`` widens the sweep to entries matching a predicate (for example
        memo-sourced entries carrying a memo number), which clears leftovers of
        a source whose id changed. ``expected`` is false for sources whose
        effect never posts entries.
        """

        family = source_type.family
        doomed = set(self._by_source.get((family, source_id), ()))
        if also is not None:
            doomed.update(key for key, entry in self._entries.items() if also(entry))

        if not doomed:
            if expected:
                message = f"No ledger entries left to retract for {family.value} {source_id}"
                if self.strict:
                    raise RetractionMismatch(message)
                LOGGER.warning(message)
            return []

        removed: List[LedgerEntry] = []
        for key in sorted(doomed):
            entry = self._entries.pop(key)
            siblings = self._by_source.get(entry.source_key)
            if siblings is not None:
                siblings.discard(key)
                if not siblings:
                    del self._by_source[entry.source_key]
            removed.append(entry)
        LOGGER.debug("Retracted %s ledger entries for %s %s", len(removed), family.value, source_id)
        return removed

    def for_source(self, source_type: SourceType, source_id: str) -> List[LedgerEntry]:
        keys = self._by_source.get((source_type.family, source_id), ())
        return [self._entries[key] for key in sorted(keys)]

    def entries(
        self,
        *,
        ledger_type: Optional[LedgerType] = None,
        reference_name: Optional[str] = None,
        vehicle_no: Optional[str] = None,
    ) -> List[LedgerEntry]:
        """Entries ordered by date then id, optionally filtered."""

        selected = [
            entry
            for entry in self._entries.values()
            if (ledger_type is None or entry.ledger_type is ledger_type)
            and (reference_name is None or entry.reference_name == reference_name)
            and (vehicle_no is None or entry.vehicle_no == vehicle_no)
        ]
        return sorted(selected, key=lambda entry: (entry.date, entry.id, entry.source_type.value))
