"""Mini README: Ledger fan-out for broker memos.

Structure:
    * derive_memo_entries - entries posted for a memo given the trip's vehicle.

Own-fleet trips credit the vehicle's income ledger: the freight net of
commission and mamool as the main line, with detention and extra kept as
separate lines so vehicle reports can break them out. Market trips credit the
supplier with one payable for the whole amount. RTO never enters either
posting.
"""

from __future__ import annotations

from typing import List

from ..logging_utils import get_logger
from ..records.documents import LoadingSlip, Memo, OwnershipType
from ..records.ledger import DerivedEntryId, EntryRole, LedgerEntry, LedgerType, SourceType
from .context import DerivationContext

LOGGER = get_logger(__name__)


def _memo_line(
    memo: Memo,
    slip: LoadingSlip,
    *,
    role: EntryRole,
    ledger_type: LedgerType,
    reference_name: str,
    description: str,
    credit: float,
) -> LedgerEntry:
    return LedgerEntry(
        entry_id=DerivedEntryId(memo.id, role),
        ledger_type=ledger_type,
        reference_id=memo.memo_number,
        reference_name=reference_name,
        date=memo.date,
        description=description,
        debit=0.0,
        credit=credit,
        source_type=SourceType.MEMO,
        vehicle_no=slip.vehicle_no,
        loading_slip_id=memo.loading_slip_id,
        memo_number=memo.memo_number,
        from_location=slip.from_location,
        to_location=slip.to_location,
    )


def derive_memo_entries(memo: Memo, context: DerivationContext) -> List[LedgerEntry]:
    """Return the one to three entries a memo posts."""

    slip = context.require_loading_slip(memo.loading_slip_id)
    ownership = context.ownership_of(slip.vehicle_no)
    LOGGER.debug(
        "Deriving memo %s for vehicle %s classified as %s",
        memo.memo_number,
        slip.vehicle_no,
        ownership.value,
    )

    if ownership is OwnershipType.MARKET:
        return [
            _memo_line(
                memo,
                slip,
                role=EntryRole.SUPPLIER,
                ledger_type=LedgerType.SUPPLIER,
                reference_name=memo.supplier,
                description="Market vehicle memo - supplier amount",
                credit=memo.freight - memo.commission - memo.mamool + memo.detention + memo.extra,
            )
        ]

    entries = [
        _memo_line(
            memo,
            slip,
            role=EntryRole.VEHICLE_INCOME,
            ledger_type=LedgerType.VEHICLE_INCOME,
            reference_name=f"Vehicle {slip.vehicle_no} - Net Freight",
            description=f"Net freight from memo {memo.memo_number} (after commission & mamool)",
            credit=memo.freight - memo.commission - memo.mamool,
        )
    ]
    if memo.detention:
        entries.append(
            _memo_line(
                memo,
                slip,
                role=EntryRole.DETENTION,
                ledger_type=LedgerType.VEHICLE_INCOME,
                reference_name=f"Vehicle {slip.vehicle_no} - Detention",
                description=f"Detention charges from memo {memo.memo_number}",
                credit=memo.detention,
            )
        )
    if memo.extra:
        entries.append(
            _memo_line(
                memo,
                slip,
                role=EntryRole.EXTRA,
                ledger_type=LedgerType.VEHICLE_INCOME,
                reference_name=f"Vehicle {slip.vehicle_no} - Extra Charges",
                description=f"Extra charges from memo {memo.memo_number}",
                credit=memo.extra,
            )
        )
    return entries
