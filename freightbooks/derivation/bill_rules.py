"""Mini README: Ledger fan-out for client bills.

A bill debits the party with its net amount. TDS withheld by the client is
not lost value: it is debited to the statutory TDS account so it can be
claimed back, as a second entry tied to the same bill.
"""

from __future__ import annotations

from typing import List

from ..records.documents import Bill
from ..records.ledger import DerivedEntryId, EntryRole, LedgerEntry, LedgerType, SourceType
from .context import DerivationContext


def derive_bill_entries(bill: Bill, context: DerivationContext) -> List[LedgerEntry]:
    """Return the party entry and, when TDS was withheld, the TDS entry."""

    slip = context.require_loading_slip(bill.loading_slip_id)
    trip = {
        "vehicle_no": slip.vehicle_no,
        "loading_slip_id": bill.loading_slip_id,
        "bill_number": bill.bill_number,
        "from_location": slip.from_location,
        "to_location": slip.to_location,
    }
    entries = [
        LedgerEntry(
            entry_id=DerivedEntryId(bill.id, EntryRole.PARTY),
            ledger_type=LedgerType.PARTY,
            reference_id=bill.bill_number,
            reference_name=bill.party,
            date=bill.date,
            description=f"Bill {bill.bill_number} - {bill.party}",
            debit=bill.net_amount,
            credit=0.0,
            source_type=SourceType.BILL,
            **trip,
        )
    ]
    if bill.tds > 0:
        entries.append(
            LedgerEntry(
                entry_id=DerivedEntryId(bill.id, EntryRole.TDS),
                ledger_type=LedgerType.GENERAL,
                reference_id=bill.bill_number,
                reference_name=context.tds_account_name,
                date=bill.date,
                description=f"TDS deducted from Bill {bill.bill_number} - {bill.party}",
                debit=bill.tds,
                credit=0.0,
                source_type=SourceType.BILL,
                **trip,
            )
        )
    return entries
