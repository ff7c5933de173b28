"""Mini README: Explicit read context handed to every derivation rule.

Structure:
    * DerivationContext - snapshot of the lookups rules need (loading slips,
      vehicle classification, account names) plus helpers that raise
      ``ReferenceNotFound`` instead of returning ``None``.

Rules never reach into the store; the store builds a context from its working
state and passes it in. Replaying the event log is therefore just folding
events through the rules with a context built from a fresh state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ..classification import VehicleClassifier
from ..errors import ReferenceNotFound
from ..records.documents import LoadingSlip, OwnershipType


@dataclass(slots=True, frozen=True)
class DerivationContext:
    loading_slips: Mapping[str, LoadingSlip]
    classifier: VehicleClassifier
    tds_account_name: str = "TDS A/C"
    default_fuel_wallet: str = "BPCL"

    def require_loading_slip(self, loading_slip_id: str) -> LoadingSlip:
        slip = self.loading_slips.get(loading_slip_id)
        if slip is None:
            raise ReferenceNotFound("Loading slip", loading_slip_id)
        return slip

    def ownership_of(self, vehicle_no: str) -> OwnershipType:
        return self.classifier.classify(vehicle_no)
