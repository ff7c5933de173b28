"""Mini README: Vehicle ownership classification.

Structure:
    * VehicleClassifier - maps a vehicle number to ``own`` or ``market``.

Every routing decision downstream (vehicle income versus supplier payable,
vehicle expense versus general ledger, fuel posting shape) depends on this
lookup. Unknown vehicles classify as market: a market trip posts a supplier
payable, which must never be silently dropped.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..logging_utils import get_logger
from ..records.documents import OwnershipType, Vehicle

LOGGER = get_logger(__name__)


class VehicleClassifier:
    """Read-only ownership lookup over a snapshot of vehicle master data."""

    def __init__(self, vehicles: Union[Mapping[str, Vehicle], Iterable[Vehicle], None] = None) -> None:
        if vehicles is None:
            vehicles = ()
        if isinstance(vehicles, Mapping):
            vehicles = vehicles.values()
        self._ownership: Dict[str, OwnershipType] = {
            vehicle.vehicle_no: vehicle.ownership_type for vehicle in vehicles
        }

    def classify(self, vehicle_no: Optional[str]) -> OwnershipType:
        """Return the ownership class, defaulting to market for unknown vehicles."""

        if not vehicle_no:
            return OwnershipType.MARKET
        ownership = self._ownership.get(vehicle_no)
        if ownership is None:
            LOGGER.debug("Vehicle %s not in master data; treating as market", vehicle_no)
            return OwnershipType.MARKET
        return ownership

    def is_own(self, vehicle_no: Optional[str]) -> bool:
        return self.classify(vehicle_no) is OwnershipType.OWN

    def own_vehicles(self) -> List[str]:
        """Registration numbers of the company fleet, sorted for display."""

        return sorted(no for no, ownership in self._ownership.items() if ownership is OwnershipType.OWN)
