"""Mini README: Trip documents and vehicle master data.

Structure:
    * OwnershipType - own fleet versus market (subcontracted) vehicles.
    * Vehicle - master data row consulted by the vehicle classifier.
    * LoadingSlip - one physical trip.
    * AdvancePayment - partial pre-payment attached to a memo or bill.
    * Memo - amount payable to the supplier that ran the trip.
    * Bill - amount receivable from the party that shipped the goods.

Records are frozen; the store changes them with ``dataclasses.replace`` so a
snapshot handed to a reader never changes underneath it. Every record can be
built from a loose dictionary (``from_dict``) and exported with ``as_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import InvalidRecord
from ..utils.coercion import coerce_amount, optional_amount, optional_str, parse_date


class OwnershipType(str, Enum):
    """Who owns the truck that performed a trip."""

    OWN = "own"
    MARKET = "market"

    @classmethod
    def from_str(cls, value: str) -> "OwnershipType":
        """Coerce arbitrary casing into a valid ownership type."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise InvalidRecord(f"Unsupported ownership type: {value}") from error


class MemoStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"

    @classmethod
    def from_str(cls, value: str) -> "MemoStatus":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise InvalidRecord(f"Unsupported memo status: {value}") from error


class BillStatus(str, Enum):
    PENDING = "pending"
    RECEIVED = "received"

    @classmethod
    def from_str(cls, value: str) -> "BillStatus":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise InvalidRecord(f"Unsupported bill status: {value}") from error


class PaymentMode(str, Enum):
    """How an advance was handed over."""

    CASH = "cash"
    BANK = "bank"
    OTHER = "other"

    @classmethod
    def from_str(cls, value: str) -> "PaymentMode":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise InvalidRecord(f"Unsupported payment mode: {value}") from error


def _require(payload: Mapping[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidRecord(f"Field '{key}' is required")
    return value


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(slots=True, frozen=True)
class Vehicle:
    """Vehicle master data keyed by registration number."""

    vehicle_no: str
    ownership_type: OwnershipType
    vehicle_type: Optional[str] = None
    owner_name: Optional[str] = None
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Vehicle":
        return cls(
            vehicle_no=str(_require(payload, "vehicle_no")).strip(),
            ownership_type=OwnershipType.from_str(str(payload.get("ownership_type", "market"))),
            vehicle_type=optional_str(payload.get("vehicle_type")),
            owner_name=optional_str(payload.get("owner_name")),
            driver_name=optional_str(payload.get("driver_name")),
            driver_phone=optional_str(payload.get("driver_phone")),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "vehicle_no": self.vehicle_no,
            "ownership_type": self.ownership_type.value,
            "vehicle_type": self.vehicle_type,
            "owner_name": self.owner_name,
            "driver_name": self.driver_name,
            "driver_phone": self.driver_phone,
        }


@dataclass(slots=True, frozen=True)
class LoadingSlip:
    """A single trip: who shipped what, on which truck, between which places."""

    id: str
    slip_number: str
    date: date
    party: str
    vehicle_no: str
    from_location: str = ""
    to_location: str = ""
    weight: float = 0.0
    freight: float = 0.0
    advance: float = 0.0
    rto: float = 0.0
    supplier: str = ""
    dimension: str = ""
    narration: str = ""

    @property
    def balance(self) -> float:
        """Freight still due from the party after the slip-level advance."""

        return self.freight - self.advance

    @property
    def total_freight(self) -> float:
        return self.freight + self.rto

    @property
    def route(self) -> str:
        return f"{self.from_location} - {self.to_location}"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LoadingSlip":
        return cls(
            id=str(_require(payload, "id")),
            slip_number=str(_require(payload, "slip_number")),
            date=parse_date(_require(payload, "date")),
            party=str(payload.get("party") or ""),
            vehicle_no=str(payload.get("vehicle_no") or "").strip(),
            from_location=str(payload.get("from_location") or ""),
            to_location=str(payload.get("to_location") or ""),
            weight=coerce_amount(payload.get("weight"), field_name="weight"),
            freight=coerce_amount(payload.get("freight"), field_name="freight"),
            advance=coerce_amount(payload.get("advance"), field_name="advance"),
            rto=coerce_amount(payload.get("rto"), field_name="rto"),
            supplier=str(payload.get("supplier") or ""),
            dimension=str(payload.get("dimension") or ""),
            narration=str(payload.get("narration") or ""),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "slip_number": self.slip_number,
            "date": self.date.isoformat(),
            "party": self.party,
            "vehicle_no": self.vehicle_no,
            "from_location": self.from_location,
            "to_location": self.to_location,
            "route": self.route,
            "weight": self.weight,
            "freight": self.freight,
            "advance": self.advance,
            "balance": self.balance,
            "rto": self.rto,
            "total_freight": self.total_freight,
            "supplier": self.supplier,
            "dimension": self.dimension,
            "narration": self.narration,
        }


@dataclass(slots=True, frozen=True)
class AdvancePayment:
    """Advance recorded against a memo or a bill by a banking entry."""

    id: str
    amount: float
    date: date
    memo_number: Optional[str] = None
    bill_number: Optional[str] = None
    mode: PaymentMode = PaymentMode.BANK
    reference: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AdvancePayment":
        return cls(
            id=str(_require(payload, "id")),
            amount=coerce_amount(payload.get("amount")),
            date=parse_date(_require(payload, "date")),
            memo_number=optional_str(payload.get("memo_number")),
            bill_number=optional_str(payload.get("bill_number")),
            mode=PaymentMode.from_str(str(payload.get("mode") or "bank")),
            reference=str(payload.get("reference") or ""),
            description=str(payload.get("description") or ""),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "memo_number": self.memo_number,
            "bill_number": self.bill_number,
            "mode": self.mode.value,
            "reference": self.reference,
            "description": self.description,
        }


def _advances(payload: Mapping[str, Any]) -> Tuple[AdvancePayment, ...]:
    return tuple(AdvancePayment.from_dict(item) for item in payload.get("advance_payments") or ())


@dataclass(slots=True, frozen=True)
class Memo:
    """Broker memo: what the business owes the transporter for a trip."""

    id: str
    memo_number: str
    loading_slip_id: str
    date: date
    supplier: str
    freight: float
    commission: float = 0.0
    mamool: float = 0.0
    detention: float = 0.0
    extra: float = 0.0
    rto: float = 0.0
    status: MemoStatus = MemoStatus.PENDING
    paid_date: Optional[date] = None
    paid_amount: Optional[float] = None
    advance_payments: Tuple[AdvancePayment, ...] = field(default_factory=tuple)
    narration: str = ""

    @property
    def net_amount(self) -> float:
        """Canonical payable amount before advances."""

        return (
            self.freight
            - self.commission
            - self.mamool
            + self.detention
            + self.extra
            + self.rto
        )

    @property
    def total_advances(self) -> float:
        return sum(advance.amount for advance in self.advance_payments)

    @property
    def outstanding_balance(self) -> float:
        """Supplier-view balance; RTO is reimbursed separately and left out."""

        return (
            self.freight
            - self.total_advances
            - self.commission
            - self.mamool
            + self.detention
            + self.extra
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Memo":
        paid_date = payload.get("paid_date")
        return cls(
            id=str(_require(payload, "id")),
            memo_number=str(_require(payload, "memo_number")),
            loading_slip_id=str(_require(payload, "loading_slip_id")),
            date=parse_date(_require(payload, "date")),
            supplier=str(payload.get("supplier") or ""),
            freight=coerce_amount(payload.get("freight"), field_name="freight"),
            commission=coerce_amount(payload.get("commission"), field_name="commission"),
            mamool=coerce_amount(payload.get("mamool"), field_name="mamool"),
            detention=coerce_amount(payload.get("detention"), field_name="detention"),
            extra=coerce_amount(payload.get("extra"), field_name="extra"),
            rto=coerce_amount(payload.get("rto"), field_name="rto"),
            status=MemoStatus.from_str(str(payload.get("status") or "pending")),
            paid_date=parse_date(paid_date) if paid_date else None,
            paid_amount=optional_amount(payload.get("paid_amount"), field_name="paid_amount"),
            advance_payments=_advances(payload),
            narration=str(payload.get("narration") or ""),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "memo_number": self.memo_number,
            "loading_slip_id": self.loading_slip_id,
            "date": self.date.isoformat(),
            "supplier": self.supplier,
            "freight": self.freight,
            "commission": self.commission,
            "mamool": self.mamool,
            "detention": self.detention,
            "extra": self.extra,
            "rto": self.rto,
            "net_amount": self.net_amount,
            "status": self.status.value,
            "paid_date": _iso(self.paid_date),
            "paid_amount": self.paid_amount,
            "advance_payments": [advance.as_dict() for advance in self.advance_payments],
            "narration": self.narration,
        }


@dataclass(slots=True, frozen=True)
class Bill:
    """Client bill: what the shipping party owes for a trip."""

    id: str
    bill_number: str
    loading_slip_id: str
    date: date
    party: str
    bill_amount: float
    detention: float = 0.0
    extra: float = 0.0
    rto: float = 0.0
    mamool: float = 0.0
    tds: float = 0.0
    penalties: float = 0.0
    status: BillStatus = BillStatus.PENDING
    received_date: Optional[date] = None
    received_amount: Optional[float] = None
    advance_payments: Tuple[AdvancePayment, ...] = field(default_factory=tuple)
    narration: str = ""

    @property
    def net_amount(self) -> float:
        return (
            self.bill_amount
            + self.detention
            + self.extra
            + self.rto
            - self.mamool
            - self.penalties
            - self.tds
        )

    @property
    def total_advances(self) -> float:
        return sum(advance.amount for advance in self.advance_payments)

    @property
    def outstanding_balance(self) -> float:
        return self.net_amount - self.total_advances

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Bill":
        received_date = payload.get("received_date")
        return cls(
            id=str(_require(payload, "id")),
            bill_number=str(_require(payload, "bill_number")),
            loading_slip_id=str(_require(payload, "loading_slip_id")),
            date=parse_date(_require(payload, "date")),
            party=str(payload.get("party") or ""),
            bill_amount=coerce_amount(payload.get("bill_amount"), field_name="bill_amount"),
            detention=coerce_amount(payload.get("detention"), field_name="detention"),
            extra=coerce_amount(payload.get("extra"), field_name="extra"),
            rto=coerce_amount(payload.get("rto"), field_name="rto"),
            mamool=coerce_amount(payload.get("mamool"), field_name="mamool"),
            tds=coerce_amount(payload.get("tds"), field_name="tds"),
            penalties=coerce_amount(payload.get("penalties"), field_name="penalties"),
            status=BillStatus.from_str(str(payload.get("status") or "pending")),
            received_date=parse_date(received_date) if received_date else None,
            received_amount=optional_amount(payload.get("received_amount"), field_name="received_amount"),
            advance_payments=_advances(payload),
            narration=str(payload.get("narration") or ""),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "bill_number": self.bill_number,
            "loading_slip_id": self.loading_slip_id,
            "date": self.date.isoformat(),
            "party": self.party,
            "bill_amount": self.bill_amount,
            "detention": self.detention,
            "extra": self.extra,
            "rto": self.rto,
            "mamool": self.mamool,
            "tds": self.tds,
            "penalties": self.penalties,
            "net_amount": self.net_amount,
            "status": self.status.value,
            "received_date": _iso(self.received_date),
            "received_amount": self.received_amount,
            "advance_payments": [advance.as_dict() for advance in self.advance_payments],
            "narration": self.narration,
        }
