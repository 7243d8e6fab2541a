"""
Data model for GRN → packet assortment
Immutable records: every session mutation produces new instances via dataclasses.replace
"""
import math
import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .constants import CLASSIFICATION_KEYS, DEFAULT_STAGE, MODE_EXISTING, MODE_NEW


def to_carats(value: Any) -> Optional[float]:
    """
    Convert a raw cell value to a finite float

    Returns None for unset, non-numeric, NaN and infinite values
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        if hasattr(value, 'item'):  # numpy scalar
            value = value.item()
        qty = float(Decimal(str(value)))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not math.isfinite(qty):
        return None
    return qty


def new_target_id() -> str:
    return uuid.uuid4().hex


# ==================== REFERENCE RECORDS ====================

@dataclass(frozen=True)
class Warehouse:
    id: int
    name: str

    @classmethod
    def from_api(cls, row: Dict) -> 'Warehouse':
        return cls(id=row['id'], name=row.get('name') or str(row['id']))


@dataclass(frozen=True)
class Grn:
    id: str
    grn_number: str
    purchase_order_id: Optional[str] = None

    @classmethod
    def from_api(cls, row: Dict) -> 'Grn':
        return cls(
            id=str(row['id']),
            grn_number=row.get('grn_number') or str(row['id']),
            purchase_order_id=row.get('purchase_order_id') or None
        )


@dataclass(frozen=True)
class GrnLineItem:
    """One GRN line with its un-assorted carat balance from the backend ledger"""
    grn_item_id: str
    remaining_qty: float
    grn_id: Optional[str] = None
    received_qty: Optional[float] = None
    allocated_qty: Optional[float] = None

    @classmethod
    def from_api(cls, row: Dict) -> 'GrnLineItem':
        return cls(
            grn_item_id=str(row['grn_item_id']),
            remaining_qty=max(to_carats(row.get('remaining_qty')) or 0.0, 0.0),
            grn_id=str(row['grn_id']) if row.get('grn_id') is not None else None,
            received_qty=to_carats(row.get('received_qty')),
            allocated_qty=to_carats(row.get('allocated_qty'))
        )


@dataclass(frozen=True)
class ExistingPacket:
    """Packet already linked to the purchase order, eligible as an assortment target"""
    id: str
    packet_code: str
    available_carats: float = 0.0
    status: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, row: Dict) -> 'ExistingPacket':
        return cls(
            id=str(row['id']),
            packet_code=row.get('packet_code') or str(row['id']),
            available_carats=to_carats(row.get('available_carats')) or 0.0,
            status=row.get('status'),
            attributes=dict(row.get('attributes') or {})
        )


# ==================== PACKET TARGET ====================

@dataclass(frozen=True)
class PacketTarget:
    """Destination packet being composed in the current session"""
    id: str
    mode: str
    packet_id: Optional[str] = None
    packet_code: Optional[str] = None
    shape: Optional[str] = None
    color: Optional[str] = None
    clarity: Optional[str] = None
    stage: Optional[str] = None
    # grn_item_id -> raw carats as entered
    allocations: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def new(cls, stage: str = DEFAULT_STAGE) -> 'PacketTarget':
        return cls(id=new_target_id(), mode=MODE_NEW, stage=stage)

    @classmethod
    def existing(cls, packet: ExistingPacket) -> 'PacketTarget':
        return cls(
            id=new_target_id(),
            mode=MODE_EXISTING,
            packet_id=packet.id,
            packet_code=packet.packet_code
        )

    @property
    def is_new(self) -> bool:
        return self.mode == MODE_NEW

    @property
    def is_existing(self) -> bool:
        return self.mode == MODE_EXISTING

    @property
    def total_allocated(self) -> float:
        """Sum of numeric cells, negatives included"""
        total = 0.0
        for value in self.allocations.values():
            qty = to_carats(value)
            if qty is not None:
                total += qty
        return total

    def missing_classification(self) -> Tuple[str, ...]:
        return tuple(key for key in CLASSIFICATION_KEYS if not getattr(self, key))

    def with_allocation(self, grn_item_id: str, carats: Any) -> 'PacketTarget':
        return replace(self, allocations={**self.allocations, grn_item_id: carats})


# ==================== REQUEST STATE ====================

class RequestStatus(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class RequestState:
    status: RequestStatus = RequestStatus.IDLE
    reason: Optional[str] = None

    @property
    def accepts_submission(self) -> bool:
        return self.status in (RequestStatus.IDLE, RequestStatus.FAILED)

    @property
    def in_flight(self) -> bool:
        return self.status is RequestStatus.IN_FLIGHT


IDLE = RequestState()


# ==================== SESSION STATE ====================

@dataclass(frozen=True)
class AssortmentState:
    """Snapshot of one assortment session"""
    warehouse_id: Optional[int] = None
    grn_id: Optional[str] = None
    purchase_order_id: Optional[str] = None
    # Bumped on every GRN selection; loader responses tagged with an older value are stale
    grn_generation: int = 0
    line_items: Tuple[GrnLineItem, ...] = ()
    # (warehouse_id, purchase_order_id) the existing packets were loaded for
    packets_key: Optional[Tuple[Any, Any]] = None
    existing_packets: Tuple[ExistingPacket, ...] = ()
    targets: Tuple[PacketTarget, ...] = ()
    request: RequestState = IDLE

    def get_target(self, target_id: str) -> Optional[PacketTarget]:
        for target in self.targets:
            if target.id == target_id:
                return target
        return None

    def get_line_item(self, grn_item_id: str) -> Optional[GrnLineItem]:
        for item in self.line_items:
            if item.grn_item_id == grn_item_id:
                return item
        return None
