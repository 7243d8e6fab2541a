"""
Assortment Session Controller
Owns the immutable AssortmentState for one console session.

Each operation replaces ``self.state`` with a new snapshot; nothing is mutated
in place, so validators and payload builders can be handed any snapshot.

Selection rules:
- Changing warehouse clears GRN, purchase order, line items and targets
- Changing GRN clears line items and targets and starts a new generation
- Loader results are accepted only for the generation/selection they were requested for
"""
import logging
from dataclasses import replace
from typing import Any, Iterable, Optional

from .constants import DEFAULT_STAGE, EDITABLE_ATTRIBUTES
from .models import (
    AssortmentState, ExistingPacket, Grn, GrnLineItem,
    PacketTarget, RequestState, RequestStatus, IDLE
)

logger = logging.getLogger(__name__)


class AssortmentSession:
    """Controller for packet targets, the allocation matrix and request state"""

    def __init__(self, state: AssortmentState = None, default_stage: str = DEFAULT_STAGE):
        self.state = state or AssortmentState()
        self.default_stage = default_stage

    # ==================== SELECTION ====================

    def select_warehouse(self, warehouse_id: Optional[int]) -> AssortmentState:
        if warehouse_id == self.state.warehouse_id:
            return self.state
        self.state = AssortmentState(
            warehouse_id=warehouse_id,
            grn_generation=self.state.grn_generation + 1
        )
        logger.debug(f"Warehouse selected: {warehouse_id}")
        return self.state

    def select_grn(self, grn: Optional[Grn]) -> int:
        """
        Select a GRN (or clear with None)

        Returns:
            Generation token to pass back with the loaded line items
        """
        grn_id = grn.id if grn else None
        if grn_id == self.state.grn_id:
            return self.state.grn_generation

        self.state = replace(
            self.state,
            grn_id=grn_id,
            purchase_order_id=grn.purchase_order_id if grn else None,
            grn_generation=self.state.grn_generation + 1,
            line_items=(),
            targets=(),
            packets_key=None,
            existing_packets=(),
            request=IDLE
        )
        logger.debug(f"GRN selected: {grn_id} (generation {self.state.grn_generation})")
        return self.state.grn_generation

    def apply_line_items(self, generation: int, items: Iterable[GrnLineItem]) -> bool:
        """Install loaded line items; stale generations are discarded"""
        if generation != self.state.grn_generation:
            logger.info(
                f"Discarding stale GRN items (generation {generation}, "
                f"current {self.state.grn_generation})"
            )
            return False
        self.state = replace(self.state, line_items=tuple(items), targets=())
        return True

    @property
    def packets_selection(self):
        """Selection key the existing-packet list must be loaded for"""
        if not self.state.warehouse_id or not self.state.purchase_order_id:
            return None
        return (self.state.warehouse_id, self.state.purchase_order_id)

    def apply_existing_packets(self, key, packets: Iterable[ExistingPacket]) -> bool:
        if key is None or key != self.packets_selection:
            logger.info(f"Discarding stale packet list for {key}")
            return False
        self.state = replace(self.state, packets_key=key, existing_packets=tuple(packets))
        return True

    @property
    def needs_packets(self) -> bool:
        key = self.packets_selection
        return key is not None and key != self.state.packets_key

    # ==================== PACKET TARGET REGISTRY ====================

    def add_new_target(self) -> PacketTarget:
        target = PacketTarget.new(stage=self.default_stage)
        self.state = replace(self.state, targets=self.state.targets + (target,))
        return target

    def add_existing_target(self, packet: ExistingPacket) -> Optional[PacketTarget]:
        """Bind a packet of the same purchase order; no-op without a resolved PO"""
        if not self.state.purchase_order_id:
            logger.debug("No purchase order resolved, existing packet ignored")
            return None
        target = PacketTarget.existing(packet)
        self.state = replace(self.state, targets=self.state.targets + (target,))
        return target

    def set_attribute(self, target_id: str, key: str, value: Optional[str]) -> bool:
        if key not in EDITABLE_ATTRIBUTES:
            raise ValueError(f"Unknown packet attribute: {key}")

        target = self.state.get_target(target_id)
        if target is None or not target.is_new:
            return False

        self._replace_target(replace(target, **{key: value or None}))
        return True

    def apply_packet_code(self, target_id: str, packet_code: str) -> bool:
        target = self.state.get_target(target_id)
        if target is None or not target.is_new:
            return False
        self._replace_target(replace(target, packet_code=packet_code))
        return True

    # ==================== ALLOCATION MATRIX ====================

    def set_allocation(self, target_id: str, grn_item_id: str, carats: Any) -> bool:
        """Overwrite one cell; values are validated only at submission"""
        target = self.state.get_target(target_id)
        if target is None:
            return False
        self._replace_target(target.with_allocation(grn_item_id, carats))
        return True

    def _replace_target(self, updated: PacketTarget):
        self.state = replace(
            self.state,
            targets=tuple(updated if t.id == updated.id else t for t in self.state.targets)
        )

    # ==================== REQUEST STATE ====================

    def mark_in_flight(self):
        self.state = replace(self.state, request=RequestState(RequestStatus.IN_FLIGHT))

    def mark_failed(self, reason: str):
        self.state = replace(self.state, request=RequestState(RequestStatus.FAILED, reason))

    def complete_submission(self):
        """Full reset after the backend accepted the assortment"""
        self.state = replace(
            self.state,
            grn_id=None,
            purchase_order_id=None,
            grn_generation=self.state.grn_generation + 1,
            line_items=(),
            targets=(),
            packets_key=None,
            existing_packets=(),
            request=RequestState(RequestStatus.SUCCEEDED)
        )
