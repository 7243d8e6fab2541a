"""
Validation and payload building for GRN → packet assortment

Two separate passes over an AssortmentState:
- build_payload: pure row filter producing the backend allocation rows
- validate_submission: gate that refuses the whole submission with a message

The client does not cap the per-line total across targets against remaining_qty;
find_over_allocated_lines only reports it, the backend ledger enforces it.
"""
import logging
from typing import Any, Dict, List

from .constants import (
    MSG_CLASSIFICATION_REQUIRED, MSG_CODE_REQUIRED,
    MSG_NO_VALID_ALLOCATIONS, MSG_SELECTION_REQUIRED
)
from .models import AssortmentState, PacketTarget, to_carats

logger = logging.getLogger(__name__)


class AssortmentValidator:
    """Validator for assortment submissions"""

    # ==================== Payload ====================

    def build_payload(self, state: AssortmentState) -> List[Dict[str, Any]]:
        """
        Derive allocation rows from the session's targets

        Cells that are not finite positive numbers are dropped, as are all
        cells of new packets that have no generated code yet.
        """
        rows = []
        for target in state.targets:
            for grn_item_id, raw in target.allocations.items():
                carats = to_carats(raw)
                if carats is None or carats <= 0:
                    continue

                if target.is_new and not target.packet_code:
                    continue

                rows.append(self._build_row(target, grn_item_id, carats))
        return rows

    @staticmethod
    def _build_row(target: PacketTarget, grn_item_id: str, carats: float) -> Dict[str, Any]:
        row = {'grn_item_id': grn_item_id, 'carats': carats}
        if target.is_existing:
            row['packet_id'] = target.packet_id
        else:
            row.update({
                'create_new_packet': True,
                'packet_code': target.packet_code,
                'attributes': {
                    'shape': target.shape,
                    'color': target.color,
                    'clarity': target.clarity,
                }
            })
        return row

    # ==================== Submission Gate ====================

    def validate_targets(self, state: AssortmentState) -> List[str]:
        """
        Check every new target that carries carats

        Returns:
            List of error messages, one per incomplete target requirement
        """
        errors = []
        for idx, target in enumerate(state.targets):
            if target.total_allocated <= 0 or not target.is_new:
                continue

            if not target.packet_code:
                errors.append(MSG_CODE_REQUIRED)
            missing = target.missing_classification()
            if missing:
                errors.append(MSG_CLASSIFICATION_REQUIRED)
                logger.debug(f"Target {idx + 1} missing: {', '.join(missing)}")
        return errors

    def validate_submission(self, state: AssortmentState) -> List[str]:
        """
        Validate the session before anything is sent

        Returns:
            List of error messages (empty if valid); the first one is shown
        """
        if not state.warehouse_id or not state.grn_id:
            return [MSG_SELECTION_REQUIRED]

        errors = self.validate_targets(state)
        if errors:
            return errors

        if not self.build_payload(state):
            return [MSG_NO_VALID_ALLOCATIONS]

        return []

    # ==================== Informational Checks ====================

    def summarize_by_line(self, state: AssortmentState) -> Dict[str, float]:
        """Total payload carats per GRN line item"""
        totals: Dict[str, float] = {}
        for row in self.build_payload(state):
            totals[row['grn_item_id']] = totals.get(row['grn_item_id'], 0.0) + row['carats']
        return totals

    def find_over_allocated_lines(self, state: AssortmentState) -> List[Dict[str, Any]]:
        """Line items whose payload total exceeds the ledger's remaining quantity"""
        over = []
        for grn_item_id, total in self.summarize_by_line(state).items():
            item = state.get_line_item(grn_item_id)
            if item is None or total <= item.remaining_qty:
                continue
            over.append({
                'grn_item_id': grn_item_id,
                'allocated': total,
                'remaining_qty': item.remaining_qty,
                'excess': total - item.remaining_qty,
            })
        if over:
            logger.info(f"{len(over)} GRN line(s) allocated above remaining quantity")
        return over
