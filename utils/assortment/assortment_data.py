"""
Data access for the assortment page
Read-only views over the backend: warehouses, GRNs, remaining quantities, existing packets
"""
import logging
from typing import Any, List, Optional

from ..api_client import ApiClient, ApiError, get_api_client
from .models import ExistingPacket, Grn, GrnLineItem, Warehouse

logger = logging.getLogger(__name__)


def _rows(res: Any, *keys: str) -> List[dict]:
    """Extract a list of rows from a bare list or an envelope keyed by one of ``keys``"""
    if isinstance(res, list):
        return res
    if isinstance(res, dict):
        for key in keys:
            if isinstance(res.get(key), list):
                return res[key]
    return []


class AssortmentData:
    """Loaders for the assortment page"""

    def __init__(self, client: ApiClient = None):
        self.client = client or get_api_client()

    def list_warehouses(self) -> List[Warehouse]:
        res = self.client.list_warehouses()
        return [Warehouse.from_api(r) for r in _rows(res, 'rows', 'data', 'results')]

    def list_grns(self, warehouse_id: int) -> List[Grn]:
        if not warehouse_id:
            return []
        res = self.client.list_grns(warehouse_id)
        return [Grn.from_api(r) for r in _rows(res, 'results', 'rows', 'data')]

    def get_grn_items_with_remaining_qty(self, grn_id: str) -> List[GrnLineItem]:
        """
        Current un-assorted balance per GRN line, in backend order

        Never cached: the ledger changes after every successful assortment.
        """
        res = self.client.get_grn_items_with_remaining_qty(grn_id)
        items = [GrnLineItem.from_api(r) for r in _rows(res, 'items')]
        logger.debug(f"Loaded {len(items)} line items for GRN {grn_id}")
        return items

    def load_grn(self, session, grn: Optional[Grn]) -> List[GrnLineItem]:
        """
        Select ``grn`` on the session and install its line items

        A failed load rolls the selection back so the same GRN can be picked again.
        """
        generation = session.select_grn(grn)
        if grn is None:
            return []
        try:
            items = self.get_grn_items_with_remaining_qty(grn.id)
        except (ApiError, ValueError):
            session.select_grn(None)
            raise
        session.apply_line_items(generation, items)
        return items

    def list_packets(self, warehouse_id: int, purchase_order_id: str) -> List[ExistingPacket]:
        """Packets already linked to the purchase order in this warehouse"""
        if not warehouse_id or not purchase_order_id:
            return []
        res = self.client.list_packets(warehouse_id, purchase_order_id=purchase_order_id)
        return [ExistingPacket.from_api(r) for r in res.get('results', [])]
