"""
Formatting utilities for the assortment page
"""
import pandas as pd
from typing import Iterable, Optional, Union
import logging

from .models import AssortmentState, ExistingPacket, Grn, GrnLineItem, PacketTarget, to_carats

logger = logging.getLogger(__name__)


def format_carats(value: Union[int, float, None], decimals: int = 2) -> str:
    """
    Format a carat quantity

    Args:
        value: Carats
        decimals: Number of decimal places

    Returns:
        Formatted string like "6.50 ct", or "-" when missing
    """
    try:
        if value is None or pd.isna(value):
            return "-"
        return f"{float(value):,.{decimals}f} ct"
    except (ValueError, TypeError):
        return "-"


def short_id(value: Optional[str], length: int = 8) -> str:
    if not value:
        return "-"
    value = str(value)
    return value if len(value) <= length else f"{value[:length]}…"


def format_grn_option(grn: Optional[Grn]) -> str:
    if grn is None:
        return "Select GRN"
    return grn.grn_number


def format_packet_option(packet: ExistingPacket) -> str:
    return f"{packet.packet_code} ({format_carats(packet.available_carats)})"


def format_target_label(target: PacketTarget, index: int = None) -> str:
    """Header label for a target card"""
    prefix = f"#{index} " if index is not None else ""
    if target.is_existing:
        return f"{prefix}📦 {target.packet_code}"
    if target.packet_code:
        return f"{prefix}🆕 {target.packet_code}"
    classification = " / ".join(v for v in (target.shape, target.color, target.clarity) if v)
    return f"{prefix}🆕 New Packet" + (f" ({classification})" if classification else "")


def line_items_to_frame(items: Iterable[GrnLineItem]) -> pd.DataFrame:
    """Ledger table for display"""
    rows = [{
        'GRN Item': short_id(item.grn_item_id),
        'Received (ct)': item.received_qty,
        'Allocated (ct)': item.allocated_qty,
        'Remaining (ct)': item.remaining_qty,
    } for item in items]
    return pd.DataFrame(rows, columns=['GRN Item', 'Received (ct)', 'Allocated (ct)', 'Remaining (ct)'])


def build_allocation_matrix_frame(state: AssortmentState) -> pd.DataFrame:
    """
    Targets × line items grid of entered carats

    Non-numeric cells show as NaN. Includes a Total column per target and a
    Remaining row from the ledger for comparison.
    """
    columns = [item.grn_item_id for item in state.line_items]
    if not state.targets or not columns:
        return pd.DataFrame()

    data = {}
    for idx, target in enumerate(state.targets, start=1):
        data[format_target_label(target, idx)] = [
            to_carats(target.allocations.get(col)) for col in columns
        ]

    frame = pd.DataFrame.from_dict(data, orient='index', columns=columns, dtype=float)
    frame['Total'] = frame.clip(lower=0).sum(axis=1, skipna=True)
    frame.loc['Remaining'] = [item.remaining_qty for item in state.line_items] + [
        sum(item.remaining_qty for item in state.line_items)
    ]
    frame.columns = [short_id(c) if c != 'Total' else c for c in frame.columns]
    return frame
