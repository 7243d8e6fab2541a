import math

import pytest

from utils.assortment.formatters import (
    build_allocation_matrix_frame, format_carats, format_target_label,
    line_items_to_frame, short_id
)
from utils.assortment.models import GrnLineItem, PacketTarget, to_carats


@pytest.mark.parametrize('value, expected', [
    (6, 6.0), ('2.50', 2.5), (' 3 ', 3.0), (-1, -1.0),
    (None, None), ('', None), ('abc', None), (math.nan, None), (math.inf, None), (True, None),
])
def test_to_carats(value, expected):
    assert to_carats(value) == expected


def test_format_carats():
    assert format_carats(6) == "6.00 ct"
    assert format_carats(1234.5, decimals=1) == "1,234.5 ct"
    assert format_carats(None) == "-"
    assert format_carats(math.nan) == "-"


def test_short_id():
    assert short_id("abcdefghijk") == "abcdefgh…"
    assert short_id("abc") == "abc"
    assert short_id(None) == "-"


def test_target_labels(packet):
    assert format_target_label(PacketTarget.existing(packet), 1) == "#1 📦 RD-D-VS1-000"

    draft = PacketTarget.new()
    assert format_target_label(draft) == "🆕 New Packet"

    coded = PacketTarget(id='t', mode='new', shape='Oval', packet_code='OV-E-IF-002')
    assert format_target_label(coded, 2) == "#2 🆕 OV-E-IF-002"


def test_line_items_frame():
    frame = line_items_to_frame([GrnLineItem('item-1', 4.0, received_qty=6.0, allocated_qty=2.0)])
    assert list(frame.columns) == ['GRN Item', 'Received (ct)', 'Allocated (ct)', 'Remaining (ct)']
    assert frame.iloc[0]['Remaining (ct)'] == 4.0


def test_allocation_matrix_frame(session, packet):
    existing = session.add_existing_target(packet)
    session.set_allocation(existing.id, 'item-1', 3)
    draft = session.add_new_target()
    session.set_allocation(draft.id, 'item-1', 'abc')

    frame = build_allocation_matrix_frame(session.state)

    assert list(frame.index) == ['#1 📦 RD-D-VS1-000', '#2 🆕 New Packet', 'Remaining']
    assert frame.loc['#1 📦 RD-D-VS1-000', 'Total'] == 3.0
    assert math.isnan(frame.loc['#2 🆕 New Packet', 'item-1'])
    assert frame.loc['Remaining', 'Total'] == 10.0


def test_allocation_matrix_frame_empty_without_targets(session):
    assert build_allocation_matrix_frame(session.state).empty
