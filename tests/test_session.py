import pytest

from utils.assortment.models import Grn, GrnLineItem, RequestStatus
from utils.assortment.session import AssortmentSession


def test_new_target_starts_sorted_and_empty(session):
    target = session.add_new_target()

    assert target.is_new
    assert target.stage == 'sorted'
    assert target.packet_code is None
    assert target.allocations == {}
    assert session.state.targets == (target,)


def test_target_ids_are_unique(session, packet):
    ids = {session.add_new_target().id for _ in range(5)}
    ids.add(session.add_existing_target(packet).id)
    assert len(ids) == 6


def test_existing_target_requires_purchase_order(packet):
    s = AssortmentSession()
    s.select_warehouse(1)
    s.select_grn(Grn(id='grn-2', grn_number='GRN-0002'))

    assert s.add_existing_target(packet) is None
    assert s.state.targets == ()


def test_existing_target_binds_packet(session, packet):
    target = session.add_existing_target(packet)

    assert target.is_existing
    assert target.packet_id == 'P1'
    assert target.packet_code == 'RD-D-VS1-000'


def test_set_attribute_ignores_existing_targets(session, packet):
    target = session.add_existing_target(packet)

    assert session.set_attribute(target.id, 'shape', 'Oval') is False
    assert session.state.get_target(target.id).shape is None


def test_set_attribute_rejects_unknown_key(session):
    target = session.add_new_target()
    with pytest.raises(ValueError):
        session.set_attribute(target.id, 'packet_code', 'X')


def test_mutations_never_touch_previous_snapshots(session):
    target = session.add_new_target()
    before = session.state

    session.set_attribute(target.id, 'shape', 'Pear')
    session.set_allocation(target.id, 'item-1', 2)

    assert before.get_target(target.id).shape is None
    assert before.get_target(target.id).allocations == {}
    assert session.state.get_target(target.id).allocations == {'item-1': 2}


def test_set_allocation_overwrites_cell_without_validation(session):
    target = session.add_new_target()
    session.set_allocation(target.id, 'item-1', 50)
    session.set_allocation(target.id, 'item-1', 'abc')

    assert session.state.get_target(target.id).allocations == {'item-1': 'abc'}


def test_changing_grn_clears_targets_and_loads_new_items(session, packet):
    session.add_new_target()
    session.add_existing_target(packet)

    other = Grn(id='grn-2', grn_number='GRN-0002', purchase_order_id='po-2')
    generation = session.select_grn(other)
    session.apply_line_items(generation, [GrnLineItem('item-9', 4.0)])

    assert len(session.state.targets) == 0
    assert [i.grn_item_id for i in session.state.line_items] == ['item-9']
    assert session.state.purchase_order_id == 'po-2'
    assert session.state.existing_packets == ()


def test_reselecting_same_grn_keeps_work(session, grn):
    target = session.add_new_target()
    session.select_grn(grn)
    assert session.state.targets == (target,)


def test_stale_line_items_are_discarded(session):
    stale_generation = session.state.grn_generation
    generation = session.select_grn(Grn(id='grn-2', grn_number='GRN-0002'))

    assert session.apply_line_items(stale_generation, [GrnLineItem('old', 1.0)]) is False
    assert session.state.line_items == ()

    assert session.apply_line_items(generation, [GrnLineItem('new', 1.0)]) is True
    assert session.state.line_items[0].grn_item_id == 'new'


def test_changing_warehouse_resets_everything(session):
    session.add_new_target()
    session.select_warehouse(2)

    assert session.state.warehouse_id == 2
    assert session.state.grn_id is None
    assert session.state.targets == ()
    assert session.state.line_items == ()


def test_existing_packets_accepted_only_for_current_selection(session, packet):
    key = session.packets_selection
    assert key == (1, 'po-1')
    assert session.needs_packets

    assert session.apply_existing_packets((1, 'po-other'), [packet]) is False
    assert session.apply_existing_packets(key, [packet]) is True
    assert session.state.existing_packets == (packet,)
    assert not session.needs_packets


def test_complete_submission_resets_selection(session, packet):
    session.add_existing_target(packet)
    session.mark_in_flight()
    session.complete_submission()

    state = session.state
    assert state.grn_id is None
    assert state.line_items == ()
    assert state.targets == ()
    assert state.warehouse_id == 1
    assert state.request.status is RequestStatus.SUCCEEDED


def test_new_grn_after_success_returns_to_idle(session, grn):
    session.complete_submission()
    session.select_grn(grn)
    assert session.state.request.status is RequestStatus.IDLE
