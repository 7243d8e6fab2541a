import pytest

from utils.api_client import ApiError
from utils.assortment.models import ExistingPacket, Grn, GrnLineItem
from utils.assortment.session import AssortmentSession


class FakeApiClient:
    """Records calls and answers from canned responses"""

    def __init__(self):
        self.calls = []
        self.warehouses = [{'id': 1, 'name': 'Mumbai'}]
        self.grns = {'results': []}
        self.items = {}
        self.packets = {'ok': True, 'results': []}
        self.codes = []
        self.code_error = None
        self.assort_result = {'ok': True, 'allocations': []}
        self.assort_error = None

    def list_warehouses(self):
        self.calls.append(('list_warehouses',))
        return self.warehouses

    def list_grns(self, warehouse_id):
        self.calls.append(('list_grns', warehouse_id))
        return self.grns

    def get_grn_items_with_remaining_qty(self, grn_id):
        self.calls.append(('get_grn_items_with_remaining_qty', grn_id))
        return {'ok': True, 'items': self.items.get(grn_id, [])}

    def list_packets(self, warehouse_id, purchase_order_id=None):
        self.calls.append(('list_packets', warehouse_id, purchase_order_id))
        return self.packets

    def generate_packet_code(self, shape, color, clarity):
        self.calls.append(('generate_packet_code', shape, color, clarity))
        if self.code_error:
            raise self.code_error
        return {'ok': True, 'packet_code': self.codes.pop(0)}

    def assort_grn_to_packets(self, grn_id, warehouse_id, allocations):
        self.calls.append(('assort_grn_to_packets', grn_id, warehouse_id, allocations))
        if self.assort_error:
            raise self.assort_error
        return self.assort_result

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def fake_client():
    return FakeApiClient()


@pytest.fixture
def grn():
    return Grn(id='grn-1', grn_number='GRN-0001', purchase_order_id='po-1')


@pytest.fixture
def line_item():
    return GrnLineItem(grn_item_id='item-1', remaining_qty=10.0)


@pytest.fixture
def packet():
    return ExistingPacket(id='P1', packet_code='RD-D-VS1-000', available_carats=3.5)


@pytest.fixture
def session(grn, line_item):
    """Session with warehouse 1 and a loaded single-line GRN"""
    s = AssortmentSession()
    s.select_warehouse(1)
    generation = s.select_grn(grn)
    s.apply_line_items(generation, [line_item])
    return s


@pytest.fixture
def coded_new_target(session):
    """New target classified as Round/D/VS1 with a generated code"""
    target = session.add_new_target()
    session.set_attribute(target.id, 'shape', 'Round')
    session.set_attribute(target.id, 'color', 'D')
    session.set_attribute(target.id, 'clarity', 'VS1')
    session.apply_packet_code(target.id, 'RD-D-VS1-001')
    return session.state.get_target(target.id)


@pytest.fixture
def api_error():
    return ApiError("Allocation exceeds remaining quantity", status=409,
                    payload={'error': "Allocation exceeds remaining quantity"})
