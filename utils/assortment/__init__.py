"""
GRN → Diamond Packet Assortment Module
======================================
Splits one Goods Receipt Note's received carats across diamond packets.

Components:
- assortment_data: Warehouses, GRNs, remaining quantities, existing packets
- session: Packet targets, allocation matrix and request state for one session
- code_generator: Packet code generation through the naming service
- validators: Payload builder and submission gate
- assortment_service: Submission orchestration
- formatters: Display helpers
"""

from .assortment_data import AssortmentData
from .session import AssortmentSession
from .code_generator import PacketCodeGenerator, PacketCodeError
from .validators import AssortmentValidator
from .assortment_service import (
    AssortmentService,
    AssortmentError,
    IncompleteInputError,
    IncompleteTargetError,
    SubmissionInProgressError
)
from .models import (
    AssortmentState,
    ExistingPacket,
    Grn,
    GrnLineItem,
    PacketTarget,
    RequestState,
    RequestStatus,
    Warehouse
)

__all__ = [
    # Services
    'AssortmentData',
    'AssortmentSession',
    'PacketCodeGenerator',
    'AssortmentValidator',
    'AssortmentService',

    # Errors
    'AssortmentError',
    'IncompleteInputError',
    'IncompleteTargetError',
    'SubmissionInProgressError',
    'PacketCodeError',

    # Models
    'AssortmentState',
    'ExistingPacket',
    'Grn',
    'GrnLineItem',
    'PacketTarget',
    'RequestState',
    'RequestStatus',
    'Warehouse'
]
