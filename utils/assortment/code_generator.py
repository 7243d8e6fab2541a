"""
Packet code generation through the backend naming service
Every call mints a new code, so it is only ever triggered by an explicit user action.
"""
import logging
from typing import Any, Dict

from ..api_client import ApiClient, ApiError, get_api_client
from .constants import MSG_CODE_FAILED, MSG_SELECT_ATTRIBUTES_FIRST
from .session import AssortmentSession

logger = logging.getLogger(__name__)


class PacketCodeError(Exception):
    """Raised when the naming service does not return a packet code"""
    pass


class PacketCodeGenerator:
    """Gateway to the packet naming service"""

    def __init__(self, client: ApiClient = None):
        self.client = client or get_api_client()

    def generate_code(self, shape: str, color: str, clarity: str) -> str:
        """
        Mint a unique packet code for a classification

        Raises:
            PacketCodeError: when the service fails or answers without a code
        """
        try:
            res = self.client.generate_packet_code(shape, color, clarity)
        except ApiError as e:
            raise PacketCodeError(str(e) or MSG_CODE_FAILED) from e

        if not isinstance(res, dict) or not res.get('ok') or not res.get('packet_code'):
            error = res.get('error') if isinstance(res, dict) else None
            raise PacketCodeError(error or MSG_CODE_FAILED)

        logger.info(f"Generated packet code {res['packet_code']} for {shape}/{color}/{clarity}")
        return res['packet_code']

    def generate_for_target(self, session: AssortmentSession, target_id: str) -> Dict[str, Any]:
        """Generate a code for one new-mode target and write it back"""
        target = session.state.get_target(target_id)
        if target is None or not target.is_new:
            return {'success': False, 'error': "Packet code can only be generated for new packets"}

        if target.missing_classification():
            return {'success': False, 'error': MSG_SELECT_ATTRIBUTES_FIRST}

        try:
            code = self.generate_code(target.shape, target.color, target.clarity)
        except PacketCodeError as e:
            logger.warning(f"Packet code generation failed for target {target_id}: {e}")
            return {'success': False, 'error': str(e)}

        session.apply_packet_code(target_id, code)
        return {'success': True, 'packet_code': code}
