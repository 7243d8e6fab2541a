"""
Assortment Service - submission orchestration
Validates the session, sends the allocation rows to the backend and resets on success.
Single-flight: a submission is only accepted while the request state is IDLE or FAILED.
"""
import logging
from typing import Any, Dict, List

from ..api_client import ApiClient, ApiError, get_api_client
from .constants import (
    MSG_CLASSIFICATION_REQUIRED, MSG_CODE_REQUIRED, MSG_SUBMIT_FAILED,
    MSG_SUBMIT_IN_PROGRESS, MSG_SUBMIT_SUCCESS
)
from .session import AssortmentSession
from .validators import AssortmentValidator

logger = logging.getLogger(__name__)


# ==================== CUSTOM EXCEPTIONS ====================
class AssortmentError(Exception):
    """Base exception for assortment errors"""
    pass


class IncompleteInputError(AssortmentError):
    """Raised when selections are missing or no allocation row is valid"""
    pass


class IncompleteTargetError(AssortmentError):
    """Raised when a new packet with carats lacks classification or code"""
    pass


class SubmissionInProgressError(AssortmentError):
    """Raised when a submission is attempted while another is in flight"""
    def __init__(self):
        super().__init__(MSG_SUBMIT_IN_PROGRESS)


TARGET_MESSAGES = (MSG_CODE_REQUIRED, MSG_CLASSIFICATION_REQUIRED)


# ==================== ASSORTMENT SERVICE ====================
class AssortmentService:
    """Service for submitting GRN → packet assortments"""

    def __init__(self, client: ApiClient = None, validator: AssortmentValidator = None):
        self.client = client or get_api_client()
        self.validator = validator or AssortmentValidator()

    def prepare(self, session: AssortmentSession) -> List[Dict[str, Any]]:
        """
        Run the submission gate and return the rows to send

        Raises:
            SubmissionInProgressError, IncompleteInputError, IncompleteTargetError
        """
        state = session.state
        if not state.request.accepts_submission:
            raise SubmissionInProgressError()

        errors = self.validator.validate_submission(state)
        if errors:
            if errors[0] in TARGET_MESSAGES:
                raise IncompleteTargetError(errors[0])
            raise IncompleteInputError(errors[0])

        return self.validator.build_payload(state)

    def submit(self, session: AssortmentSession) -> Dict[str, Any]:
        """Validate and submit the session's allocations"""
        try:
            rows = self.prepare(session)
        except AssortmentError as e:
            logger.warning(f"Assortment not submitted: {e}")
            return {'success': False, 'error': str(e), 'error_type': type(e).__name__}

        state = session.state
        grn_id = state.grn_id
        session.mark_in_flight()

        try:
            result = self.client.assort_grn_to_packets(
                grn_id=grn_id,
                warehouse_id=state.warehouse_id,
                allocations=rows
            )
        except ApiError as e:
            message = str(e) or MSG_SUBMIT_FAILED
            session.mark_failed(message)
            logger.warning(f"Backend rejected assortment of GRN {grn_id}: {message}")
            return {'success': False, 'error': message, 'error_type': 'ApiError'}
        except Exception as e:
            message = str(e) or MSG_SUBMIT_FAILED
            session.mark_failed(message)
            logger.error(f"Unexpected error assorting GRN {grn_id}: {e}", exc_info=True)
            return {
                'success': False,
                'error': message,
                'error_type': type(e).__name__,
                'technical_error': str(e)
            }

        if isinstance(result, dict) and result.get('ok') is False:
            message = result.get('error') or MSG_SUBMIT_FAILED
            session.mark_failed(message)
            logger.warning(f"Backend refused assortment of GRN {grn_id}: {message}")
            return {'success': False, 'error': message, 'error_type': 'ApiError'}

        session.complete_submission()

        total = sum(row['carats'] for row in rows)
        logger.info(f"Assorted GRN {grn_id}: {len(rows)} rows, {total:.2f} ct")

        return {
            'success': True,
            'message': MSG_SUBMIT_SUCCESS,
            'grn_id': grn_id,
            'rows_submitted': len(rows),
            'total_carats': total,
            'allocations': (result or {}).get('allocations', []) if isinstance(result, dict) else []
        }
