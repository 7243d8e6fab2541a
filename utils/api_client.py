# utils/api_client.py

import logging
import math
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
import streamlit as st

from .config import config

logger = logging.getLogger(__name__)

# Route prefixes mounted on the backend
API_ROUTES = {
    'auth': '/auth',
    'masters': '/masters',
    'procurement': '/procurement',
    'inventory': '/inventory',
}


class ApiError(Exception):
    """Raised when the backend rejects a request or cannot be reached"""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        self.status = status
        self.payload = payload
        super().__init__(message)


class ApiClient:
    """Thin JSON client for the inventory backend"""

    def __init__(self, base_url: str = None, token: str = None,
                 timeout: float = None, session: requests.Session = None):
        api_config = config.get_api_config()
        self.base_url = (base_url or api_config['base_url']).rstrip('/')
        self.token = token if token is not None else api_config.get('token')
        self.timeout = timeout or api_config.get('timeout', 30)
        self.session = session or requests.Session()

    def set_token(self, token: Optional[str]):
        self.token = token

    def _url(self, path: str) -> str:
        if path.startswith('http'):
            return path
        return f"{self.base_url}{path if path.startswith('/') else '/' + path}"

    def request(self, method: str, path: str, params: Dict = None,
                json_body: Any = None) -> Any:
        """
        Send a request and return the decoded JSON body

        Raises:
            ApiError: on connection failure or non-2xx status
        """
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        url = self._url(path)
        try:
            response = self.session.request(
                method, url,
                params=params or None,
                json=json_body if method.upper() != 'GET' else None,
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiError("Cannot reach API server. Is backend running?") from e

        data = self._decode(response)

        if not 200 <= response.status_code < 300:
            message = None
            if isinstance(data, dict):
                message = data.get('error') or data.get('message')
            message = message or f"Request failed with status {response.status_code}"
            logger.warning(f"{method} {url} -> {response.status_code}: {message}")
            raise ApiError(message, status=response.status_code, payload=data)

        return data

    @staticmethod
    def _decode(response) -> Any:
        text = response.text
        if not text:
            return None
        try:
            return response.json()
        except ValueError:
            return text

    @staticmethod
    def _carats(value: Any) -> float:
        try:
            qty = float(value or 0)
        except (TypeError, ValueError):
            logger.warning(f"Non-numeric available_carats from backend: {value!r}")
            return 0.0
        return qty if math.isfinite(qty) else 0.0

    def get(self, path: str, params: Dict = None) -> Any:
        return self.request('GET', path, params=params)

    def post(self, path: str, json_body: Any = None) -> Any:
        return self.request('POST', path, json_body=json_body or {})

    # ==================== MASTERS / PROCUREMENT ====================

    def list_warehouses(self) -> Any:
        return self.get(f"{API_ROUTES['masters']}/warehouses")

    def list_grns(self, warehouse_id: int) -> Any:
        return self.get(f"{API_ROUTES['procurement']}/grns",
                        params={'warehouse_id': warehouse_id})

    # ==================== INVENTORY ====================

    def get_grn_items_with_remaining_qty(self, grn_id: str) -> Any:
        if not grn_id:
            raise ValueError("grn_id_required")
        return self.get(
            f"{API_ROUTES['inventory']}/grn-items/{quote(str(grn_id), safe='')}/remaining"
        )

    def list_packets(self, warehouse_id: int, purchase_order_id: str = None,
                     q: str = None, limit: int = None, offset: int = None) -> Dict[str, Any]:
        if not warehouse_id:
            raise ValueError("warehouse_id_required")

        res = self.get(f"{API_ROUTES['inventory']}/diamond-packets", params={
            'warehouse_id': warehouse_id,
            'purchase_order_id': purchase_order_id,
            'q': q or None,
            'limit': limit or None,
            'offset': offset or None,
        }) or {}

        results = []
        for row in res.get('results') or []:
            row = dict(row)
            row['available_carats'] = self._carats(row.get('available_carats'))
            results.append(row)
        return {'ok': res.get('ok', True), 'results': results}

    def generate_packet_code(self, shape: str, color: str, clarity: str) -> Any:
        if not shape or not color or not clarity:
            raise ValueError("shape_color_clarity_required")
        return self.post(
            f"{API_ROUTES['inventory']}/diamond-packets/generate-code",
            {'shape': shape, 'color': color, 'clarity': clarity}
        )

    def assort_grn_to_packets(self, grn_id: str, warehouse_id: int,
                              allocations: List[Dict[str, Any]]) -> Any:
        """POST the assortment request after re-checking its shape"""
        if not grn_id:
            raise ValueError("grn_id_required")
        if not warehouse_id:
            raise ValueError("warehouse_id_required")
        if not allocations:
            raise ValueError("allocations_required")

        for row in allocations:
            if not row.get('grn_item_id'):
                raise ValueError("grn_item_id_required")
            if not row.get('carats') or row['carats'] <= 0:
                raise ValueError("invalid_carats")
            if row.get('create_new_packet') and not row.get('packet_code'):
                raise ValueError("packet_code_required_for_new_packet")
            if not row.get('create_new_packet') and not row.get('packet_id'):
                raise ValueError("packet_id_required_for_existing_packet")

        return self.post(f"{API_ROUTES['inventory']}/diamond-assortments", {
            'grn_id': grn_id,
            'warehouse_id': warehouse_id,
            'allocations': allocations,
        })

    # ==================== AUTH ====================

    def login(self, email: str, password: str) -> Any:
        return self.post(f"{API_ROUTES['auth']}/login",
                         {'email': email, 'password': password})

    def logout(self) -> Any:
        return self.post(f"{API_ROUTES['auth']}/logout")


SESSION_CLIENT_KEY = 'api_client'


def get_api_client(state=None) -> ApiClient:
    """
    Return the client owned by the current browser session, creating it on first use

    Streamlit serves every browser session from the same process, so the bearer
    token and the underlying requests.Session live in that session's state.
    """
    if state is None:
        state = st.session_state
    client = state.get(SESSION_CLIENT_KEY)
    if client is None:
        client = ApiClient()
        state[SESSION_CLIENT_KEY] = client
        logger.info(f"API client initialised for {client.base_url}")
    return client
