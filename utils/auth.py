# utils/auth.py

import streamlit as st
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple
import logging

from .api_client import ApiError, get_api_client
from .config import config

logger = logging.getLogger(__name__)


class AuthManager:
    """Authentication manager holding the backend bearer token in session state"""

    def __init__(self, client=None):
        self.client = client or get_api_client()
        self.session_timeout = timedelta(hours=config.get_app_setting('SESSION_TIMEOUT_HOURS', 8))

    def authenticate(self, email: str, password: str) -> Tuple[bool, Optional[Dict]]:
        """Authenticate against the backend and return user info"""
        if not email or not password:
            return False, {"error": "Email and password are required"}

        try:
            data = self.client.login(email.strip(), password)
        except ApiError as e:
            logger.warning(f"Login rejected for {email}: {e}")
            return False, {"error": str(e) or "Invalid email or password"}
        except Exception as e:
            logger.error(f"Authentication error: {e}")
            return False, {"error": "Authentication failed. Please try again."}

        if not isinstance(data, dict) or not data.get('token'):
            return False, {"error": "Invalid email or password"}

        user = data.get('user') or {}
        return True, {
            'id': user.get('id'),
            'email': user.get('email', email),
            'role': user.get('role', 'viewer'),
            'full_name': user.get('name') or user.get('full_name') or email,
            'token': data['token'],
            'login_time': datetime.now()
        }

    def check_session(self) -> bool:
        """Check if user session is valid"""
        if not st.session_state.get('authenticated'):
            return False

        if not st.session_state.get('api_token'):
            logger.warning("No api_token in session state")
            return False

        # Check session timeout
        login_time = st.session_state.get('login_time')
        if login_time:
            elapsed = datetime.now() - login_time
            if elapsed > self.session_timeout:
                logger.info(f"Session timeout for user {st.session_state.get('user_email', 'unknown')}")
                self.logout()
                return False

        # Rerun may have built a fresh client
        self.client.set_token(st.session_state.api_token)
        return True

    def login(self, user_info: Dict):
        """Set up user session"""
        st.session_state.authenticated = True
        st.session_state.login_time = user_info['login_time']
        st.session_state.api_token = user_info['token']

        st.session_state.user = {
            'id': user_info['id'],
            'email': user_info['email'],
            'role': user_info['role'],
            'full_name': user_info['full_name']
        }
        st.session_state.user_email = user_info['email']

        self.client.set_token(user_info['token'])

        logger.info(f"User {user_info['email']} (ID: {user_info['id']}) logged in successfully")

    def logout(self):
        """Clear user session"""
        email = st.session_state.get('user_email', 'Unknown')

        if st.session_state.get('api_token'):
            try:
                self.client.logout()
            except ApiError as e:
                logger.info(f"Backend logout failed for {email}: {e}")

        auth_keys = ['authenticated', 'api_token', 'login_time', 'user', 'user_email']
        for key in auth_keys:
            if key in st.session_state:
                del st.session_state[key]

        self.client.set_token(config.get_api_config().get('token'))

        # Clear cache
        st.cache_data.clear()

        logger.info(f"User {email} logged out")

    def get_user_display_name(self) -> str:
        """Get user display name"""
        user = st.session_state.get('user') or {}
        return user.get('full_name') or user.get('email') or 'User'
