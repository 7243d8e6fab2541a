# utils/config.py

import os
import logging
from dotenv import load_dotenv
from typing import Dict, Any

# Initialize logger
logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:4500/api"


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and "API" in st.secrets
    except Exception:
        return False


class Config:
    """Centralized configuration management for the Assortment Console"""

    def __init__(self):
        self.is_cloud = is_running_on_streamlit_cloud()
        self._load_config()

    def _load_config(self):
        """Load configuration based on environment"""
        if self.is_cloud:
            self._load_cloud_config()
        else:
            self._load_local_config()

        # Common configuration
        self._load_app_config()

    def _load_cloud_config(self):
        """Load configuration from Streamlit Cloud secrets"""
        import streamlit as st

        api = st.secrets["API"]
        self.api_config = {
            "base_url": str(api.get("BASE_URL", DEFAULT_API_BASE_URL)).rstrip("/"),
            "token": api.get("TOKEN"),
            "timeout": float(api.get("TIMEOUT_SECONDS", 30))
        }

        logger.info("☁️  Running in STREAMLIT CLOUD")
        self._log_config_status()

    def _load_local_config(self):
        """Load configuration from local environment"""
        # Load .env file
        load_dotenv()

        self.api_config = {
            "base_url": os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            "token": os.getenv("API_TOKEN"),
            "timeout": float(os.getenv("API_TIMEOUT_SECONDS", "30"))
        }

        logger.info("💻 Running in LOCAL environment")
        self._log_config_status()

    def _load_app_config(self):
        """Load application-specific configuration"""
        self.app_config = {
            # Session management
            "SESSION_TIMEOUT_HOURS": int(os.getenv("SESSION_TIMEOUT_HOURS", "8")),

            # Performance
            "CACHE_TTL_SECONDS": int(os.getenv("CACHE_TTL_SECONDS", "300")),  # 5 minutes

            # Assortment
            "DEFAULT_PACKET_STAGE": os.getenv("DEFAULT_PACKET_STAGE", "sorted"),

            # Features
            "ENABLE_OVER_ALLOCATION_NOTICE": os.getenv("ENABLE_OVER_ALLOCATION_NOTICE", "true").lower() == "true",
        }

    def _log_config_status(self):
        """Log configuration status"""
        logger.info("─" * 55)
        logger.info("🔌 API CONFIGURATION")

        base_url = self.api_config.get('base_url')
        if base_url == DEFAULT_API_BASE_URL:
            logger.warning(f"   ⚠️  Base URL: {base_url} (default)")
        else:
            logger.info(f"   ✅ Base URL: {base_url}")

        token = self.api_config.get('token')
        if token:
            token_preview = f"{token[:6]}...{token[-4:]}" if len(str(token)) > 10 else "configured"
            logger.info(f"   ✅ Service Token: {token_preview}")
        else:
            logger.info("   ℹ️  Service Token: Not configured (login required)")

        logger.info(f"   ✅ Timeout: {self.api_config.get('timeout')}s")
        logger.info("─" * 55)

    def get_api_config(self) -> Dict[str, Any]:
        """Get API configuration"""
        return self.api_config.copy()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting"""
        return self.app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Check if a feature is enabled"""
        return self.app_config.get(f"ENABLE_{feature.upper()}", True)


# Create singleton instance
config = Config()

IS_RUNNING_ON_CLOUD = config.is_cloud
API_CONFIG = config.api_config
APP_CONFIG = config.app_config


# Export all
__all__ = [
    'config',
    'Config',
    'IS_RUNNING_ON_CLOUD',
    'API_CONFIG',
    'APP_CONFIG'
]
