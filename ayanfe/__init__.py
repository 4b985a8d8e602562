"""
Ayanfe client
Session, badge/achievement and API-key state kept in sync with the backend.
"""

from .config import Settings, get_settings, configure_logging
from .utils import APIClient, get_client
from .state import Notifier, SessionManager, ProgressManager, ApiKeyManager

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "APIClient",
    "get_client",
    "Notifier",
    "SessionManager",
    "ProgressManager",
    "ApiKeyManager",
]
