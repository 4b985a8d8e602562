"""
State Management
Session, progress and API-access managers wired by explicit construction.

    client   = APIClient()
    notifier = Notifier()
    session  = SessionManager(client, notifier)
    progress = ProgressManager(client, session)
    keys     = ApiKeyManager(client, session)
"""

from .notifications import Notification, NotificationVariant, Notifier
from .query import Query, QueryCache
from .session import SessionManager
from .progress import ProgressManager
from .api_keys import ApiKeyManager

__all__ = [
    "Notification",
    "NotificationVariant",
    "Notifier",
    "Query",
    "QueryCache",
    "SessionManager",
    "ProgressManager",
    "ApiKeyManager",
]
