"""
API Access State
Developer API keys and usage counters for the signed-in user.

Both collections follow the same rules as the user-scoped progress
collections: fetched only while signed in, cleared on sign-out, and
re-pulled after every successful mutation.
"""

import logging
from typing import List, Optional

import pandas as pd

from ..models import ApiKey, ApiUsage, Identity
from ..utils.api_client import APIClient
from ..utils.errors import ClientError
from .notifications import Notifier
from .query import QueryCache
from .session import SessionManager

logger = logging.getLogger(__name__)

API_KEYS = "api_keys"
API_USAGE = "api_usage"

USAGE_COLUMNS = ["date", "endpoint", "method", "count"]


class ApiKeyManager:
    """
    Usage:
        keys = ApiKeyManager(client, session)
        keys.generate_key("CI pipeline")
        secret = keys.generated_key      # shown once, then dismissed
        keys.dismiss_generated_key()
        keys.revoke_key(keys.api_keys[0].id)
    """

    def __init__(self, client: APIClient, session: SessionManager, notifier: Optional[Notifier] = None):
        self._client = client
        self._session = session
        self._notifier = notifier or session.notifier
        self._generated_key: Optional[str] = None

        signed_in = session.is_authenticated
        self.queries = QueryCache()
        self.queries.register(API_KEYS, session.scoped(client.get_api_keys), enabled=signed_in)
        self.queries.register(API_USAGE, session.scoped(client.get_api_usage), enabled=signed_in)

        session.on_identity_change(self._on_identity_change)

        for key in (API_KEYS, API_USAGE):
            self.queries[key].fetch()

    @property
    def api_keys(self) -> List[ApiKey]:
        return self.queries[API_KEYS].data

    @property
    def api_usage(self) -> List[ApiUsage]:
        return self.queries[API_USAGE].data

    @property
    def is_loading(self) -> bool:
        return self.queries[API_KEYS].is_loading or self.queries[API_USAGE].is_loading

    @property
    def generated_key(self) -> Optional[str]:
        """Secret of the key created last; the backend never returns it again"""
        return self._generated_key

    def dismiss_generated_key(self) -> None:
        self._generated_key = None

    def generate_key(self, name: str) -> Optional[ApiKey]:
        name = (name or "").strip()
        if not name:
            self._notifier.error("Name Required", "Please provide a name for your API key")
            return None

        try:
            api_key = self._client.create_api_key(name)
        except ClientError as e:
            logger.warning("Generating API key %r failed: %s", name, e.message)
            self._notifier.error("Error Generating API Key", e.message or "Failed to generate API key")
            return None

        self._generated_key = api_key.key
        self.queries.invalidate(API_KEYS)
        logger.info("Generated API key %s (%s)", api_key.id, name)
        self._notifier.success("API Key Generated", "Your new API key has been created successfully")
        return api_key

    def revoke_key(self, key_id: int) -> bool:
        try:
            self._client.delete_api_key(key_id)
        except ClientError as e:
            logger.warning("Revoking API key %s failed: %s", key_id, e.message)
            self._notifier.error("Error Deleting API Key", e.message or "Failed to delete API key")
            return False

        self.queries.invalidate(API_KEYS)
        logger.info("Revoked API key %s", key_id)
        self._notifier.success("API Key Deleted", "The API key has been revoked successfully")
        return True

    def usage_frame(self) -> pd.DataFrame:
        """Usage counters as a DataFrame, newest day first"""
        rows = [
            {"date": u.date, "endpoint": u.endpoint, "method": u.method, "count": u.count}
            for u in self.api_usage
        ]
        if not rows:
            return pd.DataFrame(columns=USAGE_COLUMNS)
        df = pd.DataFrame(rows, columns=USAGE_COLUMNS)
        return df.sort_values("date", ascending=False, na_position="last").reset_index(drop=True)

    def _on_identity_change(self, previous: Optional[Identity], current: Optional[Identity]) -> None:
        self._generated_key = None
        for key in (API_KEYS, API_USAGE):
            self.queries[key].reset()
            self.queries[key].set_enabled(current is not None)
        if current is not None:
            for key in (API_KEYS, API_USAGE):
                self.queries[key].fetch()
