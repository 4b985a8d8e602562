"""
Query Cache
Keyed remote collections with per-collection loading and error state.

Each Query wraps one fetcher (e.g. "the current user's badges"). Mutations
never patch cached data; they invalidate the affected keys and the queries
re-pull authoritative state from the backend.

Usage:
    cache = QueryCache()
    badges = cache.register("badges", client.get_badges)
    badges.fetch()
    cache.invalidate("badges")   # refetches right away while enabled
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..utils.errors import ClientError, SessionAbsent

logger = logging.getLogger(__name__)


class Query:
    """Single cached collection"""

    def __init__(
        self,
        key: str,
        fetcher: Callable[[], Any],
        enabled: bool = True,
        placeholder: Callable[[], Any] = list,
    ):
        self.key = key
        self._fetcher = fetcher
        self._placeholder = placeholder
        self.enabled = enabled
        self._data: Any = None
        self.error: Optional[ClientError] = None
        self.is_loading = False
        self.is_stale = True
        self.fetch_count = 0
        self.updated_at: Optional[datetime] = None

    @property
    def data(self) -> Any:
        """Last fetched value, or the placeholder when disabled or empty"""
        if not self.enabled or self._data is None:
            return self._placeholder()
        return self._data

    def fetch(self) -> bool:
        """Run the fetcher. Returns False when disabled or the fetch failed."""
        if not self.enabled:
            return False

        self.is_loading = True
        self.fetch_count += 1
        try:
            result = self._fetcher()
        except SessionAbsent:
            # 401 on a collection means "nothing to show", not a failure
            result = None
        except ClientError as e:
            self.error = e
            logger.warning("Fetching %s failed: %s", self.key, e.message)
            return False
        finally:
            self.is_loading = False

        self._data = result
        self.error = None
        self.is_stale = False
        self.updated_at = datetime.now()
        return True

    def invalidate(self) -> bool:
        """Mark stale and refetch if enabled"""
        self.is_stale = True
        if self.enabled:
            return self.fetch()
        return False

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def reset(self) -> None:
        """Drop cached data and error"""
        self._data = None
        self.error = None
        self.is_stale = True
        self.updated_at = None

    def __repr__(self) -> str:
        return (
            f"Query(key={self.key!r}, enabled={self.enabled}, stale={self.is_stale}, "
            f"fetches={self.fetch_count}, error={self.error!r})"
        )


class QueryCache:
    """Queries addressed by logical resource key"""

    def __init__(self):
        self._queries: Dict[str, Query] = {}

    def register(
        self,
        key: str,
        fetcher: Callable[[], Any],
        enabled: bool = True,
        placeholder: Callable[[], Any] = list,
    ) -> Query:
        query = Query(key, fetcher, enabled=enabled, placeholder=placeholder)
        self._queries[key] = query
        return query

    def get(self, key: str) -> Optional[Query]:
        return self._queries.get(key)

    def __getitem__(self, key: str) -> Query:
        return self._queries[key]

    def __contains__(self, key: str) -> bool:
        return key in self._queries

    def invalidate(self, *keys: str) -> None:
        for key in keys:
            self._queries[key].invalidate()

    def set_enabled(self, enabled: bool, *keys: str) -> None:
        for key in keys:
            self._queries[key].set_enabled(enabled)

    def reset(self, *keys: str) -> None:
        for key in keys:
            self._queries[key].reset()

    def stats(self) -> Dict[str, Any]:
        return {
            key: {
                "enabled": q.enabled,
                "stale": q.is_stale,
                "loading": q.is_loading,
                "fetches": q.fetch_count,
                "error": q.error.message if q.error else None,
                "updated_at": q.updated_at.isoformat() if q.updated_at else None,
            }
            for key, q in self._queries.items()
        }
