"""
API Access Models
Developer API keys and their per-endpoint usage counters.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .gamification import _iso, _parse_ts


@dataclass
class ApiKey:
    """API key owned by the signed-in user"""
    id: int
    name: str
    key: str
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    last_used: Optional[datetime] = None
    is_active: bool = True

    @property
    def masked(self) -> str:
        """Key with everything but the last four characters hidden"""
        if len(self.key) <= 4:
            return "*" * len(self.key)
        return "*" * (len(self.key) - 4) + self.key[-4:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "key": self.key,
            "createdAt": _iso(self.created_at),
            "lastUsed": _iso(self.last_used),
            "isActive": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiKey":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            key=data.get("key", ""),
            user_id=data.get("userId"),
            created_at=_parse_ts(data.get("createdAt")),
            last_used=_parse_ts(data.get("lastUsed")),
            is_active=bool(data.get("isActive", True)),
        )


@dataclass
class ApiUsage:
    """Request count for one endpoint on one day"""
    id: int
    endpoint: str
    method: str
    count: int
    date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "endpoint": self.endpoint,
            "method": self.method,
            "count": self.count,
            "date": _iso(self.date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiUsage":
        return cls(
            id=int(data["id"]),
            endpoint=data.get("endpoint", ""),
            method=(data.get("method") or "GET").upper(),
            count=int(data.get("count") or 0),
            date=_parse_ts(data.get("date")),
        )
