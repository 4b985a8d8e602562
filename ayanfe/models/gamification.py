"""
Gamification Models
Badge and achievement catalogs, and the per-user records joined onto them.

Catalog entries (Badge, Achievement) are immutable and shared by every
visitor. UserBadge and UserAchievementProgress belong to the signed-in user
and carry their catalog entry when the backend joins it in.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, NamedTuple, Optional


def _parse_ts(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# Catalog
# =============================================================================

@dataclass(frozen=True)
class Badge:
    """Catalog-defined award"""
    id: int
    name: str
    description: str = ""
    icon: Optional[str] = None
    category: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    _KNOWN = ("id", "name", "description", "icon", "category")

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.metadata,
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Badge":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            description=data.get("description") or "",
            icon=data.get("icon"),
            category=data.get("category"),
            metadata={k: v for k, v in data.items() if k not in cls._KNOWN},
        )


@dataclass(frozen=True)
class Achievement:
    """
    Catalog-defined goal.

    Secret achievements are filtered out by the backend for visitors who
    may not see them; the client never filters.
    """
    id: int
    name: str
    description: str = ""
    is_secret: bool = False
    required_count: int = 1
    badge_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "isSecret": self.is_secret,
            "requiredCount": self.required_count,
            "badgeId": self.badge_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Achievement":
        badge_id = data.get("badgeId")
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            description=data.get("description") or "",
            is_secret=bool(data.get("isSecret", False)),
            required_count=int(data.get("requiredCount") or 1),
            badge_id=int(badge_id) if badge_id is not None else None,
        )


# =============================================================================
# Per-user records
# =============================================================================

@dataclass
class UserBadge:
    """A badge the user holds, with display preference"""
    id: int
    badge_id: int
    user_id: Optional[int] = None
    progress: int = 0
    displayed: bool = False
    earned_at: Optional[datetime] = None
    badge: Optional[Badge] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "badgeId": self.badge_id,
            "progress": self.progress,
            "displayed": self.displayed,
            "earnedAt": _iso(self.earned_at),
            "badge": self.badge.to_dict() if self.badge else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserBadge":
        badge = data.get("badge")
        return cls(
            id=int(data["id"]),
            badge_id=int(data["badgeId"]),
            user_id=data.get("userId"),
            progress=int(data.get("progress") or 0),
            displayed=bool(data.get("displayed", False)),
            earned_at=_parse_ts(data.get("earnedAt")),
            badge=Badge.from_dict(badge) if badge else None,
        )


@dataclass
class UserAchievementProgress:
    """Progress of the user toward one achievement"""
    achievement_id: int
    id: Optional[int] = None
    user_id: Optional[int] = None
    progress: int = 0
    current_count: Optional[int] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    achievement: Optional[Achievement] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "achievementId": self.achievement_id,
            "progress": self.progress,
            "currentCount": self.current_count,
            "completed": self.completed,
            "completedAt": _iso(self.completed_at),
            "achievement": self.achievement.to_dict() if self.achievement else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserAchievementProgress":
        achievement = data.get("achievement")
        return cls(
            achievement_id=int(data["achievementId"]),
            id=data.get("id"),
            user_id=data.get("userId"),
            progress=int(data.get("progress") or 0),
            current_count=data.get("currentCount"),
            completed=bool(data.get("completed", False)),
            completed_at=_parse_ts(data.get("completedAt")),
            achievement=Achievement.from_dict(achievement) if achievement else None,
        )


# =============================================================================
# Mutation results
# =============================================================================

@dataclass
class ProgressUpdateResult:
    """Response of the achievement progress and completion endpoints"""
    progress: UserAchievementProgress
    completed: bool = False
    badge: Optional[Badge] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], completed: Optional[bool] = None) -> "ProgressUpdateResult":
        progress = UserAchievementProgress.from_dict(data["progress"])
        badge = data.get("badge")
        if completed is None:
            completed = bool(data.get("completed", progress.completed))
        return cls(
            progress=progress,
            completed=completed,
            badge=Badge.from_dict(badge) if badge else None,
        )


@dataclass(frozen=True)
class CompletedAchievement:
    """Transient "just unlocked" value for a celebration surface"""
    achievement_id: int
    badge: Optional[Badge] = None
    achievement: Optional[Achievement] = None

    @property
    def title(self) -> str:
        if self.achievement:
            return self.achievement.name
        return f"Achievement #{self.achievement_id}"


class AchievementStatus(NamedTuple):
    """Progress accessor result"""
    progress: int
    completed: bool
