"""
Progress State Management
Badge and achievement catalogs plus the signed-in user's progress on them.

Collections:
    badges              catalog, fetched for everyone
    achievements        catalog, fetched for everyone
    user_badges         only while a user is signed in
    user_achievements   only while a user is signed in

Every successful mutation invalidates the affected user collections and the
cache re-pulls them; nothing is patched locally.
"""

import logging
from typing import List, Optional, Set

from ..config import Settings
from ..models import (
    Achievement,
    AchievementStatus,
    Badge,
    CompletedAchievement,
    Identity,
    ProgressUpdateResult,
    UserAchievementProgress,
    UserBadge,
)
from ..utils.api_client import APIClient
from ..utils.errors import ClientError
from .notifications import Notifier
from .query import QueryCache
from .session import SessionManager

logger = logging.getLogger(__name__)

BADGES = "badges"
ACHIEVEMENTS = "achievements"
USER_BADGES = "user_badges"
USER_ACHIEVEMENTS = "user_achievements"

USER_KEYS = (USER_BADGES, USER_ACHIEVEMENTS)


class ProgressManager:
    """
    Gamification read model and mutations for the UI.

    Usage:
        progress = ProgressManager(client, session)
        progress.badge_progress(3)                # 0 if not earned
        progress.update_achievement_progress(5, 100)
        if progress.newly_completed:
            celebrate(progress.newly_completed)
            progress.clear_newly_completed()
    """

    def __init__(
        self,
        client: APIClient,
        session: SessionManager,
        notifier: Optional[Notifier] = None,
        settings: Optional[Settings] = None,
    ):
        self._client = client
        self._session = session
        self._notifier = notifier or session.notifier
        self._settings = settings or client.settings
        self._newly_completed: Optional[CompletedAchievement] = None
        self._completed_ids: Set[int] = set()

        signed_in = session.is_authenticated
        self.queries = QueryCache()
        self.queries.register(BADGES, client.get_badges)
        self.queries.register(ACHIEVEMENTS, client.get_achievements)
        self.queries.register(USER_BADGES, session.scoped(client.get_user_badges), enabled=signed_in)
        self.queries.register(USER_ACHIEVEMENTS, session.scoped(self._fetch_user_achievements), enabled=signed_in)

        session.on_identity_change(self._on_identity_change)

        for key in (BADGES, ACHIEVEMENTS, *USER_KEYS):
            self.queries[key].fetch()

    # =========================================================================
    # Collections
    # =========================================================================

    @property
    def badges(self) -> List[Badge]:
        return self.queries[BADGES].data

    @property
    def achievements(self) -> List[Achievement]:
        return self.queries[ACHIEVEMENTS].data

    @property
    def user_badges(self) -> List[UserBadge]:
        return self.queries[USER_BADGES].data

    @property
    def user_achievements(self) -> List[UserAchievementProgress]:
        return self.queries[USER_ACHIEVEMENTS].data

    @property
    def displayed_badges(self) -> List[UserBadge]:
        return [ub for ub in self.user_badges if ub.displayed]

    @property
    def is_loading(self) -> bool:
        return any(self.queries[key].is_loading for key in (BADGES, ACHIEVEMENTS, *USER_KEYS))

    @property
    def error(self) -> Optional[ClientError]:
        """First collection error, in catalog then user order"""
        for key in (BADGES, ACHIEVEMENTS, *USER_KEYS):
            if self.queries[key].error is not None:
                return self.queries[key].error
        return None

    @property
    def newly_completed(self) -> Optional[CompletedAchievement]:
        return self._newly_completed

    def clear_newly_completed(self) -> None:
        self._newly_completed = None

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_badge(self, badge_id: int) -> Optional[Badge]:
        return next((b for b in self.badges if b.id == badge_id), None)

    def get_achievement(self, achievement_id: int) -> Optional[Achievement]:
        return next((a for a in self.achievements if a.id == achievement_id), None)

    def get_user_badge(self, badge_id: int) -> Optional[UserBadge]:
        return next((ub for ub in self.user_badges if ub.badge_id == badge_id), None)

    def badge_progress(self, badge_id: int) -> int:
        user_badge = self.get_user_badge(badge_id)
        return user_badge.progress if user_badge else 0

    def achievement_progress(self, achievement_id: int) -> AchievementStatus:
        record = next((ua for ua in self.user_achievements if ua.achievement_id == achievement_id), None)
        progress = record.progress if record else 0
        completed = achievement_id in self._completed_ids or bool(record and record.completed)
        return AchievementStatus(progress=progress, completed=completed)

    # =========================================================================
    # Mutations
    # =========================================================================

    def set_badge_displayed(self, user_badge_id: int, displayed: bool) -> bool:
        """Show or hide a badge on the profile. Returns False on failure."""
        try:
            self._client.update_user_badge(user_badge_id, displayed)
        except ClientError as e:
            self._report_failure(f"Updating badge {user_badge_id}", e)
            return False

        self.queries.invalidate(USER_BADGES)
        self._notifier.success("Badge updated", "Your badge display preference has been updated.")
        return True

    def update_achievement_progress(
        self,
        achievement_id: int,
        progress: int,
        current_count: Optional[int] = None,
    ) -> Optional[ProgressUpdateResult]:
        try:
            result = self._client.update_achievement_progress(achievement_id, progress, current_count)
        except ClientError as e:
            self._report_failure(f"Updating achievement {achievement_id}", e)
            return None

        if result.completed:
            self._completed_ids.add(result.progress.achievement_id)
        self.queries.invalidate(USER_ACHIEVEMENTS)

        if result.completed and result.badge:
            completed = self._record_completion(result)
            self._notifier.success(
                "Achievement unlocked!",
                f'You have completed the "{completed.title}" achievement.',
            )
        return result

    def complete_achievement(self, achievement_id: int) -> Optional[ProgressUpdateResult]:
        """Mark an achievement complete directly (admin and testing shortcut)"""
        try:
            result = self._client.complete_achievement(
                achievement_id, test_mode=self._settings.achievement_test_mode
            )
        except ClientError as e:
            self._report_failure(f"Completing achievement {achievement_id}", e)
            return None

        self._completed_ids.add(result.progress.achievement_id)
        # completion can award a badge
        self.queries.invalidate(USER_ACHIEVEMENTS, USER_BADGES)

        completed = self._record_completion(result)
        self._notifier.success(
            "Achievement completed!",
            f'You have completed the "{completed.title}" achievement.',
        )
        return result

    def refresh(self) -> None:
        """Refetch user collections; no-op when signed out"""
        if not self._session.is_authenticated:
            return
        for key in USER_KEYS:
            self.queries[key].fetch()

    # =========================================================================
    # Internals
    # =========================================================================

    def _fetch_user_achievements(self) -> List[UserAchievementProgress]:
        records = self._client.get_user_achievements()
        self._completed_ids.update(r.achievement_id for r in records if r.completed)
        return records

    def _record_completion(self, result: ProgressUpdateResult) -> CompletedAchievement:
        achievement_id = result.progress.achievement_id
        completed = CompletedAchievement(
            achievement_id=achievement_id,
            badge=result.badge,
            achievement=self.get_achievement(achievement_id) or result.progress.achievement,
        )
        self._newly_completed = completed
        logger.info("Achievement %s completed", achievement_id)
        return completed

    def _report_failure(self, action: str, error: ClientError) -> None:
        logger.warning("%s failed: %s", action, error.message)
        self._notifier.error("Update failed", error.message)

    def _on_identity_change(self, previous: Optional[Identity], current: Optional[Identity]) -> None:
        for key in USER_KEYS:
            self.queries[key].reset()
        self._completed_ids.clear()
        self._newly_completed = None

        if current is None:
            self.queries.set_enabled(False, *USER_KEYS)
            return
        self.queries.set_enabled(True, *USER_KEYS)
        for key in USER_KEYS:
            self.queries[key].fetch()
