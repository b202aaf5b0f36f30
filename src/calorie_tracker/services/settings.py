"""Settings view actions: profile editing and data resets."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from calorie_tracker.domain.errors import StorageError
from calorie_tracker.domain.profile import UserProfile
from calorie_tracker.services.alerts import AlertSink
from calorie_tracker.services.profiles import ProfileForm, ProfileService
from calorie_tracker.services.reconciler import ReconcilerService

logger = logging.getLogger(__name__)


@dataclass
class SettingsService:
    """Wraps profile and reset operations with user-facing alerts."""

    profile_service: ProfileService
    reconciler: ReconcilerService
    alerts: AlertSink

    async def load_profile(self) -> UserProfile | None:
        try:
            return await self.profile_service.load_profile()
        except StorageError:
            logger.exception("Failed to load profile")
            self.alerts.alert("Error", "Failed to load profile")
            return None

    async def save_profile(self, form: ProfileForm) -> UserProfile | None:
        """Persist the profile; returns None when the write failed."""
        try:
            profile = await self.profile_service.save_profile(form)
        except StorageError:
            logger.exception("Failed to save profile")
            self.alerts.alert("Error", "Failed to save data")
            return None
        self.alerts.alert("Success", "Profile updated successfully")
        return profile

    async def reset_history(self) -> bool:
        return await self._run_reset(
            self.reconciler.reset_history, "Failed to reset calorie history"
        )

    async def reset_meals(self) -> bool:
        return await self._run_reset(
            self.reconciler.reset_meals, "Failed to reset meal data"
        )

    async def reset_all(self) -> bool:
        """Clear every stored key and notify the user."""
        done = await self._run_reset(self.reconciler.reset_all, "Failed to reset data")
        if done:
            self.alerts.alert("Data Reset", "All data has been reset.")
        return done

    async def _run_reset(
        self, action: Callable[[], Awaitable[None]], failure_message: str
    ) -> bool:
        try:
            await action()
        except StorageError:
            logger.exception(failure_message)
            self.alerts.alert("Error", failure_message)
            return False
        return True
