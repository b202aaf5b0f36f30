"""Profile and daily goal persistence."""

import logging
import re
from dataclasses import dataclass

from calorie_tracker.domain.profile import UserProfile
from calorie_tracker.services.storage import PROFILE_KEY, JsonStorage

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")
_NON_DECIMAL = re.compile(r"[^0-9.]")
_DECIMAL_PREFIX = re.compile(r"\d*\.?\d*")

INTEGER_FIELDS: tuple[str, ...] = ("age", "calories")
DECIMAL_FIELDS: tuple[str, ...] = ("weight", "protein", "carbs", "fats")


@dataclass(frozen=True)
class ProfileForm:
    """Raw text entered on the settings form."""

    name: str = ""
    age: str = ""
    weight: str = ""
    calories: str = ""
    protein: str = ""
    carbs: str = ""
    fats: str = ""


def filter_integer_text(text: str) -> str:
    """Keep digits only."""
    return _NON_DIGITS.sub("", text)


def filter_decimal_text(text: str) -> str:
    """Keep digits and one decimal point, stopping at a second point."""
    cleaned = _NON_DECIMAL.sub("", text)
    match = _DECIMAL_PREFIX.match(cleaned)
    return match.group(0) if match else ""


def parse_integer(text: str) -> int | None:
    cleaned = filter_integer_text(text)
    return int(cleaned) if cleaned else None


def parse_decimal(text: str) -> float | None:
    cleaned = filter_decimal_text(text)
    if cleaned in {"", "."}:
        return None
    return float(cleaned)


def profile_from_form(form: ProfileForm) -> UserProfile:
    """Filter and parse the form; empty numeric fields become absent.

    No range checks are applied, so zero or implausible values are kept.
    """
    return UserProfile(
        name=form.name,
        age=parse_integer(form.age),
        weight=parse_decimal(form.weight),
        calories=parse_integer(form.calories),
        protein=parse_decimal(form.protein),
        carbs=parse_decimal(form.carbs),
        fats=parse_decimal(form.fats),
    )


def form_from_profile(profile: UserProfile | None) -> ProfileForm:
    """Render a stored profile back into editable text."""
    if profile is None:
        return ProfileForm()
    values = {}
    for field_name in (*INTEGER_FIELDS, *DECIMAL_FIELDS):
        value = getattr(profile, field_name)
        values[field_name] = _format_number(value) if value else ""
    return ProfileForm(name=profile.name, **values)


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class ProfileService:
    """Loads and saves the user profile."""

    storage: JsonStorage

    async def load_profile(self) -> UserProfile | None:
        """Return the stored profile, or None when absent or malformed."""
        payload = await self.storage.load_json(PROFILE_KEY, None)
        if not isinstance(payload, dict):
            return None
        return UserProfile.from_payload(payload)

    async def save_profile(self, form: ProfileForm) -> UserProfile:
        """Parse the form and persist the resulting profile."""
        profile = profile_from_form(form)
        await self.storage.save_json(PROFILE_KEY, profile.to_payload())
        logger.info("Profile saved")
        return profile

    async def needs_onboarding(self) -> bool:
        return await self.load_profile() is None
