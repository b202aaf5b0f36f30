"""Domain model for user-facing alerts."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Alert:
    """A notification shown to the user."""

    title: str
    message: str
    raised_at: datetime
