"""User-facing alert delivery."""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from calorie_tracker.domain.alerts import Alert

logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    """Presents a notification to the user."""

    def alert(self, title: str, message: str) -> None:
        """Show a titled message."""


@dataclass
class InMemoryAlertFeed(AlertSink):
    """Keeps the most recent alerts until the presentation layer drains them."""

    _alerts: deque[Alert]

    def __init__(self, max_size: int = 50) -> None:
        self._alerts = deque(maxlen=max_size)

    def alert(self, title: str, message: str) -> None:
        """Record an alert and log it."""
        logger.info("Alert raised: %s: %s", title, message)
        self._alerts.append(
            Alert(title=title, message=message, raised_at=datetime.now(tz=UTC))
        )

    def pending(self) -> list[Alert]:
        """Return queued alerts without removing them."""
        return list(self._alerts)

    def drain(self) -> list[Alert]:
        """Return and remove all queued alerts."""
        alerts = list(self._alerts)
        self._alerts.clear()
        return alerts
