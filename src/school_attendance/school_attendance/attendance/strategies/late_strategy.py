from __future__ import annotations

from datetime import datetime, time

from ...core.enums import Timeliness
from .base import TimelinessDecision, TimelinessStrategy


class LateStrategy(TimelinessStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: datetime, deadline: time) -> TimelinessDecision:
        return TimelinessDecision(timeliness=Timeliness.LATE)
