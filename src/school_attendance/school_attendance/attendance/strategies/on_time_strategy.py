from __future__ import annotations

from datetime import datetime, time

from ...core.enums import Timeliness
from .base import TimelinessDecision, TimelinessStrategy


class OnTimeStrategy(TimelinessStrategy):
    """Check-in up to and including the deadline minute."""

    def decide_checkin(self, *, now: datetime, deadline: time) -> TimelinessDecision:
        return TimelinessDecision(timeliness=Timeliness.ON_TIME)
