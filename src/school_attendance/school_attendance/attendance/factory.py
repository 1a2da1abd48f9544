from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..common.datetime_utils import to_local
from .strategies.base import TimelinessStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


def is_late(now: datetime, deadline: time) -> bool:
    """Strictly after the deadline, compared on local hour and minute only."""
    local = to_local(now)
    return local.hour > deadline.hour or (local.hour == deadline.hour and local.minute > deadline.minute)


@dataclass
class TimelinessStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on the school's deadline."""

    def for_checkin(self, *, now: datetime, deadline: time) -> TimelinessStrategy:
        if is_late(now, deadline):
            return LateStrategy()
        return OnTimeStrategy()
