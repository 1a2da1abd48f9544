from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time

from ...core.enums import Timeliness


@dataclass(frozen=True)
class TimelinessDecision:
    timeliness: Timeliness


class TimelinessStrategy(ABC):
    """Strategy Pattern: encapsulate how a check-in is classified."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, deadline: time) -> TimelinessDecision:
        raise NotImplementedError
