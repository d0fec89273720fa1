from abc import ABC, abstractmethod
from datetime import datetime

from src.domain.base import utcnow


class Clock(ABC):
    """Source of the current time; injected so expiry logic can be tested"""

    @abstractmethod
    def now(self) -> datetime:
        """Current naive UTC time"""
        pass


class SystemClock(Clock):
    def now(self) -> datetime:
        return utcnow()
