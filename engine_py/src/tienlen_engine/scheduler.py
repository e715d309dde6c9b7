"""Delayed callback scheduling for AI turns and post-game resets"""

import threading
from abc import ABC, abstractmethod
from typing import Callable


class Scheduler(ABC):
    """Runs a callback after a delay. The callback must not be run inline."""

    @abstractmethod
    def after(self, ms: float, fn: Callable[[], None]):
        pass


class TimerScheduler(Scheduler):
    """One daemon threading.Timer per callback."""

    def after(self, ms: float, fn: Callable[[], None]):
        timer = threading.Timer(max(ms, 0) / 1000.0, fn)
        timer.daemon = True
        timer.start()
        return timer
