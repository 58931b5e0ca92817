"""
Progress reporting for long running transforms.

The engine reports coarse progress to a ProgressSink passed at construction.
Notifications are synchronous and never change the result of a transform.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from tqdm import tqdm


class ProgressSink(ABC):
    """Receiver of status and progress notifications."""

    @abstractmethod
    def status_changed(self, description: str) -> None:
        """Called when the algorithm enters a new phase."""

    @abstractmethod
    def progress_changed(self, current: int, total: int) -> None:
        """Called when `current` out of `total` steps of the phase are done."""


class NullProgress(ProgressSink):
    """Sink that ignores every notification."""

    def status_changed(self, description: str) -> None:
        pass

    def progress_changed(self, current: int, total: int) -> None:
        pass


class LoggingProgress(ProgressSink):
    """
    Sink forwarding notifications to a logger.

    Attributes:
        logger: Target logger (defaults to this module's logger)
        level: Logging level used for progress steps; status changes are
               logged at INFO or at `level` if higher
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level
        self._description = ""

    def status_changed(self, description: str) -> None:
        self._description = description
        self.logger.log(max(self.level, logging.INFO), description)

    def progress_changed(self, current: int, total: int) -> None:
        self.logger.log(self.level, f"{self._description} {current}/{total}")


class TqdmProgress(ProgressSink):
    """Sink drawing one tqdm progress bar per phase."""

    def __init__(self, **tqdm_kwargs):
        self._kwargs = tqdm_kwargs
        self._description = ""
        self._bar = None

    def status_changed(self, description: str) -> None:
        self.close()
        self._description = description

    def progress_changed(self, current: int, total: int) -> None:
        if self._bar is None:
            self._bar = tqdm(total=total, desc=self._description, **self._kwargs)

        if current >= total:
            # The phase is over, whatever the total of the final notification
            self._bar.update(self._bar.total - self._bar.n)
            self.close()
            return

        if current > self._bar.n:
            self._bar.update(current - self._bar.n)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
