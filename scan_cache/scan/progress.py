"""Progress reporting for scans.

The graph scan endpoint reports no partial progress, so a scan only ever
marks its indicator indeterminate and then complete.
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich.progress import Progress, TaskID


class ProgressIndicator(ABC):
    """Abstract progress indicator driven by a scan."""

    @abstractmethod
    def set_indeterminate(self, indeterminate: bool) -> None:
        """Switch between indeterminate and fraction-based progress."""

    @abstractmethod
    def set_fraction(self, fraction: float) -> None:
        """Set completion as a fraction between 0.0 and 1.0."""


class NullProgressIndicator(ProgressIndicator):
    """Indicator that discards all updates."""

    def set_indeterminate(self, indeterminate: bool) -> None:
        pass

    def set_fraction(self, fraction: float) -> None:
        pass


class RichProgressIndicator(ProgressIndicator):
    """Indicator backed by a task of a Rich progress display."""

    def __init__(self, progress: Progress, description: str) -> None:
        self._progress = progress
        self._task_id: TaskID = progress.add_task(description, total=None)
        self._fraction: Optional[float] = None

    def set_indeterminate(self, indeterminate: bool) -> None:
        if indeterminate:
            self._progress.update(self._task_id, total=None)
        else:
            self._progress.update(
                self._task_id, total=1.0, completed=self._fraction or 0.0
            )

    def set_fraction(self, fraction: float) -> None:
        self._fraction = min(max(fraction, 0.0), 1.0)
        self._progress.update(self._task_id, total=1.0, completed=self._fraction)
