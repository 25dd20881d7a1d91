"""Progress reporting for collection transfers."""

from abc import ABC, abstractmethod
from typing import Optional

from tqdm import tqdm


class ProgressReporter(ABC):
    """
    Receives progress events for one collection at a time.

    The orchestrator calls ``start`` before the first batch, ``advance``
    after every batch commit with the cumulative count, and ``stop`` once
    the collection is finished, whatever the outcome.
    """

    @abstractmethod
    def start(self, total: int, label: str) -> None:
        pass

    @abstractmethod
    def advance(self, count: int) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass


class NullProgressReporter(ProgressReporter):
    """Reporter used when progress display is disabled."""

    def start(self, total: int, label: str) -> None:
        pass

    def advance(self, count: int) -> None:
        pass

    def stop(self) -> None:
        pass


class TqdmProgressReporter(ProgressReporter):
    """Renders one tqdm bar per collection."""

    def __init__(self, **tqdm_kwargs):
        self.tqdm_kwargs = tqdm_kwargs
        self._bar: Optional[tqdm] = None

    def start(self, total: int, label: str) -> None:
        self.stop()
        self._bar = tqdm(total=total, desc=label, unit="docs", **self.tqdm_kwargs)

    def advance(self, count: int) -> None:
        if self._bar is None:
            return
        # count is cumulative; tqdm wants the increment
        delta = count - self._bar.n
        if delta > 0:
            self._bar.update(delta)

    def stop(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def create_reporter(show_progress: bool) -> ProgressReporter:
    """Pick the reporter for a run."""
    if show_progress:
        return TqdmProgressReporter()
    return NullProgressReporter()
