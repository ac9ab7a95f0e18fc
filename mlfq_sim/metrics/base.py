"""Metric consumer interface for the scheduler event stream."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mlfq_sim.events import SimEvent


class IMetric(ABC):
    """Folds the engine's ``SimEvent`` stream into a run summary.

    Metrics are subscribed to the engine's event bus and see every event in
    publication order, ending with ``SHUTDOWN``.
    """

    @abstractmethod
    def consume(self, event: SimEvent) -> None:
        """Account for one scheduler event (create, queue, run, I/O, finish, shutdown)."""

    @abstractmethod
    def report(self) -> dict:
        """JSON-serialisable summary; keys are merged into ``MLFQEngine.metric_report``."""

    @abstractmethod
    def reset(self) -> None:
        """Drop accumulated counts; called when the engine is reset or rebuilt."""
