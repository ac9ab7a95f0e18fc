"""Scheduler engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from mlfq_sim.events import SimEvent
from mlfq_sim.model import WorkloadSpec


class ISchedulerEngine(ABC):
    """Tick-driven scheduler engine contract."""

    @abstractmethod
    def build(self, workload: WorkloadSpec) -> None:
        """Build internal runtime state from a workload."""

    @abstractmethod
    def active(self) -> bool:
        """Return whether any process is pending, ready or blocked."""

    @abstractmethod
    def step(self) -> None:
        """Run exactly one simulation tick."""

    @abstractmethod
    def run(self) -> None:
        """Run until the workload is exhausted, then shut down."""

    @abstractmethod
    def reset(self) -> None:
        """Reset engine state."""

    @abstractmethod
    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        """Subscribe event handler."""
