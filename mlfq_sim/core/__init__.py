"""Simulation core exports."""

from .engine import MLFQEngine, SimulationError, build_pending_queue
from .interfaces import ISchedulerEngine
from .queue import DuplicateItemError, EmptyQueueError, OrderedQueue, QueueError

__all__ = [
    "DuplicateItemError",
    "EmptyQueueError",
    "ISchedulerEngine",
    "MLFQEngine",
    "OrderedQueue",
    "QueueError",
    "SimulationError",
    "build_pending_queue",
]
