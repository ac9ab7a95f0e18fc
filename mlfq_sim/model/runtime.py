"""Runtime types shared across the scheduler engine and reporting."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from .spec import NULL_PROCESS_ID, BehaviorSpec, ProcessSpec


@dataclass(slots=True)
class ProcessState:
    """Engine-internal mutable state for one scheduling unit."""

    pid: int
    arrival_tick: int
    behaviors: deque[BehaviorSpec] = field(default_factory=deque)
    priority_level: int = 0
    units_in_burst: int = 0
    quanta_since_scheduled: int = 0
    repeats_done: int = 0
    promotion_count: int = 0
    demotion_count: int = 0
    total_cpu_usage: int = 0

    @classmethod
    def from_spec(cls, spec: ProcessSpec) -> "ProcessState":
        return cls(pid=spec.id, arrival_tick=spec.arrival_tick, behaviors=deque(spec.behaviors))

    @classmethod
    def null(cls) -> "ProcessState":
        return cls(pid=NULL_PROCESS_ID, arrival_tick=0)

    @property
    def current_behavior(self) -> BehaviorSpec:
        return self.behaviors[0]

    @property
    def on_last_behavior(self) -> bool:
        return len(self.behaviors) == 1

    @property
    def remaining_in_burst(self) -> int:
        return max(0, self.current_behavior.cpu_time - self.units_in_burst)


@dataclass(slots=True, frozen=True)
class UsageRecord:
    pid: int
    total_cpu_usage: int

    @property
    def is_null(self) -> bool:
        return self.pid == NULL_PROCESS_ID
