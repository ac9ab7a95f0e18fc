"""Default metrics implementation."""

from __future__ import annotations

from collections import defaultdict

from mlfq_sim.events import EventType, SimEvent

from .base import IMetric


class UsageMetrics(IMetric):
    """Aggregate scheduling statistics from the event stream."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._created: set[int] = set()
        self._finished: set[int] = set()
        self._level_dispatch: dict[int, int] = defaultdict(int)
        self._run_count = 0
        self._io_block_count = 0
        self._requeue_count = 0
        self._demotion_count = 0
        self._promotion_count = 0
        self._event_count = 0
        self._idle_ticks = 0
        self._final_tick = 0

    def consume(self, event: SimEvent) -> None:
        self._event_count += 1
        self._final_tick = max(self._final_tick, event.time)

        if event.type == EventType.CREATE and event.process_id is not None:
            self._created.add(event.process_id)

        elif event.type == EventType.RUN:
            self._run_count += 1
            if event.level is not None:
                self._level_dispatch[event.level] += 1

        elif event.type == EventType.IO:
            self._io_block_count += 1
            if event.payload.get("promoted"):
                self._promotion_count += 1

        elif event.type == EventType.QUEUED:
            if event.payload.get("reason") == "quantum_expired":
                self._requeue_count += 1
                if event.payload.get("demoted"):
                    self._demotion_count += 1

        elif event.type == EventType.FINISHED and event.process_id is not None:
            self._finished.add(event.process_id)

        elif event.type == EventType.SHUTDOWN:
            idle = event.payload.get("idle_ticks")
            if isinstance(idle, int):
                self._idle_ticks = idle

    def report(self) -> dict:
        busy = self._final_tick - self._idle_ticks
        return {
            "processes_created": len(self._created),
            "processes_finished": len(self._finished),
            "run_count": self._run_count,
            "io_block_count": self._io_block_count,
            "requeue_count": self._requeue_count,
            "demotion_count": self._demotion_count,
            "promotion_count": self._promotion_count,
            "idle_ticks": self._idle_ticks,
            "final_tick": self._final_tick,
            "cpu_utilization": busy / self._final_tick if self._final_tick > 0 else 0.0,
            "event_count": self._event_count,
            "level_dispatch": {str(level): n for level, n in sorted(self._level_dispatch.items())},
        }
