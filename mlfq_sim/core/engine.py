"""SimPy-clocked multilevel feedback queue engine."""

from __future__ import annotations

from typing import Callable, Union

import simpy

from mlfq_sim.events import EventBus, EventType, SimEvent
from mlfq_sim.metrics import IMetric, UsageMetrics
from mlfq_sim.model import (
    LEVEL_COUNT,
    ProcessState,
    SchedulerConfig,
    UsageRecord,
    WorkloadSpec,
)

from .interfaces import ISchedulerEngine
from .queue import OrderedQueue


MAX_PRIORITY = 0
MIN_PRIORITY = LEVEL_COUNT - 1


class SimulationError(RuntimeError):
    """Engine misuse or a run exceeding its configured horizon."""


def _process_queue(name: str) -> OrderedQueue[ProcessState]:
    return OrderedQueue(lambda process: process.pid, strict=True, name=name)


def build_pending_queue(workload: WorkloadSpec) -> OrderedQueue[ProcessState]:
    """Turn a parsed workload into the arrival-ordered admission queue."""
    pending = _process_queue("pending")
    for spec in workload.processes:
        pending.insert(ProcessState.from_spec(spec), spec.arrival_tick)
    return pending


class MLFQEngine(ISchedulerEngine):
    """Three-level feedback scheduler driven one tick at a time.

    The engine owns four queues: ``pending`` keyed by arrival tick, ``ready``
    keyed by priority level, ``blocked`` keyed by I/O due tick and
    ``completed`` keyed by lifetime CPU usage. Each tick runs admission, the
    dispatch scan, execution of the ready head and a clock advance, in that
    order. Idle ticks are charged to the null process.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        metrics: list[IMetric] | None = None,
    ) -> None:
        self._config = config or SchedulerConfig()
        self._metrics = metrics or [UsageMetrics()]
        self._subscribers: list[Callable[[SimEvent], None]] = []

        self._env = simpy.Environment()
        self._event_bus = EventBus()
        self._events: list[SimEvent] = []
        self._setup_event_pipeline()

        self._pending = _process_queue("pending")
        self._ready = _process_queue("ready")
        self._blocked = _process_queue("blocked")
        self._completed: OrderedQueue[UsageRecord] = OrderedQueue(
            lambda record: record.pid, strict=True, name="completed"
        )
        self._null = ProcessState.null()

        self._built = False
        self._shut_down = False

    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        if handler in self._subscribers:
            return
        self._subscribers.append(handler)
        self._event_bus.subscribe(handler)

    def build(self, workload: Union[WorkloadSpec, OrderedQueue[ProcessState]]) -> None:
        self.reset()
        if isinstance(workload, OrderedQueue):
            self._pending = workload
        else:
            self._pending = build_pending_queue(workload)
        self._built = True

    def reset(self) -> None:
        self._env = simpy.Environment()
        for metric in self._metrics:
            metric.reset()
        self._event_bus = EventBus()
        self._events = []
        self._setup_event_pipeline()

        self._pending = _process_queue("pending")
        self._ready = _process_queue("ready")
        self._blocked = _process_queue("blocked")
        self._completed = OrderedQueue(lambda record: record.pid, strict=True, name="completed")
        self._null = ProcessState.null()
        self._built = False
        self._shut_down = False

    def active(self) -> bool:
        return bool(self._pending) or bool(self._ready) or bool(self._blocked)

    def run(self) -> None:
        self._require_built("run")
        while self.active():
            self.step()
        self.shutdown()

    def step(self) -> None:
        self._require_built("step")
        self.admit_ready_units()
        self.advance_ready_head()
        self.advance_clock()
        self.tick()

    def admit_ready_units(self) -> None:
        now = self.now
        while self._pending and self._pending.front_key() <= now:
            process = self._pending.pop_front()
            process.priority_level = MAX_PRIORITY
            process.quanta_since_scheduled = 0
            self._ready.insert(process, MAX_PRIORITY)
            self._publish(EventType.CREATE, process)

        while self._blocked and self._blocked.front_key() <= now:
            process = self._blocked.pop_front()
            process.quanta_since_scheduled = 0
            self._ready.insert(process, process.priority_level)
            self._publish(
                EventType.QUEUED,
                process,
                level=process.priority_level + 1,
                payload={"reason": "io_complete"},
            )

    def advance_ready_head(self) -> None:
        """Rotate the ready queue until its head is eligible to run this tick."""
        while self._ready:
            process = self._ready.peek_front()
            level = self._ready.front_key()
            behavior = process.current_behavior

            if process.repeats_done >= behavior.repeats and not process.on_last_behavior:
                process.behaviors.popleft()
                process.repeats_done = 0
                process.units_in_burst = 0
                self._ready.update_front(process)
                continue

            if self._final_burst_served(process):
                self._terminate_head()
                continue

            if process.units_in_burst >= behavior.cpu_time:
                self._block_head_for_io()
                continue

            if process.quanta_since_scheduled >= self._config.quantum[level]:
                self._requeue_expired_head()
                continue

            if process.units_in_burst == 0:
                self._publish(
                    EventType.RUN,
                    process,
                    level=level + 1,
                    payload={"remaining": process.remaining_in_burst},
                )
            return

    def advance_clock(self) -> None:
        """Charge the current tick to the ready head, or to the null process."""
        if self._ready:
            current = self._ready.peek_front()
            current.units_in_burst += 1
            current.quanta_since_scheduled += 1
            current.total_cpu_usage += 1
            self._ready.update_front(current)
        elif self.active():
            self._null.total_cpu_usage += 1

    def tick(self) -> None:
        if not self.active():
            # The last process finished during this tick's scan; nothing ran.
            return
        timeout = self._env.timeout(1)
        self._env.run(until=timeout)
        max_ticks = self._config.max_ticks
        if max_ticks is not None and self.now >= max_ticks and self.active():
            raise SimulationError(f"simulation exceeded max_ticks={max_ticks}")

    def shutdown(self) -> None:
        if self._shut_down:
            return
        self._pending.clear()
        self._ready.clear()
        self._blocked.clear()
        if self._null.total_cpu_usage > 0:
            self._completed.insert(
                UsageRecord(pid=self._null.pid, total_cpu_usage=self._null.total_cpu_usage),
                self._null.total_cpu_usage,
            )
        self._event_bus.publish(
            event_type=EventType.SHUTDOWN,
            time=self.now,
            payload={
                "idle_ticks": self._null.total_cpu_usage,
                "processes_finished": sum(1 for record in self._completed if not record.is_null),
            },
        )
        self._shut_down = True

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    @property
    def events(self) -> list[SimEvent]:
        return list(self._events)

    @property
    def now(self) -> int:
        return int(self._env.now)

    @property
    def idle_ticks(self) -> int:
        return self._null.total_cpu_usage

    def report(self) -> list[UsageRecord]:
        return list(self._completed)

    def queue_snapshot(self) -> dict[str, list[int]]:
        return {
            "pending": [process.pid for process in self._pending],
            "ready": [process.pid for process in self._ready],
            "blocked": [process.pid for process in self._blocked],
            "completed": [record.pid for record in self._completed],
        }

    def ready_levels(self) -> list[tuple[int, int]]:
        return [(level, process.pid) for level, process in self._ready.items()]

    def metric_report(self) -> dict:
        merged: dict = {}
        for metric in self._metrics:
            merged.update(metric.report())
        return merged

    def _setup_event_pipeline(self) -> None:
        self._event_bus.subscribe(self._events.append)
        for metric in self._metrics:
            self._event_bus.subscribe(metric.consume)
        for handler in self._subscribers:
            self._event_bus.subscribe(handler)

    def _require_built(self, action: str) -> None:
        if not self._built:
            raise SimulationError(f"build() must be called before {action}()")

    def _publish(
        self,
        event_type: EventType,
        process: ProcessState,
        *,
        level: int | None = None,
        payload: dict | None = None,
    ) -> SimEvent:
        return self._event_bus.publish(
            event_type=event_type,
            time=self.now,
            process_id=process.pid,
            level=level,
            payload=payload,
        )

    @staticmethod
    def _final_burst_served(process: ProcessState) -> bool:
        if not process.on_last_behavior:
            return False
        behavior = process.current_behavior
        if process.repeats_done + 1 < behavior.repeats:
            return False
        return process.units_in_burst >= max(behavior.cpu_time, 1)

    def _terminate_head(self) -> None:
        process = self._ready.pop_front()
        process.behaviors.clear()
        record = UsageRecord(pid=process.pid, total_cpu_usage=process.total_cpu_usage)
        self._completed.insert(record, record.total_cpu_usage)
        self._publish(
            EventType.FINISHED,
            process,
            payload={"total_cpu_usage": process.total_cpu_usage},
        )

    def _block_head_for_io(self) -> None:
        level = self._ready.front_key()
        process = self._ready.pop_front()
        behavior = process.current_behavior

        process.repeats_done += 1
        process.promotion_count += 1
        process.demotion_count = 0

        promoted = False
        ceiling = self._config.promotion[level]
        if ceiling is not None and process.promotion_count >= ceiling:
            process.promotion_count = 0
            if level > MAX_PRIORITY:
                level -= 1
                promoted = True

        process.priority_level = level
        process.units_in_burst = 0
        process.quanta_since_scheduled = 0

        due = self.now + behavior.io_time
        self._blocked.insert(process, due)
        self._publish(
            EventType.IO,
            process,
            level=level + 1,
            payload={"due": due, "promoted": promoted},
        )

    def _requeue_expired_head(self) -> None:
        level = self._ready.front_key()
        process = self._ready.pop_front()

        process.demotion_count += 1
        process.promotion_count = 0
        process.quanta_since_scheduled = 0

        demoted = False
        ceiling = self._config.demotion[level]
        if ceiling is not None and process.demotion_count >= ceiling:
            process.demotion_count = 0
            if level < MIN_PRIORITY:
                level += 1
                demoted = True

        process.priority_level = level
        self._ready.insert(process, level)
        self._publish(
            EventType.QUEUED,
            process,
            level=level + 1,
            payload={"reason": "quantum_expired", "demoted": demoted},
        )
