"""Text rendering of event log lines and the final usage report."""

from __future__ import annotations

from typing import Iterable, TextIO

from mlfq_sim.events import EventType, SimEvent
from mlfq_sim.model import UsageRecord


NULL_LABEL = "<<null>>"
REPORT_HEADER = "\nTotal CPU usage for all processes scheduled:\n"


def format_event(event: SimEvent) -> str:
    pid = event.process_id
    now = event.time
    if event.type == EventType.CREATE:
        return f"CREATE:\tProcess {pid} entered the ready queue at time {now}."
    if event.type == EventType.QUEUED:
        return f"QUEUED:\tProcess {pid} queued at level {event.level} at time {now}."
    if event.type == EventType.RUN:
        remaining = event.payload.get("remaining", 0)
        return (
            f"RUN:\tProcess {pid} started execution from level {event.level} at time {now}; "
            f"wants to execute for {remaining} ticks."
        )
    if event.type == EventType.IO:
        return f"I/O:\tProcess {pid} blocked for I/O at time {now}."
    if event.type == EventType.FINISHED:
        return f"FINISHED:\tProcess {pid} finished at time {now}."
    return f"Scheduler shutdown at time {now}."


def format_report(records: Iterable[UsageRecord]) -> str:
    lines = [REPORT_HEADER]
    for record in records:
        label = NULL_LABEL if record.is_null else str(record.pid)
        lines.append(f"Process {label} :\t{record.total_cpu_usage} time units.")
    return "\n".join(lines) + "\n"


class EventLogWriter:
    """Event handler writing one formatted line per event to a stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def __call__(self, event: SimEvent) -> None:
        self._stream.write(format_event(event) + "\n")
