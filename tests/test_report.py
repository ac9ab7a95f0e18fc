from __future__ import annotations

import io

from mlfq_sim.events import EventBus, EventType
from mlfq_sim.io import EventLogWriter, format_event, format_report
from mlfq_sim.model import UsageRecord


def test_format_event_lines() -> None:
    bus = EventBus()
    create = bus.publish(event_type=EventType.CREATE, time=0, process_id=1)
    queued = bus.publish(event_type=EventType.QUEUED, time=10, process_id=1, level=2)
    run = bus.publish(
        event_type=EventType.RUN, time=0, process_id=1, level=1, payload={"remaining": 4}
    )
    blocked = bus.publish(event_type=EventType.IO, time=4, process_id=1, level=1)
    finished = bus.publish(event_type=EventType.FINISHED, time=4, process_id=1)
    shutdown = bus.publish(event_type=EventType.SHUTDOWN, time=4)

    assert format_event(create) == "CREATE:\tProcess 1 entered the ready queue at time 0."
    assert format_event(queued) == "QUEUED:\tProcess 1 queued at level 2 at time 10."
    assert format_event(run) == (
        "RUN:\tProcess 1 started execution from level 1 at time 0; wants to execute for 4 ticks."
    )
    assert format_event(blocked) == "I/O:\tProcess 1 blocked for I/O at time 4."
    assert format_event(finished) == "FINISHED:\tProcess 1 finished at time 4."
    assert format_event(shutdown) == "Scheduler shutdown at time 4."


def test_format_report_labels_null_process() -> None:
    text = format_report([UsageRecord(pid=0, total_cpu_usage=3), UsageRecord(pid=1, total_cpu_usage=4)])
    assert text == (
        "\nTotal CPU usage for all processes scheduled:\n\n"
        "Process <<null>> :\t3 time units.\n"
        "Process 1 :\t4 time units.\n"
    )


def test_event_log_writer_appends_lines() -> None:
    stream = io.StringIO()
    bus = EventBus()
    bus.subscribe(EventLogWriter(stream))
    bus.publish(event_type=EventType.CREATE, time=2, process_id=5)
    bus.publish(event_type=EventType.SHUTDOWN, time=9)

    assert stream.getvalue().splitlines() == [
        "CREATE:\tProcess 5 entered the ready queue at time 2.",
        "Scheduler shutdown at time 9.",
    ]


def test_event_bus_assigns_sequential_ids() -> None:
    bus = EventBus()
    first = bus.publish(event_type=EventType.CREATE, time=0, process_id=1)
    second = bus.publish(event_type=EventType.CREATE, time=0, process_id=2)
    assert (first.event_id, first.seq) == ("evt-00000000", 0)
    assert (second.event_id, second.seq) == ("evt-00000001", 1)
    bus.reset()
    assert bus.publish(event_type=EventType.SHUTDOWN, time=0).seq == 0
