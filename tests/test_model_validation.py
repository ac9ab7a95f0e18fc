from __future__ import annotations

import pytest
from pydantic import ValidationError

from mlfq_sim.model import BehaviorSpec, ProcessSpec, ProcessState, UsageRecord, WorkloadSpec


def _process(pid: int, arrival: int = 0) -> ProcessSpec:
    return ProcessSpec(id=pid, arrival_tick=arrival, behaviors=[BehaviorSpec(cpu_time=2, io_time=1, repeats=3)])


def test_workload_rejects_duplicate_ids() -> None:
    with pytest.raises(ValidationError, match="duplicate process id 4"):
        WorkloadSpec(processes=[_process(4), _process(5), _process(4, arrival=9)])


def test_process_requires_behaviors() -> None:
    with pytest.raises(ValidationError):
        ProcessSpec(id=1, arrival_tick=0, behaviors=[])


def test_behavior_is_immutable() -> None:
    behavior = BehaviorSpec(cpu_time=1, io_time=0, repeats=1)
    with pytest.raises(ValidationError):
        behavior.cpu_time = 5  # type: ignore[misc]


def test_process_state_from_spec_copies_behaviors() -> None:
    spec = _process(3, arrival=7)
    state = ProcessState.from_spec(spec)

    assert (state.pid, state.arrival_tick, state.priority_level) == (3, 7, 0)
    assert state.on_last_behavior
    assert state.remaining_in_burst == 2
    state.behaviors.clear()
    assert len(spec.behaviors) == 1


def test_null_usage_record() -> None:
    assert UsageRecord(pid=0, total_cpu_usage=1).is_null
    assert not UsageRecord(pid=2, total_cpu_usage=1).is_null
