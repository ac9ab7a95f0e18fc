"""Model package exports."""

from .runtime import ProcessState, UsageRecord
from .spec import (
    LEVEL_COUNT,
    NULL_PROCESS_ID,
    BehaviorSpec,
    ProcessSpec,
    SchedulerConfig,
    WorkloadSpec,
)

__all__ = [
    "BehaviorSpec",
    "LEVEL_COUNT",
    "NULL_PROCESS_ID",
    "ProcessSpec",
    "ProcessState",
    "SchedulerConfig",
    "UsageRecord",
    "WorkloadSpec",
]
