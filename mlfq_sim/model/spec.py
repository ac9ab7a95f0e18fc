"""Workload and scheduler configuration models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


LEVEL_COUNT = 3
NULL_PROCESS_ID = 0


class BehaviorSpec(BaseModel):
    """One cpu-burst/io-wait cycle, repeated ``repeats`` times."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cpu_time: int = Field(ge=1)
    io_time: int = Field(ge=0)
    repeats: int = Field(ge=1)


class ProcessSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int = Field(ge=1)
    arrival_tick: int = Field(ge=0)
    behaviors: list[BehaviorSpec] = Field(min_length=1)

    @property
    def total_cpu_demand(self) -> int:
        return sum(behavior.cpu_time * behavior.repeats for behavior in self.behaviors)


class WorkloadSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    processes: list[ProcessSpec] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "WorkloadSpec":
        seen: set[int] = set()
        for process in self.processes:
            if process.id in seen:
                raise ValueError(f"duplicate process id {process.id}")
            seen.add(process.id)
        return self


class SchedulerConfig(BaseModel):
    """Per-level ceilings. ``None`` means the level has no ceiling."""

    model_config = ConfigDict(extra="forbid")

    quantum: list[int] = Field(default_factory=lambda: [10, 30, 100])
    promotion: list[Optional[int]] = Field(default_factory=lambda: [None, 2, 1])
    demotion: list[Optional[int]] = Field(default_factory=lambda: [1, 2, None])
    max_ticks: Optional[int] = Field(default=None, ge=1)

    @field_validator("quantum")
    @classmethod
    def validate_quantum(cls, value: list[int]) -> list[int]:
        if len(value) != LEVEL_COUNT:
            raise ValueError(f"quantum must define exactly {LEVEL_COUNT} levels")
        if any(item < 1 for item in value):
            raise ValueError("quantum entries must be >= 1")
        return value

    @field_validator("promotion", "demotion")
    @classmethod
    def validate_ceilings(cls, value: list[Optional[int]]) -> list[Optional[int]]:
        if len(value) != LEVEL_COUNT:
            raise ValueError(f"ceiling table must define exactly {LEVEL_COUNT} levels")
        if any(item is not None and item < 1 for item in value):
            raise ValueError("ceiling entries must be >= 1 or null")
        return value
