"""Simulation event definitions."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    CREATE = "Create"
    QUEUED = "Queued"
    RUN = "Run"
    IO = "IO"
    FINISHED = "Finished"
    SHUTDOWN = "Shutdown"


class SimEvent(BaseModel):
    """Normalized event envelope for tracing and metrics."""

    model_config = ConfigDict(extra="forbid")

    event_id: str
    seq: int = Field(ge=0)
    time: int = Field(ge=0)
    type: EventType
    process_id: Optional[int] = None
    level: Optional[int] = Field(default=None, ge=1)
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False)
