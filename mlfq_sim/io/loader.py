"""Workload trace parsing."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from pydantic import ValidationError

from mlfq_sim.model import BehaviorSpec, ProcessSpec, WorkloadSpec


FIELDS_PER_RECORD = 5
FIELD_NAMES = ("arrival_tick", "id", "cpu_time", "io_time", "repeats")


class WorkloadError(Exception):
    """Workload trace loading/validation error."""


class WorkloadLoader:
    """Parse ``arrival id cpu_time io_time repeats`` quintuples into a workload.

    Consecutive records sharing an id extend that process's behaviour list;
    the first record's arrival tick is the process arrival. An id that shows
    up again after another id is treated as a duplicate process.
    """

    def load(self, path: str) -> WorkloadSpec:
        input_path = Path(path)
        if not input_path.exists():
            raise WorkloadError(f"workload file not found: {path}")
        try:
            text = input_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise WorkloadError(f"cannot read workload file {path}: {exc}") from exc
        return self.parse(text)

    def load_stream(self, stream: TextIO) -> WorkloadSpec:
        return self.parse(stream.read())

    def parse(self, text: str) -> WorkloadSpec:
        records = self._records(text)
        if not records:
            raise WorkloadError("workload trace is empty")

        processes: list[ProcessSpec] = []
        finished_ids: set[int] = set()
        current: dict | None = None

        for index, (arrival, pid, cpu_time, io_time, repeats) in enumerate(records):
            try:
                behavior = BehaviorSpec(cpu_time=cpu_time, io_time=io_time, repeats=repeats)
            except ValidationError as exc:
                raise WorkloadError(f"record {index}: {self._first_error(exc)}") from exc

            if current is not None and current["id"] == pid:
                current["behaviors"].append(behavior)
                continue

            if current is not None:
                processes.append(self._finalize(current))
                finished_ids.add(current["id"])
            if pid in finished_ids:
                raise WorkloadError(
                    f"record {index}: process id {pid} appears again after other processes"
                )
            current = {"id": pid, "arrival_tick": arrival, "behaviors": [behavior], "index": index}

        assert current is not None
        processes.append(self._finalize(current))
        try:
            return WorkloadSpec(processes=processes)
        except ValidationError as exc:
            raise WorkloadError(self._first_error(exc)) from exc

    @staticmethod
    def _records(text: str) -> list[tuple[int, int, int, int, int]]:
        tokens = text.split()
        values: list[int] = []
        for position, token in enumerate(tokens):
            try:
                values.append(int(token))
            except ValueError as exc:
                record = position // FIELDS_PER_RECORD
                field_name = FIELD_NAMES[position % FIELDS_PER_RECORD]
                raise WorkloadError(
                    f"record {record}: field '{field_name}' is not an integer: {token!r}"
                ) from exc

        if len(values) % FIELDS_PER_RECORD:
            record = len(values) // FIELDS_PER_RECORD
            missing = FIELD_NAMES[len(values) % FIELDS_PER_RECORD :]
            raise WorkloadError(
                f"record {record}: truncated record, missing {', '.join(missing)}"
            )

        return [
            tuple(values[offset : offset + FIELDS_PER_RECORD])  # type: ignore[misc]
            for offset in range(0, len(values), FIELDS_PER_RECORD)
        ]

    def _finalize(self, current: dict) -> ProcessSpec:
        try:
            return ProcessSpec(
                id=current["id"],
                arrival_tick=current["arrival_tick"],
                behaviors=current["behaviors"],
            )
        except ValidationError as exc:
            raise WorkloadError(f"record {current['index']}: {self._first_error(exc)}") from exc

    @staticmethod
    def _first_error(exc: ValidationError) -> str:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error.get("loc", ()))
        return f"{location or '<root>'}: {error.get('msg', 'invalid value')}"
