"""CLI entrypoint for the MLFQ simulation."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any, TextIO

from mlfq_sim.analysis import build_audit_report
from mlfq_sim.core import MLFQEngine, SimulationError
from mlfq_sim.io import (
    ConfigError,
    ConfigLoader,
    EventLogWriter,
    WorkloadError,
    WorkloadLoader,
    format_report,
)
from mlfq_sim.model import SchedulerConfig, WorkloadSpec


def _write_jsonl(path: str, rows: list[dict[str, Any]]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def _write_json(path: str, payload: dict[str, Any]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _error(message: str) -> None:
    print(f"[ERROR] {message}", file=sys.stderr)


def _simulate(
    args: argparse.Namespace,
    config: SchedulerConfig,
    workload: WorkloadSpec,
    stream: TextIO,
) -> int:
    engine = MLFQEngine(config)
    if not args.quiet:
        engine.subscribe(EventLogWriter(stream))
    engine.build(workload)
    try:
        engine.run()
    except SimulationError as exc:
        _error(str(exc))
        return 1

    stream.write(format_report(engine.report()))

    events = [event.model_dump(mode="json") for event in engine.events]
    report_rows = [
        {"pid": record.pid, "total_cpu_usage": record.total_cpu_usage} for record in engine.report()
    ]
    if args.events_out:
        _write_jsonl(args.events_out, events)
    if args.metrics_out:
        _write_json(args.metrics_out, engine.metric_report())
    if args.audit_out:
        audit_report = build_audit_report(events, report=report_rows)
        _write_json(args.audit_out, audit_report)
        if audit_report["status"] != "pass":
            _error(f"simulation audit failed, report={args.audit_out}")
            return 2

    print(
        f"[OK] simulation completed, processes={len(workload.processes)}, "
        f"events={len(events)}, now={engine.now}",
        file=sys.stderr,
    )
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    config = SchedulerConfig()
    if args.config:
        try:
            config = ConfigLoader().load(args.config)
        except ConfigError as exc:
            _error(f"{args.config}: {exc}")
            return 1

    if args.input and not Path(args.input).exists():
        _error(f"workload file not found: {args.input}")
        return 1

    # An invalid trace must leave an existing output file untouched.
    workload_loader = WorkloadLoader()
    try:
        if args.input:
            workload = workload_loader.load(args.input)
        else:
            workload = workload_loader.load_stream(sys.stdin)
    except WorkloadError as exc:
        _error(str(exc))
        return 1

    if not args.output:
        return _simulate(args, config, workload, sys.stdout)

    try:
        output = Path(args.output).open("w", encoding="utf-8")
    except OSError as exc:
        _error(f"cannot open output file {args.output}: {exc}")
        return 1
    with output:
        return _simulate(args, config, workload, output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mlfq-sim",
        description="Three-level multilevel feedback queue scheduler simulation",
    )
    parser.add_argument("input", nargs="?", default=None, help="workload trace file (default: stdin)")
    parser.add_argument("output", nargs="?", default=None, help="report file (default: stdout)")
    parser.add_argument("-c", "--config", default=None, help="path to scheduler config YAML/JSON")
    parser.add_argument("--events-out", default=None, help="path to write JSONL events")
    parser.add_argument("--metrics-out", default=None, help="path to write metric JSON")
    parser.add_argument("--audit-out", default=None, help="path to write audit report JSON")
    parser.add_argument("-q", "--quiet", action="store_true", help="omit event log lines from the output")
    parser.set_defaults(func=cmd_run)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
