"""Post-simulation audit checks over the event stream."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from mlfq_sim.model import LEVEL_COUNT


def _pid(event: dict[str, Any]) -> int | None:
    pid = event.get("process_id")
    return pid if isinstance(pid, int) else None


def build_audit_report(
    events: list[dict[str, Any]],
    *,
    report: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    issues: list[dict[str, Any]] = []
    checks: dict[str, Any] = {}

    out_of_bounds = [
        event.get("event_id")
        for event in events
        if event.get("level") is not None and not 1 <= int(event["level"]) <= LEVEL_COUNT
    ]
    if out_of_bounds:
        issues.append(
            {
                "rule": "priority_bounds",
                "severity": "error",
                "message": f"event level outside 1..{LEVEL_COUNT}",
                "event_ids": out_of_bounds[:20],
            }
        )
    checks["priority_bounds"] = {"passed": not out_of_bounds}

    created: set[int] = set()
    finish_count: defaultdict[int, int] = defaultdict(int)
    finished_usage: dict[int, int] = {}
    activity_after_finish: list[dict[str, Any]] = []
    shutdown: dict[str, Any] | None = None
    for event in events:
        event_type = event.get("type")
        pid = _pid(event)
        if event_type == "Shutdown":
            shutdown = event
            continue
        if pid is None:
            continue
        if event_type == "Create":
            created.add(pid)
        elif event_type == "Finished":
            finish_count[pid] += 1
            usage = event.get("payload", {}).get("total_cpu_usage")
            if isinstance(usage, int):
                finished_usage[pid] = usage
        elif finish_count.get(pid, 0) > 0:
            activity_after_finish.append({"event_id": event.get("event_id"), "process_id": pid})

    repeated = sorted(pid for pid, count in finish_count.items() if count > 1)
    if repeated:
        issues.append(
            {
                "rule": "single_termination",
                "severity": "error",
                "message": "process finished more than once",
                "process_ids": repeated,
            }
        )
    checks["single_termination"] = {"passed": not repeated}

    if activity_after_finish:
        issues.append(
            {
                "rule": "no_activity_after_finish",
                "severity": "error",
                "message": "process scheduled after it finished",
                "samples": activity_after_finish[:20],
            }
        )
    checks["no_activity_after_finish"] = {"passed": not activity_after_finish}

    if shutdown is not None:
        unfinished = sorted(created - set(finish_count))
        if unfinished:
            issues.append(
                {
                    "rule": "all_processes_finished",
                    "severity": "error",
                    "message": "created processes missing a Finished event at shutdown",
                    "process_ids": unfinished,
                }
            )
        checks["all_processes_finished"] = {"passed": not unfinished}

        idle = shutdown.get("payload", {}).get("idle_ticks", 0)
        accounted = sum(finished_usage.values()) + int(idle)
        final_tick = int(shutdown.get("time", 0))
        conserved = accounted == final_tick
        if not conserved:
            issues.append(
                {
                    "rule": "time_conservation",
                    "severity": "error",
                    "message": "process usage plus idle ticks differs from final tick",
                    "accounted": accounted,
                    "final_tick": final_tick,
                }
            )
        checks["time_conservation"] = {
            "passed": conserved,
            "accounted": accounted,
            "final_tick": final_tick,
        }

    if report is not None:
        mismatched = [
            row
            for row in report
            if row.get("pid") != 0 and finished_usage.get(row.get("pid")) != row.get("total_cpu_usage")
        ]
        if mismatched:
            issues.append(
                {
                    "rule": "report_matches_events",
                    "severity": "error",
                    "message": "report usage differs from Finished event payload",
                    "rows": mismatched[:20],
                }
            )
        checks["report_matches_events"] = {"passed": not mismatched}

    return {
        "status": "pass" if not issues else "fail",
        "issue_count": len(issues),
        "issues": issues,
        "checks": checks,
    }
