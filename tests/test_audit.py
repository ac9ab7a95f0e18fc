from __future__ import annotations

from mlfq_sim.analysis import build_audit_report


def _event(seq: int, event_type: str, time: int, pid: int | None = None, **extra) -> dict:
    return {
        "event_id": f"evt-{seq:08d}",
        "seq": seq,
        "time": time,
        "type": event_type,
        "process_id": pid,
        "level": extra.pop("level", None),
        "payload": extra,
    }


def _clean_run() -> list[dict]:
    return [
        _event(0, "Create", 0, 1),
        _event(1, "Run", 0, 1, level=1, remaining=4),
        _event(2, "Finished", 4, 1, total_cpu_usage=4),
        _event(3, "Shutdown", 4, idle_ticks=0, processes_finished=1),
    ]


def test_audit_passes_for_consistent_run() -> None:
    report = build_audit_report(_clean_run(), report=[{"pid": 1, "total_cpu_usage": 4}])
    assert report["status"] == "pass"
    assert report["issue_count"] == 0
    assert report["checks"]["time_conservation"] == {"passed": True, "accounted": 4, "final_tick": 4}


def test_audit_detects_level_out_of_bounds() -> None:
    events = _clean_run()
    events[1]["level"] = 4
    report = build_audit_report(events)
    assert report["status"] == "fail"
    assert any(issue["rule"] == "priority_bounds" for issue in report["issues"])


def test_audit_detects_double_finish_and_activity_after_finish() -> None:
    events = _clean_run()
    events.insert(3, _event(10, "Run", 4, 1, level=1, remaining=1))
    events.insert(4, _event(11, "Finished", 5, 1, total_cpu_usage=5))
    report = build_audit_report(events)
    rules = {issue["rule"] for issue in report["issues"]}
    assert {"single_termination", "no_activity_after_finish"} <= rules


def test_audit_detects_unfinished_process() -> None:
    events = _clean_run()
    events.insert(1, _event(9, "Create", 0, 2))
    report = build_audit_report(events)
    assert not report["checks"]["all_processes_finished"]["passed"]


def test_audit_detects_time_leak() -> None:
    events = _clean_run()
    events[-1]["time"] = 6
    report = build_audit_report(events)
    assert report["checks"]["time_conservation"]["passed"] is False
    assert report["checks"]["time_conservation"]["accounted"] == 4


def test_audit_cross_checks_report_rows() -> None:
    report = build_audit_report(_clean_run(), report=[{"pid": 1, "total_cpu_usage": 3}])
    assert any(issue["rule"] == "report_matches_events" for issue in report["issues"])


def test_audit_without_shutdown_skips_terminal_checks() -> None:
    report = build_audit_report(_clean_run()[:2])
    assert report["status"] == "pass"
    assert "time_conservation" not in report["checks"]


def test_audit_detects_unfinished_process_with_run_events() -> None:
    events = [
        _event(0, "Create", 0, 1),
        _event(1, "Create", 0, 2),
        _event(2, "Run", 0, 1, level=1, remaining=4),
        _event(3, "Finished", 4, 1, total_cpu_usage=4),
        _event(4, "Run", 4, 2, level=1, remaining=3),
        _event(5, "Shutdown", 4, idle_ticks=0, processes_finished=1),
    ]
    report = build_audit_report(events)
    assert report["checks"]["all_processes_finished"]["passed"] is False
    assert "all_processes_finished" in {issue["rule"] for issue in report["issues"]}
    assert "no_activity_after_finish" not in {issue["rule"] for issue in report["issues"]}
