import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from helix.jobs import JobRunner, JobStep, run_status


def recording_step(name, calls, failures=0, result=None):
    """Step that fails the first `failures` times it is called."""
    state = {"count": 0}

    async def action():
        state["count"] += 1
        calls.append(name)
        if state["count"] <= failures:
            raise RuntimeError(f"{name} failed")
        return result or {"step": name}

    return JobStep(name, action)


def make_runner(attempts=2):
    return JobRunner(attempts=attempts, wait_multiplier=0)


def test_run_status():
    assert run_status(3, 3) == "success"
    assert run_status(1, 3) == "partial_success"
    assert run_status(0, 3) == "failed"
    assert run_status(0, 0) == "failed"


def test_all_steps_succeed_in_order(fake_db):
    calls = []
    steps = [recording_step("discovery", calls), recording_step("analysis", calls)]

    record = asyncio.run(make_runner().run("automation:2026-10-19", steps))

    assert calls == ["discovery", "analysis"]
    assert record["status"] == "success"
    assert record["completed_steps"] == ["discovery", "analysis"]
    assert record["errors"] == []
    assert record["steps"]["analysis"]["result"] == {"step": "analysis"}
    assert fake_db.rows("job_runs")["automation:2026-10-19"]["status"] == "success"


def test_flaky_step_is_retried(fake_db):
    calls = []
    steps = [recording_step("discovery", calls, failures=1)]

    record = asyncio.run(make_runner(attempts=2).run("k", steps))

    assert record["status"] == "success"
    assert record["steps"]["discovery"]["attempts"] == 2
    assert calls == ["discovery", "discovery"]


def test_failed_step_does_not_stop_later_steps(fake_db):
    calls = []
    steps = [
        recording_step("discovery", calls),
        recording_step("analysis", calls, failures=5),
        recording_step("report", calls),
    ]

    record = asyncio.run(make_runner(attempts=2).run("k", steps))

    assert record["status"] == "partial_success"
    assert record["completed_steps"] == ["discovery", "report"]
    assert record["errors"] == [{"step": "analysis", "error": "analysis failed"}]
    assert calls.count("analysis") == 2


def test_all_steps_fail(fake_db):
    calls = []
    record = asyncio.run(make_runner(attempts=1).run("k", [recording_step("discovery", calls, failures=1)]))
    assert record["status"] == "failed"
    assert calls == ["discovery"]


def test_successful_run_is_replayed_unless_forced(fake_db):
    calls = []
    steps = [recording_step("discovery", calls)]
    runner = make_runner()

    first = asyncio.run(runner.run("automation:2026-10-19", steps))
    replay = asyncio.run(runner.run("automation:2026-10-19", steps))

    assert first["replayed"] is False
    assert replay["replayed"] is True
    assert replay["status"] == "success"
    assert calls == ["discovery"]

    forced = asyncio.run(runner.run("automation:2026-10-19", steps, force=True))
    assert forced["replayed"] is False
    assert calls == ["discovery", "discovery"]


def test_partial_run_is_not_replayed(fake_db):
    calls = []
    steps = [recording_step("discovery", calls), recording_step("analysis", calls, failures=1)]
    runner = make_runner(attempts=1)

    first = asyncio.run(runner.run("k", steps))
    second = asyncio.run(runner.run("k", steps))

    assert first["status"] == "partial_success"
    assert second["status"] == "success"
    assert second["replayed"] is False
