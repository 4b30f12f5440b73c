"""
Sequential job runner with per-step retries and idempotent run records.

A run is a list of named steps executed in order. Each step is retried with
exponential backoff; a step that still fails is recorded and the run moves on
to the next one, so the outcome can be a partial success. Runs are stored
under an idempotency key and a run already recorded as a success is replayed
instead of executed again, unless forced.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from helix import database as db
from helix.config import STEP_ATTEMPTS, STEP_WAIT_MULTIPLIER

logger = logging.getLogger(__name__)

STATUS_RUNNING = "running"
STATUS_SUCCESS = "success"
STATUS_PARTIAL = "partial_success"
STATUS_FAILED = "failed"

STEP_MAX_WAIT_SECONDS = 30


@dataclass
class JobStep:
    name: str
    action: Callable[[], Awaitable[Dict[str, Any]]]


def run_status(succeeded: int, total: int) -> str:
    if total and succeeded == total:
        return STATUS_SUCCESS
    if succeeded:
        return STATUS_PARTIAL
    return STATUS_FAILED


class JobRunner:
    def __init__(self,
                 attempts: int = STEP_ATTEMPTS,
                 wait_multiplier: float = STEP_WAIT_MULTIPLIER,
                 max_wait: float = STEP_MAX_WAIT_SECONDS):
        self.attempts = max(1, attempts)
        self.wait_multiplier = wait_multiplier
        self.max_wait = max_wait

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.wait_multiplier, max=self.max_wait),
            reraise=True,
        )

    async def _run_step(self, step: JobStep) -> Dict[str, Any]:
        attempts = 0
        try:
            async for attempt in self._retrying():
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    if attempts > 1:
                        logger.warning(f"Retrying step {step.name} (attempt {attempts}/{self.attempts})")
                    result = await step.action()
        except Exception as e:
            logger.error(f"Step {step.name} failed after {attempts} attempt(s): {e}")
            return {"ok": False, "attempts": attempts, "error": str(e)}
        logger.info(f"Step {step.name} completed")
        return {"ok": True, "attempts": attempts, "result": result}

    async def run(self, key: str, steps: List[JobStep], force: bool = False) -> Dict[str, Any]:
        """
        Execute steps in order under an idempotency key.

        Returns the run record: status, per-step outcomes, the names of the
        completed steps and the error message of every failed one.
        """
        previous = await db.get_job_run(key)
        if previous and previous.get("status") == STATUS_SUCCESS and not force:
            logger.info(f"Run {key} already succeeded, replaying stored result")
            previous["replayed"] = True
            return previous

        started_at = datetime.utcnow().isoformat()
        await db.save_job_run(key, {"key": key, "status": STATUS_RUNNING, "started_at": started_at})

        outcomes: Dict[str, Any] = {}
        completed: List[str] = []
        errors: List[Dict[str, str]] = []
        for step in steps:
            outcome = await self._run_step(step)
            outcomes[step.name] = outcome
            if outcome["ok"]:
                completed.append(step.name)
            else:
                errors.append({"step": step.name, "error": outcome["error"]})

        record = {
            "key": key,
            "status": run_status(len(completed), len(steps)),
            "steps": outcomes,
            "completed_steps": completed,
            "errors": errors,
            "started_at": started_at,
            "finished_at": datetime.utcnow().isoformat(),
        }
        await db.save_job_run(key, record)
        logger.info(f"Run {key} finished with status {record['status']}")
        record["replayed"] = False
        return record
