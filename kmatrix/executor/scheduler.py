from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence, cast

import structlog

from kmatrix.config import RunConfig

from .runner import run_one
from .types import ExecutionContext, Outcome, Result, RunResult

logger = structlog.get_logger(__name__)

Task = Callable[[ExecutionContext, str], Result]

CANCELLED_MESSAGE = "Cancelled"


def dispatch(
    versions: Sequence[str], limit: int, ctx: ExecutionContext, task: Task
) -> list[Result]:
    """Run `task` once per version with at most `limit` running at a time.

    Results keep the input order. Cancellation is checked each time a version
    is about to be admitted; versions admitted before it are left to the task.
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    slots: list[Optional[Result]] = [None] * len(versions)
    admission = threading.BoundedSemaphore(limit)

    def work(idx: int, version: str) -> None:
        try:
            slots[idx] = task(ctx, version)
        except BaseException as exc:
            logger.error("Task raised", version=version, error=repr(exc))
            slots[idx] = Result(version, Outcome.FAILURE, str(exc) or repr(exc))
        finally:
            admission.release()

    with ThreadPoolExecutor(max_workers=limit) as pool:
        for idx, version in enumerate(versions):
            if ctx.cancelled:
                slots[idx] = Result(version, Outcome.CANCELLED, CANCELLED_MESSAGE)
                continue

            admission.acquire()
            # Cancellation may have fired while waiting for a slot.
            if ctx.cancelled:
                admission.release()
                slots[idx] = Result(version, Outcome.CANCELLED, CANCELLED_MESSAGE)
                continue

            logger.debug("Admitting version", version=version, index=idx)
            pool.submit(work, idx, version)

    missing = [versions[i] for i, slot in enumerate(slots) if slot is None]
    if missing:
        raise RuntimeError(f"No result recorded for: {missing}")
    return cast(list[Result], slots)


class Executor:
    def __init__(self, config: RunConfig):
        self.config = config
        self.launcher = config.vng_path
        self.command = config.command_argv()

    def _task(self, ctx: ExecutionContext, version: str) -> Result:
        return run_one(ctx, self.launcher, self.command, version)

    def run(self, ctx: ExecutionContext) -> RunResult:
        versions = self.config.kernel_versions
        logger.info(
            "Dispatching kernel versions",
            count=len(versions),
            parallel=self.config.parallel,
        )
        results = dispatch(versions, self.config.parallel, ctx, self._task)
        return RunResult(results)
