from .cancellation import CancellationSource
from .classifier import MISSING_KERNEL_PATTERNS, classify
from .runner import run_one
from .scheduler import Executor, dispatch
from .types import ExecutionContext, Outcome, Result, RunResult

__all__ = [
    "CancellationSource",
    "ExecutionContext",
    "Executor",
    "MISSING_KERNEL_PATTERNS",
    "Outcome",
    "Result",
    "RunResult",
    "classify",
    "dispatch",
    "run_one",
]
