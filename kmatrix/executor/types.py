from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum, auto


class Outcome(Enum):
    SUCCESS = auto()
    FAILURE = auto()
    MISSING = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class Result:
    version: str
    outcome: Outcome
    message: str

    def __str__(self) -> str:
        return f"{self.outcome.name} -> version: {self.version}, message: '{self.message}'"


@dataclass(frozen=True)
class RunResult:
    results: list[Result]

    @property
    def failed(self) -> list[Result]:
        return [r for r in self.results if r.outcome is not Outcome.SUCCESS]


class ExecutionContext:
    """Cancellation token shared by every task of a run.

    Cancelling is a one-shot transition: once set, the context never goes
    back to not-cancelled, and further calls to `cancel` report False.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            return True

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)
