from __future__ import annotations

import os
import signal
from types import FrameType
from typing import Any

from .types import ExecutionContext

NOTICE = "\nInterrupt received, shutting down..."

SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CancellationSource:
    """Turns SIGINT/SIGTERM into cancellation of a shared ExecutionContext.

    Must be installed from the main thread. The notice is written straight to
    `fd`, bypassing sys.stderr, which the interrupted thread may be writing to.
    """

    def __init__(self, ctx: ExecutionContext, fd: int = 2):
        self.ctx = ctx
        self.fd = fd
        self._previous: dict[int, Any] = {}

    def install(self) -> None:
        for signum in SIGNALS:
            self._previous[signum] = signal.signal(signum, self.handle)

    def restore(self) -> None:
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def handle(self, signum: int, frame: FrameType | None) -> None:
        if self.ctx.cancel():
            os.write(self.fd, (NOTICE + "\n").encode())

    def __enter__(self) -> CancellationSource:
        self.install()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()
