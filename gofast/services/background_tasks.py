"""Executor-backed tasks whose results are delivered on the Qt thread."""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Callable

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)

TaskCallback = Callable[[object, "Exception | None"], None]


class BackgroundTaskRunner(QObject):
    """Runs blocking callables off-thread and hands results back via a result pump.

    Callbacks always run on the thread that owns the runner, from
    ``process_completed()``, so callers never touch shared state from a
    worker thread.
    """

    def __init__(
        self,
        *,
        executor: concurrent.futures.Executor | None = None,
        max_workers: int = 2,
        pump_interval_ms: int = 40,
        thread_name_prefix: str = "gofast-nav",
        parent=None,
    ):
        super().__init__(parent)
        self._owns_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix=thread_name_prefix,
        )
        self._pending: dict[concurrent.futures.Future, tuple[str, TaskCallback]] = {}

        self._result_pump = QTimer(self)
        self._result_pump.setInterval(max(1, int(pump_interval_ms)))
        self._result_pump.timeout.connect(self.process_completed)

    @property
    def result_pump(self) -> QTimer:
        return self._result_pump

    def pending_count(self) -> int:
        return len(self._pending)

    def submit(self, kind: str, fn: Callable[[], object], callback: TaskCallback) -> None:
        try:
            future = self._executor.submit(fn)
        except Exception as exc:
            logger.warning("Background task %r failed to start: %s", kind, exc)
            callback(None, exc)
            return
        self._pending[future] = (kind, callback)
        if not self._result_pump.isActive():
            self._result_pump.start()

    def process_completed(self) -> int:
        if not self._pending:
            self._result_pump.stop()
            return 0

        done: list[concurrent.futures.Future] = []
        for future, payload in list(self._pending.items()):
            if not future.done():
                continue
            done.append(future)
            self._pending.pop(future, None)
            kind, callback = payload
            try:
                result = future.result()
                error = None
            except Exception as exc:
                result = None
                error = exc
            logger.debug("Background task %r finished (error=%s)", kind, error is not None)
            callback(result, error)

        if not self._pending:
            self._result_pump.stop()
        return len(done)

    def shutdown(self) -> None:
        self._result_pump.stop()
        self._pending.clear()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
