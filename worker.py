from __future__ import annotations

import logging
from typing import Any, Callable, List

from PyQt6.QtCore import QObject, QThread, pyqtSignal

logger = logging.getLogger("subtitle_sync")


class Worker(QObject):
    finished = pyqtSignal(object)
    error = pyqtSignal(object)

    def __init__(self, func: Callable[..., Any], *args, **kwargs) -> None:
        super().__init__()
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:
        name = getattr(self.func, "__name__", repr(self.func))
        logger.debug(f"[WORKER] Start: {name}")
        try:
            result = self.func(*self.args, **self.kwargs)
        except Exception as exc:
            logger.exception(f"[WORKER] Error in {name}: {exc}")
            self.error.emit(exc)
        else:
            logger.debug(f"[WORKER] Done: {name}")
            self.finished.emit(result)


def run_in_thread(
    owner: QObject,
    threads: List[QThread],
    func: Callable[[], Any],
    on_finished: Callable[[Any], None],
    on_error: Callable[[BaseException], None],
) -> QThread:
    """Run ``func`` on a QThread; callbacks are delivered through Qt signals.

    ``threads`` keeps the thread referenced until it finishes.
    """
    thread = QThread(owner)
    worker = Worker(func)
    worker.moveToThread(thread)

    thread.started.connect(worker.run)
    worker.finished.connect(on_finished)
    worker.error.connect(on_error)
    worker.finished.connect(thread.quit)
    worker.error.connect(thread.quit)
    worker.finished.connect(worker.deleteLater)
    worker.error.connect(worker.deleteLater)
    thread.finished.connect(thread.deleteLater)
    thread.finished.connect(lambda: threads.remove(thread) if thread in threads else None)

    # Python wrapper must outlive the thread
    thread.worker = worker
    threads.append(thread)
    thread.start()
    return thread
