"""
Background work for the UI.

Network calls run on daemon threads so the Tk loop stays responsive.
Each logical action (generate plan, add exercises, explain...) owns one
ActionSlot; while a request is in flight, new triggers are refused, not
queued.
"""

import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from .errors import BusyError
from .logger import logger


class ActionSlot:
    """Single-slot in-flight guard for one logical action."""

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        if self._lock.locked():
            self._lock.release()

    @contextmanager
    def claim(self) -> Iterator["ActionSlot"]:
        """Hold the slot for the duration of the block, or raise BusyError."""
        if not self.try_acquire():
            raise BusyError(self.name)
        try:
            yield self
        finally:
            self.release()


def run_in_background(
    work: Callable[[], Any],
    on_success: Callable[[Any], None],
    on_error: Callable[[Exception], None],
    slot: Optional[ActionSlot] = None,
    name: str = "background_task",
) -> bool:
    """
    Run `work` on a daemon thread and hand its result to a callback.

    Returns False without starting anything when `slot` is busy. The
    slot is released after the callback has run, whatever the outcome.
    Callbacks run on the worker thread; Tk callers wrap them with
    `widget.after(0, ...)`.
    """
    if slot is not None and not slot.try_acquire():
        logger.warning(f"Ignoring '{slot.name}': a request is already in flight")
        return False

    task_name = slot.name if slot is not None else name

    def _run() -> None:
        logger.task_start(task_name)
        start_time = time.perf_counter()
        try:
            try:
                result = work()
            except Exception as e:
                logger.task_error(task_name, str(e))
                on_error(e)
                return
            logger.task_complete(task_name, duration_ms=(time.perf_counter() - start_time) * 1000)
            on_success(result)
        finally:
            if slot is not None:
                slot.release()

    threading.Thread(target=_run, daemon=True).start()
    return True
