from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Run ``action`` once ``delay_seconds`` after the last call in a burst.

    Each timer carries the generation it was started in. A callback whose
    generation is no longer current (superseded, flushed or cancelled) does
    nothing, even if its timer already fired and is waiting on the lock.
    """

    def __init__(self, delay_seconds: float, action: Callable[[], None]) -> None:
        self._delay_seconds = delay_seconds
        self._action = action
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0

    def trigger(self) -> None:
        with self._lock:
            self._stop_pending()
            self._generation += 1
            self._timer = threading.Timer(
                self._delay_seconds, self._fire, args=(self._generation,)
            )
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        with self._lock:
            pending = self._timer is not None
            self._stop_pending()
        if pending:
            self._action()

    def cancel(self) -> None:
        with self._lock:
            self._stop_pending()

    def _stop_pending(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
        self._action()


class AutoRefresher:
    def __init__(self, action: Callable[[], None], interval_seconds: float = 15.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._action = action
        self._interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="auto-refresh", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self._interval_seconds):
            try:
                self._action()
            except Exception:
                logger.exception("auto_refresh_failed")
