"""Debounced re-analysis — coalesce bursts of changes into one run.

:class:`Debouncer` is a restartable delay timer: every ``trigger()``
cancels the pending run and schedules a new one, so only the last change in
a burst is analysed (last write wins).  :func:`watch_file` polls a file and
feeds every observed change into a debouncer.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

from cibash.logging import get_logger

logger = get_logger("watch")

DEFAULT_DEBOUNCE_MS = 100
DEFAULT_POLL_INTERVAL_MS = 250


class Debouncer:
    """Run *callback* once after *delay_ms* of quiet."""

    def __init__(self, callback: Callable[[], None], delay_ms: int = DEFAULT_DEBOUNCE_MS) -> None:
        self.callback = callback
        self.delay = delay_ms / 1000.0
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        """(Re)schedule the callback, superseding any pending run."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.delay, self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop the pending run, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def flush(self) -> bool:
        """Run the pending callback now.  Returns ``False`` if nothing was pending."""
        with self._lock:
            timer = self._timer
            self._timer = None
        if timer is None:
            return False
        timer.cancel()
        self.callback()
        return True

    def _fire(self) -> None:
        with self._lock:
            if self._timer is not threading.current_thread():
                return  # superseded by a later trigger()
            self._timer = None
        self.callback()


def _fingerprint(path: Path) -> tuple[int, int] | None:
    try:
        st = path.stat()
    except OSError:
        return None
    return (st.st_mtime_ns, st.st_size)


def watch_file(
    path: str | Path,
    on_change: Callable[[], None],
    *,
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    stop: threading.Event | None = None,
) -> None:
    """Poll *path* until *stop* is set, calling *on_change* after each settled edit.

    *on_change* runs once up front for the current contents.
    """
    target = Path(path)
    stop = stop or threading.Event()
    debouncer = Debouncer(on_change, debounce_ms)
    last = _fingerprint(target)
    logger.debug("Watching %s", target)

    on_change()
    try:
        while not stop.wait(poll_interval_ms / 1000.0):
            current = _fingerprint(target)
            if current != last:
                logger.debug("Change detected in %s", target)
                last = current
                debouncer.trigger()
    finally:
        debouncer.cancel()
