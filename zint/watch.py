"""Single-file change watcher for the user style sheet.

A stat poller pushes change events onto a queue; a receive loop waits on
that queue with a timeout, debounces, re-reads the file and hands the new
text to a callback. Both loops run on daemon threads until ``stop()``.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from queue import Empty, Queue

from loguru import logger

POLL_INTERVAL_SECONDS = 0.5
DEBOUNCE_SECONDS = 0.1
RECEIVE_TIMEOUT_SECONDS = 1.0

IDLE = "idle"
WATCHING = "watching"
DEBOUNCING = "debouncing"
STOPPED = "stopped"

StatSignature = tuple[str, int, int, int]

# Queued by the poller when it can no longer deliver events.
_DISCONNECTED = object()


def path_stat_signature(path: Path) -> StatSignature:
    """Return a stable stat tuple describing ``path`` existence and metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0, 0)
    except OSError:
        return ("error", 0, 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size, st.st_mode)


class StyleWatcher:
    """Watch one file and call ``on_change(text)`` after each modification.

    ``start()`` does nothing when the file does not exist yet; there is no
    retry. Decode or read failures after a change skip that notification.
    """

    def __init__(
        self,
        path: Path | str,
        on_change: Callable[[str], None],
        *,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        debounce: float = DEBOUNCE_SECONDS,
        receive_timeout: float = RECEIVE_TIMEOUT_SECONDS,
        stat_signature: Callable[[Path], StatSignature] = path_stat_signature,
    ) -> None:
        self.path = Path(path)
        self.on_change = on_change
        self.poll_interval = poll_interval
        self.debounce = debounce
        self.receive_timeout = receive_timeout
        self._stat_signature = stat_signature
        self._events: Queue[object] = Queue()
        self._stop = threading.Event()
        self._state = IDLE
        self._poller: threading.Thread | None = None
        self._receiver: threading.Thread | None = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def running(self) -> bool:
        return self._receiver is not None and self._receiver.is_alive()

    def start(self) -> bool:
        """Begin watching; return ``False`` if the file is missing."""
        if self._state != IDLE:
            return self._state != STOPPED
        if not self.path.exists():
            logger.debug("Not watching {}: file does not exist", self.path)
            return False

        initial = self._stat_signature(self.path)
        self._state = WATCHING
        self._poller = threading.Thread(
            target=self._poll_loop,
            args=(initial,),
            name="zint-style-poller",
            daemon=True,
        )
        self._receiver = threading.Thread(
            target=self._receive_loop,
            name="zint-style-watcher",
            daemon=True,
        )
        self._poller.start()
        self._receiver.start()
        logger.debug("Watching {}", self.path)
        return True

    def stop(self) -> None:
        """Request shutdown; both loops exit at their next wakeup."""
        self._stop.set()
        if self._receiver is None:
            self._state = STOPPED

    def join(self, timeout: float | None = None) -> None:
        for thread in (self._poller, self._receiver):
            if thread is not None:
                thread.join(timeout)

    def _poll_loop(self, last: StatSignature) -> None:
        try:
            while not self._stop.wait(self.poll_interval):
                current = self._stat_signature(self.path)
                if current != last:
                    last = current
                    self._events.put(current)
        except Exception:
            logger.exception("Stat poller for {} failed", self.path)
            self._events.put(_DISCONNECTED)

    def _drain_pending(self) -> bool:
        """Drop events queued during the debounce window; report disconnects."""
        while True:
            try:
                event = self._events.get_nowait()
            except Empty:
                return False
            if event is _DISCONNECTED:
                return True

    def _receive_loop(self) -> None:
        try:
            while not self._stop.is_set():
                try:
                    event = self._events.get(timeout=self.receive_timeout)
                except Empty:
                    continue
                if event is _DISCONNECTED:
                    logger.warning("Change events for {} disconnected", self.path)
                    break

                self._state = DEBOUNCING
                if self._stop.wait(self.debounce):
                    break
                disconnected = self._drain_pending()
                self._emit()
                if disconnected:
                    break
                self._state = WATCHING
        finally:
            self._state = STOPPED
            self._stop.set()

    def _emit(self) -> None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping change notification for {}: {}", self.path, exc)
            return
        try:
            self.on_change(text)
        except Exception:
            logger.exception("Change handler for {} raised", self.path)


__all__ = [
    "DEBOUNCE_SECONDS",
    "DEBOUNCING",
    "IDLE",
    "POLL_INTERVAL_SECONDS",
    "RECEIVE_TIMEOUT_SECONDS",
    "STOPPED",
    "StyleWatcher",
    "WATCHING",
    "path_stat_signature",
]
