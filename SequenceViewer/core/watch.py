"""Poll-based file watching for automatic reload.

A background thread compares the stat signature of the watched file with the
last one seen and posts a reload request into a single-slot channel. The
watcher never touches view state; the session drains the channel on its own
thread.

States::

    IDLE --watch()--> WATCHING --change--> RELOAD_PENDING --> WATCHING
                         \\__________close()__________________--> CLOSED
"""

import logging
import os
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .constants import WATCH_FAILURE_WARN_THRESHOLD, WATCH_POLL_INTERVAL
from .errors import WatchIOError

log = logging.getLogger(__name__)

Signature = Tuple[int, int]


def stat_signature(path: str) -> Optional[Signature]:
    """Return ``(mtime_ns, size)`` of ``path``, or None if it does not exist.

    Raises:
        WatchIOError: On any other stat failure.
    """
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return None
    except OSError as e:
        raise WatchIOError(f"Cannot stat '{path}': {e}") from e
    return (st.st_mtime_ns, st.st_size)


class ReloadChannel:
    """Single-slot channel for reload requests.

    A post replaces an unconsumed one, so any number of changes between two
    takes collapse into one reload. After ``close`` posts are dropped.
    """

    def __init__(self, notify: Optional[Callable[[], None]] = None):
        self._lock = threading.Lock()
        self._pending: Optional[int] = None
        self._closed = False
        self._notify = notify

    def set_notify(self, notify: Optional[Callable[[], None]]):
        self._notify = notify

    def post(self, index: int) -> bool:
        with self._lock:
            if self._closed:
                return False
            coalesced = self._pending is not None
            self._pending = index
        if not coalesced and self._notify is not None:
            self._notify()
        return True

    def take(self) -> Optional[int]:
        with self._lock:
            index = self._pending
            self._pending = None
            return index

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def close(self):
        with self._lock:
            self._closed = True
            self._pending = None

    @property
    def closed(self) -> bool:
        return self._closed


class WatchState(Enum):
    IDLE = "idle"
    WATCHING = "watching"
    RELOAD_PENDING = "reload_pending"
    CLOSED = "closed"


@dataclass
class WatchTarget:
    """The watched file and the last signature seen for it.

    ``known`` is False while no stat of the file has succeeded yet; the first
    successful poll then only records the signature.
    """

    path: str
    index: int
    signature: Optional[Signature] = None
    alive: bool = True
    known: bool = True


class WatchController:
    """Watches one file at a time and posts reload requests for it.

    Args:
        channel: Channel receiving the index of the image to reload.
        interval: Seconds between two polls.
        stat: Signature function, see :func:`stat_signature`.
    """

    def __init__(
        self,
        channel: ReloadChannel,
        interval: float = WATCH_POLL_INTERVAL,
        stat: Callable[[str], Optional[Signature]] = stat_signature,
    ):
        self.channel = channel
        self.interval = interval
        self._stat = stat
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._failures = 0
        self.target: Optional[WatchTarget] = None
        self.state = WatchState.IDLE

    def watch(self, path: str, index: int):
        """Start watching ``path`` (the image at ``index``), replacing any previous target."""
        known = True
        try:
            signature = self._stat(path)
        except WatchIOError as e:
            log.debug("Watch: %s", e)
            signature = None
            known = False
        with self._lock:
            if self.state == WatchState.CLOSED:
                return
            if self.target is not None:
                self.target.alive = False
            self.target = WatchTarget(path=path, index=index, signature=signature, known=known)
            self._failures = 0
            self.state = WatchState.WATCHING
        log.debug("Watching %s", path)

    def unwatch(self):
        """Drop the current target and go back to IDLE."""
        with self._lock:
            if self.state == WatchState.CLOSED:
                return
            if self.target is not None:
                self.target.alive = False
            self.target = None
            self.state = WatchState.IDLE

    def poll_once(self) -> bool:
        """Check the target once; return True if a reload request was posted."""
        with self._lock:
            target = self.target
            if self.state == WatchState.CLOSED or target is None:
                return False

        try:
            signature = self._stat(target.path)
        except WatchIOError as e:
            self._failures += 1
            if self._failures == WATCH_FAILURE_WARN_THRESHOLD:
                log.warning("Cannot check %s for changes: %s", target.path, e)
            else:
                log.debug("Watch: %s", e)
            return False
        self._failures = 0

        if signature is None:
            # file vanished, keep the last good signature until it comes back
            return False

        with self._lock:
            if self.state == WatchState.CLOSED or not target.alive:
                return False
            if not target.known:
                target.signature = signature
                target.known = True
                return False
            if signature == target.signature:
                return False
            target.signature = signature
            self.state = WatchState.RELOAD_PENDING

        # a closed channel drops the post, so close() cannot race this
        posted = self.channel.post(target.index)
        with self._lock:
            if self.state == WatchState.RELOAD_PENDING:
                self.state = WatchState.WATCHING

        if posted:
            log.debug("Change of %s detected, reload requested", target.path)
        return posted

    def _run(self):
        while not self._stop.wait(self.interval):
            try:
                self.poll_once()
            except Exception:
                log.exception("Watch poll failed")

    def start(self):
        """Start the background polling thread (once)."""
        if self._thread is not None or self.state == WatchState.CLOSED:
            return
        self._thread = threading.Thread(target=self._run, name="sequenceviewer-watch", daemon=True)
        self._thread.start()

    def close(self):
        """Stop watching. No reload request is posted after this returns."""
        with self._lock:
            self.state = WatchState.CLOSED
            if self.target is not None:
                self.target.alive = False
            self.channel.close()
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
