"""View session: the composition root of the sequence-and-state controller.

The session owns the image sequence and the current view state and is their
only writer. It reacts to two event sources:

- navigation requests from the renderer (user input)
- reload requests from the :class:`WatchController`, delivered through a
  :class:`ReloadChannel` and drained by :meth:`ViewSession.process_pending`
  on the session's thread

Applying an update is not reentrant: requests arriving while one is applied
are queued and handled right after it.
"""

import logging
import os
from collections import deque
from typing import Any, Callable, Optional, Protocol

from .config import ViewConfig
from .sequence import ImageSequence
from .state import MutableViewState, next_state
from .watch import ReloadChannel, WatchController

log = logging.getLogger(__name__)


class Renderer(Protocol):
    """Interface of the component that puts images on screen."""

    def open(self, sequence: ImageSequence, start_index: int, initial_state: MutableViewState) -> Any:
        """Create the display for ``sequence`` and return a handle to it."""

    def show(self, path: str, state: MutableViewState) -> None:
        """Display the image at ``path`` with ``state``."""

    def on_navigate(self, callback: Callable[[int], Any]) -> None:
        """Register the callback receiving navigation deltas."""

    def on_close(self, callback: Callable[[], Any]) -> None:
        """Register the callback invoked when the user closes the display."""

    def on_state_change(self, callback: Callable[[MutableViewState], Any]) -> None:
        """Register the callback receiving state changed by user interaction."""

    def release(self, handle: Any) -> None:
        """Close the display created by ``open``."""


class ViewSession:
    """Holds the current index and view state and drives the renderer.

    Args:
        config: Baseline configuration from the command line.
        sequence: Image sequence positioned on the first image to show.
        renderer: Display collaborator, see :class:`Renderer`.
        watcher: Watch controller used when ``config.watch`` is set. If None,
            one is created on start with a channel that has no notify
            callback; the owner then has to call :meth:`process_pending`.
        is_watchable: Predicate deciding whether a path can be watched.
    """

    def __init__(
        self,
        config: ViewConfig,
        sequence: ImageSequence,
        renderer: Renderer,
        watcher: Optional[WatchController] = None,
        is_watchable: Callable[[str], bool] = os.path.isfile,
    ):
        self.config = config
        self.sequence = sequence
        self.renderer = renderer
        self.watcher = watcher
        self.baseline = MutableViewState.from_config(config)
        self.state: Optional[MutableViewState] = None
        self._is_watchable = is_watchable
        self._handle = None
        self._started = False
        self._closed = False
        self._applying = False
        self._queued = deque()

    @property
    def index(self) -> int:
        return self.sequence.index

    @property
    def current_path(self) -> str:
        return self.sequence.current

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self):
        """Show the first image and start watching if requested."""
        if self._started:
            raise RuntimeError("session already started")
        self._started = True

        self.state = next_state(None, self.baseline, self.config.keep, is_first_load=True)
        self._handle = self.renderer.open(self.sequence, self.index, self.state)
        self.renderer.on_navigate(self.navigate)
        self.renderer.on_close(self.close)
        self.renderer.on_state_change(self.update_state)

        log.debug("Showing %s [%d/%d]", self.current_path, self.index + 1, len(self.sequence))
        self.renderer.show(self.current_path, self.state)

        if self.config.watch:
            if self.watcher is None:
                self.watcher = WatchController(ReloadChannel())
            self._retarget_watch()
            self.watcher.start()

    def navigate(self, delta: int) -> int:
        """Move by ``delta`` images (clamped, no wraparound) and return the new index."""
        self._run(delta)
        return self.index

    def reload_current(self):
        """Show the current image again, as a step of 0."""
        self._run(0)

    def process_pending(self):
        """Apply a reload request posted by the watcher, if any.

        Must be called on the session's thread. While an update is being
        applied the request stays in the channel and is picked up when the
        update finishes.
        """
        if not self._started or self._closed or self._applying:
            return
        if self._take_reload():
            self._run(0)

    def update_state(self, state: MutableViewState):
        """Store state changed by user interaction in the renderer."""
        if self._closed:
            return
        self.state = state

    def close(self):
        """Stop watching and release the renderer. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._queued.clear()
        if self.watcher is not None:
            self.watcher.close()
        if self._started:
            self.renderer.release(self._handle)
        self._handle = None
        log.debug("Session closed")

    def _take_reload(self) -> bool:
        if self.watcher is None:
            return False
        index = self.watcher.channel.take()
        if index is None:
            return False
        if index != self.index:
            log.debug("Dropping reload request for image %d, showing %d", index, self.index)
            return False
        return True

    def _run(self, delta: int):
        if not self._started or self._closed:
            return
        self._queued.append(delta)
        if self._applying:
            return

        self._applying = True
        try:
            while self._queued and not self._closed:
                self._step(self._queued.popleft())
                if self._take_reload() and (not self._queued or self._queued[-1] != 0):
                    self._queued.append(0)
        finally:
            self._applying = False

    def _step(self, delta: int):
        previous_index = self.index
        self.sequence = self.sequence.move(delta)
        self.state = next_state(self.state, self.baseline, self.config.keep)

        if delta == 0:
            log.debug("Reloading %s", self.current_path)
        else:
            log.debug("Showing %s [%d/%d]", self.current_path, self.index + 1, len(self.sequence))
        self.renderer.show(self.current_path, self.state)

        if self.index != previous_index:
            self._retarget_watch()

    def _retarget_watch(self):
        if self.watcher is None or not self.config.watch:
            return
        path = self.current_path
        if self._is_watchable(path):
            self.watcher.watch(path, self.index)
        else:
            log.debug("Not watching %s, it is not a file", path)
            self.watcher.unwatch()
