"""Main viewer window.

This module provides the SequenceViewerWindow class, which displays one image
of a sequence with a given view state, and QtRenderer, which adapts the
window to the session's renderer interface.

Features:
- Window geometry from the view state (position, fixed or maximum size)
- Zoom in/out and fit-to-window (scale 0)
- Channel selection, valid-value clamp, intensity window, color mapping
- Status bar showing pixel values, scale and display settings
- Title bar showing the current file name and its position in the sequence

The window never decides which image comes next or which settings are kept;
it forwards navigation requests and user changes of the view state to the
session through callbacks.
"""

import logging
from dataclasses import replace
from typing import Callable, List, Optional
import numpy as np
from PySide6.QtWidgets import (
    QMainWindow,
    QScrollArea,
    QStatusBar,
    QLabel,
)
from PySide6.QtGui import QGuiApplication
from PySide6.QtCore import Qt, QTimer, Signal, Slot

from ...core.config import ColorMapping
from ...core.constants import PROGRAM_NAME, UNSET
from ...core.image_io import load_image, numpy_to_qimage
from ..utils import render_display_array
from ..widgets import ImageLabel
from ..dialogs import HelpDialog

from .menu_builder import create_menus
from .zoom_manager import ZoomManager
from .status_updater import StatusUpdater

log = logging.getLogger(__name__)

_MAPPING_CYCLE = [ColorMapping.RAW, ColorMapping.JET, ColorMapping.RAINBOW]

# Room for the menu bar, status bar and frame around the image
_CHROME_W = 24
_CHROME_H = 72


class SequenceViewerWindow(QMainWindow):
    """Window showing one image of a sequence.

    Keyboard Shortcuts:
        - n / Space / PgDown: Next image
        - b / Backspace / PgUp: Previous image
        - Home / End: First / last image
        - r: Reload
        - + / -: Zoom in / out (2x)
        - f: Fit to window
        - 0 / 1 / 2 / 3: All channels / R / G / B
        - m: Cycle color mapping
        - i: Reset intensity range
        - h / F1: Help
        - q / Esc: Quit

    Attributes:
        sequence: ImageSequence being shown (for title and Home/End)
        index: Index of the shown image
        current_path: Path of the shown image
        array: Decoded image, or None if loading failed
        state: MutableViewState the image is shown with
        scale: Effective zoom scale factor
    """

    reload_requested = Signal()

    def __init__(self):
        super().__init__()
        self.setWindowTitle(PROGRAM_NAME)
        self.setMouseTracking(True)

        self.sequence = None
        self.index = 0
        self.current_path: Optional[str] = None
        self.array: Optional[np.ndarray] = None
        self.display_range = None
        self.state = None
        self.keep = None
        self.scale = 1.0

        self._updating = False
        self._released = False
        self._navigate_callbacks: List[Callable[[int], object]] = []
        self._close_callbacks: List[Callable[[], object]] = []
        self._state_callbacks: List[Callable[[object], object]] = []
        self._reload_callbacks: List[Callable[[], object]] = []

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(False)
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.image_label = ImageLabel(self)
        self.scroll_area.setWidget(self.image_label)
        self.setCentralWidget(self.scroll_area)
        self.scroll_area.horizontalScrollBar().valueChanged.connect(self._on_scrolled)
        self.scroll_area.verticalScrollBar().valueChanged.connect(self._on_scrolled)

        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.status_pixel = QLabel()
        self.status_display = QLabel()
        self.status_scale = QLabel()
        self.status.addPermanentWidget(self.status_pixel, 2)
        self.status.addPermanentWidget(self.status_display, 3)
        self.status.addPermanentWidget(self.status_scale, 1)

        self.help_dialog = HelpDialog(self)

        self.zoom_manager = ZoomManager(self)
        self.status_updater = StatusUpdater(self)

        create_menus(self)
        self.reload_requested.connect(self._dispatch_reload)

    @property
    def fitted(self) -> bool:
        return self.state is not None and not self.state.scale > 0

    # Callback registration
    def add_navigate_callback(self, callback):
        self._navigate_callbacks.append(callback)

    def add_close_callback(self, callback):
        self._close_callbacks.append(callback)

    def add_state_callback(self, callback):
        self._state_callbacks.append(callback)

    def add_reload_callback(self, callback):
        self._reload_callbacks.append(callback)

    @Slot()
    def _dispatch_reload(self):
        for callback in self._reload_callbacks:
            callback()

    # Navigation requests
    def request_navigate(self, delta: int):
        for callback in self._navigate_callbacks:
            callback(delta)

    def request_first(self):
        if self.sequence is not None:
            self.request_navigate(-len(self.sequence))

    def request_last(self):
        if self.sequence is not None:
            self.request_navigate(len(self.sequence))

    # View state
    def write_back(self, **changes):
        """Apply user changes to the view state and report them."""
        if self.state is None or self._updating:
            return
        self.state = replace(self.state, **changes)
        for callback in self._state_callbacks:
            callback(self.state)
        self.update_status()

    def _redisplay(self):
        """Render the current array again with the current state."""
        if self.array is None:
            return
        display, self.display_range = render_display_array(self.array, self.state)
        self.image_label.set_image(numpy_to_qimage(display), self.scale)
        self.update_status()

    def set_channel(self, channel: Optional[int]):
        self.write_back(channel=channel)
        self._redisplay()

    def cycle_mapping(self):
        if self.state is None:
            return
        i = _MAPPING_CYCLE.index(self.state.mapping)
        self.write_back(mapping=_MAPPING_CYCLE[(i + 1) % len(_MAPPING_CYCLE)])
        self._redisplay()

    def reset_intensity(self):
        if self.state is None:
            return
        self.write_back(imin=0.0, imax=0.0)
        self._redisplay()

    # Display
    def show_image(self, path: str, state, index: Optional[int] = None):
        """Display the image at ``path`` with the view state ``state``.

        Loading errors are reported in the status bar and the log; the
        window stays usable for navigating to another image.
        """
        self._updating = True
        try:
            self.current_path = path
            self.state = state
            if index is not None:
                self.index = index
            try:
                self.array = load_image(path)
            except Exception as e:
                log.error("Cannot load %s: %s", path, e)
                self.array = None
                self.display_range = None
                self.image_label.clear()
                self.status.showMessage(f"Cannot load {path}: {e}")
                self.update_status()
                return
            self.status.clearMessage()

            self._apply_geometry(state)
            self.scale = self.zoom_manager.effective_scale(state.scale)
            display, self.display_range = render_display_array(self.array, state)
            self.image_label.set_image(numpy_to_qimage(display), self.scale)
            if state.pan is not None:
                self.zoom_manager.center_on(state.pan)
            self.update_status()
        finally:
            self._updating = False

        if not state.scale > 0:
            # viewport size is final only after the pending resize is processed
            QTimer.singleShot(0, self._refit)

    def _refit(self):
        if self.array is None or self.state is None or self.state.scale > 0:
            return
        self._updating = True
        try:
            self.zoom_manager.apply_scale(0.0, self.state.pan)
        finally:
            self._updating = False

    def _apply_geometry(self, state):
        """Position and size the window for the current image."""
        screen = QGuiApplication.primaryScreen()
        avail = screen.availableGeometry() if screen is not None else None
        max_w = avail.width() if avail is not None else 1920
        max_h = avail.height() if avail is not None else 1080

        w, h = state.size
        if w != UNSET and h != UNSET and not state.size_max:
            target_w, target_h = w, h
        else:
            ih, iw = self.array.shape[:2]
            scale = state.scale if state.scale > 0 else 1.0
            target_w = int(iw * scale) + _CHROME_W
            target_h = int(ih * scale) + _CHROME_H
            if w != UNSET and h != UNSET:
                target_w = min(target_w, w)
                target_h = min(target_h, h)
        self.resize(max(64, min(target_w, max_w)), max(64, min(target_h, max_h)))

        x, y = state.pos
        if x != UNSET and y != UNSET:
            self.move(x, y)

    def update_status(self):
        self.status_updater.update_status()

    def update_mouse_status(self, pos):
        self.status_updater.update_mouse_status(pos)

    # Event handlers
    def _on_scrolled(self, _value):
        if self.array is None or self._updating:
            return
        self.write_back(pan=self.zoom_manager.viewport_center_in_image_coords())

    def wheelEvent(self, e):
        if e.modifiers() & Qt.ControlModifier:
            if e.angleDelta().y() > 0:
                self.zoom_manager.zoom_in()
            elif e.angleDelta().y() < 0:
                self.zoom_manager.zoom_out()
            e.accept()
            return
        super().wheelEvent(e)

    def resizeEvent(self, e):
        super().resizeEvent(e)
        if self.state is not None and not self._updating and e.spontaneous():
            size = self.size()
            self.write_back(size=(size.width(), size.height()), size_max=False)
            if not self.state.scale > 0:
                self._refit()

    def moveEvent(self, e):
        super().moveEvent(e)
        if self.state is not None and not self._updating and e.spontaneous():
            pos = self.pos()
            self.write_back(pos=(pos.x(), pos.y()))

    def release(self):
        """Close the window on request of the session."""
        self._released = True
        self.help_dialog.close()
        self.close()

    def closeEvent(self, event):
        """Notify the session when the user closes the window."""
        if self.help_dialog.isVisible():
            self.help_dialog.close()
        event.accept()
        if not self._released:
            self._released = True
            for callback in self._close_callbacks:
                callback()


class QtRenderer:
    """Renderer collaborator backed by a SequenceViewerWindow.

    The window is created immediately, so a QApplication must exist.
    ``notify_reload`` may be called from any thread; the registered reload
    callbacks run on the GUI thread.

    Args:
        keep: Keep level shown in the status bar.
        index_source: Callable returning the index of the image being shown,
            used for the ``[i/n]`` title prefix.
    """

    def __init__(self, keep=None, index_source: Optional[Callable[[], int]] = None):
        self.window = SequenceViewerWindow()
        self.window.keep = keep
        self.index_source = index_source

    def open(self, sequence, start_index, initial_state):
        self.window.sequence = sequence
        self.window.index = start_index
        self.window.state = initial_state
        self.window.show()
        return self.window

    def show(self, path, state):
        index = self.index_source() if self.index_source is not None else None
        self.window.show_image(path, state, index)

    def on_navigate(self, callback):
        self.window.add_navigate_callback(callback)

    def on_close(self, callback):
        self.window.add_close_callback(callback)

    def on_state_change(self, callback):
        self.window.add_state_callback(callback)

    def on_reload(self, callback):
        self.window.add_reload_callback(callback)

    def notify_reload(self):
        self.window.reload_requested.emit()

    def release(self, handle):
        window = handle if handle is not None else self.window
        if not window._released:
            window.release()
