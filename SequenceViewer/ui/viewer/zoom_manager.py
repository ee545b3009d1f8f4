"""Zoom and viewport management for SequenceViewerWindow.

This module handles all zoom-related operations including:
- Setting zoom scale with viewport center preservation
- Fit-to-window (scale 0 in the view state)
- Converting between the scroll position and the pan stored in the view state
"""

import numpy as np
from ...core.constants import MIN_ZOOM_SCALE, MAX_ZOOM_SCALE


class ZoomManager:
    """Manages zoom and viewport operations for the viewer window.

    The effective scale lives in ``viewer.scale``; ``state.scale`` is either
    the same value or 0 when the image is fitted to the window.
    """

    def __init__(self, viewer):
        """Initialize zoom manager.

        Args:
            viewer: SequenceViewerWindow instance
        """
        self.viewer = viewer

    def fit_scale(self) -> float:
        """Return the largest power-of-2 scale at which the image fits the viewport."""
        arr = self.viewer.array
        if arr is None:
            return 1.0
        h, w = arr.shape[:2]
        viewport = self.viewer.scroll_area.viewport()
        vw = max(1, viewport.width())
        vh = max(1, viewport.height())
        fit = min(vw / w, vh / h)
        fit = max(MIN_ZOOM_SCALE, min(MAX_ZOOM_SCALE, fit))
        # Snap down to a power of 2 so the image still fits
        return float(2.0 ** np.floor(np.log2(fit)))

    def effective_scale(self, state_scale: float) -> float:
        if state_scale and state_scale > 0:
            return max(MIN_ZOOM_SCALE, min(MAX_ZOOM_SCALE, state_scale))
        return self.fit_scale()

    def viewport_center_in_image_coords(self) -> tuple[float, float]:
        """Calculate current viewport center in image coordinates.

        Returns:
            (img_x, img_y) tuple of center point in image coordinates
        """
        scroll_area = self.viewer.scroll_area
        center_x = scroll_area.horizontalScrollBar().value() + scroll_area.viewport().width() / 2.0
        center_y = scroll_area.verticalScrollBar().value() + scroll_area.viewport().height() / 2.0
        scale = self.viewer.scale if self.viewer.scale > 0 else 1.0
        return (center_x / scale, center_y / scale)

    def center_on(self, img_coords: tuple[float, float]):
        """Scroll so that ``img_coords`` appear at the viewport center."""
        scroll_area = self.viewer.scroll_area
        img_x, img_y = img_coords
        new_h = int(img_x * self.viewer.scale - scroll_area.viewport().width() / 2.0)
        new_v = int(img_y * self.viewer.scale - scroll_area.viewport().height() / 2.0)
        scroll_area.horizontalScrollBar().setValue(new_h)
        scroll_area.verticalScrollBar().setValue(new_v)

    def apply_scale(self, state_scale: float, pan=None):
        """Display the current image at ``state_scale`` (0 = fit) centered on ``pan``."""
        self.viewer.scale = self.effective_scale(state_scale)
        self.viewer.image_label.set_scale(self.viewer.scale)
        if pan is not None:
            self.center_on(pan)
        self.viewer.update_status()

    def set_zoom(self, scale: float):
        """Set zoom scale while maintaining the viewport center position.

        Args:
            scale: New zoom scale factor (1.0 = original size)
        """
        if self.viewer.array is None:
            return
        scale = max(MIN_ZOOM_SCALE, min(MAX_ZOOM_SCALE, scale))
        center = self.viewport_center_in_image_coords()
        self.apply_scale(scale, center)
        self.viewer.write_back(scale=scale, pan=center)

    def zoom_in(self):
        self.set_zoom(self.viewer.scale * 2)

    def zoom_out(self):
        self.set_zoom(self.viewer.scale / 2)

    def fit_to_window(self):
        """Fit image to window and remember the fit (scale 0) in the view state."""
        if self.viewer.array is None:
            return
        self.apply_scale(0.0)
        self.viewer.write_back(scale=0.0, pan=None)
