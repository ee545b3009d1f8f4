"""Status bar and title update logic for SequenceViewerWindow.

This module handles:
- Mouse position and pixel value display
- Title bar with sequence position, file name and image size
- Scale, intensity window, channel and mapping display
"""

from pathlib import Path
import numpy as np

from ...core.constants import PROGRAM_NAME

_CHANNEL_NAMES = {0: "R", 1: "G", 2: "B"}


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size}B"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f}KB"
    elif size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f}MB"
    return f"{size / (1024 * 1024 * 1024):.2f}GB"


def _format_scalar(x, dtype) -> str:
    if np.issubdtype(dtype, np.floating):
        return f"{float(x):.4g}"
    return str(int(x))


class StatusUpdater:
    """Formats viewer state into the title bar and status bar widgets."""

    def __init__(self, viewer):
        """Initialize status updater.

        Args:
            viewer: SequenceViewerWindow instance
        """
        self.viewer = viewer

    def update_mouse_status(self, pos):
        """Show the pixel value under the mouse.

        Args:
            pos: Mouse position in image label coordinates (QPoint)
        """
        arr = self.viewer.array
        point = self.viewer.image_label.widget_to_image_point(pos) if arr is not None else None
        if point is None:
            self.viewer.status_pixel.setText("")
            return
        ix, iy = point
        v = arr[iy, ix]
        if np.ndim(v) == 0:
            val_str = _format_scalar(v, arr.dtype)
        else:
            val_str = "(" + ",".join(_format_scalar(x, arr.dtype) for x in np.ravel(v)) + ")"
        self.viewer.status_pixel.setText(f"x={ix} y={iy} val={val_str}")

    def update_status(self):
        """Update title bar and status widgets for the current image."""
        viewer = self.viewer
        path = viewer.current_path
        if path is None:
            viewer.setWindowTitle(PROGRAM_NAME)
            viewer.status_scale.setText("")
            viewer.status_display.setText("")
            return

        position = ""
        if viewer.sequence is not None:
            position = f"[{viewer.index + 1}/{len(viewer.sequence)}]  "

        filename = Path(path).name
        try:
            size_str = f" ({format_file_size(Path(path).stat().st_size)})"
        except OSError:
            size_str = ""

        arr = viewer.array
        if arr is None:
            viewer.setWindowTitle(f"{position}{filename}{size_str} — not loaded")
        else:
            h, w = arr.shape[:2]
            c = 1 if arr.ndim == 2 else arr.shape[2]
            viewer.setWindowTitle(f"{position}{filename}{size_str} — {w}×{h}, {c}ch")

        viewer.status_scale.setText(f"Scale: {viewer.scale:.3g}x" + (" (fit)" if viewer.fitted else ""))
        viewer.status_display.setText(self.format_display_state())

    def format_display_state(self) -> str:
        viewer = self.viewer
        state = viewer.state
        if state is None:
            return ""
        parts = []
        if viewer.display_range is not None:
            lo, hi = viewer.display_range
            origin = "" if state.has_intensity_window else " (auto)"
            parts.append(f"I: {lo:.4g}..{hi:.4g}{origin}")
        if state.channel is not None:
            parts.append(f"Ch: {_CHANNEL_NAMES.get(state.channel, state.channel)}")
        parts.append(f"Map: {state.mapping.value}")
        if viewer.keep is not None:
            parts.append(f"Keep: {viewer.keep.name.lower()}")
        return ", ".join(parts)
