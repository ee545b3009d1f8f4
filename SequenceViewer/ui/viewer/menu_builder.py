"""Menu and keyboard shortcut configuration for SequenceViewerWindow.

This module handles the creation of all menus and window-level keyboard
shortcuts for the viewer.
"""

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtCore import Qt


def _add_action(viewer, menu, text, shortcuts, callback):
    """Create a window-level action with one or more shortcuts and add it to ``menu``."""
    action = QAction(text, viewer)
    action.setShortcuts([QKeySequence(s) for s in shortcuts])
    action.setShortcutContext(Qt.WindowShortcut)
    action.triggered.connect(lambda checked=False: callback())
    viewer.addAction(action)
    menu.addAction(action)
    return action


def create_menus(viewer):
    """Create all menus and keyboard shortcuts for the viewer.

    Args:
        viewer: SequenceViewerWindow instance
    """
    menubar = viewer.menuBar()

    # Image menu
    img_menu = menubar.addMenu("Image")
    viewer.next_image_action = _add_action(
        viewer, img_menu, "Next image", ["n", "Space", "PgDown"], lambda: viewer.request_navigate(1)
    )
    viewer.prev_image_action = _add_action(
        viewer, img_menu, "Previous image", ["b", "Backspace", "PgUp"], lambda: viewer.request_navigate(-1)
    )
    img_menu.addSeparator()
    viewer.first_image_action = _add_action(viewer, img_menu, "First image", ["Home"], viewer.request_first)
    viewer.last_image_action = _add_action(viewer, img_menu, "Last image", ["End"], viewer.request_last)
    img_menu.addSeparator()
    viewer.reload_action = _add_action(viewer, img_menu, "Reload", ["r"], lambda: viewer.request_navigate(0))
    img_menu.addSeparator()
    viewer.quit_action = _add_action(viewer, img_menu, "Quit", ["q", "Esc"], viewer.close)

    # View menu
    view_menu = menubar.addMenu("View")
    viewer.zoom_in_action = _add_action(viewer, view_menu, "Zoom in", ["+", "="], viewer.zoom_manager.zoom_in)
    viewer.zoom_out_action = _add_action(viewer, view_menu, "Zoom out", ["-"], viewer.zoom_manager.zoom_out)
    viewer.fit_action = _add_action(viewer, view_menu, "Fit to window", ["f"], viewer.zoom_manager.fit_to_window)
    view_menu.addSeparator()

    channel_menu = view_menu.addMenu("Channel")
    _add_action(viewer, channel_menu, "All", ["0"], lambda: viewer.set_channel(None))
    _add_action(viewer, channel_menu, "Red", ["1"], lambda: viewer.set_channel(0))
    _add_action(viewer, channel_menu, "Green", ["2"], lambda: viewer.set_channel(1))
    _add_action(viewer, channel_menu, "Blue", ["3"], lambda: viewer.set_channel(2))

    viewer.mapping_action = _add_action(viewer, view_menu, "Cycle mapping", ["m"], viewer.cycle_mapping)
    viewer.reset_intensity_action = _add_action(
        viewer, view_menu, "Reset intensity range", ["i"], viewer.reset_intensity
    )

    # Help menu
    help_menu = menubar.addMenu("Help")
    viewer.help_action = _add_action(viewer, help_menu, "Keyboard shortcuts", ["h", "F1"], viewer.help_dialog.show)
