"""SequenceViewer - browse a directory of images as a sequence in one window.

This package provides the ``sv`` command: an image viewer that steps through
an ordered sequence of images while keeping a configurable part of the view
state (zoom, pan, intensity range, color mapping) across images.

Core Features:
    - A single file argument expands to all files of its directory
    - Keep levels: none, most (all but the intensity range), all
    - Automatic reload of the shown file when it changes on disk (-watch)
    - Channel selection, valid-value clamp and jet/rainbow mapping

Package Structure:
    - core/: Qt-independent controller (options, sequence, keep policy,
      file watching, session) and image I/O
    - ui/: PySide6 viewer window acting as the session's renderer

Quick Start:
    from SequenceViewer import main
    main(["sv", "-keep", "images/frame_001.png"])

Dependencies:
    - PySide6: Qt for Python
    - numpy: Array operations
    - opencv-python: Image loading and color maps
    - OpenImageIO: EXR/HDR loading
"""

from .app import main
from .core import (
    ColorMapping,
    ImageSequence,
    KeepLevel,
    MutableViewState,
    ViewConfig,
    ViewSession,
    assemble_sequence,
    next_state,
    parse_command_line,
)

__version__ = "0.1.0"
__all__ = [
    "main",
    "ColorMapping",
    "ImageSequence",
    "KeepLevel",
    "MutableViewState",
    "ViewConfig",
    "ViewSession",
    "assemble_sequence",
    "next_state",
    "parse_command_line",
]
