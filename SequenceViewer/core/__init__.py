"""Sequence-and-state controller (Qt-independent).

This package decides *what* to show and *which view state to keep*:

    - config:   command line -> ViewConfig
    - sequence: file arguments -> ImageSequence
    - state:    MutableViewState and the keep policy (next_state)
    - watch:    background polling of the shown file
    - session:  ViewSession, the composition root

Image decoding lives in ``image_io`` and is imported separately because it
pulls in the imaging libraries.
"""

from .config import (
    ColorMapping,
    KeepLevel,
    ResolvedOptions,
    ViewConfig,
    build_parser,
    parse_command_line,
    resolve_config,
)
from .errors import (
    DirectoryListingError,
    HelpRequested,
    NoInputError,
    UsageError,
    VersionRequested,
    ViewerError,
    WatchIOError,
)
from .sequence import ImageSequence, assemble_sequence, list_directory
from .state import MutableViewState, next_state
from .watch import ReloadChannel, WatchController, WatchState, stat_signature
from .session import Renderer, ViewSession

__all__ = [
    "ColorMapping",
    "KeepLevel",
    "ResolvedOptions",
    "ViewConfig",
    "build_parser",
    "parse_command_line",
    "resolve_config",
    "DirectoryListingError",
    "HelpRequested",
    "NoInputError",
    "UsageError",
    "VersionRequested",
    "ViewerError",
    "WatchIOError",
    "ImageSequence",
    "assemble_sequence",
    "list_directory",
    "MutableViewState",
    "next_state",
    "ReloadChannel",
    "WatchController",
    "WatchState",
    "stat_signature",
    "Renderer",
    "ViewSession",
]
