"""Viewer window and the Qt renderer used by the session."""

from .viewer import SequenceViewerWindow, QtRenderer

__all__ = ["SequenceViewerWindow", "QtRenderer"]
