"""Widgets used by the viewer window."""

from .image_label import ImageLabel

__all__ = ["ImageLabel"]
