"""UI utility functions."""

from .color_utils import (
    apply_colormap,
    apply_intensity_window,
    natural_range,
    render_display_array,
    select_channel,
    valid_mask,
)

__all__ = [
    "apply_colormap",
    "apply_intensity_window",
    "natural_range",
    "render_display_array",
    "select_channel",
    "valid_mask",
]
