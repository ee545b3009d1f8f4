"""Display pipeline for image arrays.

Turns a decoded image into a uint8 array ready for ``numpy_to_qimage``:

1. channel selection (R, G or B of a color image)
2. valid-value clamp: pixels with values outside [vmin, vmax] or non-finite
   values are invalid and shown black
3. intensity window: [imin, imax] if set, otherwise the natural range of the
   valid pixels
4. color mapping of greyscale results (raw, jet, rainbow)
"""

from typing import Optional, Tuple
import numpy as np
import cv2

from ...core.config import ColorMapping

_COLORMAPS = {
    ColorMapping.JET: cv2.COLORMAP_JET,
    ColorMapping.RAINBOW: cv2.COLORMAP_RAINBOW,
}


def select_channel(arr: np.ndarray, channel: Optional[int]) -> np.ndarray:
    """Return the selected channel of a color image, or ``arr`` itself.

    Greyscale images and channel indices the image does not have leave the
    array unchanged.
    """
    if channel is None or arr.ndim != 3 or channel >= arr.shape[2]:
        return arr
    return arr[:, :, channel]


def color_channels(arr: np.ndarray) -> np.ndarray:
    """Reduce an image to 1 (H, W) or 3 (H, W, 3) channels for display."""
    if arr.ndim == 2:
        return arr
    c = arr.shape[2]
    if c == 1 or c == 2:
        return arr[:, :, 0]
    return arr[:, :, :3]


def valid_mask(arr: np.ndarray, vmin: float, vmax: float) -> np.ndarray:
    """Return a (H, W) mask of pixels whose values are all finite and inside [vmin, vmax]."""
    a = arr.astype(np.float64, copy=False)
    with np.errstate(invalid="ignore"):
        ok = np.isfinite(a) & (a >= vmin) & (a <= vmax)
    if ok.ndim == 3:
        ok = ok.all(axis=2)
    return ok


def natural_range(arr: np.ndarray, mask: Optional[np.ndarray] = None) -> Tuple[float, float]:
    """Return the intensity range implied by the image itself.

    8-bit images use the full type range; other images use the min/max of
    their valid values.
    """
    if arr.dtype == np.uint8:
        return (0.0, 255.0)
    values = arr[mask] if mask is not None else arr
    values = values[np.isfinite(values)] if np.issubdtype(values.dtype, np.floating) else values
    if values.size == 0:
        return (0.0, 1.0)
    lo = float(values.min())
    hi = float(values.max())
    if hi <= lo:
        hi = lo + 1.0
    return (lo, hi)


def apply_intensity_window(arr: np.ndarray, lo: float, hi: float) -> np.ndarray:
    """Linearly map [lo, hi] to [0, 255] and clip, returning uint8."""
    if hi <= lo:
        hi = lo + 1.0
    a = arr.astype(np.float32)
    with np.errstate(invalid="ignore"):
        out = (a - lo) * (255.0 / (hi - lo))
    out = np.nan_to_num(out, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(out, 0, 255).astype(np.uint8)


def apply_colormap(gray: np.ndarray, mapping: ColorMapping) -> np.ndarray:
    """Apply the named colormap to a uint8 greyscale image.

    Returns ``gray`` unchanged for ``ColorMapping.RAW``, otherwise an RGB
    uint8 image of shape (H, W, 3).
    """
    code = _COLORMAPS.get(mapping)
    if code is None:
        return gray
    # OpenCV colormap produces BGR
    bgr = cv2.applyColorMap(np.ascontiguousarray(gray), code)
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)


def render_display_array(arr: np.ndarray, state) -> Tuple[np.ndarray, Tuple[float, float]]:
    """Run the display pipeline for ``arr`` with a MutableViewState.

    Returns:
        (display, (lo, hi)): uint8 image of shape (H, W) or (H, W, 3) and the
        intensity window that was applied.
    """
    a = color_channels(select_channel(arr, state.channel))
    mask = valid_mask(a, state.vmin, state.vmax)

    if state.has_intensity_window:
        lo, hi = float(state.imin), float(state.imax)
    else:
        lo, hi = natural_range(a, mask)

    display = apply_intensity_window(a, lo, hi)
    if display.ndim == 2:
        display = apply_colormap(display, state.mapping)
    display = display.copy()
    display[~mask] = 0
    return display, (lo, hi)
