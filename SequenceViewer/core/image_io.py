"""Image I/O utilities for loading and converting images.

This module provides functions for:
- Loading images from files (OpenCV, OpenImageIO, NumPy)
- Converting display-ready NumPy arrays to QImage for Qt display

Decoding errors are raised to the caller; the viewer reports them without
leaving the sequence.
"""

from pathlib import Path
from typing import Union
import numpy as np
from PySide6.QtGui import QImage
import cv2
import OpenImageIO as oiio

# Formats read through OpenCV
CV2_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".tif",
    ".tiff",
    ".bmp",
    ".gif",
    ".webp",
    ".pgm",
    ".ppm",
    ".pbm",
    ".pfm",
}
# High dynamic range formats read through OpenImageIO
OIIO_EXTENSIONS = {".exr", ".hdr"}


def numpy_to_qimage(arr: np.ndarray) -> QImage:
    """Convert a display-ready uint8 array to a Qt QImage.

    The returned QImage owns a copy of the pixel data, so the caller does not
    need to keep the NumPy array alive.

    Supported input shapes:
      - (H, W) -> 8-bit grayscale
      - (H, W, 3) -> RGB (8-bit per channel)
      - (H, W, 4) -> RGBA (8-bit per channel)

    Args:
        arr: Image array. Values outside [0,255] are clipped.

    Returns:
        QImage: A freshly allocated QImage. If ``arr`` is None an empty
        QImage is returned.

    Raises:
        ValueError: If ``arr`` has an unsupported shape.
    """
    if arr is None:
        return QImage()
    a = np.asarray(arr)
    disp = np.ascontiguousarray(np.clip(a, 0, 255).astype(np.uint8))
    if disp.ndim == 2:
        h, w = disp.shape
        return QImage(disp.data, w, h, w, QImage.Format_Grayscale8).copy()
    if disp.ndim == 3 and disp.shape[2] == 3:
        h, w, _ = disp.shape
        return QImage(disp.data, w, h, 3 * w, QImage.Format_RGB888).copy()
    if disp.ndim == 3 and disp.shape[2] == 4:
        h, w, _ = disp.shape
        return QImage(disp.data, w, h, 4 * w, QImage.Format_RGBA8888).copy()
    raise ValueError(f"Unsupported array shape {a.shape}")


def cv2_imread_unicode(path: str):
    data = np.fromfile(path, dtype=np.uint8)
    return cv2.imdecode(data, cv2.IMREAD_UNCHANGED)


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Load an image file into a NumPy array.

    Supported inputs:
      - .exr, .hdr: read with OpenImageIO, original data type (often float32)
      - .npy: loaded via numpy.load and returned as-is
      - everything else: read with OpenCV with unchanged depth. Color images
        are converted from BGR/BGRA to RGB/RGBA; grayscale images are 2-D.

    Args:
        path: Path to the image file (str or pathlib.Path).

    Returns:
        np.ndarray: Image data of shape (H, W) or (H, W, C).

    Raises:
        RuntimeError: If the file cannot be decoded or has an unusable shape.
    """
    path_str = str(path)
    ext = Path(path_str).suffix.lower()

    if ext in OIIO_EXTENSIONS:
        img = oiio.ImageInput.open(path_str)
        if img is None:
            raise RuntimeError(f"Cannot open image: {path_str} ({oiio.geterror()})")
        try:
            arr = img.read_image()
        finally:
            img.close()
    elif ext == ".npy":
        arr = np.load(path_str)
    else:
        arr = cv2_imread_unicode(path_str)
        if arr is None:
            raise RuntimeError(f"Cannot open image: {path_str}")

        if arr.ndim == 3 and arr.shape[2] == 4:
            arr = cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        elif arr.ndim == 3 and arr.shape[2] == 3:
            arr = cv2.cvtColor(arr, cv2.COLOR_BGR2RGB)

    if arr is None:
        raise RuntimeError(f"Cannot open image: {path_str}")
    arr = np.asarray(arr)
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[..., 0]
    if arr.ndim not in (2, 3):
        raise RuntimeError(f"Cannot show image: {path_str} has shape {arr.shape}")
    return arr
