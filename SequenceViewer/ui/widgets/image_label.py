"""Image display widget with zoom support."""

from typing import Optional
from PySide6.QtWidgets import QLabel
from PySide6.QtGui import QPixmap, QPainter, QImage
from PySide6.QtCore import Qt, QPoint


class ImageLabel(QLabel):
    """Shows one QImage at a given zoom scale.

    Attributes:
        viewer: Parent SequenceViewerWindow
        scale: Current zoom scale factor
        showing: Whether an image is currently displayed
    """

    def __init__(self, viewer, parent=None):
        super().__init__(parent)
        self.viewer = viewer
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setMouseTracking(True)

        self._pixmap = QPixmap()
        self._qimage: Optional[QImage] = None
        self.scale = 1.0
        self.showing = False

    def set_image(self, qimg: QImage, scale: float = 1.0):
        """Set the image to display.

        Args:
            qimg: QImage to display
            scale: Zoom scale factor (1.0 = original size)
        """
        self._qimage = qimg
        if qimg.isNull():
            self.clear()
            return
        self._pixmap = QPixmap.fromImage(qimg)
        self.showing = True
        self.set_scale(scale)

    def set_scale(self, scale: float):
        self.scale = scale
        if self._pixmap.isNull():
            return
        disp_w = int(self._pixmap.width() * self.scale)
        disp_h = int(self._pixmap.height() * self.scale)
        self.setFixedSize(max(1, disp_w), max(1, disp_h))
        self.update()

    def clear(self):
        """Clear the displayed image."""
        self._pixmap = QPixmap()
        self._qimage = None
        self.setFixedSize(0, 0)
        self.showing = False
        self.update()

    def paintEvent(self, event):
        if self._pixmap.isNull():
            super().paintEvent(event)
            return
        painter = QPainter(self)
        painter.scale(self.scale, self.scale)
        painter.drawPixmap(0, 0, self._pixmap)
        painter.end()

    def widget_to_image_point(self, pt: QPoint) -> Optional[tuple[int, int]]:
        """Convert widget coordinates to image pixel coordinates, None outside the image."""
        if self._qimage is None or self._qimage.isNull() or self.scale <= 0:
            return None
        ix = int(pt.x() / self.scale)
        iy = int(pt.y() / self.scale)
        if 0 <= ix < self._qimage.width() and 0 <= iy < self._qimage.height():
            return (ix, iy)
        return None

    def mouseMoveEvent(self, event):
        self.viewer.update_mouse_status(event.position().toPoint())
        super().mouseMoveEvent(event)
