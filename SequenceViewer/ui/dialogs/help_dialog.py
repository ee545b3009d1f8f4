"""Help dialog showing keyboard shortcuts."""

from PySide6.QtWidgets import QDialog, QTextEdit, QVBoxLayout

from ...core.constants import PROGRAM_NAME, VERSION


class HelpDialog(QDialog):
    """Dialog showing keyboard shortcuts and usage help."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Help / Keyboard shortcuts")
        self.resize(560, 420)

        text = QTextEdit(self)
        text.setReadOnly(True)

        content = (
            f"{PROGRAM_NAME} {VERSION}\n"
            "================================\n\n"
            "[Navigation]\n"
            "  n / Space / PgDown : next image\n"
            "  b / Backspace / PgUp : previous image\n"
            "  Home / End : first / last image\n"
            "  r : reload current image\n\n"
            "[View]\n"
            "  + / - / Ctrl+wheel : zoom in / out (2x)\n"
            "  f : fit image to window\n"
            "  0 / 1 / 2 / 3 : all channels / R / G / B\n"
            "  m : cycle mapping raw, jet, rainbow\n"
            "  i : reset intensity range to the image range\n\n"
            "[Window]\n"
            "  h / F1 : this help\n"
            "  q / Esc : quit\n\n"
            "Command line options -keep and -keepall control which of these\n"
            "settings survive switching to another image.\n"
        )
        text.setPlainText(content)

        layout = QVBoxLayout(self)
        layout.addWidget(text)
