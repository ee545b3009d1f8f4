"""Dialog windows."""

from .help_dialog import HelpDialog

__all__ = ["HelpDialog"]
