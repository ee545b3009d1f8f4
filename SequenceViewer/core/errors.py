"""Exception types raised by the sequence-and-state controller."""


class ViewerError(Exception):
    """Base class for all SequenceViewer errors."""


class UsageError(ViewerError):
    """An option is unknown, lacks a value, or its value does not parse."""


class NoInputError(ViewerError):
    """No image files remain after option parsing."""


class DirectoryListingError(ViewerError):
    """The directory of a lone file argument could not be listed."""


class WatchIOError(ViewerError):
    """The watched file could not be examined."""


class HelpRequested(Exception):
    """``-help`` was given; option scanning stops."""


class VersionRequested(Exception):
    """``-version`` was given; option scanning stops."""
