"""Image sequence assembly from file arguments.

A single existing file argument is expanded into all files of its directory,
sorted by path string, so that the user can step through neighbouring images.
Any other argument list is used verbatim.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Iterable, Set, Tuple

from .errors import DirectoryListingError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSequence:
    """Ordered image paths with the index of the currently shown one.

    The path list never changes after creation; ``move`` returns a new
    sequence with a clamped index.
    """

    paths: Tuple[str, ...]
    index: int = 0

    def __post_init__(self):
        if not self.paths:
            raise ValueError("an image sequence needs at least one path")
        if not 0 <= self.index < len(self.paths):
            raise IndexError(f"start index {self.index} outside [0, {len(self.paths)})")

    def __len__(self) -> int:
        return len(self.paths)

    @property
    def current(self) -> str:
        return self.paths[self.index]

    def clamp(self, index: int) -> int:
        return max(0, min(index, len(self.paths) - 1))

    def move(self, delta: int) -> "ImageSequence":
        """Return the sequence moved by ``delta``, clamped to the first/last image (no wraparound)."""
        return ImageSequence(self.paths, self.clamp(self.index + delta))


def containing_directory(path: str) -> str:
    """Return ``path`` up to and including its last separator (``""`` if none)."""
    i = max(path.rfind("/"), path.rfind("\\"))
    if i < 0:
        return ""
    return path[: i + 1]


def list_directory(directory: str) -> Set[str]:
    """List the regular files of ``directory`` as ``directory + name`` strings.

    An empty ``directory`` lists the current working directory and yields
    bare file names. No extension filter is applied.

    Raises:
        DirectoryListingError: If the directory cannot be read.
    """
    content = set()
    try:
        with os.scandir(directory or ".") as entries:
            for entry in entries:
                try:
                    if entry.is_file():
                        content.add(directory + entry.name)
                except OSError:
                    continue
    except OSError as e:
        raise DirectoryListingError(f"Cannot list directory '{directory or '.'}': {e}") from e
    return content


def is_readable_file(path: str) -> bool:
    """Return True if ``path`` names an existing regular file that can be opened for reading."""
    if not os.path.isfile(path):
        return False
    try:
        with open(path, "rb"):
            pass
    except OSError:
        return False
    return True


def assemble_sequence(
    files: Iterable[str],
    *,
    list_directory: Callable[[str], Set[str]] = list_directory,
    is_readable_file: Callable[[str], bool] = is_readable_file,
) -> ImageSequence:
    """Build the image sequence and start index from the file arguments.

    Args:
        files: File arguments in command-line order (at least one).
        list_directory: Directory lister, see :func:`list_directory`.
        is_readable_file: Existence/readability check for the lone-argument case.

    Returns:
        ImageSequence positioned on the image to show first.
    """
    files = list(files)
    if len(files) != 1 or not is_readable_file(files[0]):
        return ImageSequence(tuple(files), 0)

    name = files[0]
    directory = containing_directory(name)
    try:
        paths = sorted(list_directory(directory))
    except Exception as e:
        log.debug("Directory expansion of %s failed, showing it alone: %s", name, e)
        return ImageSequence((name,), 0)

    try:
        first = paths.index(name)
    except ValueError:
        paths.insert(0, name)
        first = 0

    log.debug("Expanded %s into %d files of '%s'", name, len(paths), directory or ".")
    return ImageSequence(tuple(paths), first)
