"""Command-line options and the immutable view configuration.

This module turns the ``sv`` command line into a :class:`ViewConfig` and the
list of file arguments. Scanning is split in two steps:

1. ``argparse`` records every option occurrence as a ``(name, raw values)``
   pair in arrival order (no type conversion happens there).
2. :func:`resolve_config` replays the pairs (last occurrence wins), coerces
   the values to their declared kinds and applies the cross-option keep rules
   once, after the scan.

Keep rules:
    - ``-keep`` / ``-keepall`` set the keep level directly
    - an explicit ``-scale`` > 0 raises the keep level to at least ``most``
    - an explicit ``-imin`` or ``-imax`` raises the keep level to ``all``

The rules only ever upgrade, so the final level does not depend on the order
in which the options were given.
"""

import argparse
import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import DEFAULT_VMAX, DEFAULT_VMIN, PROGRAM_NAME, UNSET
from .errors import HelpRequested, NoInputError, UsageError, VersionRequested


class KeepLevel(IntEnum):
    """How much view state survives a navigation step (ordered)."""

    NONE = 0
    MOST = 1
    ALL = 2


class ColorMapping(Enum):
    """Mapping for greyscale images."""

    RAW = "raw"
    JET = "jet"
    RAINBOW = "rainbow"


CHANNELS = {"R": 0, "G": 1, "B": 2}


@dataclass(frozen=True)
class ViewConfig:
    """Immutable baseline built once from the command line."""

    pos: Tuple[int, int] = (UNSET, UNSET)
    size: Tuple[int, int] = (UNSET, UNSET)
    size_max: bool = False
    scale: float = 0.0
    imin: float = 0.0
    imax: float = 0.0
    vmin: float = DEFAULT_VMIN
    vmax: float = DEFAULT_VMAX
    channel: Optional[int] = None
    mapping: ColorMapping = ColorMapping.RAW
    keep: KeepLevel = KeepLevel.NONE
    watch: bool = False


@dataclass(frozen=True)
class ResolvedOptions:
    """Result of command-line resolution."""

    config: ViewConfig
    files: List[str] = field(default_factory=list)
    debug: bool = False


# option name -> kinds of its values; a tuple of strings is an enumerated token set
OPTION_KINDS = {
    "-pos": (int, int),
    "-size": (int, int),
    "-maxsize": (int, int),
    "-scale": (float,),
    "-select": (("R", "G", "B"),),
    "-imin": (float,),
    "-imax": (float,),
    "-vmin": (float,),
    "-vmax": (float,),
    "-keep": (),
    "-keepall": (),
    "-watch": (),
    "-map": (("raw", "jet", "rainbow"),),
    "-debug": (),
}

OPTION_HELP = {
    "-pos": ("Set initial position of window.", ("x", "y")),
    "-size": ("Set initial size of window. It will be limited by the screen size.", ("w", "h")),
    "-maxsize": (
        "Set initial maximum size of the window. It can be smaller, depending on the first image.",
        ("w", "h"),
    ),
    "-scale": ("Set initial scale factor (implies -keep).", ("s",)),
    "-select": ("Select a color channel.", ("R|G|B",)),
    "-imin": ("Set initial minimum intensity (implies -keepall).", ("v",)),
    "-imax": ("Set initial maximum intensity (implies -keepall).", ("v",)),
    "-vmin": ("Set minimum valid intensity.", ("v",)),
    "-vmax": ("Set maximum valid intensity.", ("v",)),
    "-keep": ("Keep settings, except intensity range, when switching between images.", ()),
    "-keepall": ("Keep all settings when switching between images.", ()),
    "-watch": ("Watches the current image file for changes and reloads automatically.", ()),
    "-map": ("Mapping for greyscale images: raw (default), jet, rainbow.", ("raw|jet|rainbow",)),
    "-debug": ("Print debug messages.", ()),
}


def _kind_name(kind) -> str:
    if isinstance(kind, tuple):
        return "one of " + "|".join(kind)
    return "an integer" if kind is int else "a number"


def _coerce(name: str, kind, raw):
    """Convert one raw option value to its declared kind."""
    if isinstance(kind, tuple):
        if raw in kind:
            return raw
        raise UsageError(f"{name}: expected {_kind_name(kind)}, got '{raw}'")
    try:
        if kind is int and isinstance(raw, float) and not raw.is_integer():
            raise ValueError(raw)
        return kind(raw)
    except (TypeError, ValueError):
        raise UsageError(f"{name}: expected {_kind_name(kind)}, got '{raw}'") from None


def _coerce_values(name: str, raw_values) -> list:
    try:
        kinds = OPTION_KINDS[name]
    except KeyError:
        raise UsageError(f"unknown option {name}") from None

    if raw_values is None:
        raw_values = []
    elif isinstance(raw_values, (str, bytes)) or not isinstance(raw_values, (list, tuple)):
        raw_values = [raw_values]

    if len(raw_values) < len(kinds):
        raise UsageError(f"{name}: expected {len(kinds)} value(s), got {len(raw_values)}")
    if len(raw_values) > len(kinds):
        raise UsageError(f"{name}: takes {len(kinds)} value(s), got {len(raw_values)}")
    return [_coerce(name, kind, raw) for kind, raw in zip(kinds, raw_values)]


def resolve_keep(explicit: Optional[KeepLevel], scale: float, intensity_given: bool) -> KeepLevel:
    """Apply the keep implication rules to the explicitly requested level."""
    keep = explicit if explicit is not None else KeepLevel.NONE
    if scale > 0:
        keep = max(keep, KeepLevel.MOST)
    if intensity_given:
        keep = KeepLevel.ALL
    return KeepLevel(keep)


def resolve_config(pairs: Iterable[Tuple[str, Sequence]], files: Sequence[str], debug: bool = False) -> ResolvedOptions:
    """Build the view configuration from ordered ``(option, values)`` pairs.

    Args:
        pairs: Option occurrences in arrival order, e.g. ``[("-scale", ["2"])]``.
            Values may be strings or already-typed numbers.
        files: Trailing positional file arguments.
        debug: Initial debug flag (``-debug`` in ``pairs`` also sets it).

    Returns:
        ResolvedOptions with the frozen ViewConfig and the file list.

    Raises:
        UsageError: unknown option, missing value, or a value of the wrong kind.
        NoInputError: ``files`` is empty.
    """
    pos = (UNSET, UNSET)
    size = (UNSET, UNSET)
    size_max = False
    scale = 0.0
    imin = 0.0
    imax = 0.0
    vmin = DEFAULT_VMIN
    vmax = DEFAULT_VMAX
    channel = None
    mapping = ColorMapping.RAW
    watch = False
    explicit_keep = None
    intensity_given = False

    for name, raw_values in pairs:
        values = _coerce_values(name, raw_values)

        if name == "-pos":
            pos = (values[0], values[1])
        elif name in ("-size", "-maxsize"):
            size = (values[0], values[1])
            size_max = name == "-maxsize"
        elif name == "-scale":
            scale = values[0] if values[0] > 0 else 0.0
        elif name == "-select":
            channel = CHANNELS[values[0]]
        elif name == "-imin":
            imin = values[0]
            intensity_given = True
        elif name == "-imax":
            imax = values[0]
            intensity_given = True
        elif name == "-vmin":
            vmin = values[0]
        elif name == "-vmax":
            vmax = values[0]
        elif name == "-keep":
            explicit_keep = max(explicit_keep or KeepLevel.NONE, KeepLevel.MOST)
        elif name == "-keepall":
            explicit_keep = KeepLevel.ALL
        elif name == "-watch":
            watch = True
        elif name == "-map":
            mapping = ColorMapping(values[0])
        elif name == "-debug":
            debug = True

    files = [f for f in files]
    if not files:
        raise NoInputError("No image files given")

    config = ViewConfig(
        pos=pos,
        size=size,
        size_max=size_max,
        scale=float(scale),
        imin=float(imin),
        imax=float(imax),
        vmin=float(vmin),
        vmax=float(vmax),
        channel=channel,
        mapping=mapping,
        keep=resolve_keep(explicit_keep, scale, intensity_given),
        watch=watch,
    )
    return ResolvedOptions(config=config, files=files, debug=debug)


class _UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting.

    Negative numbers in any float notation (``-3``, ``-.5``, ``-1e30``,
    ``-inf``) are values, not options.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._negative_number_matcher = re.compile(
            r"^-(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$|^-(inf|infinity|nan)$", re.IGNORECASE
        )

    def error(self, message):
        raise UsageError(message)


class _RecordOption(argparse.Action):
    """Append ``(option, values)`` to ``namespace.options`` in arrival order."""

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.options.append((option_string, list(values or [])))


class _RaiseAction(argparse.Action):
    """Stop scanning by raising the exception given as ``const``."""

    def __init__(self, option_strings, dest, const=None, **kwargs):
        super().__init__(option_strings, dest, nargs=0, const=const, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        raise self.const()


def build_parser() -> argparse.ArgumentParser:
    """Create the ``sv`` command-line parser."""
    parser = _UsageArgumentParser(
        prog=PROGRAM_NAME,
        usage=f"{PROGRAM_NAME} [<options>] <image file> ...",
        description="Shows images of a directory as a sequence in one window.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-help", action=_RaiseAction, const=HelpRequested, help="Print help and exit.")
    parser.add_argument("-version", action=_RaiseAction, const=VersionRequested, help="Print version and exit.")
    for name, (text, metavars) in OPTION_HELP.items():
        if metavars:
            parser.add_argument(
                name,
                action=_RecordOption,
                nargs=len(metavars),
                metavar=metavars if len(metavars) > 1 else metavars[0],
                help=text,
            )
        else:
            parser.add_argument(name, action=_RecordOption, nargs=0, help=text)
    parser.add_argument("files", nargs="*", metavar="<image file>", help="Image files to show.")
    return parser


def format_help() -> str:
    return build_parser().format_help()


def parse_command_line(args: Sequence[str]) -> ResolvedOptions:
    """Parse command-line arguments (without the program name).

    Raises:
        HelpRequested, VersionRequested: when ``-help`` / ``-version`` is met.
        UsageError: on malformed options.
        NoInputError: when no file argument remains.
    """
    parser = build_parser()
    namespace = argparse.Namespace(options=[])
    # options may also follow or sit between the file arguments
    namespace = parser.parse_intermixed_args(list(args), namespace=namespace)
    return resolve_config(namespace.options, namespace.files)
