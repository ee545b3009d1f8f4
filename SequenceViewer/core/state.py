"""Mutable view state and the policy deciding what survives a navigation step.

The state object itself is immutable; every change produces a new instance
with ``dataclasses.replace``. Only the session replaces it.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import ColorMapping, KeepLevel, ViewConfig
from .constants import DEFAULT_VMAX, DEFAULT_VMIN, UNSET


@dataclass(frozen=True)
class MutableViewState:
    """View settings that the user can change at runtime.

    Attributes:
        pos: Window position, ``(-1, -1)`` lets the window system decide.
        size: Window size, ``(-1, -1)`` derives it from the image.
        size_max: ``size`` is an upper bound instead of a fixed size.
        scale: Zoom factor, 0 fits the image into the window.
        pan: Image coordinates shown at the viewport center, None = default.
        imin, imax: Intensity display window; used only if ``imin < imax``,
            otherwise the natural range of the image applies.
        vmin, vmax: Values outside this range are treated as invalid.
        channel: Selected color channel (0=R, 1=G, 2=B) or None for all.
        mapping: Color mapping for greyscale images.
    """

    pos: Tuple[int, int] = (UNSET, UNSET)
    size: Tuple[int, int] = (UNSET, UNSET)
    size_max: bool = False
    scale: float = 0.0
    pan: Optional[Tuple[float, float]] = None
    imin: float = 0.0
    imax: float = 0.0
    vmin: float = DEFAULT_VMIN
    vmax: float = DEFAULT_VMAX
    channel: Optional[int] = None
    mapping: ColorMapping = ColorMapping.RAW

    @classmethod
    def from_config(cls, config: ViewConfig) -> "MutableViewState":
        """Initial state as given on the command line."""
        return cls(
            pos=config.pos,
            size=config.size,
            size_max=config.size_max,
            scale=config.scale,
            pan=None,
            imin=config.imin,
            imax=config.imax,
            vmin=config.vmin,
            vmax=config.vmax,
            channel=config.channel,
            mapping=config.mapping,
        )

    @property
    def has_intensity_window(self) -> bool:
        return self.imin < self.imax

    def with_natural_range(self) -> "MutableViewState":
        return replace(self, imin=0.0, imax=0.0)


def next_state(
    previous: Optional[MutableViewState],
    baseline: MutableViewState,
    keep: KeepLevel,
    is_first_load: bool = False,
) -> MutableViewState:
    """Compute the state for the next shown image.

    The same rules apply to stepping to another image and to reloading the
    current one.

    Args:
        previous: State of the image shown before (ignored on first load).
        baseline: State derived from the command line.
        keep: Configured keep level.
        is_first_load: True for the very first image of the session.

    Returns:
        - first load or ``KeepLevel.NONE``: ``baseline``
        - ``KeepLevel.MOST``: ``previous`` with the intensity window reset to
          the natural range of the new image
        - ``KeepLevel.ALL``: ``previous`` unchanged
    """
    if is_first_load or previous is None or keep == KeepLevel.NONE:
        return baseline
    if keep == KeepLevel.MOST:
        return previous.with_natural_range()
    return previous
