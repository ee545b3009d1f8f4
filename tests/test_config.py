"""Tests for command-line resolution into ViewConfig.

Covers last-wins option handling, value coercion errors and the keep-level
implication rules of -scale, -imin and -imax.
"""

import pytest

from SequenceViewer.core.config import (
    ColorMapping,
    KeepLevel,
    ViewConfig,
    parse_command_line,
    resolve_config,
    resolve_keep,
)
from SequenceViewer.core.constants import DEFAULT_VMAX, DEFAULT_VMIN, FLOAT32_MAX, UNSET
from SequenceViewer.core.errors import HelpRequested, NoInputError, UsageError, VersionRequested


def test_defaults():
    """Without options the configuration equals the documented defaults."""
    options = parse_command_line(["a.png"])

    assert options.files == ["a.png"]
    assert options.config == ViewConfig()
    assert options.config.pos == (UNSET, UNSET)
    assert options.config.scale == 0.0
    assert options.config.vmin == DEFAULT_VMIN == -FLOAT32_MAX
    assert options.config.vmax == DEFAULT_VMAX
    assert options.config.keep == KeepLevel.NONE
    assert options.config.mapping == ColorMapping.RAW
    assert options.config.channel is None
    assert options.config.watch is False
    assert options.debug is False


def test_repeated_option_last_wins():
    """Two -scale flags: only the second value takes effect."""
    config = parse_command_line(["-scale", "1.5", "-scale", "3", "a.png"]).config
    assert config.scale == 3.0


def test_imin_alone_keeps_all():
    config = parse_command_line(["-imin", "5", "a.png"]).config
    assert config.imin == 5.0
    assert config.keep == KeepLevel.ALL


def test_imax_alone_keeps_all():
    config = parse_command_line(["-imax", "0", "a.png"]).config
    assert config.keep == KeepLevel.ALL


def test_scale_alone_keeps_most():
    config = parse_command_line(["-scale", "2", "a.png"]).config
    assert config.keep == KeepLevel.MOST


def test_keep_then_imin_upgrades_to_all():
    config = parse_command_line(["-keep", "-imin", "5", "a.png"]).config
    assert config.keep == KeepLevel.ALL


def test_keep_level_does_not_depend_on_order():
    """Implications only upgrade, so the arrival order does not matter."""
    orders = [
        ["-imin", "5", "-keep", "a.png"],
        ["-keep", "-imin", "5", "a.png"],
        ["-keepall", "-scale", "2", "a.png"],
        ["-scale", "2", "-keepall", "a.png"],
        ["-keepall", "-keep", "a.png"],
    ]
    for args in orders:
        assert parse_command_line(args).config.keep == KeepLevel.ALL, args


def test_non_positive_scale_means_auto_fit():
    config = parse_command_line(["-scale", "-2", "a.png"]).config
    assert config.scale == 0.0
    assert config.keep == KeepLevel.NONE

    config = parse_command_line(["-scale", "2", "-scale", "0", "a.png"]).config
    assert config.scale == 0.0
    assert config.keep == KeepLevel.NONE


def test_size_and_maxsize_last_one_wins():
    config = parse_command_line(["-size", "800", "600", "-maxsize", "400", "300", "a.png"]).config
    assert config.size == (400, 300)
    assert config.size_max is True

    config = parse_command_line(["-maxsize", "400", "300", "-size", "800", "600", "a.png"]).config
    assert config.size == (800, 600)
    assert config.size_max is False


def test_negative_values():
    config = parse_command_line(["-pos", "-10", "20", "-vmin", "-5", "-imin", "-1.5", "a.png"]).config
    assert config.pos == (-10, 20)
    assert config.vmin == -5.0
    assert config.imin == -1.5


def test_negative_values_in_exponent_notation():
    config = parse_command_line(["-vmin", "-1e30", "-imin", "-2.5e-3", "-imax", "-1E5", "a.png"]).config
    assert config.vmin == -1e30
    assert config.imin == -2.5e-3
    assert config.imax == -1e5

    config = parse_command_line(["-vmin", "-3.4e38", "-vmax", "3.4e38", "a.png"]).config
    assert config.vmin == -3.4e38
    assert config.vmax == 3.4e38

    config = parse_command_line(["-vmin", "-inf", "-scale", "-.5", "a.png"]).config
    assert config.vmin == float("-inf")
    assert config.scale == 0.0


def test_options_between_files():
    options = parse_command_line(["a.png", "-keep", "b.png", "-scale", "2", "c.png"])
    assert options.files == ["a.png", "b.png", "c.png"]
    assert options.config.keep == KeepLevel.MOST
    assert options.config.scale == 2.0


def test_select_and_map():
    config = parse_command_line(["-select", "G", "-map", "jet", "-watch", "a.png"]).config
    assert config.channel == 1
    assert config.mapping == ColorMapping.JET
    assert config.watch is True

    config = parse_command_line(["-select", "R", "-select", "B", "-map", "rainbow", "a.png"]).config
    assert config.channel == 2
    assert config.mapping == ColorMapping.RAINBOW


def test_multiple_files_are_collected_in_order():
    options = parse_command_line(["-keep", "c.png", "a.png", "c.png"])
    assert options.files == ["c.png", "a.png", "c.png"]


def test_debug_flag():
    assert parse_command_line(["-debug", "a.png"]).debug is True


@pytest.mark.parametrize(
    "args",
    [
        ["-scale", "abc", "a.png"],
        ["-pos", "1.5", "2", "a.png"],
        ["-select", "X", "a.png"],
        ["-map", "gray", "a.png"],
        ["-unknown", "a.png"],
        ["a.png", "-scale"],
        ["-size", "10"],
    ],
)
def test_bad_values_raise_usage_error(args):
    with pytest.raises(UsageError):
        parse_command_line(args)


def test_no_files_raises_no_input_error():
    with pytest.raises(NoInputError):
        parse_command_line(["-keep", "-scale", "2"])
    with pytest.raises(NoInputError):
        parse_command_line([])


def test_help_and_version_stop_scanning():
    """-help wins over options that come after it, even invalid ones."""
    with pytest.raises(HelpRequested):
        parse_command_line(["-help", "-scale", "abc"])
    with pytest.raises(VersionRequested):
        parse_command_line(["-version"])


def test_resolve_config_accepts_typed_pairs():
    options = resolve_config([("-scale", [2.0]), ("-pos", (3, 4)), ("-watch", [])], ["x.pfm"])
    assert options.config.scale == 2.0
    assert options.config.pos == (3, 4)
    assert options.config.keep == KeepLevel.MOST
    assert options.config.watch is True


def test_resolve_config_rejects_missing_value():
    with pytest.raises(UsageError):
        resolve_config([("-pos", ["1"])], ["x.pfm"])
    with pytest.raises(UsageError):
        resolve_config([("-watch", ["yes"])], ["x.pfm"])


def test_resolve_keep_rules():
    assert resolve_keep(None, 0.0, False) == KeepLevel.NONE
    assert resolve_keep(None, 2.0, False) == KeepLevel.MOST
    assert resolve_keep(KeepLevel.ALL, 2.0, False) == KeepLevel.ALL
    assert resolve_keep(KeepLevel.MOST, 0.0, True) == KeepLevel.ALL
    assert resolve_keep(None, 0.0, True) == KeepLevel.ALL


def test_config_is_immutable():
    config = parse_command_line(["a.png"]).config
    with pytest.raises(AttributeError):
        config.scale = 2.0
