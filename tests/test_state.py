"""Tests for the keep policy applied between two shown images."""

from dataclasses import replace

from SequenceViewer.core.config import ColorMapping, KeepLevel, ViewConfig
from SequenceViewer.core.state import MutableViewState, next_state


def _baseline():
    return MutableViewState.from_config(ViewConfig(scale=2.0, imin=1.0, imax=5.0))


def _changed(baseline):
    return replace(
        baseline,
        scale=4.0,
        pan=(10.0, 20.0),
        imin=-3.0,
        imax=3.0,
        channel=1,
        mapping=ColorMapping.JET,
    )


def test_first_load_uses_baseline():
    baseline = _baseline()
    previous = _changed(baseline)
    for keep in KeepLevel:
        assert next_state(previous, baseline, keep, is_first_load=True) == baseline
        assert next_state(None, baseline, keep) == baseline


def test_keep_none_resets_to_baseline():
    baseline = _baseline()
    assert next_state(_changed(baseline), baseline, KeepLevel.NONE) == baseline


def test_keep_most_resets_only_intensity_window():
    baseline = _baseline()
    previous = _changed(baseline)
    state = next_state(previous, baseline, KeepLevel.MOST)

    assert state.scale == 4.0
    assert state.pan == (10.0, 20.0)
    assert state.channel == 1
    assert state.mapping == ColorMapping.JET
    assert (state.imin, state.imax) == (0.0, 0.0)
    assert not state.has_intensity_window


def test_keep_all_keeps_everything():
    baseline = _baseline()
    previous = _changed(baseline)
    assert next_state(previous, baseline, KeepLevel.ALL) == previous


def test_keep_levels_are_ordered():
    assert KeepLevel.NONE < KeepLevel.MOST < KeepLevel.ALL
    assert max(KeepLevel.MOST, KeepLevel.ALL) == KeepLevel.ALL


def test_from_config_copies_view_fields():
    config = ViewConfig(
        pos=(1, 2),
        size=(300, 200),
        size_max=True,
        scale=1.5,
        imin=-1.0,
        imax=1.0,
        vmin=-10.0,
        vmax=10.0,
        channel=2,
        mapping=ColorMapping.RAINBOW,
    )
    state = MutableViewState.from_config(config)
    assert state.pos == (1, 2)
    assert state.size == (300, 200)
    assert state.size_max is True
    assert state.scale == 1.5
    assert state.pan is None
    assert (state.imin, state.imax, state.vmin, state.vmax) == (-1.0, 1.0, -10.0, 10.0)
    assert state.channel == 2
    assert state.mapping == ColorMapping.RAINBOW
    assert state.has_intensity_window


def test_equal_intensity_bounds_mean_natural_range():
    assert not MutableViewState(imin=2.0, imax=2.0).has_intensity_window
    assert not MutableViewState(imin=3.0, imax=2.0).has_intensity_window
