"""Tests for the reload channel and the polling watch controller."""

import os
import threading
import time

import pytest

from SequenceViewer.core.constants import WATCH_FAILURE_WARN_THRESHOLD
from SequenceViewer.core.errors import WatchIOError
from SequenceViewer.core.watch import (
    ReloadChannel,
    WatchController,
    WatchState,
    stat_signature,
)


class FakeStat:
    """Stat function returning scripted signatures per path."""

    def __init__(self):
        self.signatures = {}
        self.error = None

    def __call__(self, path):
        if self.error is not None:
            raise self.error
        return self.signatures.get(path)


def test_channel_coalesces_posts():
    notified = []
    channel = ReloadChannel(notify=lambda: notified.append(True))

    assert channel.post(1)
    assert channel.post(1)
    assert channel.post(2)
    assert channel.pending
    assert notified == [True]

    assert channel.take() == 2
    assert channel.take() is None
    assert not channel.pending


def test_channel_notifies_again_after_take():
    notified = []
    channel = ReloadChannel(notify=lambda: notified.append(True))
    channel.post(0)
    channel.take()
    channel.post(0)
    assert len(notified) == 2


def test_closed_channel_drops_posts():
    notified = []
    channel = ReloadChannel(notify=lambda: notified.append(True))
    channel.post(3)
    channel.close()

    assert channel.closed
    assert channel.take() is None
    assert not channel.post(4)
    assert channel.take() is None
    assert notified == [True]


def test_watch_detects_change():
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 10)
    channel = ReloadChannel()
    watcher = WatchController(channel, interval=0.01, stat=stat)

    watcher.watch("a.png", 4)
    assert watcher.state == WatchState.WATCHING
    assert not watcher.poll_once()

    stat.signatures["a.png"] = (2, 10)
    assert watcher.poll_once()
    assert watcher.state == WatchState.WATCHING
    assert channel.take() == 4

    # same signature again: no new request
    assert not watcher.poll_once()
    assert channel.take() is None


def test_size_change_alone_is_detected():
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 10)
    channel = ReloadChannel()
    watcher = WatchController(channel, stat=stat)
    watcher.watch("a.png", 0)

    stat.signatures["a.png"] = (1, 11)
    assert watcher.poll_once()


def test_vanished_file_is_not_an_error():
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 10)
    channel = ReloadChannel()
    watcher = WatchController(channel, stat=stat)
    watcher.watch("a.png", 0)

    del stat.signatures["a.png"]
    assert not watcher.poll_once()
    assert watcher.state == WatchState.WATCHING

    # reappears unchanged: nothing to reload
    stat.signatures["a.png"] = (1, 10)
    assert not watcher.poll_once()

    # reappears with new content
    stat.signatures["a.png"] = (5, 12)
    assert watcher.poll_once()
    assert channel.take() == 0


def test_stat_errors_are_suppressed(caplog):
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 10)
    channel = ReloadChannel()
    watcher = WatchController(channel, stat=stat)
    watcher.watch("a.png", 0)

    stat.error = WatchIOError("permission denied")
    with caplog.at_level("WARNING", logger="SequenceViewer"):
        for _ in range(WATCH_FAILURE_WARN_THRESHOLD):
            assert not watcher.poll_once()
    assert watcher.state == WatchState.WATCHING
    assert channel.take() is None
    assert len([r for r in caplog.records if r.levelname == "WARNING"]) == 1


def test_failed_stat_on_watch_does_not_cause_reload():
    """When the first stat fails, the first successful one is the reference."""
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 10)
    stat.error = WatchIOError("temporarily unavailable")
    channel = ReloadChannel()
    watcher = WatchController(channel, stat=stat)
    watcher.watch("a.png", 0)

    stat.error = None
    assert not watcher.poll_once()
    assert channel.take() is None

    stat.signatures["a.png"] = (2, 10)
    assert watcher.poll_once()
    assert channel.take() == 0


def test_file_created_after_watch_is_reloaded():
    stat = FakeStat()
    channel = ReloadChannel()
    watcher = WatchController(channel, stat=stat)
    watcher.watch("a.png", 0)
    assert not watcher.poll_once()

    stat.signatures["a.png"] = (1, 10)
    assert watcher.poll_once()
    assert channel.take() == 0


def test_retarget_replaces_previous_file():
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 1)
    stat.signatures["b.png"] = (1, 1)
    channel = ReloadChannel()
    watcher = WatchController(channel, stat=stat)

    watcher.watch("a.png", 0)
    watcher.watch("b.png", 1)
    assert watcher.target.path == "b.png"

    stat.signatures["a.png"] = (2, 2)
    assert not watcher.poll_once()

    stat.signatures["b.png"] = (2, 2)
    assert watcher.poll_once()
    assert channel.take() == 1


def test_unwatch_goes_idle():
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 1)
    watcher = WatchController(ReloadChannel(), stat=stat)
    watcher.watch("a.png", 0)
    watcher.unwatch()

    assert watcher.state == WatchState.IDLE
    assert watcher.target is None
    stat.signatures["a.png"] = (2, 2)
    assert not watcher.poll_once()


def test_no_post_after_close():
    stat = FakeStat()
    stat.signatures["a.png"] = (1, 1)
    channel = ReloadChannel()
    watcher = WatchController(channel, stat=stat)
    watcher.watch("a.png", 0)
    watcher.close()

    assert watcher.state == WatchState.CLOSED
    stat.signatures["a.png"] = (2, 2)
    assert not watcher.poll_once()
    assert channel.take() is None

    # closed is final
    watcher.watch("a.png", 0)
    assert watcher.state == WatchState.CLOSED


def test_stat_signature_of_real_file(tmp_path):
    path = tmp_path / "a.pfm"
    path.write_bytes(b"abc")
    signature = stat_signature(str(path))
    assert signature is not None
    assert signature[1] == 3
    assert stat_signature(str(tmp_path / "missing.pfm")) is None


def test_stat_signature_wraps_os_errors(monkeypatch):
    def failing_stat(path):
        raise PermissionError("denied")

    monkeypatch.setattr(os, "stat", failing_stat)
    with pytest.raises(WatchIOError):
        stat_signature("a.pfm")


def test_background_thread_posts_and_stops(tmp_path):
    path = tmp_path / "a.pfm"
    path.write_bytes(b"one")

    posted = threading.Event()
    channel = ReloadChannel(notify=posted.set)
    watcher = WatchController(channel, interval=0.01)
    watcher.watch(str(path), 7)
    watcher.start()
    try:
        assert watcher.running
        path.write_bytes(b"changed content")
        assert posted.wait(timeout=5.0)
        assert channel.take() == 7
    finally:
        watcher.close()

    time.sleep(0.05)
    assert not watcher.running
    path.write_bytes(b"changed again, after close")
    time.sleep(0.05)
    assert channel.take() is None
