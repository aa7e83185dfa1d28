"""
Tests for replay mode
=====================
"""

import logging
import signal

import numpy as np
import pytest

from signsense.main import ReplayClock, SignToTextApp, load_replay, main, parse_args


@pytest.fixture
def sequence_file(tmp_path, fist, open_hand):
    """20 frames of fist, 5 without a hand, 20 of open hand."""
    gap = np.full((5, 21, 3), np.nan, dtype=np.float32)
    sequence = np.concatenate([
        np.repeat(fist[None], 20, axis=0),
        gap,
        np.repeat(open_hand[None], 20, axis=0),
    ])
    path = tmp_path / "session.npy"
    np.save(path, sequence)
    return str(path)


@pytest.fixture(autouse=True)
def restore_process_state():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    sigint = signal.getsignal(signal.SIGINT)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    signal.signal(signal.SIGINT, sigint)


class TestLoadReplay:

    def test_nan_frames_become_none(self, sequence_file):
        frames = load_replay(sequence_file)
        assert len(frames) == 45
        assert sum(f is None for f in frames) == 5
        assert frames[0].shape == (21, 3)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "flat.npy"
        np.save(path, np.zeros((10, 63)))
        with pytest.raises(ValueError):
            load_replay(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_replay(str(tmp_path / "nope.npy"))


class TestReplayRun:

    def test_replay_clock(self):
        clock = ReplayClock(frame_interval_ms=40)
        assert clock() == 0.0
        clock.tick()
        clock.tick()
        assert clock() == pytest.approx(0.08)

    def test_app_replay(self, fresh_config, sequence_file):
        fresh_config.load_dict({})
        clock = ReplayClock()
        app = SignToTextApp(fresh_config, language="gujarati", clock=clock)
        text = app.run_replay(load_replay(sequence_file), clock)
        assert text == "હા નમસ્તે"
        assert app.pipeline.text == "yes hello"

    def test_toggle_language(self, fresh_config):
        fresh_config.load_dict({})
        app = SignToTextApp(fresh_config)
        assert app.language == "english"
        app.toggle_language()
        assert app.language == "gujarati"
        app.toggle_language()
        assert app.language == "english"

    def test_main_replay(self, fresh_config, sequence_file, capsys):
        code = main(["--mode", "replay", "--replay", sequence_file, "--log-level", "WARNING"])
        assert code == 0
        assert capsys.readouterr().out.strip() == "yes hello"

    def test_main_replay_requires_path(self, fresh_config):
        assert main(["--mode", "replay", "--log-level", "WARNING"]) == 2

    def test_main_replay_bad_file(self, fresh_config, tmp_path):
        code = main(["--mode", "replay", "--replay", str(tmp_path / "nope.npy"),
                     "--log-level", "WARNING"])
        assert code == 1


class TestParseArgs:

    def test_defaults(self):
        args = parse_args([])
        assert args.mode == "live"
        assert args.language is None
        assert args.frame_interval_ms == pytest.approx(33.0)

    def test_rejects_unknown_language(self):
        with pytest.raises(SystemExit):
            parse_args(["--language", "klingon"])
