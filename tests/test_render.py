import numpy as np
from dataclasses import replace

from pong_audio import AudioFeedback, synth_arpeggio
from pong_match import Event
from pong_render import BALL, BG, CPU, PLAYER, paddle_color, render_rgb


def test_rgb_frame_layout(match):
    frame = match.snapshot()
    img = render_rgb(frame)
    assert img.shape == (500, 800, 3)
    assert img.dtype == np.uint8
    assert tuple(img[0, 0]) == BG
    assert tuple(img[250, 15]) == PLAYER
    assert tuple(img[250, 785]) == CPU
    assert tuple(img[250, 400]) == BALL


def test_rgb_frame_scale(match):
    img = render_rgb(match.snapshot(), scale=2)
    assert img.shape == (1000, 1600, 3)


def test_glowing_paddle_is_lighter(match):
    frame = match.snapshot()
    lit = replace(frame, player=replace(frame.player, glowing=True))
    img = render_rgb(lit)
    assert tuple(img[250, 15]) == paddle_color(lit.player, PLAYER)
    assert img[250, 15].sum() > sum(PLAYER)


def test_ball_past_the_edge_stays_off_canvas(match):
    frame = replace(match.snapshot(), ball_x=-50.0)
    img = render_rgb(frame)
    assert tuple(img[250, 0]) == BG
    assert tuple(img[0, 0]) == BG


def test_arpeggio_samples():
    samples = synth_arpeggio(220, [0, 5, 7], 0.3, rate=8000)
    # three notes of 2400 samples, each starting 560 samples after the previous
    assert samples.shape == (2400 + 2 * 560,)
    assert samples.dtype == np.int16
    assert np.abs(samples).max() <= int(0.2 * 32767)
    assert samples[0] == 0


def test_muted_audio_is_inert():
    audio = AudioFeedback(enabled=False)
    audio(Event.SCORE, {})
    assert audio.sounds == {}


def test_unmute_after_starting_muted_loads_sounds(monkeypatch):
    audio = AudioFeedback(enabled=False)
    loads = []
    monkeypatch.setattr(audio, "_load", lambda: loads.append(1))
    assert audio.toggle() is True
    assert loads == [1]
    assert audio.toggle() is False
    assert audio.toggle() is True
    # Still nothing synthesized, so it tries again
    assert loads == [1, 1]


def test_unmute_without_audio_device_stays_off(monkeypatch):
    audio = AudioFeedback(enabled=False)

    def no_device():
        audio.enabled = False

    monkeypatch.setattr(audio, "_load", no_device)
    assert audio.toggle() is False
