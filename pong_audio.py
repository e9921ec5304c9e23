"""
Audio feedback: soft sine arpeggios for match events, synthesized with numpy
and played through pygame.mixer.
"""
import logging

import numpy as np
import pygame

from pong_match import Event

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
NOTE_GAP = 0.07   # seconds between arpeggio notes
VOLUME = 0.2

# event -> (base frequency Hz, semitone offsets, note duration s)
TONES = {
    Event.PADDLE_HIT: (220, [0, 5, 7], 0.3),
    Event.WALL_BOUNCE: (196, [0, 4], 0.25),
    Event.SCORE: (330, [0, 4, 7, 12], 0.4),
    Event.MATCH_WON: (262, [0, 4, 7, 12, 16, 19, 24], 0.8),
}


def synth_arpeggio(base_freq, notes, duration, rate=SAMPLE_RATE):
    """Mono int16 samples: each note a faded sine, started NOTE_GAP after the last."""
    n_note = int(duration * rate)
    gap = int(NOTE_GAP * rate)
    out = np.zeros(n_note + gap * (len(notes) - 1), dtype=np.float64)
    t = np.arange(n_note) / rate
    fade = max(1, min(int(0.1 * rate), n_note // 2))
    env = np.ones(n_note)
    env[:fade] = np.linspace(0.0, 1.0, fade)
    env[-fade:] = np.linspace(1.0, 0.0, fade)
    for i, semitones in enumerate(notes):
        freq = base_freq * 2 ** (semitones / 12)
        start = i * gap
        out[start:start + n_note] += 0.3 * env * np.sin(2 * np.pi * freq * t)
    peak = np.abs(out).max()
    if peak > 1.0:
        out /= peak
    return (out * VOLUME * 32767).astype(np.int16)


class AudioFeedback:
    """Match listener that plays a tone per event. Silently inert when muted."""

    def __init__(self, enabled=True):
        self.enabled = enabled
        self.sounds = {}
        if enabled:
            self._load()

    def _load(self):
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            rate, _, channels = pygame.mixer.get_init()
        except pygame.error as e:
            logger.warning("audio unavailable, continuing without sound: %s", e)
            self.enabled = False
            return
        for event, (base, notes, duration) in TONES.items():
            samples = synth_arpeggio(base, notes, duration, rate)
            if channels > 1:
                samples = np.repeat(samples[:, None], channels, axis=1)
            self.sounds[event] = pygame.sndarray.make_sound(np.ascontiguousarray(samples))

    def toggle(self):
        if self.enabled:
            self.enabled = False
            return False
        self.enabled = True
        if not self.sounds:
            # Started muted: synthesize on first unmute, which may still fail
            self._load()
        return self.enabled

    def __call__(self, event, payload):
        if not self.enabled:
            return
        sound = self.sounds.get(event)
        if sound is not None:
            sound.play()
