"""Impact sounds: a mute toggle, a fire-and-forget clip player and the note set."""

import os
import wave
import numpy as np
from typing import Dict, Optional

import cradle as C
from cradle.engine import Impact, RuntimeState

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame


LABEL_MUTE = 'Click anywhere to mute audio'
LABEL_PLAY = 'Click anywhere to play audio'

# Major pentatonic steps, repeated up the octaves
PENTATONIC = (0, 2, 4, 7, 9)
BASE_FREQUENCY = 220.0


def clip_path(index: int, audio_dir: str = C.AUDIO_DIR) -> str:
    return os.path.join(audio_dir, f'note-{index}.wav')


class SoundPlayer:
    """Plays note-<index>.wav clips. Failures are silent."""

    def __init__(self, audio_dir: str = C.AUDIO_DIR, volume: float = C.SOUND_VOLUME):
        self.audio_dir = audio_dir
        self.volume = volume
        self._cache: Dict[int, pygame.mixer.Sound] = {}

    def _load(self, index: int) -> pygame.mixer.Sound:
        if index not in self._cache:
            sound = pygame.mixer.Sound(clip_path(index, self.audio_dir))
            sound.set_volume(self.volume)
            self._cache[index] = sound
        return self._cache[index]

    def play(self, index: int):
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            # Overlapping calls each grab a free channel
            self._load(index).play()
        except (pygame.error, FileNotFoundError):
            pass


class SoundToggle:
    """Click handler and impact listener sharing the sound flag."""

    def __init__(self, state: RuntimeState, player: Optional[SoundPlayer] = None):
        self.state = state
        self.player = player or SoundPlayer()
        self.label = LABEL_MUTE if state.sound_enabled else LABEL_PLAY

    def toggle(self, enabled: Optional[bool] = None) -> bool:
        if enabled is None:
            enabled = not self.state.sound_enabled
        self.state.sound_enabled = enabled
        self.label = LABEL_MUTE if enabled else LABEL_PLAY
        return enabled

    def on_impact(self, impact: Impact):
        if self.state.sound_enabled:
            self.player.play(impact.arc_index)


def note_frequency(index: int) -> float:
    octave, step = divmod(index, len(PENTATONIC))
    semitones = 12 * octave + PENTATONIC[step]
    return BASE_FREQUENCY * 2 ** (semitones / 12)


def synthesize_note(index: int, seconds: float = C.NOTE_SECONDS,
                    sr: int = C.SAMPLE_RATE) -> np.ndarray:
    """Decaying sine with a soft attack → float32 in [-1, 1]."""
    t = np.arange(int(seconds * sr), dtype=np.float32) / sr
    freq = note_frequency(index)
    tone = np.sin(2 * np.pi * freq * t) + 0.3 * np.sin(4 * np.pi * freq * t)
    attack = np.minimum(t / 0.01, 1.0)
    env = attack * np.exp(-3.0 * t)
    sig = (tone * env).astype(np.float32)

    # prevent clipping
    m = float(np.max(np.abs(sig))) if np.any(sig) else 0.0
    if m > 0.99:
        sig *= 0.99 / (m + 1e-9)
    return sig


def write_wav(path: str, samples: np.ndarray, sr: int = C.SAMPLE_RATE):
    pcm = np.int16(np.clip(samples, -1.0, 1.0) * 32767)
    with wave.open(path, 'wb') as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sr)
        wf.writeframes(pcm.tobytes())


def generate_note_set(audio_dir: str = C.AUDIO_DIR,
                      n_notes: int = C.NUMBER_OF_ARCS) -> list:
    os.makedirs(audio_dir, exist_ok=True)
    paths = []
    for index in range(n_notes):
        path = clip_path(index, audio_dir)
        write_wav(path, synthesize_note(index))
        paths.append(path)
    return paths
