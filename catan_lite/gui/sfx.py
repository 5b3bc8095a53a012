"""Effets sonores de fin de partie (victoire / défaite).

Les sons sont synthétisés avec numpy (courts arpèges) puis joués via
`pygame.mixer`. Sans périphérique audio, l'erreur pygame est journalisée et
les effets sont désactivés pour le reste de la session.
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

import numpy as np
import pygame

from catan_lite.engine.state import PlayerKind

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050

# (fréquence Hz, durée s) par note
TONES: Dict[str, Tuple[Tuple[float, float], ...]] = {
    "win": ((523.25, 0.12), (659.25, 0.12), (783.99, 0.12), (1046.5, 0.3)),
    "lose": ((392.0, 0.18), (349.23, 0.18), (311.13, 0.18), (261.63, 0.4)),
}


def synthesize(name: str, *, sample_rate: int = SAMPLE_RATE, volume: float = 0.9) -> np.ndarray:
    """Génère le signal mono int16 de l'effet `name` ("win" ou "lose")."""
    segments = []
    for frequency, duration in TONES[name]:
        t = np.arange(int(sample_rate * duration)) / sample_rate
        envelope = np.linspace(1.0, 0.0, t.size)
        segments.append(np.sin(2 * np.pi * frequency * t) * envelope)
    wave = np.concatenate(segments) * max(0.0, min(1.0, volume))
    return (wave * 32767).astype(np.int16)


def sfx_for_winner(kind: PlayerKind) -> str:
    """Un humain qui gagne entend "win"; la victoire d'un bot joue "lose"."""
    return "lose" if kind == PlayerKind.BOT else "win"


class SoundEffects:
    """Lecteur d'effets avec cache de `pygame.mixer.Sound`."""

    def __init__(self, *, enabled: bool = True, volume: float = 0.9) -> None:
        self.enabled = enabled
        self.volume = volume
        self._cache: Dict[str, pygame.mixer.Sound] = {}

    def _sound(self, name: str) -> pygame.mixer.Sound:
        if name not in self._cache:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            frequency, _, channels = pygame.mixer.get_init()
            samples = synthesize(name, sample_rate=frequency, volume=self.volume)
            if channels > 1:
                samples = np.ascontiguousarray(np.repeat(samples[:, None], channels, axis=1))
            self._cache[name] = pygame.sndarray.make_sound(samples)
        return self._cache[name]

    def play(self, name: str) -> bool:
        """Joue l'effet; False si l'audio est désactivé ou indisponible."""
        if not self.enabled:
            return False
        try:
            self._sound(name).play()
        except pygame.error as exc:
            logger.warning("Audio indisponible (%s): effets sonores désactivés", exc)
            self.enabled = False
            return False
        return True

    def play_for_winner(self, kind: PlayerKind) -> bool:
        return self.play(sfx_for_winner(kind))


__all__ = ["SAMPLE_RATE", "TONES", "SoundEffects", "synthesize", "sfx_for_winner"]
