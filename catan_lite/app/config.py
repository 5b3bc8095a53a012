"""Configuration d'une partie (options de l'écran de démarrage)."""

from __future__ import annotations

from dataclasses import dataclass, replace

from catan_lite.engine.constants import (
    DEFAULT_TARGET_VP,
    MAX_PLAYERS,
    MIN_PLAYERS,
)
from catan_lite.engine.state import clamp_target_vp


@dataclass(frozen=True)
class GameConfig:
    """Paramètres de création d'une partie.

    Args:
        total_players: Nombre total de joueurs (2 à 4)
        human_players: Nombre d'humains parmi eux, assis en premier
        target_vp: Points de victoire à atteindre (3 à 16)
        seed: Graine des dés et du voleur (None = aléatoire)
    """

    total_players: int = 3
    human_players: int = 1
    target_vp: int = DEFAULT_TARGET_VP
    seed: int | None = None

    def normalized(self) -> "GameConfig":
        """Retourne une copie dont les valeurs sont ramenées dans leurs bornes."""
        total = max(MIN_PLAYERS, min(MAX_PLAYERS, int(self.total_players)))
        humans = max(0, min(int(self.human_players), total))
        return replace(
            self,
            total_players=total,
            human_players=humans,
            target_vp=clamp_target_vp(self.target_vp),
        )


__all__ = ["GameConfig"]
