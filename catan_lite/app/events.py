"""Évènements publiés par la couche application (`catan_lite.app`)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from catan_lite.engine.actions import Action
from catan_lite.engine.state import GameState, PlayerKind


@dataclass(frozen=True)
class GameStartedEvent:
    """Émis lorsqu'une nouvelle partie est initialisée."""

    state: GameState


@dataclass(frozen=True)
class ActionAppliedEvent:
    """Émis après qu'une action (humaine ou bot) a été appliquée.

    L'état est muté en place: `state` est l'état après l'action.
    """

    action: Action
    player_id: int
    state: GameState


@dataclass(frozen=True)
class GameEndedEvent:
    """Émis une seule fois, quand la phase passe à GAME_OVER."""

    state: GameState
    winner_id: Optional[int]
    winner_kind: Optional[PlayerKind]
