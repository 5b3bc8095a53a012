"""Simulation headless de parties entre bots.

Chaque partie passe par `GameService`, comme une partie GUI, avec tous les
sièges tenus par le bot heuristique. Les résultats sont résumés dans des
dataclasses immuables.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

from catan_lite.app.config import GameConfig
from catan_lite.app.events import ActionAppliedEvent
from catan_lite.app.game_service import GameService

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS: int = 500


@dataclass(frozen=True)
class GameSummary:
    """Résume une partie simulée."""

    seed: int | None
    turns: int
    actions: int
    finished: bool
    winner_id: int | None
    victory_points: Tuple[int, ...]


@dataclass(frozen=True)
class SimulationSummary:
    """Résumé global renvoyé par `run_simulations()`."""

    games: Tuple[GameSummary, ...]
    duration_seconds: float = field(default=0.0, compare=False)

    @property
    def total_games(self) -> int:
        return len(self.games)

    @property
    def finished_games(self) -> int:
        return sum(1 for game in self.games if game.finished)

    @property
    def wins_by_player(self) -> Dict[int, int]:
        counts = Counter(game.winner_id for game in self.games if game.winner_id is not None)
        return dict(sorted(counts.items()))

    @property
    def average_turns(self) -> float:
        if not self.games:
            return 0.0
        return sum(game.turns for game in self.games) / len(self.games)


def _validate_positive(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} doit être strictement positif (reçu: {value})")


def simulate_game(
    config: GameConfig | None = None,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> GameSummary:
    """Joue une partie complète entre bots.

    Args:
        config: Configuration de partie; les humains sont remplacés par des bots
        max_turns: Nombre de tours au-delà duquel la partie est abandonnée

    Returns:
        Résumé de la partie (finished=False si la limite est atteinte)
    """
    _validate_positive("max_turns", max_turns)
    config = replace(config or GameConfig(), human_players=0)

    service = GameService()
    actions = 0

    def count(event: object) -> None:
        nonlocal actions
        if isinstance(event, ActionAppliedEvent):
            actions += 1

    service.event_bus.subscribe(count)
    state = service.start_new_game(config)

    while not state.is_game_over and state.turn_number <= max_turns:
        if not service.step_bot():
            logger.warning("Bot bloqué au tour %d, partie abandonnée", state.turn_number)
            break

    return GameSummary(
        seed=config.seed,
        turns=state.turn_number,
        actions=actions,
        finished=state.is_game_over,
        winner_id=state.winner_id,
        victory_points=tuple(player.victory_points for player in state.players),
    )


def run_simulations(
    games: int,
    config: GameConfig | None = None,
    *,
    base_seed: int = 0,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> SimulationSummary:
    """Joue `games` parties, graines `base_seed`, `base_seed + 1`, ..."""
    _validate_positive("games", games)
    config = config or GameConfig()

    start = time.perf_counter()
    summaries = []
    for offset in range(games):
        game_config = replace(config, seed=base_seed + offset)
        summary = simulate_game(game_config, max_turns=max_turns)
        logger.debug(
            "Partie seed=%s: gagnant=%s en %d tours", summary.seed, summary.winner_id, summary.turns
        )
        summaries.append(summary)

    result = SimulationSummary(
        games=tuple(summaries),
        duration_seconds=time.perf_counter() - start,
    )
    logger.info(
        "%d partie(s) simulée(s), %d terminée(s), %.1f tours en moyenne",
        result.total_games,
        result.finished_games,
        result.average_turns,
    )
    return result


__all__ = [
    "DEFAULT_MAX_TURNS",
    "GameSummary",
    "SimulationSummary",
    "simulate_game",
    "run_simulations",
]
