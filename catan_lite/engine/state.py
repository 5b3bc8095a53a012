"""État de partie Catan-Lite.

`GameState` est la racine d'agrégat: créé une fois par partie via
`GameState.new_game()`, puis muté en place par les fonctions de
`catan_lite.engine.rules` et `catan_lite.engine.turns`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from catan_lite.engine.board import Board, Edge, Tile, Vertex, initial_robber_tile_id
from catan_lite.engine.constants import (
    BANK_STARTING_RESOURCES,
    DEFAULT_TARGET_VP,
    LOG_LIMIT,
    MAX_TARGET_VP,
    MIN_TARGET_VP,
    PLAYER_COLORS,
    RESOURCE_TYPES,
)


class Phase(Enum):
    """Phases de partie."""

    SETUP = "SETUP"
    PLAY = "PLAY"
    GAME_OVER = "GAME_OVER"


class SetupStep(Enum):
    """Sous-étape d'un placement initial."""

    SETTLEMENT = "SETTLEMENT"
    ROAD = "ROAD"


class PlayerKind(Enum):
    HUMAN = "HUMAN"
    BOT = "BOT"


def empty_resources() -> Dict[str, int]:
    return {resource: 0 for resource in RESOURCE_TYPES}


@dataclass
class Player:
    """Représentation d'un joueur."""

    player_id: int
    name: str
    color: str
    kind: PlayerKind = PlayerKind.HUMAN
    resources: Dict[str, int] = field(default_factory=empty_resources)
    victory_points: int = 0

    @property
    def is_bot(self) -> bool:
        return self.kind == PlayerKind.BOT

    def hand_size(self) -> int:
        return sum(self.resources.values())


def clamp_target_vp(value: int) -> int:
    return max(MIN_TARGET_VP, min(MAX_TARGET_VP, int(value)))


def make_players(total: int, humans: int) -> List[Player]:
    """Crée les joueurs: les `humans` premiers sont humains, les suivants des bots."""
    players: List[Player] = []
    for i in range(total):
        is_human = i < humans
        players.append(
            Player(
                player_id=i,
                name=f"Joueur {i + 1}" if is_human else f"Bot {i + 1 - humans}",
                color=PLAYER_COLORS[i],
                kind=PlayerKind.HUMAN if is_human else PlayerKind.BOT,
            )
        )
    return players


@dataclass
class GameState:
    """État mutable d'une partie.

    `rng` est la seule source d'aléa (dés, choix de la victime et de la
    ressource volée); l'injecter rend la partie reproductible.
    """

    board: Board
    players: List[Player]
    phase: Phase = Phase.SETUP
    current_player_id: int = 0
    setup_index: int = 0
    setup_step: SetupStep = SetupStep.SETTLEMENT
    setup_vertex_id: Optional[int] = None
    robber_tile_id: int = 0
    robber_moved_this_turn: bool = False
    log: List[str] = field(default_factory=list)
    last_roll: Optional[int] = None
    bank: Dict[str, int] = field(default_factory=lambda: dict(BANK_STARTING_RESOURCES))
    target_vp: int = DEFAULT_TARGET_VP
    turn_number: int = 0
    winner_id: Optional[int] = None
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @classmethod
    def new_game(
        cls,
        total_players: int = 3,
        human_players: int = 1,
        target_vp: int = DEFAULT_TARGET_VP,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        board: Board | None = None,
    ) -> "GameState":
        """Crée une partie en phase SETUP.

        Args:
            total_players: Nombre total de joueurs (borné par la palette de couleurs)
            human_players: Nombre de joueurs humains (les premiers sièges)
            target_vp: Points de victoire à atteindre, ramenés dans [3, 16]
            seed: Graine du générateur aléatoire (ignorée si `rng` est fourni)
            rng: Générateur aléatoire injecté (tests, simulations)
            board: Plateau à utiliser (par défaut le plateau standard)

        Returns:
            État initial, joueur 0 en train de placer sa première colonie
        """
        board = board or Board.standard()
        total = max(1, min(int(total_players), len(PLAYER_COLORS)))
        humans = max(0, min(int(human_players), total))
        target = clamp_target_vp(target_vp)

        state = cls(
            board=board,
            players=make_players(total, humans),
            robber_tile_id=initial_robber_tile_id(board.tiles),
            target_vp=target,
            rng=rng if rng is not None else random.Random(seed),
        )
        state.add_log(
            f"Partie créée: {total} joueurs ({humans} humain(s)). Objectif = {target} PV."
        )
        state.add_log("Placement initial: colonie puis route, puis ordre inverse.")
        return state

    # -- Raccourcis --
    @property
    def tiles(self) -> List[Tile]:
        return self.board.tiles

    @property
    def vertices(self) -> List[Vertex]:
        return self.board.vertices

    @property
    def edges(self) -> List[Edge]:
        return self.board.edges

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_id]

    @property
    def is_game_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    def add_log(self, message: str) -> None:
        """Ajoute un évènement en tête du journal (plus récent d'abord, 200 max)."""
        self.log.insert(0, message)
        del self.log[LOG_LIMIT:]


__all__ = [
    "GameState",
    "Player",
    "Phase",
    "SetupStep",
    "PlayerKind",
    "empty_resources",
    "make_players",
    "clamp_target_vp",
]
