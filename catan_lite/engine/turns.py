"""Contrôleur de tour et de phase (SETUP -> PLAY -> GAME_OVER).

Point d'entrée unique des actions joueur: `apply_action()` vérifie que
l'action est permise dans la phase courante, l'exécute pour le joueur
actif puis fait avancer l'automate:

- SETUP: ordre serpent (0..N-1 puis N-1..0), colonie puis route
- PLAY: lancer de dés, voleur obligatoire sur un 7, constructions et
  échanges, fin de tour
- GAME_OVER: terminal, toute action est refusée
"""

from __future__ import annotations

import logging
from typing import List

from catan_lite.engine.actions import (
    Action,
    BuildCity,
    EndTurn,
    MoveRobber,
    PlaceRoad,
    PlaceSettlement,
    RollDice,
    TradeBank,
)
from catan_lite.engine.board import StructureKind
from catan_lite.engine.constants import BANK_TRADE_RATE, COSTS, RESOURCE_TYPES, ROBBER_ROLL
from catan_lite.engine.rules import (
    bank_trade_4to1,
    can_afford,
    distribute_resources,
    is_edge_buildable_road,
    is_vertex_buildable_settlement,
    move_robber,
    payout_second_settlement_resources,
    roll_dice,
    try_build_city,
    try_build_road,
    try_build_settlement,
)
from catan_lite.engine.state import GameState, Phase, SetupStep

logger = logging.getLogger(__name__)


def setup_player_for_index(setup_index: int, num_players: int) -> int:
    """Joueur actif pour un pas de setup (ordre serpent)."""
    setup_round, position = divmod(setup_index, num_players)
    if setup_round == 0:
        return position
    return num_players - 1 - position


# -- Verrous de tour ----------------------------------------------------------

def can_roll(state: GameState) -> bool:
    return state.phase == Phase.PLAY and state.last_roll is None


def must_move_robber(state: GameState) -> bool:
    return (
        state.phase == Phase.PLAY
        and state.last_roll == ROBBER_ROLL
        and not state.robber_moved_this_turn
    )


def can_act(state: GameState) -> bool:
    """Constructions, échanges et fin de tour: après le lancer et le voleur."""
    return (
        state.phase == Phase.PLAY
        and state.last_roll is not None
        and not must_move_robber(state)
    )


# -- Légalité ---------------------------------------------------------------

def _can_upgrade(state: GameState, player_id: int, vertex_id: int) -> bool:
    if not state.board.has_vertex(vertex_id):
        return False
    occupant = state.vertices[vertex_id].occupant
    return (
        occupant is not None
        and occupant.player_id == player_id
        and occupant.kind == StructureKind.SETTLEMENT
    )


def _can_trade(state: GameState, player_id: int, give: str, get: str) -> bool:
    if give not in RESOURCE_TYPES or get not in RESOURCE_TYPES or give == get:
        return False
    player = state.players[player_id]
    return player.resources[give] >= BANK_TRADE_RATE and state.bank[get] > 0


def is_action_legal(state: GameState, action: Action) -> bool:
    """Vérifie si une action est légale pour le joueur actif.

    Args:
        state: État courant
        action: Action à vérifier

    Returns:
        True si `apply_action` réussira
    """
    player_id = state.current_player_id

    if state.phase == Phase.GAME_OVER:
        return False

    if state.phase == Phase.SETUP:
        if isinstance(action, PlaceSettlement):
            return state.setup_step == SetupStep.SETTLEMENT and is_vertex_buildable_settlement(
                state, action.vertex_id, player_id, during_setup=True
            )
        if isinstance(action, PlaceRoad):
            return state.setup_step == SetupStep.ROAD and is_edge_buildable_road(
                state,
                action.edge_id,
                player_id,
                during_setup=True,
                setup_vertex_id=state.setup_vertex_id,
            )
        # Pas de lancer de dés ni de commerce pendant le setup
        return False

    if isinstance(action, RollDice):
        if action.forced_value is not None and not 2 <= action.forced_value <= 12:
            return False
        return can_roll(state)

    if isinstance(action, MoveRobber):
        return (
            must_move_robber(state)
            and state.board.has_tile(action.tile_id)
            and action.tile_id != state.robber_tile_id
        )

    if not can_act(state):
        return False

    player = state.players[player_id]
    if isinstance(action, PlaceSettlement):
        return can_afford(player, COSTS["settlement"]) and is_vertex_buildable_settlement(
            state, action.vertex_id, player_id, during_setup=False
        )
    if isinstance(action, PlaceRoad):
        return can_afford(player, COSTS["road"]) and is_edge_buildable_road(
            state, action.edge_id, player_id, during_setup=False
        )
    if isinstance(action, BuildCity):
        return can_afford(player, COSTS["city"]) and _can_upgrade(
            state, player_id, action.vertex_id
        )
    if isinstance(action, TradeBank):
        return _can_trade(state, player_id, action.give, action.get)
    if isinstance(action, EndTurn):
        return True
    return False


def legal_actions(state: GameState) -> List[Action]:
    """Retourne la liste des actions légales pour l'état courant."""
    if state.phase == Phase.GAME_OVER:
        return []

    candidates: List[Action] = []
    if state.phase == Phase.SETUP:
        if state.setup_step == SetupStep.SETTLEMENT:
            candidates.extend(PlaceSettlement(vertex_id=v.vertex_id) for v in state.vertices)
        elif state.setup_vertex_id is not None:
            candidates.extend(
                PlaceRoad(edge_id=edge_id)
                for edge_id in state.vertices[state.setup_vertex_id].edges
            )
    elif can_roll(state):
        candidates.append(RollDice())
    elif must_move_robber(state):
        candidates.extend(MoveRobber(tile_id=t.tile_id) for t in state.tiles)
    else:
        candidates.extend(PlaceRoad(edge_id=e.edge_id) for e in state.edges)
        candidates.extend(PlaceSettlement(vertex_id=v.vertex_id) for v in state.vertices)
        candidates.extend(BuildCity(vertex_id=v.vertex_id) for v in state.vertices)
        candidates.extend(
            TradeBank(give=give, get=get)
            for give in RESOURCE_TYPES
            for get in RESOURCE_TYPES
            if give != get
        )
        candidates.append(EndTurn())

    return [action for action in candidates if is_action_legal(state, action)]


# -- Transitions ------------------------------------------------------------

def advance_setup(state: GameState) -> None:
    """Passe au pas de setup suivant; à 2N, distribution puis phase PLAY."""
    num_players = len(state.players)
    state.setup_step = SetupStep.SETTLEMENT
    state.setup_vertex_id = None
    state.setup_index += 1

    if state.setup_index >= num_players * 2:
        state.phase = Phase.PLAY
        state.current_player_id = 0
        state.last_roll = None
        state.robber_moved_this_turn = False
        state.turn_number = 1
        payout_second_settlement_resources(state)
        state.add_log("Placement terminé, la partie commence !")
        logger.info("Setup terminé, phase PLAY")
        return

    state.current_player_id = setup_player_for_index(state.setup_index, num_players)


def _declare_winner(state: GameState, player_id: int) -> None:
    winner = state.players[player_id]
    state.phase = Phase.GAME_OVER
    state.winner_id = player_id
    state.add_log(f"{winner.name} remporte la partie !")
    logger.info("Partie terminée: %s gagne avec %d PV", winner.name, winner.victory_points)


def check_victory(state: GameState) -> bool:
    """Termine la partie si le joueur actif a atteint l'objectif."""
    if state.phase != Phase.PLAY:
        return False
    if state.current_player.victory_points < state.target_vp:
        return False
    _declare_winner(state, state.current_player_id)
    return True


def end_turn(state: GameState) -> None:
    """Efface le lancer et passe au joueur suivant (ou termine la partie)."""
    state.last_roll = None
    state.robber_moved_this_turn = False
    if check_victory(state):
        return
    state.current_player_id = (state.current_player_id + 1) % len(state.players)
    state.turn_number += 1


def _roll(state: GameState, forced_value: int | None) -> None:
    value = forced_value if forced_value is not None else roll_dice(state.rng)
    state.last_roll = value
    state.robber_moved_this_turn = False
    state.add_log(f"{state.current_player.name} a lancé {value}.")
    if value == ROBBER_ROLL:
        state.add_log("7 ! Le voleur doit être déplacé.")
        return
    distribute_resources(state, value)


def apply_action(state: GameState, action: Action) -> bool:
    """Applique une action pour le joueur actif.

    Returns:
        True si l'action a été appliquée, False (état inchangé) sinon
    """
    if not is_action_legal(state, action):
        logger.debug("Action refusée pour le joueur %d: %s", state.current_player_id, action)
        return False

    player_id = state.current_player_id

    if state.phase == Phase.SETUP:
        if isinstance(action, PlaceSettlement):
            if not try_build_settlement(state, player_id, action.vertex_id, during_setup=True):
                return False
            state.setup_vertex_id = action.vertex_id
            state.setup_step = SetupStep.ROAD
            return True
        if isinstance(action, PlaceRoad):
            if not try_build_road(
                state,
                player_id,
                action.edge_id,
                during_setup=True,
                setup_vertex_id=state.setup_vertex_id,
            ):
                return False
            advance_setup(state)
            return True
        return False

    if isinstance(action, RollDice):
        _roll(state, action.forced_value)
        return True
    if isinstance(action, MoveRobber):
        return move_robber(state, action.tile_id, player_id)
    if isinstance(action, EndTurn):
        end_turn(state)
        return True
    if isinstance(action, TradeBank):
        return bank_trade_4to1(state, player_id, action.give, action.get)

    if isinstance(action, PlaceSettlement):
        built = try_build_settlement(state, player_id, action.vertex_id, during_setup=False)
    elif isinstance(action, PlaceRoad):
        built = try_build_road(state, player_id, action.edge_id, during_setup=False)
    elif isinstance(action, BuildCity):
        built = try_build_city(state, player_id, action.vertex_id)
    else:
        return False
    if built:
        check_victory(state)
    return built


__all__ = [
    "setup_player_for_index",
    "can_roll",
    "must_move_robber",
    "can_act",
    "is_action_legal",
    "legal_actions",
    "advance_setup",
    "check_victory",
    "end_turn",
    "apply_action",
]
