"""Bot heuristique Catan-Lite.

Le bot ne contourne jamais le contrôleur de tour: chaque décision est
traduite en `Action` puis appliquée via `catan_lite.engine.turns.apply_action`,
toujours pour le joueur dont c'est le tour.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional

from catan_lite.engine.actions import (
    Action,
    BuildCity,
    MoveRobber,
    PlaceRoad,
    PlaceSettlement,
    TradeBank,
)
from catan_lite.engine.board import StructureKind
from catan_lite.engine.constants import BANK_TRADE_RATE, COSTS, RESOURCE_TYPES
from catan_lite.engine.rules import (
    can_afford,
    is_edge_buildable_road,
    is_vertex_buildable_settlement,
    settlement_pip_score,
)
from catan_lite.engine.state import GameState, Phase, Player, SetupStep
from catan_lite.engine.turns import apply_action, can_act, must_move_robber

logger = logging.getLogger(__name__)

MAX_BUILD_ATTEMPTS: int = 4


class Plan(Enum):
    """Objectif de construction du bot pour une itération."""

    CITY = "city"
    SETTLEMENT = "settlement"
    ROAD = "road"

    @property
    def cost(self) -> Dict[str, int]:
        return COSTS[self.value]


def missing_for(cost: Mapping[str, int], resources: Mapping[str, int]) -> Dict[str, int]:
    """Unités manquantes par ressource (seulement celles qui manquent)."""
    return {
        resource: amount - resources.get(resource, 0)
        for resource, amount in cost.items()
        if resources.get(resource, 0) < amount
    }


class AgentPolicy:
    """Interface minimale d'un joueur automatique."""

    def __init__(self, *, name: str | None = None) -> None:
        self._name = name or self.__class__.__name__

    @property
    def name(self) -> str:
        return self._name

    def take_setup_action(self, state: GameState) -> Optional[Action]:
        raise NotImplementedError

    def take_turn(self, state: GameState) -> List[Action]:
        raise NotImplementedError


class HeuristicPolicy(AgentPolicy):
    """Bot glouton: meilleurs sommets par pips, ville > colonie > route."""

    def __init__(self) -> None:
        super().__init__(name="Heuristic")

    # -- Choix -------------------------------------------------------------------

    def choose_settlement_vertex(
        self, state: GameState, player_id: int, during_setup: bool
    ) -> Optional[int]:
        legal = [
            vertex.vertex_id
            for vertex in state.vertices
            if is_vertex_buildable_settlement(state, vertex.vertex_id, player_id, during_setup)
        ]
        if not legal:
            return None
        return max(legal, key=lambda vid: (settlement_pip_score(state, vid), -vid))

    def choose_road_edge(
        self,
        state: GameState,
        player_id: int,
        during_setup: bool,
        setup_vertex_id: int | None = None,
    ) -> Optional[int]:
        """Arête légale menant au sommet le mieux noté (max des deux extrémités)."""
        legal = [
            edge.edge_id
            for edge in state.edges
            if is_edge_buildable_road(state, edge.edge_id, player_id, during_setup, setup_vertex_id)
        ]
        if not legal:
            return None

        def value(edge_id: int) -> tuple:
            a, b = state.edges[edge_id].vertices
            best = max(settlement_pip_score(state, a), settlement_pip_score(state, b))
            return best, -edge_id

        return max(legal, key=value)

    def choose_city_vertex(self, state: GameState, player_id: int) -> Optional[int]:
        own = [
            vertex.vertex_id
            for vertex in state.vertices
            if vertex.occupant is not None
            and vertex.occupant.player_id == player_id
            and vertex.occupant.kind == StructureKind.SETTLEMENT
        ]
        if not own:
            return None
        return max(own, key=lambda vid: (settlement_pip_score(state, vid), -vid))

    def choose_robber_tile(self, state: GameState, player_id: int) -> Optional[int]:
        """Tuile touchant le plus de pièces adverses (hors désert et tuile actuelle)."""
        best_tile: Optional[int] = None
        best_score = -1
        for tile in state.tiles:
            if tile.is_desert or tile.tile_id == state.robber_tile_id:
                continue
            score = 0
            for vertex_id in state.board.tile_vertices(tile.tile_id):
                occupant = state.vertices[vertex_id].occupant
                if occupant is not None and occupant.player_id != player_id:
                    score += 1
            if score > best_score:
                best_tile, best_score = tile.tile_id, score
        return best_tile

    def plan_next(self, player: Player) -> Plan:
        for plan in (Plan.CITY, Plan.SETTLEMENT, Plan.ROAD):
            if can_afford(player, plan.cost):
                return plan
        return Plan.SETTLEMENT

    def choose_trade(
        self, player: Player, plan: Plan, bank: Mapping[str, int]
    ) -> Optional[TradeBank]:
        """Échange 4:1 vers la ressource la plus manquante du plan.

        Seules les ressources encore en banque sont demandées. La ressource
        cédée doit rester suffisante pour le plan après l'échange.
        """
        cost = plan.cost
        lacks = missing_for(cost, player.resources)
        in_stock = [res for res in cost if lacks.get(res, 0) > 0 and bank.get(res, 0) > 0]
        if not in_stock:
            return None
        want = max(in_stock, key=lambda res: (lacks[res], -list(cost).index(res)))

        surplus = {
            res: player.resources[res] - cost.get(res, 0)
            for res in RESOURCE_TYPES
            if res not in lacks
        }
        candidates = [res for res, extra in surplus.items() if extra >= BANK_TRADE_RATE]
        if not candidates:
            return None
        give = max(candidates, key=lambda res: surplus[res])
        return TradeBank(give=give, get=want)

    # -- Actions -----------------------------------------------------------------

    def take_setup_action(self, state: GameState) -> Optional[Action]:
        """Place la colonie ou la route du pas de setup courant."""
        if state.phase != Phase.SETUP:
            return None
        player_id = state.current_player_id

        action: Optional[Action] = None
        if state.setup_step == SetupStep.SETTLEMENT:
            vertex_id = self.choose_settlement_vertex(state, player_id, during_setup=True)
            if vertex_id is not None:
                action = PlaceSettlement(vertex_id=vertex_id)
        else:
            edge_id = self.choose_road_edge(
                state, player_id, during_setup=True, setup_vertex_id=state.setup_vertex_id
            )
            if edge_id is not None:
                action = PlaceRoad(edge_id=edge_id)

        if action is None or not apply_action(state, action):
            logger.debug("Bot %d: aucun placement de setup possible", player_id)
            return None
        return action

    def _build_action(self, state: GameState, player_id: int, plan: Plan) -> Optional[Action]:
        if plan == Plan.CITY:
            vertex_id = self.choose_city_vertex(state, player_id)
            return None if vertex_id is None else BuildCity(vertex_id=vertex_id)
        if plan == Plan.SETTLEMENT:
            vertex_id = self.choose_settlement_vertex(state, player_id, during_setup=False)
            return None if vertex_id is None else PlaceSettlement(vertex_id=vertex_id)
        edge_id = self.choose_road_edge(state, player_id, during_setup=False)
        return None if edge_id is None else PlaceRoad(edge_id=edge_id)

    def take_turn(self, state: GameState) -> List[Action]:
        """Joue la partie active du tour (après le lancer, avant la fin de tour).

        Returns:
            Actions appliquées, dans l'ordre
        """
        player_id = state.current_player_id
        player = state.players[player_id]
        applied: List[Action] = []

        if must_move_robber(state):
            tile_id = self.choose_robber_tile(state, player_id)
            if tile_id is not None:
                action = MoveRobber(tile_id=tile_id)
                if apply_action(state, action):
                    applied.append(action)

        for _ in range(MAX_BUILD_ATTEMPTS):
            if not can_act(state):
                break
            plan = self.plan_next(player)
            build = self._build_action(state, player_id, plan)
            if build is not None and apply_action(state, build):
                applied.append(build)
                continue

            if not missing_for(plan.cost, player.resources):
                # Abordable mais aucun emplacement légal: le même plan échouerait encore
                break
            trade = self.choose_trade(player, plan, state.bank)
            if trade is not None and apply_action(state, trade):
                applied.append(trade)
                continue
            break

        logger.debug("Bot %s: %d action(s) ce tour", player.name, len(applied))
        return applied


_DEFAULT_POLICY = HeuristicPolicy()


def take_setup_action(state: GameState, player_id: int) -> Optional[Action]:
    """Pas de setup du bot `player_id` (rien si ce n'est pas son tour)."""
    if state.current_player_id != player_id:
        return None
    return _DEFAULT_POLICY.take_setup_action(state)


def take_turn(state: GameState, player_id: int) -> List[Action]:
    """Tour du bot `player_id` (rien si ce n'est pas son tour)."""
    if state.current_player_id != player_id:
        return []
    return _DEFAULT_POLICY.take_turn(state)


__all__ = [
    "AgentPolicy",
    "HeuristicPolicy",
    "Plan",
    "MAX_BUILD_ATTEMPTS",
    "missing_for",
    "take_setup_action",
    "take_turn",
]
