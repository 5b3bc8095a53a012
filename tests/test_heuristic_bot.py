"""Tests du bot heuristique."""

import pytest

from catan_lite.bots import HeuristicPolicy, take_setup_action, take_turn
from catan_lite.bots.policies import MAX_BUILD_ATTEMPTS, Plan, missing_for
from catan_lite.engine.actions import (
    BuildCity,
    MoveRobber,
    PlaceRoad,
    PlaceSettlement,
    RollDice,
    TradeBank,
)
from catan_lite.engine.constants import BANK_STARTING_RESOURCES
from catan_lite.engine.rules import resource_totals, settlement_pip_score, try_build_settlement
from catan_lite.engine.state import GameState, Phase, Player, SetupStep
from catan_lite.engine.turns import apply_action

FULL_BANK = dict(BANK_STARTING_RESOURCES)


@pytest.fixture
def policy() -> HeuristicPolicy:
    return HeuristicPolicy()


@pytest.fixture
def state() -> GameState:
    return GameState.new_game(total_players=3, human_players=0, seed=17)


def player_with(**resources) -> Player:
    player = Player(player_id=0, name="Bot 1", color="#000000")
    player.resources.update(resources)
    return player


def in_play(state: GameState) -> GameState:
    state.phase = Phase.PLAY
    state.turn_number = 1
    return state


class TestHelpers:
    def test_missing_for(self):
        assert missing_for({"GRAIN": 2, "ORE": 3}, {"GRAIN": 3, "ORE": 1}) == {"ORE": 2}
        assert missing_for({"BRICK": 1}, {"BRICK": 1}) == {}

    def test_plan_priority(self, policy):
        assert policy.plan_next(player_with(GRAIN=2, ORE=3, BRICK=1, LUMBER=1)) == Plan.CITY
        assert (
            policy.plan_next(player_with(BRICK=1, LUMBER=1, WOOL=1, GRAIN=1)) == Plan.SETTLEMENT
        )
        assert policy.plan_next(player_with(BRICK=1, LUMBER=1)) == Plan.ROAD
        assert policy.plan_next(player_with()) == Plan.SETTLEMENT

    def test_trade_toward_most_missing(self, policy):
        trade = policy.choose_trade(player_with(GRAIN=2, WOOL=5), Plan.CITY, FULL_BANK)
        assert trade == TradeBank(give="WOOL", get="ORE")

    def test_trade_keeps_plan_resources(self, policy):
        # 5 GRAIN - 2 pour la ville = 3 < 4: rien à céder
        assert policy.choose_trade(player_with(GRAIN=5), Plan.CITY, FULL_BANK) is None
        trade = policy.choose_trade(player_with(GRAIN=6), Plan.CITY, FULL_BANK)
        assert trade == TradeBank(give="GRAIN", get="ORE")

    def test_trade_prefers_largest_surplus(self, policy):
        trade = policy.choose_trade(player_with(WOOL=4, ORE=7), Plan.ROAD, FULL_BANK)
        assert trade is not None
        assert trade.give == "ORE"
        assert trade.get == "BRICK"

    def test_no_trade_when_affordable(self, policy):
        player = player_with(BRICK=1, LUMBER=1, ORE=9)
        assert policy.choose_trade(player, Plan.ROAD, FULL_BANK) is None

    def test_trade_skips_resource_missing_from_bank(self, policy):
        bank = dict(FULL_BANK, BRICK=0)
        trade = policy.choose_trade(player_with(WOOL=4, ORE=7), Plan.ROAD, bank)
        assert trade == TradeBank(give="ORE", get="LUMBER")

    def test_no_trade_when_bank_lacks_everything(self, policy):
        bank = dict(FULL_BANK, BRICK=0, LUMBER=0)
        assert policy.choose_trade(player_with(ORE=7), Plan.ROAD, bank) is None


class TestChoices:
    def test_settlement_maximizes_pips(self, policy, state):
        vertex_id = policy.choose_settlement_vertex(state, 0, during_setup=True)
        best = max(settlement_pip_score(state, v.vertex_id) for v in state.vertices)
        assert settlement_pip_score(state, vertex_id) == best

    def test_settlement_tie_broken_by_lowest_id(self, policy, state):
        vertex_id = policy.choose_settlement_vertex(state, 0, during_setup=True)
        best = settlement_pip_score(state, vertex_id)
        tied = [v.vertex_id for v in state.vertices if settlement_pip_score(state, v.vertex_id) == best]
        assert vertex_id == min(tied)

    def test_no_settlement_spot(self, policy, state):
        assert policy.choose_settlement_vertex(state, 0, during_setup=False) is None

    def test_road_touches_setup_vertex(self, policy, state):
        try_build_settlement(state, 0, 10, during_setup=True)
        edge_id = policy.choose_road_edge(state, 0, during_setup=True, setup_vertex_id=10)
        assert 10 in state.edges[edge_id].vertices

    def test_robber_targets_opponents(self, policy, state):
        target = state.board.tile_vertices(0)[0]
        try_build_settlement(state, 1, target, during_setup=True)
        assert policy.choose_robber_tile(state, 0) in state.vertices[target].adjacent_tiles

    def test_robber_skips_desert_and_current_tile(self, policy, state):
        tile_id = policy.choose_robber_tile(state, 0)
        assert tile_id is not None
        assert tile_id != state.robber_tile_id
        assert not state.tiles[tile_id].is_desert

    def test_robber_ignores_own_pieces(self, policy, state):
        own = state.board.tile_vertices(5)[0]
        try_build_settlement(state, 0, own, during_setup=True)
        # Aucun adversaire sur le plateau: première tuile admissible
        assert policy.choose_robber_tile(state, 0) == 0


class TestSetup:
    def test_full_setup_by_bots(self, state):
        for _ in range(2 * len(state.players) * 2):
            assert take_setup_action(state, state.current_player_id) is not None
        assert state.phase == Phase.PLAY
        assert all(p.victory_points == 2 for p in state.players)

    def test_settlement_then_road(self, state):
        first = take_setup_action(state, 0)
        assert isinstance(first, PlaceSettlement)
        assert state.setup_step == SetupStep.ROAD
        second = take_setup_action(state, 0)
        assert isinstance(second, PlaceRoad)
        assert first.vertex_id in state.edges[second.edge_id].vertices

    def test_not_this_players_turn(self, state):
        assert take_setup_action(state, 2) is None
        assert state.setup_step == SetupStep.SETTLEMENT
        assert take_turn(state, 1) == []

    def test_policy_does_nothing_outside_setup(self, policy, state):
        in_play(state)
        assert policy.take_setup_action(state) is None


class TestTurn:
    def test_moves_robber_after_seven(self, state):
        in_play(state)
        apply_action(state, RollDice(forced_value=7))
        actions = take_turn(state, 0)
        assert isinstance(actions[0], MoveRobber)
        assert state.robber_moved_this_turn

    def test_builds_city_when_affordable(self, state):
        in_play(state)
        try_build_settlement(state, 0, 10, during_setup=True)
        apply_action(state, RollDice(forced_value=7))
        state.players[0].resources.update({"GRAIN": 2, "ORE": 3})
        state.bank["GRAIN"] -= 2
        state.bank["ORE"] -= 3

        actions = take_turn(state, 0)

        assert BuildCity(vertex_id=10) in actions
        assert state.vertices[10].occupant.is_city

    def test_trades_then_builds(self, state):
        in_play(state)
        try_build_settlement(state, 0, 10, during_setup=True)
        apply_action(state, RollDice(forced_value=7))
        apply_action(state, MoveRobber(tile_id=0))
        state.players[0].resources.update({"BRICK": 1, "ORE": 4})
        state.bank["BRICK"] -= 1
        state.bank["ORE"] -= 4
        totals = resource_totals(state)

        actions = take_turn(state, 0)

        # Plan colonie: il manque LUMBER (premier manquant), l'ORE est en surplus
        assert actions[0] == TradeBank(give="ORE", get="LUMBER")
        assert isinstance(actions[1], PlaceRoad)
        assert 10 in state.edges[actions[1].edge_id].vertices
        assert len(actions) == 2
        assert resource_totals(state) == totals

    def test_bounded_iterations(self, state):
        in_play(state)
        try_build_settlement(state, 0, 10, during_setup=True)
        apply_action(state, RollDice(forced_value=7))
        apply_action(state, MoveRobber(tile_id=0))
        state.players[0].resources.update({"BRICK": 12, "LUMBER": 12})
        for res in ("BRICK", "LUMBER"):
            state.bank[res] -= 12

        actions = take_turn(state, 0)

        assert len(actions) <= MAX_BUILD_ATTEMPTS
        assert all(isinstance(a, PlaceRoad) for a in actions)

    def test_nothing_to_do(self, state):
        in_play(state)
        apply_action(state, RollDice(forced_value=7))
        apply_action(state, MoveRobber(tile_id=0))
        assert take_turn(state, 0) == []
        assert state.current_player_id == 0

    def test_trades_for_resource_still_in_bank(self, state):
        in_play(state)
        try_build_settlement(state, 0, 10, during_setup=True)
        apply_action(state, RollDice(forced_value=7))
        apply_action(state, MoveRobber(tile_id=0))
        state.players[0].resources.update({"LUMBER": 1, "ORE": 4})
        state.bank["LUMBER"] -= 1
        state.bank["ORE"] -= 4
        # BRICK est introuvable: banque vide et réserve chez un adversaire
        state.players[1].resources["BRICK"] = state.bank["BRICK"]
        state.bank["BRICK"] = 0

        actions = take_turn(state, 0)

        # Plan colonie: BRICK manque mais la banque est vide, on demande WOOL
        assert actions == [TradeBank(give="ORE", get="WOOL")]
        assert state.players[0].resources["WOOL"] == 1

    def test_stops_when_affordable_plan_has_no_spot(self, state):
        in_play(state)
        apply_action(state, RollDice(forced_value=7))
        apply_action(state, MoveRobber(tile_id=0))
        settlement = {"BRICK": 1, "LUMBER": 1, "WOOL": 1, "GRAIN": 1, "ORE": 4}
        state.players[0].resources.update(settlement)
        for res, amount in settlement.items():
            state.bank[res] -= amount
        log_before = list(state.log)

        # Colonie abordable mais aucun sommet relié: rien n'est tenté
        assert take_turn(state, 0) == []
        assert state.players[0].resources == settlement
        assert state.log == log_before
