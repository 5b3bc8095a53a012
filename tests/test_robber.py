"""Tests du voleur: déplacement, victimes et vol."""

import random

import pytest

from catan_lite.engine.actions import EndTurn, MoveRobber, RollDice, TradeBank
from catan_lite.engine.rules import move_robber, resource_totals, robber_victims, try_build_settlement
from catan_lite.engine.state import GameState, Phase
from catan_lite.engine.turns import apply_action, can_act, is_action_legal, must_move_robber

TARGET_TILE = 0


@pytest.fixture
def state() -> GameState:
    return GameState.new_game(total_players=3, human_players=1, rng=random.Random(4))


def settle_on_tile(state: GameState, player_id: int, tile_id: int, index: int = 0) -> int:
    free = [
        v
        for v in state.board.tile_vertices(tile_id)
        if state.vertices[v].occupant is None
        and all(state.vertices[n].occupant is None for n in state.vertices[v].neighbors)
    ]
    vertex_id = free[index]
    assert try_build_settlement(state, player_id, vertex_id, during_setup=True)
    return vertex_id


class TestMoveRobber:
    def test_no_victims(self, state):
        totals = resource_totals(state)
        assert move_robber(state, TARGET_TILE, 0)
        assert state.robber_tile_id == TARGET_TILE
        assert state.robber_moved_this_turn
        assert resource_totals(state) == totals
        assert state.log[0] == "Joueur 1 a déplacé le voleur."

    def test_own_pieces_are_not_victims(self, state):
        settle_on_tile(state, 0, TARGET_TILE)
        state.players[0].resources["ORE"] = 2
        assert robber_victims(state, TARGET_TILE, 0) == []
        assert move_robber(state, TARGET_TILE, 0)
        assert state.players[0].resources["ORE"] == 2

    def test_victim_with_empty_hand(self, state):
        settle_on_tile(state, 1, TARGET_TILE)
        assert robber_victims(state, TARGET_TILE, 0) == [1]
        assert move_robber(state, TARGET_TILE, 0)
        assert state.players[0].hand_size() == 0
        assert state.log[0] == "Joueur 1 a déplacé le voleur."

    def test_steals_exactly_one(self, state):
        settle_on_tile(state, 1, TARGET_TILE)
        state.players[1].resources["WOOL"] = 1

        assert move_robber(state, TARGET_TILE, 0)

        assert state.players[1].resources["WOOL"] == 0
        assert state.players[0].resources["WOOL"] == 1
        assert state.log[0] == "Joueur 1 a volé 1 WOOL à Bot 1."

    def test_victims_sorted_and_unique(self, state):
        settle_on_tile(state, 2, TARGET_TILE, index=0)
        settle_on_tile(state, 1, TARGET_TILE, index=0)
        assert robber_victims(state, TARGET_TILE, 0) == [1, 2]

    def test_theft_conserves_totals(self, state):
        settle_on_tile(state, 1, TARGET_TILE, index=0)
        settle_on_tile(state, 2, TARGET_TILE, index=0)
        for player_id in (1, 2):
            state.players[player_id].resources.update({"BRICK": 2, "ORE": 3})
        hands_before = sum(p.hand_size() for p in state.players)

        move_robber(state, TARGET_TILE, 0)

        assert state.players[0].hand_size() == 1
        assert sum(p.hand_size() for p in state.players) == hands_before
        assert all(count >= 0 for p in state.players for count in p.resources.values())

    def test_victim_choice_uses_state_rng(self):
        def stolen_from(seed):
            state = GameState.new_game(total_players=3, human_players=1, rng=random.Random(seed))
            settle_on_tile(state, 1, TARGET_TILE, index=0)
            settle_on_tile(state, 2, TARGET_TILE, index=0)
            for player_id in (1, 2):
                state.players[player_id].resources["GRAIN"] = 1
            move_robber(state, TARGET_TILE, 0)
            return [p.resources["GRAIN"] for p in state.players]

        assert stolen_from(21) == stolen_from(21)

    def test_unknown_tile(self, state):
        start = state.robber_tile_id
        assert not move_robber(state, 19, 0)
        assert not move_robber(state, -1, 0)
        assert state.robber_tile_id == start
        assert not state.robber_moved_this_turn


class TestRobberGating:
    @pytest.fixture
    def play_state(self, state):
        state.phase = Phase.PLAY
        state.turn_number = 1
        state.players[0].resources["BRICK"] = 4
        return state

    def test_seven_requires_robber_move(self, play_state):
        assert apply_action(play_state, RollDice(forced_value=7))
        assert play_state.last_roll == 7
        assert must_move_robber(play_state)
        assert not can_act(play_state)
        assert not is_action_legal(play_state, EndTurn())
        assert not apply_action(play_state, TradeBank(give="BRICK", get="ORE"))
        assert play_state.players[0].resources["BRICK"] == 4

    def test_robber_must_change_tile(self, play_state):
        apply_action(play_state, RollDice(forced_value=7))
        assert not apply_action(play_state, MoveRobber(tile_id=play_state.robber_tile_id))
        assert must_move_robber(play_state)

    def test_actions_unlocked_after_move(self, play_state):
        apply_action(play_state, RollDice(forced_value=7))
        assert apply_action(play_state, MoveRobber(tile_id=TARGET_TILE))
        assert not must_move_robber(play_state)
        assert can_act(play_state)
        assert not is_action_legal(play_state, MoveRobber(tile_id=5))
        assert apply_action(play_state, TradeBank(give="BRICK", get="ORE"))

    def test_robber_not_movable_without_seven(self, play_state):
        apply_action(play_state, RollDice(forced_value=8))
        assert not apply_action(play_state, MoveRobber(tile_id=TARGET_TILE))
        assert play_state.robber_tile_id == 9
