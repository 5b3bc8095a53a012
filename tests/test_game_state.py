"""Tests pour la création de partie et le journal."""

import random

import pytest

from catan_lite.engine.constants import LOG_LIMIT, RESOURCE_TYPES
from catan_lite.engine.state import (
    GameState,
    Phase,
    PlayerKind,
    SetupStep,
    clamp_target_vp,
    make_players,
)


class TestNewGame:
    def test_defaults(self):
        state = GameState.new_game()
        assert len(state.players) == 3
        assert state.phase == Phase.SETUP
        assert state.setup_step == SetupStep.SETTLEMENT
        assert state.setup_index == 0
        assert state.current_player_id == 0
        assert state.last_roll is None
        assert state.target_vp == 10
        assert state.winner_id is None

    def test_robber_starts_on_desert(self):
        state = GameState.new_game()
        assert state.tiles[state.robber_tile_id].is_desert

    def test_bank_starts_full(self):
        state = GameState.new_game()
        assert state.bank == {res: 19 for res in RESOURCE_TYPES}

    def test_players_start_empty(self):
        state = GameState.new_game(total_players=4, human_players=2)
        for player in state.players:
            assert player.resources == {res: 0 for res in RESOURCE_TYPES}
            assert player.victory_points == 0
            assert player.hand_size() == 0

    def test_humans_seated_first(self):
        state = GameState.new_game(total_players=4, human_players=2)
        kinds = [p.kind for p in state.players]
        assert kinds == [PlayerKind.HUMAN, PlayerKind.HUMAN, PlayerKind.BOT, PlayerKind.BOT]
        assert [p.name for p in state.players] == ["Joueur 1", "Joueur 2", "Bot 1", "Bot 2"]
        assert len({p.color for p in state.players}) == 4

    @pytest.mark.parametrize("requested,expected", [(1, 3), (3, 3), (10, 10), (16, 16), (40, 16)])
    def test_target_vp_clamped(self, requested, expected):
        assert GameState.new_game(target_vp=requested).target_vp == expected
        assert clamp_target_vp(requested) == expected

    def test_player_count_bounded_by_palette(self):
        assert len(GameState.new_game(total_players=9).players) == 4

    def test_humans_clamped_to_total(self):
        state = GameState.new_game(total_players=2, human_players=5)
        assert all(not p.is_bot for p in state.players)

    def test_creation_log(self):
        state = GameState.new_game(total_players=3, human_players=1, target_vp=8)
        assert len(state.log) == 2
        assert state.log[1] == "Partie créée: 3 joueurs (1 humain(s)). Objectif = 8 PV."
        assert state.log[0].startswith("Placement initial")

    def test_seed_makes_rng_reproducible(self):
        a = GameState.new_game(seed=5)
        b = GameState.new_game(seed=5)
        assert [a.rng.random() for _ in range(5)] == [b.rng.random() for _ in range(5)]

    def test_injected_rng_is_used(self):
        rng = random.Random(1)
        state = GameState.new_game(rng=rng, seed=99)
        assert state.rng is rng


class TestLog:
    def test_most_recent_first(self):
        state = GameState.new_game()
        state.add_log("a")
        state.add_log("b")
        assert state.log[:2] == ["b", "a"]

    def test_capped(self):
        state = GameState.new_game()
        for i in range(LOG_LIMIT + 50):
            state.add_log(f"msg {i}")
        assert len(state.log) == LOG_LIMIT
        assert state.log[0] == f"msg {LOG_LIMIT + 49}"


def test_make_players_all_bots():
    players = make_players(3, 0)
    assert all(p.is_bot for p in players)
    assert [p.name for p in players] == ["Bot 1", "Bot 2", "Bot 3"]
