"""Tests pour la simulation headless de parties entre bots.

Objectifs:
- Une partie entre bots se termine avec un gagnant unique.
- Les graines rendent les parties reproductibles.
- La CLI résume les résultats.
"""

from __future__ import annotations

import pytest

from catan_lite.app.config import GameConfig
from catan_lite.sim import cli
from catan_lite.sim.runner import SimulationSummary, run_simulations, simulate_game

SHORT_GAME = GameConfig(total_players=3, human_players=2, target_vp=4, seed=7)


def test_simulated_game_finishes():
    """Une partie courte entre bots se termine avant la limite de tours."""
    summary = simulate_game(SHORT_GAME, max_turns=1000)

    assert summary.finished
    assert summary.winner_id is not None
    assert summary.victory_points[summary.winner_id] >= 4
    assert summary.seed == 7
    assert summary.actions > 0
    assert len(summary.victory_points) == 3


def test_simulation_reproducible_with_seed():
    """Deux parties avec la même graine doivent être identiques."""
    assert simulate_game(SHORT_GAME) == simulate_game(SHORT_GAME)


def test_turn_limit_stops_game():
    """La limite de tours interrompt une partie sans gagnant."""
    summary = simulate_game(GameConfig(total_players=2, target_vp=16, seed=1), max_turns=2)

    assert not summary.finished
    assert summary.winner_id is None
    assert summary.turns <= 3


def test_run_simulations_uses_consecutive_seeds():
    result = run_simulations(3, SHORT_GAME, base_seed=20, max_turns=1000)

    assert isinstance(result, SimulationSummary)
    assert [game.seed for game in result.games] == [20, 21, 22]
    assert result.total_games == 3
    assert result.finished_games == 3
    assert sum(result.wins_by_player.values()) == 3
    assert result.average_turns > 0


def test_summary_aggregates():
    empty = SimulationSummary(games=())
    assert empty.total_games == 0
    assert empty.average_turns == 0.0
    assert empty.wins_by_player == {}


@pytest.mark.parametrize("games,max_turns", [(0, 10), (2, 0), (-1, 5)])
def test_invalid_arguments(games, max_turns):
    with pytest.raises(ValueError):
        run_simulations(games, SHORT_GAME, max_turns=max_turns)


def test_cli_prints_summary(capsys):
    exit_code = cli.main(["--games", "2", "--players", "2", "--target-vp", "3", "--seed", "4"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "Parties: 2 (terminées: 2)" in output
    assert "Tours moyens:" in output
    assert "victoire(s)" in output


def test_cli_rejects_non_positive_games(capsys):
    assert cli.main(["--games", "0"]) == 2
    assert "strictement positifs" in capsys.readouterr().err
