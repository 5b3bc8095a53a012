"""Point d'entrée CLI: `python -m catan_lite.sim` / `catan-lite-sim`."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from catan_lite.app.config import GameConfig
from catan_lite.sim.runner import DEFAULT_MAX_TURNS, run_simulations


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simule des parties Catan-Lite entre bots")
    parser.add_argument("--games", type=int, default=10, help="Nombre de parties à simuler")
    parser.add_argument("--players", type=int, default=3, help="Nombre de joueurs (2 à 4)")
    parser.add_argument("--target-vp", type=int, default=10, help="Points de victoire visés (3 à 16)")
    parser.add_argument("--seed", type=int, default=0, help="Graine de la première partie")
    parser.add_argument(
        "--max-turns", type=int, default=DEFAULT_MAX_TURNS, help="Limite de tours par partie"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Journalisation détaillée")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.games <= 0 or args.max_turns <= 0:
        print("--games et --max-turns doivent être strictement positifs", file=sys.stderr)
        return 2

    config = GameConfig(total_players=args.players, human_players=0, target_vp=args.target_vp)
    summary = run_simulations(
        args.games, config.normalized(), base_seed=args.seed, max_turns=args.max_turns
    )

    print(f"Parties: {summary.total_games} (terminées: {summary.finished_games})")
    print(f"Tours moyens: {summary.average_turns:.1f}")
    for player_id, wins in summary.wins_by_player.items():
        print(f"  Joueur {player_id}: {wins} victoire(s)")
    print(f"Durée: {summary.duration_seconds:.2f}s")
    return 0


__all__ = ["build_parser", "main"]
