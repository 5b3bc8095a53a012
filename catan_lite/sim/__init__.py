"""Simulation headless de parties entre bots."""

from .runner import GameSummary, SimulationSummary, run_simulations, simulate_game

__all__ = [
    "GameSummary",
    "SimulationSummary",
    "simulate_game",
    "run_simulations",
]
