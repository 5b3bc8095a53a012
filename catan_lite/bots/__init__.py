"""Joueurs automatiques (bot heuristique)."""

from .policies import AgentPolicy, HeuristicPolicy, take_setup_action, take_turn

__all__ = ["AgentPolicy", "HeuristicPolicy", "take_setup_action", "take_turn"]
