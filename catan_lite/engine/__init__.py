"""Moteur Catan-Lite: plateau, règles et contrôleur de tour."""

from . import rules, turns  # re-export for convenience

__all__ = ["rules", "turns"]
