"""Catan-Lite: moteur de jeu simplifié, bot heuristique et GUI pygame."""

__version__ = "0.1.0"
