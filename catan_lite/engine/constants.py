"""Constantes de la variante Catan-Lite.

Regroupe les ressources, coûts de construction, poids de probabilité
des jetons (pips) et bornes de configuration partagés par le moteur,
le bot et la GUI.
"""

from __future__ import annotations

from typing import Dict, Tuple

RESOURCE_TYPES: Tuple[str, ...] = ("BRICK", "LUMBER", "WOOL", "GRAIN", "ORE")
DESERT: str = "DESERT"

# Coûts de construction (contrat: mapping str -> dict[str, int])
COSTS: Dict[str, Dict[str, int]] = {
    "road": {"BRICK": 1, "LUMBER": 1},
    "settlement": {"BRICK": 1, "LUMBER": 1, "WOOL": 1, "GRAIN": 1},
    "city": {"GRAIN": 2, "ORE": 3},
}

# Poids relatif de chaque somme de dés (7 exclu), utilisé pour classer les sommets
PIP_VALUE: Dict[int, int] = {
    2: 1,
    3: 2,
    4: 3,
    5: 4,
    6: 5,
    8: 5,
    9: 4,
    10: 3,
    11: 2,
    12: 1,
}

BANK_STARTING_RESOURCES: Dict[str, int] = {resource: 19 for resource in RESOURCE_TYPES}
BANK_TRADE_RATE: int = 4
ROBBER_ROLL: int = 7

LOG_LIMIT: int = 200

MIN_TARGET_VP: int = 3
MAX_TARGET_VP: int = 16
DEFAULT_TARGET_VP: int = 10

MIN_PLAYERS: int = 2
MAX_PLAYERS: int = 4

# Géométrie (pixels), hexagones pointy-top
HEX_SIZE: float = 54.0

PLAYER_COLORS: Tuple[str, ...] = ("#66bb6a", "#42a5f5", "#ff7043", "#ab47bc")

RESOURCE_COLORS: Dict[str, str] = {
    "BRICK": "#8d4a30",
    "LUMBER": "#2e7d32",
    "WOOL": "#4db6ac",
    "GRAIN": "#ffd54f",
    "ORE": "#9e9e9e",
    DESERT: "#c9b380",
}

__all__ = [
    "RESOURCE_TYPES",
    "DESERT",
    "COSTS",
    "PIP_VALUE",
    "BANK_STARTING_RESOURCES",
    "BANK_TRADE_RATE",
    "ROBBER_ROLL",
    "LOG_LIMIT",
    "MIN_TARGET_VP",
    "MAX_TARGET_VP",
    "DEFAULT_TARGET_VP",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "HEX_SIZE",
    "PLAYER_COLORS",
    "RESOURCE_COLORS",
]
