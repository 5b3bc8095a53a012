"""Actions du jeu.

Les actions ne portent pas d'identifiant de joueur: le contrôleur de tour
les applique toujours pour `GameState.current_player_id`.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Action:
    """Action de base."""

    pass


@dataclass(frozen=True)
class PlaceSettlement(Action):
    """Place une colonie sur un sommet (gratuite pendant le setup).

    Args:
        vertex_id: ID du sommet
    """

    vertex_id: int


@dataclass(frozen=True)
class PlaceRoad(Action):
    """Place une route sur une arête (gratuite pendant le setup).

    Args:
        edge_id: ID de l'arête
    """

    edge_id: int


@dataclass(frozen=True)
class BuildCity(Action):
    """Améliore une colonie en ville.

    Args:
        vertex_id: ID du sommet avec la colonie à améliorer
    """

    vertex_id: int


@dataclass(frozen=True)
class RollDice(Action):
    """Lance les dés.

    Args:
        forced_value: Total forcé pour les tests (optionnel)
    """

    forced_value: int | None = None


@dataclass(frozen=True)
class MoveRobber(Action):
    """Déplace le voleur (après un 7) et vole un adversaire adjacent.

    Args:
        tile_id: ID de la tuile cible
    """

    tile_id: int


@dataclass(frozen=True)
class TradeBank(Action):
    """Échange 4:1 avec la banque.

    Args:
        give: Ressource cédée (4 unités)
        get: Ressource reçue (1 unité)
    """

    give: str
    get: str


@dataclass(frozen=True)
class EndTurn(Action):
    """Termine le tour du joueur actuel."""

    pass


__all__ = [
    "Action",
    "PlaceSettlement",
    "PlaceRoad",
    "BuildCity",
    "RollDice",
    "MoveRobber",
    "TradeBank",
    "EndTurn",
]
