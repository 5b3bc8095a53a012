"""Règles Catan-Lite: légalité des placements et opérations de mutation.

Fonctions sans état propre: chacune reçoit le `GameState` (muté en place)
et des paramètres explicites. Aucune exception n'est levée pour une règle
violée: les opérations renvoient `False` et laissent l'état inchangé.

Contrat appelant: le moteur ne vérifie pas que `player_id` est le joueur
dont c'est le tour; c'est le rôle de `catan_lite.engine.turns`.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Dict, List, Mapping, MutableMapping

from catan_lite.engine.board import Edge, Occupant, StructureKind
from catan_lite.engine.constants import (
    BANK_TRADE_RATE,
    COSTS,
    PIP_VALUE,
    RESOURCE_TYPES,
    ROBBER_ROLL,
)

if TYPE_CHECKING:
    from catan_lite.engine.state import GameState, Player

logger = logging.getLogger(__name__)

ResourceMap = Mapping[str, int]
Grants = Dict[int, Dict[str, int]]


# -- Économie ---------------------------------------------------------------

def can_afford(player: "Player", cost: ResourceMap) -> bool:
    return all(player.resources.get(res, 0) >= amount for res, amount in cost.items())


def pay(player: "Player", bank: MutableMapping[str, int], cost: ResourceMap) -> None:
    """Transfère le coût du joueur vers la banque (à appeler après can_afford)."""
    for resource, amount in cost.items():
        player.resources[resource] -= amount
        bank[resource] += amount


def gain(
    player: "Player",
    bank: MutableMapping[str, int],
    resources: ResourceMap,
) -> Dict[str, int]:
    """Transfère des ressources de la banque au joueur, plafonné par la banque.

    Returns:
        Quantités réellement versées (peut être inférieur à la demande)
    """
    granted: Dict[str, int] = {}
    for resource, amount in resources.items():
        take = min(bank[resource], amount)
        if take < amount:
            logger.debug(
                "Banque à court de %s: %d demandé(s), %d versé(s)", resource, amount, take
            )
        bank[resource] -= take
        player.resources[resource] += take
        if take:
            granted[resource] = granted.get(resource, 0) + take
    return granted


def resource_totals(state: "GameState") -> Dict[str, int]:
    """Unités existantes par ressource (banque + mains des joueurs)."""
    totals = dict(state.bank)
    for player in state.players:
        for resource in RESOURCE_TYPES:
            totals[resource] += player.resources[resource]
    return totals


def _has_player(state: "GameState", player_id: int) -> bool:
    return 0 <= player_id < len(state.players)


# -- Légalité ---------------------------------------------------------------

def edges_around_vertex(state: "GameState", vertex_id: int) -> List[Edge]:
    vertex = state.vertices[vertex_id]
    return [state.edges[edge_id] for edge_id in vertex.edges]


def is_vertex_buildable_settlement(
    state: "GameState",
    vertex_id: int,
    player_id: int,
    during_setup: bool,
) -> bool:
    """Vérifie qu'une colonie peut être posée sur le sommet.

    - sommet libre
    - règle de distance: aucun voisin occupé
    - hors setup: une route du joueur touche le sommet
    """
    if not state.board.has_vertex(vertex_id):
        return False
    vertex = state.vertices[vertex_id]
    if vertex.occupant is not None:
        return False
    if any(state.vertices[nb].occupant is not None for nb in vertex.neighbors):
        return False
    if during_setup:
        return True
    return any(edge.occupant == player_id for edge in edges_around_vertex(state, vertex_id))


def is_edge_buildable_road(
    state: "GameState",
    edge_id: int,
    player_id: int,
    during_setup: bool,
    setup_vertex_id: int | None = None,
) -> bool:
    """Vérifie qu'une route peut être posée sur l'arête.

    En setup, l'arête doit toucher la colonie qui vient d'être posée.
    En jeu, elle doit toucher une pièce du joueur ou prolonger une de ses routes.
    """
    if not state.board.has_edge(edge_id):
        return False
    edge = state.edges[edge_id]
    if edge.occupant is not None:
        return False
    if during_setup:
        return setup_vertex_id is not None and setup_vertex_id in edge.vertices

    for vertex_id in edge.vertices:
        occupant = state.vertices[vertex_id].occupant
        if occupant is not None and occupant.player_id == player_id:
            return True
    return any(
        other.occupant == player_id
        for vertex_id in edge.vertices
        for other in edges_around_vertex(state, vertex_id)
    )


# -- Constructions -----------------------------------------------------------

def try_build_settlement(
    state: "GameState",
    player_id: int,
    vertex_id: int,
    during_setup: bool,
) -> bool:
    if not _has_player(state, player_id):
        return False
    if not is_vertex_buildable_settlement(state, vertex_id, player_id, during_setup):
        return False
    player = state.players[player_id]
    if not during_setup:
        cost = COSTS["settlement"]
        if not can_afford(player, cost):
            return False
        pay(player, state.bank, cost)

    state.vertices[vertex_id].occupant = Occupant(player_id=player_id)
    player.victory_points += 1
    state.add_log(f"{player.name} a construit une colonie.")
    return True


def try_build_road(
    state: "GameState",
    player_id: int,
    edge_id: int,
    during_setup: bool,
    setup_vertex_id: int | None = None,
) -> bool:
    if not _has_player(state, player_id):
        return False
    if not is_edge_buildable_road(state, edge_id, player_id, during_setup, setup_vertex_id):
        return False
    player = state.players[player_id]
    if not during_setup:
        cost = COSTS["road"]
        if not can_afford(player, cost):
            return False
        pay(player, state.bank, cost)

    state.edges[edge_id].occupant = player_id
    state.add_log(f"{player.name} a construit une route.")
    return True


def try_build_city(state: "GameState", player_id: int, vertex_id: int) -> bool:
    """Améliore une colonie du joueur en ville (+1 PV, 2 au total)."""
    if not _has_player(state, player_id) or not state.board.has_vertex(vertex_id):
        return False
    occupant = state.vertices[vertex_id].occupant
    if occupant is None or occupant.player_id != player_id:
        return False
    if occupant.kind != StructureKind.SETTLEMENT:
        return False
    player = state.players[player_id]
    cost = COSTS["city"]
    if not can_afford(player, cost):
        return False
    pay(player, state.bank, cost)

    occupant.kind = StructureKind.CITY
    player.victory_points += 1
    state.add_log(f"{player.name} a amélioré une colonie en ville.")
    return True


# -- Commerce ----------------------------------------------------------------

def bank_trade_4to1(state: "GameState", player_id: int, give: str, get: str) -> bool:
    """Échange 4 `give` contre 1 `get` avec la banque."""
    if not _has_player(state, player_id):
        return False
    if give not in RESOURCE_TYPES or get not in RESOURCE_TYPES:
        return False
    if give == get:
        return False
    player = state.players[player_id]
    if player.resources[give] < BANK_TRADE_RATE:
        return False
    if state.bank[get] <= 0:
        return False

    player.resources[give] -= BANK_TRADE_RATE
    state.bank[give] += BANK_TRADE_RATE
    state.bank[get] -= 1
    player.resources[get] += 1
    state.add_log(f"{player.name} a échangé {BANK_TRADE_RATE} {give} contre 1 {get}.")
    return True


# -- Dés et production ---------------------------------------------------------

def roll_dice(rng: random.Random) -> int:
    """Somme de deux dés à 6 faces indépendants (2 à 12)."""
    return rng.randint(1, 6) + rng.randint(1, 6)


def distribute_resources(state: "GameState", roll: int) -> Grants:
    """Verse la production des tuiles portant le numéro `roll`.

    Colonie = 1, ville = 2, dans la limite du stock de la banque (aucune
    compensation du manque). Rien sur un 7 ni sur la tuile du voleur.

    Returns:
        Ressources effectivement versées, par joueur
    """
    grants: Grants = {}
    if roll == ROBBER_ROLL:
        return grants

    for tile in state.tiles:
        if tile.number != roll or tile.is_desert:
            continue
        if tile.tile_id == state.robber_tile_id:
            continue
        for vertex_id in state.board.tile_vertices(tile.tile_id):
            occupant = state.vertices[vertex_id].occupant
            if occupant is None:
                continue
            amount = 2 if occupant.is_city else 1
            player = state.players[occupant.player_id]
            granted = gain(player, state.bank, {tile.resource: amount})
            for resource, count in granted.items():
                bucket = grants.setdefault(player.player_id, {})
                bucket[resource] = bucket.get(resource, 0) + count

    for player_id, received in sorted(grants.items()):
        summary = ", ".join(f"{count} {res}" for res, count in received.items())
        state.add_log(f"{state.players[player_id].name} reçoit {summary}.")
    return grants


def payout_second_settlement_resources(state: "GameState") -> Grants:
    """Ressources de départ en fin de setup.

    Simplification assumée: chaque colonie posée (pas seulement la seconde)
    rapporte 1 unité de chaque tuile productive adjacente, si la banque en a.
    """
    grants: Grants = {}
    for vertex in state.vertices:
        occupant = vertex.occupant
        if occupant is None or occupant.kind != StructureKind.SETTLEMENT:
            continue
        player = state.players[occupant.player_id]
        for tile_id in vertex.adjacent_tiles:
            tile = state.tiles[tile_id]
            if tile.is_desert:
                continue
            granted = gain(player, state.bank, {tile.resource: 1})
            for resource, count in granted.items():
                bucket = grants.setdefault(player.player_id, {})
                bucket[resource] = bucket.get(resource, 0) + count
    state.add_log("Ressources de départ distribuées.")
    return grants


# -- Voleur ------------------------------------------------------------------

def robber_victims(state: "GameState", tile_id: int, by_player: int) -> List[int]:
    """Adversaires possédant une pièce sur un sommet de la tuile."""
    victims = set()
    for vertex_id in state.board.tile_vertices(tile_id):
        occupant = state.vertices[vertex_id].occupant
        if occupant is not None and occupant.player_id != by_player:
            victims.add(occupant.player_id)
    return sorted(victims)


def move_robber(state: "GameState", tile_id: int, by_player: int) -> bool:
    """Déplace le voleur puis vole 1 ressource au hasard à un adversaire adjacent.

    Returns:
        True si le voleur a été déplacé (vol ou non), False si la tuile ou le
        joueur est inconnu
    """
    if not state.board.has_tile(tile_id) or not _has_player(state, by_player):
        return False
    thief = state.players[by_player]
    state.robber_tile_id = tile_id
    state.robber_moved_this_turn = True
    state.add_log(f"{thief.name} a déplacé le voleur.")

    victims = robber_victims(state, tile_id, by_player)
    if not victims:
        return True
    victim = state.players[state.rng.choice(victims)]
    available = [res for res in RESOURCE_TYPES if victim.resources[res] > 0]
    if not available:
        return True
    resource = state.rng.choice(available)
    victim.resources[resource] -= 1
    thief.resources[resource] += 1
    state.add_log(f"{thief.name} a volé 1 {resource} à {victim.name}.")
    return True


# -- Heuristique ---------------------------------------------------------------

def settlement_pip_score(state: "GameState", vertex_id: int) -> int:
    """Somme des pips des tuiles numérotées adjacentes (classement IA seulement)."""
    if not state.board.has_vertex(vertex_id):
        return 0
    score = 0
    for tile_id in state.vertices[vertex_id].adjacent_tiles:
        tile = state.tiles[tile_id]
        if tile.number is None or tile.is_desert:
            continue
        score += PIP_VALUE.get(tile.number, 0)
    return score


__all__ = [
    "can_afford",
    "pay",
    "gain",
    "resource_totals",
    "edges_around_vertex",
    "is_vertex_buildable_settlement",
    "is_edge_buildable_road",
    "try_build_settlement",
    "try_build_road",
    "try_build_city",
    "bank_trade_4to1",
    "roll_dice",
    "distribute_resources",
    "payout_second_settlement_resources",
    "robber_victims",
    "move_robber",
    "settlement_pip_score",
]
