"""Plateau fixe Catan-Lite et graphe planaire sommets/arêtes.

Le plateau est un hexagone de rayon 2 (19 tuiles) à disposition fixe:
- coordonnées axiales (q, r), ordre déterministe (tri par r puis q)
- sommets = coins d'hexagones dédupliqués par position quantifiée
- arêtes = côtés d'hexagones, une seule entrée par paire non orientée

Les sommets et arêtes sont stockés dans des listes indexées par de petits
entiers; les tables clé -> index sont construites une seule fois.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from catan_lite.engine.constants import DESERT, HEX_SIZE

Point = Tuple[float, float]

_SQRT3: float = math.sqrt(3.0)
_RADIUS: int = 2


class StructureKind(Enum):
    """Type de pièce posée sur un sommet."""

    SETTLEMENT = "SETTLEMENT"
    CITY = "CITY"


@dataclass(frozen=True)
class Tile:
    tile_id: int
    q: int
    r: int
    resource: str
    number: int | None

    @property
    def is_desert(self) -> bool:
        return self.resource == DESERT


@dataclass
class Occupant:
    """Propriétaire d'un sommet et type de pièce."""

    player_id: int
    kind: StructureKind = StructureKind.SETTLEMENT

    @property
    def is_city(self) -> bool:
        return self.kind == StructureKind.CITY


@dataclass
class Vertex:
    vertex_id: int
    key: str
    position: Point
    adjacent_tiles: List[int] = field(default_factory=list)
    neighbors: List[int] = field(default_factory=list)
    edges: List[int] = field(default_factory=list)
    occupant: Optional[Occupant] = None


@dataclass
class Edge:
    edge_id: int
    key: str
    vertices: Tuple[int, int]
    adjacent_tiles: List[int] = field(default_factory=list)
    occupant: Optional[int] = None  # player_id


# Disposition fixe, dans l'ordre des coordonnées (r puis q)
_TILE_RESOURCES: Tuple[str, ...] = (
    "LUMBER", "GRAIN", "WOOL", "BRICK",
    "GRAIN", "ORE", "LUMBER",
    "WOOL", "GRAIN", DESERT, "WOOL",
    "ORE", "BRICK", "GRAIN",
    "LUMBER", "WOOL", "ORE", "LUMBER", "BRICK",
)

_TILE_NUMBERS: Tuple[Optional[int], ...] = (
    11, 4, 8, 3,
    6, 5, 10,
    9, 12, None, 11,
    3, 6, 5,
    10, 2, 9, 4, 8,
)


def axial_to_pixel(q: int, r: int, size: float = HEX_SIZE) -> Point:
    """Centre d'une tuile en pixels (orientation pointy-top)."""
    x = size * (_SQRT3 * q + (_SQRT3 / 2) * r)
    y = size * (1.5 * r)
    return x, y


def hex_corner(center: Point, index: int, size: float = HEX_SIZE) -> Point:
    """Coin `index` (0..5) d'un hexagone pointy-top, décalage de -30°."""
    angle = math.radians(60 * index - 30)
    return center[0] + size * math.cos(angle), center[1] + size * math.sin(angle)


def _quantize(value: float) -> float:
    # round() renvoie un int: pas de -0.0 possible
    return round(value * 10) / 10


def point_key(point: Point) -> str:
    """Clé de sommet: position arrondie à une décimale."""
    return f"{_quantize(point[0]):.1f},{_quantize(point[1]):.1f}"


def _radius_coords(radius: int = _RADIUS) -> List[Tuple[int, int]]:
    coords: List[Tuple[int, int]] = []
    for q in range(-radius, radius + 1):
        r1 = max(-radius, -q - radius)
        r2 = min(radius, -q + radius)
        for r in range(r1, r2 + 1):
            coords.append((q, r))
    return sorted(coords, key=lambda c: (c[1], c[0]))


def generate_tiles() -> List[Tile]:
    """Retourne les 19 tuiles du plateau fixe (aucun tirage aléatoire)."""
    tiles: List[Tile] = []
    for tile_id, (q, r) in enumerate(_radius_coords()):
        resource = _TILE_RESOURCES[tile_id]
        number = None if resource == DESERT else _TILE_NUMBERS[tile_id]
        tiles.append(Tile(tile_id=tile_id, q=q, r=r, resource=resource, number=number))
    return tiles


def initial_robber_tile_id(tiles: Sequence[Tile]) -> int:
    """Position initiale du voleur: le désert, sinon la tuile 0."""
    return next((tile.tile_id for tile in tiles if tile.is_desert), 0)


class Board:
    """Graphe du plateau: tuiles, sommets et arêtes indexés par entier."""

    def __init__(
        self,
        tiles: Iterable[Tile],
        vertices: Iterable[Vertex],
        edges: Iterable[Edge],
    ) -> None:
        self.tiles: List[Tile] = list(tiles)
        self.vertices: List[Vertex] = list(vertices)
        self.edges: List[Edge] = list(edges)

        self._vertex_index: Dict[str, int] = {v.key: v.vertex_id for v in self.vertices}
        self._edge_index: Dict[str, int] = {e.key: e.edge_id for e in self.edges}
        self._edge_by_pair: Dict[Tuple[int, int], int] = {
            tuple(sorted(e.vertices)): e.edge_id for e in self.edges  # type: ignore[misc]
        }
        self._tile_vertices: Dict[int, List[int]] = {t.tile_id: [] for t in self.tiles}
        for vertex in self.vertices:
            for tile_id in vertex.adjacent_tiles:
                self._tile_vertices.setdefault(tile_id, []).append(vertex.vertex_id)

    @classmethod
    def standard(cls) -> "Board":
        return build_graph(generate_tiles())

    # -- API comptage --
    def tile_count(self) -> int:
        return len(self.tiles)

    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        return len(self.edges)

    # -- Accès tolérants (identifiants inconnus -> False/None) --
    def has_tile(self, tile_id: int) -> bool:
        return 0 <= tile_id < len(self.tiles)

    def has_vertex(self, vertex_id: int) -> bool:
        return 0 <= vertex_id < len(self.vertices)

    def has_edge(self, edge_id: int) -> bool:
        return 0 <= edge_id < len(self.edges)

    def vertex_by_key(self, key: str) -> Optional[Vertex]:
        index = self._vertex_index.get(key)
        return None if index is None else self.vertices[index]

    def edge_by_key(self, key: str) -> Optional[Edge]:
        index = self._edge_index.get(key)
        return None if index is None else self.edges[index]

    def edge_between(self, a: int, b: int) -> Optional[Edge]:
        index = self._edge_by_pair.get((min(a, b), max(a, b)))
        return None if index is None else self.edges[index]

    def tile_vertices(self, tile_id: int) -> List[int]:
        """Sommets touchant la tuile (6 pour toute tuile du plateau)."""
        return list(self._tile_vertices.get(tile_id, ()))


def build_graph(tiles: Sequence[Tile]) -> Board:
    """Construit le graphe planaire à partir de la géométrie des tuiles.

    Chaque coin est quantifié à 0.1 px pour fusionner les doublons flottants
    partagés par 2 ou 3 tuiles. Les arêtes relient deux coins consécutifs
    (avec bouclage); leur clé trie les extrémités pour qu'un côté partagé
    ne produise qu'une seule arête. Les voisins sont dérivés des arêtes.
    """
    vertices: List[Vertex] = []
    vertex_index: Dict[str, int] = {}
    edges: List[Edge] = []
    edge_index: Dict[str, int] = {}

    for tile in tiles:
        center = axial_to_pixel(tile.q, tile.r)
        corner_ids: List[int] = []
        for i in range(6):
            corner = hex_corner(center, i)
            key = point_key(corner)
            vid = vertex_index.get(key)
            if vid is None:
                vid = len(vertices)
                vertex_index[key] = vid
                vertices.append(
                    Vertex(
                        vertex_id=vid,
                        key=key,
                        position=(_quantize(corner[0]), _quantize(corner[1])),
                    )
                )
            vertices[vid].adjacent_tiles.append(tile.tile_id)
            corner_ids.append(vid)

        for i in range(6):
            a = corner_ids[i]
            b = corner_ids[(i + 1) % 6]
            if vertices[b].key < vertices[a].key:
                a, b = b, a
            key = f"{vertices[a].key}|{vertices[b].key}"
            eid = edge_index.get(key)
            if eid is None:
                eid = len(edges)
                edge_index[key] = eid
                edges.append(Edge(edge_id=eid, key=key, vertices=(a, b)))
            edges[eid].adjacent_tiles.append(tile.tile_id)

    for edge in edges:
        a, b = edge.vertices
        if b not in vertices[a].neighbors:
            vertices[a].neighbors.append(b)
        if a not in vertices[b].neighbors:
            vertices[b].neighbors.append(a)
        vertices[a].edges.append(edge.edge_id)
        vertices[b].edges.append(edge.edge_id)

    return Board(tiles=tiles, vertices=vertices, edges=edges)


__all__ = [
    "Board",
    "Tile",
    "Vertex",
    "Edge",
    "Occupant",
    "StructureKind",
    "axial_to_pixel",
    "hex_corner",
    "point_key",
    "generate_tiles",
    "build_graph",
    "initial_robber_tile_id",
]
