"""Geometry utilities for board rendering.

Ce module fournit la classe BoardGeometry qui calcule les coordonnées écran
des éléments du plateau (sommets, arêtes, polygones de tuiles) à partir de
la géométrie logique du Board, et la détection des clics.

Aucune dépendance pygame: utilisable dans les tests headless.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

from catan_lite.engine.board import Board, axial_to_pixel, hex_corner

ScreenPoint = Tuple[float, float]

VERTEX_CLICK_RADIUS = 15.0
EDGE_CLICK_DISTANCE = 10.0


class BoardGeometry:
    """Compute screen coordinates from logical board positions.

    Les positions logiques sont déjà en pixels (hexagones de 54 px); la
    géométrie applique un facteur d'échelle puis un décalage pour que le coin
    haut-gauche du plateau tombe sur (origin + margin).
    """

    def __init__(
        self,
        board: Board,
        *,
        scale: float = 1.0,
        margin: float = 20.0,
        origin: ScreenPoint = (0.0, 0.0),
    ) -> None:
        """Initialize geometry calculator.

        Args:
            board: Game board
            scale: Facteur appliqué aux positions logiques
            margin: Margin around the board in pixels
            origin: Coin haut-gauche de la zone plateau à l'écran
        """
        self.board = board
        self.scale = scale
        self.margin = margin

        xs = [v.position[0] * scale for v in board.vertices]
        ys = [v.position[1] * scale for v in board.vertices]
        self._min_x = min(xs)
        self._min_y = min(ys)
        self._width = max(xs) - self._min_x + 2 * margin
        self._height = max(ys) - self._min_y + 2 * margin
        self._offset_x = origin[0] + margin - self._min_x
        self._offset_y = origin[1] + margin - self._min_y

        self._vertex_positions: List[ScreenPoint] = [
            self.to_screen(v.position) for v in board.vertices
        ]
        self._tile_polygons: Dict[int, List[ScreenPoint]] = {}
        for tile in board.tiles:
            center = axial_to_pixel(tile.q, tile.r)
            self._tile_polygons[tile.tile_id] = [
                self.to_screen(hex_corner(center, i)) for i in range(6)
            ]

    def to_screen(self, point: Tuple[float, float]) -> ScreenPoint:
        return (
            point[0] * self.scale + self._offset_x,
            point[1] * self.scale + self._offset_y,
        )

    @property
    def surface_size(self) -> Tuple[float, float]:
        """(width, height) nécessaires pour contenir le plateau et ses marges."""
        return (self._width, self._height)

    def vertex_position(self, vertex_id: int) -> ScreenPoint:
        return self._vertex_positions[vertex_id]

    def edge_segment(self, edge_id: int) -> Tuple[ScreenPoint, ScreenPoint]:
        a, b = self.board.edges[edge_id].vertices
        return self._vertex_positions[a], self._vertex_positions[b]

    def tile_polygon(self, tile_id: int) -> List[ScreenPoint]:
        return list(self._tile_polygons[tile_id])

    def tile_center(self, tile_id: int) -> ScreenPoint:
        tile = self.board.tiles[tile_id]
        return self.to_screen(axial_to_pixel(tile.q, tile.r))

    # -- Détection des clics -------------------------------------------------------

    def vertex_at(self, pos: Tuple[float, float], radius: float = VERTEX_CLICK_RADIUS) -> Optional[int]:
        """Sommet le plus proche du clic, s'il est à moins de `radius` px."""
        best: Optional[int] = None
        best_distance = radius
        for vertex_id, (vx, vy) in enumerate(self._vertex_positions):
            distance = math.hypot(pos[0] - vx, pos[1] - vy)
            if distance <= best_distance:
                best, best_distance = vertex_id, distance
        return best

    def edge_at(self, pos: Tuple[float, float], tolerance: float = EDGE_CLICK_DISTANCE) -> Optional[int]:
        best: Optional[int] = None
        best_distance = tolerance
        for edge in self.board.edges:
            seg_a, seg_b = self.edge_segment(edge.edge_id)
            distance = point_to_segment_distance(pos, seg_a, seg_b)
            if distance <= best_distance:
                best, best_distance = edge.edge_id, distance
        return best

    def tile_at(self, pos: Tuple[float, float]) -> Optional[int]:
        for tile_id, polygon in self._tile_polygons.items():
            if point_in_polygon(pos[0], pos[1], polygon):
                return tile_id
        return None


def point_in_polygon(x: float, y: float, vertices: List[ScreenPoint]) -> bool:
    """Return True if point is inside polygon defined by vertices."""

    inside = False
    n = len(vertices)
    if n < 3:
        return False

    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        intersects = ((yi > y) != (yj > y)) and (
            x < (xj - xi) * (y - yi) / ((yj - yi) or 1e-9) + xi
        )
        if intersects:
            inside = not inside
        j = i

    return inside


def point_to_segment_distance(
    point: Tuple[float, float],
    seg_a: ScreenPoint,
    seg_b: ScreenPoint,
) -> float:
    """Distance euclidienne d'un point au segment [seg_a, seg_b]."""
    px, py = point
    ax, ay = seg_a
    bx, by = seg_b
    abx, aby = bx - ax, by - ay
    ab_squared = abx * abx + aby * aby
    if ab_squared == 0:
        return math.hypot(px - ax, py - ay)

    # Projection de AP sur AB, bornée au segment
    t = max(0.0, min(1.0, ((px - ax) * abx + (py - ay) * aby) / ab_squared))
    return math.hypot(px - (ax + t * abx), py - (ay + t * aby))


__all__ = [
    "BoardGeometry",
    "VERTEX_CLICK_RADIUS",
    "EDGE_CLICK_DISTANCE",
    "point_in_polygon",
    "point_to_segment_distance",
]
