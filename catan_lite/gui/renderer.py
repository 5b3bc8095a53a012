"""BoardRenderer: rendu pygame du plateau et des pièces.

Responsabilités:
- Dessiner les tuiles, jetons numérotés et le voleur
- Dessiner routes, colonies, villes depuis GameState
- Dessiner les surbrillances contextuelles (positions légales)
- Dessiner le panneau latéral (joueurs, banque, boutons, journal)

Conventions visuelles:
- Hex pointy-top, couleurs de ressources de `engine.constants`
- Pièces: routes=lignes épaisses, colonies=cercles, villes=carrés
- Jetons 6 et 8 en rouge
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

import pygame

from catan_lite.engine.board import StructureKind
from catan_lite.engine.constants import RESOURCE_COLORS, RESOURCE_TYPES
from catan_lite.engine.state import GameState, Phase
from catan_lite.gui.app import UIState
from catan_lite.gui.geometry import BoardGeometry

# Constantes écran
SCREEN_WIDTH = 1180
SCREEN_HEIGHT = 760
BOARD_AREA_WIDTH = 720
SIDEBAR_X = BOARD_AREA_WIDTH + 20

# Couleurs (palette sobre)
COLOR_BG = (18, 24, 38)
COLOR_TEXT = (235, 235, 235)
COLOR_MUTED = (140, 150, 165)
COLOR_TILE_BORDER = (20, 20, 20)
COLOR_TOKEN = (250, 245, 230)
COLOR_NUMBER = (20, 20, 20)
COLOR_NUMBER_RED = (200, 40, 40)
COLOR_ROBBER = (40, 40, 40)
COLOR_HIGHLIGHT = (100, 255, 100, 180)
COLOR_HIGHLIGHT_TILE = (255, 255, 120, 90)
COLOR_BUTTON = (60, 90, 140)
COLOR_BUTTON_DISABLED = (55, 60, 70)
ROBBER_OFFSET_Y = 22

# Tailles pièces
ROAD_WIDTH = 6
SETTLEMENT_RADIUS = 10
CITY_SIZE = 18
TOKEN_RADIUS = 16

# Boutons du panneau latéral, dans l'ordre d'affichage
BUTTON_ORDER: Tuple[str, ...] = (
    "roll_dice",
    "move_robber",
    "select_build_road",
    "select_build_settlement",
    "select_build_city",
    "bank_trade",
    "cancel",
    "end_turn",
)
BUTTON_SIZE = (200, 30)


class BoardRenderer:
    """Rendu du plateau, des pièces et du panneau latéral."""

    def __init__(self, screen: pygame.Surface, geometry: BoardGeometry) -> None:
        self.screen = screen
        self.geometry = geometry
        self._font: Optional[pygame.font.Font] = None
        self._small_font: Optional[pygame.font.Font] = None
        self.button_rects: Dict[str, pygame.Rect] = {}

    def _ensure_fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        """Lazy init fonts."""
        if self._font is None or self._small_font is None:
            pygame.font.init()
            self._font = pygame.font.SysFont("Arial", 18, bold=True)
            self._small_font = pygame.font.SysFont("Arial", 14)
        return self._font, self._small_font

    # -- Plateau -------------------------------------------------------------------

    def render_board(self, state: GameState) -> None:
        """Tuiles, jetons numérotés et voleur."""
        font, _ = self._ensure_fonts()
        for tile in state.tiles:
            polygon = self.geometry.tile_polygon(tile.tile_id)
            color = pygame.Color(RESOURCE_COLORS[tile.resource])
            pygame.draw.polygon(self.screen, color, polygon)
            pygame.draw.polygon(self.screen, COLOR_TILE_BORDER, polygon, width=2)

            cx, cy = self.geometry.tile_center(tile.tile_id)
            center = (int(cx), int(cy))
            if tile.number is not None:
                pygame.draw.circle(self.screen, COLOR_TOKEN, center, TOKEN_RADIUS)
                pygame.draw.circle(self.screen, COLOR_TILE_BORDER, center, TOKEN_RADIUS, width=2)
                number_color = COLOR_NUMBER_RED if tile.number in (6, 8) else COLOR_NUMBER
                text = font.render(str(tile.number), True, number_color)
                self.screen.blit(text, text.get_rect(center=center))

            if tile.tile_id == state.robber_tile_id:
                robber_center = (center[0], center[1] + ROBBER_OFFSET_Y)
                pygame.draw.circle(self.screen, COLOR_ROBBER, robber_center, 12)
                pygame.draw.circle(self.screen, (200, 200, 200), robber_center, 12, width=2)

    def render_pieces(self, state: GameState) -> None:
        """Render roads, settlements, and cities from game state."""
        for edge in state.edges:
            if edge.occupant is None:
                continue
            color = pygame.Color(state.players[edge.occupant].color)
            a, b = self.geometry.edge_segment(edge.edge_id)
            pygame.draw.line(self.screen, color, a, b, width=ROAD_WIDTH)

        for vertex in state.vertices:
            occupant = vertex.occupant
            if occupant is None:
                continue
            color = pygame.Color(state.players[occupant.player_id].color)
            x, y = self.geometry.vertex_position(vertex.vertex_id)
            pos = (int(x), int(y))
            if occupant.kind == StructureKind.CITY:
                rect = pygame.Rect(0, 0, CITY_SIZE, CITY_SIZE)
                rect.center = pos
                pygame.draw.rect(self.screen, color, rect)
                pygame.draw.rect(self.screen, (0, 0, 0), rect, width=2)
            else:
                pygame.draw.circle(self.screen, color, pos, SETTLEMENT_RADIUS)
                pygame.draw.circle(self.screen, (0, 0, 0), pos, SETTLEMENT_RADIUS, width=2)

    def render_highlighted_vertices(self, vertex_ids: Iterable[int]) -> None:
        size = SETTLEMENT_RADIUS * 3
        for vertex_id in vertex_ids:
            x, y = self.geometry.vertex_position(vertex_id)
            surf = pygame.Surface((size, size), pygame.SRCALPHA)
            pygame.draw.circle(surf, COLOR_HIGHLIGHT, (size // 2, size // 2), SETTLEMENT_RADIUS + 4)
            self.screen.blit(surf, (int(x) - size // 2, int(y) - size // 2))

    def render_highlighted_edges(self, edge_ids: Iterable[int]) -> None:
        for edge_id in edge_ids:
            a, b = self.geometry.edge_segment(edge_id)
            pygame.draw.line(self.screen, COLOR_HIGHLIGHT[:3], a, b, width=ROAD_WIDTH + 2)

    def render_highlighted_tiles(self, tile_ids: Iterable[int]) -> None:
        for tile_id in tile_ids:
            polygon = self.geometry.tile_polygon(tile_id)
            min_x = min(p[0] for p in polygon)
            min_y = min(p[1] for p in polygon)
            width = int(max(p[0] for p in polygon) - min_x) + 1
            height = int(max(p[1] for p in polygon) - min_y) + 1
            surf = pygame.Surface((width, height), pygame.SRCALPHA)
            pygame.draw.polygon(surf, COLOR_HIGHLIGHT_TILE, [(x - min_x, y - min_y) for x, y in polygon])
            self.screen.blit(surf, (min_x, min_y))

    # -- Panneau latéral -------------------------------------------------------

    def _text(self, text: str, pos: Tuple[int, int], *, small: bool = False, color=COLOR_TEXT) -> int:
        font, small_font = self._ensure_fonts()
        surf = (small_font if small else font).render(text, True, color)
        self.screen.blit(surf, pos)
        return surf.get_height()

    def render_sidebar(self, ui_state: UIState) -> None:
        """Titre, joueurs, banque, boutons et journal."""
        x = SIDEBAR_X
        y = 16
        y += self._text(ui_state.title, (x, y)) + 4
        roll = "-" if ui_state.last_roll is None else str(ui_state.last_roll)
        y += self._text(f"Dernier lancer : {roll}   Objectif : {ui_state.target_vp} PV", (x, y), small=True) + 10

        for panel in ui_state.player_panels:
            marker = "> " if panel.is_current_player else "  "
            label = f"{marker}{panel.name} : {panel.victory_points} PV"
            self._text(label, (x, y), color=pygame.Color(panel.color))
            y += 20
            resources = "  ".join(f"{res[0]}:{panel.resources[res]}" for res in RESOURCE_TYPES)
            y += self._text(resources, (x + 16, y), small=True, color=COLOR_MUTED) + 6

        bank = "  ".join(f"{res[0]}:{ui_state.bank[res]}" for res in RESOURCE_TYPES)
        y += self._text(f"Banque  {bank}", (x, y), small=True) + 12

        self.button_rects = {}
        for name in BUTTON_ORDER:
            button = ui_state.buttons[name]
            rect = pygame.Rect(x, y, *BUTTON_SIZE)
            pygame.draw.rect(
                self.screen,
                COLOR_BUTTON if button.enabled else COLOR_BUTTON_DISABLED,
                rect,
                border_radius=4,
            )
            self._text(
                button.label,
                (rect.x + 8, rect.y + 7),
                small=True,
                color=COLOR_TEXT if button.enabled else COLOR_MUTED,
            )
            self.button_rects[name] = rect
            y += BUTTON_SIZE[1] + 6

        y += 6
        if ui_state.phase == Phase.PLAY:
            counts = f"Colonies possibles : {ui_state.legal_settlement_count}   Routes : {ui_state.legal_road_count}"
            y += self._text(counts, (x, y), small=True, color=COLOR_MUTED) + 6
        y += self._text(ui_state.instructions, (x, y), small=True) + 10

        for line in ui_state.log[:12]:
            y += self._text(f"• {line}", (x, y), small=True, color=COLOR_MUTED) + 2

    def render_hint(self, text: str) -> None:
        """Ligne d'aide en bas de la zone plateau."""
        self._text(text, (20, SCREEN_HEIGHT - 28), small=True)

    def button_at(self, pos: Tuple[int, int]) -> Optional[str]:
        for name, rect in self.button_rects.items():
            if rect.collidepoint(pos):
                return name
        return None

    def render(self, state: GameState, ui_state: UIState) -> None:
        """Frame complète."""
        self.screen.fill(COLOR_BG)
        self.render_board(state)
        if ui_state.highlight_tiles:
            self.render_highlighted_tiles(ui_state.highlight_tiles)
        self.render_pieces(state)
        if ui_state.highlight_edges:
            self.render_highlighted_edges(ui_state.highlight_edges)
        if ui_state.highlight_vertices:
            self.render_highlighted_vertices(ui_state.highlight_vertices)
        self.render_sidebar(ui_state)


def make_geometry(state: GameState) -> BoardGeometry:
    """Géométrie du plateau centrée dans la zone de gauche."""
    geometry = BoardGeometry(state.board, margin=0.0)
    width, height = geometry.surface_size
    origin = ((BOARD_AREA_WIDTH - width) / 2, (SCREEN_HEIGHT - height) / 2)
    return BoardGeometry(state.board, margin=0.0, origin=origin)


__all__ = [
    "BoardRenderer",
    "make_geometry",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "BUTTON_ORDER",
]
