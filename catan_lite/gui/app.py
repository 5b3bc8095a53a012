"""Orchestrateur principal de la GUI Catan-Lite.

Modèle d'interface testable, indépendant de la boucle pygame. Il expose:
- un objet `CatanLiteApp` coordonnant le GameService, les modes de
  construction, les clics plateau et le tour des bots,
- un état d'interface (`UIState`) synthétisant le mode courant, les
  surbrillances à afficher et l'activation des boutons.

Le rendu (`catan_lite.gui.renderer`) et la boucle d'évènements
(`play_gui.py`) ne font que consommer cet état.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Set, Tuple

from catan_lite.app.config import GameConfig
from catan_lite.app.events import GameEndedEvent
from catan_lite.app.game_service import GameService
from catan_lite.engine.actions import (
    BuildCity,
    EndTurn,
    MoveRobber,
    PlaceRoad,
    PlaceSettlement,
    RollDice,
    TradeBank,
)
from catan_lite.engine.board import StructureKind
from catan_lite.engine.rules import is_edge_buildable_road, is_vertex_buildable_settlement
from catan_lite.engine.state import GameState, Phase, SetupStep
from catan_lite.engine.turns import can_act, can_roll, must_move_robber
from catan_lite.gui.sfx import SoundEffects

logger = logging.getLogger(__name__)

MODES: Tuple[str, ...] = ("idle", "build_road", "build_settlement", "build_city", "move_robber")
BUILD_MODES: FrozenSet[str] = frozenset({"build_road", "build_settlement", "build_city"})

_INSTRUCTIONS: Dict[str, str] = {
    "idle": "Construisez, échangez ou terminez votre tour.",
    "build_road": "Cliquez sur une arête en surbrillance pour poser une route.",
    "build_settlement": "Cliquez sur un sommet en surbrillance pour poser une colonie.",
    "build_city": "Cliquez sur une de vos colonies pour la transformer en ville.",
    "move_robber": "7 ! Cliquez sur une tuile pour déplacer le voleur.",
}


@dataclass(frozen=True)
class ButtonState:
    """Représente l'état d'un bouton/action dans l'interface."""

    label: str
    enabled: bool


@dataclass(frozen=True)
class PlayerPanel:
    """Données pour l'affichage d'un joueur."""

    player_id: int
    name: str
    color: str
    is_bot: bool
    is_current_player: bool
    resources: Dict[str, int]
    victory_points: int
    hand_size: int


@dataclass(frozen=True)
class UIState:
    """Données agrégées pour la couche de présentation GUI."""

    mode: str
    phase: Phase
    title: str
    instructions: str
    highlight_vertices: Set[int]
    highlight_edges: Set[int]
    highlight_tiles: Set[int]
    last_roll: Optional[int]
    can_roll: bool
    can_act: bool
    can_end: bool
    buttons: Dict[str, ButtonState]
    player_panels: Tuple[PlayerPanel, ...]
    bank: Dict[str, int]
    target_vp: int
    legal_settlement_count: int
    legal_road_count: int
    winner_id: Optional[int]
    log: Tuple[str, ...]


class CatanLiteApp:
    """Orchestrateur principal de la GUI.

    Cette classe ne gère pas la boucle pygame directement mais fournit
    les opérations nécessaires à l'UI:
    - démarrer une partie,
    - déclencher des actions (lancer de dés, fin de tour, mode de construction,
      échange 4:1),
    - gérer les clics sur le plateau (sommets/arêtes/tuiles),
    - faire jouer les bots,
    - exposer un état synthétique prêt à rendre.
    """

    def __init__(
        self,
        *,
        game_service: Optional[GameService] = None,
        sfx: Optional[SoundEffects] = None,
    ) -> None:
        self.game_service = game_service or GameService()
        self.sfx = sfx
        self.mode: str = "idle"
        self.game_service.event_bus.subscribe(self._on_event)

    # ------------------------------------------------------------------
    # Initialisation & synchronisation
    # ------------------------------------------------------------------

    def start_new_game(
        self,
        config: Optional[GameConfig] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> GameState:
        """Initialise une nouvelle partie (remplace la précédente)."""

        state = self.game_service.start_new_game(config, rng=rng)
        self.mode = "idle"
        return state

    @property
    def has_game(self) -> bool:
        return self.game_service.has_game

    @property
    def state(self) -> GameState:
        """Accès direct à l'état courant de la partie."""

        if not self.game_service.has_game:
            raise RuntimeError("App non initialisée: start_new_game() requis")
        return self.game_service.state

    def refresh_state(self) -> None:
        """Resynchronise le mode courant avec l'état de la partie."""

        state = self.state
        if state.phase != Phase.PLAY:
            self.mode = "idle"
        elif must_move_robber(state):
            self.mode = "move_robber"
        elif self.mode == "move_robber":
            self.mode = "idle"

    def _on_event(self, event: object) -> None:
        if not isinstance(event, GameEndedEvent):
            return
        if self.sfx is not None and event.winner_kind is not None:
            self.sfx.play_for_winner(event.winner_kind)

    # ------------------------------------------------------------------
    # Verrous de boutons
    # ------------------------------------------------------------------

    def is_human_turn(self) -> bool:
        state = self.state
        return not state.is_game_over and not state.current_player.is_bot

    def can_roll(self) -> bool:
        return self.is_human_turn() and can_roll(self.state)

    def can_act(self) -> bool:
        return self.is_human_turn() and can_act(self.state)

    def can_end(self) -> bool:
        return self.can_act()

    # ------------------------------------------------------------------
    # Gestion des actions bouton/menu
    # ------------------------------------------------------------------

    def trigger_action(self, action: str, **kwargs) -> bool:
        """Déclenche une action de haut niveau (bouton panneau)."""

        if not self.has_game:
            raise RuntimeError("App non initialisée: start_new_game() requis")

        if action == "roll_dice":
            if not self.can_roll():
                return False
            result = self.game_service.dispatch(RollDice(forced_value=kwargs.get("forced_value")))
            self.refresh_state()
            return result

        if action == "end_turn":
            if not self.can_end():
                return False
            result = self.game_service.dispatch(EndTurn())
            self.mode = "idle"
            self.refresh_state()
            return result

        if action == "select_build_road":
            return self._enter_build_mode("build_road")

        if action == "select_build_settlement":
            return self._enter_build_mode("build_settlement")

        if action == "select_build_city":
            return self._enter_build_mode("build_city")

        if action == "move_robber":
            if not (self.is_human_turn() and must_move_robber(self.state)):
                return False
            self.mode = "move_robber"
            return True

        if action == "bank_trade":
            if not self.can_act():
                return False
            return self.game_service.dispatch(
                TradeBank(give=kwargs.get("give", ""), get=kwargs.get("get", ""))
            )

        if action == "cancel":
            if self.mode not in BUILD_MODES:
                return False
            self.mode = "idle"
            return True

        logger.debug("Action GUI inconnue: %s", action)
        return False

    def _enter_build_mode(self, mode: str) -> bool:
        """Active un mode de construction (après le lancer et le voleur)."""

        if not self.can_act():
            return False
        self.mode = mode
        return True

    # ------------------------------------------------------------------
    # Gestion des clics plateau (sommets/arêtes/tuiles)
    # ------------------------------------------------------------------

    def handle_board_vertex_click(self, vertex_id: int) -> bool:
        state = self.state
        if not self.is_human_turn():
            return False

        if state.phase == Phase.SETUP:
            if state.setup_step != SetupStep.SETTLEMENT:
                return False
            return self.game_service.dispatch(PlaceSettlement(vertex_id=vertex_id))

        if self.mode == "build_settlement":
            action = PlaceSettlement(vertex_id=vertex_id)
        elif self.mode == "build_city":
            action = BuildCity(vertex_id=vertex_id)
        else:
            return False

        if not self.game_service.dispatch(action):
            return False
        self.mode = "idle"
        self.refresh_state()
        return True

    def handle_board_edge_click(self, edge_id: int) -> bool:
        state = self.state
        if not self.is_human_turn():
            return False

        if state.phase == Phase.SETUP:
            if state.setup_step != SetupStep.ROAD:
                return False
            result = self.game_service.dispatch(PlaceRoad(edge_id=edge_id))
            if result:
                self.refresh_state()
            return result

        if self.mode != "build_road":
            return False
        if not self.game_service.dispatch(PlaceRoad(edge_id=edge_id)):
            return False
        self.mode = "idle"
        self.refresh_state()
        return True

    def handle_board_tile_click(self, tile_id: int) -> bool:
        if self.mode != "move_robber" or not self.is_human_turn():
            return False
        if not self.game_service.dispatch(MoveRobber(tile_id=tile_id)):
            return False
        self.mode = "idle"
        self.refresh_state()
        return True

    # ------------------------------------------------------------------
    # Bots
    # ------------------------------------------------------------------

    def tick_bots(self, max_steps: Optional[int] = 1) -> int:
        """Fait progresser les bots (un pas par défaut, appelé à chaque frame)."""

        steps = self.game_service.run_bots(max_steps=max_steps)
        if steps:
            self.refresh_state()
        return steps

    # ------------------------------------------------------------------
    # Surbrillances & état d'interface
    # ------------------------------------------------------------------

    def compute_highlights(self) -> Tuple[Set[int], Set[int], Set[int]]:
        """Sommets, arêtes et tuiles cliquables pour le joueur humain actif."""

        vertices: Set[int] = set()
        edges: Set[int] = set()
        tiles: Set[int] = set()
        state = self.state
        if not self.is_human_turn():
            return vertices, edges, tiles

        player_id = state.current_player_id
        if state.phase == Phase.SETUP:
            if state.setup_step == SetupStep.SETTLEMENT:
                vertices = {
                    v.vertex_id
                    for v in state.vertices
                    if is_vertex_buildable_settlement(state, v.vertex_id, player_id, True)
                }
            elif state.setup_vertex_id is not None:
                edges = {
                    edge_id
                    for edge_id in state.vertices[state.setup_vertex_id].edges
                    if state.edges[edge_id].occupant is None
                }
            return vertices, edges, tiles

        if self.mode == "build_settlement":
            vertices = self._legal_settlement_vertices()
        elif self.mode == "build_road":
            edges = self._legal_road_edges()
        elif self.mode == "build_city":
            vertices = {
                v.vertex_id
                for v in state.vertices
                if v.occupant is not None
                and v.occupant.player_id == player_id
                and v.occupant.kind == StructureKind.SETTLEMENT
            }
        elif self.mode == "move_robber" and must_move_robber(state):
            tiles = {t.tile_id for t in state.tiles if t.tile_id != state.robber_tile_id}
        return vertices, edges, tiles

    def _legal_settlement_vertices(self) -> Set[int]:
        state = self.state
        return {
            v.vertex_id
            for v in state.vertices
            if is_vertex_buildable_settlement(state, v.vertex_id, state.current_player_id, False)
        }

    def _legal_road_edges(self) -> Set[int]:
        state = self.state
        return {
            e.edge_id
            for e in state.edges
            if is_edge_buildable_road(state, e.edge_id, state.current_player_id, False)
        }

    def _title(self) -> str:
        state = self.state
        if state.phase == Phase.GAME_OVER and state.winner_id is not None:
            return f"{state.players[state.winner_id].name} a gagné !"
        name = state.current_player.name
        if state.phase == Phase.SETUP:
            step = "colonie" if state.setup_step == SetupStep.SETTLEMENT else "route"
            return f"Placement : {name} ({step})"
        return f"Tour {state.turn_number} : {name}"

    def _instructions(self) -> str:
        state = self.state
        if state.phase == Phase.GAME_OVER:
            return "Partie terminée. Lancez une nouvelle partie."
        if state.current_player.is_bot:
            return f"{state.current_player.name} réfléchit..."
        if state.phase == Phase.SETUP:
            if state.setup_step == SetupStep.SETTLEMENT:
                return "Placez une colonie sur un sommet en surbrillance."
            return "Placez une route attenante à votre colonie."
        if can_roll(state):
            return "Lancez les dés."
        return _INSTRUCTIONS.get(self.mode, "")

    def get_ui_state(self) -> UIState:
        """Construit l'état d'interface courant."""

        state = self.state
        highlight_vertices, highlight_edges, highlight_tiles = self.compute_highlights()
        acting = self.can_act()
        robber_pending = self.is_human_turn() and must_move_robber(state)

        buttons = {
            "roll_dice": ButtonState("Lancer les dés", self.can_roll()),
            "move_robber": ButtonState("Déplacer le voleur", robber_pending),
            "select_build_road": ButtonState("Route (B+L)", acting),
            "select_build_settlement": ButtonState("Colonie (B+L+W+G)", acting),
            "select_build_city": ButtonState("Ville (2G+3O)", acting),
            "bank_trade": ButtonState("Échange 4:1", acting),
            "cancel": ButtonState("Annuler", self.mode in BUILD_MODES),
            "end_turn": ButtonState("Fin du tour", self.can_end()),
        }

        panels = tuple(
            PlayerPanel(
                player_id=player.player_id,
                name=player.name,
                color=player.color,
                is_bot=player.is_bot,
                is_current_player=player.player_id == state.current_player_id,
                resources=dict(player.resources),
                victory_points=player.victory_points,
                hand_size=player.hand_size(),
            )
            for player in state.players
        )

        in_play = state.phase == Phase.PLAY
        return UIState(
            mode=self.mode,
            phase=state.phase,
            title=self._title(),
            instructions=self._instructions(),
            highlight_vertices=highlight_vertices,
            highlight_edges=highlight_edges,
            highlight_tiles=highlight_tiles,
            last_roll=state.last_roll,
            can_roll=self.can_roll(),
            can_act=acting,
            can_end=self.can_end(),
            buttons=buttons,
            player_panels=panels,
            bank=dict(state.bank),
            target_vp=state.target_vp,
            legal_settlement_count=len(self._legal_settlement_vertices()) if in_play else 0,
            legal_road_count=len(self._legal_road_edges()) if in_play else 0,
            winner_id=state.winner_id,
            log=tuple(state.log),
        )


__all__ = ["MODES", "ButtonState", "PlayerPanel", "UIState", "CatanLiteApp"]
