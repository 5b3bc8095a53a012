#!/usr/bin/env python3
"""Lance la GUI Catan-Lite (pygame).

Boucle d'évènements minimale au-dessus de `catan_lite.gui.app.CatanLiteApp`:
les clics plateau/boutons et le clavier déclenchent les actions, les bots
jouent automatiquement un pas toutes les BOT_DELAY_MS millisecondes.

Raccourcis clavier principaux:
- ESPACE : lancer les dés
- R      : sélectionner la construction de route
- S      : sélectionner la construction de colonie
- C      : sélectionner la construction de ville
- G / H  : changer la ressource donnée / reçue pour l'échange 4:1
- T      : échanger 4:1 avec la banque
- E      : terminer le tour
- N      : nouvelle partie
- RETOUR : annuler le mode de construction
- ESC    : annuler le mode en cours ou quitter si aucun
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, Tuple

import pygame

from catan_lite.app.config import GameConfig
from catan_lite.engine.constants import RESOURCE_TYPES
from catan_lite.gui.app import BUILD_MODES, CatanLiteApp
from catan_lite.gui.renderer import SCREEN_HEIGHT, SCREEN_WIDTH, BoardRenderer, make_geometry
from catan_lite.gui.sfx import SoundEffects

BOT_DELAY_MS = 400

KEY_BINDINGS: Tuple[Tuple[str, int, str], ...] = (
    ("SPACE", pygame.K_SPACE, "roll_dice"),
    ("E", pygame.K_e, "end_turn"),
    ("R", pygame.K_r, "select_build_road"),
    ("S", pygame.K_s, "select_build_settlement"),
    ("C", pygame.K_c, "select_build_city"),
    ("BACKSPACE", pygame.K_BACKSPACE, "cancel"),
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Catan-Lite: partie contre des bots")
    parser.add_argument("--players", type=int, default=3, help="Nombre total de joueurs (2 à 4)")
    parser.add_argument("--humans", type=int, default=1, help="Nombre de joueurs humains")
    parser.add_argument("--target-vp", type=int, default=10, help="Points de victoire visés (3 à 16)")
    parser.add_argument("--seed", type=int, default=None, help="Graine des dés et du voleur")
    parser.add_argument("--mute", action="store_true", help="Désactive les effets sonores")
    parser.add_argument("-v", "--verbose", action="store_true", help="Journalisation détaillée")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = GameConfig(
        total_players=args.players,
        human_players=args.humans,
        target_vp=args.target_vp,
        seed=args.seed,
    )

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    pygame.display.set_caption("Catan-Lite")

    app = CatanLiteApp(sfx=SoundEffects(enabled=not args.mute))
    state = app.start_new_game(config)
    renderer = BoardRenderer(screen, make_geometry(state))

    give_index, get_index = 0, 3
    clock = pygame.time.Clock()
    last_bot_tick = 0
    running = True

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    if app.mode in BUILD_MODES:
                        app.trigger_action("cancel")
                    else:
                        running = False
                    continue
                if event.key == pygame.K_n:
                    state = app.start_new_game(config)
                    renderer = BoardRenderer(screen, make_geometry(state))
                    continue
                if event.key == pygame.K_g:
                    give_index = (give_index + 1) % len(RESOURCE_TYPES)
                    continue
                if event.key == pygame.K_h:
                    get_index = (get_index + 1) % len(RESOURCE_TYPES)
                    continue
                if event.key == pygame.K_t:
                    app.trigger_action(
                        "bank_trade",
                        give=RESOURCE_TYPES[give_index],
                        get=RESOURCE_TYPES[get_index],
                    )
                    continue
                for _, key, action in KEY_BINDINGS:
                    if event.key == key:
                        app.trigger_action(action)
                        break

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                pos = event.pos
                button = renderer.button_at(pos)
                if button == "bank_trade":
                    app.trigger_action(
                        "bank_trade",
                        give=RESOURCE_TYPES[give_index],
                        get=RESOURCE_TYPES[get_index],
                    )
                    continue
                if button is not None:
                    app.trigger_action(button)
                    continue

                ui_state = app.get_ui_state()
                geometry = renderer.geometry
                if ui_state.highlight_tiles:
                    tile_id = geometry.tile_at(pos)
                    if tile_id is not None and app.handle_board_tile_click(tile_id):
                        continue
                if ui_state.highlight_vertices:
                    vertex_id = geometry.vertex_at(pos)
                    if vertex_id is not None and app.handle_board_vertex_click(vertex_id):
                        continue
                if ui_state.highlight_edges:
                    edge_id = geometry.edge_at(pos)
                    if edge_id is not None:
                        app.handle_board_edge_click(edge_id)

        now = pygame.time.get_ticks()
        if now - last_bot_tick >= BOT_DELAY_MS:
            last_bot_tick = now
            app.tick_bots(max_steps=1)

        ui_state = app.get_ui_state()
        renderer.render(app.state, ui_state)

        trade_hint = f"Échange : 4 {RESOURCE_TYPES[give_index]} -> 1 {RESOURCE_TYPES[get_index]}  (G/H/T)"
        renderer.render_hint(trade_hint)

        pygame.display.flip()
        clock.tick(30)

    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
