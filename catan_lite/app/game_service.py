"""Service d'orchestration d'une partie Catan-Lite (humains et bots)."""

from __future__ import annotations

import logging
import random
from typing import List

from catan_lite.app.config import GameConfig
from catan_lite.app.event_bus import EventBus
from catan_lite.app.events import ActionAppliedEvent, GameEndedEvent, GameStartedEvent
from catan_lite.bots.policies import AgentPolicy, HeuristicPolicy
from catan_lite.engine.actions import Action, EndTurn, RollDice
from catan_lite.engine.state import GameState, Phase
from catan_lite.engine.turns import apply_action, can_act, can_roll, legal_actions

logger = logging.getLogger(__name__)


class GameService:
    """Wrappe `GameState` et publie les évènements nécessaires à la GUI/sim."""

    def __init__(
        self,
        *,
        event_bus: EventBus | None = None,
        policy: AgentPolicy | None = None,
    ) -> None:
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._policy = policy or HeuristicPolicy()
        self._state: GameState | None = None
        self._config: GameConfig | None = None
        self._end_published = False

    @property
    def event_bus(self) -> EventBus:
        """Retourne le bus d'évènements utilisé par le service."""

        return self._event_bus

    @property
    def config(self) -> GameConfig | None:
        return self._config

    @property
    def state(self) -> GameState:
        """État courant de la partie (erreur si aucune partie lancée)."""

        if self._state is None:
            raise RuntimeError("Aucune partie initialisée. Utiliser start_new_game().")
        return self._state

    @property
    def has_game(self) -> bool:
        return self._state is not None

    def start_new_game(
        self,
        config: GameConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> GameState:
        """Initialise une nouvelle partie (remplace la précédente) et publie l'évènement."""

        config = (config or GameConfig()).normalized()
        state = GameState.new_game(
            total_players=config.total_players,
            human_players=config.human_players,
            target_vp=config.target_vp,
            seed=config.seed,
            rng=rng,
        )
        self._state = state
        self._config = config
        self._end_published = False
        logger.info(
            "Nouvelle partie: %d joueurs, %d humain(s), objectif %d PV",
            config.total_players,
            config.human_players,
            config.target_vp,
        )
        self._event_bus.publish(GameStartedEvent(state=state))
        return state

    def legal_actions(self) -> List[Action]:
        """Retourne les actions légales pour l'état courant."""

        return legal_actions(self.state)

    @property
    def current_is_bot(self) -> bool:
        state = self.state
        return not state.is_game_over and state.current_player.is_bot

    def dispatch(self, action: Action) -> bool:
        """Applique une action pour le joueur actif, puis notifie les observateurs.

        Returns:
            False si l'action est refusée (état inchangé, aucun évènement)
        """

        state = self.state
        player_id = state.current_player_id
        if not apply_action(state, action):
            return False
        self._publish_applied(action, player_id)
        return True

    def step_bot(self) -> bool:
        """Fait jouer le bot actif: un placement de setup ou un tour complet.

        Returns:
            True si le bot a agi
        """

        state = self.state
        if not self.current_is_bot:
            return False
        player_id = state.current_player_id

        if state.phase == Phase.SETUP:
            action = self._policy.take_setup_action(state)
            if action is None:
                return False
            self._publish_applied(action, player_id)
            return True

        if can_roll(state):
            self.dispatch(RollDice())
        for action in self._policy.take_turn(state):
            self._publish_applied(action, player_id)
        if can_act(state):
            self.dispatch(EndTurn())
        return True

    def run_bots(self, max_steps: int | None = None) -> int:
        """Enchaîne les coups des bots jusqu'au prochain humain (ou la fin).

        Returns:
            Nombre de pas de bot exécutés
        """

        steps = 0
        while self.current_is_bot:
            if max_steps is not None and steps >= max_steps:
                break
            if not self.step_bot():
                break
            steps += 1
        return steps

    def _publish_applied(self, action: Action, player_id: int) -> None:
        state = self.state
        self._event_bus.publish(ActionAppliedEvent(action=action, player_id=player_id, state=state))
        if state.is_game_over and not self._end_published:
            self._end_published = True
            winner_kind = None
            if state.winner_id is not None:
                winner_kind = state.players[state.winner_id].kind
            self._event_bus.publish(
                GameEndedEvent(state=state, winner_id=state.winner_id, winner_kind=winner_kind)
            )


__all__ = ["GameService"]
