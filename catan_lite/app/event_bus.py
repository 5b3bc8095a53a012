"""Bus d'évènements de partie (démarrage, action appliquée, fin de partie)."""

from __future__ import annotations

from typing import Callable, List, Union

from catan_lite.app.events import ActionAppliedEvent, GameEndedEvent, GameStartedEvent

GameEvent = Union[GameStartedEvent, ActionAppliedEvent, GameEndedEvent]
Subscriber = Callable[[GameEvent], None]


class EventBus:
    """Diffuse les évènements de `GameService` à la GUI et à la simulation.

    Diffusion synchrone, dans l'ordre d'enregistrement. Une exception levée
    par un abonné interrompt la diffusion et remonte à l'appelant.
    """

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Enregistre un abonné et retourne une fonction de désabonnement (idempotente)."""

        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: GameEvent) -> None:
        # Copie: un abonné peut se désinscrire pendant la diffusion
        for callback in list(self._subscribers):
            callback(event)

    @property
    def has_subscribers(self) -> bool:
        return bool(self._subscribers)


__all__ = ["EventBus", "GameEvent", "Subscriber"]
