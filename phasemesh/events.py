# phasemesh/events.py
import threading
from typing import Any, Callable, Dict, List


class Subscription:
    """Handle devolvido por EventEmitter.on(); permite cancelar a inscrição."""

    def __init__(self, emitter: "EventEmitter", event: str, callback: Callable[..., Any]):
        self.event = event
        self.callback = callback
        self._emitter = emitter
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self._emitter._remove(self)
            self.active = False


class EventEmitter:
    """
    Publicação/assinatura síncrona.

    Os callbacks de cada evento são chamados na ordem de registro, na pilha de
    quem chamou emit(). Valores de retorno são ignorados e exceções propagam.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Subscription]] = {}
        self._lock = threading.Lock()

    def on(self, event: str, callback: Callable[..., Any]) -> Subscription:
        subscription = Subscription(self, event, callback)
        with self._lock:
            self._handlers.setdefault(event, []).append(subscription)
        return subscription

    def emit(self, event: str, *args: Any) -> None:
        # Cópia local: callbacks podem se inscrever/cancelar durante a emissão
        with self._lock:
            handlers = list(self._handlers.get(event, ()))
        for subscription in handlers:
            subscription.callback(*args)

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._handlers.get(event, ()))

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            handlers = self._handlers.get(subscription.event, [])
            if subscription in handlers:
                handlers.remove(subscription)
