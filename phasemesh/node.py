# phasemesh/node.py
import threading
from typing import Any, Callable, Optional

from phasemesh.events import EventEmitter, Subscription
from phasemesh.logger import logger
from phasemesh.models import Message, NodeConfig, PatternMismatch
from phasemesh.pattern import PatternGenerator


class Node:
    """
    Nó da malha. Mantém um passo global monotônico e um gerador de padrão próprio.

    O passo só avança por broadcast local (+1) ou por sincronização com um passo
    maior declarado por um par. Nunca retrocede.
    """

    def __init__(self, config: NodeConfig, cache_capacity: Optional[int] = None):
        self.node_id = config.node_id
        self._pattern = PatternGenerator(config.seed, config.reset_interval, cache_capacity)
        self._events = EventEmitter()
        self._global_step = 0
        # Protege as escritas no passo global; nunca é mantido durante emissões
        self._step_lock = threading.Lock()
        # Reentrante: listeners de broadcast podem emitir de novo pelo mesmo nó
        self._broadcast_lock = threading.RLock()
        self._log = logger.bind(node=self.node_id)

    @property
    def global_step(self) -> int:
        return self._global_step

    @property
    def pattern(self) -> PatternGenerator:
        return self._pattern

    # --- Operações ---

    def broadcast(self, payload: Any = None) -> Message:
        """Emite uma mensagem no passo atual e avança o passo em exatamente 1."""
        # Serializa broadcasts do mesmo nó. Os pares só tomam _step_lock (via sync),
        # nunca _broadcast_lock, então não há espera circular entre nós.
        with self._broadcast_lock:
            step = self._global_step
            message = Message(
                sender_id=self.node_id,
                global_step=step,
                verification_value=self._pattern.compute_value(step),
                payload=payload,
            )
            self._log.debug(f"Broadcast no passo {step} (valor de verificação: {message.verification_value})")

            self._events.emit("broadcast", message)
            with self._step_lock:
                self._global_step += 1
        return message

    def receive(self, message: Message) -> bool:
        """Valida a mensagem recebida. Retorna True se foi aceita."""
        expected = self._pattern.compute_value(message.global_step)

        if expected != message.verification_value:
            mismatch = PatternMismatch(
                message=message,
                expected=expected,
                received=message.verification_value,
            )
            self._log.warning(
                f"Padrão divergente de {message.sender_id} no passo {message.global_step}: "
                f"esperado {expected}, recebido {message.verification_value}. Mensagem descartada."
            )
            self._events.emit("error", mismatch)
            return False

        self.sync(message.global_step)
        self._events.emit("message", message)
        return True

    def sync(self, target_step: int) -> None:
        """Avança o passo global até target_step, se for maior. Nunca retrocede."""
        with self._step_lock:
            if target_step <= self._global_step:
                return
            old_step = self._global_step
            self._global_step = target_step
        self._log.debug(f"Sincronizado: {old_step} -> {target_step}")
        self._events.emit("sync", target_step)

    # --- Registro de callbacks ---

    def on_broadcast(self, callback: Callable[[Message], Any]) -> Subscription:
        return self._events.on("broadcast", callback)

    def on_message(self, callback: Callable[[Message], Any]) -> Subscription:
        return self._events.on("message", callback)

    def on_error(self, callback: Callable[[PatternMismatch], Any]) -> Subscription:
        return self._events.on("error", callback)

    def on_sync(self, callback: Callable[[int], Any]) -> Subscription:
        return self._events.on("sync", callback)

    def __repr__(self) -> str:
        return f"Node(node_id={self.node_id!r}, global_step={self._global_step})"
