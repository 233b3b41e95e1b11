# phasemesh/observer.py
import threading
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from phasemesh.errors import ConfigurationError
from phasemesh.events import EventEmitter, Subscription
from phasemesh.logger import logger
from phasemesh.models import Message, ObserverStatistics, PatternConfig, PatternMismatch
from phasemesh.pattern import PatternGenerator


class Observer:
    """
    Observador independente: refaz a validação de mensagens vindas de qualquer
    origem e acumula estatísticas de anomalias. Não altera nem rejeita mensagens.
    """

    def __init__(self, config: Union[PatternConfig, Mapping[str, Any]], cache_capacity: Optional[int] = None):
        if not isinstance(config, PatternConfig):
            try:
                config = PatternConfig.model_validate(config)
            except ValidationError as e:
                raise ConfigurationError(f"Configuração do observador inválida: {e}") from e

        self._pattern = PatternGenerator(config.seed, config.reset_interval, cache_capacity)
        self._events = EventEmitter()
        self._valid_messages: List[Message] = []
        self._anomalies: List[PatternMismatch] = []
        self._history_lock = threading.Lock()

    def observe(self, message: Message) -> bool:
        """Valida a mensagem contra o padrão. Retorna True se estiver correta."""
        expected = self._pattern.compute_value(message.global_step)

        if expected != message.verification_value:
            anomaly = PatternMismatch(
                message=message,
                expected=expected,
                received=message.verification_value,
            )
            with self._history_lock:
                self._anomalies.append(anomaly)
            logger.warning(
                f"Anomalia: {message.sender_id} no passo {message.global_step} "
                f"(esperado {expected}, recebido {message.verification_value})."
            )
            self._events.emit("anomaly", anomaly)
            return False

        with self._history_lock:
            self._valid_messages.append(message)
        self._events.emit("valid-message", message)
        return True

    @property
    def pattern(self) -> PatternGenerator:
        return self._pattern

    def get_statistics(self) -> ObserverStatistics:
        with self._history_lock:
            valid_messages = len(self._valid_messages)
            anomalies = len(self._anomalies)

        total_observed = valid_messages + anomalies
        # Sem mensagens observadas não há falhas: taxa de sucesso de 100%
        success_rate = (valid_messages / total_observed) * 100 if total_observed > 0 else 100.0

        return ObserverStatistics(
            total_observed=total_observed,
            valid_messages=valid_messages,
            anomalies=anomalies,
            success_rate=success_rate,
        )

    def clear_history(self) -> None:
        """Esvazia os registros. O cache do gerador é mantido."""
        with self._history_lock:
            self._valid_messages.clear()
            self._anomalies.clear()
        logger.info("Histórico do observador limpo.")

    @property
    def valid_messages(self) -> Tuple[Message, ...]:
        with self._history_lock:
            return tuple(self._valid_messages)

    @property
    def anomalies(self) -> Tuple[PatternMismatch, ...]:
        with self._history_lock:
            return tuple(self._anomalies)

    def on_valid_message(self, callback: Callable[[Message], Any]) -> Subscription:
        return self._events.on("valid-message", callback)

    def on_anomaly(self, callback: Callable[[PatternMismatch], Any]) -> Subscription:
        return self._events.on("anomaly", callback)
