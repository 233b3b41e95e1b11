# phasemesh/network.py
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from phasemesh.errors import ConfigurationError
from phasemesh.events import Subscription
from phasemesh.logger import logger
from phasemesh.models import Message, NodeConfig
from phasemesh.node import Node


class Network:
    """
    Registro de nós em processo. Repassa cada broadcast a todos os outros nós,
    de forma síncrona e na ordem de registro.
    """

    def __init__(self, cache_capacity: Optional[int] = None):
        self._nodes: Dict[str, Node] = {}
        self._subscriptions: Dict[str, Subscription] = {}
        self._cache_capacity = cache_capacity
        # Mutex para serializar o acesso ao registro (criação, remoção e roteamento)
        self._registry_lock = threading.RLock()

    def create_node(self, config: Union[NodeConfig, Mapping[str, Any]]) -> Node:
        """Valida a configuração, cria o nó e o registra na rede."""
        if not isinstance(config, NodeConfig):
            try:
                config = NodeConfig.model_validate(config)
            except ValidationError as e:
                raise ConfigurationError(f"Configuração de nó inválida: {e}") from e

        with self._registry_lock:
            if config.node_id in self._nodes:
                raise ConfigurationError(f"Já existe um nó registrado com o ID '{config.node_id}'.")

            node = Node(config, cache_capacity=self._cache_capacity)
            self._subscriptions[node.node_id] = node.on_broadcast(self._route)
            self._nodes[node.node_id] = node

        logger.info(
            f"Nó '{node.node_id}' registrado (seed={config.seed}, reset_interval={config.reset_interval}). "
            f"Total de nós: {len(self)}"
        )
        return node

    def _route(self, message: Message) -> None:
        """Entrega a mensagem a todos os nós, exceto o remetente."""
        # Copia os destinatários sob o lock e entrega fora dele
        with self._registry_lock:
            recipients = [node for node_id, node in self._nodes.items() if node_id != message.sender_id]

        logger.debug(f"Roteando mensagem de {message.sender_id} (passo {message.global_step}) para {len(recipients)} nós.")
        for node in recipients:
            try:
                node.receive(message)
            except Exception:
                logger.exception(f"Falha ao entregar mensagem de {message.sender_id} para {node.node_id}.")

    def get_node(self, node_id: str) -> Optional[Node]:
        with self._registry_lock:
            return self._nodes.get(node_id)

    def remove_node(self, node_id: str) -> None:
        """Remove o nó do registro. Os pares não são notificados."""
        with self._registry_lock:
            node = self._nodes.pop(node_id, None)
            subscription = self._subscriptions.pop(node_id, None)

        if node is None:
            logger.warning(f"Remoção ignorada: nó '{node_id}' não está registrado.")
            return
        if subscription is not None:
            subscription.cancel()
        logger.info(f"Nó '{node_id}' removido. Total de nós: {len(self)}")

    @property
    def node_ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._nodes)

    def nodes(self) -> List[Node]:
        with self._registry_lock:
            return list(self._nodes.values())

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        with self._registry_lock:
            return node_id in self._nodes
