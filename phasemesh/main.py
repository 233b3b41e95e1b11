# phasemesh/main.py
from typing import Any, Optional

import uvicorn
from fastapi import Body, FastAPI, HTTPException, Response

from phasemesh.config import CACHE_CAPACITY, INSTANCE_NAME, NODE_IDS, PORT, RESET_INTERVAL, SEED
from phasemesh.errors import ConfigurationError
from phasemesh.logger import logger
from phasemesh.models import Message, NodeConfig
from phasemesh.monitor import PerformanceMonitor
from phasemesh.network import Network
from phasemesh.node import Node
from phasemesh.observer import Observer


def _node_status(node: Node) -> dict:
    return {"node_id": node.node_id, "global_step": node.global_step}


def build_default_mesh(network: Network, observer: Observer) -> None:
    """Cria os nós definidos em MESH_NODES e liga o observador aos broadcasts."""
    for node_id in NODE_IDS:
        node = network.create_node(NodeConfig(node_id=node_id, seed=SEED, reset_interval=RESET_INTERVAL))
        node.on_broadcast(observer.observe)


def create_app(
    network: Optional[Network] = None,
    observer: Optional[Observer] = None,
    monitor: Optional[PerformanceMonitor] = None,
) -> FastAPI:
    """Monta a API de inspeção sobre uma malha em processo."""
    if observer is None:
        observer = Observer({"seed": SEED, "reset_interval": RESET_INTERVAL}, CACHE_CAPACITY)
    if network is None:
        network = Network(cache_capacity=CACHE_CAPACITY)
        build_default_mesh(network, observer)
    if monitor is None:
        monitor = PerformanceMonitor()

    app = FastAPI(title=f"{INSTANCE_NAME} - Malha de Sincronização por Padrão")

    def get_node_or_404(node_id: str) -> Node:
        node = network.get_node(node_id)
        if node is None:
            raise HTTPException(status_code=404, detail=f"Nó '{node_id}' não encontrado.")
        return node

    # --- Status ---

    @app.get("/")
    def read_root():
        """Endpoint de status: nós registrados, passos atuais e estatísticas do observador."""
        return {
            "instance": INSTANCE_NAME,
            "nodes": [_node_status(node) for node in network.nodes()],
            "observer": observer.get_statistics(),
            "status": "Running",
        }

    # --- Nós ---

    @app.post("/nodes", status_code=201)
    def create_node_endpoint(config: NodeConfig):
        """Registra um novo nó na malha. O observador passa a ver seus broadcasts."""
        try:
            node = network.create_node(config)
        except ConfigurationError as e:
            raise HTTPException(status_code=409, detail=str(e))
        node.on_broadcast(observer.observe)
        return _node_status(node)

    @app.get("/nodes/{node_id}")
    def read_node(node_id: str):
        return _node_status(get_node_or_404(node_id))

    @app.delete("/nodes/{node_id}", status_code=204)
    def delete_node(node_id: str):
        get_node_or_404(node_id)
        network.remove_node(node_id)
        return Response(status_code=204)

    @app.post("/nodes/{node_id}/broadcast")
    def broadcast_endpoint(node_id: str, payload: Any = Body(default=None)):
        """Faz o nó emitir uma mensagem para todos os pares."""
        node = get_node_or_404(node_id)
        logger.info(f"Endpoint /nodes/{node_id}/broadcast chamado.")
        with monitor.measure("broadcast"):
            message = node.broadcast(payload)
        return message

    @app.post("/nodes/{node_id}/receive")
    def receive_endpoint(node_id: str, message: Message):
        """Entrega uma mensagem diretamente ao nó (útil para injetar mensagens adulteradas)."""
        node = get_node_or_404(node_id)
        with monitor.measure("receive"):
            accepted = node.receive(message)
        return {"accepted": accepted, "global_step": node.global_step}

    # --- Observador ---

    @app.post("/observer/observe")
    def observe_endpoint(message: Message):
        with monitor.measure("observe"):
            valid = observer.observe(message)
        return {"valid": valid}

    @app.get("/observer/statistics")
    def read_statistics():
        return observer.get_statistics()

    @app.get("/observer/anomalies")
    def read_anomalies():
        return list(observer.anomalies)

    @app.delete("/observer/history", status_code=204)
    def clear_history():
        observer.clear_history()
        return Response(status_code=204)

    # --- Métricas ---

    @app.get("/metrics")
    def read_metrics():
        """Durações (ms) medidas pelo monitor de desempenho."""
        return monitor.get_all_metrics()

    return app


app = create_app()


def start():
    """Inicia o servidor uvicorn."""
    logger.success(f"Iniciando {INSTANCE_NAME} na porta {PORT} com nós {NODE_IDS}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    start()
