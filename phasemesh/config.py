# phasemesh/config.py
import os

# --- Configurações de Ambiente e Identificação ---

# Nome desta instância nos logs. Em Kubernetes pode vir do POD_NAME injetado pelo StatefulSet.
INSTANCE_NAME = os.getenv("MESH_INSTANCE", os.getenv("POD_NAME", "mesh-local"))

# Nível mínimo de log do handler de console.
LOG_LEVEL = os.getenv("MESH_LOG_LEVEL", "INFO").upper()

# --- Configurações do Padrão ---

# Semente do padrão determinístico (por convenção, um dígito de 1 a 9).
try:
    SEED = int(os.getenv("MESH_SEED", "7"))
except ValueError:
    SEED = 7  # Fallback para valores inválidos no ambiente

# Número de passos entre cada reinício do padrão para a semente.
try:
    RESET_INTERVAL = int(os.getenv("MESH_RESET_INTERVAL", "100"))
except ValueError:
    RESET_INTERVAL = 100

# Capacidade máxima do cache de cada gerador. Vazio = sem limite.
try:
    CACHE_CAPACITY = int(os.getenv("MESH_CACHE_CAPACITY", "")) or None
except ValueError:
    CACHE_CAPACITY = None

# --- Configurações da Malha ---

# IDs dos nós criados na malha de demonstração (ex: "node-0,node-1,node-2").
NODE_IDS = [
    node_id.strip()
    for node_id in os.getenv("MESH_NODES", "node-0,node-1,node-2").split(",")
    if node_id.strip()
]

# --- Configurações de Rede ---

# Porta da API HTTP de inspeção
try:
    PORT = int(os.getenv("MESH_PORT", "8080"))
except ValueError:
    PORT = 8080
