# phasemesh/logger.py
import sys
from loguru import logger

from phasemesh.config import INSTANCE_NAME, LOG_LEVEL

# Remove o handler padrão para garantir que apenas nossa configuração seja usada
logger.remove()

# Formato simplificado: hora, nível, nó de origem e mensagem.
log_format = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[node]: <12}</cyan> | "
    "<level>{message}</level>"
)

logger.add(
    sys.stderr,
    format=log_format,
    level=LOG_LEVEL,
    colorize=True
)

# Registros sem nó associado (rede, observador, API) saem com o nome da instância.
# Cada nó usa logger.bind(node=...) para sobrescrever.
logger.configure(extra={"node": INSTANCE_NAME})

__all__ = ["logger"]
