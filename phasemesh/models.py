# phasemesh/models.py
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PatternConfig(BaseModel):
    """
    Parâmetros do padrão determinístico compartilhado.
    """
    seed: int = Field(ge=0, le=9)
    reset_interval: int = Field(gt=0)


class NodeConfig(PatternConfig):
    """Configuração de um nó: identificador único na rede + parâmetros do padrão."""
    node_id: str = Field(min_length=1)


class Message(BaseModel):
    """
    Mensagem trocada entre nós, com o valor de verificação calculado pelo remetente.
    Imutável depois de criada.
    """
    model_config = ConfigDict(frozen=True)

    sender_id: str
    global_step: int = Field(ge=0)
    verification_value: int = Field(ge=0, le=9)
    payload: Any = None


class PatternMismatch(BaseModel):
    """Registro de uma mensagem cujo valor de verificação não bate com o esperado."""
    model_config = ConfigDict(frozen=True)

    type: Literal["pattern-mismatch"] = "pattern-mismatch"
    message: Message
    expected: int
    received: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ObserverStatistics(BaseModel):
    total_observed: int
    valid_messages: int
    anomalies: int
    success_rate: float
