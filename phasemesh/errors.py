# phasemesh/errors.py


class MeshError(Exception):
    """Erro base da malha."""


class ConfigurationError(MeshError, ValueError):
    """Configuração inválida de gerador, nó ou rede. Sempre fatal na construção."""


class InvalidStepError(MeshError, ValueError):
    """Passo negativo ou não inteiro passado ao gerador de padrão."""


class TimerNotStartedError(MeshError, KeyError):
    """Tentativa de encerrar um cronômetro que não foi iniciado."""
