# phasemesh/monitor.py
import threading
import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel

from phasemesh.errors import TimerNotStartedError


class TimerMetrics(BaseModel):
    """Resumo das medições de um cronômetro, em milissegundos."""
    count: int
    avg: float
    min: float
    max: float
    total: float


class PerformanceMonitor:
    """Cronômetros nomeados para medir chamadas fora do caminho crítico."""

    def __init__(self):
        self._metrics: Dict[str, List[float]] = {}
        self._timers: Dict[str, float] = {}
        self._lock = threading.Lock()

    def start_timer(self, name: str) -> None:
        with self._lock:
            self._timers[name] = time.perf_counter()

    def end_timer(self, name: str) -> float:
        """Encerra o cronômetro e retorna a duração em milissegundos."""
        end = time.perf_counter()
        with self._lock:
            start = self._timers.pop(name, None)
            if start is None:
                raise TimerNotStartedError(f"O cronômetro '{name}' não foi iniciado.")
            duration = (end - start) * 1000
            self._metrics.setdefault(name, []).append(duration)
        return duration

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        # Início em variável local: medições simultâneas com o mesmo nome não colidem
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = (time.perf_counter() - start) * 1000
            with self._lock:
                self._metrics.setdefault(name, []).append(duration)

    def get_metrics(self, name: str) -> Optional[TimerMetrics]:
        with self._lock:
            values = list(self._metrics.get(name, ()))
        if not values:
            return None

        total = sum(values)
        return TimerMetrics(
            count=len(values),
            avg=total / len(values),
            min=min(values),
            max=max(values),
            total=total,
        )

    def get_all_metrics(self) -> Dict[str, TimerMetrics]:
        with self._lock:
            names = list(self._metrics)
        return {name: self.get_metrics(name) for name in names}

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._timers.clear()
