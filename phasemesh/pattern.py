# phasemesh/pattern.py
from typing import Dict, Optional

from phasemesh.errors import ConfigurationError, InvalidStepError


def collapse_digits(number: int) -> int:
    """Soma os dígitos em base 10 repetidamente até restar um único dígito."""
    if number < 0:
        raise ValueError(f"Colapso de dígitos requer inteiro >= 0, recebido: {number!r}")
    while number > 9:
        total = 0
        while number:
            number, digit = divmod(number, 10)
            total += digit
        number = total
    return number


class PatternGenerator:
    """
    Gerador do padrão determinístico usado como valor de verificação.

    O valor no passo ``step`` é a semente sempre que ``step`` é múltiplo de
    ``reset_interval``; nos demais passos é o colapso de dígitos do valor
    anterior multiplicado pela semente. Todo valor calculado fica em cache.

    Com ``cache_capacity`` definido, o cache descarta as entradas mais antigas
    ao exceder a capacidade. Passos descartados são recalculados sob demanda.
    """

    def __init__(self, seed: int, reset_interval: int, cache_capacity: Optional[int] = None):
        if not isinstance(reset_interval, int) or isinstance(reset_interval, bool) or reset_interval <= 0:
            raise ConfigurationError(f"reset_interval deve ser um inteiro positivo, recebido: {reset_interval!r}")
        if not isinstance(seed, int) or isinstance(seed, bool) or not 0 <= seed <= 9:
            raise ConfigurationError(f"seed deve ser um dígito de 0 a 9, recebido: {seed!r}")
        if cache_capacity is not None and cache_capacity <= 0:
            raise ConfigurationError(f"cache_capacity deve ser positivo, recebido: {cache_capacity!r}")

        self._seed = seed
        self._reset_interval = reset_interval
        self._cache_capacity = cache_capacity
        # dict preserva a ordem de inserção: a primeira chave é a entrada mais antiga
        self._cache: Dict[int, int] = {}

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def reset_interval(self) -> int:
        return self._reset_interval

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def compute_value(self, step: int) -> int:
        """Retorna o valor de verificação do passo ``step`` (>= 0)."""
        if not isinstance(step, int) or isinstance(step, bool) or step < 0:
            raise InvalidStepError(f"Passo inválido: {step!r}. Esperado inteiro >= 0.")

        cached = self._cache.get(step)
        if cached is not None:
            return cached

        # Volta até o passo em cache mais próximo ou até o último reinício de fase
        phase_start = step - step % self._reset_interval
        current = step
        value = None
        while current > phase_start:
            current -= 1
            value = self._cache.get(current)
            if value is not None:
                break

        if value is None:
            current = phase_start
            value = self._seed
            self._store(current, value)

        # Avança calculando e guardando cada passo intermediário
        while current < step:
            current += 1
            value = collapse_digits(value * self._seed)
            self._store(current, value)

        return value

    def _store(self, step: int, value: int) -> None:
        self._cache[step] = value
        if self._cache_capacity is not None:
            while len(self._cache) > self._cache_capacity:
                del self._cache[next(iter(self._cache))]

    def clear_cache(self) -> None:
        self._cache.clear()
