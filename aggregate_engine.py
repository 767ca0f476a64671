"""Sumas, productos e integrales numéricas sobre una variable ligada.

Las integrales se aproximan con sumas de Riemann por la izquierda. Cada
serie guarda una :class:`IntegralCache`; al animar los límites, una
integral nueva se obtiene de la guardada más cercana sumando solo los
tramos que cambiaron.
"""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass

from errors import DomainError
from series_config import DEFAULT_INTEGRAL_STEPS
from series_logging import get_logger

logger = get_logger(__name__)


# ── Sumas y productos ────────────────────────────────────────────

def _integer_bounds(lower: complex, upper: complex) -> tuple[int, int]:
    if lower.imag != 0 or upper.imag != 0:
        raise DomainError("Los límites de sum/prod deben ser reales")
    if not (lower.real.is_integer() and upper.real.is_integer()):
        raise DomainError("Los límites de sum/prod deben ser enteros")
    return int(lower.real), int(upper.real)


def discrete_sum(lower: complex, upper: complex, term) -> complex:
    """Σ term(k) para k entero en [lower, upper]; rango vacío → 0."""
    start, stop = _integer_bounds(lower, upper)
    total = 0j
    for k in range(start, stop + 1):
        total += term(complex(k, 0))
    return total


def discrete_product(lower: complex, upper: complex, term) -> complex:
    """Π term(k) para k entero en [lower, upper]; rango vacío → 1."""
    start, stop = _integer_bounds(lower, upper)
    total = 1 + 0j
    for k in range(start, stop + 1):
        total *= term(complex(k, 0))
    return total


# ── Integrales ───────────────────────────────────────────────────

def _sample(integrand, t: float) -> complex:
    try:
        value = integrand(t)
    except (ArithmeticError, ValueError):
        return 0j
    if cmath.isnan(value):
        return 0j
    return value


def riemann_integral(integrand, lower: float, upper: float, steps: float = DEFAULT_INTEGRAL_STEPS) -> complex:
    """Suma de Riemann por la izquierda con ``round(steps)`` muestras.

    Las muestras que fallan o dan NaN cuentan como cero. Con los límites
    invertidos se integra el intervalo al derecho y se cambia el signo.
    """
    if lower == upper:
        return 0j
    if lower > upper:
        return -riemann_integral(integrand, upper, lower, steps)

    count = max(1, round(steps))
    step_size = (upper - lower) / count
    total = 0j
    for k in range(count):
        total += _sample(integrand, lower + k * step_size) * step_size
    return total


@dataclass(frozen=True)
class IntegralCacheEntry:
    lower: float
    upper: float
    body: tuple
    variable: str
    value: complex

    @property
    def width(self) -> float:
        return self.upper - self.lower


class IntegralCache:
    """Almacén de integrales ya calculadas para una sola serie.

    Las entradas nunca se modifican; solo se añaden otras nuevas. Además de
    la lista en orden de llegada se guarda un índice por (integrando,
    variable), de modo que buscar candidatos no recorre toda la caché.
    """

    def __init__(self, entries=()):
        self._entries = []
        self._index: dict[tuple, list[IntegralCacheEntry]] = {}
        for entry in entries:
            self.append(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"IntegralCache({len(self._entries)} entradas)"

    def matching(self, body: tuple, variable: str) -> list[IntegralCacheEntry]:
        return list(self._index.get((body, variable), ()))

    def append(self, entry: IntegralCacheEntry):
        self._entries.append(entry)
        self._index.setdefault((entry.body, entry.variable), []).append(entry)

    def copy(self) -> IntegralCache:
        return IntegralCache(self._entries)

    def clear(self):
        self._entries.clear()
        self._index.clear()


def cached_integral(
    integrand,
    lower: float,
    upper: float,
    cache: IntegralCache,
    body: tuple,
    variable: str,
    steps: int = DEFAULT_INTEGRAL_STEPS,
) -> complex:
    """Integral definida reutilizando la entrada más cercana de la caché.

    Se elige la entrada con el mismo integrando que minimiza
    ``|a' - a| + |b' - b|``. Si esa distancia es menor que el ancho de la
    entrada, se devuelve su valor tal cual; si no, se le suman las
    integrales de los dos tramos de borde, cada uno con un número de pasos
    proporcional a su parte de la distancia.
    """
    if lower == upper:
        return 0j
    if lower > upper:
        return -cached_integral(integrand, upper, lower, cache, body, variable, steps)

    candidates = cache.matching(body, variable)
    if not candidates:
        value = riemann_integral(integrand, lower, upper, steps)
        cache.append(IntegralCacheEntry(lower, upper, body, variable, value))
        logger.debug("Integral calculada en frío", lower=lower, upper=upper, entries=len(cache))
        return value

    best = min(candidates, key=lambda e: abs(lower - e.lower) + abs(upper - e.upper))
    lower_shift = abs(lower - best.lower)
    upper_shift = abs(upper - best.upper)
    distance = lower_shift + upper_shift

    if distance < best.width:
        return best.value

    width = upper - lower
    lower_steps = steps * lower_shift / (width * distance)
    upper_steps = steps * upper_shift / (width * distance)
    value = (
        best.value
        + riemann_integral(integrand, lower, best.lower, lower_steps)
        + riemann_integral(integrand, best.upper, upper, upper_steps)
    )

    if distance > best.width:
        cache.append(IntegralCacheEntry(lower, upper, body, variable, value))
        logger.debug("Integral extendida desde la caché", lower=lower, upper=upper, entries=len(cache))
    return value


def real_bound(value: complex, name: str) -> float:
    if value.imag != 0 or not math.isfinite(value.real):
        raise DomainError(f"El límite {name} de la integral debe ser real")
    return value.real
