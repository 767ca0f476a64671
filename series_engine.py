"""
Motor de series para el graficador.

Este módulo provee la clase SeriesCache, que guarda una expresión
compilada por fila de entrada y responde a las peticiones de valores del
dibujado. Las filas cuyo texto no cambia entre rondas conservan su
compilación y su caché de integrales.

Contrato de interfaz:
    - recompile(raw_expressions) -> list[TokenList | ParseFailure]
    - value_at(series_index, x, n) -> float | complex | None
    - angle_mode: propiedad 'rad' | 'deg'
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from aggregate_engine import IntegralCache
from complex_math import ComplexMathProvider
from errors import ParseFailure, ResourceError
from expression_evaluator import Evaluator
from formula_compiler import FormulaCompiler
from series_config import (
    AP_WORKING_DIGITS,
    DEFAULT_ANGLE_MODE,
    DEFAULT_INTEGRAL_STEPS,
    REAL_TOLERANCE,
    USE_ARBITRARY_PRECISION,
)
from series_logging import get_logger
from token_list import TokenList

logger = get_logger(__name__)


@dataclass
class SeriesSlot:
    """Estado de una fila: texto, resultado de compilar y caché de integrales."""

    raw_expression: str | None
    compile_result: TokenList | ParseFailure
    integral_cache: IntegralCache = field(default_factory=IntegralCache)

    @property
    def is_compiled(self) -> bool:
        return isinstance(self.compile_result, TokenList)


def _default_provider():
    if USE_ARBITRARY_PRECISION:
        from arbitrary_precision_provider import MPMathProvider

        return MPMathProvider(AP_WORKING_DIGITS, DEFAULT_ANGLE_MODE)
    return ComplexMathProvider(DEFAULT_ANGLE_MODE)


class SeriesCache:
    """Compila y evalúa las expresiones de todas las filas."""

    def __init__(
        self,
        provider=None,
        integral_steps: int = DEFAULT_INTEGRAL_STEPS,
        real_tolerance: float = REAL_TOLERANCE,
    ):
        if provider is None:
            provider = _default_provider()
        self._evaluator = Evaluator(provider, integral_steps)
        self._compiler = FormulaCompiler(self._evaluator)
        self._real_tolerance = real_tolerance
        self._slots: list[SeriesSlot] = []

    # ── Propiedad: modo angular ──────────────────────────────────

    @property
    def angle_mode(self) -> str:
        return self._evaluator.angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        if mode == self._evaluator.angle_mode:
            return
        self._evaluator.angle_mode = mode
        # las constantes plegadas dependen del modo: se recompila todo
        raw_expressions = [slot.raw_expression for slot in self._slots]
        self._slots = []
        self.recompile(raw_expressions)

    @property
    def slots(self) -> tuple[SeriesSlot, ...]:
        return tuple(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    # ── Compilación ──────────────────────────────────────────────

    def recompile(self, raw_expressions) -> list[TokenList | ParseFailure]:
        """Actualiza las filas con los textos actuales.

        Un texto idéntico a uno de la ronda anterior (en cualquier
        posición) reutiliza su compilación y una copia de su caché de
        integrales; los demás se compilan con una caché vacía.
        """
        known = {slot.raw_expression: slot for slot in self._slots if slot.raw_expression}
        slots = []

        for raw in raw_expressions:
            if not raw:
                slots.append(SeriesSlot(raw, ParseFailure(raw, "Expresión vacía")))
                continue

            carried = known.get(raw)
            if carried is not None:
                slot = SeriesSlot(raw, carried.compile_result, carried.integral_cache.copy())
                logger.debug("Fila reutilizada", raw=raw)
            else:
                cache = IntegralCache()
                slot = SeriesSlot(raw, self._compiler.compile(raw, cache), cache)
                known[raw] = slot
            slots.append(slot)

        self._slots = slots
        logger.debug(
            "Series recompiladas",
            total=len(slots),
            compiled=sum(1 for slot in slots if slot.is_compiled),
        )
        return [slot.compile_result for slot in slots]

    # ── Evaluación ───────────────────────────────────────────────

    def value_at(self, series_index: int, x, n):
        """Valor de la serie ``series_index`` en (x, n).

        Con ``x`` real devuelve un ``float`` (``nan`` si la parte imaginaria
        no es despreciable); con ``x`` complejo devuelve el ``complex``.
        Devuelve ``None`` si la fila no tiene expresión compilada.
        """
        if not 0 <= series_index < len(self._slots):
            return None
        slot = self._slots[series_index]
        if not slot.is_compiled:
            return None

        try:
            value = self._evaluator.evaluate(slot.compile_result, x, n, slot.integral_cache)
        except ResourceError as exc:
            logger.error("Evaluación abortada", series=series_index, reason=str(exc))
            return None

        if isinstance(x, complex):
            return value
        if abs(value.imag) < self._real_tolerance:
            return value.real
        return math.nan
