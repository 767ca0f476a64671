"""Jerarquía de errores del compilador y evaluador de series."""

from dataclasses import dataclass


class SeriesError(Exception):
    """Base de todos los errores del núcleo de series."""


class StructuralError(SeriesError, ValueError):
    """Expresión mal formada; se detecta al compilar."""


class DomainError(SeriesError, ArithmeticError):
    """Operación sin valor en el punto pedido; se traduce a NaN."""


class ResourceError(SeriesError, RuntimeError):
    """Recursión agotada al evaluar una expresión demasiado anidada."""


@dataclass(frozen=True)
class ParseFailure:
    """Marcador de compilación fallida para una fila de entrada."""

    raw: str | None
    reason: str

    def __str__(self) -> str:
        return f"Error: {self.reason}"
