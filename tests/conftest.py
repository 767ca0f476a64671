"""Configuración de pytest y fixtures compartidas."""

import pytest

from aggregate_engine import IntegralCache
from complex_math import ComplexMathProvider
from expression_evaluator import Evaluator
from series_engine import SeriesCache


@pytest.fixture
def evaluator() -> Evaluator:
    """Evaluador con el proveedor por defecto en radianes."""
    return Evaluator(ComplexMathProvider("rad"))


@pytest.fixture
def engine() -> SeriesCache:
    """Motor de series sin filas."""
    return SeriesCache(ComplexMathProvider("rad"))


@pytest.fixture
def integral_cache() -> IntegralCache:
    return IntegralCache()
