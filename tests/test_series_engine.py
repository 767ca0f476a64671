"""
Tests del motor de series.

Verifica:
1. Compilación por filas y reutilización entre rondas
2. Conversión a real o complejo en value_at
3. Cambio de modo angular
"""

import math

import pytest

from complex_math import ComplexMathProvider
from errors import ParseFailure
from series_engine import SeriesCache
from token_list import Operator, TokenList


class TestRecompile:
    def test_results_per_row(self, engine) -> None:
        results = engine.recompile(["x^2", "", None, "3++2"])
        assert isinstance(results[0], TokenList)
        assert all(isinstance(result, ParseFailure) for result in results[1:])
        assert len(engine) == 4

    def test_empty_rows_skip_the_pipeline(self, engine) -> None:
        results = engine.recompile(["", None])
        assert results[0].reason == "Expresión vacía"
        assert results[1].raw is None

    def test_unchanged_text_is_carried_over(self, engine) -> None:
        engine.recompile(["int(0;x;t;t)"])
        engine.value_at(0, 5.0, 0)
        previous = engine.slots[0]
        assert len(previous.integral_cache) == 1

        engine.recompile(["x+1", "int(0;x;t;t)"])
        carried = engine.slots[1]
        assert carried.compile_result is previous.compile_result
        assert carried.integral_cache is not previous.integral_cache
        assert len(carried.integral_cache) == 1

    def test_new_text_gets_fresh_cache(self, engine) -> None:
        engine.recompile(["int(0;x;t;t)"])
        engine.value_at(0, 5.0, 0)
        engine.recompile(["int(0;x;2t;t)"])
        assert len(engine.slots[0].integral_cache) == 0

    def test_duplicates_compile_once(self, engine) -> None:
        results = engine.recompile(["x", "x"])
        assert results[0] is results[1]

    def test_rows_are_independent(self, engine) -> None:
        engine.recompile(["1/0+x", "x"])
        assert math.isnan(engine.value_at(0, 1.0, 0))
        assert engine.value_at(1, 1.0, 0) == 1.0


class TestValueAt:
    """Valores reales, complejos y ausentes"""

    def test_real_value(self, engine) -> None:
        engine.recompile(["x^2"])
        value = engine.value_at(0, 3.0, 0)
        assert value == 9.0
        assert isinstance(value, float)

    def test_index_is_coerced(self, engine) -> None:
        engine.recompile(["n"])
        assert engine.value_at(0, 0.0, 3) == 3.0

    def test_complex_result_on_real_axis_is_nan(self, engine) -> None:
        engine.recompile(["sqrt(x)"])
        assert math.isnan(engine.value_at(0, -4.0, 0))

    def test_complex_argument_returns_complex(self, engine) -> None:
        engine.recompile(["sqrt(x)"])
        assert engine.value_at(0, -4 + 0j, 0) == 2j

    def test_tiny_imaginary_part_is_dropped(self, engine) -> None:
        engine.recompile(["x+sin(pi)*i"])
        assert engine.value_at(0, 2.0, 0) == 2.0

    def test_sum_scenario(self, engine) -> None:
        engine.recompile(["sum(1;n;x;i)"])
        assert engine.value_at(0, 2.0, 5) == 10.0

    @pytest.mark.parametrize("index", [1, -1, 10])
    def test_missing_slot(self, engine, index) -> None:
        engine.recompile(["x"])
        assert engine.value_at(index, 1.0, 0) is None

    def test_failed_slot(self, engine) -> None:
        engine.recompile(["3++2"])
        assert engine.value_at(0, 1.0, 0) is None

    def test_too_deep_to_evaluate(self, engine) -> None:
        """Una lista compilada más profunda que la pila de llamadas da None"""
        engine.recompile(["x"])
        engine.slots[0].compile_result = TokenList([Operator("sqrt", 1)] * 20000 + [1 + 0j])
        assert engine.value_at(0, 1.0, 0) is None

    def test_other_rows_survive_a_deep_row(self, engine) -> None:
        engine.recompile(["x", "x+1"])
        engine.slots[0].compile_result = TokenList([Operator("sqrt", 1)] * 20000 + [1 + 0j])
        assert engine.value_at(0, 1.0, 0) is None
        assert engine.value_at(1, 1.0, 0) == 2.0


class TestAngleMode:
    def test_switch_recompiles_folded_constants(self, engine) -> None:
        engine.recompile(["sin(90)"])
        assert engine.value_at(0, 0.0, 0) == pytest.approx(math.sin(90))
        engine.angle_mode = "deg"
        assert engine.angle_mode == "deg"
        assert engine.value_at(0, 0.0, 0) == pytest.approx(1.0)

    def test_variable_argument(self) -> None:
        engine = SeriesCache(ComplexMathProvider("deg"))
        engine.recompile(["cos(x)"])
        assert engine.value_at(0, 180.0, 0) == pytest.approx(-1.0)

    def test_invalid_mode(self, engine) -> None:
        with pytest.raises(ValueError):
            engine.angle_mode = "grad"


class TestQuietOutput:
    def test_plain_use_writes_nothing_to_stdout(self, engine, capsys) -> None:
        """Las integrales en frío y las recompilaciones de cada fotograma no imprimen"""
        engine.recompile(["int(0;1;x*t;t)"])
        for k in range(50):
            engine.value_at(0, k / 10, 0)
        engine.recompile(["int(0;1;x*t;t)"])
        assert len(engine.slots[0].integral_cache) == 50
        assert capsys.readouterr().out == ""
