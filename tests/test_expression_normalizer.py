"""
Tests del normalizador de expresiones.

Verifica:
1. Alias y glifos tipográficos
2. Valor absoluto con barras
3. Multiplicación implícita
4. Menos unario
5. Grados y porcentajes
6. Rechazo de entradas mal formadas
7. Idempotencia
"""

import pytest

from errors import StructuralError
from expression_normalizer import normalize


class TestAliases:
    """Alias de nombres y glifos"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("arcsin(x)", "asin(x)"),
            ("arcsinh(x)", "asinh(x)"),
            ("arccot(x)", "acot(x)"),
            ("Pi", "pi"),
            ("PI*x", "pi*x"),
            ("E^x", "e^x"),
            ("1,5", "1.5"),
            ("integral(0;1;t;t)", "int(0;1;t;t)"),
            ("product(1;n;k;k)", "prod(1;n;k;k)"),
            ("2×3÷4", "2*3/4"),
            ("x−1", "x-1"),
            ("√(x)", "sqrt(x)"),
            ("2π", "2*pi"),
        ],
    )
    def test_alias_folding(self, raw, expected) -> None:
        assert normalize(raw) == expected

    def test_whitespace_is_removed(self) -> None:
        assert normalize(" x ^ 2 + 1 ") == "x^2+1"


class TestAbsoluteBars:
    def test_simple_bars(self) -> None:
        assert normalize("|x-1|") == "abs(x-1)"

    def test_bars_inside_function(self) -> None:
        assert normalize("sin(|x|)") == "sin(abs(x))"

    def test_unmatched_bar(self) -> None:
        with pytest.raises(StructuralError):
            normalize("|x")


class TestImplicitMultiplication:
    """Inserción de * entre valores adyacentes"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2x", "2*x"),
            ("xn", "x*n"),
            ("2sin(x)", "2*sin(x)"),
            ("(x+1)(x-1)", "(x+1)*(x-1)"),
            ("x(x+1)", "x*(x+1)"),
            ("2pi", "2*pi"),
            (".5x", "0.5*x"),
        ],
    )
    def test_insertion(self, raw, expected) -> None:
        assert normalize(raw) == expected

    def test_no_insertion_after_function_name(self) -> None:
        assert normalize("sin(x)") == "sin(x)"


class TestUnaryMinus:
    def test_leading_minus(self) -> None:
        assert normalize("-x") == "0-x"

    def test_minus_after_bracket(self) -> None:
        assert normalize("(-x)") == "(0-x)"

    def test_minus_after_separator_wraps_argument(self) -> None:
        """El argumento completo queda como (0-…)"""
        assert normalize("log(x;-2)") == "log(x;(0-2))"
        assert normalize("sum(-1+1;n;k;k)") == "sum(0-1+1;n;k;k)"
        assert normalize("sum(1;-n+5;k;k)") == "sum(1;(0-n+5);k;k)"

    def test_minus_after_separator_covers_power(self) -> None:
        """-k^2 como argumento es -(k^2), igual que un menos inicial"""
        assert normalize("sum(1;3;-k^2;k)") == "sum(1;3;(0-k^2);k)"


class TestDegreeAndPercent:
    def test_degree(self) -> None:
        assert normalize("90°") == "(90*pi/180)"

    def test_percent(self) -> None:
        assert normalize("50%") == "(50*0.01)"

    def test_degree_of_function_call(self) -> None:
        assert normalize("sin(x)°") == "(sin(x)*pi/180)"

    def test_degree_followed_by_value(self) -> None:
        assert normalize("90°x") == "(90*pi/180)*x"

    def test_missing_operand(self) -> None:
        with pytest.raises(StructuralError):
            normalize("%")


class TestRejections:
    """Entradas que no superan la normalización"""

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "(x",
            "x)",
            "(x))",
            "()",
            "3++2",
            "x*/2",
            "1.2.3",
            "y+1",
            "x$1",
            "sum(1;n;x;x)",
            "int(0;1;n;n)",
            "sum(1;3;k;pi)",
            "sum(1;3;k;sin)",
        ],
    )
    def test_structural_error(self, raw) -> None:
        with pytest.raises(StructuralError):
            normalize(raw)

    def test_none_is_rejected(self) -> None:
        with pytest.raises(StructuralError):
            normalize(None)

    def test_bound_variable_is_declared(self) -> None:
        """Una letra ligada por un agregado no es un identificador desconocido"""
        assert normalize("sum(1;n;k^2;k)") == "sum(1;n;k^2;k)"

    def test_i_as_bound_variable(self) -> None:
        assert normalize("sum(1;n;x;i)") == "sum(1;n;x;i)"


class TestIdempotence:
    @pytest.mark.parametrize(
        "raw",
        [
            "-x",
            "2x",
            "(x+1)(x-1)",
            "log(x;-2)",
            "|x-1|",
            "90°",
            "50%x",
            ".5x",
            "sin(x)°",
            "sum(1;n;k^2;k)",
            "arctan(2x)+Pi",
        ],
    )
    def test_normalize_twice(self, raw) -> None:
        once = normalize(raw)
        assert normalize(once) == once
