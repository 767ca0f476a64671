"""Tests de la tabla de símbolos y la separación en lexemas."""

import pytest

from expression_lexer import is_function, is_numeral, is_symbol, lex, split_names


class TestSplitNames:
    """Separación de tiras de letras por el nombre más largo"""

    @pytest.mark.parametrize(
        "run, expected",
        [
            ("sinh", ["sinh"]),
            ("sign", ["sign"]),
            ("asinh", ["asinh"]),
            ("exp", ["exp"]),
            ("xsin", ["x", "sin"]),
            ("pix", ["pi", "x"]),
            ("xn", ["x", "n"]),
            ("int", ["int"]),
        ],
    )
    def test_longest_match(self, run, expected) -> None:
        assert split_names(run) == expected


class TestLex:
    def test_numerals_are_maximal_runs(self) -> None:
        """Los dígitos y puntos contiguos forman un único numeral"""
        assert lex("2.5x") == ["2.5", "x"]
        assert lex("1.2.3") == ["1.2.3"]

    def test_aggregate(self) -> None:
        assert lex("sum(1;n;k^2;k)") == [
            "sum", "(", "1", ";", "n", ";", "k", "^", "2", ";", "k", ")",
        ]

    def test_unknown_characters_are_single_lexemes(self) -> None:
        assert lex("x$1") == ["x", "$", "1"]


class TestPredicates:
    def test_classification(self) -> None:
        assert is_function("log")
        assert not is_function("x")
        assert is_numeral(".5")
        assert not is_numeral("x")
        assert is_symbol("pi")
        assert is_symbol("k")
        assert not is_symbol("sin")
