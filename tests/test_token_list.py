"""Tests de la representación prefija compilada."""

import math

import pytest

from expression_parser import Variable
from token_list import Operator, TokenList, tokenize


class TestTokenize:
    def test_prefix_order(self) -> None:
        tokens = tokenize("x^2+1")
        assert list(tokens) == [
            Operator("+", 2),
            Operator("^", 2),
            Variable("x"),
            2 + 0j,
            1 + 0j,
        ]

    def test_imaginary_unit_and_constants(self) -> None:
        assert list(tokenize("i")) == [1j]
        assert list(tokenize("pi")) == [complex(math.pi, 0)]
        assert list(tokenize("e")) == [complex(math.e, 0)]

    def test_aggregate_variable_is_last_operand(self) -> None:
        tokens = tokenize("sum(1;n;k;k)")
        assert list(tokens) == [
            Operator("sum", 4),
            1 + 0j,
            Variable("n"),
            Variable("k"),
            Variable("k"),
        ]

    def test_two_argument_function(self) -> None:
        tokens = tokenize("log(x;2)")
        assert tokens[0] == Operator("log", 2)
        assert len(tokens) == 3


class TestSpans:
    """Límites de los operandos"""

    def test_subtree_end(self) -> None:
        tokens = tokenize("x^2+1")
        assert [tokens.subtree_end(i) for i in range(len(tokens))] == [5, 4, 3, 4, 5]

    def test_span(self) -> None:
        tokens = tokenize("x^2+1")
        assert tokens.span(1) == (Operator("^", 2), Variable("x"), 2 + 0j)

    def test_slice_is_tuple(self) -> None:
        tokens = tokenize("x+1")
        assert tokens[1:] == (Variable("x"), 1 + 0j)

    def test_variables_in(self) -> None:
        tokens = tokenize("sum(1;n;k*x;k)")
        assert tokens.variables_in(0, len(tokens)) == frozenset({"n", "k", "x"})
        assert tokens.variables_in(3, 6) == frozenset({"k", "x"})


class TestValueSemantics:
    def test_equality_and_hash(self) -> None:
        assert tokenize("x+1") == tokenize("x+1")
        assert hash(tokenize("x+1")) == hash(tokenize("x+1"))
        assert tokenize("x+1") != tokenize("x+2")

    def test_missing_operands(self) -> None:
        with pytest.raises(ValueError):
            TokenList([Operator("+", 2), 1 + 0j])

    def test_more_than_one_expression(self) -> None:
        with pytest.raises(ValueError):
            TokenList([1 + 0j, 2 + 0j])
