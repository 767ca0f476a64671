"""Representación compilada en orden prefijo de una expresión.

Cada elemento es un literal ``complex``, una :class:`Variable` o un
:class:`Operator` seguido de sus operandos. En ``sum``, ``prod`` e ``int``
el cuarto operando es la variable ligada.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from expression_parser import BinaryOp, Call, Number, Variable, parse, validate


@dataclass(frozen=True)
class Operator:
    name: str
    arity: int

    def __repr__(self) -> str:
        return self.name


def _subtree_ends(tokens: tuple) -> tuple:
    """Para cada posición, el índice donde termina el operando que empieza ahí."""
    ends = [0] * len(tokens)
    stack = []
    for i in range(len(tokens) - 1, -1, -1):
        token = tokens[i]
        if isinstance(token, Operator):
            if len(stack) < token.arity:
                raise ValueError(f"Faltan operandos para {token.name}")
            end = i + 1
            for _ in range(token.arity):
                end = stack.pop()
            ends[i] = end
        else:
            ends[i] = i + 1
        stack.append(ends[i])
    if len(stack) > 1:
        raise ValueError("La lista contiene más de una expresión")
    return tuple(ends)


class TokenList(Sequence):
    """Secuencia inmutable de tokens con los límites de cada operando."""

    __slots__ = ("_tokens", "_ends", "_names")

    def __init__(self, tokens):
        self._tokens = tuple(tokens)
        self._ends = _subtree_ends(self._tokens)
        self._names = {}

    def __getitem__(self, index):
        return self._tokens[index]

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other) -> bool:
        if isinstance(other, TokenList):
            return self._tokens == other._tokens
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"TokenList({list(self._tokens)!r})"

    def subtree_end(self, start: int) -> int:
        return self._ends[start]

    def span(self, start: int) -> tuple:
        return self._tokens[start : self._ends[start]]

    def variables_in(self, start: int, end: int) -> frozenset:
        """Nombres de variable que aparecen en tokens[start:end]."""
        key = (start, end)
        if key not in self._names:
            self._names[key] = frozenset(
                token.name
                for token in self._tokens[start:end]
                if isinstance(token, Variable)
            )
        return self._names[key]


def _emit(node, out: list):
    if isinstance(node, Number):
        out.append(node.value)
    elif isinstance(node, Variable):
        out.append(node)
    elif isinstance(node, BinaryOp):
        out.append(Operator(node.op, 2))
        _emit(node.left, out)
        _emit(node.right, out)
    elif isinstance(node, Call):
        out.append(Operator(node.name, len(node.args)))
        for arg in node.args:
            _emit(arg, out)
    else:
        raise TypeError(f"Nodo desconocido: {node!r}")


def lower(node) -> TokenList:
    """Aplana un árbol validado en una lista prefija."""
    out = []
    _emit(node, out)
    return TokenList(out)


def tokenize(expr: str) -> TokenList:
    """Compila una cadena normalizada (o ya entre paréntesis) a TokenList."""
    return lower(validate(parse(expr)))
