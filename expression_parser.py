"""Árbol sintáctico, parser por descenso recursivo y validación de ámbitos.

Precedencias, de mayor a menor:
    ``^`` (asociativa a la derecha), ``*`` ``/``, ``+`` ``-``.
Las funciones llevan siempre su lista de argumentos entre paréntesis,
separados por ``;``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal

from errors import StructuralError
from expression_lexer import (
    AGGREGATES,
    ARGUMENT_SEPARATOR,
    CONSTANTS,
    FREE_VARIABLES,
    FUNCTION_ARITY,
    IMAGINARY_UNIT,
    is_function,
    is_numeral,
    is_symbol,
    lex,
)

_CONSTANT_VALUES = {"pi": math.pi, "e": math.e}


# ── Nodos ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Number:
    value: complex


@dataclass(frozen=True)
class Variable:
    name: str

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: object
    right: object


@dataclass(frozen=True)
class Call:
    """Aplicación de función; en los agregados args[3] es la variable ligada."""

    name: str
    args: tuple

    @property
    def is_aggregate(self) -> bool:
        return self.name in AGGREGATES


# ── Parser ───────────────────────────────────────────────────────

class Parser:
    def __init__(self, lexemes: list[str]):
        self.lexemes = lexemes
        self.i = 0

    def peek(self) -> str | None:
        if self.i < len(self.lexemes):
            return self.lexemes[self.i]
        return None

    def eat(self, expected: str | None = None) -> str:
        lexeme = self.peek()
        if lexeme is None:
            raise StructuralError("Expresión incompleta")
        if expected is not None and lexeme != expected:
            raise StructuralError(f"Se esperaba '{expected}' y llegó '{lexeme}'")
        self.i += 1
        return lexeme

    def parse(self):
        if not self.lexemes:
            raise StructuralError("Expresión vacía")
        node = self.expr()
        if self.peek() is not None:
            raise StructuralError(f"Sobra texto a partir de '{self.peek()}'")
        return node

    # expr := term (("+"|"-") term)*
    def expr(self):
        node = self.term()
        while self.peek() in ("+", "-"):
            op = self.eat()
            node = BinaryOp(op, node, self.term())
        return node

    # term := power (("*"|"/") power)*
    def term(self):
        node = self.power()
        while self.peek() in ("*", "/"):
            op = self.eat()
            node = BinaryOp(op, node, self.power())
        return node

    # power := atom ("^" power)?
    def power(self):
        base = self.atom()
        if self.peek() == "^":
            self.eat()
            return BinaryOp("^", base, self.power())
        return base

    def atom(self):
        lexeme = self.eat()

        if lexeme == "(":
            node = self.expr()
            self.eat(")")
            return node

        if is_numeral(lexeme):
            value = float(lexeme)
            if math.isinf(value):
                raise StructuralError(f"Número fuera de rango: {lexeme}")
            return Number(complex(value, 0))

        if is_function(lexeme):
            return self.call(lexeme)

        if lexeme in CONSTANTS:
            return Number(complex(_CONSTANT_VALUES[lexeme], 0))

        if is_symbol(lexeme):
            return Variable(lexeme)

        raise StructuralError(f"Operando inesperado: '{lexeme}'")

    def call(self, name: str):
        if self.peek() != "(":
            raise StructuralError(f"Falta '(' después de {name}")
        self.eat("(")

        args = [self.expr()]
        while self.peek() == ARGUMENT_SEPARATOR:
            self.eat()
            args.append(self.expr())
        self.eat(")")

        arity = FUNCTION_ARITY[name]
        if len(args) != arity:
            raise StructuralError(
                f"{name} necesita {arity} argumento(s) y recibió {len(args)}"
            )

        if name in AGGREGATES:
            variable = args[3]
            if not isinstance(variable, Variable):
                raise StructuralError(f"El cuarto argumento de {name} debe ser una variable")
            if variable.name in FREE_VARIABLES:
                raise StructuralError(
                    f"La variable ligada '{variable.name}' choca con una variable libre"
                )

        return Call(name, tuple(args))


def parse(expr: str):
    """Construye el árbol de una expresión ya normalizada."""
    return Parser(lex(expr)).parse()


# ── Validación de ámbitos ────────────────────────────────────────

def validate(node, bound: frozenset = frozenset()):
    """Resuelve cada variable contra su ámbito y devuelve el árbol resuelto.

    ``i`` fuera de un agregado que la ligue pasa a ser la unidad imaginaria.
    Un agregado no puede volver a ligar una variable de un agregado exterior.
    """
    if isinstance(node, Number):
        return node

    if isinstance(node, Variable):
        if node.name in bound or node.name in FREE_VARIABLES:
            return node
        if node.name == IMAGINARY_UNIT:
            return Number(1j)
        raise StructuralError(f"Variable sin declarar: '{node.name}'")

    if isinstance(node, BinaryOp):
        return BinaryOp(node.op, validate(node.left, bound), validate(node.right, bound))

    if node.is_aggregate:
        lower, upper, body, variable = node.args
        if variable.name in bound:
            raise StructuralError(
                f"La variable '{variable.name}' ya está ligada por un agregado exterior"
            )
        return Call(
            node.name,
            (
                validate(lower, bound),
                validate(upper, bound),
                validate(body, bound | {variable.name}),
                variable,
            ),
        )

    return Call(node.name, tuple(validate(arg, bound) for arg in node.args))


def free_variables(node) -> frozenset:
    if isinstance(node, Number):
        return frozenset()
    if isinstance(node, Variable):
        return frozenset((node.name,))
    if isinstance(node, BinaryOp):
        return free_variables(node.left) | free_variables(node.right)
    if node.is_aggregate:
        lower, upper, body, variable = node.args
        return (
            free_variables(lower)
            | free_variables(upper)
            | (free_variables(body) - {variable.name})
        )
    return frozenset().union(*(free_variables(arg) for arg in node.args))


# ── Impresión ────────────────────────────────────────────────────

def format_number(value: float) -> str:
    """Numeral positivo sin notación científica, legible por el lexer."""
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def format_literal(value: complex, unit: str = IMAGINARY_UNIT) -> str:
    """Forma mínima con signo de un literal complejo.

    No hay menos unario en la forma canónica, así que los negativos se
    escriben como restas desde cero.
    """
    re_part, im_part = value.real, value.imag
    real_text = format_number(abs(re_part))
    imag_text = f"({format_number(abs(im_part))}*{unit})"

    if im_part == 0:
        if re_part < 0:
            return f"(0-{real_text})"
        return real_text
    if re_part == 0:
        if im_part < 0:
            return f"(0-{imag_text})"
        return imag_text

    head = f"(0-{real_text})" if re_part < 0 else real_text
    sign = "-" if im_part < 0 else "+"
    return f"({head}{sign}{imag_text})"


def render(node, bound: frozenset = frozenset()) -> str:
    """Imprime el árbol completamente entre paréntesis."""
    if isinstance(node, Number):
        # dentro de un agregado que liga i, la unidad imaginaria no puede escribirse como i
        unit = "sqrt(0-1)" if IMAGINARY_UNIT in bound else IMAGINARY_UNIT
        return format_literal(node.value, unit)

    if isinstance(node, Variable):
        return node.name

    if isinstance(node, BinaryOp):
        return f"({render(node.left, bound)}{node.op}{render(node.right, bound)})"

    if node.is_aggregate:
        lower, upper, body, variable = node.args
        parts = (
            render(lower, bound),
            render(upper, bound),
            render(body, bound | {variable.name}),
            variable.name,
        )
    else:
        parts = tuple(render(arg, bound) for arg in node.args)
    return f"({node.name}({ARGUMENT_SEPARATOR.join(parts)}))"


def bracket(expr: str) -> str:
    """Devuelve la expresión normalizada con toda la precedencia explícita.

    >>> bracket("x^2+1")
    '((x^2)+1)'
    """
    return render(parse(expr))
