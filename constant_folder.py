"""Precálculo de las subexpresiones que no dependen de ninguna variable.

Se recorre el árbol de arriba abajo: un subárbol sin variables libres se
evalúa una sola vez y se sustituye por su literal, de modo que los
subárboles interiores ya no se visitan. Los que dan NaN o infinito se
dejan como están; en tiempo de ejecución darán el mismo resultado.
"""

import cmath

from expression_evaluator import Evaluator
from expression_parser import BinaryOp, Call, Number, Variable, free_variables, parse, render, validate
from series_config import FOLD_SAMPLE_POINT
from token_list import lower


def fold_tree(node, evaluator: Evaluator, integral_cache=None):
    if isinstance(node, (Number, Variable)):
        return node

    if not free_variables(node):
        value = evaluator.evaluate(lower(node), FOLD_SAMPLE_POINT, FOLD_SAMPLE_POINT, integral_cache)
        if cmath.isfinite(value):
            return Number(value)

    if isinstance(node, BinaryOp):
        return BinaryOp(
            node.op,
            fold_tree(node.left, evaluator, integral_cache),
            fold_tree(node.right, evaluator, integral_cache),
        )

    if node.is_aggregate:
        lower_bound, upper_bound, body, variable = node.args
        return Call(
            node.name,
            (
                fold_tree(lower_bound, evaluator, integral_cache),
                fold_tree(upper_bound, evaluator, integral_cache),
                fold_tree(body, evaluator, integral_cache),
                variable,
            ),
        )

    return Call(node.name, tuple(fold_tree(arg, evaluator, integral_cache) for arg in node.args))


def fold(expr: str, slot=None, evaluator: Evaluator | None = None) -> str:
    """Versión sobre cadenas: pliega una expresión normalizada y la reimprime.

    Si se pasa ``slot``, las integrales constantes usan su caché.
    """
    if evaluator is None:
        evaluator = Evaluator()
    cache = slot.integral_cache if slot is not None else None
    return render(fold_tree(validate(parse(expr)), evaluator, cache))
