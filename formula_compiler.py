"""Compilación de expresiones de usuario a listas prefijas evaluables."""

from __future__ import annotations

from constant_folder import fold_tree
from errors import ParseFailure, ResourceError, StructuralError
from expression_evaluator import Evaluator
from expression_normalizer import normalize
from expression_parser import parse, validate
from series_logging import get_logger
from token_list import TokenList, lower

logger = get_logger(__name__)


class FormulaCompiler:
    """Lleva una expresión del texto del usuario a una TokenList.

    Etapas: normalización, parseo con precedencias, validación de ámbitos,
    precálculo de constantes y aplanado a orden prefijo. Cualquier error
    estructural queda registrado como :class:`ParseFailure`.
    """

    def __init__(self, evaluator: Evaluator):
        self._evaluator = evaluator

    def compile(self, raw: str, integral_cache=None) -> TokenList | ParseFailure:
        if not raw or not raw.strip():
            return ParseFailure(raw, "Expresión vacía")

        try:
            normalized = normalize(raw)
            tree = validate(parse(normalized))
            tree = fold_tree(tree, self._evaluator, integral_cache)
            tokens = lower(tree)
        except StructuralError as exc:
            logger.warning("Expresión rechazada", raw=raw, reason=str(exc))
            return ParseFailure(raw, str(exc))
        except (RecursionError, ResourceError):
            logger.warning("Expresión rechazada", raw=raw, reason="anidamiento excesivo")
            return ParseFailure(raw, "Expresión demasiado anidada")

        logger.debug("Expresión compilada", raw=raw, normalized=normalized, tokens=len(tokens))
        return tokens


def compile_expression(raw: str, evaluator: Evaluator | None = None, integral_cache=None):
    """Atajo para compilar una expresión suelta con el evaluador por defecto."""
    if evaluator is None:
        evaluator = Evaluator()
    return FormulaCompiler(evaluator).compile(raw, integral_cache)
