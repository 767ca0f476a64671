"""Reescritura de la entrada del usuario a la forma canónica que lee el parser.

Contrato:
    normalize(raw: str) -> str    (lanza StructuralError si la entrada es inválida)

La salida no contiene espacios, alias, barras de valor absoluto, menos
unario, ``°`` ni ``%``, y lleva la multiplicación implícita escrita. Volver
a normalizarla no la cambia.
"""

import re

from errors import StructuralError
from expression_lexer import (
    AGGREGATES,
    ARGUMENT_SEPARATOR,
    CONSTANTS,
    FREE_VARIABLES,
    IMAGINARY_UNIT,
    POSTFIX_OPERATORS,
    SIMPLE_OPERATORS,
    is_function,
    is_numeral,
    is_symbol,
    lex,
)

_GLYPHS = {
    "×": "*",
    "÷": "/",
    "−": "-",
    "π": "pi",
    "√": "sqrt",
}

_ALIASES = {
    "arcsinh": "asinh",
    "arccosh": "acosh",
    "arctanh": "atanh",
    "arccoth": "acoth",
    "arcsin": "asin",
    "arccos": "acos",
    "arctan": "atan",
    "arccot": "acot",
    "integral": "int",
    "product": "prod",
    "PI": "pi",
    "Pi": "pi",
    "E": "e",
    ",": ".",
}
_ALIAS_RE = re.compile(
    "|".join(re.escape(k) for k in sorted(_ALIASES, key=len, reverse=True))
)

_ALLOWED_CHARS = re.compile(r"^[0-9a-zA-Z.;()+\-*/^°%]*$")


def normalize(raw: str) -> str:
    """Aplica las reescrituras en orden estricto y devuelve la forma canónica."""
    if raw is None or not raw.strip():
        raise StructuralError("Expresión vacía")

    expr = _fold_glyphs(raw)
    expr = re.sub(r"\s+", "", expr)
    _check_brackets(expr)
    _check_signs(expr)
    expr = _ALIAS_RE.sub(lambda m: _ALIASES[m.group()], expr)
    expr = _replace_absolute_bars(expr)
    _check_decimal_points(expr)

    if not _ALLOWED_CHARS.fullmatch(expr):
        raise StructuralError("Expresión contiene caracteres inválidos")

    lexemes = lex(expr)
    bound = _collect_index_variables(lexemes)
    lexemes = _insert_implicit_mult(lexemes)
    _validate_symbols(lexemes, bound)
    lexemes = _rewrite_negatives(lexemes)
    lexemes = _expand_degree_and_percent(lexemes)
    lexemes = _add_leading_zeros(lexemes)

    return "".join(lexemes)


# ── Comprobaciones sobre la cadena ───────────────────────────────

def _fold_glyphs(expr: str) -> str:
    for glyph, replacement in _GLYPHS.items():
        expr = expr.replace(glyph, replacement)
    return expr


def _check_brackets(expr: str):
    depth = 0
    for i, ch in enumerate(expr):
        if ch == "(":
            depth += 1
            if expr[i + 1 : i + 2] == ")":
                raise StructuralError("Paréntesis vacíos")
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise StructuralError("Paréntesis desbalanceados")
    if depth != 0:
        raise StructuralError("Paréntesis desbalanceados")


def _check_signs(expr: str):
    for left, right in zip(expr, expr[1:]):
        if left in SIMPLE_OPERATORS and right in SIMPLE_OPERATORS:
            raise StructuralError(f"Dos operadores seguidos: '{left}{right}'")


def _replace_absolute_bars(expr: str) -> str:
    """Convierte ``|a|`` en ``abs(a)``.

    Cada barra se empareja con la siguiente barra que esté en la misma
    profundidad de paréntesis.
    """
    chars = list(expr)
    i = 0
    while i < len(chars):
        if chars[i] != "|":
            i += 1
            continue

        depth = 0
        closing = None
        for j in range(i + 1, len(chars)):
            if chars[j] == "(":
                depth += 1
            elif chars[j] == ")":
                depth -= 1
            elif chars[j] == "|" and depth == 0:
                closing = j
                break

        if closing is None:
            raise StructuralError("Falta la barra de cierre de |…|")

        chars[closing : closing + 1] = [")"]
        chars[i : i + 1] = list("abs(")
        i += 4

    return "".join(chars)


def _check_decimal_points(expr: str):
    for numeral in re.findall(r"[\d.]+", expr):
        if numeral.count(".") > 1:
            raise StructuralError(f"Número con dos puntos decimales: {numeral}")


# ── Reescrituras sobre lexemas ───────────────────────────────────

def _find_argument_end(lexemes: list[str], start: int) -> int:
    """Índice del ``;`` o ``)`` que cierra el argumento que empieza en start."""
    depth = 0
    for j in range(start, len(lexemes)):
        lexeme = lexemes[j]
        if lexeme == "(":
            depth += 1
        elif lexeme == ")":
            if depth == 0:
                return j
            depth -= 1
        elif lexeme == ARGUMENT_SEPARATOR and depth == 0:
            return j
    return len(lexemes)


def _collect_index_variables(lexemes: list[str]) -> set[str]:
    """Recoge las variables ligadas de ``sum``, ``prod`` e ``int``.

    La variable ligada es el lexema que sigue al tercer ``;`` de nivel
    superior dentro del paréntesis del agregado.
    """
    bound = set()
    for k, lexeme in enumerate(lexemes):
        if lexeme not in AGGREGATES or lexemes[k + 1 : k + 2] != ["("]:
            continue

        depth = 0
        separators = 0
        for j in range(k + 2, len(lexemes)):
            current = lexemes[j]
            if current == "(":
                depth += 1
            elif current == ")":
                if depth == 0:
                    break
                depth -= 1
            elif current == ARGUMENT_SEPARATOR and depth == 0:
                separators += 1
                if separators == 3:
                    variable = lexemes[j + 1] if j + 1 < len(lexemes) else ""
                    if variable in FREE_VARIABLES:
                        raise StructuralError(
                            f"La variable ligada '{variable}' choca con una variable libre"
                        )
                    if not is_symbol(variable) or variable in CONSTANTS:
                        raise StructuralError(
                            f"Variable ligada no permitida en {lexeme}: '{variable}'"
                        )
                    bound.add(variable)
                    break
    return bound


def _is_value_end(lexeme: str) -> bool:
    return (
        is_numeral(lexeme)
        or is_symbol(lexeme)
        or lexeme == ")"
        or lexeme in POSTFIX_OPERATORS
    )


def _is_value_start(lexeme: str) -> bool:
    return (
        is_numeral(lexeme)
        or is_symbol(lexeme)
        or is_function(lexeme)
        or lexeme == "("
    )


def _insert_implicit_mult(lexemes: list[str]) -> list[str]:
    if not lexemes:
        return lexemes
    result = [lexemes[0]]
    for left, right in zip(lexemes, lexemes[1:]):
        if _is_value_end(left) and _is_value_start(right):
            result.append("*")
        result.append(right)
    return result


def _validate_symbols(lexemes: list[str], bound: set[str]):
    allowed = {*FREE_VARIABLES, IMAGINARY_UNIT, *bound}
    for lexeme in lexemes:
        if is_symbol(lexeme) and lexeme not in CONSTANTS and lexeme not in allowed:
            raise StructuralError(f"Identificador no permitido: {lexeme}")


def _rewrite_negatives(lexemes: list[str]) -> list[str]:
    """Elimina el menos unario convirtiéndolo en una resta desde cero."""
    lexemes = list(lexemes)
    if lexemes[:1] == ["-"]:
        lexemes.insert(0, "0")

    i = 1
    while i < len(lexemes):
        if lexemes[i] != "-":
            i += 1
            continue
        previous = lexemes[i - 1]
        if previous == "(":
            lexemes.insert(i, "0")
            i += 2
        elif previous == ARGUMENT_SEPARATOR:
            end = _find_argument_end(lexemes, i)
            lexemes[i:end] = ["(", "0", *lexemes[i:end], ")"]
            i += 3
        else:
            i += 1
    return lexemes


def _find_operand_start(lexemes: list[str], index: int) -> int:
    """Inicio del operando que termina justo antes de lexemes[index]."""
    j = index - 1
    if j < 0:
        raise StructuralError("Falta el operando de '°' o '%'")

    if lexemes[j] == ")":
        depth = 0
        while j >= 0:
            if lexemes[j] == ")":
                depth += 1
            elif lexemes[j] == "(":
                depth -= 1
                if depth == 0:
                    break
            j -= 1
        if j > 0 and is_function(lexemes[j - 1]):
            j -= 1
        return j

    if is_numeral(lexemes[j]) or is_symbol(lexemes[j]):
        return j

    raise StructuralError("Falta el operando de '°' o '%'")


def _expand_degree_and_percent(lexemes: list[str]) -> list[str]:
    lexemes = list(lexemes)
    i = 0
    while i < len(lexemes):
        lexeme = lexemes[i]
        if lexeme not in POSTFIX_OPERATORS:
            i += 1
            continue

        start = _find_operand_start(lexemes, i)
        operand = lexemes[start:i]
        if lexeme == "°":
            replacement = ["(", *operand, "*", "pi", "/", "180", ")"]
        else:
            replacement = ["(", *operand, "*", "0.01", ")"]
        lexemes[start : i + 1] = replacement
        i = start + len(replacement)
    return lexemes


def _add_leading_zeros(lexemes: list[str]) -> list[str]:
    return ["0" + lexeme if lexeme.startswith(".") else lexeme for lexeme in lexemes]
