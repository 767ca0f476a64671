"""Tablas de símbolos y separación en lexemas de las expresiones de serie."""

import string

SIMPLE_OPERATORS = "+-*/^"
POSTFIX_OPERATORS = "°%"
ARGUMENT_SEPARATOR = ";"

FREE_VARIABLES = ("x", "n")
IMAGINARY_UNIT = "i"

AGGREGATES = ("sum", "prod", "int")

# Número de argumentos de cada función; los agregados incluyen la variable ligada
FUNCTION_ARITY = {
    "sin": 1,
    "cos": 1,
    "tan": 1,
    "cot": 1,
    "sinh": 1,
    "cosh": 1,
    "tanh": 1,
    "coth": 1,
    "asin": 1,
    "acos": 1,
    "atan": 1,
    "acot": 1,
    "asinh": 1,
    "acosh": 1,
    "atanh": 1,
    "acoth": 1,
    "sqrt": 1,
    "exp": 1,
    "ln": 1,
    "lg": 1,
    "abs": 1,
    "re": 1,
    "im": 1,
    "conj": 1,
    "sign": 1,
    "floor": 1,
    "ceil": 1,
    "log": 2,
    "sum": 4,
    "prod": 4,
    "int": 4,
}

CONSTANTS = ("pi", "e")

_KNOWN_NAMES = sorted((*FUNCTION_ARITY, *CONSTANTS), key=len, reverse=True)
_LETTERS = frozenset(string.ascii_letters)
_NUMERAL_CHARS = frozenset(string.digits + ".")


def is_function(lexeme: str) -> bool:
    return lexeme in FUNCTION_ARITY


def is_numeral(lexeme: str) -> bool:
    return bool(lexeme) and lexeme[0] in _NUMERAL_CHARS


def is_symbol(lexeme: str) -> bool:
    """Constante o letra suelta: algo que denota un valor."""
    if lexeme in CONSTANTS:
        return True
    return len(lexeme) == 1 and lexeme in _LETTERS


def split_names(run: str) -> list[str]:
    """Parte una tira de letras en nombres conocidos y letras sueltas.

    Se prueba siempre el nombre más largo posible, de modo que ``sinh``
    no se lea como ``sin`` seguido de ``h`` ni ``sign`` como ``sin·g``.
    """
    names = []
    i = 0
    while i < len(run):
        for name in _KNOWN_NAMES:
            if run.startswith(name, i):
                names.append(name)
                i += len(name)
                break
        else:
            names.append(run[i])
            i += 1
    return names


def lex(expr: str) -> list[str]:
    """Divide una expresión sin espacios en lexemas.

    Los numerales son tiras máximas de dígitos y puntos; las letras se
    separan con :func:`split_names`; cualquier otro carácter queda como
    lexema de un solo carácter para que la validación lo rechace después.
    """
    lexemes = []
    i = 0
    while i < len(expr):
        ch = expr[i]
        if ch in _NUMERAL_CHARS:
            j = i
            while j < len(expr) and expr[j] in _NUMERAL_CHARS:
                j += 1
            lexemes.append(expr[i:j])
            i = j
        elif ch in _LETTERS:
            j = i
            while j < len(expr) and expr[j] in _LETTERS:
                j += 1
            lexemes.extend(split_names(expr[i:j]))
            i = j
        else:
            lexemes.append(ch)
            i += 1
    return lexemes
