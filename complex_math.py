"""Funciones complejas en forma cerrada para el evaluador de series."""

import math

from errors import DomainError

NAN = complex(math.nan, math.nan)

_HALF_PI = math.pi / 2


def _sign(value: float) -> int:
    return 1 if value >= 0 else -1


# ── Aritmética ───────────────────────────────────────────────────

def add(a: complex, b: complex) -> complex:
    return complex(a.real + b.real, a.imag + b.imag)


def subtract(a: complex, b: complex) -> complex:
    return complex(a.real - b.real, a.imag - b.imag)


def multiply(a: complex, b: complex) -> complex:
    return complex(
        a.real * b.real - a.imag * b.imag,
        a.real * b.imag + a.imag * b.real,
    )


def divide(a: complex, b: complex) -> complex:
    denominator = b.real * b.real + b.imag * b.imag
    if denominator == 0:
        raise DomainError("División por cero")
    return complex(
        (a.real * b.real + a.imag * b.imag) / denominator,
        (a.imag * b.real - a.real * b.imag) / denominator,
    )


def power(base: complex, exponent: complex) -> complex:
    """Potencia principal en forma polar; por convenio 0^w = 0."""
    if base == 0:
        return 0j
    # con |base| y no |base|², los extremos no se desbordan antes de exponenciar
    r = math.hypot(base.real, base.imag)
    argument = math.atan2(base.imag, base.real)
    factor = r ** exponent.real * math.exp(-exponent.imag * argument)
    angle = exponent.real * argument + math.log(r) * exponent.imag
    return complex(factor * math.cos(angle), factor * math.sin(angle))


# ── Exponencial y logaritmos ─────────────────────────────────────

def modulus(z: complex) -> float:
    return math.hypot(z.real, z.imag)


def argument(z: complex) -> float:
    if z == 0:
        raise DomainError("El argumento de 0 no está definido")
    r = modulus(z)
    if z.imag == 0 and z.real < 0:
        return math.pi
    if z.real + r == 0:
        return math.copysign(math.pi, z.imag)
    return 2 * math.atan(z.imag / (z.real + r))


def exp(z: complex) -> complex:
    scale = math.exp(z.real)
    return complex(scale * math.cos(z.imag), scale * math.sin(z.imag))


def ln(z: complex) -> complex:
    if z == 0:
        raise DomainError("Logaritmo de cero")
    return complex(math.log(modulus(z)), argument(z))


def lg(z: complex) -> complex:
    value = ln(z)
    return complex(value.real / math.log(10), value.imag / math.log(10))


def log(a: complex, base: complex) -> complex:
    if base == 1:
        raise DomainError("Base de logaritmo igual a 1")
    return divide(ln(a), ln(base))


def sqrt(z: complex) -> complex:
    r = modulus(z)
    return complex(
        math.sqrt(max(r + z.real, 0.0) / 2),
        _sign(z.imag) * math.sqrt(max(r - z.real, 0.0) / 2),
    )


# ── Trigonométricas e hiperbólicas ───────────────────────────────

def sin(z: complex) -> complex:
    return complex(math.sin(z.real) * math.cosh(z.imag), math.cos(z.real) * math.sinh(z.imag))


def cos(z: complex) -> complex:
    return complex(math.cos(z.real) * math.cosh(z.imag), -math.sin(z.real) * math.sinh(z.imag))


def tan(z: complex) -> complex:
    return divide(sin(z), cos(z))


def cot(z: complex) -> complex:
    return divide(cos(z), sin(z))


def sinh(z: complex) -> complex:
    return complex(math.cos(z.imag) * math.sinh(z.real), math.sin(z.imag) * math.cosh(z.real))


def cosh(z: complex) -> complex:
    return complex(math.cos(z.imag) * math.cosh(z.real), math.sin(z.imag) * math.sinh(z.real))


def tanh(z: complex) -> complex:
    denominator = math.cosh(2 * z.real) + math.cos(2 * z.imag)
    if denominator == 0:
        raise DomainError("tanh no está definida en este punto")
    return complex(math.sinh(2 * z.real) / denominator, math.sin(2 * z.imag) / denominator)


def coth(z: complex) -> complex:
    denominator = math.cosh(2 * z.real) - math.cos(2 * z.imag)
    if denominator == 0:
        raise DomainError("coth no está definida en este punto")
    return complex(math.sinh(2 * z.real) / denominator, -math.sin(2 * z.imag) / denominator)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def asin(z: complex) -> complex:
    """Arcoseno principal a partir de la identidad real con acos y acosh."""
    a, b = z.real, z.imag
    squares = a * a + b * b
    root = math.sqrt((squares - 1) ** 2 + 4 * b * b)
    real = _sign(a) / 2 * math.acos(_clamp(root - squares, -1.0, 1.0))
    imag = _sign(b) / 2 * math.acosh(max(root + squares, 1.0))
    return complex(real, imag)


def acos(z: complex) -> complex:
    return subtract(complex(_HALF_PI, 0), asin(z))


def atan(z: complex) -> complex:
    """Arcotangente principal: atan z = (i/2)·ln((1 - iz)/(1 + iz)).

    Separando partes se obtiene
        Re = ½·atan2(2a, 1 - a² - b²)
        Im = ¼·ln((a² + (1 + b)²) / (a² + (1 - b)²))
    que no está definida en z = ±i.
    """
    a, b = z.real, z.imag
    below = a * a + (1 - b) ** 2
    above = a * a + (1 + b) ** 2
    if below == 0 or above == 0:
        raise DomainError("atan no está definida en ±i")
    real = 0.5 * math.atan2(2 * a, 1 - a * a - b * b)
    imag = 0.25 * math.log(above / below)
    return complex(real, imag)


def acot(z: complex) -> complex:
    return subtract(complex(_HALF_PI, 0), atan(z))


def asinh(z: complex) -> complex:
    return ln(add(z, sqrt(add(multiply(z, z), 1 + 0j))))


def acosh(z: complex) -> complex:
    return ln(add(z, multiply(sqrt(add(z, 1 + 0j)), sqrt(subtract(z, 1 + 0j)))))


def atanh(z: complex) -> complex:
    difference = subtract(ln(add(1 + 0j, z)), ln(subtract(1 + 0j, z)))
    return complex(difference.real / 2, difference.imag / 2)


def acoth(z: complex) -> complex:
    return atanh(divide(1 + 0j, z))


# ── Partes y redondeos ───────────────────────────────────────────

def absolute(z: complex) -> complex:
    return complex(modulus(z), 0)


def real_part(z: complex) -> complex:
    return complex(z.real, 0)


def imaginary_part(z: complex) -> complex:
    return complex(z.imag, 0)


def conjugate(z: complex) -> complex:
    return complex(z.real, -z.imag)


def sign(z: complex) -> complex:
    return divide(z, absolute(z))


def floor(z: complex) -> complex:
    return complex(math.floor(z.real), math.floor(z.imag))


def ceil(z: complex) -> complex:
    return complex(math.ceil(z.real), math.ceil(z.imag))


class ComplexMathProvider:
    """Provee las operaciones del evaluador en un namespace por nombre."""

    def __init__(self, angle_mode: str = "rad"):
        self._angle_mode = "rad"
        self.angle_mode = angle_mode

    @property
    def angle_mode(self) -> str:
        return self._angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        if mode not in ("rad", "deg"):
            raise ValueError("El modo debe ser 'rad' o 'deg'")
        self._angle_mode = mode

    def build_namespace(self) -> dict:
        mode = self._angle_mode
        to_rad = complex(math.pi / 180, 0)
        to_deg = complex(180 / math.pi, 0)

        def _trig(fn):
            def w(z):
                return fn(multiply(z, to_rad) if mode == "deg" else z)

            return w

        def _inv_trig(fn):
            def w(z):
                r = fn(z)
                return multiply(r, to_deg) if mode == "deg" else r

            return w

        return {
            "+": add,
            "-": subtract,
            "*": multiply,
            "/": divide,
            "^": power,
            "sin": _trig(sin),
            "cos": _trig(cos),
            "tan": _trig(tan),
            "cot": _trig(cot),
            "asin": _inv_trig(asin),
            "acos": _inv_trig(acos),
            "atan": _inv_trig(atan),
            "acot": _inv_trig(acot),
            "sinh": sinh,
            "cosh": cosh,
            "tanh": tanh,
            "coth": coth,
            "asinh": asinh,
            "acosh": acosh,
            "atanh": atanh,
            "acoth": acoth,
            "sqrt": sqrt,
            "exp": exp,
            "ln": ln,
            "lg": lg,
            "log": log,
            "abs": absolute,
            "re": real_part,
            "im": imaginary_part,
            "conj": conjugate,
            "sign": sign,
            "floor": floor,
            "ceil": ceil,
        }
