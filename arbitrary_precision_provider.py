"""Proveedor de funciones complejas calculadas con mpmath.

Cada operación se evalúa con ``working_digits`` dígitos decimales y el
resultado se redondea de vuelta a ``complex``. Sirve como referencia de
alta precisión para las formas cerradas de :mod:`complex_math` y puede
sustituir al proveedor por defecto en el motor de series.
"""

from __future__ import annotations

from errors import DomainError

try:
    from mpmath import mp
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "mpmath no está instalado. Instala con: pip install mpmath"
    ) from exc


class MPMathProvider:
    """Proveedor matemático basado en mpmath."""

    def __init__(self, working_digits: int = 30, angle_mode: str = "rad"):
        self._working_digits = max(15, working_digits)
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

    @property
    def working_digits(self) -> int:
        return self._working_digits

    def _lift(self, fn):
        dps = self._working_digits

        def wrapped(*args):
            with mp.workdps(dps):
                return complex(fn(*(mp.mpc(a) for a in args)))

        return wrapped

    def _trig(self, fn):
        mode = self._angle_mode

        def wrapped(z):
            value = z * mp.pi / 180 if mode == "deg" else z
            return fn(value)

        return self._lift(wrapped)

    def _inv_trig(self, fn):
        mode = self._angle_mode

        def wrapped(z):
            result = fn(z)
            return result * 180 / mp.pi if mode == "deg" else result

        return self._lift(wrapped)

    @staticmethod
    def _divide(a, b):
        if b == 0:
            raise DomainError("División por cero")
        return a / b

    @staticmethod
    def _power(base, exponent):
        if base == 0:
            return mp.mpc(0)
        return mp.power(base, exponent)

    @staticmethod
    def _ln(z):
        if z == 0:
            raise DomainError("Logaritmo de cero")
        return mp.log(z)

    @classmethod
    def _log(cls, a, base):
        if base == 1:
            raise DomainError("Base de logaritmo igual a 1")
        return cls._divide(cls._ln(a), cls._ln(base))

    @classmethod
    def _sign(cls, z):
        return cls._divide(z, abs(z))

    @staticmethod
    def _acot(z):
        return mp.pi / 2 - mp.atan(z)

    @staticmethod
    def _floor(z):
        return mp.mpc(mp.floor(z.real), mp.floor(z.imag))

    @staticmethod
    def _ceil(z):
        return mp.mpc(mp.ceil(z.real), mp.ceil(z.imag))

    def build_namespace(self) -> dict:
        lift = self._lift
        return {
            "+": lift(lambda a, b: a + b),
            "-": lift(lambda a, b: a - b),
            "*": lift(lambda a, b: a * b),
            "/": lift(self._divide),
            "^": lift(self._power),
            "sin": self._trig(mp.sin),
            "cos": self._trig(mp.cos),
            "tan": self._trig(mp.tan),
            "cot": self._trig(mp.cot),
            "asin": self._inv_trig(mp.asin),
            "acos": self._inv_trig(mp.acos),
            "atan": self._inv_trig(mp.atan),
            "acot": self._inv_trig(self._acot),
            "sinh": lift(mp.sinh),
            "cosh": lift(mp.cosh),
            "tanh": lift(mp.tanh),
            "coth": lift(mp.coth),
            "asinh": lift(mp.asinh),
            "acosh": lift(mp.acosh),
            "atanh": lift(mp.atanh),
            "acoth": lift(mp.acoth),
            "sqrt": lift(mp.sqrt),
            "exp": lift(mp.exp),
            "ln": lift(self._ln),
            "lg": lift(lambda z: self._ln(z) / mp.log(10)),
            "log": lift(self._log),
            "abs": lift(lambda z: mp.mpc(abs(z))),
            "re": lift(lambda z: mp.mpc(z.real)),
            "im": lift(lambda z: mp.mpc(z.imag)),
            "conj": lift(mp.conj),
            "sign": lift(self._sign),
            "floor": lift(self._floor),
            "ceil": lift(self._ceil),
        }
