"""Evaluación de una TokenList en valores concretos de x y n."""

from __future__ import annotations

from aggregate_engine import (
    IntegralCache,
    cached_integral,
    discrete_product,
    discrete_sum,
    real_bound,
    riemann_integral,
)
from complex_math import NAN, ComplexMathProvider
from errors import DomainError, ResourceError
from expression_parser import Variable
from series_config import DEFAULT_INTEGRAL_STEPS
from token_list import Operator, TokenList


class Evaluator:
    """Recorre una lista prefija con un cursor y un entorno de variables.

    El entorno asocia ``x``, ``n`` y las variables ligadas activas a su
    valor; la lista compilada nunca se copia ni se modifica.
    """

    def __init__(self, provider=None, integral_steps: int = DEFAULT_INTEGRAL_STEPS):
        self._provider = provider if provider is not None else ComplexMathProvider()
        self._integral_steps = integral_steps
        self._namespace = self._provider.build_namespace()

    # ── Propiedad: modo angular ──────────────────────────────────

    @property
    def angle_mode(self) -> str:
        return self._provider.angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        self._provider.angle_mode = mode
        self._namespace = self._provider.build_namespace()

    @property
    def provider(self):
        return self._provider

    # ── Evaluación principal ─────────────────────────────────────

    def evaluate(
        self,
        tokens: TokenList,
        x,
        n,
        integral_cache: IntegralCache | None = None,
    ) -> complex:
        """Valor de la expresión en (x, n).

        Devuelve ``complex(nan, nan)`` si el punto cae fuera del dominio.

        Raises:
            ResourceError: la expresión es demasiado profunda para evaluarse.
        """
        env = {"x": complex(x), "n": complex(n)}
        try:
            value, _ = self._walk(tokens, 0, env, integral_cache)
        except (ArithmeticError, ValueError):
            return NAN
        except RecursionError as exc:
            raise ResourceError("Expresión demasiado anidada para evaluarse") from exc
        return value

    def _walk(self, tokens: TokenList, pos: int, env: dict, cache):
        token = tokens[pos]

        if isinstance(token, Operator):
            if token.arity == 4:
                return self._aggregate(token.name, tokens, pos, env, cache)
            fn = self._namespace[token.name]
            args = []
            pos += 1
            for _ in range(token.arity):
                value, pos = self._walk(tokens, pos, env, cache)
                args.append(value)
            return fn(*args), pos

        if isinstance(token, Variable):
            if token.name not in env:
                raise DomainError(f"Variable sin valor: {token.name}")
            return env[token.name], pos + 1

        return token, pos + 1

    # ── Agregados ────────────────────────────────────────────────

    def _aggregate(self, name: str, tokens: TokenList, pos: int, env: dict, cache):
        lower, pos = self._walk(tokens, pos + 1, env, cache)
        upper, pos = self._walk(tokens, pos, env, cache)
        body_start = pos
        body_end = tokens.subtree_end(body_start)
        variable = tokens[body_end].name

        def body(value):
            scope = dict(env)
            scope[variable] = complex(value)
            return self._walk(tokens, body_start, scope, cache)[0]

        if name == "sum":
            value = discrete_sum(lower, upper, body)
        elif name == "prod":
            value = discrete_product(lower, upper, body)
        else:
            a = real_bound(lower, "inferior")
            b = real_bound(upper, "superior")
            if cache is None:
                value = riemann_integral(body, a, b, self._integral_steps)
            else:
                key = self._integrand_key(tokens, body_start, body_end, variable, env)
                value = cached_integral(body, a, b, cache, key, variable, self._integral_steps)

        return value, body_end + 1

    @staticmethod
    def _integrand_key(tokens: TokenList, start: int, end: int, variable: str, env: dict) -> tuple:
        # el cuerpo solo identifica al integrando junto con los valores exteriores que lee
        outer = sorted(tokens.variables_in(start, end) - {variable})
        bindings = tuple((name, env[name]) for name in outer if name in env)
        return tokens[start:end] + bindings
