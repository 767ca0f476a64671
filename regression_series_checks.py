from constant_folder import fold
from errors import ParseFailure
from expression_normalizer import normalize
from expression_parser import bracket
from formula_compiler import compile_expression
from series_engine import SeriesCache
from series_logging import configure_logging
import cmath
import math
import sys


def _value(expr: str, x=0.0, n=0):
	engine = SeriesCache()
	engine.recompile([expr])
	return engine.value_at(0, x, n)


def _close(a, b, tol: float = 1e-9) -> bool:
	if a is None or b is None:
		return False
	return abs(a - b) <= tol


def inspect_expression(expr: str, *, x=0.0, n=0) -> None:
	"""Imprime cada etapa de la compilación y el valor en (x, n)."""
	print("Expression inspection")
	print(f"raw:        {expr}")

	result = compile_expression(expr)
	if isinstance(result, ParseFailure):
		print(f"rejected:   {result.reason}")
		return

	normalized = normalize(expr)
	print(f"normalized: {normalized}")
	print(f"bracketed:  {bracket(normalized)}")
	print(f"folded:     {fold(normalized)}")
	print(f"tokens:     {list(result)}")
	print(f"value:      {_value(expr, x=x, n=n)}  (x={x}, n={n})")


def run_regressions() -> None:
	checks: list[tuple[str, bool]] = []
	expected_actual: list[tuple[str, str, str]] = []

	value_square = _value("x^2", x=3.0)
	expected_actual.append(("x^2 at x=3", "9.0", str(value_square)))
	checks.append(("x^2 at x=3 is exactly 9", value_square == 9.0))

	checks.append(("sin(x) at x=0 is 0", _value("sin(x)", x=0.0) == 0.0))
	checks.append((
		"sin(pi) is negligible",
		abs(_value("sin(pi)", x=0.0)) < 1e-12,
	))

	value_sum = _value("sum(1;n;x;i)", x=2.0, n=5)
	expected_actual.append(("sum(1;n;x;i) at x=2, n=5", "10.0", str(value_sum)))
	checks.append(("sum over i of x counts n terms", _close(value_sum, 10.0)))

	checks.append(("empty sum is 0", _value("sum(5;3;k^2;k)") == 0.0))
	checks.append(("empty product is 1", _value("prod(5;3;k^2;k)") == 1.0))
	checks.append(("non-integer sum bound is nan", math.isnan(_value("sum(1;2.5;k;k)"))))

	checks.append(("3++2 is rejected", isinstance(compile_expression("3++2"), ParseFailure)))
	checks.append((
		"int(0;1;x;x) is rejected",
		isinstance(compile_expression("int(0;1;x;x)"), ParseFailure),
	))
	checks.append(("(x)) is rejected", isinstance(compile_expression("(x))"), ParseFailure)))

	checks.append(("2x is 2*x", _value("2x", x=4.0) == 8.0))
	checks.append(("|x| is abs(x)", _value("|x|", x=-3.0) == 3.0))
	checks.append(("90° is pi/2", _close(_value("90°"), math.pi / 2)))
	checks.append(("50% is 0.5", _close(_value("50%"), 0.5)))
	checks.append(("-x^2 keeps precedence", _value("-x^2", x=3.0) == -9.0))

	value_i = _value("i^2", x=1j)
	checks.append(("i^2 is -1", _close(value_i, -1 + 0j, 1e-12)))
	checks.append(("sqrt(x) of -1 is nan on the real axis", math.isnan(_value("sqrt(x)", x=-1.0))))
	checks.append(("sqrt(x) of -1 is i on the complex plane", _close(_value("sqrt(x)", x=-1 + 0j), 1j)))

	value_integral = _value("int(0;x;t^2;t)", x=3.0)
	expected_actual.append(("int(0;x;t^2;t) at x=3", "≈9", f"{value_integral:.4f}"))
	checks.append(("integral of t^2 on [0,3] is close to 9", abs(value_integral - 9.0) < 0.05))

	engine = SeriesCache()
	engine.recompile(["int(0;x;t;t)"])
	cold = engine.value_at(0, 5.0, 0)
	extended = engine.value_at(0, 10.0, 0)
	checks.append(("cached integral extends to [0,10]", abs(extended - 50.0) < 0.5))
	checks.append(("cold integral on [0,5] is close to 12.5", abs(cold - 12.5) < 0.05))

	value_log = _value("log(x;1)", x=8.0)
	checks.append(("log with base 1 is nan", math.isnan(value_log)))
	checks.append(("log(8;2) is 3", _close(_value("log(8;2)"), 3.0)))

	value_atan = _value("atan(x)", x=1 + 1j)
	checks.append(("atan(1+i) matches cmath", _close(value_atan, cmath.atan(1 + 1j))))

	failed = [name for name, ok in checks if not ok]
	for name, ok in checks:
		print(f"{name}: {'OK' if ok else 'FAIL'}")

	print("\nExpected vs Actual:")
	for label, expected, actual in expected_actual:
		print(f"- {label}")
		print(f"  expected: {expected}")
		print(f"  actual:   {actual}")

	if failed:
		print("\nFAILED CHECKS:")
		for name in failed:
			print(f"- {name}")
		raise SystemExit(1)

	print("\nAll regression checks passed.")


if __name__ == "__main__":
	# Uso rápido:
	#   python regression_series_checks.py
	#   python regression_series_checks.py --inspect "sum(1;n;k^2;k)" --n 4
	#   python regression_series_checks.py --inspect "sqrt(x)" --x -4 --complex
	configure_logging("WARNING")
	if "--inspect" in sys.argv:
		try:
			expr = sys.argv[sys.argv.index("--inspect") + 1]
		except (ValueError, IndexError):
			raise SystemExit("Missing expression after --inspect")

		def _read_number(flag: str, default, kind):
			if flag not in sys.argv:
				return default
			idx = sys.argv.index(flag)
			try:
				return kind(sys.argv[idx + 1])
			except (ValueError, IndexError):
				raise SystemExit(f"Invalid value for {flag}")

		x_value = _read_number("--x", 0.0, float)
		if "--complex" in sys.argv:
			x_value = complex(x_value)
		inspect_expression(expr, x=x_value, n=_read_number("--n", 0, int))
	else:
		run_regressions()
