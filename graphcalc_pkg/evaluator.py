"""Expression compilation and sampling.

Compilation goes through SymPy's ``parse_expr``; numeric evaluation goes
through a numpy ``lambdify`` of the parsed expression. Compile failures
raise ``CompileError``. Failures at a single x never abort sampling:
the point is recorded with ``y=None``.
"""

from __future__ import annotations

import math
from tokenize import TokenError
from typing import Any

import numpy as np
import sympy as sp
from sympy import parse_expr
from sympy.core.function import AppliedUndef

from .config import (
    ALLOWED_NAMES,
    DEFAULT_VARIABLE,
    FORBIDDEN_TOKENS,
    IMAGINARY_TOLERANCE,
    MAX_INPUT_LENGTH,
    MAX_SAMPLES,
    SAMPLE_ROUNDING_DIGITS,
    TRANSFORMATIONS,
)
from .logging_config import get_logger
from .types import CompileError, Domain, EvaluationError, SamplePoint, Series, ValidationError

logger = get_logger("evaluator")

# ArithmeticError covers ZeroDivisionError, OverflowError and FloatingPointError.
# NameError shows up when lambdify prints a constant numpy has no name for.
_NUMERIC_ERRORS = (ValueError, TypeError, ArithmeticError, NameError)


class CompiledExpression:
    """An expression bound to a single free variable, ready for numeric evaluation."""

    def __init__(self, source: str, expr: sp.Expr, symbol: sp.Symbol):
        self.source = source
        self.expr = expr
        self.symbol = symbol
        self._func = sp.lambdify(symbol, expr, modules="numpy")

    @property
    def variable(self) -> str:
        return self.symbol.name

    def evaluate(self, x: float) -> float:
        """Evaluate at a single point.

        Raises:
            EvaluationError: If the value is not a finite real number
        """
        try:
            with np.errstate(all="ignore"):
                value = self._func(x)
        except _NUMERIC_ERRORS as e:
            raise EvaluationError(
                f"{self.source} is undefined at {self.variable}={x}: {e}", x
            ) from e
        real = _to_real(value)
        if real is None:
            raise EvaluationError(f"{self.source} is undefined at {self.variable}={x}", x)
        return real

    def evaluate_many(self, xs: np.ndarray) -> list[float | None]:
        """Evaluate over an array of x values; undefined points become None."""
        try:
            with np.errstate(all="ignore"):
                values = self._func(xs)
            values = np.broadcast_to(np.asarray(values), xs.shape)
        except _NUMERIC_ERRORS as e:
            # Some expressions (factorial, Piecewise edge cases, python ints)
            # don't vectorize; fall back to one point at a time
            logger.debug(f"Vectorized evaluation of {self.source!r} failed ({e}); sampling point by point")
            return [self._evaluate_or_none(float(x)) for x in xs]

        if np.iscomplexobj(values):
            imag_ok = np.abs(values.imag) <= IMAGINARY_TOLERANCE
            values = np.where(imag_ok, values.real, np.nan)
        try:
            values = values.astype(float)
        except (TypeError, ValueError):
            return [self._evaluate_or_none(float(x)) for x in xs]
        return [float(v) if math.isfinite(v) else None for v in values]

    def _evaluate_or_none(self, x: float) -> float | None:
        try:
            return self.evaluate(x)
        except EvaluationError as e:
            logger.debug(str(e))
            return None

    def __repr__(self) -> str:
        return f"CompiledExpression({self.source!r}, variable={self.variable!r})"


def _to_real(value: Any) -> float | None:
    """Convert an evaluation result to a finite float, or None if it isn't one."""
    try:
        number = complex(value)
    except (TypeError, ValueError):
        return None
    if abs(number.imag) > IMAGINARY_TOLERANCE:
        return None
    if not math.isfinite(number.real):
        return None
    return float(number.real)


def _check_input(normalized: str) -> str:
    text = normalized.strip() if normalized else ""
    if not text:
        raise CompileError("Expression cannot be empty", "EMPTY_EXPRESSION", expression=normalized)
    if len(text) > MAX_INPUT_LENGTH:
        raise CompileError(
            f"Expression too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG", expression=normalized
        )
    lowered = text.lower()
    for tok in FORBIDDEN_TOKENS:
        if tok in lowered:
            logger.warning(f"Blocked expression containing forbidden token {tok!r}")
            raise CompileError(
                f"Expression contains forbidden token: {tok}", "FORBIDDEN_TOKEN", expression=normalized
            )
    return text


def compile_expression(normalized: str, variable: str = DEFAULT_VARIABLE) -> CompiledExpression:
    """Compile normalized text into an expression of ``variable``.

    Args:
        normalized: Output of ``normalize`` (e.g. "x^2", "2*sqrt(x)")
        variable: Name of the free variable (default: "x")

    Returns:
        CompiledExpression bound to ``variable``

    Raises:
        CompileError: If the text is empty, not valid syntax, not a scalar
            expression, or uses unknown identifiers or functions
    """
    text = _check_input(normalized)
    symbol = sp.Symbol(variable)
    local_dict = dict(ALLOWED_NAMES)
    local_dict[variable] = symbol

    # Unevaluated, so x/x stays undefined at x=0 instead of becoming 1
    try:
        expr = parse_expr(text, local_dict=local_dict, transformations=TRANSFORMATIONS, evaluate=False)
    except (SyntaxError, TokenError, TypeError, ValueError, AttributeError, NameError, sp.SympifyError) as e:
        raise CompileError(f"Cannot parse expression {text!r}", detail=str(e) or type(e).__name__, expression=text) from e
    except Exception as e:
        logger.error(f"Unexpected error parsing {text!r}: {e}", exc_info=True)
        raise CompileError(f"Cannot parse expression {text!r}", detail=str(e), expression=text) from e

    if not isinstance(expr, sp.Expr):
        raise CompileError(
            f"Expression {text!r} does not produce a number", "NOT_SCALAR", detail=type(expr).__name__, expression=text
        )

    unknown_funcs = sorted({type(f).__name__ for f in expr.atoms(AppliedUndef)})
    if unknown_funcs:
        raise CompileError(
            f"Unknown function(s): {', '.join(unknown_funcs)}", "UNKNOWN_FUNCTION", expression=text
        )

    unknown_symbols = sorted(s.name for s in expr.free_symbols if s != symbol)
    if unknown_symbols:
        raise CompileError(
            f"Undefined symbol(s): {', '.join(unknown_symbols)}", "UNKNOWN_SYMBOL", expression=text
        )

    return CompiledExpression(text, expr, symbol)


def sample_xs(domain: Domain) -> np.ndarray:
    """x values for ``domain``: start, start+step, ... up to and including end.

    Raises:
        ValidationError: If the domain is not finite, step <= 0, end < start,
            it would produce more than MAX_SAMPLES points, or the step is
            below the rounding precision so two x values would coincide
    """
    start, end, step = float(domain.start), float(domain.end), float(domain.step)
    if not all(math.isfinite(v) for v in (start, end, step)):
        raise ValidationError("Domain bounds and step must be finite", "INVALID_DOMAIN")
    if step <= 0:
        raise ValidationError(f"Step must be positive, got {step}", "INVALID_DOMAIN")
    if end < start:
        raise ValidationError(f"Domain end ({end}) is before start ({start})", "INVALID_DOMAIN")
    span = (end - start) / step
    if not math.isfinite(span):
        raise ValidationError(f"Domain [{start}, {end}] is too wide for step {step}", "INVALID_DOMAIN")
    count = int(math.floor(span + 1e-9)) + 1
    if count > MAX_SAMPLES:
        raise ValidationError(f"Domain needs {count} samples (>{MAX_SAMPLES})", "INVALID_DOMAIN")
    xs = start + step * np.arange(count, dtype=float)
    # Rounding also turns -0.0 into 0.0 through the + 0.0
    xs = np.round(xs, SAMPLE_ROUNDING_DIGITS) + 0.0
    if count > 1 and not np.all(np.diff(xs) > 0):
        raise ValidationError(
            f"Step {step} is too small to tell x values apart near {start}", "INVALID_DOMAIN"
        )
    return xs


def sample(
    compiled: CompiledExpression,
    domain: Domain | None = None,
    name: str | None = None,
    color: str = "",
    function_id: int | None = None,
) -> Series:
    """Sample a compiled expression over ``domain`` (default -10..10 step 0.1).

    Points where the expression is undefined (division by zero, square
    root of a negative number, overflow) get ``y=None``; the rest of the
    curve is still sampled.
    """
    xs = sample_xs(domain or Domain())
    ys = compiled.evaluate_many(xs)
    points = [SamplePoint(float(x), y) for x, y in zip(xs, ys)]
    undefined = len(points) - sum(1 for p in points if p.y is not None)
    if undefined:
        logger.debug(f"{compiled.source!r}: {undefined} of {len(points)} points undefined")
    return Series(
        name=name if name is not None else compiled.source,
        color=color,
        points=points,
        function_id=function_id,
    )
