"""Public API for graphcalc - returns structured objects without side effects."""

from __future__ import annotations

from typing import Sequence, Union

from .config import DEFAULT_STEP, DEFAULT_VARIABLE, DEFAULT_X_MAX, DEFAULT_X_MIN
from .editor import function_color, function_name
from .evaluator import compile_expression
from .logging_config import get_logger
from .normalizer import normalize
from .pipeline import plot_functions
from .types import CompileError, Domain, EvalResult, EvaluationError, FunctionDefinition, PlotResult

logger = get_logger("api")


def normalize_expression(expression: str) -> str:
    """Rewrite calculator notation into engine syntax.

    Example:
        >>> from graphcalc_pkg.api import normalize_expression
        >>> normalize_expression("|x−1|÷2")
        'abs(x-1)/2'
    """
    return normalize(expression)


def validate_expression(expression: str, variable: str = DEFAULT_VARIABLE) -> tuple[bool, str | None]:
    """Check that an expression would compile, without sampling it.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from graphcalc_pkg.api import validate_expression
        >>> validate_expression("sin(x)")
        (True, None)
        >>> validate_expression("3π")[0]
        False
    """
    try:
        compile_expression(normalize(expression), variable)
        return True, None
    except CompileError as e:
        return False, e.message


def evaluate(expression: str, x: float, variable: str = DEFAULT_VARIABLE) -> EvalResult:
    """Evaluate a calculator expression at a single point.

    Example:
        >>> from graphcalc_pkg.api import evaluate
        >>> evaluate("x^2", 3).y
        9.0
    """
    normalized = normalize(expression)
    try:
        compiled = compile_expression(normalized, variable)
    except CompileError as e:
        return EvalResult(ok=False, x=x, normalized=normalized, error=e.message)
    try:
        y = compiled.evaluate(x)
    except EvaluationError as e:
        return EvalResult(ok=False, x=x, normalized=normalized, error=e.message)
    return EvalResult(ok=True, x=x, y=y, normalized=normalized)


def _as_definitions(
    expressions: Sequence[Union[str, FunctionDefinition]], colors: Sequence[str] | None
) -> list[FunctionDefinition]:
    # Raw strings get ids after every FunctionDefinition id so the set stays unique
    next_id = max((item.id for item in expressions if isinstance(item, FunctionDefinition)), default=0) + 1
    definitions = []
    for index, item in enumerate(expressions, start=1):
        if isinstance(item, FunctionDefinition):
            definitions.append(item)
            continue
        color = colors[index - 1] if colors and index <= len(colors) else function_color(next_id)
        definitions.append(FunctionDefinition(next_id, function_name(next_id), item, color))
        next_id += 1
    return definitions


def plot(
    expressions: Sequence[Union[str, FunctionDefinition]],
    start: float = DEFAULT_X_MIN,
    end: float = DEFAULT_X_MAX,
    step: float = DEFAULT_STEP,
    colors: Sequence[str] | None = None,
    variable: str = DEFAULT_VARIABLE,
) -> PlotResult:
    """Sample one or more functions for plotting.

    Args:
        expressions: Raw calculator strings (named f(x), g(x), ... in order,
            with ids after the largest FunctionDefinition id) or
            FunctionDefinitions
        start: Left end of the domain
        end: Right end of the domain (inclusive)
        step: Distance between samples
        colors: Optional colors for raw strings, by position
        variable: Free variable name

    Returns:
        PlotResult with one Series per expression, or ok=False if any
        expression fails to compile

    Raises:
        ValidationError: If the domain is invalid or two FunctionDefinitions
            share an id

    Example:
        >>> from graphcalc_pkg.api import plot
        >>> result = plot(["x^2", "sin(x)"])
        >>> [len(s.points) for s in result.series]
        [201, 201]
    """
    definitions = _as_definitions(expressions, colors)
    return plot_functions(definitions, Domain(start, end, step), variable)
