"""Batch plotting: normalize, compile and sample a list of FunctionDefinitions.

A batch is all-or-nothing at the expression level: if any definition
fails to compile, the whole request fails and no series are returned.
Point-level failures only leave gaps in the affected curve.
"""

from __future__ import annotations

from typing import Sequence

from .config import DEFAULT_VARIABLE, INVALID_EXPRESSION_MESSAGE
from .evaluator import CompiledExpression, compile_expression, sample, sample_xs
from .logging_config import get_logger
from .normalizer import contains_calculator_glyphs, normalize
from .types import CompileError, Domain, FunctionDefinition, PlotResult, ValidationError

logger = get_logger("pipeline")


def compile_definition(
    definition: FunctionDefinition, variable: str = DEFAULT_VARIABLE
) -> CompiledExpression:
    """Normalize and compile one definition.

    Raises:
        CompileError: Attributed to ``definition`` (id and name are set)
    """
    normalized = normalize(definition.raw_expression)
    context = {"function_id": definition.id, "function_name": definition.name}
    logger.debug(f"{definition.raw_expression!r} -> {normalized!r}", extra=context)
    if contains_calculator_glyphs(normalized):
        logger.debug(f"Calculator glyphs left after normalization in {normalized!r}", extra=context)
    try:
        return compile_expression(normalized, variable)
    except CompileError as e:
        raise CompileError(
            e.message,
            e.code,
            detail=e.detail,
            expression=e.expression,
            function_id=definition.id,
            function_name=definition.name,
        ) from e


def plot_functions(
    definitions: Sequence[FunctionDefinition],
    domain: Domain | None = None,
    variable: str = DEFAULT_VARIABLE,
) -> PlotResult:
    """Plot every definition over ``domain``.

    Args:
        definitions: Functions to plot, in display order
        domain: Sampling domain (default: -10..10, step 0.1)
        variable: Free variable name (default: "x")

    Returns:
        PlotResult with one Series per definition in the same order, or
        ok=False naming the first definition that failed to compile

    Raises:
        ValidationError: If ``domain`` is invalid or two definitions share an id
    """
    seen: set[int] = set()
    for definition in definitions:
        if definition.id in seen:
            raise ValidationError(f"Duplicate function id {definition.id}", "DUPLICATE_ID")
        seen.add(definition.id)

    domain = domain or Domain()
    # Validate before compiling so a bad domain is reported as such
    sample_xs(domain)

    compiled: list[tuple[FunctionDefinition, CompiledExpression]] = []
    for definition in definitions:
        try:
            compiled.append((definition, compile_definition(definition, variable)))
        except CompileError as e:
            logger.warning(
                f"Plot aborted: {definition.name} failed to compile: {e.message}",
                extra={"function_id": definition.id, "function_name": definition.name},
            )
            return PlotResult(
                ok=False,
                error=INVALID_EXPRESSION_MESSAGE,
                detail=e.detail or e.message,
                function_id=e.function_id,
                function_name=e.function_name,
            )

    series = [
        sample(expr, domain, name=definition.name, color=definition.color, function_id=definition.id)
        for definition, expr in compiled
    ]
    logger.info(f"Plotted {len(series)} function(s) over [{domain.start}, {domain.end}] step {domain.step}")
    return PlotResult(ok=True, series=series)
