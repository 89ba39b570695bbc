from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from .config import VERSION
from .editor import function_color, function_name
from .logging_config import get_logger, setup_logging
from .normalizer import normalize
from .pipeline import plot_functions
from .types import Domain, FunctionDefinition, PlotResult, Series, ValidationError

logger = get_logger("cli")

EXIT_OK = 0
EXIT_INVALID_EXPRESSION = 1
EXIT_USAGE = 2


def format_number(val: Any, precision: int | None = None) -> str:
    """Format a numeric value with the configured number of significant digits."""
    if precision is None:
        from . import config as _config

        precision = _config.OUTPUT_PRECISION
    try:
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        return str(val)


def describe_series(series: Series, raw_expression: str) -> str:
    """One summary line per curve for human output."""
    defined = [y for y in series.ys if y is not None]
    line = (
        f"{series.name} = {raw_expression}  [{series.color}]  "
        f"{len(series.points)} points, {len(defined)} defined"
    )
    if defined:
        line += f", y in [{format_number(min(defined))}, {format_number(max(defined))}]"
    return line


def print_result(
    result: PlotResult,
    definitions: list[FunctionDefinition],
    output_format: str = "human",
    ascii_plot: bool = False,
) -> None:
    if output_format == "json":
        print(json.dumps(result.to_dict()))
        return
    if not result.ok:
        print(f"Error: {result.error}")
        if result.function_name:
            print(f"  in {result.function_name}: {result.detail}")
        return
    raw_by_id = {d.id: d.raw_expression for d in definitions}
    for s in result.series:
        print(describe_series(s, raw_by_id.get(s.function_id, "")))
    if ascii_plot:
        from .plotting import render_ascii

        try:
            print(render_ascii(result.series))
        except ValueError as e:
            print(f"Error: {e}")


def _health_check() -> int:
    """Import the numeric stack and plot a known curve."""
    print("graphcalc health check")
    try:
        import matplotlib
        import numpy
        import sympy

        print(f"  SymPy {sympy.__version__}")
        print(f"  NumPy {numpy.__version__}")
        print(f"  matplotlib {matplotlib.__version__}")
    except ImportError as e:
        print(f"  Missing dependency: {e}")
        return 1
    result = plot_functions([FunctionDefinition(1, "f(x)", "x^2", function_color(1))])
    if not result.ok or result.series[0].points[130].y is None:
        print("  Sampling check: FAILED")
        return 1
    print("  Sampling check: OK")
    return 0


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the graphcalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, 1 for an invalid expression, 2 for bad arguments)
    """
    from . import config as _config

    parser = argparse.ArgumentParser(
        prog="graphcalc",
        description="Plot calculator-notation functions of x (e.g. 'x^2', '2√x', '|x−1|').",
    )
    parser.add_argument("expressions", nargs="*", help="Function expressions, plotted as f(x), g(x), ...")
    parser.add_argument("--start", type=float, default=_config.DEFAULT_X_MIN, help="Domain start")
    parser.add_argument("--end", type=float, default=_config.DEFAULT_X_MAX, help="Domain end (inclusive)")
    parser.add_argument("--step", type=float, default=_config.DEFAULT_STEP, help="Sampling step")
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument("--ascii", action="store_true", help="Print an ASCII plot (human format)")
    parser.add_argument("-o", "--output", type=str, help="Save the plot as a PNG file")
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Only print each expression after notation normalization",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument("-v", "--version", action="store_true", help="Show program version")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.precision and args.precision > 0:
        _config.OUTPUT_PRECISION = int(args.precision)

    if args.version:
        print(VERSION)
        return EXIT_OK
    if args.health_check:
        return _health_check()
    if not args.expressions:
        parser.print_usage()
        print("Error: at least one expression is required")
        return EXIT_USAGE

    if args.normalize:
        for raw in args.expressions:
            print(normalize(raw))
        return EXIT_OK

    definitions = [
        FunctionDefinition(i, function_name(i), raw, function_color(i))
        for i, raw in enumerate(args.expressions, start=1)
    ]
    domain = Domain(args.start, args.end, args.step)
    try:
        result = plot_functions(definitions, domain)
    except ValidationError as e:
        print(f"Error: {e}")
        return EXIT_USAGE

    print_result(result, definitions, output_format=args.format, ascii_plot=args.ascii)
    if not result.ok:
        return EXIT_INVALID_EXPRESSION

    if args.output:
        from .plotting import render_png

        path = render_png(result.series, args.output, domain=domain)
        if args.format == "human":
            print(f"Plot saved to: {path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main_entry())
