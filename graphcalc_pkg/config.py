"""Centralized configuration for graphcalc.

This module defines:
- The default sampling domain (matches the plot viewport)
- Input and sampling limits
- Names the expression engine is allowed to resolve
- SymPy parsing transformations
- Regex patterns for the notation rewrite rules
- Default colors and names for new functions

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with GRAPHCALC_)
"""

import os
import re

import sympy as sp
from sympy.parsing.sympy_parser import convert_xor, standard_transformations

try:
    import importlib.metadata

    VERSION = importlib.metadata.version("graphcalc")
except Exception:
    # Package metadata is missing when running from a source checkout
    VERSION = "0.1.0"

# Default sampling domain
DEFAULT_X_MIN = float(os.getenv("GRAPHCALC_X_MIN", "-10"))
DEFAULT_X_MAX = float(os.getenv("GRAPHCALC_X_MAX", "10"))
DEFAULT_STEP = float(os.getenv("GRAPHCALC_STEP", "0.1"))
DEFAULT_VARIABLE = os.getenv("GRAPHCALC_VARIABLE", "x")

# Input and sampling limits
MAX_INPUT_LENGTH = int(os.getenv("GRAPHCALC_MAX_INPUT_LENGTH", "1000"))  # characters
MAX_SAMPLES = int(os.getenv("GRAPHCALC_MAX_SAMPLES", "100000"))  # points per curve

# x values are rounded to this many decimals to remove float drift from the step
SAMPLE_ROUNDING_DIGITS = int(os.getenv("GRAPHCALC_SAMPLE_ROUNDING_DIGITS", "12"))

# Imaginary parts smaller than this are treated as rounding noise
IMAGINARY_TOLERANCE = float(os.getenv("GRAPHCALC_IMAGINARY_TOLERANCE", "1e-12"))

OUTPUT_PRECISION = int(os.getenv("GRAPHCALC_OUTPUT_PRECISION", "6"))


def real_cbrt(arg, **kwargs):
    """Real cube root, negative for negative ``arg`` (sp.cbrt is the principal root)."""
    return sp.sign(arg) * sp.Abs(arg) ** sp.Rational(1, 3)


# Any callable here may be called with evaluate=False while parsing
ALLOWED_NAMES = {
    "pi": sp.pi,
    "e": sp.E,
    "sqrt": sp.sqrt,
    "cbrt": real_cbrt,
    "abs": sp.Abs,
    "exp": sp.exp,
    "log": sp.log,
    "ln": sp.log,
    "log10": lambda arg, **kwargs: sp.log(arg, 10),
    "log2": lambda arg, **kwargs: sp.log(arg, 2),
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "sec": sp.sec,
    "csc": sp.csc,
    "cot": sp.cot,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "sign": sp.sign,
    "mod": sp.Mod,
}

# No implicit multiplication: "2x" and "3pi" must stay compile errors
TRANSFORMATIONS = standard_transformations + (convert_xor,)

# parse_expr evaluates Python, so refuse anything that reaches outside math
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
)

# Calculator glyphs produced by the keypad
RADICAL_GLYPH = "√"
PI_GLYPH = "π"
DIVISION_GLYPH = "÷"
MULTIPLICATION_GLYPH = "×"
MINUS_GLYPH = "−"

ABS_BARS_REGEX = re.compile(r"\|([^|]+)\|")
RADICAL_JUXTAPOSITION_REGEX = re.compile(r"([A-Za-z0-9)])(?=sqrt\()")

INVALID_EXPRESSION_MESSAGE = "Invalid expression. Try something like: sin(x), x^2, etc."

# New function slots
PALETTE = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)
FUNCTION_NAMES = ("f", "g", "h", "p", "q", "r")

# Plot theme
PLOT_BACKGROUND = "#0d0d0d"
PLOT_GRID_COLOR = "#333"
PLOT_FOREGROUND = "white"
PLOT_LINE_WIDTH = 2
