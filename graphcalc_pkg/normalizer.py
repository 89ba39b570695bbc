"""Calculator notation normalization.

Rewrites keypad notation into plain infix text the expression engine
accepts. Each rewrite is a named rule; ``normalize`` applies them in the
order of ``RULES``. Later rules rely on the output of earlier ones (the
implicit multiplication rule looks for the ``sqrt(`` produced by the
radical rule), so the order is part of the contract.

Known limitations, kept on purpose:
- The radical rule only opens ``sqrt(``; the closing parenthesis is the
  caller's responsibility (the keypad inserts ``sqrt()`` itself).
- Absolute value bars are converted in a single pass and only where the
  bars enclose no other bar, so ``||x|-1|`` becomes ``|abs(x)-1|``.
- Implicit multiplication is only made explicit in front of ``sqrt(``.
  ``2x``, ``)(`` and ``3π`` are left alone and fail to compile.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from .config import (
    ABS_BARS_REGEX,
    DIVISION_GLYPH,
    MINUS_GLYPH,
    MULTIPLICATION_GLYPH,
    PI_GLYPH,
    RADICAL_GLYPH,
    RADICAL_JUXTAPOSITION_REGEX,
)


@dataclass(frozen=True)
class NormalizationRule:
    """A single text rewrite.

    ``pattern`` is either a literal string (replaced everywhere) or a
    compiled regex; ``replacement`` follows ``re.sub`` semantics for the
    latter.
    """

    name: str
    pattern: Union[str, "re.Pattern[str]"]
    replacement: Union[str, Callable[["re.Match[str]"], str]]

    def apply(self, text: str) -> str:
        if isinstance(self.pattern, str):
            return text.replace(self.pattern, self.replacement)  # type: ignore[arg-type]
        return self.pattern.sub(self.replacement, text)


RADICAL = NormalizationRule("radical", RADICAL_GLYPH, "sqrt(")
ABSOLUTE_VALUE = NormalizationRule("absolute_value", ABS_BARS_REGEX, r"abs(\1)")
PI = NormalizationRule("pi", PI_GLYPH, "pi")
DIVISION = NormalizationRule("division", DIVISION_GLYPH, "/")
MULTIPLICATION = NormalizationRule("multiplication", MULTIPLICATION_GLYPH, "*")
MINUS = NormalizationRule("minus", MINUS_GLYPH, "-")
RADICAL_IMPLICIT_MULTIPLICATION = NormalizationRule(
    "radical_implicit_multiplication", RADICAL_JUXTAPOSITION_REGEX, r"\1*"
)

RULES: tuple[NormalizationRule, ...] = (
    RADICAL,
    ABSOLUTE_VALUE,
    PI,
    DIVISION,
    MULTIPLICATION,
    MINUS,
    RADICAL_IMPLICIT_MULTIPLICATION,
)


def apply_rule(rule: NormalizationRule, text: str) -> str:
    """Apply one rule to ``text``."""
    return rule.apply(text)


def normalize(raw: str | None, rules: tuple[NormalizationRule, ...] = RULES) -> str:
    """Rewrite calculator notation into engine syntax.

    Never raises: fragments no rule recognizes pass through unchanged and
    are left for the compiler to reject.

    Args:
        raw: Text as typed on the keypad (e.g. "2√x", "|x−1|÷π")
        rules: Rules to apply, in order (default: RULES)

    Returns:
        Normalized text (e.g. "2*sqrt(x", "abs(x-1)/pi")

    Examples:
        >>> normalize("|x-1|")
        'abs(x-1)'
        >>> normalize("2√x")
        '2*sqrt(x'
    """
    text = raw or ""
    for rule in rules:
        text = rule.apply(text)
    return text


def contains_calculator_glyphs(text: str) -> bool:
    """True if ``text`` still holds any keypad-only glyph or absolute value bar."""
    glyphs = (RADICAL_GLYPH, PI_GLYPH, DIVISION_GLYPH, MULTIPLICATION_GLYPH, MINUS_GLYPH, "|")
    return any(glyph in text for glyph in glyphs)
