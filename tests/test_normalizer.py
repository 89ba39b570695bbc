"""Unit tests for notation normalization."""

import unittest

from graphcalc_pkg.normalizer import (
    ABSOLUTE_VALUE,
    DIVISION,
    MINUS,
    MULTIPLICATION,
    PI,
    RADICAL,
    RADICAL_IMPLICIT_MULTIPLICATION,
    RULES,
    apply_rule,
    contains_calculator_glyphs,
    normalize,
)


class TestRules(unittest.TestCase):
    """Each rewrite rule on its own."""

    def test_radical_opens_call_only(self):
        self.assertEqual(apply_rule(RADICAL, "√x"), "sqrt(x")
        self.assertEqual(apply_rule(RADICAL, "√(4)"), "sqrt((4)")
        self.assertEqual(apply_rule(RADICAL, "√√x"), "sqrt(sqrt(x")

    def test_absolute_value(self):
        self.assertEqual(apply_rule(ABSOLUTE_VALUE, "|x-1|"), "abs(x-1)")
        self.assertEqual(apply_rule(ABSOLUTE_VALUE, "|x|+|x-2|"), "abs(x)+abs(x-2)")

    def test_absolute_value_nested_is_single_level(self):
        # Known limitation: only the innermost bar pair is converted
        self.assertEqual(apply_rule(ABSOLUTE_VALUE, "||x|-1|"), "|abs(x)-1|")

    def test_absolute_value_empty_bars_untouched(self):
        self.assertEqual(apply_rule(ABSOLUTE_VALUE, "||"), "||")
        self.assertEqual(apply_rule(ABSOLUTE_VALUE, "|x"), "|x")

    def test_pi(self):
        self.assertEqual(apply_rule(PI, "2*π"), "2*pi")

    def test_operator_glyphs(self):
        self.assertEqual(apply_rule(DIVISION, "1÷x"), "1/x")
        self.assertEqual(apply_rule(MULTIPLICATION, "2×x"), "2*x")
        self.assertEqual(apply_rule(MINUS, "x−1"), "x-1")

    def test_implicit_multiplication_before_sqrt(self):
        rule = RADICAL_IMPLICIT_MULTIPLICATION
        self.assertEqual(apply_rule(rule, "2sqrt(x)"), "2*sqrt(x)")
        self.assertEqual(apply_rule(rule, "xsqrt(x)"), "x*sqrt(x)")
        self.assertEqual(apply_rule(rule, "(x+1)sqrt(x)"), "(x+1)*sqrt(x)")

    def test_implicit_multiplication_is_not_general(self):
        rule = RADICAL_IMPLICIT_MULTIPLICATION
        self.assertEqual(apply_rule(rule, "2x"), "2x")
        self.assertEqual(apply_rule(rule, "(x+1)(x-1)"), "(x+1)(x-1)")
        self.assertEqual(apply_rule(rule, "1+sqrt(x)"), "1+sqrt(x)")
        self.assertEqual(apply_rule(rule, "sqrt(x)"), "sqrt(x)")


class TestNormalize(unittest.TestCase):
    """The full ordered pipeline."""

    def test_rule_order(self):
        self.assertEqual(
            [rule.name for rule in RULES],
            [
                "radical",
                "absolute_value",
                "pi",
                "division",
                "multiplication",
                "minus",
                "radical_implicit_multiplication",
            ],
        )

    def test_radical_juxtaposition(self):
        result = normalize("2√x")
        self.assertIn("2*sqrt(x", result)
        self.assertEqual(result, "2*sqrt(x")

    def test_radical_after_variable_and_pi(self):
        self.assertEqual(normalize("x√x"), "x*sqrt(x")
        self.assertEqual(normalize("π√x"), "pi*sqrt(x")

    def test_absolute_value(self):
        self.assertEqual(normalize("|x-1|"), "abs(x-1)")

    def test_pi_juxtaposition_is_not_expanded(self):
        # 3π stays "3pi" and is rejected by the compiler
        self.assertEqual(normalize("3π"), "3pi")

    def test_mixed_glyphs(self):
        self.assertEqual(normalize("|x−1|÷π×2"), "abs(x-1)/pi*2")

    def test_empty_and_none(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize(None), "")

    def test_plain_text_unchanged(self):
        for text in ("x^2", "sin(x)+cos(x)", "1/x", "2x", "abs(x)"):
            self.assertEqual(normalize(text), text)

    def test_idempotent_on_plain_input(self):
        for text in ("x^2", "sin(x)", "2*sqrt(x)", "xsqrt(x)", "abs(x-1)", "(x+1)(x-1)", ""):
            once = normalize(text)
            self.assertEqual(normalize(once), once)

    def test_idempotent_after_glyph_rewrite(self):
        once = normalize("2√x÷|x−π|")
        self.assertEqual(normalize(once), once)

    def test_order_matters(self):
        swapped = (RADICAL_IMPLICIT_MULTIPLICATION, RADICAL)
        self.assertEqual(normalize("2√x", rules=swapped), "2sqrt(x")

    def test_unknown_fragments_pass_through(self):
        self.assertEqual(normalize("x+++"), "x+++")
        self.assertEqual(normalize("θ²"), "θ²")


class TestGlyphDetection(unittest.TestCase):
    def test_contains_calculator_glyphs(self):
        self.assertTrue(contains_calculator_glyphs("2√x"))
        self.assertTrue(contains_calculator_glyphs("|x|"))
        self.assertFalse(contains_calculator_glyphs("2*sqrt(x)"))
        self.assertFalse(contains_calculator_glyphs(normalize("|x−1|÷π")))


if __name__ == "__main__":
    unittest.main()
