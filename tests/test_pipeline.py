"""Tests for batch plotting and its all-or-nothing error handling."""

import logging

import pytest

from graphcalc_pkg.config import INVALID_EXPRESSION_MESSAGE
from graphcalc_pkg.pipeline import compile_definition, plot_functions
from graphcalc_pkg.types import CompileError, Domain, FunctionDefinition, PlotResult, ValidationError


def _defs(*expressions):
    names = "fghpqr"
    return [
        FunctionDefinition(i, f"{names[i - 1]}(x)", expr, f"#00000{i}")
        for i, expr in enumerate(expressions, start=1)
    ]


class TestBatchSuccess:
    def test_series_follow_input_order(self):
        result = plot_functions(_defs("x^2", "sin(x)", "|x-1|"))
        assert isinstance(result, PlotResult)
        assert result.ok is True
        assert [s.name for s in result.series] == ["f(x)", "g(x)", "h(x)"]
        assert [s.color for s in result.series] == ["#000001", "#000002", "#000003"]
        assert [s.function_id for s in result.series] == [1, 2, 3]
        assert all(len(s.points) == 201 for s in result.series)

    def test_calculator_notation_is_normalized(self):
        result = plot_functions(_defs("2√x)", "|x−1|", "x×2÷4"))
        assert result.ok is True
        sqrt_series, abs_series, linear = result.series
        assert sqrt_series.points[140].x == 4.0
        assert sqrt_series.points[140].y == pytest.approx(4.0)
        assert abs_series.points[80].y == pytest.approx(3.0)
        assert linear.points[200].y == pytest.approx(5.0)

    def test_point_errors_do_not_fail_batch(self):
        result = plot_functions(_defs("1/x", "sqrt(x)"))
        assert result.ok is True
        assert result.series[0].points[100].y is None
        assert result.series[1].defined_count == 101

    def test_empty_batch(self):
        result = plot_functions([])
        assert result.ok is True
        assert result.series == []

    def test_custom_domain(self):
        result = plot_functions(_defs("x"), Domain(-1, 1, 0.5))
        assert result.series[0].xs == [-1.0, -0.5, 0.0, 0.5, 1.0]

    def test_no_state_between_calls(self):
        first = plot_functions(_defs("x^2"))
        second = plot_functions(_defs("x^2"))
        assert first.series[0] is not second.series[0]
        assert first.series[0].ys == second.series[0].ys


class TestBatchFailure:
    """One expression that fails to compile fails the whole batch."""

    def test_invalid_expression_aborts_all(self):
        result = plot_functions(_defs("x", "x+++"))
        assert result.ok is False
        assert result.series == []
        assert result.error == INVALID_EXPRESSION_MESSAGE
        assert result.function_id == 2
        assert result.function_name == "g(x)"
        assert result.detail

    def test_first_failure_is_reported(self):
        result = plot_functions(_defs("x+++", "y"))
        assert result.function_id == 1

    def test_pi_juxtaposition_fails(self):
        # "3π" normalizes to "3pi", which is not valid syntax
        result = plot_functions(_defs("3π"))
        assert result.ok is False

    def test_unclosed_radical_fails(self):
        result = plot_functions(_defs("2√x"))
        assert result.ok is False

    def test_empty_expression_fails(self):
        result = plot_functions(_defs("x", ""))
        assert result.ok is False
        assert result.function_id == 2

    def test_to_dict_has_no_series(self):
        data = plot_functions(_defs("x", "x+++")).to_dict()
        assert data["ok"] is False
        assert "series" not in data
        assert data["function_name"] == "g(x)"

    def test_invalid_domain_raises(self):
        with pytest.raises(ValidationError):
            plot_functions(_defs("x"), Domain(0, 1, 0))

    def test_duplicate_ids_raise(self):
        definitions = [
            FunctionDefinition(2, "g(x)", "x", "#000000"),
            FunctionDefinition(2, "h(x)", "x^2", "#111111"),
        ]
        with pytest.raises(ValidationError) as exc_info:
            plot_functions(definitions)
        assert exc_info.value.code == "DUPLICATE_ID"


class TestCompileDefinition:
    def test_error_is_attributed(self):
        definition = FunctionDefinition(7, "q(x)", "x+++", "#123456")
        with pytest.raises(CompileError) as exc_info:
            compile_definition(definition)
        assert exc_info.value.function_id == 7
        assert exc_info.value.function_name == "q(x)"
        assert exc_info.value.expression == "x+++"

    def test_success(self):
        compiled = compile_definition(FunctionDefinition(1, "f(x)", "√x)", "#1f77b4"))
        assert compiled.evaluate(9.0) == pytest.approx(3.0)

    def test_leftover_glyphs_are_logged(self, caplog):
        logging.getLogger("graphcalc").propagate = True
        with caplog.at_level(logging.DEBUG, logger="graphcalc"):
            with pytest.raises(CompileError):
                compile_definition(FunctionDefinition(4, "p(x)", "|x", "#123456"))
        glyph_records = [r for r in caplog.records if "glyphs left" in r.getMessage()]
        assert len(glyph_records) == 1
        assert glyph_records[0].function_id == 4
        assert glyph_records[0].function_name == "p(x)"

    def test_clean_expression_logs_no_glyph_warning(self, caplog):
        logging.getLogger("graphcalc").propagate = True
        with caplog.at_level(logging.DEBUG, logger="graphcalc"):
            compile_definition(FunctionDefinition(1, "f(x)", "|x|", "#1f77b4"))
        assert not any("glyphs left" in r.getMessage() for r in caplog.records)
