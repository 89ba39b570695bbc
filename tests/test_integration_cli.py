"""Integration tests for CLI functionality."""

import json
import subprocess
import sys

from graphcalc_pkg.cli import format_number, main_entry


def test_cli_version():
    """Test --version flag."""
    result = subprocess.run(
        [sys.executable, "-m", "graphcalc_pkg.cli", "--version"],
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert result.returncode == 0
    assert result.stdout.strip() != ""


def test_cli_module_entry_point():
    """Test python -m graphcalc_pkg."""
    result = subprocess.run(
        [sys.executable, "-m", "graphcalc_pkg", "--normalize", "2√x"],
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=30,
    )
    assert result.returncode == 0
    assert result.stdout.strip() == "2*sqrt(x"


def test_cli_health_check(capsys):
    assert main_entry(["--health-check"]) == 0
    assert "health check" in capsys.readouterr().out.lower()


def test_cli_plot_json(capsys):
    assert main_entry(["x^2", "sin(x)", "--format", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["ok"] is True
    assert [s["name"] for s in data["series"]] == ["f(x)", "g(x)"]
    assert len(data["series"][0]["y"]) == 201


def test_cli_plot_human(capsys):
    assert main_entry(["x^2"]) == 0
    out = capsys.readouterr().out
    assert "f(x) = x^2" in out
    assert "201 points, 201 defined" in out
    assert "y in [0, 100]" in out


def test_cli_invalid_expression(capsys):
    assert main_entry(["x", "x+++"]) == 1
    out = capsys.readouterr().out
    assert "Invalid expression" in out
    assert "g(x)" in out


def test_cli_invalid_expression_json(capsys):
    assert main_entry(["3π", "--format", "json"]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data["ok"] is False
    assert data["function_id"] == 1


def test_cli_invalid_domain(capsys):
    assert main_entry(["x", "--step", "0"]) == 2
    assert "Step must be positive" in capsys.readouterr().out


def test_cli_domain_too_wide(capsys):
    assert main_entry(["x", "--start", "-1e308", "--end", "1e308"]) == 2
    assert "too wide" in capsys.readouterr().out


def test_cli_requires_expression(capsys):
    assert main_entry([]) == 2


def test_cli_normalize(capsys):
    assert main_entry(["--normalize", "|x−1|÷π"]) == 0
    assert capsys.readouterr().out.strip() == "abs(x-1)/pi"


def test_cli_ascii(capsys):
    assert main_entry(["x", "--ascii", "--start", "-1", "--end", "1"]) == 0
    assert "*" in capsys.readouterr().out


def test_cli_output_png(tmp_path, capsys):
    target = tmp_path / "out.png"
    assert main_entry(["x^2", "-o", str(target)]) == 0
    assert target.exists()
    assert "Plot saved to" in capsys.readouterr().out


def test_cli_precision(capsys):
    try:
        assert main_entry(["x/3", "--start", "0", "--end", "1", "-p", "3"]) == 0
        assert "y in [0, 0.333]" in capsys.readouterr().out
    finally:
        import graphcalc_pkg.config as _config

        _config.OUTPUT_PRECISION = 6


def test_format_number():
    assert format_number(3.14159265, 3) == "3.14"
    assert format_number(0.0, 6) == "0"
    assert format_number("abc", 6) == "abc"
