"""Type definitions and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_STEP, DEFAULT_X_MAX, DEFAULT_X_MIN


@dataclass(frozen=True)
class FunctionDefinition:
    """One plotted curve as entered by the user."""

    id: int
    name: str
    raw_expression: str
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "raw_expression": self.raw_expression,
            "color": self.color,
        }


@dataclass(frozen=True)
class Domain:
    """Closed sampling interval walked with a fixed step."""

    start: float = DEFAULT_X_MIN
    end: float = DEFAULT_X_MAX
    step: float = DEFAULT_STEP


@dataclass(frozen=True)
class SamplePoint:
    """A sampled point; ``y`` is None where the function is undefined."""

    x: float
    y: float | None


@dataclass
class Series:
    """Sampled curve for one FunctionDefinition."""

    name: str
    color: str
    points: list[SamplePoint] = field(default_factory=list)
    function_id: int | None = None

    @property
    def xs(self) -> list[float]:
        return [p.x for p in self.points]

    @property
    def ys(self) -> list[float | None]:
        return [p.y for p in self.points]

    @property
    def defined_count(self) -> int:
        return sum(1 for p in self.points if p.y is not None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (undefined y becomes null)."""
        return {
            "function_id": self.function_id,
            "name": self.name,
            "color": self.color,
            "x": self.xs,
            "y": self.ys,
        }

    def to_trace(self) -> dict[str, Any]:
        """Plotly-style line trace for front ends that draw with plotly."""
        return {
            "x": self.xs,
            "y": self.ys,
            "name": self.name,
            "type": "scatter",
            "mode": "lines",
            "line": {"width": 2, "color": self.color},
        }

    def __repr__(self) -> str:
        return (
            f"Series(name={self.name!r}, color={self.color!r}, "
            f"points={len(self.points)}, defined={self.defined_count})"
        )


@dataclass
class PlotResult:
    """Result of plotting a batch of functions.

    On failure no series are returned, even for functions that compiled.
    """

    ok: bool
    series: list[Series] = field(default_factory=list)
    error: str | None = None
    detail: str | None = None
    function_id: int | None = None
    function_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.ok:
            result_dict["series"] = [s.to_dict() for s in self.series]
        if self.error is not None:
            result_dict["error"] = self.error
        if self.detail is not None:
            result_dict["detail"] = self.detail
        if self.function_id is not None:
            result_dict["function_id"] = self.function_id
        if self.function_name is not None:
            result_dict["function_name"] = self.function_name
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return (
                f"PlotResult(ok=False, error={self.error!r}, "
                f"function_name={self.function_name!r})"
            )
        return f"PlotResult(ok=True, series={self.series!r})"


@dataclass
class EvalResult:
    """Result of evaluating one expression at a single x."""

    ok: bool
    x: float | None = None
    y: float | None = None
    normalized: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.x is not None:
            result_dict["x"] = self.x
        if self.y is not None:
            result_dict["y"] = self.y
        if self.normalized is not None:
            result_dict["normalized"] = self.normalized
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r})"
        return f"EvalResult(ok=True, x={self.x!r}, y={self.y!r})"


class ValidationError(Exception):
    """Raised when caller-supplied arguments are invalid."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class CompileError(Exception):
    """Raised when normalized text cannot be compiled into an expression.

    ``detail`` carries the engine's own message as-is. ``function_id`` and
    ``function_name`` are filled in when the failure is attributed to a
    FunctionDefinition.
    """

    def __init__(
        self,
        message: str,
        code: str = "COMPILE_ERROR",
        detail: str | None = None,
        expression: str | None = None,
        function_id: int | None = None,
        function_name: str | None = None,
    ):
        self.message = message
        self.code = code
        self.detail = detail
        self.expression = expression
        self.function_id = function_id
        self.function_name = function_name
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class EvaluationError(Exception):
    """Raised when an expression is undefined at a single x."""

    def __init__(self, message: str, x: float, code: str = "UNDEFINED_AT_POINT"):
        self.message = message
        self.x = x
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
