"""graphcalc package: calculator-notation normalization, compilation and sampling for plotting."""

__all__ = [
    "config",
    "normalizer",
    "evaluator",
    "pipeline",
    "editor",
    "plotting",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "normalize_expression",
    "validate_expression",
    "evaluate",
    "plot",
]
