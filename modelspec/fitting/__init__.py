"""Fitting module - formula and x/y interfaces over registered engines."""

from .fit import FitResult, fit, fit_xy, resolve_arguments
from .data import (
    formula_design,
    rebuild_design_info,
    xy_inputs,
    split_formula,
    expand_dot,
)

__all__ = [
    "FitResult",
    "fit",
    "fit_xy",
    "resolve_arguments",
    "formula_design",
    "rebuild_design_info",
    "xy_inputs",
    "split_formula",
    "expand_dot",
]
