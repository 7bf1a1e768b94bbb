"""Engines module - built-in families and engine registrations.

This module provides:
- The built-in model families and their generalized arguments
- scikit-learn engines for every family
- statsmodels engines for linear and logistic regression
- XGBoost and LightGBM engines when those libraries are installed
- Tables comparing argument names across engines
"""

from ..registry.registry import SpecRegistry
from .families import register_default_families
from .sklearn_engines import register_sklearn_engines, SklearnFitter
from .statsmodels_engines import register_statsmodels_engines, StatsmodelsModel
from .boosting_engines import register_boosting_engines, xgboost_available, lightgbm_available
from .tables import argument_table, show_engines


def default_registry() -> SpecRegistry:
    """Build a new registry holding every built-in family and engine.

    Each call returns an independent registry.
    """
    registry = SpecRegistry()
    register_default_families(registry)
    register_sklearn_engines(registry)
    register_statsmodels_engines(registry)
    register_boosting_engines(registry)
    return registry


__all__ = [
    "default_registry",
    "register_default_families",
    "register_sklearn_engines",
    "register_statsmodels_engines",
    "register_boosting_engines",
    "xgboost_available",
    "lightgbm_available",
    "SklearnFitter",
    "StatsmodelsModel",
    "argument_table",
    "show_engines",
]
