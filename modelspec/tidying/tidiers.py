"""Tidy summaries of fitted specifications.

``tidy`` returns one row per model term with the columns
``term, estimate, std_error, statistic, p_value`` (a ``class`` column is
added for multi-class coefficient sets). Columns an engine cannot provide
are left missing.

``glance`` returns a single row of model level statistics. Every fit has
``family, engine, mode, nobs, n_predictors``; engines add their own
columns through a glance hook.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from ..fitting.data import INTERCEPT
from ..fitting.fit import FitResult


logger = logging.getLogger(__name__)

TIDY_COLUMNS = ["term", "estimate", "std_error", "statistic", "p_value"]
GLANCE_COLUMNS = ["family", "engine", "mode", "nobs", "n_predictors"]


def _empty_tidy() -> pd.DataFrame:
    return pd.DataFrame({c: pd.Series(dtype=object if c == "term" else float) for c in TIDY_COLUMNS})


def _coefficient_rows(fit: FitResult, model: Any) -> pd.DataFrame:
    coef = np.atleast_2d(np.asarray(model.coef_, dtype=float))
    terms = list(fit.predictors)
    fit_intercept = bool(getattr(model, "fit_intercept", True))
    intercepts = np.atleast_1d(np.asarray(getattr(model, "intercept_", 0.0), dtype=float))

    rows: List[Dict[str, Any]] = []
    classes = list(getattr(model, "classes_", []))
    multi = coef.shape[0] > 1
    for i, row in enumerate(coef):
        label = classes[i] if multi and i < len(classes) else None
        if fit_intercept:
            rows.append({"term": INTERCEPT, "estimate": float(intercepts[i % len(intercepts)]), "class": label})
        for term, value in zip(terms, row):
            rows.append({"term": term, "estimate": float(value), "class": label})

    frame = pd.DataFrame(rows)
    for column in TIDY_COLUMNS:
        if column not in frame.columns:
            frame[column] = np.nan
    columns = TIDY_COLUMNS + (["class"] if multi else [])
    return frame[columns]


def _importance_rows(fit: FitResult, model: Any) -> pd.DataFrame:
    importances = np.asarray(model.feature_importances_, dtype=float)
    frame = pd.DataFrame({"term": list(fit.predictors), "estimate": importances})
    for column in TIDY_COLUMNS[2:]:
        frame[column] = np.nan
    return frame[TIDY_COLUMNS]


def tidy(fit: FitResult) -> pd.DataFrame:
    """Coefficient-like rows for a fitted model.

    Args:
        fit: FitResult

    Returns:
        DataFrame with at least the ``TIDY_COLUMNS`` columns. Models with
        neither coefficients nor feature importances give an empty frame.
    """
    if fit.engine.tidy is not None:
        frame = fit.engine.tidy(fit)
    elif hasattr(fit.model, "coef_"):
        frame = _coefficient_rows(fit, fit.model)
    elif hasattr(fit.model, "feature_importances_"):
        frame = _importance_rows(fit, fit.model)
    else:
        logger.debug(f"No tidy summary for {type(fit.model).__name__}")
        frame = _empty_tidy()

    extra = [c for c in frame.columns if c not in TIDY_COLUMNS]
    return frame[TIDY_COLUMNS + extra].reset_index(drop=True)


def glance(fit: FitResult) -> pd.DataFrame:
    """Single row of model level statistics.

    Args:
        fit: FitResult

    Returns:
        One-row DataFrame starting with ``GLANCE_COLUMNS``
    """
    row: Dict[str, Any] = {
        "family": fit.family,
        "engine": fit.engine_name,
        "mode": fit.mode.value,
        "nobs": fit.n_obs,
        "n_predictors": len(fit.predictors),
    }
    if fit.engine.glance is not None:
        row.update(fit.engine.glance(fit))
    elif hasattr(fit.model, "oob_score_"):
        row["oob_score"] = float(fit.model.oob_score_)
    return pd.DataFrame([row])
