"""statsmodels engines: OLS for linear_reg and Logit for logistic_reg.

statsmodels results objects are wrapped in ``StatsmodelsModel`` so that
prediction code can treat them like scikit-learn estimators. Neither
engine exposes ``penalty``; asking for it raises at translation time.
Engine-specific arguments are forwarded to ``.fit()`` (for example
``cov_type="HC3"``).
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm

from ..fitting.data import INTERCEPT
from ..registry.registry import SpecRegistry
from ..registry.types import Mode


CONST = "const"


class StatsmodelsModel:
    """Estimator-like view of a statsmodels results object.

    Attributes:
        results: Fitted statsmodels results
        add_constant: Whether predict must add the constant column
        classes_: Class labels for binary models, ``None`` for regression
    """

    def __init__(self, results: Any, add_constant: bool, classes: Optional[Sequence[Any]] = None):
        self.results = results
        self.add_constant = add_constant
        self.classes_ = np.asarray(classes) if classes is not None else None

    def exog(self, x: pd.DataFrame) -> pd.DataFrame:
        if self.add_constant:
            return sm.add_constant(x, prepend=True, has_constant="add")
        return x

    def predict(self, x: pd.DataFrame) -> np.ndarray:
        values = np.asarray(self.results.predict(self.exog(x)))
        if self.classes_ is None:
            return values
        return np.where(values >= 0.5, self.classes_[1], self.classes_[0])

    def predict_proba(self, x: pd.DataFrame) -> np.ndarray:
        if self.classes_ is None:
            raise AttributeError("predict_proba is only available for classification")
        p = np.asarray(self.results.predict(self.exog(x)), dtype=float)
        return np.column_stack([1.0 - p, p])

    def __repr__(self) -> str:
        return f"StatsmodelsModel({type(self.results.model).__name__})"


def _design(x: pd.DataFrame) -> Tuple[pd.DataFrame, bool]:
    """Add a constant unless the design already carries one."""
    if INTERCEPT in x.columns or CONST in x.columns:
        return x.astype(float), False
    return sm.add_constant(x.astype(float), prepend=True, has_constant="add"), True


def fit_ols(x: pd.DataFrame, y: pd.Series, **kwargs: Any) -> StatsmodelsModel:
    exog, added = _design(x)
    results = sm.OLS(np.asarray(y, dtype=float), exog).fit(**kwargs)
    return StatsmodelsModel(results, add_constant=added)


def fit_logit(x: pd.DataFrame, y: pd.Series, **kwargs: Any) -> StatsmodelsModel:
    classes = sorted(pd.unique(pd.Series(y).dropna()))
    if len(classes) != 2:
        raise ValueError(f"Logit needs exactly two classes, got {len(classes)}: {classes}")
    endog = (pd.Series(y).to_numpy() == classes[1]).astype(float)
    exog, added = _design(x)
    kwargs.setdefault("disp", 0)
    results = sm.Logit(endog, exog).fit(**kwargs)
    return StatsmodelsModel(results, add_constant=added, classes=classes)


def ols_interval(model: StatsmodelsModel, x: pd.DataFrame, level: float) -> Tuple[np.ndarray, np.ndarray]:
    """Prediction interval bounds for new observations."""
    frame = model.results.get_prediction(model.exog(x)).conf_int(obs=True, alpha=1.0 - level)
    frame = np.asarray(frame)
    return frame[:, 0], frame[:, 1]


def tidy_statsmodels(fit) -> pd.DataFrame:
    results = fit.model.results
    params = pd.Series(results.params)
    terms = [INTERCEPT if t == CONST else str(t) for t in params.index]
    return pd.DataFrame({
        "term": terms,
        "estimate": params.to_numpy(dtype=float),
        "std_error": np.asarray(results.bse, dtype=float),
        "statistic": np.asarray(results.tvalues, dtype=float),
        "p_value": np.asarray(results.pvalues, dtype=float),
    })


def glance_ols(fit) -> Dict[str, Any]:
    results = fit.model.results
    return {
        "r_squared": float(results.rsquared),
        "adj_r_squared": float(results.rsquared_adj),
        "sigma": float(np.sqrt(results.scale)),
        "statistic": float(results.fvalue),
        "p_value": float(results.f_pvalue),
        "df": float(results.df_model),
        "log_lik": float(results.llf),
        "aic": float(results.aic),
        "bic": float(results.bic),
        "df_residual": float(results.df_resid),
    }


def glance_logit(fit) -> Dict[str, Any]:
    results = fit.model.results
    return {
        "pseudo_r_squared": float(results.prsquared),
        "log_lik": float(results.llf),
        "aic": float(results.aic),
        "bic": float(results.bic),
        "df": float(results.df_model),
        "df_residual": float(results.df_resid),
        "converged": bool(results.mle_retvals.get("converged", True)),
    }


def register_statsmodels_engines(registry: SpecRegistry) -> SpecRegistry:
    """Register statsmodels engines for linear_reg and logistic_reg."""
    registry.register_engine(
        "linear_reg", "statsmodels",
        fit_ols,
        modes=[Mode.REGRESSION],
        extra_arguments=["cov_type", "cov_kwds"],
        intercept=True,
        interval=ols_interval,
        tidy=tidy_statsmodels,
        glance=glance_ols,
        description="statsmodels OLS with inference and prediction intervals",
    )
    registry.register_engine(
        "logistic_reg", "statsmodels",
        fit_logit,
        modes=[Mode.CLASSIFICATION],
        extra_arguments=["method", "maxiter", "disp"],
        intercept=True,
        tidy=tidy_statsmodels,
        glance=glance_logit,
        description="statsmodels Logit with inference",
    )
    return registry
