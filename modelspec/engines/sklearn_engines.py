"""scikit-learn engines for the built-in families.

Each entry point takes ``(x, y, **native_args)`` and returns a fitted
estimator. Native argument names are the estimator's own keyword names,
except for the penalized linear models where ``alpha``/``l1_ratio`` are
converted to what the estimator expects.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np
from sklearn.ensemble import (
    GradientBoostingClassifier,
    GradientBoostingRegressor,
    RandomForestClassifier,
    RandomForestRegressor,
)
from sklearn.linear_model import ElasticNet, LinearRegression, LogisticRegression
from sklearn.neighbors import KNeighborsClassifier, KNeighborsRegressor
from sklearn.tree import DecisionTreeClassifier, DecisionTreeRegressor

from ..config import CONFIG
from ..exceptions import InvalidArgumentValueError
from ..registry.registry import SpecRegistry
from ..registry.types import Mode


logger = logging.getLogger(__name__)


class SklearnFitter:
    """Entry point that instantiates and fits one estimator class.

    A class rather than a closure so that fitted results stay picklable.
    """

    def __init__(self, estimator_cls: type):
        self.estimator_cls = estimator_cls

    def __call__(self, x, y, **kwargs):
        return self.estimator_cls(**kwargs).fit(x, y)

    def __repr__(self) -> str:
        return f"SklearnFitter({self.estimator_cls.__name__})"


def fit_linear_regression(
    x,
    y,
    alpha: Optional[float] = None,
    l1_ratio: Optional[float] = None,
    **kwargs: Any,
):
    """Ordinary least squares, or elastic net when a penalty is given.

    Raises:
        InvalidArgumentValueError: If ``l1_ratio`` is given without a
            positive ``alpha``
    """
    if alpha is None or alpha == 0:
        if l1_ratio is not None:
            raise InvalidArgumentValueError(
                f"l1_ratio={l1_ratio!r} needs a positive penalty (alpha={alpha!r}); "
                "set penalty as well or drop mixture",
                name="l1_ratio",
                value=l1_ratio,
            )
        return LinearRegression(**kwargs).fit(x, y)
    ratio = 1.0 if l1_ratio is None else l1_ratio
    logger.debug(f"Penalized linear fit: ElasticNet(alpha={alpha}, l1_ratio={ratio})")
    return ElasticNet(alpha=alpha, l1_ratio=ratio, **kwargs).fit(x, y)


def fit_logistic_regression(
    x,
    y,
    alpha: Optional[float] = None,
    l1_ratio: Optional[float] = None,
    **kwargs: Any,
):
    """Logistic regression with ``alpha`` as penalty strength (``C = 1 / alpha``)."""
    if alpha is not None:
        kwargs["C"] = 1.0 / alpha if alpha > 0 else np.inf
    if l1_ratio is not None:
        kwargs.setdefault("solver", "saga")
        kwargs["penalty"] = "elasticnet"
        kwargs["l1_ratio"] = l1_ratio
    return LogisticRegression(**kwargs).fit(x, y)


def register_sklearn_engines(registry: SpecRegistry) -> SpecRegistry:
    """Register scikit-learn engines for every built-in family.

    Args:
        registry: Registry that already holds the built-in families

    Returns:
        The same registry
    """
    seed = CONFIG.random_seed

    registry.register_engine(
        "linear_reg", "sklearn",
        fit_linear_regression,
        argument_map={"penalty": "alpha", "mixture": "l1_ratio"},
        modes=[Mode.REGRESSION],
        extra_arguments=["fit_intercept", "positive", "max_iter", "tol"],
        description="LinearRegression, ElasticNet when penalized",
    )
    registry.register_engine(
        "logistic_reg", "sklearn",
        fit_logistic_regression,
        argument_map={"penalty": "alpha", "mixture": "l1_ratio"},
        modes=[Mode.CLASSIFICATION],
        defaults={"max_iter": 1000},
        extra_arguments=["class_weight", "solver", "tol", "fit_intercept"],
        description="LogisticRegression",
    )
    registry.register_engine(
        "rand_forest", "sklearn",
        {
            Mode.REGRESSION: SklearnFitter(RandomForestRegressor),
            Mode.CLASSIFICATION: SklearnFitter(RandomForestClassifier),
        },
        argument_map={"mtry": "max_features", "trees": "n_estimators", "min_n": "min_samples_split"},
        defaults={"random_state": seed},
        extra_arguments=["max_depth", "class_weight", "n_jobs", "oob_score", "bootstrap"],
        description="RandomForestRegressor / RandomForestClassifier",
    )
    registry.register_engine(
        "boost_tree", "sklearn",
        {
            Mode.REGRESSION: SklearnFitter(GradientBoostingRegressor),
            Mode.CLASSIFICATION: SklearnFitter(GradientBoostingClassifier),
        },
        argument_map={
            "mtry": "max_features",
            "trees": "n_estimators",
            "min_n": "min_samples_split",
            "tree_depth": "max_depth",
            "learn_rate": "learning_rate",
            "sample_size": "subsample",
        },
        defaults={"random_state": seed},
        extra_arguments=["loss", "validation_fraction", "n_iter_no_change"],
        description="GradientBoostingRegressor / GradientBoostingClassifier",
    )
    registry.register_engine(
        "decision_tree", "sklearn",
        {
            Mode.REGRESSION: SklearnFitter(DecisionTreeRegressor),
            Mode.CLASSIFICATION: SklearnFitter(DecisionTreeClassifier),
        },
        argument_map={
            "tree_depth": "max_depth",
            "min_n": "min_samples_split",
            "cost_complexity": "ccp_alpha",
        },
        defaults={"random_state": seed},
        extra_arguments=["criterion", "min_samples_leaf", "class_weight"],
        description="DecisionTreeRegressor / DecisionTreeClassifier",
    )
    registry.register_engine(
        "nearest_neighbor", "sklearn",
        {
            Mode.REGRESSION: SklearnFitter(KNeighborsRegressor),
            Mode.CLASSIFICATION: SklearnFitter(KNeighborsClassifier),
        },
        argument_map={"neighbors": "n_neighbors", "weight_func": "weights", "dist_power": "p"},
        extra_arguments=["algorithm", "leaf_size", "metric"],
        description="KNeighborsRegressor / KNeighborsClassifier",
    )
    return registry
