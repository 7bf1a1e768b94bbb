"""Optional XGBoost and LightGBM engines for boost_tree.

Engines are registered only when their library can be imported.
"""
from __future__ import annotations

import logging
from typing import Any

import numpy as np
from sklearn.preprocessing import LabelEncoder

from ..config import CONFIG
from ..registry.registry import SpecRegistry
from ..registry.types import Mode
from .sklearn_engines import SklearnFitter

try:
    from xgboost import XGBClassifier, XGBRegressor  # type: ignore
except ImportError:
    XGBClassifier = None  # type: ignore
    XGBRegressor = None  # type: ignore

try:
    from lightgbm import LGBMClassifier, LGBMRegressor  # type: ignore
except ImportError:
    LGBMClassifier = None  # type: ignore
    LGBMRegressor = None  # type: ignore


logger = logging.getLogger(__name__)


class LabelEncodedClassifier:
    """Classifier whose labels are encoded to 0..k-1 before fitting.

    XGBoost requires integer class labels; this keeps the original labels
    visible through ``classes_`` and ``predict``.
    """

    def __init__(self, estimator: Any, encoder: LabelEncoder):
        self.estimator = estimator
        self.encoder = encoder
        self.classes_ = encoder.classes_

    def predict(self, x):
        codes = np.asarray(self.estimator.predict(x)).astype(int).ravel()
        return self.encoder.inverse_transform(codes)

    def predict_proba(self, x):
        return self.estimator.predict_proba(x)

    @property
    def feature_importances_(self):
        return self.estimator.feature_importances_


class XGBClassifierFitter:
    """Entry point for XGBClassifier with label encoding."""

    def __call__(self, x, y, **kwargs):
        encoder = LabelEncoder().fit(np.asarray(y))
        estimator = XGBClassifier(**kwargs).fit(x, encoder.transform(np.asarray(y)))
        return LabelEncodedClassifier(estimator, encoder)


def xgboost_available() -> bool:
    return XGBClassifier is not None


def lightgbm_available() -> bool:
    return LGBMClassifier is not None


def register_boosting_engines(registry: SpecRegistry) -> SpecRegistry:
    """Register the xgboost and lightgbm engines when installed."""
    seed = CONFIG.random_seed

    if xgboost_available():
        registry.register_engine(
            "boost_tree", "xgboost",
            {
                Mode.REGRESSION: SklearnFitter(XGBRegressor),
                Mode.CLASSIFICATION: XGBClassifierFitter(),
            },
            argument_map={
                "trees": "n_estimators",
                "min_n": "min_child_weight",
                "tree_depth": "max_depth",
                "learn_rate": "learning_rate",
                "sample_size": "subsample",
            },
            defaults={"random_state": seed, "tree_method": "hist"},
            extra_arguments=["gamma", "reg_alpha", "reg_lambda", "colsample_bytree", "scale_pos_weight"],
            description="XGBRegressor / XGBClassifier",
        )
    else:
        logger.debug("xgboost not available; boost_tree engine 'xgboost' not registered")

    if lightgbm_available():
        registry.register_engine(
            "boost_tree", "lightgbm",
            {
                Mode.REGRESSION: SklearnFitter(LGBMRegressor),
                Mode.CLASSIFICATION: SklearnFitter(LGBMClassifier),
            },
            argument_map={
                "trees": "n_estimators",
                "min_n": "min_child_samples",
                "tree_depth": "max_depth",
                "learn_rate": "learning_rate",
                "sample_size": "subsample",
            },
            defaults={"random_state": seed, "verbosity": -1},
            extra_arguments=["num_leaves", "reg_alpha", "reg_lambda", "colsample_bytree", "class_weight"],
            description="LGBMRegressor / LGBMClassifier",
        )
    else:
        logger.debug("lightgbm not available; boost_tree engine 'lightgbm' not registered")

    return registry
