"""Predictions from fitted specifications.

The prediction frame always has one row per row of ``new_data``, in the
same order and with the same index. Rows the engine cannot score (missing
predictor values, or rows patsy drops while building the design matrix)
are re-aligned by original row position and carry missing values.

Column vocabulary:

- regression point: ``.pred``
- classification point: ``.pred_class``
- probability: ``.pred_<level>`` for each class level
- interval: ``.pred_lower``, ``.pred_upper``
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

import numpy as np
import pandas as pd

from ..config import CONFIG
from ..exceptions import EnginePredictError, UnsupportedPredictionTypeError
from ..fitting.data import formula_new_data, original_index, xy_new_data
from ..fitting.fit import FORMULA, FitResult
from ..registry.types import Mode, PredictionType


logger = logging.getLogger(__name__)

PRED = ".pred"
PRED_CLASS = ".pred_class"
PRED_LOWER = ".pred_lower"
PRED_UPPER = ".pred_upper"


def probability_column(level: Any) -> str:
    return f"{PRED}_{level}"


def prediction_columns(fit: FitResult, ptype: PredictionType) -> List[str]:
    """Column names ``predict`` returns for a prediction type."""
    if ptype is PredictionType.POINT:
        return [PRED_CLASS] if fit.mode is Mode.CLASSIFICATION else [PRED]
    if ptype is PredictionType.PROBABILITY:
        return [probability_column(level) for level in (fit.levels or ())]
    return [PRED_LOWER, PRED_UPPER]


def _design(fit: FitResult, new_data: Any) -> pd.DataFrame:
    if fit.interface == FORMULA:
        if not isinstance(new_data, pd.DataFrame):
            raise TypeError(
                f"Model was fit with a formula; new_data must be a DataFrame, "
                f"got {type(new_data).__name__}"
            )
        return formula_new_data(fit.design_info, new_data, intercept=fit.engine.intercept)
    return xy_new_data(list(fit.predictors), new_data)


def _point(fit: FitResult, x: pd.DataFrame, level: float) -> pd.DataFrame:
    values = np.asarray(fit.model.predict(x)).ravel()
    if fit.mode is Mode.CLASSIFICATION:
        labels = pd.Categorical(values, categories=list(fit.levels or pd.unique(values)))
        return pd.DataFrame({PRED_CLASS: labels}, index=x.index)
    return pd.DataFrame({PRED: values.astype(float)}, index=x.index)


def _probability(fit: FitResult, x: pd.DataFrame, level: float) -> pd.DataFrame:
    probs = np.asarray(fit.model.predict_proba(x))
    classes = list(getattr(fit.model, "classes_", fit.levels or ()))
    return pd.DataFrame(
        probs,
        columns=[probability_column(c) for c in classes],
        index=x.index,
    )


def _interval(fit: FitResult, x: pd.DataFrame, level: float) -> pd.DataFrame:
    lower, upper = fit.engine.interval(fit.model, x, level)  # type: ignore[misc]
    return pd.DataFrame(
        {PRED_LOWER: np.asarray(lower, dtype=float), PRED_UPPER: np.asarray(upper, dtype=float)},
        index=x.index,
    )


_PREDICTORS = {
    PredictionType.POINT: _point,
    PredictionType.PROBABILITY: _probability,
    PredictionType.INTERVAL: _interval,
}


def predict(
    fit: FitResult,
    new_data: Any,
    type: Union[PredictionType, str] = PredictionType.POINT,
    level: Optional[float] = None,
) -> pd.DataFrame:
    """Predict from a fitted specification.

    Args:
        fit: FitResult from ``fit`` or ``fit_xy``
        new_data: Data with the same columns as the training data
        type: 'point', 'probability' or 'interval'
        level: Interval coverage (defaults to ``CONFIG.interval_level``)

    Returns:
        DataFrame with one row per row of ``new_data`` and the same index

    Raises:
        UnsupportedPredictionTypeError: If the fit cannot produce ``type``
        EnginePredictError: If the engine raises
    """
    ptype = PredictionType.coerce(type)
    supported = fit.engine.prediction_types(fit.mode)
    if ptype not in supported:
        raise UnsupportedPredictionTypeError(
            f"Prediction type '{ptype.value}' is not available for {fit.family} "
            f"({fit.mode.value}) with engine '{fit.engine_name}'. "
            f"Available: {sorted(t.value for t in supported)}"
        )

    level = CONFIG.interval_level if level is None else level
    if ptype is PredictionType.INTERVAL and not 0.0 < level < 1.0:
        raise ValueError(f"Interval level must be in (0, 1), got {level}")

    n_rows = len(new_data)
    index = original_index(new_data, n_rows)
    x = _design(fit, new_data)

    if len(x) < n_rows:
        logger.debug(
            f"{n_rows - len(x)} of {n_rows} rows cannot be scored and will be returned as missing"
        )

    columns = prediction_columns(fit, ptype)
    if len(x) == 0:
        scored = pd.DataFrame(columns=columns, dtype=float)
    else:
        try:
            scored = _PREDICTORS[ptype](fit, x, level)
        except Exception as e:
            raise EnginePredictError(
                family=fit.family,
                engine=fit.engine_name,
                mode=fit.mode.value,
                arguments=fit.native_arguments,
                original=e,
            ) from e

    result = scored.reindex(pd.RangeIndex(n_rows))
    result.index = index
    return result


def augment(fit: FitResult, new_data: pd.DataFrame) -> pd.DataFrame:
    """Return ``new_data`` with prediction columns appended.

    Point predictions are always added; classification fits also get class
    probabilities.
    """
    out = new_data.copy()
    frames = [predict(fit, new_data, PredictionType.POINT)]
    if fit.mode is Mode.CLASSIFICATION:
        frames.append(predict(fit, new_data, PredictionType.PROBABILITY))
    for frame in frames:
        for column in frame.columns:
            out[column] = frame[column].to_numpy()
    return out
