"""Prediction module for making predictions with fitted specifications."""

from .predictor import (
    predict,
    augment,
    prediction_columns,
    PRED,
    PRED_CLASS,
    PRED_LOWER,
    PRED_UPPER,
)

__all__ = [
    "predict",
    "augment",
    "prediction_columns",
    "PRED",
    "PRED_CLASS",
    "PRED_LOWER",
    "PRED_UPPER",
]
