"""Data preparation for the two fitting interfaces.

Formula interface
    ``"response ~ terms"`` evaluated with patsy. Non-numeric predictors are
    expanded into indicator columns (treatment coding) and rows with missing
    values are dropped. ``.`` on the right hand side stands for every column
    except the response.

x/y interface
    Predictors and response are passed to the engine as given. No encoding
    happens here, so engines that cannot handle string columns will raise.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import patsy


logger = logging.getLogger(__name__)

INTERCEPT = "Intercept"


def split_formula(formula: str) -> Tuple[str, str]:
    """Split ``"y ~ a + b"`` into ``("y", "a + b")``.

    Raises:
        ValueError: If the formula has no single response on the left
    """
    if not isinstance(formula, str) or formula.count("~") != 1:
        raise ValueError(f"Formula must have the form 'response ~ terms', got {formula!r}")
    lhs, rhs = (part.strip() for part in formula.split("~"))
    if not lhs or not rhs:
        raise ValueError(f"Formula must have the form 'response ~ terms', got {formula!r}")
    return lhs, rhs


def _quote(column: str) -> str:
    return column if column.isidentifier() else f"Q({column!r})"


def expand_dot(rhs: str, columns: Sequence[str], response: str) -> str:
    """Replace a standalone ``.`` term with all non-response columns."""
    terms = [t.strip() for t in rhs.split("+")]
    if "." not in terms:
        return rhs
    others = " + ".join(_quote(str(c)) for c in columns if c != response)
    if not others:
        raise ValueError("Formula '.' expands to no predictors")
    return " + ".join(others if t == "." else t for t in terms)


def _resolve_response(response: str, data: pd.DataFrame) -> str:
    # Allow Q('name') on the left for awkward column names
    if response.startswith("Q(") and response.endswith(")"):
        response = response[2:-1].strip().strip("'\"")
    if response not in data.columns:
        raise ValueError(
            f"Response '{response}' not found in data. Available: {list(data.columns)}"
        )
    return response


def formula_design(
    data: pd.DataFrame,
    formula: str,
    intercept: bool,
) -> Tuple[pd.DataFrame, pd.Series, Any, str, str, pd.DataFrame]:
    """Build the design matrix and response for a formula fit.

    Args:
        data: Combined table holding predictors and response
        formula: ``"response ~ terms"``
        intercept: Keep the intercept column in the design matrix

    Returns:
        Tuple of (x, y, design_info, response_name, rhs, template). ``x``
        and ``y`` are indexed by row position in ``data``; ``rhs`` is the
        expanded right hand side and ``template`` the predictor rows patsy
        saw, from which ``rebuild_design_info`` can recreate the design.
    """
    if not isinstance(data, pd.DataFrame):
        raise TypeError(f"Formula fitting needs a pandas DataFrame, got {type(data).__name__}")

    lhs, rhs = split_formula(formula)
    response = _resolve_response(lhs, data)
    rhs = expand_dot(rhs, list(data.columns), response)

    frame = data.reset_index(drop=True)
    frame = frame.loc[frame[response].notna()]

    x = patsy.dmatrix(rhs, frame, NA_action="drop", return_type="dataframe")
    design_info = x.design_info
    y = frame.loc[x.index, response]
    template = frame.drop(columns=[response])

    if not intercept and INTERCEPT in x.columns:
        x = x.drop(columns=[INTERCEPT])
    return x, y, design_info, response, rhs, template


def rebuild_design_info(rhs: str, template: pd.DataFrame) -> Any:
    """Recreate patsy design info from the rows a model was trained on.

    patsy design info objects cannot be pickled, so saved fits keep the
    formula and training rows instead and rebuild on load.
    """
    return patsy.dmatrix(rhs, template, NA_action="drop", return_type="dataframe").design_info


def xy_inputs(x: Any, y: Any) -> Tuple[pd.DataFrame, pd.Series]:
    """Normalise pre-separated predictors and response to pandas objects.

    Raises:
        ValueError: If shapes do not line up
    """
    if isinstance(x, pd.DataFrame):
        x_frame = x.reset_index(drop=True)
    else:
        arr = np.asarray(x)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise ValueError(f"x must be two dimensional, got shape {arr.shape}")
        x_frame = pd.DataFrame(arr, columns=[f"x{i}" for i in range(arr.shape[1])])

    if isinstance(y, pd.DataFrame):
        if y.shape[1] != 1:
            raise ValueError(f"y must have a single column, got {y.shape[1]}")
        y = y.iloc[:, 0]
    if isinstance(y, pd.Series):
        y_series = y.reset_index(drop=True)
    else:
        y_series = pd.Series(np.asarray(y).ravel())
    if y_series.name is None:
        y_series = y_series.rename("y")

    if len(x_frame) != len(y_series):
        raise ValueError(
            f"x has {len(x_frame)} rows but y has {len(y_series)}"
        )
    return x_frame, y_series


def _factor_column(code: str, columns: Sequence[Any]) -> Optional[str]:
    """Column a patsy factor reads directly, or None for expressions."""
    if code in columns:
        return code
    if code.startswith("Q(") and code.endswith(")"):
        name = code[2:-1].strip().strip("'\"")
        if name in columns:
            return name
    return None


def mask_unseen_levels(design_info: Any, frame: pd.DataFrame) -> pd.DataFrame:
    """Set categorical values absent from training to missing.

    patsy refuses the whole matrix when one row holds an unknown level;
    masking lets ``NA_action="drop"`` drop only that row.
    """
    masked = frame
    for factor, info in design_info.factor_infos.items():
        if info.type != "categorical":
            continue
        column = _factor_column(factor.name(), list(frame.columns))
        if column is None:
            continue
        values = frame[column]
        unseen = values.notna() & ~values.isin(list(info.categories))
        if unseen.any():
            if masked is frame:
                masked = frame.copy()
            logger.debug(f"{int(unseen.sum())} rows have levels of '{column}' not seen in training")
            masked[column] = masked[column].astype(object).where(~unseen, None)
    return masked


def formula_new_data(
    design_info: Any,
    new_data: pd.DataFrame,
    intercept: bool,
) -> pd.DataFrame:
    """Build the design matrix for new data, dropping unusable rows.

    Rows with missing values, or with categorical levels not seen in
    training, are dropped. The returned frame is indexed by row position in
    ``new_data``, so the caller can re-align predictions.
    """
    frame = mask_unseen_levels(design_info, new_data.reset_index(drop=True))
    (x,) = patsy.build_design_matrices(
        [design_info], frame, NA_action="drop", return_type="dataframe"
    )
    if not intercept and INTERCEPT in x.columns:
        x = x.drop(columns=[INTERCEPT])
    return x


def xy_new_data(
    predictors: List[str],
    new_data: Any,
) -> pd.DataFrame:
    """Select predictor columns for new data and keep only complete rows.

    The returned frame is indexed by row position in ``new_data``.

    Raises:
        ValueError: If predictor columns are missing
    """
    if not isinstance(new_data, pd.DataFrame):
        arr = np.asarray(new_data)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.shape[1] != len(predictors):
            raise ValueError(
                f"new_data has {arr.shape[1]} columns, model was fit with {len(predictors)}"
            )
        new_data = pd.DataFrame(arr, columns=predictors)

    missing = [c for c in predictors if c not in new_data.columns]
    if missing:
        raise ValueError(f"new_data is missing predictor columns: {missing}")

    frame = new_data.reset_index(drop=True)[predictors]
    complete = frame.notna().all(axis=1)
    return frame.loc[complete]


def original_index(new_data: Any, n: Optional[int] = None) -> pd.Index:
    """Index to label the prediction frame with."""
    if isinstance(new_data, (pd.DataFrame, pd.Series)):
        return new_data.index
    return pd.RangeIndex(n if n is not None else len(new_data))
