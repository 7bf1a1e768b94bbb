"""Fit model specifications through their bound engine.

Two interfaces are supported and deliberately behave differently:

- ``fit(spec, data, formula)`` expands categorical predictors into
  indicator columns before the engine sees them.
- ``fit_xy(spec, x, y)`` hands the data to the engine untouched.

Everything that can be checked locally (engine bound, mode resolvable,
arguments translatable) is checked before the engine is called. Engine
failures are wrapped in ``EngineFitError`` and chained to the original.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ..exceptions import EngineFitError
from ..registry.types import Engine, Mode
from ..specification.spec import ModelSpecification, resolve_mode, translate
from .data import formula_design, rebuild_design_info, xy_inputs


logger = logging.getLogger(__name__)

FORMULA = "formula"
XY = "xy"


@dataclass(frozen=True, eq=False)
class FitResult:
    """A fitted model together with how it was produced.

    Attributes:
        spec: Specification the model was fit from
        mode: Concrete mode the engine ran in
        model: External model object returned by the engine
        native_arguments: Arguments actually passed to the engine
        interface: ``"formula"`` or ``"xy"``
        predictors: Column names the engine was trained on
        response: Response column name
        design_info: patsy design info (formula interface only)
        formula_rhs: Expanded right hand side (formula interface only)
        design_template: Predictor rows the design was built from
        levels: Class labels (classification only)
        n_obs: Number of training rows the engine saw
        elapsed_seconds: Wall time spent in the engine
    """

    spec: ModelSpecification
    mode: Mode
    model: Any
    native_arguments: Dict[str, Any]
    interface: str
    predictors: Tuple[str, ...]
    response: str
    design_info: Any = None
    levels: Optional[Tuple[Any, ...]] = None
    n_obs: int = 0
    elapsed_seconds: float = 0.0
    formula_rhs: Optional[str] = None
    design_template: Optional[pd.DataFrame] = field(default=None, repr=False)
    fitted_at: str = field(default_factory=lambda: pd.Timestamp.now().isoformat())

    def __getstate__(self) -> Dict[str, Any]:
        state = self.__dict__.copy()
        # patsy design info refuses to pickle; rebuilt in __setstate__
        state["design_info"] = None
        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)
        if self.design_info is None and self.formula_rhs is not None:
            object.__setattr__(
                self, "design_info", rebuild_design_info(self.formula_rhs, self.design_template)
            )

    @property
    def family(self) -> str:
        return self.spec.family.name

    @property
    def engine(self) -> Engine:
        # resolve_mode guarantees an engine on any FitResult
        return self.spec.engine  # type: ignore[return-value]

    @property
    def engine_name(self) -> str:
        return self.engine.name

    def predict(self, new_data: Any, type: str = "point", level: Optional[float] = None) -> pd.DataFrame:
        from ..prediction.predictor import predict

        return predict(self, new_data, type=type, level=level)

    def tidy(self) -> pd.DataFrame:
        from ..tidying.tidiers import tidy

        return tidy(self)

    def glance(self) -> pd.DataFrame:
        from ..tidying.tidiers import glance

        return glance(self)

    def __repr__(self) -> str:
        return (
            f"FitResult(family={self.family!r}, engine={self.engine_name!r}, "
            f"mode={self.mode.value!r}, interface={self.interface!r}, n_obs={self.n_obs}, "
            f"model={type(self.model).__name__})"
        )


def resolve_arguments(spec: ModelSpecification) -> Tuple[Mode, Dict[str, Any]]:
    """Check a specification is fittable and compute the engine arguments.

    Returns:
        Tuple of (mode, native_arguments). Engine defaults come first and
        are overridden by translated arguments.

    Raises:
        IncompleteSpecificationError: If no engine or mode can be resolved
        UnsupportedArgumentError: If an argument cannot be translated
    """
    mode = resolve_mode(spec)
    translated: List[Tuple[str, Any]] = translate(spec)
    native: Dict[str, Any] = dict(spec.engine.defaults)  # type: ignore[union-attr]
    native.update(translated)
    return mode, native


def _run_engine(
    spec: ModelSpecification,
    mode: Mode,
    native: Dict[str, Any],
    x: pd.DataFrame,
    y: pd.Series,
) -> Tuple[Any, float]:
    engine = spec.engine
    assert engine is not None
    logger.debug(f"Calling {spec.family.name}/{engine.name} ({mode.value}) with {native}")

    start = time.perf_counter()
    try:
        model = engine.entry_point(mode)(x, y, **native)
    except Exception as e:
        raise EngineFitError(
            family=spec.family.name,
            engine=engine.name,
            mode=mode.value,
            arguments=native,
            original=e,
        ) from e
    elapsed = time.perf_counter() - start

    logger.info(
        f"Fitted {spec.family.name} with engine '{engine.name}' ({mode.value}) "
        f"on {len(x)} rows x {x.shape[1]} predictors in {elapsed:.3f}s"
    )
    return model, elapsed


def _levels(mode: Mode, model: Any, y: pd.Series) -> Optional[Tuple[Any, ...]]:
    if mode is not Mode.CLASSIFICATION:
        return None
    classes = getattr(model, "classes_", None)
    if classes is None:
        classes = sorted(pd.unique(y.dropna()))
    return tuple(classes)


def fit(spec: ModelSpecification, data: pd.DataFrame, formula: str) -> FitResult:
    """Fit a specification with the formula interface.

    Non-numeric predictors are expanded into indicator columns. Rows with
    missing values in the response or any referenced predictor are dropped.

    Args:
        spec: Specification with an engine bound
        data: Combined table of predictors and response
        formula: ``"response ~ terms"``; ``.`` means all other columns

    Returns:
        FitResult

    Raises:
        IncompleteSpecificationError: If no engine is bound or mode is ambiguous
        UnsupportedArgumentError: If an argument cannot be translated
        EngineFitError: If the engine raises
    """
    mode, native = resolve_arguments(spec)
    engine = spec.engine
    assert engine is not None

    x, y, design_info, response, rhs, template = formula_design(
        data, formula, intercept=engine.intercept
    )
    model, elapsed = _run_engine(spec, mode, native, x, y)

    return FitResult(
        spec=spec,
        mode=mode,
        model=model,
        native_arguments=native,
        interface=FORMULA,
        predictors=tuple(str(c) for c in x.columns),
        response=response,
        design_info=design_info,
        levels=_levels(mode, model, y),
        n_obs=len(x),
        elapsed_seconds=elapsed,
        formula_rhs=rhs,
        design_template=template,
    )


def fit_xy(spec: ModelSpecification, x: Any, y: Any) -> FitResult:
    """Fit a specification with pre-separated predictors and response.

    No encoding is performed: categorical columns reach the engine as they
    are, and engines that cannot handle them raise ``EngineFitError``.

    Args:
        spec: Specification with an engine bound
        x: Predictor table (DataFrame or 2-D array)
        y: Response sequence

    Returns:
        FitResult

    Raises:
        IncompleteSpecificationError: If no engine is bound or mode is ambiguous
        UnsupportedArgumentError: If an argument cannot be translated
        EngineFitError: If the engine raises
    """
    mode, native = resolve_arguments(spec)
    x_frame, y_series = xy_inputs(x, y)
    model, elapsed = _run_engine(spec, mode, native, x_frame, y_series)

    return FitResult(
        spec=spec,
        mode=mode,
        model=model,
        native_arguments=native,
        interface=XY,
        predictors=tuple(x_frame.columns),
        response=str(y_series.name),
        levels=_levels(mode, model, y_series),
        n_obs=len(x_frame),
        elapsed_seconds=elapsed,
    )
