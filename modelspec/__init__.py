"""modelspec - one interface over many modeling engines.

A model is described in three independent parts:

- **family**: the mathematical approach (``linear_reg``, ``rand_forest``, ...)
- **engine**: the library that implements it (``sklearn``, ``statsmodels``, ...)
- **mode**: ``regression`` or ``classification``

Family level argument names (``trees``, ``mtry``, ``min_n``, ``penalty``)
are translated to each engine's native names when the model is fit.

## Module Structure

- **registry**: families, engines, modes and the ``SpecRegistry``
- **specification**: immutable specifications and translation
- **fitting**: formula and x/y fitting interfaces
- **prediction**: row-preserving predictions
- **tidying**: tidy and glance summaries
- **engines**: built-in families and engines
- **persistence**: saving and loading fits

## Quick Start

```python
from modelspec import default_registry, fit, predict, tidy

registry = default_registry()
spec = (
    registry.create_specification("rand_forest", mode="regression")
    .set_engine("sklearn")
    .set_args(trees=200, min_n=5)
)
spec.translate()            # [('n_estimators', 200), ('min_samples_split', 5)]

fitted = fit(spec, df, "mpg ~ .")
predict(fitted, new_df)     # one '.pred' row per input row
tidy(fitted)
```
"""

from .config import CONFIG, ProjectConfig, RANDOM_SEED, configure_logging, validate_config
from .exceptions import (
    ModelSpecError,
    DuplicateFamilyError,
    UnknownFamilyError,
    UnknownEngineError,
    InvalidMappingError,
    UnsupportedModeError,
    ModeMismatchError,
    InvalidArgumentValueError,
    UnsupportedArgumentError,
    IncompleteSpecificationError,
    UnsupportedPredictionTypeError,
    EngineError,
    EngineFitError,
    EnginePredictError,
    FitPersistenceError,
)
from .registry import (
    Mode,
    PredictionType,
    GeneralizedArgument,
    ModelFamily,
    Engine,
    SpecRegistry,
)
from .specification import (
    ModelSpecification,
    with_engine,
    with_mode,
    with_argument,
    with_arguments,
    translate,
)
from .fitting import FitResult, fit, fit_xy
from .prediction import predict, augment
from .tidying import tidy, glance
from .engines import default_registry, argument_table, show_engines
from .persistence import save_fit, load_fit

__all__ = [
    # Config
    "CONFIG",
    "ProjectConfig",
    "RANDOM_SEED",
    "configure_logging",
    "validate_config",
    # Errors
    "ModelSpecError",
    "DuplicateFamilyError",
    "UnknownFamilyError",
    "UnknownEngineError",
    "InvalidMappingError",
    "UnsupportedModeError",
    "ModeMismatchError",
    "InvalidArgumentValueError",
    "UnsupportedArgumentError",
    "IncompleteSpecificationError",
    "UnsupportedPredictionTypeError",
    "EngineError",
    "EngineFitError",
    "EnginePredictError",
    "FitPersistenceError",
    # Registry
    "Mode",
    "PredictionType",
    "GeneralizedArgument",
    "ModelFamily",
    "Engine",
    "SpecRegistry",
    # Specification
    "ModelSpecification",
    "with_engine",
    "with_mode",
    "with_argument",
    "with_arguments",
    "translate",
    # Fitting
    "FitResult",
    "fit",
    "fit_xy",
    # Prediction
    "predict",
    "augment",
    # Tidying
    "tidy",
    "glance",
    # Engines
    "default_registry",
    "argument_table",
    "show_engines",
    # Persistence
    "save_fit",
    "load_fit",
]

# Version
__version__ = "0.1.0"
