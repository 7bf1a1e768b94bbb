"""Registry module - model families, engines and modes."""

from .types import (
    Mode,
    PredictionType,
    GeneralizedArgument,
    ModelFamily,
    Engine,
    positive_int,
    non_negative_number,
    unit_interval,
    proportion,
    at_least,
    one_of,
)
from .registry import SpecRegistry

__all__ = [
    "Mode",
    "PredictionType",
    "GeneralizedArgument",
    "ModelFamily",
    "Engine",
    "positive_int",
    "non_negative_number",
    "unit_interval",
    "proportion",
    "at_least",
    "one_of",
    "SpecRegistry",
]
