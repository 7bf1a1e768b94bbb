"""Value types describing model families, engines and modes."""
from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple


class Mode(str, Enum):
    """Behaviour selector for a model."""

    REGRESSION = "regression"
    CLASSIFICATION = "classification"
    UNSPECIFIED = "unspecified"

    @classmethod
    def coerce(cls, value: "Mode | str") -> "Mode":
        """Accept either a ``Mode`` or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            available = [m.value for m in cls]
            raise ValueError(f"Unknown mode '{value}'. Available: {available}") from None


class PredictionType(str, Enum):
    """Kinds of prediction a fitted model can produce."""

    POINT = "point"
    PROBABILITY = "probability"
    INTERVAL = "interval"

    @classmethod
    def coerce(cls, value: "PredictionType | str") -> "PredictionType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            available = [t.value for t in cls]
            raise ValueError(
                f"Unknown prediction type '{value}'. Available: {available}"
            ) from None


# ---------------------------------------------------------------------------
# Validity predicates for generalized arguments
# ---------------------------------------------------------------------------

def positive_int(value: Any) -> bool:
    """True for integers >= 1 (booleans excluded)."""
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 1


def non_negative_number(value: Any) -> bool:
    """True for real numbers >= 0."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and value >= 0


def unit_interval(value: Any) -> bool:
    """True for real numbers in [0, 1]."""
    return non_negative_number(value) and value <= 1


def proportion(value: Any) -> bool:
    """True for real numbers in (0, 1]."""
    return non_negative_number(value) and 0 < value <= 1


class at_least:
    """Predicate accepting real numbers (or integers) >= ``minimum``."""

    def __init__(self, minimum: float, integer: bool = False):
        self.minimum = minimum
        self.integer = integer

    def __call__(self, value: Any) -> bool:
        kind = numbers.Integral if self.integer else numbers.Real
        return isinstance(value, kind) and not isinstance(value, bool) and value >= self.minimum

    def __repr__(self) -> str:
        return f"at_least({self.minimum!r}, integer={self.integer!r})"


class one_of:
    """Predicate accepting only the given choices.

    A class rather than a closure so that fitted results stay picklable.
    """

    def __init__(self, *choices: Any):
        self.choices = tuple(choices)

    def __call__(self, value: Any) -> bool:
        try:
            return value in self.choices
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"one_of{self.choices!r}"


@dataclass(frozen=True)
class GeneralizedArgument:
    """A family level parameter name, translated per engine.

    Attributes:
        name: Generalized name (e.g. ``"trees"``)
        default: Documented default, never injected into translation
        validator: Optional predicate the value must satisfy
        description: Human readable description
    """

    name: str
    default: Any = None
    validator: Optional[Callable[[Any], bool]] = None
    description: str = ""

    def is_valid(self, value: Any) -> bool:
        return self.validator is None or bool(self.validator(value))


@dataclass(frozen=True)
class ModelFamily:
    """A mathematical modeling approach, independent of implementation."""

    name: str
    arguments: Tuple[GeneralizedArgument, ...]
    modes: FrozenSet[Mode]
    description: str = ""

    @property
    def argument_names(self) -> Tuple[str, ...]:
        return tuple(arg.name for arg in self.arguments)

    def get_argument(self, name: str) -> Optional[GeneralizedArgument]:
        for arg in self.arguments:
            if arg.name == name:
                return arg
        return None

    def supports_mode(self, mode: Mode) -> bool:
        return mode is Mode.UNSPECIFIED or mode in self.modes


@dataclass(frozen=True, eq=False)
class Engine:
    """A concrete implementation of a family provided by an external library.

    Engines compare and hash by identity; a registry holds one instance per
    (family, name) pair.

    Attributes:
        name: Engine identifier (e.g. ``"sklearn"``)
        family: Name of the family this engine implements
        entry_points: Mode -> callable ``(x, y, **native_args) -> model``
        argument_map: Generalized argument name -> native argument name
        defaults: Native arguments always passed unless overridden
        extra_arguments: Documented engine-specific argument names
        intercept: Whether formula design matrices keep the intercept column
        interval: Optional ``(model, x, level) -> (lower, upper)`` hook
        tidy: Optional ``(fit_result) -> DataFrame`` hook
        glance: Optional ``(fit_result) -> dict`` hook
        description: Human readable description
    """

    name: str
    family: str
    entry_points: Mapping[Mode, Callable[..., Any]]
    argument_map: Mapping[str, str] = field(default_factory=dict)
    defaults: Mapping[str, Any] = field(default_factory=dict)
    extra_arguments: FrozenSet[str] = frozenset()
    intercept: bool = False
    interval: Optional[Callable[..., Any]] = None
    tidy: Optional[Callable[..., Any]] = None
    glance: Optional[Callable[..., Any]] = None
    description: str = ""

    @property
    def modes(self) -> FrozenSet[Mode]:
        return frozenset(self.entry_points)

    def supports_mode(self, mode: Mode) -> bool:
        return mode is Mode.UNSPECIFIED or mode in self.entry_points

    def native_name(self, argument: str) -> Optional[str]:
        return self.argument_map.get(argument)

    def entry_point(self, mode: Mode) -> Callable[..., Any]:
        return self.entry_points[mode]

    def prediction_types(self, mode: Mode) -> FrozenSet[PredictionType]:
        """Prediction types available for a fit in ``mode``."""
        if mode is Mode.CLASSIFICATION:
            return frozenset({PredictionType.POINT, PredictionType.PROBABILITY})
        if mode is Mode.REGRESSION:
            if self.interval is not None:
                return frozenset({PredictionType.POINT, PredictionType.INTERVAL})
            return frozenset({PredictionType.POINT})
        return frozenset()


def freeze_mapping(mapping: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Copy a mapping so later caller mutation cannot leak into the registry."""
    return dict(mapping or {})


def as_modes(modes: Iterable[Mode | str]) -> FrozenSet[Mode]:
    return frozenset(Mode.coerce(m) for m in modes)
