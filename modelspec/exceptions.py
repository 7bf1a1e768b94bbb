"""Exceptions raised by the model specification layer.

Everything local (registration, specification building, translation) is
detected before an engine is called. Failures raised by an engine itself
are wrapped in ``EngineError`` subclasses with the active family, engine
and arguments attached, and chained to the original exception.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class ModelSpecError(Exception):
    """Base class for all model specification errors."""
    pass


class DuplicateFamilyError(ModelSpecError):
    """A model family with the same name is already registered."""
    pass


class UnknownFamilyError(ModelSpecError, KeyError):
    """The requested model family is not registered."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class UnknownEngineError(ModelSpecError, KeyError):
    """The requested engine is not registered for the family."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InvalidMappingError(ModelSpecError):
    """An engine registration references arguments or modes the family lacks."""
    pass


class UnsupportedModeError(ModelSpecError, ValueError):
    """The mode is not supported by the model family."""
    pass


class ModeMismatchError(ModelSpecError):
    """The bound engine does not support the specification's mode."""
    pass


class InvalidArgumentValueError(ModelSpecError, ValueError):
    """A generalized argument value failed validation."""

    def __init__(self, message: str, name: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.name = name
        self.value = value


class UnsupportedArgumentError(ModelSpecError):
    """A generalized argument has no native counterpart in the bound engine."""

    def __init__(self, message: str, name: Optional[str] = None, engine: Optional[str] = None):
        super().__init__(message)
        self.name = name
        self.engine = engine


class IncompleteSpecificationError(ModelSpecError):
    """The specification lacks an engine or a resolvable mode."""
    pass


class UnsupportedPredictionTypeError(ModelSpecError):
    """The fitted model cannot produce the requested prediction type."""
    pass


class EngineError(ModelSpecError):
    """An engine raised while fitting or predicting.

    Attributes:
        family: Model family name
        engine: Engine name
        mode: Mode value the engine ran in
        arguments: Native arguments passed to the engine
    """

    action = "run"

    def __init__(
        self,
        family: str,
        engine: str,
        mode: str,
        arguments: Optional[Dict[str, Any]] = None,
        original: Optional[BaseException] = None,
    ):
        self.family = family
        self.engine = engine
        self.mode = mode
        self.arguments = dict(arguments or {})
        self.original = original
        detail = f"{type(original).__name__}: {original}" if original is not None else "unknown error"
        super().__init__(
            f"Engine '{engine}' failed to {self.action} {family} ({mode}) "
            f"with arguments {self.arguments}: {detail}"
        )


class EngineFitError(EngineError):
    """The engine raised during fit."""

    action = "fit"


class EnginePredictError(EngineError):
    """The engine raised during predict."""

    action = "predict with"


class FitPersistenceError(ModelSpecError):
    """Saving or loading a fitted model failed."""
    pass
