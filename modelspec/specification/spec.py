"""Immutable model specifications and their functional updates.

A ``ModelSpecification`` ties a family to an optional engine and a mode,
and carries two separate argument buckets:

- ``arguments``: generalized arguments recognised by the family, validated
  when set and translated to native names at fit time.
- ``engine_arguments``: engine-specific pass-through arguments, never
  validated, forwarded under their own names.

Every update returns a new specification, so derived specifications can
share a common base safely.

Example:
    >>> spec = registry.create_specification("rand_forest", mode="regression")
    >>> spec = with_engine(spec, "sklearn")
    >>> spec = with_argument(spec, "trees", 500)
    >>> translate(spec)
    [('n_estimators', 500)]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..exceptions import (
    IncompleteSpecificationError,
    InvalidArgumentValueError,
    ModeMismatchError,
    UnsupportedArgumentError,
    UnsupportedModeError,
)
from ..registry.types import Engine, Mode, ModelFamily

if TYPE_CHECKING:
    import pandas as pd

    from ..fitting.fit import FitResult
    from ..registry.registry import SpecRegistry


logger = logging.getLogger(__name__)

ArgumentPairs = Tuple[Tuple[str, Any], ...]


def _set_pair(pairs: ArgumentPairs, name: str, value: Any) -> ArgumentPairs:
    """Replace ``name`` in place or append it, keeping insertion order."""
    updated = []
    found = False
    for key, old in pairs:
        if key == name:
            updated.append((key, value))
            found = True
        else:
            updated.append((key, old))
    if not found:
        updated.append((name, value))
    return tuple(updated)


@dataclass(frozen=True, repr=False)
class ModelSpecification:
    """What model to fit, with which engine, in which mode.

    Build instances with ``SpecRegistry.create_specification`` rather than
    directly, so the family is guaranteed to be registered.
    """

    registry: "SpecRegistry" = field(compare=False)
    family: ModelFamily
    mode: Mode = Mode.UNSPECIFIED
    engine: Optional[Engine] = None
    arguments: ArgumentPairs = ()
    engine_arguments: ArgumentPairs = ()

    # -- accessors --------------------------------------------------------

    @property
    def engine_name(self) -> Optional[str]:
        return self.engine.name if self.engine is not None else None

    @property
    def args(self) -> Dict[str, Any]:
        """Generalized arguments as a dict (a copy)."""
        return dict(self.arguments)

    @property
    def engine_args(self) -> Dict[str, Any]:
        """Engine-specific arguments as a dict (a copy)."""
        return dict(self.engine_arguments)

    # -- functional updates ----------------------------------------------

    def set_engine(self, engine: str, **engine_arguments: Any) -> "ModelSpecification":
        return with_engine(self, engine, **engine_arguments)

    def set_mode(self, mode: Mode | str) -> "ModelSpecification":
        return with_mode(self, mode)

    def set_args(self, **arguments: Any) -> "ModelSpecification":
        return with_arguments(self, **arguments)

    def translate(self) -> List[Tuple[str, Any]]:
        return translate(self)

    # -- fitting ----------------------------------------------------------

    def fit(self, data: "pd.DataFrame", formula: str) -> "FitResult":
        from ..fitting.fit import fit

        return fit(self, data, formula)

    def fit_xy(self, x: Any, y: Any) -> "FitResult":
        from ..fitting.fit import fit_xy

        return fit_xy(self, x, y)

    # -- display ----------------------------------------------------------

    def describe(self) -> str:
        """Multi-line human readable summary."""
        lines = [f"{self.family.name} Model Specification ({self.mode.value})"]
        if self.arguments:
            lines.append("")
            lines.append("Main Arguments:")
            lines.extend(f"  {name} = {value!r}" for name, value in self.arguments)
        if self.engine_arguments:
            lines.append("")
            lines.append("Engine-Specific Arguments:")
            lines.extend(f"  {name} = {value!r}" for name, value in self.engine_arguments)
        if self.engine is not None:
            lines.append("")
            lines.append(f"Computational engine: {self.engine.name}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ModelSpecification(family={self.family.name!r}, mode={self.mode.value!r}, "
            f"engine={self.engine_name!r}, arguments={dict(self.arguments)!r}, "
            f"engine_arguments={dict(self.engine_arguments)!r})"
        )


def with_engine(
    spec: ModelSpecification,
    engine: str,
    **engine_arguments: Any,
) -> ModelSpecification:
    """Bind an engine to a specification.

    Args:
        spec: Specification to derive from
        engine: Engine name registered for the spec's family
        **engine_arguments: Engine-specific pass-through arguments

    Returns:
        New specification with the engine bound

    Raises:
        UnknownEngineError: If the engine is not registered for the family
        ModeMismatchError: If the engine does not support the spec's mode
    """
    bound = spec.registry.get_engine(spec.family.name, engine)
    if not bound.supports_mode(spec.mode):
        supported = sorted(m.value for m in bound.modes)
        raise ModeMismatchError(
            f"Engine '{engine}' for {spec.family.name} does not support mode "
            f"'{spec.mode.value}'. Supported: {supported}"
        )
    updated = replace(spec, engine=bound)
    for name, value in engine_arguments.items():
        updated = replace(updated, engine_arguments=_set_pair(updated.engine_arguments, name, value))
    return updated


def with_mode(spec: ModelSpecification, mode: Mode | str) -> ModelSpecification:
    """Select the mode of a specification.

    Raises:
        UnsupportedModeError: If the family does not support the mode
        ModeMismatchError: If the bound engine does not support the mode
    """
    mode = Mode.coerce(mode)
    if not spec.family.supports_mode(mode):
        supported = sorted(m.value for m in spec.family.modes)
        raise UnsupportedModeError(
            f"Mode '{mode.value}' is not supported by {spec.family.name}. "
            f"Supported: {supported}"
        )
    if spec.engine is not None and not spec.engine.supports_mode(mode):
        supported = sorted(m.value for m in spec.engine.modes)
        raise ModeMismatchError(
            f"Engine '{spec.engine.name}' for {spec.family.name} does not support mode "
            f"'{mode.value}'. Supported: {supported}"
        )
    return replace(spec, mode=mode)


def with_argument(spec: ModelSpecification, name: str, value: Any) -> ModelSpecification:
    """Set one argument on a specification.

    Names recognised by the family are validated and stored as generalized
    arguments; any other name is stored as an engine-specific argument.

    Raises:
        InvalidArgumentValueError: If a generalized argument fails validation
    """
    argument = spec.family.get_argument(name)
    if argument is None:
        logger.debug(f"Storing '{name}' as engine-specific argument for {spec.family.name}")
        return replace(spec, engine_arguments=_set_pair(spec.engine_arguments, name, value))

    if not argument.is_valid(value):
        raise InvalidArgumentValueError(
            f"Invalid value {value!r} for argument '{name}' of {spec.family.name}"
            + (f" ({argument.description})" if argument.description else ""),
            name=name,
            value=value,
        )
    return replace(spec, arguments=_set_pair(spec.arguments, name, value))


def with_arguments(spec: ModelSpecification, **arguments: Any) -> ModelSpecification:
    """Set several arguments, in keyword order."""
    for name, value in arguments.items():
        spec = with_argument(spec, name, value)
    return spec


def resolve_mode(spec: ModelSpecification) -> Mode:
    """Return the concrete mode a fit would run in.

    Raises:
        IncompleteSpecificationError: If no engine is bound or the mode is
            ambiguous
    """
    if spec.engine is None:
        raise IncompleteSpecificationError(
            f"No engine set for {spec.family.name}. "
            f"Available: {spec.registry.list_engines(spec.family.name)}"
        )
    if spec.mode is not Mode.UNSPECIFIED:
        return spec.mode
    if len(spec.engine.modes) == 1:
        return next(iter(spec.engine.modes))
    raise IncompleteSpecificationError(
        f"Mode is unspecified for {spec.family.name} with engine '{spec.engine.name}'. "
        f"Choose one of {sorted(m.value for m in spec.engine.modes)}"
    )


def translate(spec: ModelSpecification) -> List[Tuple[str, Any]]:
    """Map a specification's arguments onto the bound engine's native names.

    Generalized arguments come first, in family declaration order, followed
    by engine-specific arguments in the order they were set.

    Returns:
        List of (native_name, value) pairs

    Raises:
        IncompleteSpecificationError: If no engine is bound
        UnsupportedArgumentError: If the engine has no native name for a
            generalized argument that is set
        InvalidArgumentValueError: If an engine-specific argument collides
            with a translated native name
    """
    if spec.engine is None:
        raise IncompleteSpecificationError(
            f"Cannot translate {spec.family.name}: no engine set. "
            f"Available: {spec.registry.list_engines(spec.family.name)}"
        )
    engine = spec.engine
    values = dict(spec.arguments)

    translated: List[Tuple[str, Any]] = []
    for argument in spec.family.arguments:
        if argument.name not in values:
            continue
        native = engine.native_name(argument.name)
        if native is None:
            raise UnsupportedArgumentError(
                f"Argument '{argument.name}' of {spec.family.name} is not supported by "
                f"engine '{engine.name}'. Supported: {sorted(engine.argument_map)}",
                name=argument.name,
                engine=engine.name,
            )
        translated.append((native, values[argument.name]))

    native_names = {name for name, _ in translated}
    for name, value in spec.engine_arguments:
        if name in native_names:
            raise InvalidArgumentValueError(
                f"Engine-specific argument '{name}' conflicts with a translated "
                f"argument of {spec.family.name} for engine '{engine.name}'",
                name=name,
                value=value,
            )
        translated.append((name, value))
    return translated
