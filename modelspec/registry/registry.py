"""Registry of model families and the engines that implement them."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..exceptions import (
    DuplicateFamilyError,
    InvalidMappingError,
    UnknownEngineError,
    UnknownFamilyError,
    UnsupportedModeError,
)
from .types import (
    Engine,
    GeneralizedArgument,
    Mode,
    ModelFamily,
    as_modes,
    freeze_mapping,
)

if TYPE_CHECKING:
    from ..specification.spec import ModelSpecification


logger = logging.getLogger(__name__)

EntryPoint = Union[Callable[..., Any], Mapping[Union[Mode, str], Callable[..., Any]]]


class SpecRegistry:
    """Central registry for model families and engines.

    Each registry is an explicit object: build one, register the families
    and engines you need, then create specifications from it. Registration
    is not thread safe; populate the registry before sharing it.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._families: Dict[str, ModelFamily] = {}
        self._engines: Dict[str, Dict[str, Engine]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_family(
        self,
        name: str,
        arguments: Sequence[Union[GeneralizedArgument, str]] = (),
        modes: Iterable[Union[Mode, str]] = (Mode.REGRESSION, Mode.CLASSIFICATION),
        description: str = "",
    ) -> ModelFamily:
        """Register a model family.

        Args:
            name: Family identifier (e.g. 'rand_forest')
            arguments: Generalized arguments, in translation order. Plain
                strings become unvalidated arguments.
            modes: Modes the family supports
            description: Human readable description

        Returns:
            The registered ModelFamily

        Raises:
            DuplicateFamilyError: If the name is already registered
            UnsupportedModeError: If no concrete mode is given
        """
        if name in self._families:
            raise DuplicateFamilyError(f"Model family '{name}' is already registered.")

        args = tuple(
            a if isinstance(a, GeneralizedArgument) else GeneralizedArgument(name=a)
            for a in arguments
        )
        names = [a.name for a in args]
        if len(set(names)) != len(names):
            raise InvalidMappingError(f"Duplicate generalized arguments for family '{name}': {names}")

        family_modes = as_modes(modes) - {Mode.UNSPECIFIED}
        if not family_modes:
            raise UnsupportedModeError(f"Family '{name}' must support at least one mode.")

        family = ModelFamily(
            name=name,
            arguments=args,
            modes=family_modes,
            description=description,
        )
        self._families[name] = family
        self._engines[name] = {}
        logger.debug(f"Registered family '{name}' with arguments {names}")
        return family

    def register_engine(
        self,
        family: str,
        engine: str,
        entry_point: EntryPoint,
        argument_map: Optional[Mapping[str, str]] = None,
        modes: Optional[Iterable[Union[Mode, str]]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        extra_arguments: Iterable[str] = (),
        intercept: bool = False,
        interval: Optional[Callable[..., Any]] = None,
        tidy: Optional[Callable[..., Any]] = None,
        glance: Optional[Callable[..., Any]] = None,
        description: str = "",
    ) -> Engine:
        """Register an engine for an existing family.

        Args:
            family: Family name
            engine: Engine identifier, unique within the family
            entry_point: Callable ``(x, y, **native_args) -> model`` used for
                every mode in ``modes``, or a mapping of mode -> callable
            argument_map: Generalized argument name -> native argument name
            modes: Modes the engine supports. Required with a single callable;
                defaults to the mapping keys otherwise.
            defaults: Native arguments always passed unless overridden
            extra_arguments: Documented engine-specific argument names
            intercept: Keep the intercept column in formula design matrices
            interval: Optional prediction interval hook
            tidy: Optional tidy hook
            glance: Optional glance hook
            description: Human readable description

        Returns:
            The registered Engine

        Raises:
            UnknownFamilyError: If the family is not registered
            InvalidMappingError: If the map names arguments unknown to the
                family, modes are missing or unsupported, or the engine name
                is taken
        """
        fam = self.get_family(family)
        argument_map = freeze_mapping(argument_map)

        unknown = [a for a in argument_map if fam.get_argument(a) is None]
        if unknown:
            raise InvalidMappingError(
                f"Engine '{engine}' maps arguments {unknown} not recognised by family "
                f"'{family}'. Recognised: {list(fam.argument_names)}"
            )

        if engine in self._engines[family]:
            raise InvalidMappingError(f"Engine '{engine}' is already registered for '{family}'.")

        entry_points = self._resolve_entry_points(fam, engine, entry_point, modes)

        registered = Engine(
            name=engine,
            family=family,
            entry_points=entry_points,
            argument_map=argument_map,
            defaults=freeze_mapping(defaults),
            extra_arguments=frozenset(extra_arguments),
            intercept=intercept,
            interval=interval,
            tidy=tidy,
            glance=glance,
            description=description,
        )
        self._engines[family][engine] = registered
        logger.debug(
            f"Registered engine '{engine}' for '{family}' "
            f"(modes={sorted(m.value for m in entry_points)}, map={argument_map})"
        )
        return registered

    @staticmethod
    def _resolve_entry_points(
        family: ModelFamily,
        engine: str,
        entry_point: EntryPoint,
        modes: Optional[Iterable[Union[Mode, str]]],
    ) -> Dict[Mode, Callable[..., Any]]:
        if callable(entry_point):
            if modes is None:
                raise InvalidMappingError(
                    f"Engine '{engine}' needs explicit modes when given a single entry point."
                )
            entry_points = {m: entry_point for m in as_modes(modes)}
        else:
            entry_points = {Mode.coerce(m): fn for m, fn in entry_point.items()}
            if modes is not None:
                wanted = as_modes(modes)
                missing = wanted - set(entry_points)
                if missing:
                    raise InvalidMappingError(
                        f"Engine '{engine}' lists modes {sorted(m.value for m in missing)} "
                        "without entry points."
                    )
                entry_points = {m: fn for m, fn in entry_points.items() if m in wanted}

        entry_points.pop(Mode.UNSPECIFIED, None)
        if not entry_points:
            raise InvalidMappingError(f"Engine '{engine}' must support at least one mode.")

        unsupported = [m.value for m in entry_points if m not in family.modes]
        if unsupported:
            raise InvalidMappingError(
                f"Engine '{engine}' declares modes {sorted(unsupported)} not supported by "
                f"family '{family.name}'. Supported: {sorted(m.value for m in family.modes)}"
            )
        for mode, fn in entry_points.items():
            if not callable(fn):
                raise InvalidMappingError(
                    f"Entry point for engine '{engine}' ({mode.value}) is not callable."
                )
        return entry_points

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_family(self, name: str) -> ModelFamily:
        """Get a registered family.

        Raises:
            UnknownFamilyError: If family name not found
        """
        if name not in self._families:
            raise UnknownFamilyError(
                f"Model family '{name}' not found. Available: {self.list_families()}"
            )
        return self._families[name]

    def get_engine(self, family: str, engine: str) -> Engine:
        """Get a registered engine.

        Raises:
            UnknownFamilyError: If family name not found
            UnknownEngineError: If engine not registered for the family
        """
        self.get_family(family)
        engines = self._engines[family]
        if engine not in engines:
            raise UnknownEngineError(
                f"Engine '{engine}' not found for '{family}'. Available: {list(engines)}"
            )
        return engines[engine]

    def list_families(self) -> List[str]:
        """List all registered family names."""
        return list(self._families.keys())

    def list_engines(self, family: str) -> List[str]:
        """List engine names registered for a family."""
        self.get_family(family)
        return list(self._engines[family].keys())

    def has_family(self, name: str) -> bool:
        return name in self._families

    def __contains__(self, name: object) -> bool:
        return name in self._families

    def __len__(self) -> int:
        return len(self._families)

    def __repr__(self) -> str:
        summary = {f: list(e) for f, e in self._engines.items()}
        return f"SpecRegistry({summary})"

    # ------------------------------------------------------------------
    # Specifications
    # ------------------------------------------------------------------

    def create_specification(
        self,
        family: str,
        mode: Union[Mode, str] = Mode.UNSPECIFIED,
    ) -> "ModelSpecification":
        """Create an empty specification for a family.

        A family with exactly one mode gets that mode when none is given.

        Raises:
            UnknownFamilyError: If family name not found
            UnsupportedModeError: If the mode is not supported by the family
        """
        fam = self.get_family(family)
        mode = Mode.coerce(mode)
        if not fam.supports_mode(mode):
            raise UnsupportedModeError(
                f"Mode '{mode.value}' is not supported by {family}. "
                f"Supported: {sorted(m.value for m in fam.modes)}"
            )
        if mode is Mode.UNSPECIFIED and len(fam.modes) == 1:
            mode = next(iter(fam.modes))
        from ..specification.spec import ModelSpecification

        return ModelSpecification(registry=self, family=fam, mode=mode)
