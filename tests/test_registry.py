"""Tests for family and engine registration."""

import pytest

from modelspec import (
    DuplicateFamilyError,
    InvalidMappingError,
    Mode,
    SpecRegistry,
    UnknownEngineError,
    UnknownFamilyError,
    UnsupportedModeError,
)
from modelspec.registry import GeneralizedArgument, positive_int


def _noop(x, y, **kwargs):
    return None


@pytest.fixture
def forest_registry():
    registry = SpecRegistry()
    registry.register_family(
        'forest',
        [GeneralizedArgument('trees', validator=positive_int), 'mtry'],
        modes=['regression', 'classification'],
    )
    return registry


class TestRegisterFamily:
    """Tests for SpecRegistry.register_family."""

    def test_register_family(self, forest_registry):
        family = forest_registry.get_family('forest')
        assert family.argument_names == ('trees', 'mtry')
        assert family.modes == frozenset({Mode.REGRESSION, Mode.CLASSIFICATION})
        assert 'forest' in forest_registry
        assert forest_registry.list_families() == ['forest']

    def test_plain_string_arguments_are_unvalidated(self, forest_registry):
        mtry = forest_registry.get_family('forest').get_argument('mtry')
        assert mtry.validator is None
        assert mtry.is_valid('anything')

    def test_duplicate_family(self, forest_registry):
        with pytest.raises(DuplicateFamilyError):
            forest_registry.register_family('forest', ['trees'])

    def test_duplicate_argument_names(self):
        with pytest.raises(InvalidMappingError):
            SpecRegistry().register_family('f', ['a', 'a'])

    def test_family_needs_a_mode(self):
        with pytest.raises(UnsupportedModeError):
            SpecRegistry().register_family('f', ['a'], modes=[Mode.UNSPECIFIED])

    def test_unknown_family(self, forest_registry):
        with pytest.raises(UnknownFamilyError) as excinfo:
            forest_registry.get_family('boosted')
        assert 'forest' in str(excinfo.value)
        # Lookup errors are also KeyErrors
        assert isinstance(excinfo.value, KeyError)


class TestRegisterEngine:
    """Tests for SpecRegistry.register_engine."""

    def test_register_engine_single_callable(self, forest_registry):
        engine = forest_registry.register_engine(
            'forest', 'ranger', _noop,
            argument_map={'trees': 'num_trees'},
            modes=[Mode.REGRESSION],
        )
        assert engine.modes == frozenset({Mode.REGRESSION})
        assert engine.native_name('trees') == 'num_trees'
        assert engine.native_name('mtry') is None
        assert forest_registry.list_engines('forest') == ['ranger']

    def test_register_engine_mode_mapping(self, forest_registry):
        engine = forest_registry.register_engine(
            'forest', 'sk',
            {'regression': _noop, Mode.CLASSIFICATION: _noop},
        )
        assert engine.modes == frozenset({Mode.REGRESSION, Mode.CLASSIFICATION})

    def test_mode_mapping_filtered_by_modes(self, forest_registry):
        engine = forest_registry.register_engine(
            'forest', 'sk',
            {Mode.REGRESSION: _noop, Mode.CLASSIFICATION: _noop},
            modes=[Mode.CLASSIFICATION],
        )
        assert engine.modes == frozenset({Mode.CLASSIFICATION})

    def test_unknown_family(self, forest_registry):
        with pytest.raises(UnknownFamilyError):
            forest_registry.register_engine('boosted', 'xgb', _noop, modes=['regression'])

    def test_mapping_unknown_argument(self, forest_registry):
        with pytest.raises(InvalidMappingError) as excinfo:
            forest_registry.register_engine(
                'forest', 'ranger', _noop,
                argument_map={'num_trees': 'num.trees'},
                modes=['regression'],
            )
        assert 'num_trees' in str(excinfo.value)

    def test_single_callable_needs_modes(self, forest_registry):
        with pytest.raises(InvalidMappingError):
            forest_registry.register_engine('forest', 'ranger', _noop)

    def test_mode_not_supported_by_family(self):
        registry = SpecRegistry()
        registry.register_family('ols', ['penalty'], modes=['regression'])
        with pytest.raises(InvalidMappingError):
            registry.register_engine('ols', 'sk', _noop, modes=['classification'])

    def test_modes_without_entry_points(self, forest_registry):
        with pytest.raises(InvalidMappingError):
            forest_registry.register_engine(
                'forest', 'sk', {Mode.REGRESSION: _noop}, modes=['regression', 'classification'],
            )

    def test_duplicate_engine(self, forest_registry):
        forest_registry.register_engine('forest', 'ranger', _noop, modes=['regression'])
        with pytest.raises(InvalidMappingError):
            forest_registry.register_engine('forest', 'ranger', _noop, modes=['regression'])

    def test_argument_map_is_copied(self, forest_registry):
        mapping = {'trees': 'num_trees'}
        engine = forest_registry.register_engine(
            'forest', 'ranger', _noop, argument_map=mapping, modes=['regression'],
        )
        mapping['mtry'] = 'mtry'
        assert engine.native_name('mtry') is None

    def test_unknown_engine(self, forest_registry):
        forest_registry.register_engine('forest', 'ranger', _noop, modes=['regression'])
        with pytest.raises(UnknownEngineError) as excinfo:
            forest_registry.get_engine('forest', 'randomForest')
        assert 'ranger' in str(excinfo.value)
        assert isinstance(excinfo.value, KeyError)


class TestCreateSpecification:
    """Tests for SpecRegistry.create_specification."""

    def test_unspecified_mode(self, forest_registry):
        spec = forest_registry.create_specification('forest')
        assert spec.mode is Mode.UNSPECIFIED
        assert spec.engine is None
        assert spec.arguments == ()
        assert spec.registry is forest_registry

    def test_single_mode_family_selects_it(self):
        registry = SpecRegistry()
        registry.register_family('ols', ['penalty'], modes=['regression'])
        assert registry.create_specification('ols').mode is Mode.REGRESSION

    def test_mode_string(self, forest_registry):
        spec = forest_registry.create_specification('forest', mode='classification')
        assert spec.mode is Mode.CLASSIFICATION

    def test_unknown_family(self, forest_registry):
        with pytest.raises(UnknownFamilyError):
            forest_registry.create_specification('linear_model')

    def test_unsupported_mode(self):
        registry = SpecRegistry()
        registry.register_family('ols', ['penalty'], modes=['regression'])
        with pytest.raises(UnsupportedModeError):
            registry.create_specification('ols', mode=Mode.CLASSIFICATION)

    def test_unknown_mode_name(self, forest_registry):
        with pytest.raises(ValueError):
            forest_registry.create_specification('forest', mode='survival')

    def test_registries_are_independent(self, forest_registry):
        other = SpecRegistry()
        assert 'forest' not in other
        assert len(forest_registry) == 1
