"""Tests for immutable specifications and their functional updates."""

import dataclasses

import pytest

from modelspec import (
    InvalidArgumentValueError,
    ModeMismatchError,
    Mode,
    UnknownEngineError,
    UnsupportedModeError,
    with_argument,
    with_arguments,
    with_engine,
    with_mode,
)


class TestImmutability:
    """Setting engine, mode or arguments never mutates the original."""

    def test_frozen(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.mode = Mode.CLASSIFICATION

    def test_with_argument_returns_new_value(self, linear_registry):
        base = linear_registry.create_specification('linear_model')
        derived = with_argument(base, 'penalty', 0.1)
        assert base.arguments == ()
        assert derived.arguments == (('penalty', 0.1),)

    def test_derived_specs_coexist(self, linear_registry):
        base = with_engine(linear_registry.create_specification('linear_model'), 'regularized')
        light = with_argument(base, 'penalty', 0.01)
        heavy = with_argument(base, 'penalty', 10.0)
        assert light.args == {'penalty': 0.01}
        assert heavy.args == {'penalty': 10.0}
        assert base.args == {}

    def test_hashable(self, registry):
        spec = (
            registry.create_specification('rand_forest', mode='regression')
            .set_engine('sklearn')
            .set_args(trees=10)
        )
        same = (
            registry.create_specification('rand_forest', mode='regression')
            .set_engine('sklearn')
            .set_args(trees=10)
        )
        assert spec == same
        assert hash(spec) == hash(same)
        assert len({spec, same, spec.set_args(trees=20)}) == 2

    def test_with_engine_returns_new_value(self, linear_registry):
        base = linear_registry.create_specification('linear_model')
        bound = with_engine(base, 'regularized')
        assert base.engine is None
        assert bound.engine_name == 'regularized'


class TestWithEngine:
    """Tests for with_engine."""

    def test_unknown_engine(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        with pytest.raises(UnknownEngineError):
            with_engine(spec, 'glmnet')

    def test_engine_keeps_mode(self, registry):
        spec = registry.create_specification('rand_forest', mode='classification')
        spec = with_engine(spec, 'sklearn')
        assert spec.mode is Mode.CLASSIFICATION

    def test_engine_without_mode_raises_mode_mismatch(self, forest_only_regression):
        spec = forest_only_regression.create_specification('forest', mode='classification')
        with pytest.raises(ModeMismatchError):
            with_engine(spec, 'regression_only')

    def test_engine_arguments_keyword(self, linear_registry):
        spec = with_engine(
            linear_registry.create_specification('linear_model'),
            'regularized', standardize=False,
        )
        assert spec.engine_args == {'standardize': False}
        assert spec.args == {}

    def test_switching_engines_keeps_arguments(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        spec = with_engine(with_argument(spec, 'penalty', 0.1), 'regularized')
        spec = with_engine(spec, 'ordinary_least_squares')
        assert spec.args == {'penalty': 0.1}
        assert spec.engine_name == 'ordinary_least_squares'


@pytest.fixture
def forest_only_regression():
    from modelspec import SpecRegistry

    registry = SpecRegistry()
    registry.register_family('forest', ['trees'])
    registry.register_engine(
        'forest', 'regression_only', lambda x, y, **kw: None, modes=['regression'],
    )
    return registry


class TestWithMode:
    """Tests for with_mode."""

    def test_set_mode(self, forest_only_regression):
        spec = forest_only_regression.create_specification('forest')
        assert with_mode(spec, 'regression').mode is Mode.REGRESSION

    def test_unsupported_by_family(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        with pytest.raises(UnsupportedModeError):
            with_mode(spec, Mode.CLASSIFICATION)

    def test_mismatch_with_bound_engine(self, forest_only_regression):
        spec = forest_only_regression.create_specification('forest')
        spec = with_engine(spec, 'regression_only')
        with pytest.raises(ModeMismatchError):
            with_mode(spec, 'classification')


class TestWithArgument:
    """Tests for with_argument and the two argument buckets."""

    def test_generalized_argument_validated(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        with pytest.raises(InvalidArgumentValueError) as excinfo:
            with_argument(spec, 'penalty', -1)
        assert excinfo.value.name == 'penalty'
        assert excinfo.value.value == -1

    def test_mixture_outside_unit_interval(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        with pytest.raises(InvalidArgumentValueError):
            with_argument(spec, 'mixture', 1.5)

    def test_boolean_is_not_a_number(self, registry):
        spec = registry.create_specification('rand_forest', mode='regression')
        with pytest.raises(InvalidArgumentValueError):
            with_argument(spec, 'trees', True)

    def test_unknown_name_is_engine_specific(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        spec = with_argument(spec, 'nlambda', 'not validated')
        assert spec.args == {}
        assert spec.engine_args == {'nlambda': 'not validated'}

    def test_resetting_keeps_position(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        spec = with_arguments(spec, thresh=1e-7, maxit=100)
        spec = with_argument(spec, 'thresh', 1e-5)
        assert spec.engine_arguments == (('thresh', 1e-5), ('maxit', 100))

    def test_set_args_method_chain(self, registry):
        spec = (
            registry.create_specification('rand_forest')
            .set_mode('regression')
            .set_engine('sklearn', oob_score=True)
            .set_args(trees=25, min_n=4)
        )
        assert spec.args == {'trees': 25, 'min_n': 4}
        assert spec.engine_args == {'oob_score': True}

    @pytest.mark.parametrize('family,argument,value', [
        ('rand_forest', 'min_n', 1),
        ('decision_tree', 'min_n', 1.5),
        ('nearest_neighbor', 'dist_power', 0),
        ('nearest_neighbor', 'dist_power', 0.5),
    ])
    def test_values_engines_reject_are_invalid(self, registry, family, argument, value):
        spec = registry.create_specification(family, mode='regression')
        with pytest.raises(InvalidArgumentValueError) as excinfo:
            with_argument(spec, argument, value)
        assert excinfo.value.name == argument

    def test_smallest_valid_values(self, registry):
        spec = registry.create_specification('nearest_neighbor', mode='regression')
        assert spec.set_args(dist_power=1).args == {'dist_power': 1}
        spec = registry.create_specification('rand_forest', mode='regression')
        assert spec.set_args(min_n=2).args == {'min_n': 2}

    def test_validation_error_is_value_error(self, registry):
        spec = registry.create_specification('nearest_neighbor', mode='regression')
        with pytest.raises(ValueError):
            spec.set_args(weight_func='triangular')


class TestDisplay:
    """Tests for describe and repr."""

    def test_describe(self, registry):
        spec = (
            registry.create_specification('rand_forest', mode='regression')
            .set_engine('sklearn', n_jobs=1)
            .set_args(trees=100)
        )
        text = spec.describe()
        assert 'rand_forest Model Specification (regression)' in text
        assert 'trees = 100' in text
        assert 'n_jobs = 1' in text
        assert 'Computational engine: sklearn' in text

    def test_repr(self, linear_registry):
        spec = linear_registry.create_specification('linear_model')
        assert "family='linear_model'" in repr(spec)
        assert "engine=None" in repr(spec)
