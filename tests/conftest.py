"""
Shared pytest fixtures and configuration for all tests.
"""

import pytest
import warnings
import numpy as np
import pandas as pd

from modelspec import Mode, SpecRegistry, default_registry
from modelspec.registry import GeneralizedArgument, non_negative_number, unit_interval


# Configure pytest to handle warnings properly
def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Suppress specific warnings
    warnings.filterwarnings('ignore', category=UserWarning)
    warnings.filterwarnings('ignore', category=DeprecationWarning)
    warnings.filterwarnings('ignore', category=FutureWarning)
    warnings.filterwarnings('ignore', category=PendingDeprecationWarning)

    config.addinivalue_line("markers", "integration: end-to-end fits with real engines")
    config.addinivalue_line("markers", "unit: registry and specification logic only")
    config.addinivalue_line("markers", "serialization: saving and loading fits")


# ============================================================================
# Data fixtures
# ============================================================================

@pytest.fixture(scope='session')
def random_seed():
    """Fixed random seed for reproducible tests."""
    return 42


@pytest.fixture
def regression_data(random_seed):
    """Numeric response with two numeric predictors and a 3-level factor."""
    rng = np.random.default_rng(random_seed)

    n_samples = 60
    group = rng.choice(['a', 'b', 'c'], n_samples)
    x1 = rng.normal(0, 1, n_samples)
    x2 = rng.normal(5, 2, n_samples)
    effect = pd.Series(group).map({'a': 0.0, 'b': 1.5, 'c': -1.0}).to_numpy()

    return pd.DataFrame({
        'x1': x1,
        'x2': x2,
        'group': group,
        'y': 1.0 + 2.0 * x1 - 0.5 * x2 + effect + rng.normal(0, 0.3, n_samples),
    })


@pytest.fixture
def classification_data(random_seed):
    """Binary string labels driven mostly by x1."""
    rng = np.random.default_rng(random_seed)

    n_samples = 80
    x1 = rng.normal(0, 1, n_samples)
    x2 = rng.normal(0, 1, n_samples)
    score = 1.5 * x1 + 0.5 * x2 + rng.normal(0, 0.5, n_samples)

    return pd.DataFrame({
        'x1': x1,
        'x2': x2,
        'group': rng.choice(['u', 'v'], n_samples),
        'label': np.where(score > 0, 'yes', 'no'),
    })


@pytest.fixture
def multiclass_data(random_seed):
    """Three ordered classes cut from a noisy score."""
    rng = np.random.default_rng(random_seed)

    n_samples = 90
    x1 = rng.normal(0, 1, n_samples)
    x2 = rng.normal(0, 1, n_samples)
    score = x1 + 0.3 * x2 + rng.normal(0, 0.3, n_samples)
    label = pd.cut(score, [-np.inf, -0.5, 0.5, np.inf], labels=['low', 'mid', 'high'])

    return pd.DataFrame({'x1': x1, 'x2': x2, 'label': label.astype(str)})


@pytest.fixture
def rows_with_missing(regression_data):
    """First eight rows with missing values in rows 1 and 4 and a shuffled index."""
    new_data = regression_data.head(8).copy()
    new_data.loc[1, 'x1'] = np.nan
    new_data.loc[4, 'group'] = None
    new_data.index = [70, 71, 72, 73, 74, 75, 76, 77][::-1]
    return new_data


# ============================================================================
# Registry fixtures
# ============================================================================

class MeanModel:
    """Predicts the training mean and remembers the arguments it received."""

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.mean_ = None
        self.columns_ = None

    def fit(self, x, y):
        self.columns_ = list(x.columns)
        self.mean_ = float(np.mean(np.asarray(y, dtype=float)))
        return self

    def predict(self, x):
        return np.full(len(x), self.mean_)


class RecordingEngine:
    """Entry point that records every call before fitting a MeanModel."""

    def __init__(self):
        self.calls = []

    def __call__(self, x, y, **kwargs):
        self.calls.append(kwargs)
        return MeanModel(**kwargs).fit(x, y)


@pytest.fixture
def ols_engine():
    return RecordingEngine()


@pytest.fixture
def regularized_engine():
    return RecordingEngine()


@pytest.fixture
def linear_registry(ols_engine, regularized_engine):
    """Hermetic registry with one family and two recording engines.

    ``penalty`` maps only for ``regularized``.
    """
    registry = SpecRegistry()
    registry.register_family(
        'linear_model',
        [
            GeneralizedArgument('penalty', validator=non_negative_number),
            GeneralizedArgument('mixture', default=1.0, validator=unit_interval),
        ],
        modes=[Mode.REGRESSION],
    )
    registry.register_engine(
        'linear_model', 'ordinary_least_squares', ols_engine,
        argument_map={},
        modes=[Mode.REGRESSION],
    )
    registry.register_engine(
        'linear_model', 'regularized', regularized_engine,
        argument_map={'penalty': 'lambda', 'mixture': 'alpha'},
        modes=[Mode.REGRESSION],
    )
    return registry


@pytest.fixture
def registry():
    """Fresh registry with all built-in families and engines."""
    return default_registry()


# ============================================================================
# Custom assertions
# ============================================================================

class CustomAssertions:
    """Custom assertion helpers for tests."""

    @staticmethod
    def assert_rows_preserved(predictions, new_data):
        """Assert one prediction row per input row, same order and index."""
        assert len(predictions) == len(new_data)
        assert list(predictions.index) == list(new_data.index)

    @staticmethod
    def assert_valid_probabilities(predictions):
        """Assert probability rows are in [0, 1] and sum to one."""
        values = predictions.dropna().to_numpy(dtype=float)
        assert np.all((values >= 0) & (values <= 1))
        assert np.allclose(values.sum(axis=1), 1.0)


@pytest.fixture
def custom_assertions():
    """Provide custom assertions helper."""
    return CustomAssertions()


# ============================================================================
# Cleanup hooks
# ============================================================================

@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Automatically clean up after each test."""
    yield

    # Clean up any remaining warnings
    warnings.resetwarnings()
