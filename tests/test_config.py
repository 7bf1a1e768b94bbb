"""Tests for configuration and logging setup."""

import logging

import pytest

from modelspec import CONFIG, ProjectConfig, configure_logging, validate_config


class TestProjectConfig:
    """Tests for ProjectConfig and validate_config."""

    def test_defaults_are_valid(self):
        validate_config(ProjectConfig())

    def test_global_config(self):
        assert 0.0 < CONFIG.interval_level < 1.0
        assert isinstance(CONFIG.random_seed, int)

    @pytest.mark.parametrize('level', [0.0, 1.0, 1.5, -0.2])
    def test_invalid_interval_level(self, level):
        with pytest.raises(ValueError, match='interval_level'):
            validate_config(ProjectConfig(interval_level=level))

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match='log level'):
            validate_config(ProjectConfig(log_level='LOUD'))

    def test_log_level_case_insensitive(self):
        validate_config(ProjectConfig(log_level='debug'))


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger('modelspec')
        handlers = list(logger.handlers)
        level = logger.level
        yield
        logger.handlers = handlers
        logger.setLevel(level)

    def test_sets_level(self):
        configure_logging('debug')
        assert logging.getLogger('modelspec').level == logging.DEBUG

    def test_single_handler(self):
        logger = logging.getLogger('modelspec')
        logger.handlers = []
        configure_logging('INFO')
        configure_logging('INFO')
        assert len(logger.handlers) == 1

    def test_fit_logs_at_info(self, registry, regression_data, caplog):
        spec = registry.create_specification('linear_reg').set_engine('sklearn')
        with caplog.at_level(logging.INFO, logger='modelspec'):
            spec.fit(regression_data, 'y ~ x1')
        assert any('linear_reg' in record.getMessage() for record in caplog.records)
