"""Global configuration for modelspec.

Values default from environment variables so that applications can tune
them without code changes. Library code reads the module level ``CONFIG``
instance; tests may build their own ``ProjectConfig``.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


RANDOM_SEED: int = int(os.environ.get("MODELSPEC_RANDOM_SEED", "42"))
ROOT_DIR = Path(__file__).parent.parent

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ProjectConfig:
    """Project-wide configuration parameters.

    Attributes:
        random_seed: Seed passed as ``random_state`` to stochastic engines.
        interval_level: Default coverage for interval predictions.
        models_dir: Default directory for saved fits.
        log_level: Level applied by ``configure_logging``.
    """

    random_seed: int = RANDOM_SEED
    interval_level: float = float(os.environ.get("MODELSPEC_INTERVAL_LEVEL", "0.95"))
    models_dir: str = os.environ.get("MODELSPEC_MODELS_DIR", str(ROOT_DIR / "processed/models"))
    log_level: str = os.environ.get("MODELSPEC_LOG_LEVEL", "WARNING")


CONFIG = ProjectConfig()


def validate_config(cfg: ProjectConfig) -> None:
    """Validate configuration values and raise helpful errors.

    Args:
        cfg: ProjectConfig

    Raises:
        ValueError: If a value is out of range
    """
    if not 0.0 < cfg.interval_level < 1.0:
        raise ValueError(
            f"interval_level must be in (0, 1), got {cfg.interval_level}. "
            "Check MODELSPEC_INTERVAL_LEVEL."
        )
    if cfg.log_level.upper() not in _LOG_LEVELS:
        raise ValueError(
            f"Unknown log level '{cfg.log_level}'. Available: {list(_LOG_LEVELS)}"
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a basic handler to the ``modelspec`` logger.

    Intended for applications and notebooks; the library itself never
    configures handlers.

    Args:
        level: Log level name (defaults to ``CONFIG.log_level``)
    """
    level_name = (level or CONFIG.log_level).upper()
    logger = logging.getLogger("modelspec")
    logger.setLevel(level_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
