"""Saving and loading fitted specifications.

A saved fit is a directory containing:
- fit.joblib: the serialized FitResult (model, specification, engine)
- manifest.json: format version, family, engine, mode, native arguments

Relative paths are resolved against ``CONFIG.models_dir``.
"""
from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import joblib

from .config import CONFIG
from .exceptions import FitPersistenceError
from .fitting.fit import FitResult


logger = logging.getLogger(__name__)

# Current version of the persistence format
PERSISTENCE_VERSION = "1.0.0"

FIT_FILE = "fit.joblib"
MANIFEST_FILE = "manifest.json"


def resolve_fit_path(path: Optional[Union[str, Path]] = None, fit: Optional[FitResult] = None) -> Path:
    """Directory a fit is saved to or loaded from.

    Absolute paths are used as given; relative paths live under
    ``CONFIG.models_dir``. Without a path, a timestamped directory named
    after the fit's family and engine is used.
    """
    base = Path(CONFIG.models_dir)
    if path is None:
        if fit is None:
            raise ValueError("A path is required to load a fit")
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return base / f"{fit.family}_{fit.engine_name}_{stamp}"
    path = Path(path)
    return path if path.is_absolute() else base / path


def _manifest(fit: FitResult) -> Dict[str, Any]:
    return {
        "version": PERSISTENCE_VERSION,
        "save_time": datetime.now().isoformat(),
        "family": fit.family,
        "engine": fit.engine_name,
        "mode": fit.mode.value,
        "interface": fit.interface,
        "native_arguments": fit.native_arguments,
        "predictors": list(map(str, fit.predictors)),
        "response": fit.response,
        "n_obs": fit.n_obs,
        "model_class": type(fit.model).__name__,
    }


def save_fit(
    fit: FitResult,
    path: Optional[Union[str, Path]] = None,
    overwrite: bool = False,
) -> Dict[str, Any]:
    """Save a fitted specification to a directory.

    Args:
        fit: FitResult to save
        path: Directory to save into, relative to ``CONFIG.models_dir``
            unless absolute (defaults to a timestamped directory there)
        overwrite: If True, replace an existing directory

    Returns:
        The manifest written alongside the model, plus the resolved ``path``

    Raises:
        ValueError: If path exists and overwrite=False
        FitPersistenceError: If saving fails
    """
    path = resolve_fit_path(path, fit)

    if path.exists():
        if not overwrite:
            raise ValueError(
                f"Fit directory already exists: {path}. "
                "Set overwrite=True to replace."
            )
        logger.warning(f"Overwriting existing fit at {path}")
        shutil.rmtree(path)

    path.mkdir(parents=True, exist_ok=True)
    manifest = _manifest(fit)

    try:
        joblib.dump(fit, path / FIT_FILE)
        with open(path / MANIFEST_FILE, "w") as f:
            json.dump(manifest, f, indent=2, default=str)
    except Exception as e:
        # Clean up on failure
        shutil.rmtree(path, ignore_errors=True)
        raise FitPersistenceError(f"Failed to save fit to {path}: {e}") from e

    logger.info(f"Saved {fit.family}/{fit.engine_name} fit to {path}")
    manifest["path"] = str(path)
    return manifest


def load_fit(path: Union[str, Path]) -> FitResult:
    """Load a fitted specification saved by ``save_fit``.

    Relative paths are resolved against ``CONFIG.models_dir``.

    Raises:
        FitPersistenceError: If files are missing, unreadable or inconsistent
    """
    path = resolve_fit_path(path)
    fit_path = path / FIT_FILE
    manifest_path = path / MANIFEST_FILE

    if not fit_path.exists() or not manifest_path.exists():
        raise FitPersistenceError(f"No saved fit found at {path}")

    try:
        with open(manifest_path) as f:
            manifest = json.load(f)
        fit = joblib.load(fit_path)
    except Exception as e:
        raise FitPersistenceError(f"Failed to load fit from {path}: {e}") from e

    if not isinstance(fit, FitResult):
        raise FitPersistenceError(
            f"{fit_path} does not contain a FitResult (got {type(fit).__name__})"
        )
    if manifest.get("version") != PERSISTENCE_VERSION:
        raise FitPersistenceError(
            f"Unsupported persistence version {manifest.get('version')!r}; "
            f"expected {PERSISTENCE_VERSION}"
        )
    if (manifest.get("family"), manifest.get("engine")) != (fit.family, fit.engine_name):
        raise FitPersistenceError(
            f"Manifest at {path} describes {manifest.get('family')}/{manifest.get('engine')} "
            f"but the saved fit is {fit.family}/{fit.engine_name}"
        )
    return fit
