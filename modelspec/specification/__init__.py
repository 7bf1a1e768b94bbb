"""Specification module - immutable model specifications and translation."""

from .spec import (
    ModelSpecification,
    with_engine,
    with_mode,
    with_argument,
    with_arguments,
    resolve_mode,
    translate,
)

__all__ = [
    "ModelSpecification",
    "with_engine",
    "with_mode",
    "with_argument",
    "with_arguments",
    "resolve_mode",
    "translate",
]
