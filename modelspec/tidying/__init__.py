"""Tidying module - tidy and glance summaries of fitted models."""

from .tidiers import tidy, glance, TIDY_COLUMNS, GLANCE_COLUMNS

__all__ = [
    "tidy",
    "glance",
    "TIDY_COLUMNS",
    "GLANCE_COLUMNS",
]
