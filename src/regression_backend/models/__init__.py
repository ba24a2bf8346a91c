"""Regression backend interfaces."""

from .base import RegressionBackend

__all__ = ["RegressionBackend"]
