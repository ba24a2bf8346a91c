"""Ordinary Least Squares regression backend for analytics pipelines."""

__version__ = "0.1.0"

from .config import ProcessorConfig
from .processor import LinearRegressionProcessor
from .regressors import LinearRegression
from .results import EstimateResult, EvaluationResult, Status, TrainingResult

__all__ = [
    "ProcessorConfig",
    "LinearRegressionProcessor",
    "LinearRegression",

    # Results
    "Status",
    "TrainingResult",
    "EstimateResult",
    "EvaluationResult",
]
