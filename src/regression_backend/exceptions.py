"""Exceptions raised by the regression backend."""


class RegressionBackendError(Exception):
    """Base exception for the package."""


class ConfigurationError(RegressionBackendError):
    """Raised when a configuration value cannot be parsed or is out of range."""


class MalformedDatasetError(RegressionBackendError, ValueError):
    """Raised when a dataset header, metadata record or row cannot be parsed."""


class InsufficientDataError(RegressionBackendError, ValueError):
    """Raised when there are too few samples to fit a model."""


class SingularMatrixError(RegressionBackendError):
    """Raised when the normal equations matrix X^T X is not invertible."""


class ModelNotFoundError(RegressionBackendError, FileNotFoundError):
    """Raised when no trained model exists in a model directory."""


class CorruptModelError(RegressionBackendError):
    """Raised when a stored model file does not contain a valid coefficient vector."""


class UnsupportedOperationError(RegressionBackendError, NotImplementedError):
    """Raised by classification entry points, which this backend does not provide."""
