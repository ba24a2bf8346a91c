"""Dataset reading and preparation."""

from .limiting import limit_samples
from .reading import extract_metadata, read_prediction_dataset, read_training_dataset

__all__ = [
    "extract_metadata",
    "read_training_dataset",
    "read_prediction_dataset",
    "limit_samples",
]
