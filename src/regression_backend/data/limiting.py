"""
Training set size limiting.

OLS needs every training row in memory at once, so training is capped to
the most recent rows. Datasets are assumed to be ordered oldest first.
"""

from typing import Tuple

import numpy as np

from ..config import MAX_TRAINING_SAMPLES


def limit_samples(
    samples: np.ndarray,
    targets: np.ndarray,
    max_samples: int = MAX_TRAINING_SAMPLES,
    verbose: bool = False,
) -> Tuple[np.ndarray, np.ndarray, bool, int]:
    """
    Keep only the last `max_samples` rows of a training set.

    Args:
        samples: Feature matrix of shape (n_samples, n_features)
        targets: Target vector of shape (n_samples,)
        max_samples: Maximum number of rows to keep. 0 or negative disables
            the limit. Default: 20000.
        verbose: Print progress messages. Default: False.

    Returns:
        Tuple of (samples, targets, limited, total) where `limited` says
        whether rows were dropped and `total` is the row count before limiting.
    """
    total = len(samples)
    if len(targets) != total:
        raise ValueError(
            f"Dimensions in samples ({total}) and targets ({len(targets)}) do not match."
        )

    if max_samples <= 0 or total <= max_samples:
        return samples, targets, False, total

    if verbose:
        print(f"  Limiting training set to the {max_samples} most recent of {total} samples")

    return samples[-max_samples:], targets[-max_samples:], True, total
