"""Evaluation of linear regression models with repeated random splits."""

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import MIN_SCORE
from .exceptions import SingularMatrixError
from .regressors import MIN_TRAINING_SAMPLES, LinearRegression
from .results import EvaluationResult, Status

# Fewer rows than this cannot be split into meaningful train and test sets.
MIN_EVALUATION_SAMPLES = 4

RandomState = Union[None, int, np.random.Generator]


def r_squared(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Coefficient of determination of a set of predictions.

    R² = 1 - SS_res / SS_tot

    1.0 is a perfect fit, 0.0 is no better than predicting the mean and
    negative values are worse than the mean. When every true value is the
    same SS_tot is zero and 0.0 is returned.

    Args:
        y_true: True values
        y_pred: Predicted values

    Returns:
        r2: R² score
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    sum_s = np.sum((y_true - np.mean(y_true))**2)
    if sum_s == 0.0:
        return 0.0
    sum_e = np.sum((y_true - y_pred)**2)
    return float(1.0 - sum_e / sum_s)


def population_std(values: Sequence[float]) -> float:
    """Standard deviation dividing by N rather than N - 1."""
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def train_size(n_samples: int, test_size: float) -> int:
    """
    Number of rows used for training in a split of `n_samples` rows.

    (1 - test_size) * n_samples rounded to the nearest integer, with halves
    rounded up (0.5 * 5 gives 3), not to the nearest even number.
    """
    return int(np.floor(n_samples * (1 - test_size) + 0.5))


def random_split(
    samples: np.ndarray,
    targets: np.ndarray,
    test_size: float,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Split samples and targets into random train and test subsets.

    Every row lands in exactly one subset. The first
    `train_size(n, test_size)` rows of a random permutation are used for
    training.

    Args:
        samples: Feature matrix of shape (n_samples, n_features)
        targets: Target vector of shape (n_samples,)
        test_size: Proportion of rows to hold out (e.g. 0.2 for an 80/20 split)
        rng: Random generator used for the permutation

    Returns:
        Tuple of (train_samples, train_targets, test_samples, test_targets)
    """
    indices = rng.permutation(len(samples))
    n_train = train_size(len(indices), test_size)
    train, test = indices[:n_train], indices[n_train:]
    return samples[train], targets[train], samples[test], targets[test]


def evaluate(
    samples: np.ndarray,
    targets: np.ndarray,
    iterations: int,
    max_deviation: float,
    model: Optional[LinearRegression] = None,
    test_size: float = 0.2,
    min_score: float = MIN_SCORE,
    rng: RandomState = None,
    verbose: bool = False,
) -> EvaluationResult:
    """
    Score OLS on a dataset with R² over repeated random train/test splits.

    If `model` is given it is scored once against the whole dataset instead
    and `iterations` is ignored.

    Iterations whose training split gives a singular system are left out
    of the aggregate and reported in the result notices. If every
    iteration fails the `SingularMatrixError` is raised.

    Args:
        samples: Feature matrix of shape (n_samples, n_features)
        targets: Target vector of shape (n_samples,)
        iterations: Number of random splits to score
        max_deviation: Largest acceptable standard deviation of the scores
        model: Optional pre-trained model to score instead of refitting
        test_size: Proportion of rows held out in each split. Default: 0.2
        min_score: Mean score below which the result is flagged. Default: 0.7
        rng: Seed or `numpy.random.Generator` for the splits. Default: None
        verbose: Print progress messages. Default: False

    Returns:
        `EvaluationResult`
    """
    samples = np.asarray(samples, dtype=float)
    targets = np.asarray(targets, dtype=float)

    if len(samples) < MIN_EVALUATION_SAMPLES:
        return EvaluationResult(
            status=Status.NOT_ENOUGH_DATA,
            info=["There is not enough data to evaluate this model using the provided analysis interval."],
            score=0.0,
        )

    if model is not None:
        if verbose:
            print(f"Scoring trained model on {len(samples)} samples...")
        scores = [r_squared(targets, model.predict(samples))]
        return get_evaluation_result(scores, max_deviation, min_score)

    if iterations < 1:
        raise ValueError(f"iterations must be at least 1, got {iterations}.")

    n_train = train_size(len(samples), test_size)
    if n_train < MIN_TRAINING_SAMPLES or n_train >= len(samples):
        return EvaluationResult(
            status=Status.NOT_ENOUGH_DATA,
            info=[
                f"A test size of {test_size} splits {len(samples)} samples into {n_train} "
                f"training and {len(samples) - n_train} test samples. At least "
                f"{MIN_TRAINING_SAMPLES} training samples and 1 test sample are needed."
            ],
            score=0.0,
        )

    rng = np.random.default_rng(rng)
    scores: List[float] = []
    failures: List[str] = []

    for i in range(iterations):
        X_train, y_train, X_test, y_test = random_split(samples, targets, test_size, rng)
        try:
            regressor = LinearRegression().fit(X_train, y_train)
        except SingularMatrixError as e:
            if verbose:
                print(f"  Iteration {i + 1}/{iterations}: skipped ({e})")
            failures.append(str(e))
            if len(failures) == iterations:
                raise
            continue

        score = r_squared(y_test, regressor.predict(X_test))
        scores.append(score)
        if verbose:
            print(f"  Iteration {i + 1}/{iterations}: R² = {score:.4f}")

    result = get_evaluation_result(scores, max_deviation, min_score)
    if failures:
        result.info.insert(
            0,
            f"{len(failures)} of {iterations} evaluation iterations were skipped because "
            "the training split did not determine a unique solution.",
        )
    return result


def get_evaluation_result(
    scores: Sequence[float], max_deviation: float, min_score: float = MIN_SCORE
) -> EvaluationResult:
    """
    Aggregate per-iteration scores and apply the quality checks.

    Args:
        scores: R² of each completed iteration
        max_deviation: Largest acceptable standard deviation of the scores
        min_score: Mean score below which the result is flagged

    Returns:
        `EvaluationResult` with combined status flags
    """
    scores = [float(score) for score in scores]
    if len(scores) == 1:
        score, deviation = scores[0], 0.0
    else:
        score, deviation = float(np.mean(scores)), population_std(scores)

    result = EvaluationResult(score=score, scores=scores, deviation=deviation)

    if deviation > max_deviation:
        result.status |= Status.NOT_ENOUGH_DATA
        result.info.append(
            "The evaluation results varied too much. It is recommended that more data is "
            "gathered to ensure the model is valid. Evaluation results standard deviation = "
            f"{deviation}, maximum recommended standard deviation = {max_deviation}"
        )

    if score < min_score:
        result.status |= Status.LOW_SCORE
        result.info.append(
            "The evaluated model prediction accuracy is not very high, so some predictions "
            f"may not be accurate. Model R² score = {score}, minimum score = {min_score}"
        )

    return result
