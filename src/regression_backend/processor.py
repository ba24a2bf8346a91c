"""
Linear regression processor.

Trains, stores, applies and evaluates Ordinary Least Squares models for a
host analytics pipeline. Every call is self-contained: models are read from
and written to the model directory passed in, and nothing is cached between
calls.

OLS is solved in one pass over the whole training set, so training is capped
to the `max_training_samples` most recent rows (see `ProcessorConfig`).
"""

from pathlib import Path
from typing import Optional

import numpy as np

from . import store
from .config import ProcessorConfig
from .data.limiting import limit_samples
from .data.reading import DatasetSource, read_prediction_dataset, read_training_dataset
from .evaluation import MIN_EVALUATION_SAMPLES, evaluate
from .exceptions import MalformedDatasetError, UnsupportedOperationError
from .models.base import RegressionBackend
from .regressors import MIN_TRAINING_SAMPLES, LinearRegression
from .results import EstimateResult, EvaluationResult, Status, TrainingResult
from .store import PathLike

_CLASSIFICATION_UNSUPPORTED = (
    "The linear regression backend does not support classification. "
    "Use a classification backend such as logistic regression instead."
)


class LinearRegressionProcessor(RegressionBackend):
    """
    OLS regression backend.

    Attributes:
        config: `ProcessorConfig` with the training cap, evaluation split
            settings and verbosity.

    Example:
        >>> processor = LinearRegressionProcessor(ProcessorConfig(seed=0))
        >>> processor.train_regression("train.csv", "models/v1")
        >>> result = processor.estimate("predict.csv", "models/v1")
        >>> result.predictions[0]
        ('42', 71.3)
    """

    def __init__(self, config: Optional[ProcessorConfig] = None):
        self.config = config if config is not None else ProcessorConfig()

    def is_ready(self) -> bool:
        """The backend only needs numpy, so it is always ready."""
        return True

    def train_regression(self, dataset: DatasetSource, output_dir: PathLike) -> TrainingResult:
        """
        Fit a model on `dataset` and store it in `output_dir`.

        Each call retrains from scratch on the (limited) dataset.

        Returns:
            `TrainingResult` with status `NO_DATASET` if there are fewer than
            two rows, otherwise `OK`, with a notice if the training set was
            limited.
        """
        verbose = self.config.verbose
        if verbose:
            print(f"Reading training dataset {_describe(dataset)}...")
        samples, targets = read_training_dataset(
            dataset, chunk_size=self.config.chunk_size, verbose=verbose
        )

        if len(samples) < MIN_TRAINING_SAMPLES:
            return TrainingResult(
                status=Status.NO_DATASET,
                info=[f"At least {MIN_TRAINING_SAMPLES} samples are needed to train, got {len(samples)}."],
                total_samples=len(samples),
            )

        max_samples = self.config.max_training_samples
        samples, targets, limited, total = limit_samples(
            samples, targets, max_samples, verbose=verbose
        )

        if verbose:
            print(f"Fitting OLS model on {len(samples)} samples...")
        regressor = LinearRegression().fit(samples, targets)
        store.save_model(regressor, output_dir, verbose=verbose)

        result = TrainingResult(total_samples=total, used_samples=len(samples))
        if limited:
            result.info.append(
                f"Training was limited to the {max_samples} most recent records out of "
                f"{total} available. To adjust this limit, set max_training_samples "
                "in the processor configuration. Set to 0 to disable the limit."
            )
        return result

    def estimate(self, dataset: DatasetSource, output_dir: PathLike) -> EstimateResult:
        """
        Predict a value for every row of `dataset` with the stored model.

        Raises:
            ModelNotFoundError: No model has been trained in `output_dir`.
            CorruptModelError: The stored model cannot be read.
            MalformedDatasetError: The dataset and the model have a different
                number of features.
        """
        regressor = store.load_model(output_dir)

        verbose = self.config.verbose
        if verbose:
            print(f"Reading prediction dataset {_describe(dataset)}...")
        sample_ids, samples = read_prediction_dataset(
            dataset, chunk_size=self.config.chunk_size, verbose=verbose
        )

        _check_feature_count(regressor, samples)

        result = EstimateResult()
        if len(samples) == 0:
            return result

        predicted = regressor.predict(samples)
        for index, (sample_id, value) in enumerate(zip(sample_ids, predicted)):
            result.predictions[index] = (sample_id, float(value))
        return result

    def evaluate_regression(
        self,
        dataset: DatasetSource,
        max_deviation: float,
        iterations: int,
        trained_model_dir: Optional[PathLike] = None,
    ) -> EvaluationResult:
        """
        Evaluate OLS on `dataset` with repeated random 80/20 splits.

        If `trained_model_dir` is given the stored model is scored once on
        the whole dataset instead.
        """
        verbose = self.config.verbose
        if verbose:
            print(f"Reading evaluation dataset {_describe(dataset)}...")
        samples, targets = read_training_dataset(
            dataset, chunk_size=self.config.chunk_size, verbose=verbose
        )

        model = None
        if trained_model_dir and len(samples) >= MIN_EVALUATION_SAMPLES:
            model = store.load_model(trained_model_dir)
            _check_feature_count(model, samples)

        return evaluate(
            samples,
            targets,
            iterations,
            max_deviation,
            model=model,
            test_size=self.config.test_size,
            min_score=self.config.min_score,
            rng=self.config.seed,
            verbose=verbose,
        )

    def export(self, model_dir: PathLike) -> Path:
        return store.export_model(model_dir)

    def import_model(self, model_dir: PathLike, import_dir: PathLike) -> bool:
        return store.import_model(import_dir, model_dir, verbose=self.config.verbose)

    def clear_model(self, model_dir: PathLike) -> None:
        """Delete the stored model for one model version."""
        store.clear_model(model_dir)

    def delete_output_dir(self, output_dir: PathLike) -> None:
        """Delete the output directory of a model, including every version."""
        store.clear_model(output_dir)

    def train_classification(self, *args, **kwargs):
        raise UnsupportedOperationError(_CLASSIFICATION_UNSUPPORTED)

    def classify(self, *args, **kwargs):
        raise UnsupportedOperationError(_CLASSIFICATION_UNSUPPORTED)

    def evaluate_classification(self, *args, **kwargs):
        raise UnsupportedOperationError(_CLASSIFICATION_UNSUPPORTED)


def _describe(dataset: DatasetSource) -> str:
    if isinstance(dataset, (str, Path)):
        return str(dataset)
    return getattr(dataset, "name", "<stream>")


def _check_feature_count(model: LinearRegression, samples: np.ndarray) -> None:
    if samples.shape[1] != model.n_features:
        raise MalformedDatasetError(
            f"The model was trained with {model.n_features} features but the dataset "
            f"has {samples.shape[1]}."
        )
