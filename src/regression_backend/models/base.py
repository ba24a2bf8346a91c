"""Base interface for regression backends."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..data.reading import DatasetSource
from ..results import EstimateResult, EvaluationResult, TrainingResult
from ..store import PathLike


class RegressionBackend(ABC):
    """
    Base class for regression backends.

    A host calls these methods without knowing which backend it is talking
    to. Classification is deliberately not part of this interface.
    """

    @abstractmethod
    def train_regression(self, dataset: DatasetSource, output_dir: PathLike) -> TrainingResult:
        """
        Train a model on a supervised dataset and store it in `output_dir`.

        Args:
            dataset: Path or binary stream of a training dataset
            output_dir: Model directory to write to

        Returns:
            `TrainingResult`
        """
        pass

    @abstractmethod
    def estimate(self, dataset: DatasetSource, output_dir: PathLike) -> EstimateResult:
        """
        Predict a value for every sample with the model stored in `output_dir`.

        Args:
            dataset: Path or binary stream of a prediction dataset
            output_dir: Model directory to read from

        Returns:
            `EstimateResult`
        """
        pass

    @abstractmethod
    def evaluate_regression(
        self,
        dataset: DatasetSource,
        max_deviation: float,
        iterations: int,
        trained_model_dir: Optional[PathLike] = None,
    ) -> EvaluationResult:
        """
        Evaluate the backend on a supervised dataset.

        Args:
            dataset: Path or binary stream of a training dataset
            max_deviation: Largest acceptable standard deviation of the scores
            iterations: Number of random train/test splits
            trained_model_dir: Score this stored model instead of refitting.
                Default: None.

        Returns:
            `EvaluationResult`
        """
        pass

    @abstractmethod
    def export(self, model_dir: PathLike) -> Path:
        """Return the directory to export for the model in `model_dir`."""
        pass

    @abstractmethod
    def import_model(self, model_dir: PathLike, import_dir: PathLike) -> bool:
        """Import the model in `import_dir` into `model_dir`."""
        pass
