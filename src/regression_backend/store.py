"""
Model persistence.

A trained model is stored as its coefficient vector in a single `.npy`
file inside a model directory. Files are read back with pickling disabled,
so only plain numeric arrays are ever accepted.
"""

import os
import shutil
from pathlib import Path
from typing import Union

import numpy as np

from .exceptions import CorruptModelError, ModelNotFoundError
from .regressors import LinearRegression

PathLike = Union[str, os.PathLike]

MODEL_FILENAME = "model.npy"


def get_model_filepath(model_dir: PathLike) -> Path:
    """Return the path of the model file inside `model_dir`."""
    return Path(model_dir) / MODEL_FILENAME


def save_model(model: LinearRegression, model_dir: PathLike, verbose: bool = False) -> Path:
    """
    Write a fitted model to `model_dir`, replacing any existing model.

    Args:
        model: Fitted `LinearRegression`
        model_dir: Directory to store the model in. Created if missing.
        verbose: Print progress messages. Default: False.

    Returns:
        Path of the written model file.
    """
    if model.get_params() is None:
        raise ValueError("Cannot save a model that has not been fitted.")

    path = get_model_filepath(model_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as fh:
        np.save(fh, np.asarray(model.get_params(), dtype=float), allow_pickle=False)

    if verbose:
        print(f"  Saved model to {path}")

    return path


def load_model(model_dir: PathLike) -> LinearRegression:
    """
    Load the model stored in `model_dir`.

    Raises:
        ModelNotFoundError: No model file exists.
        CorruptModelError: The file is not a valid coefficient vector.
    """
    path = get_model_filepath(model_dir)
    if not path.is_file():
        raise ModelNotFoundError(
            f"Model file {path} does not exist. The model must be trained "
            "before it can be used to make predictions."
        )
    return LinearRegression.from_params(_read_params(path))


def export_model(model_dir: PathLike) -> Path:
    """
    Return the directory holding an exportable model.

    The directory itself is the exported unit; nothing is copied.
    """
    path = get_model_filepath(model_dir)
    if not path.is_file():
        raise ModelNotFoundError(f"Cannot export model: {path} does not exist.")
    return Path(model_dir)


def import_model(import_dir: PathLike, model_dir: PathLike, verbose: bool = False) -> bool:
    """
    Copy a model from `import_dir` into `model_dir`.

    Unlike `load_model` this never raises for a missing or invalid source
    model; it returns False instead.

    Returns:
        True if the model was imported.
    """
    source = get_model_filepath(import_dir)
    if not source.is_file():
        if verbose:
            print(f"  No model to import at {source}")
        return False

    try:
        _read_params(source)
    except CorruptModelError as e:
        if verbose:
            print(f"  Warning: not importing {source}: {e}")
        return False

    target = get_model_filepath(model_dir)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(source.read_bytes())
    return True


def clear_model(model_dir: PathLike) -> None:
    """Delete a model directory and everything in it. Missing directories are ignored."""
    shutil.rmtree(model_dir, ignore_errors=True)


def _read_params(path: Path) -> np.ndarray:
    """Read and validate a stored coefficient vector."""
    try:
        with open(path, "rb") as fh:
            params = np.load(fh, allow_pickle=False)
    except (ValueError, OSError, EOFError) as e:
        raise CorruptModelError(f"Could not read model file {path}: {e}") from e

    if not isinstance(params, np.ndarray):
        raise CorruptModelError(f"Model file {path} does not contain a single array.")
    if params.ndim != 1 or params.size < 2:
        raise CorruptModelError(
            f"Model file {path} has coefficient shape {params.shape}, expected a vector."
        )
    if not np.issubdtype(params.dtype, np.floating):
        raise CorruptModelError(f"Model file {path} has non-float dtype {params.dtype}.")
    if not np.all(np.isfinite(params)):
        raise CorruptModelError(f"Model file {path} contains non-finite coefficients.")

    return params
