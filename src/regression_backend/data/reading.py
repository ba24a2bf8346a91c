"""
Dataset reading functions.

A dataset file has a two line metadata record followed by a column header
and the data rows:

    nfeatures,timesplitting
    3,upcoming_periodic
    feature_a,feature_b,feature_c,target
    1.0,0.5,2,71.5
    ...

Training datasets carry `nfeatures` feature columns followed by the target.
Prediction datasets carry a sample id followed by `nfeatures` feature columns.
Rows are streamed in chunks, parsed with `pandas.read_csv` and converted
with `pandas.to_numeric`; tokens that are not numeric (including empty ones
and bytes that are not valid UTF-8) are read as 0.0.
"""

import io
import os
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, List, TextIO, Tuple, Union

import numpy as np
import pandas as pd

from ..exceptions import MalformedDatasetError

DatasetSource = Union[str, os.PathLike, BinaryIO]

NFEATURES_FIELD = "nfeatures"

# Two metadata lines and the column header come before the data rows.
FIRST_DATA_LINE = 4


def extract_metadata(fh: TextIO) -> Dict[str, str]:
    """
    Read the metadata record from the top of a dataset.

    Consumes exactly two lines: the metadata field names and their values.

    Args:
        fh: Text file handle positioned at the start of the dataset.

    Returns:
        Dictionary of metadata field name to raw value.
    """
    lines = pd.Series(_take_lines(fh, 2), dtype=str)
    if len(lines) < 2 or (lines.str.strip() == "").any():
        raise MalformedDatasetError("Dataset is missing its metadata header.")

    n_names, n_values = _count_fields(lines)
    if n_names != n_values:
        raise MalformedDatasetError(
            f"Metadata header has {n_names} fields but {n_values} values."
        )

    try:
        header = pd.read_csv(
            io.StringIO("".join(lines)), nrows=1, dtype=str, keep_default_na=False
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise MalformedDatasetError(f"Could not parse metadata header: {e}") from e
    if len(header) != 1:
        raise MalformedDatasetError("Dataset is missing its metadata values.")

    metadata = {str(name).strip(): value for name, value in header.iloc[0].items()}
    get_nfeatures(metadata)
    return metadata


def get_nfeatures(metadata: Dict[str, str]) -> int:
    """Return the validated feature count from a metadata record."""
    if NFEATURES_FIELD not in metadata:
        raise MalformedDatasetError(f"Metadata is missing the '{NFEATURES_FIELD}' field.")
    raw = metadata[NFEATURES_FIELD].strip()
    try:
        nfeatures = int(raw)
    except ValueError:
        raise MalformedDatasetError(f"'{NFEATURES_FIELD}' is not an integer: {raw!r}") from None
    if nfeatures <= 0:
        raise MalformedDatasetError(f"'{NFEATURES_FIELD}' must be positive, got {nfeatures}.")
    return nfeatures


def read_training_dataset(
    source: DatasetSource, chunk_size: int = 10000, verbose: bool = False
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Read a supervised dataset for training or evaluation.

    Args:
        source: Path to the dataset, or a readable binary stream.
        chunk_size: Number of rows parsed at a time. Default: 10000.
        verbose: Print progress messages. Default: False.

    Returns:
        samples: Feature matrix of shape (n_samples, nfeatures)
        targets: Target vector of shape (n_samples,)
    """
    with _open_text(source) as fh:
        nfeatures = get_nfeatures(extract_metadata(fh))
        fh.readline()  # column header

        sample_chunks = []
        target_chunks = []
        for chunk in _read_rows(fh, nfeatures + 1, chunk_size):
            values = _to_float(chunk)
            sample_chunks.append(values[:, :nfeatures])
            target_chunks.append(values[:, nfeatures])

    if sample_chunks:
        samples = np.concatenate(sample_chunks)
        targets = np.concatenate(target_chunks)
    else:
        samples = np.empty((0, nfeatures))
        targets = np.empty(0)

    if verbose:
        print(f"  Loaded {len(samples)} samples with {nfeatures} features")

    return samples, targets


def read_prediction_dataset(
    source: DatasetSource, chunk_size: int = 10000, verbose: bool = False
) -> Tuple[List[str], np.ndarray]:
    """
    Read an unlabelled dataset for prediction.

    The first column is a sample identifier and is returned untouched.

    Args:
        source: Path to the dataset, or a readable binary stream.
        chunk_size: Number of rows parsed at a time. Default: 10000.
        verbose: Print progress messages. Default: False.

    Returns:
        sample_ids: Sample identifiers in file order
        samples: Feature matrix of shape (n_samples, nfeatures)
    """
    with _open_text(source) as fh:
        nfeatures = get_nfeatures(extract_metadata(fh))
        fh.readline()  # column header

        sample_ids: List[str] = []
        sample_chunks = []
        for chunk in _read_rows(fh, nfeatures + 1, chunk_size):
            sample_ids.extend(chunk.iloc[:, 0].tolist())
            sample_chunks.append(_to_float(chunk.iloc[:, 1:]))

    if sample_chunks:
        samples = np.concatenate(sample_chunks)
    else:
        samples = np.empty((0, nfeatures))

    if verbose:
        print(f"  Loaded {len(samples)} samples to estimate")

    return sample_ids, samples


def _read_rows(
    fh: TextIO, n_columns: int, chunk_size: int, first_line: int = FIRST_DATA_LINE
) -> Iterator[pd.DataFrame]:
    """
    Yield the data rows as string-valued DataFrames of at most `chunk_size` rows.

    Blank lines are skipped. Any row that does not have exactly `n_columns`
    comma separated fields is an error, so fields cannot contain a quoted
    comma.
    """
    line_number = first_line
    while True:
        block = _take_lines(fh, chunk_size)
        if not block:
            return

        lines = pd.Series(block, dtype=str)
        filled = lines.str.strip() != ""
        widths = _count_fields(lines)
        bad = filled & (widths != n_columns)
        if bad.any():
            position = int(np.flatnonzero(bad.to_numpy())[0])
            raise MalformedDatasetError(
                f"Line {line_number + position}: expected {n_columns} columns, "
                f"found {widths.iloc[position]}."
            )
        line_number += len(block)

        if filled.any():
            yield _parse_rows("".join(lines[filled]), n_columns)


def _parse_rows(text: str, n_columns: int) -> pd.DataFrame:
    """Parse validated data lines into a string-valued DataFrame."""
    try:
        chunk = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.ParserError as e:
        raise MalformedDatasetError(f"Could not parse dataset rows: {e}") from e

    if chunk.shape[1] != n_columns or chunk.isna().to_numpy().any():
        raise MalformedDatasetError(
            f"Expected {n_columns} columns in every row, parsed {chunk.shape[1]}."
        )
    return chunk


def _to_float(frame: pd.DataFrame) -> np.ndarray:
    """Coerce string columns to floats, mapping unparseable tokens to 0.0."""
    numeric = frame.apply(pd.to_numeric, errors="coerce")
    return numeric.fillna(0.0).to_numpy(dtype=float)


@contextmanager
def _open_text(source: DatasetSource) -> Iterator[TextIO]:
    """Open a path or wrap a binary stream as text, without closing caller streams."""
    if isinstance(source, (str, os.PathLike)):
        with open(Path(source), "r", encoding="utf-8", errors="replace", newline="") as fh:
            yield fh
        return

    wrapper = io.TextIOWrapper(source, encoding="utf-8", errors="replace", newline="")
    try:
        yield wrapper
    finally:
        wrapper.detach()


def _take_lines(fh: TextIO, n: int) -> List[str]:
    lines = []
    for _ in range(n):
        line = fh.readline()
        if not line:
            break
        lines.append(line)
    return lines


def _count_fields(lines: pd.Series) -> pd.Series:
    return lines.str.count(",") + 1
