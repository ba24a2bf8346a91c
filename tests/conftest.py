import numpy as np
import pytest


def dataset_text(rows, nfeatures, header=None):
    """Render rows in the dataset file format (metadata, column header, rows)."""
    if header is None:
        header = [f"feature_{i}" for i in range(nfeatures)] + ["target"]
    lines = [
        "nfeatures,timesplitting",
        f"{nfeatures},single_range",
        ",".join(header),
    ]
    lines += [",".join(str(value) for value in row) for row in rows]
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_dataset(tmp_path):
    """Return a function that writes a dataset file under `tmp_path`."""
    def _write(rows, nfeatures, name="dataset.csv", header=None):
        path = tmp_path / name
        path.write_text(dataset_text(rows, nfeatures, header=header))
        return str(path)
    return _write


@pytest.fixture
def linear_rows():
    """Ten rows of y = 2x + 1, oldest first."""
    return [(float(x), 2.0 * x + 1.0) for x in range(1, 11)]


@pytest.fixture
def noise_rows():
    """Targets drawn independently of the single feature."""
    rng = np.random.default_rng(seed=7)
    x = rng.uniform(size=200)
    y = rng.normal(size=200)
    return list(zip(x, y))
