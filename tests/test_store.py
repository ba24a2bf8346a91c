import numpy as np
import pytest
from regression_backend import store
from regression_backend.exceptions import CorruptModelError, ModelNotFoundError
from regression_backend.regressors import LinearRegression


@pytest.fixture
def fitted_model():
    rng = np.random.default_rng(seed=3)
    X = rng.uniform(size=(30, 3))
    y = X @ np.array([2.0, -1.0, 0.25]) + 4.0 + rng.normal(scale=0.05, size=30)
    return LinearRegression().fit(X, y)


def _write_array(path, array, allow_pickle=False):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as fh:
        np.save(fh, array, allow_pickle=allow_pickle)


class TestSaveLoad:
    def test_round_trip_predictions(self, tmp_path, fitted_model):
        model_dir = tmp_path / "model" / "v1"
        path = store.save_model(fitted_model, model_dir)
        assert path == model_dir / store.MODEL_FILENAME

        loaded = store.load_model(model_dir)

        X_new = np.random.default_rng(seed=4).normal(size=(25, 3))
        np.testing.assert_array_equal(loaded.predict(X_new), fitted_model.predict(X_new))
        np.testing.assert_array_equal(loaded.get_params(), fitted_model.get_params())

    def test_save_overwrites(self, tmp_path, fitted_model):
        store.save_model(LinearRegression.from_params([1.0, 1.0, 1.0, 1.0]), tmp_path)
        store.save_model(fitted_model, tmp_path)
        np.testing.assert_array_equal(store.load_model(tmp_path).params, fitted_model.params)

    def test_save_unfitted(self, tmp_path):
        with pytest.raises(ValueError):
            store.save_model(LinearRegression(), tmp_path)

    def test_load_missing(self, tmp_path):
        with pytest.raises(ModelNotFoundError):
            store.load_model(tmp_path)

    def test_missing_model_is_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            store.load_model(tmp_path / "nowhere")

    def test_load_garbage(self, tmp_path):
        store.get_model_filepath(tmp_path).write_bytes(b"not a model at all")
        with pytest.raises(CorruptModelError):
            store.load_model(tmp_path)

    def test_load_empty_file(self, tmp_path):
        store.get_model_filepath(tmp_path).write_bytes(b"")
        with pytest.raises(CorruptModelError):
            store.load_model(tmp_path)

    def test_load_rejects_pickled_objects(self, tmp_path):
        _write_array(
            store.get_model_filepath(tmp_path),
            np.array([{"params": [1.0, 2.0]}], dtype=object),
            allow_pickle=True,
        )
        with pytest.raises(CorruptModelError):
            store.load_model(tmp_path)

    @pytest.mark.parametrize(
        "array",
        [
            np.ones((2, 2)),
            np.array([1.0]),
            np.array([1, 2, 3]),
            np.array([1.0, np.nan]),
        ],
    )
    def test_load_rejects_non_vectors(self, tmp_path, array):
        _write_array(store.get_model_filepath(tmp_path), array)
        with pytest.raises(CorruptModelError):
            store.load_model(tmp_path)


class TestExportImport:
    def test_export_returns_directory(self, tmp_path, fitted_model):
        store.save_model(fitted_model, tmp_path)
        assert store.export_model(tmp_path) == tmp_path

    def test_export_missing(self, tmp_path):
        with pytest.raises(ModelNotFoundError):
            store.export_model(tmp_path)

    def test_import_into_fresh_directory(self, tmp_path, fitted_model):
        source = tmp_path / "exported"
        target = tmp_path / "imported" / "v2"
        store.save_model(fitted_model, source)

        assert store.import_model(source, target) is True
        np.testing.assert_array_equal(store.load_model(target).params, fitted_model.params)

    def test_import_missing_source(self, tmp_path):
        target = tmp_path / "target"
        assert store.import_model(tmp_path / "empty", target) is False
        assert not target.exists()

    def test_import_corrupt_source(self, tmp_path):
        source = tmp_path / "source"
        source.mkdir()
        store.get_model_filepath(source).write_bytes(b"\x00garbage")
        target = tmp_path / "target"

        assert store.import_model(source, target) is False
        assert not store.get_model_filepath(target).exists()


class TestClearModel:
    def test_removes_directory(self, tmp_path, fitted_model):
        model_dir = tmp_path / "v1"
        store.save_model(fitted_model, model_dir)
        store.clear_model(model_dir)
        assert not model_dir.exists()

    def test_missing_directory(self, tmp_path):
        store.clear_model(tmp_path / "never-created")
