import pandas as pd
import pytest
from regression_backend.cli import build_parser, main
from regression_backend.config import MAX_TRAINING_SAMPLES


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("REGRESSION_BACKEND_MAX_TRAINING_SAMPLES", raising=False)
    monkeypatch.delenv("REGRESSION_BACKEND_SEED", raising=False)
    monkeypatch.delenv("REGRESSION_BACKEND_MIN_SCORE", raising=False)


class TestMain:
    def test_train_estimate_evaluate(self, write_dataset, linear_rows, tmp_path, capsys):
        train_path = write_dataset(linear_rows, 1)
        predict_path = write_dataset(
            [(101, 5.0), (102, 2.5)], 1, name="predict.csv", header=["sampleid", "x"]
        )
        model_dir = str(tmp_path / "model")
        out_path = tmp_path / "predictions.csv"

        assert main(["train", train_path, "--output-dir", model_dir]) == 0
        assert "Status: OK" in capsys.readouterr().out

        assert main(
            ["estimate", predict_path, "--output-dir", model_dir, "--predictions-out", str(out_path)]
        ) == 0
        df = pd.read_csv(out_path)
        assert list(df["sampleid"]) == [101, 102]
        assert df["prediction"].tolist() == pytest.approx([11.0, 6.0])

        assert main(["--seed", "1", "evaluate", train_path, "--iterations", "3"]) == 0
        out = capsys.readouterr().out
        assert "Status: OK" in out
        assert "R² = 1.0000" in out

    def test_limit_notice(self, write_dataset, linear_rows, tmp_path, capsys):
        code = main(
            ["--max-samples", "4", "train", write_dataset(linear_rows, 1), "--output-dir", str(tmp_path)]
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "4 most recent records out of 10" in out
        assert "Trained on 4 of 10 samples" in out

    def test_estimate_without_model(self, write_dataset, tmp_path, capsys):
        predict_path = write_dataset([("a", 1.0)], 1, header=["sampleid", "x"])
        assert main(["estimate", predict_path, "--output-dir", str(tmp_path / "none")]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_evaluate_combined_status(self, write_dataset, noise_rows, capsys):
        path = write_dataset(noise_rows[:20], 1)
        assert main(["--seed", "2", "evaluate", path, "--max-deviation", "0"]) == 0
        assert "Status: LOW_SCORE | NOT_ENOUGH_DATA" in capsys.readouterr().out

    def test_feature_count_mismatch(self, write_dataset, linear_rows, tmp_path, capsys):
        model_dir = str(tmp_path / "model")
        assert main(["train", write_dataset(linear_rows, 1), "--output-dir", model_dir]) == 0
        wide_train = write_dataset([(x, x, y) for x, y in linear_rows], 2, name="wide.csv")
        wide_predict = write_dataset(
            [("s1", 1.0, 2.0)], 2, name="wide_predict.csv", header=["sampleid", "a", "b"]
        )
        capsys.readouterr()

        assert main(["evaluate", wide_train, "--trained-model-dir", model_dir]) == 1
        assert "Error: The model was trained with 1 features" in capsys.readouterr().out

        assert main(["estimate", wide_predict, "--output-dir", model_dir]) == 1
        assert "Error: The model was trained with 1 features" in capsys.readouterr().out

    def test_invalid_utf8_dataset(self, tmp_path, capsys):
        path = tmp_path / "bytes.csv"
        path.write_bytes(b"nfeatures\n\xff\nx,y\n1,3\n")
        assert main(["train", str(path), "--output-dir", str(tmp_path / "model")]) == 1
        assert "Error:" in capsys.readouterr().out


class TestBuildParser:
    def test_max_samples_help_shows_default(self):
        action = next(a for a in build_parser()._actions if a.dest == "max_samples")
        assert action.help.endswith(f"(default: {MAX_TRAINING_SAMPLES})")
