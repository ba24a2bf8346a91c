"""
Command line front end for the linear regression backend.

Usage:
    regression-backend train data/train.csv --output-dir models/v1
    regression-backend estimate data/predict.csv --output-dir models/v1 --predictions-out out.csv
    regression-backend evaluate data/train.csv --iterations 10 --max-deviation 0.05
"""

import argparse
from typing import List, Optional

import pandas as pd

from .config import (
    ACCEPTED_DEVIATION,
    EVALUATION_ITERATIONS,
    MAX_TRAINING_SAMPLES,
    ProcessorConfig,
)
from .exceptions import RegressionBackendError
from .processor import LinearRegressionProcessor
from .results import Status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Train, apply and evaluate OLS linear regression models"
    )
    parser.add_argument(
        "--max-samples",
        type=int,
        default=None,
        help=f"Maximum number of training samples, 0 for no limit (default: {MAX_TRAINING_SAMPLES})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for evaluation splits",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print progress messages",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    train = subparsers.add_parser("train", help="Train a model and store it")
    train.add_argument("dataset", type=str, help="Training dataset CSV")
    train.add_argument("--output-dir", type=str, required=True, help="Model directory")

    estimate = subparsers.add_parser("estimate", help="Predict values with a stored model")
    estimate.add_argument("dataset", type=str, help="Prediction dataset CSV")
    estimate.add_argument("--output-dir", type=str, required=True, help="Model directory")
    estimate.add_argument(
        "--predictions-out",
        type=str,
        default=None,
        help="Write predictions to this CSV file instead of printing them",
    )

    evaluate = subparsers.add_parser("evaluate", help="Evaluate OLS on a dataset")
    evaluate.add_argument("dataset", type=str, help="Training dataset CSV")
    evaluate.add_argument(
        "--max-deviation",
        type=float,
        default=ACCEPTED_DEVIATION,
        help=f"Maximum accepted standard deviation of scores (default: {ACCEPTED_DEVIATION})",
    )
    evaluate.add_argument(
        "--iterations",
        type=int,
        default=EVALUATION_ITERATIONS,
        help=f"Number of random train/test splits (default: {EVALUATION_ITERATIONS})",
    )
    evaluate.add_argument(
        "--trained-model-dir",
        type=str,
        default=None,
        help="Score this stored model instead of refitting",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ProcessorConfig.from_env(
            {
                "max_training_samples": args.max_samples,
                "seed": args.seed,
                "verbose": args.verbose,
            }
        )
        processor = LinearRegressionProcessor(config)

        if args.command == "train":
            result = processor.train_regression(args.dataset, args.output_dir)
            _print_result(result.status, result.info)
            if result.status == Status.OK:
                print(f"Trained on {result.used_samples} of {result.total_samples} samples")

        elif args.command == "estimate":
            result = processor.estimate(args.dataset, args.output_dir)
            _print_result(result.status, result.info)
            df = pd.DataFrame(
                [(sample_id, value) for sample_id, value in result.predictions.values()],
                columns=["sampleid", "prediction"],
            )
            if args.predictions_out:
                df.to_csv(args.predictions_out, index=False)
                print(f"Saved {len(df)} predictions to {args.predictions_out}")
            else:
                print(df.to_string(index=False))

        else:
            result = processor.evaluate_regression(
                args.dataset,
                args.max_deviation,
                args.iterations,
                trained_model_dir=args.trained_model_dir,
            )
            _print_result(result.status, result.info)
            print(f"R² = {result.score:.4f} (std {result.deviation:.4f})")

    except RegressionBackendError as e:
        print(f"Error: {e}")
        return 1

    return 0


def _print_result(status: Status, info: List[str]) -> None:
    print(f"Status: {_status_name(status)}")
    for notice in info:
        print(f"  - {notice}")


def _status_name(status: Status) -> str:
    if status == Status.OK:
        return "OK"
    return " | ".join(flag.name for flag in Status if flag and flag in status)


if __name__ == "__main__":
    raise SystemExit(main())
